"""Summary figures and a coloured terminal picture of an allocator's heap."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TextIO

from .allocator import Allocator, BlockHeader

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"

COLOR_WHITE = "\033[38;5;223m"
COLOR_GOLD = "\033[38;5;214m"
COLOR_GRAY = "\033[38;5;245m"
COLOR_CORAL = "\033[38;5;167m"
COLOR_GREEN = "\033[38;5;142m"
COLOR_LIGHT_GREY = "\033[38;5;250m"

COLOR_ALLOC = COLOR_CORAL
COLOR_FREE = COLOR_GREEN
COLOR_TITLE = COLOR_GOLD + BOLD
COLOR_BORDER = COLOR_GRAY
COLOR_ADDR = COLOR_LIGHT_GREY

BLOCK_FULL = "█"
BLOCK_EMPTY = "░"
BLOCK_ALLOC = "█"

SEP = "│"
BOX_TL = "╭"
BOX_TR = "╮"
BOX_BL = "╰"
BOX_BR = "╯"
BOX_H = "─"
BOX_V = "│"
BOX_LT = "├"
BOX_RT = "┤"

TITLE = " HEAP "
MIN_FRAME_WIDTH = 80
EMPTY_HEAP_MESSAGE = "heap is empty\n"


@dataclass(frozen=True)
class HeapStats:
    """Totals over the blocks of a heap."""

    block_count: int
    total_size: int
    free_size: int
    free_blocks: int
    largest_free: int

    @property
    def used_size(self) -> int:
        return self.total_size - self.free_size

    @property
    def used_blocks(self) -> int:
        return self.block_count - self.free_blocks

    @property
    def fragmentation(self) -> int:
        """External fragmentation in percent: 0 when all free memory is one block."""
        if self.free_size == 0:
            return 0
        return 100 - (self.largest_free * 100) // self.free_size

    @property
    def summary(self) -> str:
        """The one-line plain-text summary."""
        return (
            f"  Blocks: {self.block_count}"
            f"  Used: {self.used_size}b ({self.used_blocks} blocks)"
            f"  Free: {self.free_size}b ({self.free_blocks} blocks)"
            f"  Fragmentation: {self.fragmentation}%"
        )


def collect_stats(blocks: Iterable[BlockHeader]) -> HeapStats:
    """Add up sizes and free space over ``blocks``."""
    block_count = total_size = free_size = free_blocks = largest_free = 0
    for block in blocks:
        block_count += 1
        total_size += block.size
        if block.is_free:
            free_size += block.size
            free_blocks += 1
            largest_free = max(largest_free, block.size)
    return HeapStats(block_count, total_size, free_size, free_blocks, largest_free)


def _border(text: str) -> str:
    return f"{COLOR_BORDER}{text}{RESET}"


def _rule(left: str, width: int, right: str) -> str:
    return _border(left) + _border(BOX_H) * width + _border(right) + "\n"


def _bar_rows(blocks: list[BlockHeader], bar_width: int) -> Iterable[str]:
    per_row = max(1, (bar_width - 1) // 2)
    for start in range(0, len(blocks), per_row):
        row = blocks[start:start + per_row]
        row_total = sum(block.size for block in row)
        avail = max(bar_width - len(row) - 1, len(row))
        used_cols = 0
        parts = [" "]
        for block in row:
            width = max(1, (block.size * avail) // row_total) if row_total > 0 else 1
            if used_cols + width > avail:
                width = avail - used_cols
            width = max(width, 1)
            colour = COLOR_FREE if block.is_free else COLOR_ALLOC
            parts.append(SEP + f"{colour}{BLOCK_ALLOC}{RESET}" * width)
            used_cols += width
        parts.append(SEP + "\n")
        yield "".join(parts)


def render_stats(allocator: Allocator) -> str:
    """Draw the heap of ``allocator`` as a framed bar, a block table and totals."""
    blocks = allocator.blocks()
    if not blocks:
        return EMPTY_HEAP_MESSAGE
    stats = collect_stats(blocks)

    frame_width = max(len(stats.summary), MIN_FRAME_WIDTH, len(TITLE) + 4)
    bar_width = frame_width - 2

    remaining = frame_width - len(TITLE)
    left = remaining // 2
    right = remaining - left
    out = [
        _border(BOX_TL)
        + _border(BOX_H) * left
        + _border(TITLE)
        + _border(BOX_H) * right
        + _border(BOX_TR)
        + "\n"
    ]

    for row in _bar_rows(blocks, bar_width):
        out.append(row)
        out.append(_rule(BOX_LT, frame_width, BOX_RT))

    out.append(
        f"{COLOR_GOLD}  {'Block':<6} {'Address':<18} {'Size (B)':<10} {'Status':<8}\n{RESET}"
    )
    for number, block in enumerate(blocks):
        status_color = COLOR_FREE if block.is_free else COLOR_ALLOC
        status = "FREE" if block.is_free else "USED"
        address = f"0x{block.data_address:x}"
        out.append(
            f"{COLOR_ADDR}  {number:<6} {address:<18} {block.size:<10} {RESET}"
            f"{status_color}{status:<8}{RESET}\n"
        )

    out.append("\n")
    out.append(
        f"{COLOR_GOLD}  Blocks: {COLOR_WHITE}{stats.block_count}{COLOR_GOLD}"
        f"  Used: {COLOR_CORAL}{stats.used_size}b ({stats.used_blocks} blocks){COLOR_GOLD}"
        f"  Free: {COLOR_GREEN}{stats.free_size}b ({stats.free_blocks} blocks){COLOR_GOLD}"
        f"  Fragmentation: {COLOR_WHITE}{stats.fragmentation}%\n{RESET}"
    )
    out.append(_rule(BOX_BL, frame_width, BOX_BR))
    return "".join(out)


def print_stats(allocator: Allocator, file: TextIO | None = None) -> None:
    """Write the heap picture of ``allocator`` to ``file`` (standard output by default)."""
    stream = file if file is not None else sys.stdout
    stream.write(render_stats(allocator))