"""A first-fit / best-fit block allocator built on top of a bump arena.

Every block carries a header of ``HEADER_SIZE`` bytes placed just before its
data, so a pointer is the address of the first data byte.  All blocks taken
from the arena live in one ordered list that holds both used and free blocks.
Requests above ``MMAP_THRESHOLD`` bytes may be served from separately mapped
regions that never enter that list.
"""

from __future__ import annotations

from dataclasses import dataclass

from .bump import BumpArena, OutOfMemory

ALIGNMENT = 8
HEADER_SIZE = 24
MIN_SPLIT_ALLOWED = 4
MMAP_THRESHOLD = 4000
SIZE_MAX = 2**64 - 1
PAGE_SIZE = 4096
MMAP_BASE = 1 << 47


def align(size: int) -> int:
    """Round ``size`` up to the next multiple of the alignment."""
    return (size + ALIGNMENT - 1) & ~(ALIGNMENT - 1)


@dataclass(eq=False)
class BlockHeader:
    """Bookkeeping for one block; ``address`` is where the header starts."""

    address: int
    size: int
    is_free: bool = False
    is_mmap: bool = False

    @property
    def data_address(self) -> int:
        """Address of the first data byte, the pointer handed to callers."""
        return self.address + HEADER_SIZE


class Allocator:
    """Heap allocator with splitting, coalescing and optional mapped regions."""

    def __init__(self, arena: BumpArena | None = None, use_mmap: bool = True) -> None:
        self.arena = arena if arena is not None else BumpArena()
        self.use_mmap = use_mmap
        self._blocks: list[BlockHeader] = []
        self._mapped: dict[int, tuple[BlockHeader, bytearray]] = {}
        self._next_map = MMAP_BASE

    # allocation -----------------------------------------------------------

    def malloc(self, size: int) -> int:
        """Allocate ``size`` bytes using the first free block that fits."""
        size = self._prepare(size)
        if self.use_mmap and size > MMAP_THRESHOLD:
            return self._map(size)
        for index, block in enumerate(self._blocks):
            if block.is_free and block.size >= size:
                return self._claim(index, size)
        return self._extend(size)

    def malloc_best_fit(self, size: int) -> int:
        """Allocate ``size`` bytes using the smallest free block that fits.

        Once any block exists, the arena is not grown: if no free block is
        large enough, :class:`OutOfMemory` is raised.
        """
        size = self._prepare(size)
        if self.use_mmap and size > MMAP_THRESHOLD:
            return self._map(size)
        if not self._blocks:
            return self._extend(size)
        candidates = [
            (block.size, index)
            for index, block in enumerate(self._blocks)
            if block.is_free and block.size >= size
        ]
        if not candidates:
            raise OutOfMemory(f"no free block can hold {size} bytes")
        _, index = min(candidates)
        return self._claim(index, size)

    def free(self, ptr: int | None) -> None:
        """Release the block at ``ptr`` and merge neighbouring free blocks."""
        if ptr is None:
            return
        if ptr in self._mapped:
            del self._mapped[ptr]
            return
        header = self._find(ptr)
        if header is None:
            raise ValueError(f"no allocated block at address {ptr}")
        header.is_free = True
        self._coalesce()

    def realloc(self, ptr: int | None, new_size: int) -> int:
        """Grow the block at ``ptr`` to ``new_size`` bytes, keeping its data."""
        if new_size == 0:
            raise ValueError("new size must be positive")
        if ptr is None:
            return self.malloc(new_size)
        old = self.header(ptr)
        if old.size >= new_size:
            return ptr
        data = self.read(ptr, old.size)
        new_ptr = self.malloc(new_size)
        self.write(new_ptr, data)
        self.free(ptr)
        return new_ptr

    def calloc(self, n: int, size: int) -> int:
        """Allocate ``n`` objects of ``size`` bytes, all set to zero."""
        if n < 0 or size < 0:
            raise ValueError("count and size must not be negative")
        if n != 0 and size > SIZE_MAX // n:
            raise OverflowError(f"{n} * {size} bytes exceeds the address space")
        total = n * size
        ptr = self.malloc(total)
        self.write(ptr, bytes(total))
        return ptr

    def reset(self) -> None:
        """Mark every block free and merge them all into the first one."""
        if not self._blocks:
            return
        first, *rest = self._blocks
        first.is_free = True
        first.size += sum(HEADER_SIZE + block.size for block in rest)
        self._blocks = [first]

    # inspection and memory access ----------------------------------------

    def header(self, ptr: int) -> BlockHeader:
        """Return the header of the live block whose data starts at ``ptr``."""
        mapped = self._mapped.get(ptr)
        if mapped is not None:
            return mapped[0]
        header = self._find(ptr)
        if header is None:
            raise ValueError(f"no block at address {ptr}")
        return header

    def blocks(self) -> list[BlockHeader]:
        """Blocks taken from the arena, in list order; mapped ones are excluded."""
        return list(self._blocks)

    def read(self, ptr: int, length: int) -> bytes:
        """Return ``length`` bytes from the start of the block at ``ptr``."""
        header = self._checked(ptr, length)
        if header.is_mmap:
            return bytes(self._mapped[ptr][1][:length])
        return self.arena.read(ptr, length)

    def write(self, ptr: int, data: bytes) -> None:
        """Store ``data`` at the start of the block at ``ptr``."""
        data = bytes(data)
        header = self._checked(ptr, len(data))
        if header.is_mmap:
            self._mapped[ptr][1][:len(data)] = data
        else:
            self.arena.write(ptr, data)

    # internals ------------------------------------------------------------

    @staticmethod
    def _prepare(size: int) -> int:
        if size <= 0:
            raise ValueError("size must be positive")
        return align(size)

    def _find(self, ptr: int) -> BlockHeader | None:
        return next((b for b in self._blocks if b.data_address == ptr), None)

    def _checked(self, ptr: int, length: int) -> BlockHeader:
        header = self.header(ptr)
        if length < 0:
            raise ValueError("length must not be negative")
        if length > header.size:
            raise IndexError(
                f"{length} bytes do not fit in a block of {header.size} bytes"
            )
        return header

    def _claim(self, index: int, size: int) -> int:
        block = self._blocks[index]
        if block.size >= size + HEADER_SIZE + MIN_SPLIT_ALLOWED:
            remainder = BlockHeader(
                address=block.address + HEADER_SIZE + size,
                size=block.size - size - HEADER_SIZE,
                is_free=True,
            )
            block.size = size
            self._blocks.insert(index + 1, remainder)
        block.is_free = False
        return block.data_address

    def _extend(self, size: int) -> int:
        address = self.arena.allocate(HEADER_SIZE + size)
        header = BlockHeader(address=address, size=size)
        self._blocks.append(header)
        return header.data_address

    def _map(self, size: int) -> int:
        length = HEADER_SIZE + size
        header = BlockHeader(address=self._next_map, size=size, is_mmap=True)
        self._next_map += -(-length // PAGE_SIZE) * PAGE_SIZE
        self._mapped[header.data_address] = (header, bytearray(size))
        return header.data_address

    def _coalesce(self) -> None:
        merged: list[BlockHeader] = []
        for block in self._blocks:
            if merged and merged[-1].is_free and block.is_free:
                merged[-1].size += HEADER_SIZE + block.size
            else:
                merged.append(block)
        self._blocks = merged