# heapsim

`heapsim` models how a `malloc`-style allocator manages memory. It runs over a
simulated byte arena, so every step can be inspected and tested.

## What it contains

- `heapsim.bump.BumpArena`: a bump arena that hands out contiguous integer
  addresses. Built with no capacity it grows without bound; built with a
  capacity it raises `heapsim.bump.OutOfMemory` (a `MemoryError`) once that
  capacity is used up. It offers `allocate`, `read`, `write` and `fill`.
- `heapsim.allocator.Allocator`: a block allocator on top of an arena. Every
  block has a 24-byte header placed just before its data, and all blocks taken
  from the arena are kept in one ordered list of used and free blocks. It
  provides:
  - `malloc` (first fit) and `malloc_best_fit` (smallest free block that fits);
  - splitting of a free block when the remainder can hold a header plus at
    least 4 bytes;
  - merging of neighbouring free blocks in `free`;
  - `realloc`, `calloc` and `reset` (marks everything free and merges it into
    the first block);
  - `header(ptr)` and `blocks()` to inspect the list, and `read`/`write` to
    access a block's data;
  - with `use_mmap=True` (the default), requests above 4000 bytes are served
    from separate mapped regions that never enter the block list.
- `heapsim.allocator.align`: rounds a size up to a multiple of 8.
- `heapsim.stats`: `collect_stats` returns a `HeapStats` with block counts,
  used and free bytes, the largest free block and external fragmentation as a
  percentage; `render_stats` returns a coloured heap map (bars, a block table
  and totals) as a string; `print_stats` writes it to a file, standard output
  by default.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

```python
from heapsim.bump import BumpArena
from heapsim.allocator import Allocator, align
from heapsim.stats import collect_stats, print_stats

heap = Allocator(BumpArena(8192), use_mmap=True)

a = heap.malloc(32)
b = heap.malloc(32)
heap.write(a, b"hello")
print(heap.read(a, 5))          # b'hello'

heap.free(a)
c = heap.malloc_best_fit(16)    # reuses the freed block

grown = heap.realloc(c, 128)    # moves the data to a larger block
zeros = heap.calloc(20, 8)      # 160 zeroed bytes

print(heap.header(b).size)      # 32
print(align(13))                # 16

print(collect_stats(heap.blocks()))
print_stats(heap)
```

Pointers are plain integers: the address of a block's first data byte.

## Errors

Failures are raised as exceptions:

- a size of 0 (or less) for `malloc`, `malloc_best_fit` or `realloc` raises
  `ValueError`;
- when the arena has no room left, `OutOfMemory` is raised;
- `malloc_best_fit` does not grow the arena once any block exists: if no free
  block is large enough it raises `OutOfMemory`;
- `calloc` raises `OverflowError` when `n * size` exceeds a 64-bit address
  space;
- `free`, `header`, `read` and `write` raise `ValueError` for an address that
  is not the start of a block, and `read`/`write` raise `IndexError` when the
  data does not fit in the block.

`free(None)` does nothing, and `realloc(None, n)` behaves like `malloc(n)`.
`realloc` to a size the block already holds returns the same pointer.

## What it does not do

`heapsim` is a library only. It manages simulated memory, never the process's
own, and it has no command-line program and no benchmark runner. The heap map
shows only blocks from the arena; mapped regions for large requests are not
drawn. For an empty heap `render_stats` returns just `heap is empty`.