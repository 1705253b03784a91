"""Simulated heap allocator: a bump arena, a first-fit/best-fit block allocator and a terminal heap map."""

__version__ = "0.1.0"
__all__ = ["allocator", "bump", "stats"]