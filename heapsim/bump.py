"""A bump (break-pointer) arena that hands out contiguous regions of simulated memory."""

from __future__ import annotations

DEFAULT_EMBEDDED_HEAP_SIZE = 8192


class OutOfMemory(MemoryError):
    """Raised when the arena cannot satisfy a request."""


class BumpArena:
    """Contiguous byte memory that only ever grows by moving a break pointer.

    With ``capacity=None`` the arena grows without bound, like a program break.
    With an integer capacity it behaves like a fixed static heap.
    Addresses are integer offsets into the arena.
    """

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is not None and capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._memory = bytearray()

    def __len__(self) -> int:
        """Number of bytes handed out so far (the current break)."""
        return len(self._memory)

    def allocate(self, size: int) -> int:
        """Reserve ``size`` bytes and return the address of the first one."""
        if size < 0:
            raise ValueError("size must not be negative")
        start = len(self._memory)
        if self.capacity is not None and start + size > self.capacity:
            raise OutOfMemory(
                f"cannot allocate {size} bytes: {self.capacity - start} remaining"
            )
        self._memory.extend(bytes(size))
        return start

    def _check_range(self, address: int, length: int) -> None:
        if length < 0:
            raise ValueError("length must not be negative")
        if address < 0 or address + length > len(self._memory):
            raise IndexError(
                f"range [{address}, {address + length}) outside arena of "
                f"{len(self._memory)} bytes"
            )

    def read(self, address: int, length: int) -> bytes:
        """Return ``length`` bytes starting at ``address``."""
        self._check_range(address, length)
        return bytes(self._memory[address:address + length])

    def write(self, address: int, data: bytes) -> None:
        """Store ``data`` starting at ``address``."""
        data = bytes(data)
        self._check_range(address, len(data))
        self._memory[address:address + len(data)] = data

    def fill(self, address: int, length: int, value: int = 0) -> None:
        """Set ``length`` bytes starting at ``address`` to ``value``."""
        if not 0 <= value <= 0xFF:
            raise ValueError("fill value must be a byte")
        self._check_range(address, length)
        self._memory[address:address + length] = bytes([value]) * length