"""
Binary stream reader/writer for WebAssembly encodings.

This module provides a BinaryStream class that reads and writes the
little-endian and LEB128 primitives used by the WebAssembly binary format.
Every read is bounds checked so that truncated input surfaces as a
BinaryReaderError carrying the offending offset.
"""

import struct
from typing import Union

Buffer = Union[bytes, bytearray, memoryview]


class BinaryReaderError(ValueError):
    """Raised when the input cannot be decoded."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} (at offset 0x{offset:x})")
        self.message = message
        self.offset = offset


class BinaryStream:
    """
    Binary stream over an in-memory buffer.

    A stream built from existing data borrows it through a memoryview and is
    read-only. A stream built without data is an empty, append-only writer.

    Attributes:
        position: Current read/write offset
        length: Total length of the underlying buffer
    """

    def __init__(self, data: Union[Buffer, None] = None):
        """
        Initialize a BinaryStream.

        Args:
            data: Raw bytes to read, or None for an empty writable stream
        """
        if data is None:
            self._buffer = bytearray()
            self._view = None
        else:
            self._view = memoryview(data)
        self._position = 0

    # ========== Position and Length ==========

    @property
    def position(self) -> int:
        """Get current stream position."""
        return self._position

    @position.setter
    def position(self, value: int) -> None:
        """Set stream position."""
        self._position = value

    @property
    def length(self) -> int:
        """Get stream length."""
        if self._view is None:
            return len(self._buffer)
        return len(self._view)

    @property
    def remaining(self) -> int:
        """Bytes left between the current position and the end."""
        return self.length - self.position

    def eof(self) -> bool:
        return self.position >= self.length

    def view(self, start: int, end: int) -> memoryview:
        """Borrow a slice of the input without copying it."""
        return self._view[start:end]

    # ========== Primitive Readers ==========

    def read_bytes(self, count: int) -> bytes:
        """Read exactly `count` raw bytes."""
        start = self._position
        end = start + count
        if self._view is None or end > len(self._view):
            raise BinaryReaderError("unexpected end-of-file", start)
        self._position = end
        return bytes(self._view[start:end])

    def read_byte(self) -> int:
        """Read an unsigned byte."""
        return self.read_bytes(1)[0]

    def read_uint16(self) -> int:
        """Read an unsigned 16-bit integer."""
        return struct.unpack('<H', self.read_bytes(2))[0]

    def read_uint32(self) -> int:
        """Read an unsigned 32-bit integer."""
        return struct.unpack('<I', self.read_bytes(4))[0]

    def read_string(self, length: int) -> str:
        """Read a fixed-length UTF-8 string."""
        start = self.position
        raw = self.read_bytes(length)
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError:
            raise BinaryReaderError("invalid UTF-8 encoding", start) from None

    # ========== LEB128 ==========

    def read_var_u32(self) -> int:
        """
        Read an unsigned LEB128 integer that must fit in 32 bits.

        The encoding may use at most 5 bytes, and the unused high bits of
        the fifth byte must be zero.
        """
        start = self.position
        result = 0
        shift = 0
        while True:
            b = self.read_byte()
            if shift == 28:
                if b & 0x80:
                    raise BinaryReaderError(
                        "invalid var_u32: integer representation too long", start)
                if b >> 4:
                    raise BinaryReaderError("invalid var_u32: integer too large", start)
            result |= (b & 0x7F) << shift
            if (b & 0x80) == 0:
                return result
            shift += 7

    def read_name(self) -> str:
        """Read a LEB128 length-prefixed UTF-8 name."""
        length = self.read_var_u32()
        return self.read_string(length)

    # ========== Write Methods ==========

    def write_bytes(self, data: Buffer) -> None:
        """Append raw bytes."""
        self._buffer.extend(data)
        self._position = len(self._buffer)

    def write_byte(self, value: int) -> None:
        """Write an unsigned byte."""
        self.write_bytes(struct.pack('<B', value))

    def write_uint16(self, value: int) -> None:
        self.write_bytes(struct.pack('<H', value))

    def write_uint32(self, value: int) -> None:
        """Write an unsigned 32-bit integer."""
        self.write_bytes(struct.pack('<I', value))

    def write_var_u32(self, value: int) -> None:
        """Write an unsigned LEB128 integer using the minimal encoding."""
        if value < 0 or value > 0xFFFFFFFF:
            raise ValueError(f"value out of range for var_u32: {value}")
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                self.write_byte(byte | 0x80)
            else:
                self.write_byte(byte)
                break

    # ========== Misc ==========

    def get_data(self) -> bytes:
        """Get the underlying data."""
        if self._view is None:
            return bytes(self._buffer)
        return self._view.tobytes()
