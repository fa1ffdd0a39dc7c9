"""Utility functions for fixed-layout binary encodings."""

from zkverifier.errors import FormatError


def encode_u8(value: int) -> bytes:
    return value.to_bytes(1, byteorder="little")


def encode_u32(value: int) -> bytes:
    return value.to_bytes(4, byteorder="little")


def encode_u64(value: int) -> bytes:
    return value.to_bytes(8, byteorder="little")


def encode_vec(data: bytes) -> bytes:
    """Length-prefixed (u32, little-endian) byte vector."""
    return encode_u32(len(data)) + data


class ByteReader:
    """Sequential reader over a binary buffer.

    Every read raises `FormatError` when the buffer is too short, so that malformed payloads never surface as
    `IndexError`s or silently truncated values.
    """

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def take(self, n: int) -> bytes:
        """Read the next `n` bytes."""
        if self.offset + n > len(self.data):
            msg = f"Unexpected end of data: needed {n} bytes at offset {self.offset}, {len(self.data)} available"
            raise FormatError(msg)
        out = self.data[self.offset : self.offset + n]
        self.offset += n
        return out

    def u8(self) -> int:
        return int.from_bytes(self.take(1), byteorder="little")

    def u32(self) -> int:
        return int.from_bytes(self.take(4), byteorder="little")

    def u64(self) -> int:
        return int.from_bytes(self.take(8), byteorder="little")

    def vec(self) -> bytes:
        return self.take(self.u32())

    def finish(self) -> None:
        """Check that the whole buffer has been consumed."""
        if self.offset != len(self.data):
            msg = f"{len(self.data) - self.offset} trailing bytes"
            raise FormatError(msg)
