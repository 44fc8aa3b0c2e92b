"""
Binary Utilities

Bounds-checked reads and big-endian size fields used by the codecs.
Reads past the end of the input raise DecodeError instead of yielding garbage.
"""

import io
import struct
from typing import BinaryIO, Union

from ..errors import DecodeError


def read_uint8(data: bytes, offset: int) -> int:
    """
    Read one unsigned byte.

    Args:
        data: Input buffer
        offset: Position to read

    Returns:
        The byte value
    """
    if offset >= len(data):
        raise DecodeError(f"Unexpected end of data, needed 1 byte of {len(data)}", offset)
    return data[offset]


def read_bytes(data: bytes, offset: int, count: int) -> bytes:
    """
    Read a run of bytes.

    Args:
        data: Input buffer
        offset: Position of the first byte
        count: Number of bytes to read

    Returns:
        The bytes read
    """
    end = offset + count
    if end > len(data):
        raise DecodeError(f"Unexpected end of data, needed {count} bytes but only {max(0, len(data) - offset)} remain", offset)
    return data[offset:end]


def read_uint_be(data: bytes, offset: int, width: int) -> int:
    """Read a big-endian unsigned integer of `width` bytes."""
    return int.from_bytes(read_bytes(data, offset, width), 'big')


def write_uint_be(buffer: Union[BinaryIO, io.BytesIO], value: int, width: int):
    """
    Write a big-endian unsigned integer of `width` bytes.

    Args:
        buffer: Output buffer
        value: Value to write
        width: Number of bytes (1-4)
    """
    buffer.write(value.to_bytes(width, 'big'))


def write_uint8(buffer: Union[BinaryIO, io.BytesIO], value: int):
    """Write one unsigned byte."""
    buffer.write(struct.pack('<B', value))
