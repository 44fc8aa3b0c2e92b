"""
Internal Compression

Decoder and encoder for the proprietary LZ77-family format tagged 0xFFFF.

Stream format:
- Header:
  - u8 flags (0x80 set when the size field is 4 bytes wide)
  - u8 magic (0xFB)
  - u24/u32 big-endian decompressed size
- Control codes, selected by the range of the first byte:

  | first byte | length | literals          | copy length          | copy offset                  |
  |------------|--------|-------------------|----------------------|------------------------------|
  | 0x00-0x7F  | 2      | b0 & 3            | ((b0 & 0x1C) >> 2) + 3 | ((b0 & 0x60) << 3) + b1    |
  | 0x80-0xBF  | 3      | b1 >> 6           | (b0 & 0x3F) + 4      | ((b1 & 0x3F) << 8) + b2      |
  | 0xC0-0xDF  | 4      | b0 & 3            | ((b0 & 0x0C) << 6) + b3 + 5 | ((b0 & 0x10) << 12) + (b1 << 8) + b2 |
  | 0xE0-0xFB  | 1      | ((b0 & 0x1F) << 2) + 4 | -               | -                            |
  | 0xFC-0xFF  | 1      | b0 & 3            | - (end of stream)    | -                            |

  Each code copies its literals from the input, then copies `copy length`
  bytes from `copy offset + 1` bytes back in the output. Source and
  destination may overlap, so the copy runs one byte at a time.
"""

import io
from collections import defaultdict
from typing import Dict, List, Tuple

from ..constants import (
    INTERNAL_HEADER_FLAGS, INTERNAL_HEADER_MAGIC, INTERNAL_LARGE_SIZE_FLAG,
    INTERNAL_HEADER_SIZE, INTERNAL_MAX_SMALL_SIZE,
    CONTROL_MEDIUM_COPY, CONTROL_LONG_COPY, CONTROL_LITERAL, CONTROL_TERMINAL,
    SHORT_COPY_MIN, SHORT_COPY_MAX, SHORT_COPY_DISTANCE,
    MEDIUM_COPY_MIN, MEDIUM_COPY_MAX, MEDIUM_COPY_DISTANCE,
    LONG_COPY_MIN, LONG_COPY_MAX, LONG_COPY_DISTANCE,
    MAX_LITERAL_RUN, MAX_TRAILING_LITERALS,
)
from ..errors import DecodeError
from ..utils import logWarning, logDebug, read_uint8, read_bytes, read_uint_be, write_uint8, write_uint_be


# =============================================================================
# Decoding
# =============================================================================

def decompress_internal(data: bytes, size_decompressed: int) -> bytes:
    """
    Decompress a buffer that uses internal compression.

    Every iteration consumes at least the control byte, so decoding always
    terminates; reads past the input and writes past `size_decompressed`
    raise DecodeError.

    Args:
        data: Compressed buffer, header included
        size_decompressed: Size of the buffer once decompressed

    Returns:
        Decompressed bytes (zero padded if the stream ends early)
    """
    if size_decompressed < 0:
        raise ValueError(f"Decompressed size must not be negative, got {size_decompressed}")

    output = bytearray(size_decompressed)
    out_idx = 0

    flags = read_uint8(data, 0)
    size_width = 4 if flags & INTERNAL_LARGE_SIZE_FLAG else 3
    data_idx = INTERNAL_HEADER_SIZE + size_width - 3
    if data_idx > len(data):
        raise DecodeError(f"Buffer too small for internal compression header: {len(data)} bytes", 0)

    # The caller's size wins, the header is only checked
    declared = read_uint_be(data, 2, size_width)
    if declared != size_decompressed:
        logDebug(f"Internal compression header declares {declared} bytes, expected {size_decompressed}")

    while True:
        code_start = data_idx
        control = read_uint8(data, data_idx)
        data_idx += 1

        if control < CONTROL_MEDIUM_COPY:
            b1 = read_uint8(data, data_idx)
            data_idx += 1
            literals = control & 0x03
            copy_size = ((control & 0x1C) >> 2) + 3
            copy_offset = ((control & 0x60) << 3) + b1
        elif control < CONTROL_LONG_COPY:
            b1, b2 = read_bytes(data, data_idx, 2)
            data_idx += 2
            literals = b1 >> 6
            copy_size = (control & 0x3F) + 4
            copy_offset = ((b1 & 0x3F) << 8) + b2
        elif control < CONTROL_LITERAL:
            b1, b2, b3 = read_bytes(data, data_idx, 3)
            data_idx += 3
            literals = control & 0x03
            copy_size = ((control & 0x0C) << 6) + b3 + 5
            copy_offset = ((control & 0x10) << 12) + (b1 << 8) + b2
        elif control < CONTROL_TERMINAL:
            literals = ((control & 0x1F) << 2) + 4
            copy_size = 0
            copy_offset = 0
        else:
            literals = control & 0x03
            copy_size = 0
            copy_offset = 0

        if literals:
            if out_idx + literals > size_decompressed:
                raise DecodeError(
                    f"Literal run of {literals} bytes overflows decompressed size {size_decompressed}", code_start)
            output[out_idx:out_idx + literals] = read_bytes(data, data_idx, literals)
            data_idx += literals
            out_idx += literals

        if copy_size:
            source = out_idx - copy_offset - 1
            if source < 0:
                raise DecodeError(
                    f"Back reference {copy_offset + 1} bytes back reaches before the start of the output", code_start)
            if out_idx + copy_size > size_decompressed:
                raise DecodeError(
                    f"Copy of {copy_size} bytes overflows decompressed size {size_decompressed}", code_start)
            for i in range(copy_size):
                output[out_idx + i] = output[source + i]
            out_idx += copy_size

        if control >= CONTROL_TERMINAL:
            break

    if out_idx != size_decompressed:
        logWarning(f"Internal compression stream ended after {out_idx} of {size_decompressed} bytes")

    return bytes(output)


# =============================================================================
# Encoding
# =============================================================================

class _MatchFinder:
    """
    Hash chains of 3-byte prefixes for greedy match searching.

    Positions are appended in increasing order, so walking a chain
    backwards visits the closest candidates first.
    """

    def __init__(self, data: bytes, max_candidates: int = 32):
        self.data = data
        self.max_candidates = max_candidates
        self._chains: Dict[bytes, List[int]] = defaultdict(list)

    def insert(self, position: int):
        if position + 3 <= len(self.data):
            self._chains[self.data[position:position + 3]].append(position)

    def find(self, position: int) -> Tuple[int, int]:
        """
        Find the longest encodable match for the bytes at `position`.

        Returns:
            Tuple of (length, distance), or (0, 0) if there is none
        """
        data = self.data
        if position + 3 > len(data):
            return 0, 0

        chain = self._chains.get(data[position:position + 3])
        if not chain:
            return 0, 0

        max_length = min(LONG_COPY_MAX, len(data) - position)
        best_length, best_distance = 0, 0

        for checked, candidate in enumerate(reversed(chain)):
            if checked >= self.max_candidates:
                break
            distance = position - candidate
            if distance > LONG_COPY_DISTANCE:
                break

            length = 3
            while length < max_length and data[candidate + length] == data[position + length]:
                length += 1

            if length > best_length and _is_encodable(length, distance):
                best_length, best_distance = length, distance
                if length == max_length:
                    break

        return best_length, best_distance


def _is_encodable(length: int, distance: int) -> bool:
    if distance <= SHORT_COPY_DISTANCE:
        return length >= SHORT_COPY_MIN
    if distance <= MEDIUM_COPY_DISTANCE:
        return length >= MEDIUM_COPY_MIN
    return distance <= LONG_COPY_DISTANCE and length >= LONG_COPY_MIN


def _write_literal_runs(buffer: io.BytesIO, data: bytes, start: int, end: int) -> int:
    """
    Write literal-only codes until at most 3 literals remain.

    Returns:
        Position of the first literal that was not written
    """
    while end - start > MAX_TRAILING_LITERALS:
        count = min(MAX_LITERAL_RUN, (end - start) & ~0x03)
        write_uint8(buffer, CONTROL_LITERAL | ((count - 4) >> 2))
        buffer.write(data[start:start + count])
        start += count
    return start


def _write_copy(buffer: io.BytesIO, literals: bytes, length: int, distance: int):
    """Write a copy code carrying up to 3 leading literals."""
    count = len(literals)
    offset = distance - 1

    if length <= SHORT_COPY_MAX and distance <= SHORT_COPY_DISTANCE:
        buffer.write(bytes((
            ((offset >> 3) & 0x60) | ((length - SHORT_COPY_MIN) << 2) | count,
            offset & 0xFF,
        )))
    elif length <= MEDIUM_COPY_MAX and distance <= MEDIUM_COPY_DISTANCE:
        buffer.write(bytes((
            CONTROL_MEDIUM_COPY | (length - MEDIUM_COPY_MIN),
            (count << 6) | (offset >> 8),
            offset & 0xFF,
        )))
    else:
        extra = length - LONG_COPY_MIN
        buffer.write(bytes((
            CONTROL_LONG_COPY | ((offset >> 12) & 0x10) | ((extra >> 6) & 0x0C) | count,
            (offset >> 8) & 0xFF,
            offset & 0xFF,
            extra & 0xFF,
        )))

    buffer.write(literals)


def compress_internal(data: bytes) -> bytes:
    """
    Compress a buffer with internal compression.

    Uses greedy matching over hash chains. The output is accepted by
    decompress_internal(), though it is not byte-identical to what the
    game's own encoder produces.

    Args:
        data: Uncompressed bytes

    Returns:
        Compressed bytes, header included
    """
    data = bytes(data)
    size = len(data)
    buffer = io.BytesIO()

    if size > INTERNAL_MAX_SMALL_SIZE:
        write_uint8(buffer, INTERNAL_HEADER_FLAGS | INTERNAL_LARGE_SIZE_FLAG)
        write_uint8(buffer, INTERNAL_HEADER_MAGIC)
        write_uint_be(buffer, size, 4)
    else:
        write_uint8(buffer, INTERNAL_HEADER_FLAGS)
        write_uint8(buffer, INTERNAL_HEADER_MAGIC)
        write_uint_be(buffer, size, 3)

    finder = _MatchFinder(data)
    position = 0
    literal_start = 0

    while position < size:
        length, distance = finder.find(position)
        if length:
            literal_start = _write_literal_runs(buffer, data, literal_start, position)
            _write_copy(buffer, data[literal_start:position], length, distance)
            for p in range(position, position + length):
                finder.insert(p)
            position += length
            literal_start = position
        else:
            finder.insert(position)
            position += 1

    literal_start = _write_literal_runs(buffer, data, literal_start, size)
    trailing = data[literal_start:size]
    write_uint8(buffer, CONTROL_TERMINAL | len(trailing))
    buffer.write(trailing)

    result = buffer.getvalue()
    logDebug(f"Internal compression: {size:,} -> {len(result):,} bytes")
    return result
