"""
Buffer decompression.
"""

import zlib

from .compression_type import CompressionType
from .internal import decompress_internal
from ..errors import DecodeError, UnsupportedAlgorithmError

# Accept both zlib and gzip wrapped streams
_ZLIB_AUTO_HEADER = zlib.MAX_WBITS | 32


def decompress(data: bytes, compression_type: CompressionType, size_decompressed: int) -> bytes:
    """
    Decompress a buffer using the given algorithm.

    Args:
        data: Buffer to decompress
        compression_type: Algorithm the buffer was compressed with
        size_decompressed: Size of the buffer after decompression

    Returns:
        Decompressed bytes

    Raises:
        UnsupportedAlgorithmError: If the algorithm cannot be decompressed
        DecodeError: If the buffer is malformed
    """
    algorithm = CompressionType.lookup(compression_type)

    if algorithm in (CompressionType.UNCOMPRESSED, CompressionType.DELETED_RECORD):
        return bytes(data)

    if algorithm == CompressionType.ZLIB:
        try:
            return zlib.decompress(data, _ZLIB_AUTO_HEADER)
        except zlib.error as e:
            raise DecodeError(f"Invalid ZLIB stream: {e}") from e

    if algorithm == CompressionType.INTERNAL_COMPRESSION:
        return decompress_internal(data, size_decompressed)

    raise UnsupportedAlgorithmError(algorithm if algorithm is not None else compression_type, "decompress")
