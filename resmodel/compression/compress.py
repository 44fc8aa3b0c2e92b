"""
Buffer compression.
"""

import zlib

from .compression_type import CompressionType
from .internal import compress_internal
from ..errors import UnsupportedAlgorithmError


def compress(data: bytes, compression_type: CompressionType) -> bytes:
    """
    Compress a buffer using the given algorithm.

    Args:
        data: Buffer to compress
        compression_type: Algorithm to use

    Returns:
        Compressed bytes

    Raises:
        UnsupportedAlgorithmError: If the algorithm cannot be used to compress
    """
    algorithm = CompressionType.lookup(compression_type)

    if algorithm == CompressionType.UNCOMPRESSED:
        return bytes(data)
    if algorithm == CompressionType.ZLIB:
        return zlib.compress(data)
    if algorithm == CompressionType.INTERNAL_COMPRESSION:
        return compress_internal(data)

    raise UnsupportedAlgorithmError(algorithm if algorithm is not None else compression_type, "compress")
