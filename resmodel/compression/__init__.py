"""
Compression Package

Stateless codecs for resource payloads:

- compression_type: CompressionType tags (on-disk values)
- compress / decompress: dispatch on the compression tag
- internal: decoder and encoder for the proprietary 0xFFFF format
- compressed_buffer: CompressedBuffer value object

Usage:
    from resmodel.compression import compress, decompress, CompressionType

    packed = compress(data, CompressionType.ZLIB)
    assert decompress(packed, CompressionType.ZLIB, len(data)) == data
"""

from .compression_type import CompressionType
from .compress import compress
from .decompress import decompress
from .internal import compress_internal, decompress_internal
from .compressed_buffer import CompressedBuffer

__all__ = [
    'CompressionType',
    'compress',
    'decompress',
    'compress_internal',
    'decompress_internal',
    'CompressedBuffer',
]
