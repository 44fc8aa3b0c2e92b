"""
Compressed buffer value object.
"""

from dataclasses import dataclass

from .compression_type import CompressionType
from .compress import compress
from .decompress import decompress


@dataclass(frozen=True)
class CompressedBuffer:
    """A buffer together with how it is compressed and its decompressed size."""
    buffer: bytes
    compression_type: CompressionType
    size_decompressed: int

    def __post_init__(self):
        if self.size_decompressed < 0:
            raise ValueError(f"Decompressed size must not be negative, got {self.size_decompressed}")

    @classmethod
    def compress(cls, data: bytes, compression_type: CompressionType) -> 'CompressedBuffer':
        """
        Compress a buffer and wrap the result.

        Args:
            data: Uncompressed bytes
            compression_type: Algorithm to use

        Returns:
            CompressedBuffer holding the compressed bytes
        """
        return cls(
            buffer=compress(data, compression_type),
            compression_type=compression_type,
            size_decompressed=len(data)
        )

    def decompress(self) -> bytes:
        """Return the decompressed bytes."""
        return decompress(self.buffer, self.compression_type, self.size_decompressed)
