"""
Compression type tags.

These values are the on-disk compression tags of container records and
must never be renumbered.
"""

from enum import IntEnum
from typing import Optional


class CompressionType(IntEnum):
    """Types of compression used in binary resource containers."""
    UNCOMPRESSED = 0x0000
    DELETED_RECORD = 0xFFE0
    STREAMABLE_COMPRESSION = 0xFFFE
    INTERNAL_COMPRESSION = 0xFFFF
    ZLIB = 0x5A42  # 23106

    @classmethod
    def lookup(cls, value) -> Optional['CompressionType']:
        """
        Convert a raw tag to a CompressionType.

        Args:
            value: CompressionType or raw integer tag

        Returns:
            The matching CompressionType, or None if the tag is unknown
        """
        try:
            return cls(value)
        except ValueError:
            return None
