"""
Static resources: buffer-only resources that are never re-serialized.
"""

from typing import Optional

from ..compression import CompressionType
from ..constants import XML_DECLARATION
from ..models import CacheableModel, LazyBuffer, WritableModel


class StaticResource(WritableModel):
    """
    A resource made of nothing but its buffer.

    The buffer is the resource's identity, so uncache() never clears it. It
    still notifies the owner, since the owner's buffer may be stale.
    """

    default_compression_type = CompressionType.ZLIB

    def __init__(self, buffer: bytes, owner: Optional[CacheableModel] = None):
        super().__init__(bytes(buffer), False, owner)

    @property
    def buffer(self) -> bytes:
        """Shorthand for get_buffer(), since the buffer never changes."""
        return self._cached_buffer

    @property
    def never_cache(self) -> bool:
        return False

    def uncache(self):
        CacheableModel.uncache(self)

    def equals(self, other) -> bool:
        if not isinstance(other, LazyBuffer):
            return False
        return other.get_buffer() == self.buffer

    def is_xml(self) -> bool:
        """Whether the buffer starts with an XML declaration."""
        return self.buffer[:len(XML_DECLARATION)] == XML_DECLARATION

    def _serialize(self) -> bytes:
        raise RuntimeError(f"Cannot serialize a {type(self).__name__}, its buffer was lost")
