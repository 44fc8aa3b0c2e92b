"""
Deleted resources: markers for records removed by a patch.
"""

from typing import Optional

from .static_resource import StaticResource
from ..compression import CompressionType
from ..models import CacheableModel


class DeletedResource(StaticResource):
    """An empty resource written with the deleted record compression tag."""

    default_compression_type = CompressionType.DELETED_RECORD

    def __init__(self, owner: Optional[CacheableModel] = None):
        super().__init__(b'', owner)

    @classmethod
    def from_buffer(cls, buffer: bytes = b'', reason: Optional[str] = None) -> 'DeletedResource':
        """Create a deleted resource. The arguments are ignored."""
        return cls()

    def clone(self) -> 'DeletedResource':
        return type(self)()

    def equals(self, other) -> bool:
        return isinstance(other, DeletedResource)

    def __repr__(self) -> str:
        return "DeletedResource()"
