"""
Raw resources: resources kept as bytes because they were not parsed.
"""

from typing import Optional

from .static_resource import StaticResource
from ..models import CacheableModel


class RawResource(StaticResource):
    """A resource that has not been parsed, with the reason why."""

    def __init__(self, buffer: bytes, reason: Optional[str] = None,
                 owner: Optional[CacheableModel] = None):
        super().__init__(buffer, owner)
        self._reason = reason
        self._plain_text: Optional[str] = None

    @classmethod
    def from_buffer(cls, buffer: bytes, reason: Optional[str] = None) -> 'RawResource':
        return cls(buffer, reason)

    @property
    def reason(self) -> Optional[str]:
        """Why this resource was loaded raw."""
        return self._reason

    @property
    def plain_text(self) -> str:
        """The buffer decoded as UTF-8, with undecodable bytes replaced."""
        if self._plain_text is None:
            self._plain_text = self.buffer.decode('utf-8', errors='replace')
        return self._plain_text

    def clone(self) -> 'RawResource':
        return type(self)(self.buffer, self.reason)

    def equals(self, other) -> bool:
        if not super().equals(other):
            return False
        return isinstance(other, RawResource) and other.reason == self.reason

    def __repr__(self) -> str:
        return f"RawResource({len(self.buffer)} bytes, reason={self.reason!r})"
