"""
Primitive mapped model: numeric keys, values compared with ==.
"""

from typing import Optional, TypeVar

from .cacheable import CacheableModel, _values_equal, watched
from .mapped import MappedModel, MappedModelEntry
from ..enums import DataType, is_integer, is_number_in_range
from ..errors import ValidationError

V = TypeVar('V')


class PrimitiveEntry(MappedModelEntry, CacheableModel):
    """An entry with an integer key and a plain value."""

    value = watched()

    def __init__(self, key: int, value, owner: Optional[CacheableModel] = None):
        super().__init__(owner)
        self._key = key
        self.value = value

    @property
    def key(self) -> int:
        return self._key

    @key.setter
    def key(self, key: int):
        previous = self._key
        if _values_equal(previous, key):
            return
        self._key = key
        self._notify_key_change(previous, key)

    def clone(self) -> 'PrimitiveEntry':
        return type(self)(self.key, self.value)

    def validate(self):
        if not is_integer(self.key):
            raise ValidationError([f"Key must be an integer, got {self.key!r}"])
        if not is_number_in_range(self.key, DataType.UInt32):
            raise ValidationError([f"Key {self.key} is out of range for {DataType.UInt32.name}"])

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, key={self.key!r}, value={self.value!r})"


class PrimitiveMappedModel(MappedModel[int, V, PrimitiveEntry]):
    """A mapped model whose keys are their own identifiers."""

    def _get_key_identifier(self, key: int):
        return key

    def _make_entry(self, key: int, value: V) -> PrimitiveEntry:
        return PrimitiveEntry(key, value)
