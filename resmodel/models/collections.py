"""
Tracked Collections

List and dict wrappers whose mutating methods notify the model holding them.

Every mutation runs the underlying operation first, then:
1. calls the optional hook: on_change(owner, target, key, previous[, current])
2. re-parents model values that were placed in the collection
3. uncaches the owner

Bulk operations (extend, clear, sort, reverse, update) notify once.
Storing an equal value under an existing dict key does nothing.
Reads pass straight through to the wrapped container, and errors raised by
it (IndexError, KeyError, ...) propagate untouched.
"""

from collections.abc import MutableMapping, MutableSequence
from typing import Any, Callable, Iterable, Optional

from .cacheable import CacheableModel, _values_equal

_MISSING = object()


def _no_owner():
    return None


class _TrackedCollection:
    """Shared notification logic for tracked containers."""

    # Marker checked by track() so containers are never wrapped twice
    _is_tracked = True

    def __init__(self, data, owner_getter: Callable[[], Optional[CacheableModel]],
                 on_change: Callable = None):
        self._data = data
        self._get_owner = owner_getter
        self._on_change = on_change

    def detach(self):
        """Stop notifying anyone; the wrapped container stays usable."""
        self._get_owner = _no_owner
        self._on_change = None

    def _notify(self, key, previous, current=_MISSING, added: Iterable = ()):
        owner = self._get_owner()

        if self._on_change is not None:
            if current is _MISSING:
                self._on_change(owner, self._data, key, previous)
            else:
                self._on_change(owner, self._data, key, previous, current)

        if owner is not None:
            for value in added:
                if isinstance(value, CacheableModel):
                    value.owner = owner
            owner.uncache()


class TrackedList(_TrackedCollection, MutableSequence):
    """A list whose mutations uncache the model that holds it."""

    def __getitem__(self, index):
        return self._data[index]

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self):
        return iter(self._data)

    def __contains__(self, value) -> bool:
        return value in self._data

    def __reversed__(self):
        return reversed(self._data)

    def __setitem__(self, index, value):
        previous = self._data[index]
        if isinstance(index, slice):
            value = list(value)
            self._data[index] = value
            self._notify(index, previous, value, added=value)
        else:
            self._data[index] = value
            self._notify(index, previous, value, added=(value,))

    def __delitem__(self, index):
        previous = self._data[index]
        del self._data[index]
        self._notify(index, previous)

    def insert(self, index: int, value):
        self._data.insert(index, value)
        self._notify(index, None, value, added=(value,))

    def append(self, value):
        self.insert(len(self._data), value)

    def extend(self, values: Iterable):
        values = list(values)
        if not values:
            return
        start = len(self._data)
        self._data.extend(values)
        self._notify(slice(start, start + len(values)), [], values, added=values)

    def __iadd__(self, values: Iterable):
        self.extend(values)
        return self

    def clear(self):
        if not self._data:
            return
        previous = list(self._data)
        self._data.clear()
        self._notify(slice(None), previous, [])

    def sort(self, *, key: Callable = None, reverse: bool = False):
        previous = list(self._data)
        self._data.sort(key=key, reverse=reverse)
        self._notify(slice(None), previous, list(self._data))

    def reverse(self):
        previous = list(self._data)
        self._data.reverse()
        self._notify(slice(None), previous, list(self._data))

    def copy(self) -> list:
        """Return an untracked shallow copy."""
        return list(self._data)

    def __eq__(self, other) -> bool:
        if isinstance(other, (list, TrackedList)):
            return list(self._data) == list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"TrackedList({self._data!r})"


class TrackedDict(_TrackedCollection, MutableMapping):
    """A dict whose mutations uncache the model that holds it."""

    def __getitem__(self, key):
        return self._data[key]

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self):
        return iter(self._data)

    def __contains__(self, key) -> bool:
        return key in self._data

    def __setitem__(self, key, value):
        previous = self._data.get(key, _MISSING)
        if previous is not _MISSING and _values_equal(previous, value):
            return
        if previous is _MISSING:
            previous = None
        self._data[key] = value
        self._notify(key, previous, value, added=(value,))

    def __delitem__(self, key):
        previous = self._data[key]
        del self._data[key]
        self._notify(key, previous)

    def update(self, other=(), **kwargs):
        items = {
            key: value for key, value in dict(other, **kwargs).items()
            if key not in self._data or not _values_equal(self._data[key], value)
        }
        if not items:
            return
        previous = {key: self._data.get(key) for key in items}
        self._data.update(items)
        self._notify(None, previous, items, added=items.values())

    def clear(self):
        if not self._data:
            return
        previous = dict(self._data)
        self._data.clear()
        self._notify(None, previous)

    def copy(self) -> dict:
        """Return an untracked shallow copy."""
        return dict(self._data)

    def __repr__(self) -> str:
        return f"TrackedDict({self._data!r})"


def track(collection: Any, owner_getter: Callable[[], Optional[CacheableModel]],
          on_change: Callable = None):
    """
    Wrap a list or dict in a tracked collection.

    Args:
        collection: list, dict, or an already tracked collection
        owner_getter: Returns the model to notify, resolved on every mutation
        on_change: Optional hook, see module docstring

    Returns:
        The tracked collection
    """
    if getattr(collection, '_is_tracked', False):
        return collection
    if isinstance(collection, list):
        return TrackedList(collection, owner_getter, on_change)
    if isinstance(collection, dict):
        return TrackedDict(collection, owner_getter, on_change)
    raise TypeError(f"Cannot track a {type(collection).__name__}, expected a list or dict")
