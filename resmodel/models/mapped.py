"""
Mapped Model

A keyed collection of uniquely identified entries.

- Every entry gets an ID when it is inserted. IDs come from a counter that
  only ever grows, so an ID is never reused within one collection.
- Keys are not unique. Lookups by key return the entry inserted first.
- A key index (key identifier -> sorted IDs) is updated on add, delete and
  key mutation, and rebuilt lazily after reset_key_map().

Usage:
    table = StringTable()
    hi = table.add(123, "hi")         # hi.id == 0
    bye = table.add(456, "bye")       # bye.id == 1
    table.delete_by_key(123)
    table.get_by_key(456) is bye      # True
"""

from bisect import insort
from collections.abc import Mapping
from typing import Any, Dict, Generic, Hashable, Iterable, Iterator, List, Optional, TypeVar

from .cacheable import CacheableModel, _values_equal
from .writable import WritableModel
from ..errors import ValidationError
from ..utils import logDebug, logWarning

K = TypeVar('K')
V = TypeVar('V')
E = TypeVar('E', bound='MappedModelEntry')

# Marks identifiers built for unhashable keys
_UNHASHABLE = '<unhashable>'


class MappedModelEntry:
    """
    Mixin for entries held in a MappedModel.

    Concrete entries combine this with a CacheableModel subclass and provide
    `key` and `value` attributes. A key setter must call _notify_key_change()
    so the owning collection can update its key index.
    """

    _id: Optional[int] = None

    @property
    def id(self) -> Optional[int]:
        """ID assigned by the owning collection, None while detached."""
        return self._id

    def key_equals(self, key) -> bool:
        return _values_equal(self.key, key)

    def value_equals(self, value) -> bool:
        if isinstance(self.value, CacheableModel):
            return self.value.equals(value)
        return _values_equal(self.value, value)

    def equals(self, other) -> bool:
        if not isinstance(other, MappedModelEntry):
            return False
        return self.key_equals(other.key) and self.value_equals(other.value)

    def _notify_key_change(self, previous, current, uncache: bool = True):
        owner = self.owner
        if isinstance(owner, MappedModel):
            owner._on_key_update(self, previous, current, uncache)


class MappedModel(WritableModel, Generic[K, V, E]):
    """
    Base for writable models made of key/value entries.

    Subclasses implement _make_entry() and _get_key_identifier().
    """

    def __init__(self, entries: Iterable[Any] = None, buffer: Optional[bytes] = None,
                 never_cache: bool = False, owner: Optional[CacheableModel] = None):
        """
        Initialize the collection.

        Args:
            entries: (key, value) pairs, {"key": ..., "value": ...} dicts or entries
            buffer: Serialized form of the entries, kept as the initial cache
            never_cache: Serialize on every get_buffer() call
            owner: Model whose serialized form embeds this one
        """
        self._entry_map: Dict[int, E] = {}
        self._key_map: Optional[Dict[Hashable, List[int]]] = {}
        self._next_id = 0
        self._cached_entries: Optional[List[E]] = None
        super().__init__(buffer, never_cache, owner)

        if entries is not None:
            self._insert_all(entries)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def entries(self) -> List[E]:
        """
        Entries in insertion order. The list is cached until the next
        invalidation; mutating it does not change the model, but mutating the
        entries themselves does.
        """
        if self._cached_entries is None:
            self._cached_entries = list(self._entry_map.values())
        return self._cached_entries

    @property
    def size(self) -> int:
        return len(self._entry_map)

    def __len__(self) -> int:
        return len(self._entry_map)

    def __iter__(self) -> Iterator[E]:
        return iter(self.entries)

    # =========================================================================
    # Mutation
    # =========================================================================

    def add(self, key: K, value: V) -> E:
        """
        Create an entry, add it to this model and return it.

        Args:
            key: Key of the entry
            value: Value of the entry

        Returns:
            The entry that was created, with its ID assigned
        """
        entry = self._insert(self._make_entry(key, value))
        self.uncache()
        return entry

    def add_all(self, items: Iterable[Any]) -> List[E]:
        """Add several entries, invalidating the cache once."""
        added = self._insert_all(items)
        if added:
            self.uncache()
        return added

    def delete(self, id: int) -> bool:
        """
        Remove the entry with the given ID.

        Returns:
            True if an entry was removed
        """
        entry = self._entry_map.get(id)
        if entry is None:
            return False
        self._remove(entry)
        self.uncache()
        return True

    def delete_by_key(self, key: K) -> bool:
        """Remove the first entry that has the given key."""
        id = self.get_id_for_key(key)
        if id is None:
            return False
        return self.delete(id)

    def delete_all_by_key(self, key: K) -> int:
        """
        Remove every entry that has the given key.

        Returns:
            Number of entries removed
        """
        ids = self.get_ids_for_key(key)
        for id in ids:
            self._remove(self._entry_map[id])
        if ids:
            self.uncache()
        return len(ids)

    def clear(self):
        """Remove all entries. IDs keep counting from where they were."""
        if not self._entry_map:
            return
        for entry in list(self._entry_map.values()):
            self._detach(entry)
        self._entry_map.clear()
        self._key_map = {}
        self.uncache()

    def merge(self, other: 'MappedModel') -> List[E]:
        """
        Add a clone of every entry of another model. The clones get new IDs.

        Args:
            other: Model to copy entries from (may be this model)

        Returns:
            The entries that were added
        """
        added = [self._insert(entry.clone()) for entry in list(other.entries)]
        if added:
            self.uncache()
        return added

    def reset_key_map(self):
        """Drop the key index; it is rebuilt on the next lookup by key."""
        self._key_map = None

    # =========================================================================
    # Lookup
    # =========================================================================

    def get(self, id: int) -> Optional[E]:
        return self._entry_map.get(id)

    def get_by_key(self, key: K) -> Optional[E]:
        """Return the first entry with the given key, or None."""
        id = self.get_id_for_key(key)
        return None if id is None else self._entry_map[id]

    def get_all_by_key(self, key: K) -> List[E]:
        """Return every entry with the given key, in insertion order."""
        return [self._entry_map[id] for id in self.get_ids_for_key(key)]

    def get_id_for_key(self, key: K) -> Optional[int]:
        ids = self._get_key_map().get(self._identify(key))
        return ids[0] if ids else None

    def get_ids_for_key(self, key: K) -> List[int]:
        return list(self._get_key_map().get(self._identify(key), ()))

    def has(self, id: int) -> bool:
        return id in self._entry_map

    def has_key(self, key: K) -> bool:
        return bool(self._get_key_map().get(self._identify(key)))

    def find_repeated_keys(self) -> List[K]:
        """Return every key that belongs to more than one entry."""
        return [
            self._entry_map[ids[0]].key
            for ids in self._get_key_map().values()
            if len(ids) > 1
        ]

    # =========================================================================
    # Model contract
    # =========================================================================

    def uncache(self):
        self._cached_entries = None
        super().uncache()

    def validate(self):
        """
        Validate every entry. Repeated keys are allowed.

        Raises:
            ValidationError: Listing the problems of every invalid entry
        """
        problems = []
        for entry in self.entries:
            try:
                entry.validate()
            except ValidationError as e:
                problems.extend(f"Entry {entry.id}: {problem}" for problem in e.problems)
        if problems:
            raise ValidationError(problems)

    def clone(self) -> 'MappedModel':
        return type(self)(entries=[entry.clone() for entry in self.entries])

    def equals(self, other) -> bool:
        if not isinstance(other, MappedModel) or other.size != self.size:
            return False
        return all(mine.equals(theirs) for mine, theirs in zip(self.entries, other.entries))

    # =========================================================================
    # Entry bookkeeping
    # =========================================================================

    def _on_key_update(self, entry: E, previous: K, current: K, uncache: bool = True):
        """
        Called by an entry of this model after its key changed.

        Args:
            uncache: False when the caller invalidates this model itself
        """
        if self._key_map is not None and entry.id in self._entry_map:
            previous_identifier = self._identify(previous)
            current_identifier = self._identify(current)
            if previous_identifier != current_identifier:
                self._unindex(previous_identifier, entry.id)
                insort(self._key_map.setdefault(current_identifier, []), entry.id)
        if uncache:
            self.uncache()

    def _insert_all(self, items: Iterable[Any]) -> List[E]:
        added = []
        for item in items:
            if item is None:
                logWarning(f"{type(self).__name__}: skipping missing entry at position {len(added)}")
                continue
            added.append(self._insert(self._unpack(item)))
        return added

    def _unpack(self, item: Any) -> E:
        if isinstance(item, MappedModelEntry):
            return item.clone() if item.id is not None else item
        if isinstance(item, Mapping):
            return self._make_entry(item['key'], item['value'])
        key, value = item
        return self._make_entry(key, value)

    def _insert(self, entry: E) -> E:
        """Assign an ID and index an entry, without uncaching."""
        id = self._next_id
        self._next_id += 1
        entry._id = id
        self._entry_map[id] = entry
        entry.owner = self
        if self._key_map is not None:
            # IDs only grow, so appending keeps each list sorted
            self._key_map.setdefault(self._identify(entry.key), []).append(id)
        self._cached_entries = None
        return entry

    def _remove(self, entry: E):
        del self._entry_map[entry.id]
        if self._key_map is not None:
            self._unindex(self._identify(entry.key), entry.id)
        self._detach(entry)
        self._cached_entries = None

    def _detach(self, entry: E):
        if entry.owner is self:
            entry.owner = None
        entry._id = None

    def _unindex(self, identifier: Hashable, id: int):
        ids = self._key_map.get(identifier)
        if ids is None:
            return
        if id in ids:
            ids.remove(id)
        if not ids:
            del self._key_map[identifier]

    def _get_key_map(self) -> Dict[Hashable, List[int]]:
        if self._key_map is None:
            logDebug(f"{type(self).__name__}: rebuilding key map for {self.size} entries")
            key_map: Dict[Hashable, List[int]] = {}
            for id, entry in self._entry_map.items():
                key_map.setdefault(self._identify(entry.key), []).append(id)
            self._key_map = key_map
        return self._key_map

    def _identify(self, key: K) -> Hashable:
        """
        Key identifier used by the key index.

        Unhashable identifiers (e.g. a list passed as a key) share a bucket
        per repr, so the entry can still be added and reported by validate().
        """
        identifier = self._get_key_identifier(key)
        try:
            hash(identifier)
        except TypeError:
            return (_UNHASHABLE, type(identifier).__name__, repr(identifier))
        return identifier

    # =========================================================================
    # Abstract
    # =========================================================================

    def _make_entry(self, key: K, value: V) -> E:
        """Create a detached entry for this model."""
        raise NotImplementedError(f"{type(self).__name__} does not implement _make_entry()")

    def _get_key_identifier(self, key: K) -> Hashable:
        """Return a hashable value that identifies a key among keys of its type."""
        raise NotImplementedError(f"{type(self).__name__} does not implement _get_key_identifier()")
