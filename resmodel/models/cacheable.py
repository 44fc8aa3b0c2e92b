"""
Cacheable Model

Base behaviour for every mutable model that is, or is part of, something
with a serialized form:

- owner: the single model whose serialized form embeds this one
- children: the models that currently name this one as their owner
- watched attributes: attributes whose mutation invalidates the cache

Invalidation flows upward only. A mutation uncaches the model and every
owner above it, because only ancestors embed this model's bytes.

Usage:
    class Node(CacheableModel):
        value = watched()

        def __init__(self, value, owner=None):
            super().__init__(owner)
            self.value = value

    node = Node(1, owner=parent)
    node.value = 2       # parent.uncache() is called
    node.value = 2       # same value, nothing happens
"""

import weakref
from typing import Callable, FrozenSet, Optional

from ..utils import logDebug


def _values_equal(previous, current) -> bool:
    """Equality used for watched attributes; identity first, then ==."""
    if previous is current:
        return True
    if type(previous) is not type(current):
        return False
    try:
        return bool(previous == current)
    except (TypeError, ValueError):
        # e.g. numpy arrays, whose == is elementwise
        return False


class watched:
    """
    Declares an attribute whose mutation invalidates the owning model's cache.

    The first assignment initializes the attribute and does not invalidate.
    Later assignments invalidate only when the value actually changes.
    Deleting the attribute always invalidates.

    Args:
        owned: If True, model values assigned to the attribute are re-parented
               to the holder, and a replaced model value is detached.
    """

    def __init__(self, owned: bool = False):
        self.owned = owned
        self.name: Optional[str] = None

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, instance, objtype=None):
        if instance is None:
            return self
        try:
            return instance.__dict__[self.name]
        except KeyError:
            raise AttributeError(f"'{type(instance).__name__}' object has no attribute '{self.name}'") from None

    def __set__(self, instance, value):
        values = instance.__dict__
        initialized = self.name in values
        previous = values.get(self.name)

        # Re-parent first: a rejected owner leaves the attribute untouched
        if self.owned and isinstance(value, CacheableModel):
            value.owner = instance

        values[self.name] = value

        if self.owned and isinstance(previous, CacheableModel) and previous is not value and previous.owner is instance:
            previous.owner = None

        if initialized and not _values_equal(previous, value):
            instance.uncache()

    def __delete__(self, instance):
        try:
            previous = instance.__dict__.pop(self.name)
        except KeyError:
            raise AttributeError(f"'{type(instance).__name__}' object has no attribute '{self.name}'") from None

        if self.owned and isinstance(previous, CacheableModel) and previous.owner is instance:
            previous.owner = None

        instance.uncache()


class CacheableModel:
    """
    Base class for models that either can be cached or are part of another
    model that can be cached.

    Models are compared with equals(), never with ==, so they stay hashable
    by identity and can live in the weak children set of their owner.
    """

    # Names of the attributes declared with watched(), filled per subclass
    watched_properties: FrozenSet[str] = frozenset()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        names = {name for klass in cls.__mro__ for name in vars(klass)}
        cls.watched_properties = frozenset(
            name for name in names if isinstance(getattr(cls, name, None), watched)
        )

    def __init__(self, owner: Optional['CacheableModel'] = None):
        """
        Initialize the model.

        Args:
            owner: Model whose serialized form embeds this one, if any
        """
        self._owner: Optional[CacheableModel] = None
        self._children = weakref.WeakSet()
        self.owner = owner

    # =========================================================================
    # Ownership
    # =========================================================================

    @property
    def owner(self) -> Optional['CacheableModel']:
        """The model that is uncached whenever this one is."""
        return self._owner

    @owner.setter
    def owner(self, owner: Optional['CacheableModel']):
        previous = self._owner
        if owner is previous:
            return

        if owner is not None:
            if not isinstance(owner, CacheableModel):
                raise TypeError(f"Owner must be a CacheableModel, got {type(owner).__name__}")
            ancestor = owner
            while ancestor is not None:
                if ancestor is self:
                    raise ValueError(f"Setting this owner would make {type(self).__name__} its own ancestor")
                ancestor = ancestor._owner

        self._owner = owner
        self._on_owner_change(previous)

    @owner.deleter
    def owner(self):
        self.owner = None

    @property
    def children(self) -> FrozenSet['CacheableModel']:
        """Snapshot of the models that currently name this one as their owner."""
        return frozenset(self._children)

    # =========================================================================
    # Cache invalidation
    # =========================================================================

    def uncache(self):
        """
        Uncaches this model and notifies its owner (if it has one) to do the
        same. This does NOT uncache this model's children.
        """
        if self._owner is not None:
            self._owner.uncache()

    def deep_uncache(self):
        """
        Uncaches this model, its owners, and all of its descendants.

        Use of this method is not recommended, as it defeats the purpose of
        caching. It exists for working around a cache that was computed
        outside of the ownership graph.
        """
        logDebug(f"Deep uncache from {type(self).__name__}")
        self._deep_uncache()

    def _deep_uncache(self):
        self.uncache()
        for child in list(self._children):
            child._deep_uncache()

    # =========================================================================
    # Model contract
    # =========================================================================

    def clone(self) -> 'CacheableModel':
        """
        Return a deep copy of this model with the same public values, except
        for its owner. Internal values such as IDs are not preserved.
        """
        raise NotImplementedError(f"{type(self).__name__} does not implement clone()")

    def equals(self, other) -> bool:
        """Determine whether this model is equivalent to another object."""
        raise NotImplementedError(f"{type(self).__name__} does not implement equals()")

    def validate(self):
        """
        Verify that this model is valid.

        Raises:
            ValidationError: Listing every problem found
        """

    # =========================================================================
    # Collections and graph hooks
    # =========================================================================

    def _get_collection_owner(self) -> Optional['CacheableModel']:
        """Return the model that owns the collections held by this one."""
        return self

    def _track_collection(self, collection, on_change: Callable = None):
        """
        Wrap a list or dict so that mutating it uncaches this model's
        collection owner and re-parents any model placed in it.

        Args:
            collection: list or dict to track (returned as-is if already tracked)
            on_change: Optional hook called as
                       on_change(owner, target, key, previous[, current])

        Returns:
            TrackedList or TrackedDict wrapping the collection
        """
        from .collections import track

        return track(collection, self._get_collection_owner, on_change)

    def _on_child_add(self, child: 'CacheableModel'):
        """Called when a model sets this one as its owner."""
        self._children.add(child)

    def _on_child_remove(self, child: 'CacheableModel'):
        """Called when a model stops using this one as its owner."""
        self._children.discard(child)

    def _on_owner_change(self, previous_owner: Optional['CacheableModel']):
        """
        Update the child sets of the previous and current owner.

        Moving a model does not change any content, so nothing is uncached.
        """
        if previous_owner is self._owner:
            return
        if previous_owner is not None:
            previous_owner._on_child_remove(self)
        if self._owner is not None:
            self._owner._on_child_add(self)
        assert self._owner is None or self in self._owner._children
