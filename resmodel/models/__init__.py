"""
Models Package

Ownership graph and lazy serialization shared by every resource model:

- cacheable: CacheableModel, watched attributes, upward invalidation
- collections: TrackedList / TrackedDict mutation interception
- writable: LazyBuffer and WritableModel
- mapped: MappedModel keyed entry collections
- primitive: PrimitiveMappedModel with integer keys
"""

from .cacheable import CacheableModel, watched
from .collections import TrackedDict, TrackedList, track
from .writable import LazyBuffer, WritableModel
from .mapped import MappedModel, MappedModelEntry
from .primitive import PrimitiveEntry, PrimitiveMappedModel

__all__ = [
    'CacheableModel',
    'watched',
    'TrackedDict',
    'TrackedList',
    'track',
    'LazyBuffer',
    'WritableModel',
    'MappedModel',
    'MappedModelEntry',
    'PrimitiveEntry',
    'PrimitiveMappedModel',
]
