"""
resmodel

Mutable models for binary game resources with cache-coherent serialization,
plus the compression codecs their payloads are stored with.

Usage:
    from resmodel import PrimitiveMappedModel, compress, decompress, CompressionType

    packed = compress(data, CompressionType.INTERNAL_COMPRESSION)
    data = decompress(packed, CompressionType.INTERNAL_COMPRESSION, len(data))
"""

from .compression import CompressedBuffer, CompressionType, compress, decompress
from .config import ReadingOptions
from .errors import DecodeError, ResourceModelError, UnsupportedAlgorithmError, ValidationError
from .models import (
    CacheableModel,
    LazyBuffer,
    MappedModel,
    MappedModelEntry,
    PrimitiveEntry,
    PrimitiveMappedModel,
    TrackedDict,
    TrackedList,
    WritableModel,
    watched,
)
from .records import ResourceEntry, ResourceEntryCollection, make_resource_key
from .resources import DeletedResource, RawResource, StaticResource

__version__ = "0.1.0"

__all__ = [
    'CompressedBuffer',
    'CompressionType',
    'compress',
    'decompress',
    'ReadingOptions',
    'DecodeError',
    'ResourceModelError',
    'UnsupportedAlgorithmError',
    'ValidationError',
    'CacheableModel',
    'LazyBuffer',
    'MappedModel',
    'MappedModelEntry',
    'PrimitiveEntry',
    'PrimitiveMappedModel',
    'TrackedDict',
    'TrackedList',
    'WritableModel',
    'watched',
    'ResourceEntry',
    'ResourceEntryCollection',
    'make_resource_key',
    'DeletedResource',
    'RawResource',
    'StaticResource',
]
