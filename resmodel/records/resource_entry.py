"""
Resource Entry

A record pairing a resource key (type, group, instance) with a resource.
The record's buffer is the resource's buffer compressed with the record's
compression type, so editing the resource uncaches the record, and editing
the record's key updates the key index of the collection holding it.
"""

from typing import Callable, Dict, Hashable, Mapping, Optional

from ..compression import CompressedBuffer, CompressionType, compress
from ..config import ReadingOptions
from ..constants import RESOURCE_KEY_FIELDS
from ..enums import DataType, is_number_in_range
from ..errors import ValidationError
from ..models import CacheableModel, MappedModel, MappedModelEntry, WritableModel, watched
from ..resources import DeletedResource, RawResource
from ..utils import logWarning

# Range each key part must fit in
_KEY_TYPES = (
    ('type', DataType.UInt32),
    ('group', DataType.UInt32),
    ('instance', DataType.UInt64),
)


def make_resource_key(type: int, group: int, instance: int) -> Dict[str, int]:
    """Build a resource key dict."""
    return {'type': type, 'group': group, 'instance': instance}


def resource_key_identifier(key: Mapping) -> Hashable:
    """Hashable (type, group, instance) tuple for a resource key."""
    return tuple(key.get(field) for field in RESOURCE_KEY_FIELDS)


def format_resource_key(key: Mapping) -> str:
    parts = []
    for field, data_type in _KEY_TYPES:
        value = key.get(field)
        width = 16 if data_type == DataType.UInt64 else 8
        parts.append(f"{value:0{width}X}" if isinstance(value, int) else repr(value))
    return ":".join(parts)


def _load_raw(buffer: bytes, options: ReadingOptions) -> RawResource:
    return RawResource(buffer)


class ResourceEntry(MappedModelEntry, WritableModel):
    """
    A keyed record holding one resource.

    The key is a tracked dict: assigning key['instance'] = ... notifies the
    owning collection just like replacing the whole key does.
    """

    value = watched(owned=True)
    compression_type = watched()

    def __init__(self, key: Mapping, resource: WritableModel,
                 compression_type: Optional[CompressionType] = None,
                 buffer: Optional[bytes] = None, never_cache: bool = False,
                 owner: Optional[CacheableModel] = None):
        """
        Initialize the record.

        Args:
            key: Mapping with 'type', 'group' and 'instance'
            resource: Resource held by this record
            compression_type: Defaults to the resource's default compression type
            buffer: Compressed bytes of the resource, kept as the initial cache
            never_cache: Compress on every get_buffer() call
            owner: Collection holding this record
        """
        super().__init__(buffer, never_cache, owner)
        self._key = None
        self.key = key
        self.value = resource
        if compression_type is None:
            compression_type = getattr(resource, 'default_compression_type', CompressionType.ZLIB)
        self.compression_type = compression_type

    @classmethod
    def from_compressed(cls, key: Mapping, compressed: CompressedBuffer,
                        options: Optional[ReadingOptions] = None,
                        factory: Callable[[bytes, ReadingOptions], WritableModel] = None) -> 'ResourceEntry':
        """
        Load a record from its stored, compressed form.

        Args:
            key: Resource key of the record
            compressed: Stored bytes with their compression type and size
            options: Reading options (defaults used when omitted)
            factory: Called as factory(buffer, options) to parse the
                     decompressed bytes; defaults to loading a RawResource

        Returns:
            ResourceEntry holding the parsed resource
        """
        options = options or ReadingOptions()
        factory = factory or _load_raw

        data = None
        if compressed.compression_type == CompressionType.DELETED_RECORD:
            resource = DeletedResource()
        else:
            data = compressed.decompress()
            if options.load_raw:
                resource = RawResource(data, reason="Loaded raw by request")
            else:
                try:
                    resource = factory(data, options)
                except Exception as e:
                    if not options.load_errors_as_raw:
                        raise
                    logWarning(f"Loading resource {format_resource_key(key)} as raw: {e}")
                    resource = RawResource(data, reason=str(e))

        entry = cls(
            key,
            resource,
            compression_type=compressed.compression_type,
            buffer=compressed.buffer if options.save_compressed_buffer else None,
            never_cache=options.never_cache
        )

        # Static resources already hold their bytes as their cache
        if options.save_buffer and data is not None and resource.has_changed:
            resource.cache_buffer(data)

        return entry

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def key(self) -> Mapping:
        return self._key

    @key.setter
    def key(self, key: Mapping):
        previous = self._key
        self._key = self._track_collection(dict(key), self._on_key_field_change)
        if previous is None:
            return
        # Handles to the replaced key must not move this record any more
        previous.detach()
        if resource_key_identifier(previous) != resource_key_identifier(self._key):
            self._notify_key_change(dict(previous), self._key)

    @property
    def resource(self) -> WritableModel:
        """Alias of value."""
        return self.value

    @resource.setter
    def resource(self, resource: WritableModel):
        self.value = resource

    # =========================================================================
    # Model contract
    # =========================================================================

    def key_equals(self, key: Mapping) -> bool:
        return resource_key_identifier(self.key) == resource_key_identifier(key)

    def clone(self) -> 'ResourceEntry':
        return type(self)(dict(self.key), self.value.clone(), self.compression_type)

    def validate(self):
        """
        Raises:
            ValidationError: Listing key parts out of range and the resource's own problems
        """
        problems = []
        for field, data_type in _KEY_TYPES:
            value = self.key.get(field)
            if not is_number_in_range(value, data_type):
                problems.append(f"Expected {field} to be a {data_type.name}, got {value!r}")
        try:
            self.value.validate()
        except ValidationError as e:
            problems.extend(e.problems)
        if problems:
            raise ValidationError(problems)

    def to_compressed_buffer(self) -> CompressedBuffer:
        """Return this record's buffer with its compression type and decompressed size."""
        return CompressedBuffer(
            buffer=self.get_buffer(),
            compression_type=self.compression_type,
            size_decompressed=len(self.value.get_buffer())
        )

    def __repr__(self) -> str:
        return f"ResourceEntry(id={self.id}, key={format_resource_key(self.key)}, value={self.value!r})"

    # =========================================================================
    # Internals
    # =========================================================================

    def _get_collection_owner(self) -> Optional[CacheableModel]:
        # The key is not part of this record's buffer, only of its collection's
        return self.owner

    def _on_key_field_change(self, owner, target, field, previous, current=None):
        old = dict(target)
        if field is None:
            old.update(previous)
        else:
            old[field] = previous
        # The tracked key uncaches the collection right after this hook
        self._notify_key_change(old, target, uncache=False)

    def _serialize(self) -> bytes:
        if self.compression_type == CompressionType.DELETED_RECORD:
            # Deleted records are stored as-is, there is nothing to compress
            return self.value.get_buffer()
        return compress(self.value.get_buffer(), self.compression_type)


class ResourceEntryCollection(MappedModel):
    """
    In-memory collection of resource records keyed by (type, group, instance).

    Archive writers subclass this and implement _serialize() with their byte
    layout.
    """

    def _get_key_identifier(self, key: Mapping) -> Hashable:
        return resource_key_identifier(key)

    def _make_entry(self, key: Mapping, value: WritableModel) -> ResourceEntry:
        return ResourceEntry(key, value)
