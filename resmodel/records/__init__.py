# Keyed resource records
from .resource_entry import (
    ResourceEntry,
    ResourceEntryCollection,
    format_resource_key,
    make_resource_key,
    resource_key_identifier,
)

__all__ = [
    'ResourceEntry',
    'ResourceEntryCollection',
    'format_resource_key',
    'make_resource_key',
    'resource_key_identifier',
]
