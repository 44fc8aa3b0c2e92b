# Buffer-only resource models
from .static_resource import StaticResource
from .raw_resource import RawResource
from .deleted_resource import DeletedResource

__all__ = ['StaticResource', 'RawResource', 'DeletedResource']
