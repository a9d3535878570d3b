"""
Context Builder Resource Store

- ResourceStore: Abstract get/list/update with optimistic concurrency
- MemoryResourceStore: In-process store
- YamlResourceStore: One YAML document per resource under a root directory
"""

from .base import ResourceStore
from .memory import MemoryResourceStore
from .yaml_store import YamlResourceStore, load_resource, dump_resource

__all__ = [
    'ResourceStore',
    'MemoryResourceStore',
    'YamlResourceStore',
    'load_resource',
    'dump_resource',
]
