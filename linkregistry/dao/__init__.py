from linkregistry.dao.base import MappingBaseDAO
from linkregistry.dao.memory import MappingMemoryDAO


__all__ = [
    'MappingBaseDAO',
    'MappingMemoryDAO',
]
