from linkregistry.dao.memory.mapping_memory_dao import MappingMemoryDAO


__all__ = ['MappingMemoryDAO']
