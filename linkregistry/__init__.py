from linkregistry.registry import LinkRegistry
from linkregistry.utils.config import RegistryConfig, load_config


__all__ = [
    'LinkRegistry',
    'RegistryConfig',
    'load_config',
]
