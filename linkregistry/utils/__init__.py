from linkregistry.utils.config import RegistryConfig, app_env, load_config
from linkregistry.utils.helpers import utcnow, get_short_url
from linkregistry.utils.shortener import generate_shortcode
from linkregistry.utils.logging import initialize_logging
from linkregistry.utils.validators import validate_url, validate_shortcode, validate_validity_minutes


__all__ = [
    'RegistryConfig',
    'app_env',
    'load_config',
    'utcnow',
    'get_short_url',
    'generate_shortcode',
    'initialize_logging',
    'validate_url',
    'validate_shortcode',
    'validate_validity_minutes',
]
