from templinks.utils.config import app_env, app_name, app_prefix, load_config
from templinks.utils.clock import utc_now
from templinks.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from templinks.utils.shortener import generate_short_id
from templinks.utils.logging import initialize_logging


__all__ = [
    'generate_short_id',
    'utc_now',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
