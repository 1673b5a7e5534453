"""Link store implementations and a factory selecting one from configuration.

Example:
    >>> from templinks.dao import build_link_dao
    >>> build_link_dao({'memory': {}})
    <templinks.dao.memory.link_memory_dao.LinkMemoryDAO object at ...>
    >>> build_link_dao({'redis': {'host': 'localhost', 'port': 6379, 'db': 0}}, prefix='templinks:dev')
    <templinks.dao.redis.link_redis_dao.LinkRedisDAO object at ...>
"""

from typing import Any

from templinks.dao.base import LinkBaseDAO
from templinks.dao.memory import LinkMemoryDAO
from templinks.dao.redis import LinkRedisDAO
from templinks.exceptions import BadConfigurationError


def build_link_dao(app_config: dict[str, Any], prefix: str | None = None) -> LinkBaseDAO:
    """Construct the link store named by a `{backend: {...}}` config section

    Raises:
        BadConfigurationError: If the section doesn't name exactly one known backend.
    """
    if len(app_config) != 1:
        raise BadConfigurationError(f'Expected exactly one backend section (given: {sorted(app_config)}).')

    [(backend, params)] = app_config.items()
    if backend == 'memory':
        return LinkMemoryDAO()
    if backend == 'redis':
        redis_config = {f'redis_{k}': v for k, v in (params or {}).items()}
        return LinkRedisDAO(**redis_config, prefix=prefix)

    raise BadConfigurationError(f"Unknown link store backend '{backend}'.")


__all__ = [
    'LinkBaseDAO',
    'LinkMemoryDAO',
    'LinkRedisDAO',
    'build_link_dao',
]
