"""Utility functions for application configuration management.

Each request handler (a *component*, e.g. `redirect_link`) loads the
settings of the active link store backend from a JSON document:

    {
        "active_backend": "redis",
        "configs": {
            "create_link": {
                "redis": {"host": "localhost", "port": 6379, "db": 0}
            },
            "redirect_link": {
                "redis": { ... }
            }
        }
    }

The document is read, in order of preference, from:
    1. a local JSON file named by `TEMPLINKS_CONFIG_FILE`;
    2. AWS AppConfig (`APPCONFIG_APP_ID`, `APPCONFIG_ENV_ID`, `APPCONFIG_PROFILE_ID`);
    3. when neither is configured and the app runs locally, the in-memory
       backend `{"memory": {}}` is used.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return the key namespace for DAOs, or None if `APP_NAME` is not set.

    load_config(component: str) -> dict
        Return `{backend: {...}}` for the given component.

Example:
    >>> from templinks.utils.config import load_config
    >>> config = load_config('redirect_link')
    >>> config
    {'redis': {'host': 'localhost', 'port': 6379, 'db': 0}}
"""

import os
import json
import functools
import logging
from collections.abc import Callable

import boto3

from templinks.constants import ENV
from templinks.exceptions import BadConfigurationError, MissingEnvironmentVariableError
from templinks.types import AppConfig
from templinks.utils.helpers import require_environment
from templinks.utils.runtime import running_locally


logger = logging.getLogger(__name__)

DEFAULT_BACKEND = 'memory'


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'templinks'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'templinks:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def select_component(document: AppConfig, component: str) -> AppConfig:
    """Extract the active backend section for a component from a config document

    Raises:
        BadConfigurationError: If the document doesn't name an active backend.
    """
    try:
        backend = document['active_backend']
    except (KeyError, TypeError) as e:
        raise BadConfigurationError("Configuration document is missing 'active_backend'.") from e

    section = document.get('configs', {}).get(component, {})
    return {backend: section.get(backend, {})}


def _load_config_file(func: Callable[[str], dict]) -> Callable[[str], dict]:
    """Decorator: prefer a local JSON configuration file when one is configured"""

    @functools.wraps(func)
    def wrapper(component: str, *args, **kwargs) -> dict:
        path = os.getenv(ENV.App.CONFIG_FILE)
        if not path:
            return func(component, *args, **kwargs)

        logger.debug('Loading configuration from file.', extra={'path': path, 'component': component})
        with open(path, encoding='utf-8') as f:
            document = json.load(f)
        return select_component(document, component)

    return wrapper


def _default_to_memory_locally(func: Callable[[str], dict]) -> Callable[[str], dict]:
    """Decorator: fall back to the in-memory backend locally when AppConfig isn't configured"""

    @functools.wraps(func)
    def wrapper(component: str, *args, **kwargs) -> dict:
        try:
            return func(component, *args, **kwargs)
        except MissingEnvironmentVariableError:
            if not running_locally():
                raise
            logger.debug('AppConfig is not configured. Using the in-memory backend.', extra={'component': component})
            return {DEFAULT_BACKEND: {}}

    return wrapper


@_load_config_file
@_default_to_memory_locally
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(component: str) -> dict:
    """Load configuration for a given component from AWS AppConfig

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        component (str):
            Name of the handler (e.g., "create_link" or "redirect_link").

    Returns:
        dict: The component's backend section as a Python dictionary.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'component': component})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    data = select_component(document, component)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'component': component, 'build': document.get('build')})
    return data
