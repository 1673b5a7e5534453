"""Helper utilities for the request handlers.

Functions:
    base_url(event) -> str
        Extract correct public base URL from API Gateway event
    get_short_url(short_id, event) -> str
        Get string representation of the redirect URL for a given short id
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler failures into a JSON 500 response

Example:
    >>> from templinks.utils.helpers import get_short_url
    >>> event = {
    ...     "requestContext": {
    ...         "domainName": "links.example.com",
    ...         "stage": "Prod"
    ...     }
    ... }
    >>> get_short_url('V1StGXR8_Z5j', event)
    'https://links.example.com/t/V1StGXR8_Z5j'
"""

import os
import json
import logging
import functools
from collections.abc import Callable

from templinks.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from templinks.exceptions import MissingEnvironmentVariableError
from templinks.types import LambdaEvent
from templinks.utils.runtime import running_locally


logger = logging.getLogger(__name__)

# Path prefix under which links are followed
REDIRECT_PATH = '/t'


def base_url(event: LambdaEvent) -> str:
    """Extract public base URL from API Gateway event

    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to the handler

    Returns:
        str: Base URL, e.g.:
             - "https://links.example.com"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(short_id: str, event: LambdaEvent) -> str:
    return f'{base_url(event).rstrip("/")}{REDIRECT_PATH}/{short_id}'


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with a JSON 500 when a handler raises unexpectedly

    When running locally the original exception is re-raised instead, so
    failures surface with their full traceback during development.
    """

    @functools.wraps(handler)
    def wrapper(event, context):
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled error in request handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            return {
                'statusCode': 500,
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
