"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if the handlers run locally (SAM or APP_ENV=local), False otherwise.

Example:
    >>> from templinks.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
    >>> os.environ['APP_ENV'] = 'dev'
    >>> running_locally()
    False
"""

import os

from templinks.constants import ENV


def running_locally() -> bool:
    """Check if the handlers are running locally

    Returns:
        bool: True if running locally, False otherwise.
    """
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'
