"""Clock used by the link lifecycle

Functions:
    utc_now() -> datetime
        Return the current time as an aware UTC datetime.

The lifecycle takes any zero-argument callable with the same contract,
so tests can inject a fixed or stepping clock.
"""

from datetime import datetime, UTC


def utc_now() -> datetime:
    return datetime.now(UTC)
