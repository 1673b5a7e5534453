"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkAlreadyExistsError:
        Raised when a link can't be stored because its short id is taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues,
        too much write contention, etc.).

NOTE:
    An unknown short id is not an exception: lookups and mutations return None
    so callers can tell "not found" apart from "expired".

Example:
    >>> from templinks.dao.exceptions import DataStoreError
    >>> raise DataStoreError("Can't connect to Redis at localhost:6379/0.")
    Traceback (most recent call last):
        ...
    templinks.dao.exceptions.DataStoreError: Can't connect to Redis at localhost:6379/0.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class LinkAlreadyExistsError(DAOError):
    """Exception raised when a link with the same short id already exists in the data store."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, exhausted write retries, etc.
    """

    pass
