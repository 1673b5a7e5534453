"""Abstract base class for temporary link data access objects (DAOs).

This class establishes a consistent contract for all link store implementations,
regardless of the underlying storage mechanism (in-process memory, Redis).

Responsibilities:
    - Allocate link records (sequence number, short id, expiry limits).
    - Provide lookups and snapshots of stored LinkModel objects.
    - Provide a single atomic per-key mutation primitive.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from datetime import datetime, UTC
        >>> from templinks.models import ExpirationMode
        >>> from templinks.dao import LinkMemoryDAO

        >>> dao = LinkMemoryDAO()
        >>> link = dao.create('https://example.com', ExpirationMode.ONE_HOUR)
        >>> dao.get(link.short_id).destination_url
        'https://example.com'

        >>> dao.update(link.short_id, is_expired=True).is_expired
        True

        >>> dao.get('unknown') is None
        True
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from typing import Any

from templinks.models import ExpirationMode, LinkModel


class LinkBaseDAO(ABC):
    """Interface for temporary link data access objects (DAOs).

    Methods:
        create(destination_url, expiration_mode, now=None) -> LinkModel:
            Allocate and store a fresh link record.

        get(short_id) -> LinkModel | None:
            Look up a link. No side effects.

        mutate(short_id, fn) -> LinkModel | None:
            Atomically replace a stored record with fn(record).

        update(short_id, **fields) -> LinkModel | None:
            Merge mutable fields into a stored record (via mutate()).

        list_all() -> list[LinkModel]:
            Snapshot all stored records.

    Subclassing:
        Datastore-specific implementations must extend this class and
        implement all abstract methods. `update()` is provided on top of
        `mutate()`.

    NOTE:
        - Records are never physically deleted. Deleting a link means
          latching its `is_expired` flag.
    """

    @abstractmethod
    def create(self, destination_url: str, expiration_mode: ExpirationMode, now: datetime | None = None) -> LinkModel:
        """Allocate and persist a new link record.

        Inputs are expected to be validated already (see templinks.validation).

        Args:
            destination_url (str):
                Absolute URL the link redirects to.
            expiration_mode (ExpirationMode):
                Policy determining `expires_at` / `max_clicks`.
            now (datetime | None):
                Creation timestamp. Defaults to the current UTC time.

        Returns:
            LinkModel: the stored record (click_count=0, is_expired=False).

        Raises:
            LinkAlreadyExistsError:
                If no unused short id could be allocated.
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, short_id: str) -> LinkModel | None:
        pass

    @abstractmethod
    def mutate(self, short_id: str, fn: Callable[[LinkModel], LinkModel]) -> LinkModel | None:
        """Atomically apply `fn` to the stored record and persist its result.

        The read, `fn` and the write form one linearizable step with respect
        to every other mutation of the same short id. Implementations may
        call `fn` more than once (optimistic retries); it must be pure.

        Args:
            short_id (str):
                Public identifier of the link.
            fn (Callable[[LinkModel], LinkModel]):
                Transition from the current record to the new record.

        Returns:
            LinkModel | None: the persisted record, or None if the short id is unknown.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def list_all(self) -> list[LinkModel]:
        pass

    def update(self, short_id: str, **fields: Any) -> LinkModel | None:
        """Merge mutable fields into a stored record.

        Returns:
            LinkModel | None: the updated copy, or None if the short id is unknown.

        Raises:
            ValueError: If a field other than click_count / is_expired is given.
        """
        # Fail before touching the store on illegal fields
        illegal = set(fields) - LinkModel.MUTABLE_FIELDS
        if illegal:
            raise ValueError(f'Cannot update immutable link fields: {", ".join(sorted(illegal))}')
        return self.mutate(short_id, lambda link: link.evolve(**fields))
