"""In-process Data Access Object (DAO) implementation for temporary links

Records live in a dictionary owned by the DAO instance, for the lifetime of
the process. There is no module-level store: callers construct one instance
and share it between request handlers.

Concurrency:
    - A store-wide lock guards the record map, the per-key lock table and the
      sequence counter.
    - Each short id has its own lock. mutate() holds it for the whole
      read -> fn -> write step, so concurrent mutations of one link are
      serialized while different links proceed independently.

Example:
    >>> from templinks.models import ExpirationMode
    >>> from templinks.dao.memory import LinkMemoryDAO

    >>> dao = LinkMemoryDAO()
    >>> link = dao.create('https://example.com/page', ExpirationMode.SINGLE_CLICK)
    >>> link.max_clicks, link.expires_at
    (1, None)
    >>> dao.update(link.short_id, click_count=1).click_count
    1
"""

import threading
from collections.abc import Callable
from datetime import datetime

from beartype import beartype

from templinks.constants import Limits
from templinks.models import ExpirationMode, LinkModel
from templinks.dao.base import LinkBaseDAO
from templinks.dao.exceptions import LinkAlreadyExistsError
from templinks.utils.clock import utc_now
from templinks.utils.shortener import generate_short_id


class LinkMemoryDAO(LinkBaseDAO):
    """Thread-safe in-memory link store

    Attributes:
        short_id_factory (Callable[[], str]):
            Source of fresh public identifiers.
    """

    def __init__(self, short_id_factory: Callable[[], str] = generate_short_id):
        self.short_id_factory = short_id_factory
        self._links: dict[str, LinkModel] = {}
        self._key_locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self._counter = 0

    @beartype
    def create(self, destination_url: str, expiration_mode: ExpirationMode, now: datetime | None = None) -> LinkModel:
        created_at = now or utc_now()
        expires_at, max_clicks = expiration_mode.limits(created_at)

        for _ in range(Limits.SHORT_ID_ATTEMPTS):
            short_id = self.short_id_factory()
            with self._lock:
                if short_id in self._links:
                    continue
                self._counter += 1
                link = LinkModel(
                    id=self._counter,
                    short_id=short_id,
                    destination_url=destination_url,
                    expiration_mode=expiration_mode,
                    created_at=created_at,
                    expires_at=expires_at,
                    max_clicks=max_clicks,
                )
                self._links[short_id] = link
                self._key_locks[short_id] = threading.Lock()
                return link

        raise LinkAlreadyExistsError(f'Could not allocate an unused short id after {Limits.SHORT_ID_ATTEMPTS} attempts.')

    @beartype
    def get(self, short_id: str) -> LinkModel | None:
        with self._lock:
            return self._links.get(short_id)

    @beartype
    def mutate(self, short_id: str, fn: Callable[[LinkModel], LinkModel]) -> LinkModel | None:
        with self._lock:
            key_lock = self._key_locks.get(short_id)
        if key_lock is None:
            return None

        with key_lock:
            with self._lock:
                current = self._links[short_id]
            updated = fn(current)
            with self._lock:
                self._links[short_id] = updated
            return updated

    def list_all(self) -> list[LinkModel]:
        with self._lock:
            return list(self._links.values())
