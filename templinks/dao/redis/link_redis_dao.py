"""Data Access Object (DAO) implementation for managing temporary links in Redis

This module provides a Redis-based implementation of LinkBaseDAO. Each link is
stored as a Redis hash; an index set tracks every short id for snapshots and a
counter key backs the record sequence numbers.

Responsibilities:
    - Allocate and store link records;
    - Retrieve single links and snapshots of all links;
    - Apply per-link mutations atomically (WATCH/MULTI compare-and-swap);
    - Raise appropriate DAO exceptions on connectivity issues.

Keys (with prefix "templinks:dev"):
    templinks:dev:links:<short id>   -> hash of LinkModel fields
    templinks:dev:links:index        -> set of all short ids
    templinks:dev:links:counter      -> record sequence counter

Example:
    >>> from templinks.models import ExpirationMode
    >>> from templinks.dao.redis import LinkRedisDAO

    >>> dao = LinkRedisDAO(prefix="templinks:dev")
    >>> link = dao.create("https://example.com/page", ExpirationMode.ONE_DAY)
    >>> dao.get(link.short_id).destination_url
    'https://example.com/page'
"""

import logging
from collections.abc import Callable
from datetime import datetime

import redis
from beartype import beartype

from templinks.constants import Limits
from templinks.models import ExpirationMode, LinkModel
from templinks.dao.base import LinkBaseDAO
from templinks.dao.redis.mixins import RedisClientMixin
from templinks.dao.redis.helpers import handle_redis_connection_error
from templinks.dao.exceptions import DataStoreError, LinkAlreadyExistsError
from templinks.utils.clock import utc_now
from templinks.utils.shortener import generate_short_id


logger = logging.getLogger(__name__)


def _encode_datetime(value: datetime | None) -> str:
    return '' if value is None else value.isoformat()


def _decode_datetime(value: str) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def encode_link(link: LinkModel) -> dict[str, str]:
    """Flatten a LinkModel into Redis hash fields (all strings, '' for None)"""
    return {
        'id': str(link.id),
        'short_id': link.short_id,
        'destination_url': link.destination_url,
        'expiration_mode': str(link.expiration_mode),
        'created_at': _encode_datetime(link.created_at),
        'expires_at': _encode_datetime(link.expires_at),
        'max_clicks': '' if link.max_clicks is None else str(link.max_clicks),
        'click_count': str(link.click_count),
        'is_expired': '1' if link.is_expired else '0',
    }


def decode_link(fields: dict[str, str]) -> LinkModel:
    """Rebuild a LinkModel from Redis hash fields"""
    return LinkModel(
        id=int(fields['id']),
        short_id=fields['short_id'],
        destination_url=fields['destination_url'],
        expiration_mode=ExpirationMode(fields['expiration_mode']),
        created_at=_decode_datetime(fields['created_at']),
        expires_at=_decode_datetime(fields.get('expires_at', '')),
        max_clicks=int(fields['max_clicks']) if fields.get('max_clicks') else None,
        click_count=int(fields['click_count']),
        is_expired=fields['is_expired'] == '1',
    )


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing temporary links

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        short_id_factory (Callable[[], str]):
            Source of fresh public identifiers.

    NOTE: the client must be created with decode_responses=True (the default),
          hash fields are decoded as strings.
    """

    def __init__(self, *, short_id_factory: Callable[[], str] = generate_short_id, **kwargs):
        self.short_id_factory = short_id_factory
        super().__init__(**kwargs)

    @handle_redis_connection_error
    @beartype
    def create(self, destination_url: str, expiration_mode: ExpirationMode, now: datetime | None = None) -> LinkModel:
        """Allocate and store a link record in Redis

        The hash and its index entry are written in one MULTI/EXEC block while
        the link key is WATCHed, so two writers racing for the same short id
        can't both succeed.

        Raises:
            LinkAlreadyExistsError:
                If every generated short id was already taken.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        created_at = now or utc_now()
        expires_at, max_clicks = expiration_mode.limits(created_at)

        for _ in range(Limits.SHORT_ID_ATTEMPTS):
            short_id = self.short_id_factory()
            link_key = self.keys.link_key(short_id)

            with self.redis.pipeline(transaction=True) as pipe:
                try:
                    pipe.watch(link_key)
                    if pipe.exists(link_key):
                        logger.warning('Short id collision. Generating another one.', extra={'shortId': short_id})
                        continue

                    link = LinkModel(
                        id=int(self.redis.incr(self.keys.counter_key())),
                        short_id=short_id,
                        destination_url=destination_url,
                        expiration_mode=expiration_mode,
                        created_at=created_at,
                        expires_at=expires_at,
                        max_clicks=max_clicks,
                    )
                    pipe.multi()
                    pipe.hset(link_key, mapping=encode_link(link))
                    pipe.sadd(self.keys.index_key(), short_id)
                    pipe.execute()
                except redis.WatchError:
                    logger.warning('Short id claimed concurrently. Generating another one.', extra={'shortId': short_id})
                    continue

            return link

        raise LinkAlreadyExistsError(f'Could not allocate an unused short id after {Limits.SHORT_ID_ATTEMPTS} attempts.')

    @handle_redis_connection_error
    @beartype
    def get(self, short_id: str) -> LinkModel | None:
        fields = self.redis.hgetall(self.keys.link_key(short_id))
        return decode_link(fields) if fields else None

    @handle_redis_connection_error
    @beartype
    def mutate(self, short_id: str, fn: Callable[[LinkModel], LinkModel]) -> LinkModel | None:
        """Apply `fn` to a stored link with an optimistic WATCH/MULTI loop

        If another client modifies the link between the read and EXEC, Redis
        aborts the transaction (WatchError) and the step is retried against the
        fresh value, so `fn` may run several times.

        Raises:
            DataStoreError:
                If the retries are exhausted or a Redis connection issue occurs.
        """
        link_key = self.keys.link_key(short_id)

        with self.redis.pipeline(transaction=True) as pipe:
            for attempt in range(1, Limits.REDIS_CAS_ATTEMPTS + 1):
                try:
                    pipe.watch(link_key)
                    fields = pipe.hgetall(link_key)
                    if not fields:
                        pipe.unwatch()
                        return None

                    updated = fn(decode_link(fields))
                    pipe.multi()
                    pipe.hset(link_key, mapping=encode_link(updated))
                    pipe.execute()
                    return updated
                except redis.WatchError:
                    logger.debug('Concurrent write detected. Retrying.', extra={'shortId': short_id, 'attempt': attempt})

        raise DataStoreError(f"Gave up updating link '{short_id}' after {Limits.REDIS_CAS_ATTEMPTS} conflicting writes.")

    @handle_redis_connection_error
    def list_all(self) -> list[LinkModel]:
        short_ids = self.redis.smembers(self.keys.index_key())

        with self.redis.pipeline(transaction=False) as pipe:
            for short_id in short_ids:
                pipe.hgetall(self.keys.link_key(short_id))
            results = pipe.execute()

        return [decode_link(fields) for fields in results if fields]
