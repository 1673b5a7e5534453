from templinks.dao.redis.redis_key_schema import RedisKeySchema
from templinks.dao.redis.mixins import RedisClientMixin
from templinks.dao.redis.link_redis_dao import LinkRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'LinkRedisDAO',
]
