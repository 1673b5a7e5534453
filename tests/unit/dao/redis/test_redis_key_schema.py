"""Unit tests for RedisKeySchema.

Test coverage includes:

1. Key generation with and without a prefix
2. Prefix type validation
"""

import pytest

from templinks.dao.redis import RedisKeySchema


@pytest.mark.parametrize(
    'prefix, expected_link, expected_index, expected_counter',
    [
        (None, 'links:abc123', 'links:index', 'links:counter'),
        ('templinks:dev', 'templinks:dev:links:abc123', 'templinks:dev:links:index', 'templinks:dev:links:counter'),
    ],
)
def test_keys(prefix, expected_link, expected_index, expected_counter):
    keys = RedisKeySchema(prefix=prefix)

    assert keys.link_key('abc123') == expected_link
    assert keys.index_key() == expected_index
    assert keys.counter_key() == expected_counter


@pytest.mark.parametrize('prefix', [42, ['templinks'], b'templinks'])
def test_invalid_prefix_type(prefix):
    with pytest.raises(TypeError, match='Prefix must be of type string'):
        RedisKeySchema(prefix=prefix)
