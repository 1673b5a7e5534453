from datetime import datetime, UTC

import pytest

from templinks.dao import LinkMemoryDAO
from templinks.lifecycle import LinkLifecycle


NOW = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def now():
    """Mutable clock shared by the lifecycle under test."""
    return [NOW]


@pytest.fixture
def dao():
    return LinkMemoryDAO()


@pytest.fixture
def lifecycle(dao, now):
    return LinkLifecycle(dao, clock=lambda: now[0])


@pytest.fixture
def context():
    class _Context:
        function_name = 'templinks'

    return _Context()


@pytest.fixture
def apigw_event():
    def _event(short_id=None, body=None):
        event = {
            'httpMethod': 'GET',
            'requestContext': {'domainName': 'links.example.com', 'stage': 'test'},
            'pathParameters': {'shortId': short_id} if short_id is not None else {'invalid': 'path'},
        }
        if body is not None:
            event['body'] = body
        return event

    return _event
