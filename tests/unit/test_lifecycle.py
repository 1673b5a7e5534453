"""Unit tests for the temporary link lifecycle.

Test coverage includes:

1. evaluate_expiration()
   - Time-based and click-based expiry, latched flag, `changed` reporting.
   - Idempotence on already expired links.

2. Creation
   - Fresh links are unclicked, active and carry exactly one limit.
   - Invalid payloads raise ValidationError and store nothing.

3. Visiting single-click links
   - First visit redirects and consumes the link, later visits are expired.

4. Visiting time-based links
   - Visits before expiry redirect and count clicks, visits at/after expiry don't.

5. Status checks
   - Expiry is refreshed and persisted on read.

6. Removal
   - Removed links report expired, unknown links are never created.

7. Concurrency
   - Simultaneous visits of a single-click link redirect exactly once.
"""

import threading
from datetime import datetime, timedelta, UTC

import pytest

from templinks.dao import LinkMemoryDAO
from templinks.exceptions import ValidationError
from templinks.lifecycle import LinkLifecycle, evaluate_expiration
from templinks.models import ExpirationMode, LinkModel, OutcomeKind, VisitOutcome


T0 = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao():
    return LinkMemoryDAO()


@pytest.fixture
def lifecycle(dao):
    return LinkLifecycle(dao, clock=lambda: T0)


@pytest.fixture
def single_click_link(lifecycle):
    return lifecycle.create({'destinationUrl': 'https://example.com/once', 'expirationMode': 'single-click'})


@pytest.fixture
def one_hour_link(lifecycle):
    return lifecycle.create({'destinationUrl': 'https://example.com', 'expirationMode': 'one-hour'})


def make_link(**overrides) -> LinkModel:
    fields = {
        'id': 1,
        'short_id': 'abcdefghijkl',
        'destination_url': 'https://example.com',
        'expiration_mode': ExpirationMode.ONE_HOUR,
        'created_at': T0,
        'expires_at': T0 + timedelta(hours=1),
    }
    fields.update(overrides)
    return LinkModel(**fields)


# -------------------------------
# 1. evaluate_expiration()
# -------------------------------


def test_evaluate_active_time_link():
    assert evaluate_expiration(make_link(), T0 + timedelta(minutes=59)) == (False, False)


def test_evaluate_time_link_at_and_after_expiry():
    link = make_link()
    assert evaluate_expiration(link, T0 + timedelta(hours=1)) == (True, True)
    assert evaluate_expiration(link, T0 + timedelta(hours=2)) == (True, True)


def test_evaluate_click_link():
    link = make_link(expiration_mode=ExpirationMode.SINGLE_CLICK, expires_at=None, max_clicks=1)
    assert evaluate_expiration(link, T0) == (False, False)
    assert evaluate_expiration(link.evolve(click_count=1), T0) == (True, True)


def test_evaluate_latched_link_is_idempotent():
    """An already expired link never reports `changed` and is left untouched."""
    link = make_link(is_expired=True, click_count=3)

    for now in (T0, T0 + timedelta(days=1)):
        assert evaluate_expiration(link, now) == (True, False)

    assert link.click_count == 3
    assert link.destination_url == 'https://example.com'


def test_evaluate_latched_flag_wins_over_time():
    """A latched link stays expired even if its time limit is in the future."""
    assert evaluate_expiration(make_link(is_expired=True), T0) == (True, False)


# -------------------------------
# 2. Creation
# -------------------------------


@pytest.mark.parametrize(
    'mode, expires_at, max_clicks',
    [
        ('single-click', None, 1),
        ('one-hour', T0 + timedelta(seconds=3600), None),
        ('one-day', T0 + timedelta(seconds=86400), None),
    ],
)
def test_create(lifecycle, dao, mode, expires_at, max_clicks):
    link = lifecycle.create({'destinationUrl': 'https://example.com', 'expirationMode': mode})

    assert link.click_count == 0
    assert link.is_expired is False
    assert link.created_at == T0
    assert link.expires_at == expires_at
    assert link.max_clicks == max_clicks
    assert (link.expires_at is None) != (link.max_clicks is None)
    assert dao.get(link.short_id) == link


def test_create_with_invalid_payload(lifecycle, dao):
    with pytest.raises(ValidationError):
        lifecycle.create({'destinationUrl': 'nope', 'expirationMode': 'one-hour'})
    assert dao.list_all() == []


# -------------------------------
# 3. Visiting single-click links
# -------------------------------


def test_single_click_link_is_consumed_by_first_visit(lifecycle, dao, single_click_link):
    short_id = single_click_link.short_id

    assert lifecycle.visit(short_id) == VisitOutcome.redirect('https://example.com/once')
    stored = dao.get(short_id)
    assert stored.click_count == 1
    assert stored.is_expired is True

    for _ in range(3):
        assert lifecycle.visit(short_id) == VisitOutcome.expired()
    assert dao.get(short_id).click_count == 1


def test_visit_unknown_link(lifecycle, dao):
    assert lifecycle.visit('doesnotexist') == VisitOutcome.not_found()
    assert dao.list_all() == []


# -------------------------------
# 4. Visiting time-based links
# -------------------------------


def test_one_hour_example(lifecycle, dao, one_hour_link):
    """t0 + 1800s redirects, t0 + 3700s is expired and counts no click."""
    short_id = one_hour_link.short_id
    assert one_hour_link.expires_at == T0 + timedelta(seconds=3600)
    assert one_hour_link.max_clicks is None

    outcome = lifecycle.visit(short_id, now=T0 + timedelta(seconds=1800))
    assert outcome.kind is OutcomeKind.REDIRECT
    assert outcome.destination_url == 'https://example.com'
    assert dao.get(short_id).click_count == 1
    assert dao.get(short_id).is_expired is False

    outcome = lifecycle.visit(short_id, now=T0 + timedelta(seconds=3700))
    assert outcome.kind is OutcomeKind.EXPIRED
    assert dao.get(short_id).click_count == 1
    assert dao.get(short_id).is_expired is True


def test_time_link_counts_every_click(lifecycle, dao, one_hour_link):
    for minute in range(1, 6):
        assert lifecycle.visit(one_hour_link.short_id, now=T0 + timedelta(minutes=minute)).kind is OutcomeKind.REDIRECT
    assert dao.get(one_hour_link.short_id).click_count == 5


def test_time_link_expires_exactly_at_deadline(lifecycle, dao, one_hour_link):
    outcome = lifecycle.visit(one_hour_link.short_id, now=one_hour_link.expires_at)
    assert outcome == VisitOutcome.expired()
    assert dao.get(one_hour_link.short_id).click_count == 0


def test_expired_time_link_never_reactivates(lifecycle, one_hour_link):
    """Once latched, visiting with an earlier clock still reports expired."""
    lifecycle.visit(one_hour_link.short_id, now=T0 + timedelta(hours=2))
    assert lifecycle.visit(one_hour_link.short_id, now=T0).kind is OutcomeKind.EXPIRED


def test_visit_uses_injected_clock(dao):
    now = [T0]
    lifecycle = LinkLifecycle(dao, clock=lambda: now[0])
    link = lifecycle.create({'destinationUrl': 'https://example.com', 'expirationMode': 'one-day'})

    now[0] = T0 + timedelta(hours=23)
    assert lifecycle.visit(link.short_id).kind is OutcomeKind.REDIRECT
    now[0] = T0 + timedelta(hours=25)
    assert lifecycle.visit(link.short_id).kind is OutcomeKind.EXPIRED


# -------------------------------
# 5. Status checks
# -------------------------------


def test_status_of_active_link(lifecycle, one_hour_link):
    assert lifecycle.status(one_hour_link.short_id) == one_hour_link


def test_status_persists_time_expiry(lifecycle, dao, one_hour_link):
    link = lifecycle.status(one_hour_link.short_id, now=T0 + timedelta(hours=2))

    assert link.is_expired is True
    assert link.click_count == 0
    assert dao.get(one_hour_link.short_id).is_expired is True


def test_status_of_unknown_link(lifecycle):
    assert lifecycle.status('doesnotexist') is None


def test_status_after_single_click(lifecycle, single_click_link):
    lifecycle.visit(single_click_link.short_id)
    assert lifecycle.status(single_click_link.short_id).is_expired is True


# -------------------------------
# 6. Removal
# -------------------------------


@pytest.mark.parametrize('mode', ['single-click', 'one-hour', 'one-day'])
def test_remove_expires_link(lifecycle, dao, mode):
    """Removal expires a link whatever its mode, keeping clicks and destination."""
    link = lifecycle.create({'destinationUrl': 'https://example.com', 'expirationMode': mode})

    assert lifecycle.remove(link.short_id) is True

    assert lifecycle.visit(link.short_id) == VisitOutcome.expired()
    status = lifecycle.status(link.short_id)
    assert status.is_expired is True
    assert status.destination_url == 'https://example.com'
    assert status.click_count == 0


def test_remove_keeps_click_count(lifecycle, one_hour_link):
    lifecycle.visit(one_hour_link.short_id)
    lifecycle.visit(one_hour_link.short_id)

    lifecycle.remove(one_hour_link.short_id)

    assert lifecycle.status(one_hour_link.short_id).click_count == 2


def test_remove_is_repeatable(lifecycle, one_hour_link):
    assert lifecycle.remove(one_hour_link.short_id) is True
    assert lifecycle.remove(one_hour_link.short_id) is True


def test_remove_unknown_link(lifecycle, dao):
    assert lifecycle.remove('doesnotexist') is False
    assert dao.get('doesnotexist') is None
    assert dao.list_all() == []


def test_list_links(lifecycle, single_click_link, one_hour_link):
    assert sorted(link.short_id for link in lifecycle.list_links()) == sorted([single_click_link.short_id, one_hour_link.short_id])


# -------------------------------
# 7. Concurrency
# -------------------------------


def test_concurrent_visits_redirect_once(lifecycle, dao, single_click_link):
    """N simultaneous visits: one redirect, N-1 expired, click_count == 1."""
    visitors = 32
    barrier = threading.Barrier(visitors)
    outcomes = []
    outcomes_lock = threading.Lock()

    def visit():
        barrier.wait()
        outcome = lifecycle.visit(single_click_link.short_id)
        with outcomes_lock:
            outcomes.append(outcome.kind)

    threads = [threading.Thread(target=visit) for _ in range(visitors)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count(OutcomeKind.REDIRECT) == 1
    assert outcomes.count(OutcomeKind.EXPIRED) == visitors - 1
    assert dao.get(single_click_link.short_id).click_count == 1


def test_concurrent_visits_count_every_click(lifecycle, dao, one_hour_link):
    visitors = 16
    barrier = threading.Barrier(visitors)

    def visit():
        barrier.wait()
        for _ in range(10):
            lifecycle.visit(one_hour_link.short_id, now=T0 + timedelta(minutes=1))

    threads = [threading.Thread(target=visit) for _ in range(visitors)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert dao.get(one_hour_link.short_id).click_count == visitors * 10


def test_visit_outcome_follows_committed_attempt():
    """When the store retries a transition, the outcome of the last attempt is reported."""
    fresh = make_link(expiration_mode=ExpirationMode.SINGLE_CLICK, expires_at=None, max_clicks=1)
    consumed = fresh.evolve(click_count=1, is_expired=True)

    class RetryingDAO(LinkMemoryDAO):
        def mutate(self, short_id, fn):
            fn(fresh)  # first attempt loses the race
            return fn(consumed)

    lifecycle = LinkLifecycle(RetryingDAO(), clock=lambda: T0)
    assert lifecycle.visit(fresh.short_id) == VisitOutcome.expired()
