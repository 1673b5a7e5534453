"""Temporary link lifecycle: expiration policy and the visit transition

Every link moves through two states, Active -> Expired, and never back.
It expires when its time limit passes (one-hour / one-day links), when its
click allowance is used up (single-click links), or when it is removed.

Expiration is evaluated lazily whenever a link is read or visited. There is
no background sweeper.

Each operation below reads, decides and writes through a single
`LinkBaseDAO.mutate()` call, so concurrent requests for the same link are
linearized by the store. Two simultaneous visits to a single-click link
therefore yield one redirect and one expired outcome.

Functions:
    evaluate_expiration(link, now) -> tuple[bool, bool]
        Decide whether a link is expired without persisting anything.

Classes:
    LinkLifecycle:
        Create, inspect, visit and remove links against a link store.

Example:
    >>> from templinks.dao import LinkMemoryDAO
    >>> lifecycle = LinkLifecycle(LinkMemoryDAO())
    >>> link = lifecycle.create({'destinationUrl': 'https://example.com', 'expirationMode': 'single-click'})
    >>> lifecycle.visit(link.short_id)
    VisitOutcome(kind=<OutcomeKind.REDIRECT: 'redirect'>, destination_url='https://example.com')
    >>> lifecycle.visit(link.short_id)
    VisitOutcome(kind=<OutcomeKind.EXPIRED: 'expired'>, destination_url=None)
"""

import logging
from datetime import datetime
from typing import Any

from templinks.dao.base import LinkBaseDAO
from templinks.models import LinkModel, VisitOutcome
from templinks.types import Clock
from templinks.utils.clock import utc_now
from templinks.validation import validate_link_request


logger = logging.getLogger(__name__)


def evaluate_expiration(link: LinkModel, now: datetime) -> tuple[bool, bool]:
    """Decide whether a link should be considered expired at `now`

    A link is expired if its flag is already latched, if `now` has reached
    `expires_at`, or if `click_count` has reached `max_clicks`.

    Args:
        link (LinkModel):
            Stored link record.
        now (datetime):
            Current time (aware UTC).

    Returns:
        tuple[bool, bool]:
            (is_expired, changed). `changed` is True only when the stored flag
            is still False but the computed value is True, i.e. the caller
            must persist the flip.
    """
    if link.is_expired:
        return True, False

    time_exhausted = link.expires_at is not None and now >= link.expires_at
    clicks_exhausted = link.max_clicks is not None and link.click_count >= link.max_clicks
    is_expired = time_exhausted or clicks_exhausted
    return is_expired, is_expired


class LinkLifecycle:
    """Expiration policy and click accounting on top of a link store

    Attributes:
        dao (LinkBaseDAO):
            Link store holding the records.
        clock (Clock):
            Zero-argument callable returning the current aware UTC datetime.
    """

    def __init__(self, dao: LinkBaseDAO, clock: Clock = utc_now):
        self.dao = dao
        self.clock = clock

    def create(self, payload: dict[str, Any]) -> LinkModel:
        """Validate a creation request and store a fresh link

        Raises:
            ValidationError: If the payload is malformed.
        """
        destination_url, expiration_mode = validate_link_request(payload)
        link = self.dao.create(destination_url, expiration_mode, now=self.clock())
        logger.info(
            'Created temporary link.',
            extra={'shortId': link.short_id, 'expirationMode': str(expiration_mode)},
        )
        return link

    def status(self, short_id: str, now: datetime | None = None) -> LinkModel | None:
        """Look up a link with its expiry flag brought up to date

        Returns:
            LinkModel | None: the (possibly just expired) link, None if unknown.
        """
        now = now or self.clock()

        def refresh(link: LinkModel) -> LinkModel:
            _, changed = evaluate_expiration(link, now)
            return link.evolve(is_expired=True) if changed else link

        link = self.dao.get(short_id)
        if link is None:
            return None
        if not evaluate_expiration(link, now)[1]:
            return link

        # Persist the flip. Re-evaluated inside mutate() against the latest record.
        link = self.dao.mutate(short_id, refresh)
        logger.info('Temporary link expired.', extra={'shortId': short_id})
        return link

    def visit(self, short_id: str, now: datetime | None = None) -> VisitOutcome:
        """Follow a link, consuming a click if it is still active

        Steps (one atomic mutation of the record):
            1. Unknown short id -> NOT_FOUND.
            2. Already or newly expired -> latch the flag, EXPIRED. No click is counted.
            3. Otherwise count the click, latch the flag if the click allowance
               is now used up, REDIRECT to the destination.
        """
        now = now or self.clock()
        outcome = VisitOutcome.not_found()

        def transition(link: LinkModel) -> LinkModel:
            nonlocal outcome

            is_expired, changed = evaluate_expiration(link, now)
            if is_expired:
                outcome = VisitOutcome.expired()
                return link.evolve(is_expired=True) if changed else link

            click_count = link.click_count + 1
            outcome = VisitOutcome.redirect(link.destination_url)
            return link.evolve(
                click_count=click_count,
                is_expired=link.max_clicks is not None and click_count >= link.max_clicks,
            )

        # mutate() may retry `transition`; `outcome` reflects the committed attempt
        if self.dao.mutate(short_id, transition) is None:
            logger.debug('Visited unknown link.', extra={'shortId': short_id})
            return VisitOutcome.not_found()

        logger.debug('Visited link.', extra={'shortId': short_id, 'outcome': str(outcome.kind)})
        return outcome

    def remove(self, short_id: str) -> bool:
        """Soft-delete a link by latching its expiry flag

        The record stays queryable (reported as expired). Unknown short ids are
        left alone.

        Returns:
            bool: True if the link existed, False otherwise.
        """
        removed = self.dao.update(short_id, is_expired=True) is not None
        if removed:
            logger.info('Removed temporary link.', extra={'shortId': short_id})
        return removed

    def list_links(self) -> list[LinkModel]:
        return self.dao.list_all()
