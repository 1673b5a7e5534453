"""Temporary link data model

Classes:
    ExpirationMode:
        Policy selecting how a link becomes invalid (single click, one hour, one day).
    LinkModel:
        Immutable snapshot of a stored temporary link.
    OutcomeKind:
        Kind of result produced by visiting a link.
    VisitOutcome:
        Result of a visit attempt (redirect, expired or not found).

Example:
    >>> from datetime import datetime, UTC
    >>> mode = ExpirationMode.parse('1-hour')
    >>> mode
    <ExpirationMode.ONE_HOUR: 'one-hour'>
    >>> mode.limits(datetime(2025, 1, 1, tzinfo=UTC))
    (datetime.datetime(2025, 1, 1, 1, 0, tzinfo=datetime.timezone.utc), None)
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, UTC
from enum import StrEnum
from typing import Any

from templinks.constants import TTL, Limits


class ExpirationMode(StrEnum):
    SINGLE_CLICK = 'single-click'
    ONE_HOUR = 'one-hour'
    ONE_DAY = 'one-day'

    @classmethod
    def parse(cls, value: str) -> 'ExpirationMode':
        """Resolve a canonical mode value or one of its legacy aliases

        Raises:
            ValueError: If the value names no known mode.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(_LEGACY_ALIASES.get(value, value))
        except ValueError:
            raise ValueError(f'Unknown expiration mode: {value!r}') from None

    def limits(self, created_at: datetime) -> tuple[datetime | None, int | None]:
        """Return (expires_at, max_clicks) for a link created at `created_at`

        Exactly one element of the tuple is set.
        """
        if self is ExpirationMode.SINGLE_CLICK:
            return None, Limits.SINGLE_CLICK_MAX_CLICKS
        if self is ExpirationMode.ONE_HOUR:
            return created_at + timedelta(seconds=TTL.ONE_HOUR), None
        return created_at + timedelta(seconds=TTL.ONE_DAY), None


_LEGACY_ALIASES = {
    '1-click': ExpirationMode.SINGLE_CLICK.value,
    '1-hour': ExpirationMode.ONE_HOUR.value,
    '24-hours': ExpirationMode.ONE_DAY.value,
}


def _isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.astimezone(UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class LinkModel:
    """Represent a temporary redirect link.

    Attributes:
        id (int):
            Store-local sequence number (internal ordering only).
        short_id (str):
            Public opaque identifier of the link.
        destination_url (str):
            Absolute URL the link redirects to.
        expiration_mode (ExpirationMode):
            Policy the link was created with.
        created_at (datetime):
            Creation timestamp (UTC).
        expires_at (datetime | None):
            Absolute expiry for time-based modes, None for single-click links.
        max_clicks (int | None):
            Click allowance for single-click links, None for time-based modes.
        click_count (int):
            Number of successful redirects so far.
        is_expired (bool):
            Sticky expiry flag. Once True it never reverts.

    Example:
        >>> link = LinkModel(
        ...     id=1,
        ...     short_id='V1StGXR8_Z5j',
        ...     destination_url='https://example.com',
        ...     expiration_mode=ExpirationMode.SINGLE_CLICK,
        ...     created_at=datetime(2025, 1, 1, tzinfo=UTC),
        ...     max_clicks=1,
        ... )
        >>> link.click_count, link.is_expired
        (0, False)
    """

    id: int
    short_id: str
    destination_url: str
    expiration_mode: ExpirationMode
    created_at: datetime
    expires_at: datetime | None = None
    max_clicks: int | None = None
    click_count: int = 0
    is_expired: bool = False

    # Fields which may change after creation
    MUTABLE_FIELDS = frozenset({'click_count', 'is_expired'})

    def evolve(self, **changes: Any) -> 'LinkModel':
        """Return a copy with the given mutable fields replaced

        Raises:
            ValueError: If an immutable or unknown field is given.
        """
        illegal = set(changes) - self.MUTABLE_FIELDS
        if illegal:
            names = ', '.join(sorted(illegal))
            raise ValueError(f'Cannot update immutable link fields: {names}')
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'shortId': self.short_id,
            'destinationUrl': self.destination_url,
            'expirationMode': str(self.expiration_mode),
            'createdAt': _isoformat(self.created_at),
            'expiresAt': _isoformat(self.expires_at),
            'clickCount': self.click_count,
            'maxClicks': self.max_clicks,
            'isExpired': self.is_expired,
        }


class OutcomeKind(StrEnum):
    REDIRECT = 'redirect'
    EXPIRED = 'expired'
    NOT_FOUND = 'not_found'


@dataclass(frozen=True)
class VisitOutcome:
    """Result of visiting a link. `destination_url` is only set for redirects."""

    kind: OutcomeKind
    destination_url: str | None = None

    @classmethod
    def redirect(cls, destination_url: str) -> 'VisitOutcome':
        return cls(OutcomeKind.REDIRECT, destination_url)

    @classmethod
    def expired(cls) -> 'VisitOutcome':
        return cls(OutcomeKind.EXPIRED)

    @classmethod
    def not_found(cls) -> 'VisitOutcome':
        return cls(OutcomeKind.NOT_FOUND)
