"""Validation of link creation requests

Functions:
    validate_link_request(payload: dict) -> tuple[str, ExpirationMode]
        Check a creation payload and return its normalized fields.

Accepted payload keys are the camelCase names used by the HTTP API
(`destinationUrl`, `expirationMode`) or their snake_case equivalents.

Example:
    >>> validate_link_request({'destinationUrl': ' https://example.com ', 'expirationMode': '24-hours'})
    ('https://example.com', <ExpirationMode.ONE_DAY: 'one-day'>)

    >>> validate_link_request({'destinationUrl': 'example', 'expirationMode': '2-days'})
    Traceback (most recent call last):
        ...
    templinks.exceptions.ValidationError: Invalid input for fields: 'destinationUrl', 'expirationMode'
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from templinks.exceptions import ValidationError
from templinks.models import ExpirationMode


URL_REQUIRED = 'Please enter a URL to shorten'
URL_INVALID = 'Please enter a valid URL'
MODE_INVALID = "Expected one of 'single-click', 'one-hour', 'one-day'"

# Whitespace and ASCII control characters never appear in a stored URL
URL_PATTERN = r'^[^\x00-\x20\x7f]+$'

# Payload field name -> name reported in error messages
FIELD_NAMES = {
    'destination_url': 'destinationUrl',
    'expiration_mode': 'expirationMode',
}

_URL_REQUIRED_ERRORS = frozenset({'missing', 'string_type', 'string_too_short'})

_http_url = TypeAdapter(HttpUrl)


class LinkRequest(BaseModel):
    """Creation request body. The URL is kept as given (trimmed), not normalized."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    destination_url: str = Field(min_length=1, pattern=URL_PATTERN)
    expiration_mode: ExpirationMode

    @field_validator('destination_url')
    @classmethod
    def check_http_url(cls, value: str) -> str:
        try:
            _http_url.validate_python(value)
        except PydanticValidationError:
            raise ValueError(URL_INVALID) from None
        return value

    @field_validator('expiration_mode', mode='before')
    @classmethod
    def resolve_legacy_mode(cls, value: Any) -> Any:
        return ExpirationMode.parse(value) if isinstance(value, str) else value


def _field(payload: dict[str, Any], camel: str, snake: str) -> Any:
    return payload[camel] if camel in payload else payload.get(snake)


def _error_message(field: str, error_type: str) -> str:
    if field == 'destination_url':
        return URL_REQUIRED if error_type in _URL_REQUIRED_ERRORS else URL_INVALID
    return MODE_INVALID


def validate_link_request(payload: dict[str, Any]) -> tuple[str, ExpirationMode]:
    """Validate a creation payload

    Returns:
        tuple[str, ExpirationMode]: trimmed destination URL and parsed mode.

    Raises:
        ValidationError:
            With per-field messages if the URL is missing/malformed or the
            mode isn't recognized.
    """
    if not isinstance(payload, dict):
        raise ValidationError({'body': ['Expected a JSON object']})

    try:
        request = LinkRequest.model_validate(
            {
                'destination_url': _field(payload, 'destinationUrl', 'destination_url'),
                'expiration_mode': _field(payload, 'expirationMode', 'expiration_mode'),
            }
        )
    except PydanticValidationError as e:
        errors: dict[str, list[str]] = {}
        for error in e.errors():
            field = str(error['loc'][0])
            message = _error_message(field, error['type'])
            messages = errors.setdefault(FIELD_NAMES[field], [])
            if message not in messages:
                messages.append(message)
        raise ValidationError(errors) from e

    return request.destination_url, request.expiration_mode
