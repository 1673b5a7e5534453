"""Unit tests for link creation request validation.

Test coverage includes:

1. Valid payloads (camelCase, snake_case, legacy mode aliases, URL trimming)
2. Invalid destination URLs
3. Invalid expiration modes
4. Field-level error reporting
"""

import pytest

from templinks.exceptions import ValidationError
from templinks.models import ExpirationMode
from templinks.validation import MODE_INVALID, URL_INVALID, URL_REQUIRED, validate_link_request


# -------------------------------
# 1. Valid payloads
# -------------------------------


def test_valid_camel_case_payload():
    result = validate_link_request({'destinationUrl': 'https://example.com/page?q=1', 'expirationMode': 'one-hour'})
    assert result == ('https://example.com/page?q=1', ExpirationMode.ONE_HOUR)


def test_valid_snake_case_payload():
    result = validate_link_request({'destination_url': 'http://example.com', 'expiration_mode': 'single-click'})
    assert result == ('http://example.com', ExpirationMode.SINGLE_CLICK)


def test_url_is_trimmed_and_legacy_mode_accepted():
    result = validate_link_request({'destinationUrl': '  https://example.com  ', 'expirationMode': '24-hours'})
    assert result == ('https://example.com', ExpirationMode.ONE_DAY)


# -------------------------------
# 2. Invalid destination URLs
# -------------------------------


@pytest.mark.parametrize('url', [None, '', '   '])
def test_missing_url(url):
    with pytest.raises(ValidationError) as exc_info:
        validate_link_request({'destinationUrl': url, 'expirationMode': 'one-hour'})
    assert exc_info.value.errors == {'destinationUrl': [URL_REQUIRED]}


@pytest.mark.parametrize(
    'url',
    [
        'example.com',
        'ftp://example.com',
        'https://',
        'not a url',
        'https://exa mple.com',
        'https://example.com/a b',
        'https://example.com/a\r\nSet-Cookie:x=1',
        'https://exa\tmple.com/',
        'https://example.com/\x00',
        'https://example.com/\x7f',
        42,
    ],
)
def test_malformed_url(url):
    with pytest.raises(ValidationError) as exc_info:
        validate_link_request({'destinationUrl': url, 'expirationMode': 'one-hour'})
    expected = [URL_REQUIRED] if not isinstance(url, str) else [URL_INVALID]
    assert exc_info.value.errors == {'destinationUrl': expected}


# -------------------------------
# 3. Invalid expiration modes
# -------------------------------


@pytest.mark.parametrize('mode', [None, '', '2-days', ['one-hour'], 3600])
def test_unknown_mode(mode):
    with pytest.raises(ValidationError) as exc_info:
        validate_link_request({'destinationUrl': 'https://example.com', 'expirationMode': mode})
    assert exc_info.value.errors == {'expirationMode': [MODE_INVALID]}


# -------------------------------
# 4. Field-level error reporting
# -------------------------------


def test_all_field_errors_are_reported():
    with pytest.raises(ValidationError, match="Invalid input for fields: 'destinationUrl', 'expirationMode'") as exc_info:
        validate_link_request({})
    assert set(exc_info.value.errors) == {'destinationUrl', 'expirationMode'}


def test_non_object_payload():
    with pytest.raises(ValidationError) as exc_info:
        validate_link_request(['https://example.com'])
    assert exc_info.value.errors == {'body': ['Expected a JSON object']}
