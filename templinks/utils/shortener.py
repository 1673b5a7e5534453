"""Short identifier generation utility

This module provides a helper for generating public link identifiers.
Identifiers are drawn from a cryptographically secure random source so
that they cannot be guessed or enumerated from one another.

Functions:
    generate_short_id(length=12):
        Generate a random URL-safe identifier.

Example:
    >>> from templinks.utils import generate_short_id
    >>> generate_short_id()
    'V1StGXR8_Z5j'
"""

import secrets
import string

from templinks.constants import Limits


ALPHABET = string.ascii_letters + string.digits + '_-'
BASE = len(ALPHABET)  # 64 symbols: 26 lowercase + 26 uppercase + 10 digits + '_' + '-'


def generate_short_id(length: int = Limits.SHORT_ID_LENGTH) -> str:
    """Generate a random, fixed-length, URL-safe identifier.

    Args:
        length (int, optional):
            Number of characters in the identifier. Defaults to 12.
            With 64 symbols a 12 character identifier spans 2^72 values,
            which keeps collisions negligible at any realistic scale.

    Returns:
        str: A random identifier over [A-Za-z0-9_-].

    Raises:
        TypeError: If length is not an integer.
        ValueError: If length is below the minimum identifier length.
    """
    if not isinstance(length, int):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < Limits.SHORT_ID_LENGTH:
        raise ValueError(f'Length must be at least {Limits.SHORT_ID_LENGTH} (given value: {length}).')

    return ''.join(secrets.choice(ALPHABET) for _ in range(length))
