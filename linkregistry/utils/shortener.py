"""Shortcode generation utility

This module provides a helper function for generating random, fixed-length
shortcodes drawn from the Base62 alphabet.

Functions:
    generate_shortcode(length=6, alphabet=ALPHABET):
        Generate a random string suitable for use as a URL slug.

Example:
    >>> from linkregistry.utils import generate_shortcode
    >>> generate_shortcode()
    'q7FemO'
"""

import secrets

from linkregistry.constants import Defaults


ALPHABET = Defaults.ALPHABET
BASE = len(ALPHABET)  # 26 uppercase + 26 lowercase + 10 digits


def generate_shortcode(length: int = Defaults.SHORTCODE_LENGTH, alphabet: str = ALPHABET) -> str:
    """Generate a random shortcode.

    Every character is drawn independently and uniformly from `alphabet`
    using the `secrets` CSPRNG, so codes are not guessable from one another.

    Args:
        length (int, optional):
            Number of characters in the resulting shortcode.
            Defaults to 6.

        alphabet (str, optional):
            Characters to draw from.
            Defaults to Base62 [A-Za-z0-9].

    Returns:
        str: A random shortcode of exactly `length` characters.

    NOTE:
        - Uniqueness is NOT guaranteed. Callers must check candidates against
          the data store and retry on collision.
        - With 62**6 (~5.7e10) possible codes collisions are rare until the
          store holds a sizeable fraction of the space.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    if not isinstance(alphabet, str):
        raise TypeError(f'Alphabet must be of type string (given type: {type(alphabet)}).')
    if not alphabet:
        raise ValueError('Alphabet must be a non-empty string.')

    return ''.join(secrets.choice(alphabet) for _ in range(length))
