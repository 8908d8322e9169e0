"""Opaque token generation.

Tokens serve as the placeholder CSRF value injected into the form at page
load and as submission ids. They come from the ``random`` module and are
not suitable as a security boundary.
"""

import random
from typing import Optional

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

# A float's base-36 expansion is cut to 13 digits after the radix point.
TOKEN_PART_DIGITS = 13


def _base36_fraction(value: float, digits: int = TOKEN_PART_DIGITS) -> str:
    """Render the fractional part of ``value`` in base 36, without the leading ``0.``.

    Examples:
        >>> _base36_fraction(0.5)
        'i'
        >>> _base36_fraction(0.0)
        ''
    """
    out = []
    frac = value - int(value)
    while frac > 0 and len(out) < digits:
        frac *= 36
        digit = int(frac)
        out.append(BASE36_ALPHABET[digit])
        frac -= digit
    return "".join(out)


def generate_token(rng: Optional[random.Random] = None) -> str:
    """Generate a short opaque token from two random base-36 strings.

    Args:
        rng: Random source; defaults to the module-level generator

    Examples:
        >>> token = generate_token(random.Random(42))
        >>> token.isalnum() and token == token.lower()
        True
    """
    source = rng if rng is not None else random
    return _base36_fraction(source.random()) + _base36_fraction(source.random())


__all__ = [
    "generate_token",
]
