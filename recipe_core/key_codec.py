#!/usr/bin/env python3
"""Base-64 positional encoding used to synthesize short index keys."""

KEY_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-="
BASE = len(KEY_CHARS)

_DIGITS = {ch: i for i, ch in enumerate(KEY_CHARS)}


def encode(n: int) -> str:
    """Return the short key for a non-negative integer.

    ``encode(0)`` is ``"A"``; larger values are written most-significant digit
    first, so ``encode(64)`` is ``"BA"``.
    """
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise ValueError(f"key index must be a non-negative integer, got {n!r}")
    if n == 0:
        return KEY_CHARS[0]
    out = []
    while n > 0:
        n, digit = divmod(n, BASE)
        out.append(KEY_CHARS[digit])
    return "".join(reversed(out))


def decode(key: str) -> int:
    """Inverse of :func:`encode` for keys it can produce."""
    if not isinstance(key, str) or not key:
        raise ValueError(f"not a key: {key!r}")
    # "A" is the zero digit; only the single-character key may start with it
    if len(key) > 1 and key[0] == KEY_CHARS[0]:
        raise ValueError(f"non-canonical key: {key!r}")
    n = 0
    for ch in key:
        try:
            n = n * BASE + _DIGITS[ch]
        except KeyError:
            raise ValueError(f"invalid key character {ch!r} in {key!r}") from None
    return n
