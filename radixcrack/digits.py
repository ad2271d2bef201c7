# radixcrack/digits.py
# Fixed-radix digit decomposition (least-significant digit first).

from __future__ import annotations
from typing import Iterable, List

import gmpy2
from gmpy2 import mpz

from .errors import ConfigurationError

_MPZ = type(mpz(0))


def _check_radix(radix: int) -> int:
    if isinstance(radix, bool) or not isinstance(radix, int) or radix < 2:
        raise ConfigurationError(f"radix must be an integer >= 2, got {radix!r}")
    return radix


def decompose(n: int, radix: int = 96) -> List[int]:
    """Digits of n in base `radix`, least significant first. decompose(0) == [0]."""
    _check_radix(radix)
    if isinstance(n, bool) or not isinstance(n, (int, _MPZ)):
        raise TypeError(f"n must be an integer, got {type(n).__name__}")
    if n < 0:
        raise ValueError("n must be non-negative")
    if n == 0:
        return [0]
    x = mpz(n)
    out: List[int] = []
    while x:
        x, d = gmpy2.f_divmod(x, radix)
        out.append(int(d))
    return out


def reconstruct(digits: Iterable[int], radix: int = 96) -> int:
    """Exact inverse of decompose(): sum(d_i * radix**i)."""
    _check_radix(radix)
    acc = mpz(0)
    for d in reversed(list(digits)):
        if not 0 <= d < radix:
            raise ValueError(f"digit {d} out of range for radix {radix}")
        acc = acc * radix + d
    return int(acc)
