# radixcrack/transforms.py
# Residue generator sets fed to the orbit oracle.
#
# The search treats these purely as residue -> residue callables. The
# 96-class set factors a residue as 24*h2 + 8*d + l with h2 in Z4, d in Z3,
# l in Z8 and steps one coordinate at a time.

from __future__ import annotations
from functools import partial
from typing import Callable, Tuple

Generator = Callable[[int], int]

CLASS_RADIX = 96


# ---------- 96-class coordinates ----------

def class_components(r: int) -> Tuple[int, int, int]:
    h2, rest = divmod(r % CLASS_RADIX, 24)
    d, l = divmod(rest, 8)
    return h2, d, l


def class_index(h2: int, d: int, l: int) -> int:
    return 24 * (h2 % 4) + 8 * (d % 3) + (l % 8)


def rotate_h2(r: int) -> int:
    """R: h2 -> h2 + 1 (mod 4)."""
    h2, d, l = class_components(r)
    return class_index(h2 + 1, d, l)


def step_d(r: int) -> int:
    """D: d -> d + 1 (mod 3)."""
    h2, d, l = class_components(r)
    return class_index(h2, d + 1, l)


def twist_l(r: int) -> int:
    """T: l -> l + 1 (mod 8)."""
    h2, d, l = class_components(r)
    return class_index(h2, d, l + 1)


def mirror_d(r: int) -> int:
    """M: swaps d=1 and d=2, fixes d=0."""
    h2, d, l = class_components(r)
    return class_index(h2, 0 if d == 0 else 3 - d, l)


def class_generators() -> Tuple[Generator, ...]:
    return (rotate_h2, step_d, twist_l, mirror_d)


# ---------- generic cyclic set ----------

def _shift(radix: int, r: int) -> int:
    return (r + 1) % radix


def _negate(radix: int, r: int) -> int:
    return (-r) % radix


def cyclic_generators(radix: int) -> Tuple[Generator, ...]:
    """x -> x+1 and x -> -x over Z/radix. Module-level partials so they pickle."""
    return (partial(_shift, radix), partial(_negate, radix))


def default_generators(radix: int) -> Tuple[Generator, ...]:
    if radix == CLASS_RADIX:
        return class_generators()
    return cyclic_generators(radix)


def generator_name(g: Generator) -> str:
    if isinstance(g, partial):
        return g.func.__name__.lstrip("_")
    return getattr(g, "__name__", repr(g))
