"""Numeric matrix cells: integers, CHAR, floats, decimals, boolean numerics.

Every factory here takes the *source* kind (``None`` meaning an unbounded
Python ``int``), the *target* kind and the overflow policy, and returns a
``value → value | Failure`` function.  The engine never sees an exception from
these cells; range loss is reported with the ``OVERFLOW`` marker.

Integer targets::

    widening (source range ⊆ target range)  → box(int(v)), no check
    checked narrowing                       → OVERFLOW if out of range
    unchecked narrowing                     → wrap modulo 2**bits
    float/decimal source                    → round half to even first;
                                              NaN/±inf fail in both modes

Float targets follow IEEE-754 rounding; float64→float32 saturates to ±inf
unless the profile is checked.  Decimal targets are exact for integers and
use the shortest round-trip repr for floats; magnitudes beyond the decimal
range always fail.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Callable, Optional

import numpy as np

from ..core import Converter, identity, invalid
from ..errors import Failure, OVERFLOW
from ..kinds import (
    DECIMAL_MAX,
    FLOAT_KINDS,
    INTEGER_KINDS,
    KIND_INFO,
    Kind,
)

# ─────────────────────────────────────────────────────────────────────────────
# Source-side extraction: value → Python int | Failure
# ─────────────────────────────────────────────────────────────────────────────


def _from_float(value: Any) -> Any:
    x = float(value)
    if not math.isfinite(x):
        return OVERFLOW
    return round(x)


def _from_decimal(value: Decimal) -> Any:
    if not value.is_finite():
        return OVERFLOW
    return round(value)


def integer_extractor(kind: Optional[Kind]) -> Callable[[Any], Any]:
    """Return ``value → int`` for a source of *kind* (``None``: Python int).

    Floating and decimal sources round half to even; non-finite values yield
    ``OVERFLOW``.
    """
    if kind is Kind.CHAR:
        return ord
    if kind is Kind.BOOLEAN:
        return lambda value: 1 if value else 0
    if kind in FLOAT_KINDS:
        return _from_float
    if kind is Kind.DECIMAL:
        return _from_decimal
    return int


def _source_range(kind: Optional[Kind]) -> tuple[Optional[int], Optional[int]]:
    if kind is None:
        return None, None
    info = KIND_INFO[kind]
    return info.min, info.max


def make_integer_converter(source: Optional[Kind], target: Kind, checked: bool) -> Converter:
    """Build a cell converting *source* to the integral *target* (CHAR included)."""
    info = KIND_INFO[target]
    box, lo, hi = info.box, info.min, info.max
    extract = integer_extractor(source)
    src_lo, src_hi = _source_range(source)

    if src_lo is not None and lo <= src_lo and src_hi <= hi:
        def widen(value: Any) -> Any:
            return box(extract(value))

        return widen

    if checked:
        def narrow_checked(value: Any) -> Any:
            n = extract(value)
            if isinstance(n, Failure):
                return n
            if n < lo or n > hi:
                return OVERFLOW
            return box(n)

        return narrow_checked

    span = info.span

    def narrow_wrapping(value: Any) -> Any:
        n = extract(value)
        if isinstance(n, Failure):
            return n
        if n < lo or n > hi:
            n = lo + (n - lo) % span
        return box(n)

    return narrow_wrapping


# ─────────────────────────────────────────────────────────────────────────────
# Float targets
# ─────────────────────────────────────────────────────────────────────────────


def to_float32(x: float, checked: bool) -> Any:
    """Round a Python float to float32; a finite value that saturates to ±inf
    is ``OVERFLOW`` when *checked*."""
    with np.errstate(over="ignore"):
        result = np.float32(x)
    if checked and math.isinf(result) and math.isfinite(x):
        return OVERFLOW
    return result


def _int_to_float(value: Any) -> Any:
    try:
        return float(value)
    except OverflowError:
        return OVERFLOW


def _decimal_to_float_checked(value: Decimal) -> Any:
    x = float(value)
    if math.isinf(x) and value.is_finite():
        return OVERFLOW
    return x


def make_float_converter(source: Optional[Kind], target: Kind, checked: bool) -> Converter:
    """Build a cell converting *source* to FLOAT32 or FLOAT64."""
    as_float = _int_to_float if source is None else float
    if source is Kind.DECIMAL and checked:
        as_float = _decimal_to_float_checked

    if target is Kind.FLOAT64:
        return as_float

    def float32(value: Any) -> Any:
        x = as_float(value)
        if isinstance(x, Failure):
            return x
        return to_float32(x, checked)

    return float32


# ─────────────────────────────────────────────────────────────────────────────
# Decimal targets
# ─────────────────────────────────────────────────────────────────────────────


def _bounded_decimal(d: Decimal) -> Any:
    if d.copy_abs() > DECIMAL_MAX:
        return OVERFLOW
    return d


def make_decimal_converter(source: Optional[Kind]) -> Converter:
    """Build a cell converting *source* to ``Decimal``.

    Out-of-range magnitudes fail under every overflow policy.
    """
    if source in INTEGER_KINDS:
        return lambda value: Decimal(int(value))
    if source is None:
        return lambda value: _bounded_decimal(Decimal(value))

    def from_float(value: Any) -> Any:
        if not math.isfinite(value):
            return OVERFLOW
        # str() of a float/float32 is its shortest round-trip representation.
        return _bounded_decimal(Decimal(str(value)))

    return from_float


# ─────────────────────────────────────────────────────────────────────────────
# Boolean numerics (installed only when the profile asks for them)
# ─────────────────────────────────────────────────────────────────────────────


def make_bool_to_numeric(target: Kind) -> Converter:
    box = KIND_INFO[target].box
    one, zero = box(1), box(0)
    return lambda value: one if value else zero


def numeric_to_bool(value: Any) -> bool:
    return bool(value != 0)


# ─────────────────────────────────────────────────────────────────────────────
# Dispatch
# ─────────────────────────────────────────────────────────────────────────────


def numeric_converter(source: Kind, target: Kind, checked: bool) -> Converter:
    """Matrix cell for a numeric/CHAR pair.  ``invalid`` for CHAR ↔ non-integer."""
    if source is target:
        return identity
    if Kind.CHAR in (source, target):
        other = target if source is Kind.CHAR else source
        if other not in INTEGER_KINDS:
            return invalid
    if KIND_INFO[target].integral:
        return make_integer_converter(source, target, checked)
    if target in FLOAT_KINDS:
        return make_float_converter(source, target, checked)
    if target is Kind.DECIMAL:
        return make_decimal_converter(source)
    return invalid
