"""Programmatic construction of the Kind × Kind cell table.

Cells are generated from kind metadata rather than written out pair by pair::

    diagonal                 identity (OBJECT / ENUM excluded)
    numeric × numeric, CHAR  numeric.numeric_converter (policy-specific)
    BOOLEAN ↔ numeric        only with boolean_numerics
    * → STRING               text.formatter_for(source)
    STRING → *               text.parser_for(target) (policy-specific)
    everything else          invalid
"""

from __future__ import annotations

from ..core import Converter, identity, invalid
from ..kinds import KIND_COUNT, NUMERIC_KINDS, Kind
from ..policy import PolicyProfile
from .numeric import make_bool_to_numeric, numeric_converter, numeric_to_bool
from .text import formatter_for, parser_for

_PRIMITIVE_KINDS = tuple(k for k in Kind if k not in (Kind.OBJECT, Kind.ENUM))
_ARITHMETIC_KINDS = NUMERIC_KINDS + (Kind.CHAR,)


def build_cells(profile: PolicyProfile) -> list[list[Converter]]:
    """Return a fully populated ``KIND_COUNT × KIND_COUNT`` table for *profile*."""
    cells: list[list[Converter]] = [[invalid] * KIND_COUNT for _ in range(KIND_COUNT)]

    for kind in _PRIMITIVE_KINDS:
        cells[kind][kind] = identity

    for src in _ARITHMETIC_KINDS:
        for dst in _ARITHMETIC_KINDS:
            cells[src][dst] = numeric_converter(src, dst, profile.overflow_checked)

    if profile.boolean_numerics:
        for kind in NUMERIC_KINDS:
            cells[Kind.BOOLEAN][kind] = make_bool_to_numeric(kind)
            cells[kind][Kind.BOOLEAN] = numeric_to_bool

    for kind in _PRIMITIVE_KINDS:
        cells[kind][Kind.STRING] = formatter_for(kind)
        parser = parser_for(
            kind,
            strict=profile.strict_text,
            extended_boolean=profile.extended_boolean,
        )
        if parser is not None:
            cells[Kind.STRING][kind] = parser

    return cells
