"""Kind classification — the closed set of types that own a matrix slot.

Every runtime type maps to exactly one ``Kind`` through ``kind_of``, a plain
dictionary lookup on the *exact* type.  Subclasses are deliberately not folded
into their base: ``bool`` is BOOLEAN (not an integer), ``Char`` is CHAR (not
STRING) and enum classes are OBJECT, so they take the resolver path.

Canonical types::

    NULL      NoneType            INT64    numpy.int64
    BOOLEAN   bool                UINT64   numpy.uint64
    CHAR      Char                FLOAT32  numpy.float32
    INT8      numpy.int8          FLOAT64  float          (+ numpy.float64)
    UINT8     numpy.uint8         DECIMAL  decimal.Decimal
    INT16     numpy.int16         DATETIME datetime.datetime
    UINT16    numpy.uint16        STRING   str            (+ numpy.str_)
    INT32     numpy.int32         OBJECT   open sentinel
    UINT32    numpy.uint32        ENUM     reserved

Python ``int`` is arbitrary precision and therefore an open type.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional

import numpy as np


class Kind(enum.IntEnum):
    NULL = 0
    BOOLEAN = 1
    CHAR = 2
    INT8 = 3
    UINT8 = 4
    INT16 = 5
    UINT16 = 6
    INT32 = 7
    UINT32 = 8
    INT64 = 9
    UINT64 = 10
    FLOAT32 = 11
    FLOAT64 = 12
    DECIMAL = 13
    DATETIME = 14
    STRING = 15
    OBJECT = 16
    ENUM = 17


KIND_COUNT = len(Kind)


class Char(str):
    """A single UTF-16 code unit.

    Behaves as a one-character ``str`` for text purposes and as an unsigned
    16-bit integer for numeric conversions.
    """

    __slots__ = ()

    def __new__(cls, value: Any = "\0") -> Char:
        if isinstance(value, int) and not isinstance(value, bool):
            value = chr(value)
        if not isinstance(value, str) or len(value) != 1:
            raise ValueError(f"Char requires exactly one character, got {value!r}")
        if ord(value) > 0xFFFF:
            raise ValueError(f"Char is limited to U+FFFF, got U+{ord(value):X}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Char({str.__repr__(self)})"


@dataclass(frozen=True)
class KindInfo:
    """Static facts about one primitive kind.

    Attributes:
        kind:      The kind itself.
        type:      Canonical Python type produced by matrix cells.
        box:       ``int``/``float``/… → canonical value constructor.
        min, max:  Integer range for integral kinds (CHAR included), else None.
    """

    kind: Kind
    type: Optional[type]
    box: Optional[Callable[[Any], Any]]
    min: Optional[int] = None
    max: Optional[int] = None

    @property
    def integral(self) -> bool:
        return self.min is not None

    @property
    def span(self) -> int:
        return self.max - self.min + 1


def _irange(dtype: Any) -> tuple[int, int]:
    info = np.iinfo(dtype)
    return int(info.min), int(info.max)


def _integral(kind: Kind, dtype: Any) -> KindInfo:
    lo, hi = _irange(dtype)
    return KindInfo(kind, dtype, dtype, lo, hi)


KIND_INFO: dict[Kind, KindInfo] = {
    Kind.NULL: KindInfo(Kind.NULL, type(None), None),
    Kind.BOOLEAN: KindInfo(Kind.BOOLEAN, bool, bool),
    Kind.CHAR: KindInfo(Kind.CHAR, Char, Char, 0, 0xFFFF),
    Kind.INT8: _integral(Kind.INT8, np.int8),
    Kind.UINT8: _integral(Kind.UINT8, np.uint8),
    Kind.INT16: _integral(Kind.INT16, np.int16),
    Kind.UINT16: _integral(Kind.UINT16, np.uint16),
    Kind.INT32: _integral(Kind.INT32, np.int32),
    Kind.UINT32: _integral(Kind.UINT32, np.uint32),
    Kind.INT64: _integral(Kind.INT64, np.int64),
    Kind.UINT64: _integral(Kind.UINT64, np.uint64),
    Kind.FLOAT32: KindInfo(Kind.FLOAT32, np.float32, np.float32),
    Kind.FLOAT64: KindInfo(Kind.FLOAT64, float, float),
    Kind.DECIMAL: KindInfo(Kind.DECIMAL, Decimal, Decimal),
    Kind.DATETIME: KindInfo(Kind.DATETIME, datetime, None),
    Kind.STRING: KindInfo(Kind.STRING, str, str),
    Kind.OBJECT: KindInfo(Kind.OBJECT, None, None),
    Kind.ENUM: KindInfo(Kind.ENUM, None, None),
}

INTEGER_KINDS = (
    Kind.INT8, Kind.UINT8, Kind.INT16, Kind.UINT16,
    Kind.INT32, Kind.UINT32, Kind.INT64, Kind.UINT64,
)
FLOAT_KINDS = (Kind.FLOAT32, Kind.FLOAT64)
# Kinds that take part in arithmetic conversions (CHAR only with integers).
NUMERIC_KINDS = INTEGER_KINDS + FLOAT_KINDS + (Kind.DECIMAL,)

# Largest magnitude of a 96-bit-mantissa decimal.
DECIMAL_MAX = Decimal(2 ** 96 - 1)

_CANONICAL_KIND: dict[type, Kind] = {
    info.type: kind for kind, info in KIND_INFO.items() if info.type is not None
}

# Types whose kind is a primitive one but which are not the canonical type;
# matrix cells never produce them.
ALIAS_TYPES = frozenset({np.float64, np.str_})

_KIND_BY_TYPE: dict[type, Kind] = dict(_CANONICAL_KIND)
_KIND_BY_TYPE[np.float64] = Kind.FLOAT64
_KIND_BY_TYPE[np.str_] = Kind.STRING


def kind_of(tp: Any) -> Kind:
    """Classify *tp* (a type, not a value).  Unknown types map to OBJECT."""
    return _KIND_BY_TYPE.get(tp, Kind.OBJECT)


def canonical_kind(tp: Any) -> Optional[Kind]:
    """Kind of *tp* if it is the canonical type of a matrix slot, else None.

    This is the matrix fast-path test: aliases and open types give None.
    """
    return _CANONICAL_KIND.get(tp)


def canonical_type(kind: Kind) -> Optional[type]:
    return KIND_INFO[kind].type


def is_canonical(tp: Any) -> bool:
    """True if *tp* owns a matrix slot and is what that slot produces."""
    return tp in _CANONICAL_KIND


# ─────────────────────────────────────────────────────────────────────────────
# Enum-like types
# ─────────────────────────────────────────────────────────────────────────────


def is_enum_like(tp: Any) -> bool:
    """An ``Enum`` subclass whose members are all plain integers."""
    if not (isinstance(tp, type) and issubclass(tp, enum.Enum)):
        return False
    members = list(tp.__members__.values())
    return bool(members) and all(
        isinstance(m.value, int) and not isinstance(m.value, bool) for m in members
    )


def underlying_kind(enum_type: type) -> Optional[Kind]:
    """Smallest of INT32 / INT64 / UINT64 holding every member value, or
    ``None`` when a member falls outside the 64-bit range."""
    values = [m.value for m in enum_type.__members__.values()]
    lo, hi = min(values), max(values)
    for kind in (Kind.INT32, Kind.INT64, Kind.UINT64):
        info = KIND_INFO[kind]
        if info.min <= lo and hi <= info.max:
            return kind
    return None
