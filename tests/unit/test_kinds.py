"""Tests for kind classification, Char and enum-like detection."""

import enum
from datetime import datetime
from decimal import Decimal

import numpy as np
import pytest

from type_convert.kinds import (
    ALIAS_TYPES,
    INTEGER_KINDS,
    KIND_COUNT,
    KIND_INFO,
    Char,
    Kind,
    canonical_kind,
    canonical_type,
    is_canonical,
    is_enum_like,
    kind_of,
    underlying_kind,
)


class Small(enum.IntEnum):
    A = 1
    B = -5


class Wide(enum.Enum):
    LOW = -1
    HIGH = 2 ** 40


class Unsigned(enum.Enum):
    TOP = 2 ** 63


class Huge(enum.IntEnum):
    SMALL = 1
    BIG = 2 ** 70


class Named(enum.Enum):
    X = "x"


class Flagged(enum.Enum):
    YES = True


class TestKindOf:
    """Test exact-type classification."""

    @pytest.mark.parametrize("tp, kind", [
        (type(None), Kind.NULL),
        (bool, Kind.BOOLEAN),
        (Char, Kind.CHAR),
        (np.int8, Kind.INT8),
        (np.uint16, Kind.UINT16),
        (np.int64, Kind.INT64),
        (np.float32, Kind.FLOAT32),
        (float, Kind.FLOAT64),
        (Decimal, Kind.DECIMAL),
        (datetime, Kind.DATETIME),
        (str, Kind.STRING),
    ])
    def test_canonical_types(self, tp, kind):
        """Each canonical type maps to its kind."""
        assert kind_of(tp) is kind
        assert canonical_kind(tp) is kind
        assert canonical_type(kind) is tp

    def test_subclasses_are_not_folded(self):
        """bool is not an integer kind and enums are open."""
        assert kind_of(bool) is Kind.BOOLEAN
        assert kind_of(Small) is Kind.OBJECT

    def test_python_int_is_open(self):
        """Arbitrary precision int owns no matrix slot."""
        assert kind_of(int) is Kind.OBJECT
        assert canonical_kind(int) is None

    def test_aliases(self):
        """numpy aliases classify as their kind but are not canonical."""
        assert kind_of(np.float64) is Kind.FLOAT64
        assert kind_of(np.str_) is Kind.STRING
        for tp in ALIAS_TYPES:
            assert canonical_kind(tp) is None
            assert not is_canonical(tp)

    def test_kind_count(self):
        """Sixteen primitive kinds plus OBJECT and ENUM."""
        assert KIND_COUNT == 18

    def test_integer_ranges(self):
        """Integral kinds carry their numpy ranges."""
        assert KIND_INFO[Kind.INT8].min == -128
        assert KIND_INFO[Kind.UINT64].max == 2 ** 64 - 1
        assert KIND_INFO[Kind.CHAR].span == 0x10000
        assert all(KIND_INFO[k].integral for k in INTEGER_KINDS)
        assert not KIND_INFO[Kind.FLOAT64].integral


class TestChar:
    """Test the Char value type."""

    def test_from_string(self):
        c = Char("a")
        assert c == "a"
        assert isinstance(c, str)

    def test_from_code_point(self):
        assert Char(66) == "B"

    def test_repr(self):
        assert repr(Char("z")) == "Char('z')"

    @pytest.mark.parametrize("value", ["", "ab", 0x1F600, 3.0])
    def test_rejects_invalid(self, value):
        """Only one BMP character is accepted."""
        with pytest.raises(ValueError):
            Char(value)


class TestEnumLike:
    """Test enum-like detection and underlying kinds."""

    def test_int_enums_are_enum_like(self):
        assert is_enum_like(Small)
        assert is_enum_like(Wide)

    def test_non_int_values_are_not(self):
        assert not is_enum_like(Named)
        assert not is_enum_like(Flagged)

    def test_non_enums_are_not(self):
        assert not is_enum_like(int)
        assert not is_enum_like(Small.A)

    def test_underlying_kind(self):
        """Smallest of INT32 / INT64 / UINT64."""
        assert underlying_kind(Small) is Kind.INT32
        assert underlying_kind(Wide) is Kind.INT64
        assert underlying_kind(Unsigned) is Kind.UINT64

    def test_underlying_kind_beyond_64_bits(self):
        assert is_enum_like(Huge)
        assert underlying_kind(Huge) is None
