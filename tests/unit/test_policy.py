"""Tests for policy profiles, OnFail strategies and the error taxonomy."""

import dataclasses

import pytest

from type_convert.errors import (
    MALFORMED,
    MISSING,
    OVERFLOW,
    UNSUPPORTED,
    ConversionError,
    ErrorKind,
    Failure,
    MalformedTextError,
    MissingValueError,
    RangeOverflowError,
    UnsupportedConversionError,
    error_for,
    failure_for,
)
from type_convert.policy import (
    LENIENT,
    STRICT,
    EnumCase,
    FailureMode,
    PolicyProfile,
    null_on_fail,
    raise_on_fail,
)


class TestProfiles:
    """Test the canonical profiles and derive()."""

    def test_strict(self):
        assert STRICT.overflow_checked
        assert STRICT.strict_text
        assert STRICT.strict_enum
        assert not STRICT.ignore_enum_case
        assert STRICT.on_fail_handler is raise_on_fail
        assert not STRICT.boolean_numerics
        assert STRICT.extended_boolean

    def test_lenient(self):
        assert not LENIENT.overflow_checked
        assert not LENIENT.strict_text
        assert not LENIENT.strict_enum
        assert LENIENT.on_fail_handler is null_on_fail
        assert LENIENT.extended_boolean

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            STRICT.overflow_checked = False

    def test_derive(self):
        profile = STRICT.derive(enum_case=EnumCase.IGNORE)
        assert profile.ignore_enum_case
        assert profile.name == "custom"
        assert profile.overflow_checked
        assert STRICT.enum_case is EnumCase.EXACT

    def test_derive_keeps_explicit_name(self):
        assert LENIENT.derive(name="quiet").name == "quiet"

    def test_default_profile_is_strict(self):
        assert PolicyProfile().on_fail is FailureMode.RAISE


class TestOnFail:
    """Test the two OnFail strategies."""

    def test_null_on_fail(self):
        assert null_on_fail(OVERFLOW, 1, int, str) is None

    def test_raise_on_fail_builds_error(self):
        with pytest.raises(RangeOverflowError) as exc_info:
            raise_on_fail(OVERFLOW, 300, int, bytes)
        assert exc_info.value.value == 300
        assert exc_info.value.target_type is bytes

    def test_raise_on_fail_reraises_conversion_error(self):
        original = MalformedTextError(value="x", target_type=int)
        with pytest.raises(MalformedTextError) as exc_info:
            raise_on_fail(MALFORMED, "x", str, int, original)
        assert exc_info.value is original

    def test_raise_on_fail_chains_other_errors(self):
        cause = KeyError("k")
        with pytest.raises(UnsupportedConversionError) as exc_info:
            raise_on_fail(UNSUPPORTED, "x", str, dict, cause)
        assert exc_info.value.__cause__ is cause


class TestErrors:
    """Test the error taxonomy."""

    @pytest.mark.parametrize("kind, cls, builtin", [
        (ErrorKind.UNSUPPORTED, UnsupportedConversionError, TypeError),
        (ErrorKind.OVERFLOW, RangeOverflowError, OverflowError),
        (ErrorKind.MALFORMED, MalformedTextError, ValueError),
        (ErrorKind.MISSING, MissingValueError, ValueError),
    ])
    def test_error_for(self, kind, cls, builtin):
        error = error_for(kind, "v", source_type=str, target_type=int)
        assert type(error) is cls
        assert isinstance(error, ConversionError)
        assert isinstance(error, builtin)
        assert error.kind is kind

    def test_message(self):
        error = error_for(ErrorKind.OVERFLOW, 300, target_type=bytes)
        assert str(error) == "range overflow: cannot convert int 300 to bytes"

    def test_missing_value_message(self):
        error = MissingValueError(target_type=int)
        assert error.source_type is None
        assert "None" in str(error)

    def test_custom_message(self):
        assert str(MalformedTextError("bad input")) == "bad input"

    def test_failure_markers(self):
        for marker in (UNSUPPORTED, OVERFLOW, MALFORMED, MISSING):
            assert not marker
            assert isinstance(marker, Failure)
            assert failure_for(marker.kind) is marker
        assert repr(OVERFLOW) == "<Failure OVERFLOW>"
