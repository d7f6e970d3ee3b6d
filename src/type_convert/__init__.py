"""Generic type conversion with a dense primitive matrix and cached fallback
resolution.

``DEFAULT`` (strict profile) and ``SAFE`` (lenient profile) are process-wide
engines; the module-level functions route to them::

    change_type("42", numpy.int32)           # → numpy.int32(42)
    change_type("4x", numpy.int32, safe=True)  # → None
    try_change_type(300, numpy.uint8)        # → (True, numpy.uint8(44))
"""

from typing import Any, Tuple

from .core import (
    ConversionEngine,
    ConversionMatrix,
    Converter,
    ResolutionCache,
    Resolver,
    TypeConverter,
    identity,
    invalid,
)
from .errors import (
    ConversionError,
    ErrorKind,
    Failure,
    MalformedTextError,
    MissingValueError,
    RangeOverflowError,
    UnsupportedConversionError,
)
from .factory import build_default_engine
from .kinds import Char, Kind, is_enum_like, kind_of
from .policy import LENIENT, STRICT, EnumCase, FailureMode, PolicyProfile
from .resolvers import FallbackResolver, TypeConverterRegistry, explicit_operator, implicit_operator

DEFAULT = build_default_engine(profile=STRICT)
SAFE = build_default_engine(profile=LENIENT)

_MISSING_ARG = object()


def _engine(safe: bool) -> ConversionEngine:
    return SAFE if safe else DEFAULT


def change_type(value: Any, target_type: Any, *, safe: bool = False) -> Any:
    """Convert *value* with ``DEFAULT`` (raises) or ``SAFE`` (returns None)."""
    return _engine(safe).change_type(value, target_type)


def try_change_type(value: Any, target_type: Any, *, safe: bool = True) -> Tuple[bool, Any]:
    return _engine(safe).try_change_type(value, target_type)


def can_convert(source_type: Any, target_type: Any) -> bool:
    return DEFAULT.can_convert(source_type, target_type)


def get_converter(source_type: Any, target_type: Any = _MISSING_ARG, *, safe: bool = False) -> Converter:
    if target_type is _MISSING_ARG:
        return _engine(safe).get_converter(source_type)
    return _engine(safe).get_converter(source_type, target_type)


__all__ = [
    # engines
    "DEFAULT",
    "SAFE",
    "ConversionEngine",
    "build_default_engine",
    "change_type",
    "try_change_type",
    "can_convert",
    "get_converter",
    # policy
    "PolicyProfile",
    "FailureMode",
    "EnumCase",
    "STRICT",
    "LENIENT",
    # kinds
    "Char",
    "Kind",
    "kind_of",
    "is_enum_like",
    # extension points
    "Converter",
    "ConversionMatrix",
    "ResolutionCache",
    "Resolver",
    "FallbackResolver",
    "TypeConverter",
    "TypeConverterRegistry",
    "implicit_operator",
    "explicit_operator",
    "identity",
    "invalid",
    # errors
    "ConversionError",
    "ErrorKind",
    "Failure",
    "MalformedTextError",
    "MissingValueError",
    "RangeOverflowError",
    "UnsupportedConversionError",
]
