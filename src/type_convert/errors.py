"""Error taxonomy and soft-failure markers.

Every failure inside the engine collapses to one of four ``ErrorKind`` values.
Converters report a failure either by *returning* a ``Failure`` marker (the
cheap, exception-free channel used by matrix cells and lenient parsers) or by
*raising* a ``ConversionError`` subclass (strict parsers).  The engine facade
turns both into exactly one outward channel: an exception from
``change_type`` on a raising profile, ``None`` on a lenient one, or
``(False, None)`` from ``try_change_type``.

Exports
-------
ErrorKind
    UNSUPPORTED, OVERFLOW, MALFORMED, MISSING.

Failure
    Marker type returned by converters.  One shared instance per kind
    (``UNSUPPORTED``, ``OVERFLOW``, ``MALFORMED``, ``MISSING``).

ConversionError
    Base exception.  Subclasses also derive from the closest builtin so that
    callers can catch ``ValueError`` / ``OverflowError`` / ``TypeError``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    UNSUPPORTED = "unsupported conversion"
    OVERFLOW = "range overflow"
    MALFORMED = "malformed text"
    MISSING = "missing value"


class Failure:
    """Soft-failure marker returned by a converter instead of a value."""

    __slots__ = ("kind",)

    def __init__(self, kind: ErrorKind) -> None:
        self.kind = kind

    def __repr__(self) -> str:
        return f"<Failure {self.kind.name}>"

    def __bool__(self) -> bool:
        return False


UNSUPPORTED = Failure(ErrorKind.UNSUPPORTED)
OVERFLOW = Failure(ErrorKind.OVERFLOW)
MALFORMED = Failure(ErrorKind.MALFORMED)
MISSING = Failure(ErrorKind.MISSING)

_FAILURES = {f.kind: f for f in (UNSUPPORTED, OVERFLOW, MALFORMED, MISSING)}


def failure_for(kind: ErrorKind) -> Failure:
    """Return the shared marker for *kind*."""
    return _FAILURES[kind]


def _type_name(tp: Any) -> str:
    if tp is None:
        return "None"
    return getattr(tp, "__qualname__", None) or repr(tp)


class ConversionError(Exception):
    """Base exception for conversion failures.

    Attributes:
        kind:        Which of the four failure categories this is.
        value:       The value that failed to convert.
        source_type: Runtime type of *value* (``None`` when no value was given).
        target_type: The requested type.
        message:     Human-readable description.
    """

    kind: ErrorKind = ErrorKind.UNSUPPORTED

    def __init__(
            self,
            message: Optional[str] = None,
            *,
            value: Any = None,
            source_type: Any = None,
            target_type: Any = None,
    ) -> None:
        self.value = value
        self.source_type = source_type if source_type is not None else (
            type(value) if value is not None else None
        )
        self.target_type = target_type
        if message is None:
            message = (
                f"{self.kind.value}: cannot convert {_type_name(self.source_type)} "
                f"{value!r} to {_type_name(target_type)}"
            )
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class UnsupportedConversionError(ConversionError, TypeError):
    """No converter exists (or could be resolved) for the type pair."""

    kind = ErrorKind.UNSUPPORTED


class RangeOverflowError(ConversionError, OverflowError):
    """A narrowing numeric conversion lost magnitude under a checked profile."""

    kind = ErrorKind.OVERFLOW


class MalformedTextError(ConversionError, ValueError):
    """Text does not match the target kind's grammar."""

    kind = ErrorKind.MALFORMED


class MissingValueError(ConversionError, ValueError):
    """The source value is missing (``None``)."""

    kind = ErrorKind.MISSING


_ERRORS: dict[ErrorKind, type[ConversionError]] = {
    ErrorKind.UNSUPPORTED: UnsupportedConversionError,
    ErrorKind.OVERFLOW: RangeOverflowError,
    ErrorKind.MALFORMED: MalformedTextError,
    ErrorKind.MISSING: MissingValueError,
}


def error_for(
        kind: ErrorKind,
        value: Any = None,
        *,
        source_type: Any = None,
        target_type: Any = None,
        message: Optional[str] = None,
) -> ConversionError:
    """Build (but do not raise) the exception matching *kind*."""
    return _ERRORS[kind](
        message, value=value, source_type=source_type, target_type=target_type,
    )
