"""Policy profiles and on-failure strategies.

A ``PolicyProfile`` is the immutable bundle of flags that decides which
converter variants an engine installs and what ``change_type`` does when a
conversion fails.  An engine is bound to one profile for its whole life.

Exports
-------
FailureMode
    ``RAISE`` or ``NULL``.

EnumCase
    ``EXACT`` or ``IGNORE``.

PolicyProfile
    Frozen dataclass.  ``derive(**changes)`` returns a modified copy.

STRICT, LENIENT
    The two canonical profiles behind ``type_convert.DEFAULT`` and
    ``type_convert.SAFE``.

raise_on_fail, null_on_fail
    ``OnFail`` strategies; ``PolicyProfile.on_fail_handler`` picks one.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .errors import ConversionError, Failure, error_for


class FailureMode(enum.Enum):
    RAISE = "raise"
    NULL = "null"


class EnumCase(enum.Enum):
    EXACT = "exact"
    IGNORE = "ignore"


# (failure, value, source_type, target_type, cause) → value or raise
OnFail = Callable[[Failure, Any, Any, Any, Optional[BaseException]], Any]


def raise_on_fail(
        failure: Failure,
        value: Any,
        source_type: Any,
        target_type: Any,
        cause: Optional[BaseException] = None,
) -> Any:
    """Raise the ``ConversionError`` subclass matching *failure*."""
    if isinstance(cause, ConversionError):
        raise cause
    raise error_for(
        failure.kind, value, source_type=source_type, target_type=target_type,
    ) from cause


def null_on_fail(
        failure: Failure,
        value: Any,
        source_type: Any,
        target_type: Any,
        cause: Optional[BaseException] = None,
) -> Any:
    """Return the missing-value marker."""
    return None


@dataclass(frozen=True)
class PolicyProfile:
    """Behavioural flags of one engine.

    Attributes:
        overflow_checked: Narrowing numeric conversions fail on magnitude loss
                          (``True``) or wrap two's-complement style (``False``).
        text_failure:     Text parsers raise ``MalformedTextError`` /
                          ``RangeOverflowError`` (RAISE) or return a failure
                          marker (NULL).
        enum_case:        Whether enum member names are matched exactly.
        enum_failure:     Whether an unknown enum name raises or yields a marker.
        on_fail:          What ``change_type`` does with a failed conversion.
        boolean_numerics: Install bool ↔ integer/float/decimal cells.
        extended_boolean: Accept ``1``/``0``/``yes``/``no`` (and empty ⇒ false)
                          when parsing booleans.
        name:             Label used in logs and ``repr``.
    """

    overflow_checked: bool = True
    text_failure: FailureMode = FailureMode.RAISE
    enum_case: EnumCase = EnumCase.EXACT
    enum_failure: FailureMode = FailureMode.RAISE
    on_fail: FailureMode = FailureMode.RAISE
    boolean_numerics: bool = False
    extended_boolean: bool = True
    name: str = "custom"

    @property
    def strict_text(self) -> bool:
        return self.text_failure is FailureMode.RAISE

    @property
    def strict_enum(self) -> bool:
        return self.enum_failure is FailureMode.RAISE

    @property
    def ignore_enum_case(self) -> bool:
        return self.enum_case is EnumCase.IGNORE

    @property
    def on_fail_handler(self) -> OnFail:
        return raise_on_fail if self.on_fail is FailureMode.RAISE else null_on_fail

    def derive(self, **changes: Any) -> PolicyProfile:
        """Return a copy with *changes* applied (``name`` defaults to "custom")."""
        changes.setdefault("name", "custom")
        return dataclasses.replace(self, **changes)


STRICT = PolicyProfile(name="strict")

LENIENT = PolicyProfile(
    overflow_checked=False,
    text_failure=FailureMode.NULL,
    enum_failure=FailureMode.NULL,
    on_fail=FailureMode.NULL,
    name="lenient",
)
