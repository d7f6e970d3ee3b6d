"""Text bank: formatters (value → str) and parsers (str → value).

Parsers come in two flavours built from the same core:

* **strict**  – raises ``MalformedTextError`` for text outside the grammar and
  ``RangeOverflowError`` for a well-formed literal that does not fit.
* **lenient** – returns the ``MALFORMED`` / ``OVERFLOW`` marker instead.

Accepted grammars (surrounding whitespace is ignored except for CHAR)::

    integers   [+-]?[0-9]+
    floats     [+-]? digits with optional "," group separators, optional
               fraction and exponent; or nan / inf / infinity (any case)
    decimal    as floats, without exponent or special names
    boolean    true / false (any case); with the extended grammar also
               yes / no / 1 / 0, and "" ⇒ False
    char       exactly one character (no trimming)
    datetime   ISO 8601 (``datetime.fromisoformat``)

Formatting is culture-invariant: ``True``/``False``, ``repr`` for float64,
``str`` for float32, fixed-point for decimals, ``isoformat`` for datetimes,
``""`` for NULL.

Exports
-------
formatter_for(kind)
    Formatter installed in the ``kind → STRING`` matrix cell.

parser_for(kind, *, strict, extended_boolean=True)
    Parser installed in the ``STRING → kind`` cell, or ``None`` when the kind
    has no text form.

make_parser(parse, target_type, *, strict)
    Wrap a marker-returning parse core into a strict or lenient parser.
"""

from __future__ import annotations

import math
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

import regex

from ..core import Converter, identity
from ..errors import Failure, MALFORMED, OVERFLOW, error_for
from ..kinds import (
    DECIMAL_MAX,
    INTEGER_KINDS,
    KIND_INFO,
    Char,
    Kind,
)
from .numeric import to_float32

# ─────────────────────────────────────────────────────────────────────────────
# Grammars
# ─────────────────────────────────────────────────────────────────────────────

INTEGER_RE = regex.compile(r"\s*[+-]?[0-9]+\s*")
FLOAT_RE = regex.compile(
    r"""\s*[+-]?(?:
        (?:[0-9][0-9,]*(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?
        |(?i:nan|inf(?:inity)?)
    )\s*""",
    regex.VERBOSE,
)
DECIMAL_RE = regex.compile(r"\s*[+-]?(?:[0-9][0-9,]*(?:\.[0-9]*)?|\.[0-9]+)\s*")

_TRUE_WORDS = frozenset({"true", "yes", "1"})
_FALSE_WORDS = frozenset({"false", "no", "0"})


# ─────────────────────────────────────────────────────────────────────────────
# Formatters
# ─────────────────────────────────────────────────────────────────────────────


def format_null(value: Any) -> str:
    return ""


def format_bool(value: Any) -> str:
    return "True" if value else "False"


def format_integer(value: Any) -> str:
    return str(int(value))


def format_float64(value: Any) -> str:
    return repr(float(value))


def format_decimal(value: Decimal) -> str:
    """Fixed-point notation; the decimal grammar has no exponent."""
    return format(value, "f")


def format_datetime(value: datetime) -> str:
    return value.isoformat()


def format_object(value: Any) -> str:
    return str(value)


_FORMATTERS: dict[Kind, Converter] = {
    Kind.NULL: format_null,
    Kind.BOOLEAN: format_bool,
    Kind.CHAR: str.__str__,
    Kind.FLOAT32: format_object,
    Kind.FLOAT64: format_float64,
    Kind.DECIMAL: format_decimal,
    Kind.DATETIME: format_datetime,
    Kind.STRING: identity,
}
for _kind in INTEGER_KINDS:
    _FORMATTERS[_kind] = format_integer


def formatter_for(kind: Kind) -> Converter:
    return _FORMATTERS.get(kind, format_object)


# ─────────────────────────────────────────────────────────────────────────────
# Parse cores: str → value | Failure
# ─────────────────────────────────────────────────────────────────────────────


def make_integer_parse(lo: Optional[int], hi: Optional[int], box: Callable[[int], Any] = int) -> Converter:
    """Integer parse core; ``lo``/``hi`` of ``None`` means unbounded."""

    def parse(text: str) -> Any:
        if INTEGER_RE.fullmatch(text) is None:
            return MALFORMED
        n = int(text)
        if lo is not None and (n < lo or n > hi):
            return OVERFLOW
        return box(n)

    return parse


def _parse_float_literal(text: str) -> Any:
    if FLOAT_RE.fullmatch(text) is None:
        return MALFORMED
    return float(text.replace(",", ""))


def _is_special(text: str) -> bool:
    return text.strip().lstrip("+-")[:1] in ("n", "N", "i", "I")


def parse_float64(text: str) -> Any:
    x = _parse_float_literal(text)
    if isinstance(x, Failure):
        return x
    if math.isinf(x) and not _is_special(text):
        return OVERFLOW
    return x


def parse_float32(text: str) -> Any:
    x = parse_float64(text)
    if isinstance(x, Failure):
        return x
    return to_float32(x, checked=True)


def parse_decimal(text: str) -> Any:
    if DECIMAL_RE.fullmatch(text) is None:
        return MALFORMED
    try:
        d = Decimal(text.strip().replace(",", ""))
    except InvalidOperation:
        return MALFORMED
    if d.copy_abs() > DECIMAL_MAX:
        return OVERFLOW
    return d


def parse_char(text: str) -> Any:
    if len(text) != 1 or ord(text) > 0xFFFF:
        return MALFORMED
    return Char(text)


def parse_datetime(text: str) -> Any:
    try:
        return datetime.fromisoformat(text.strip())
    except ValueError:
        return MALFORMED


def parse_bool(text: str) -> Any:
    word = text.strip().lower()
    if word == "true":
        return True
    if word == "false":
        return False
    return MALFORMED


def parse_bool_extended(text: str) -> Any:
    """``true``/``yes``/``1`` ⇒ True, ``false``/``no``/``0``/empty ⇒ False."""
    word = text.strip().lower()
    if not word or word in _FALSE_WORDS:
        return False
    if word in _TRUE_WORDS:
        return True
    return MALFORMED


# ─────────────────────────────────────────────────────────────────────────────
# Strict / lenient wrappers
# ─────────────────────────────────────────────────────────────────────────────


def make_parser(parse: Converter, target_type: Any, *, strict: bool) -> Converter:
    """Return *parse* itself (lenient) or a wrapper raising on markers (strict)."""
    if not strict:
        return parse

    def strict_parse(text: str) -> Any:
        result = parse(text)
        if isinstance(result, Failure):
            raise error_for(result.kind, text, source_type=type(text), target_type=target_type)
        return result

    return strict_parse


def _core_for(kind: Kind, extended_boolean: bool) -> Optional[Converter]:
    if kind is Kind.STRING:
        return identity
    if kind is Kind.BOOLEAN:
        return parse_bool_extended if extended_boolean else parse_bool
    if kind is Kind.CHAR:
        return parse_char
    if kind in INTEGER_KINDS:
        info = KIND_INFO[kind]
        return make_integer_parse(info.min, info.max, info.box)
    if kind is Kind.FLOAT32:
        return parse_float32
    if kind is Kind.FLOAT64:
        return parse_float64
    if kind is Kind.DECIMAL:
        return parse_decimal
    if kind is Kind.DATETIME:
        return parse_datetime
    return None


def parser_for(kind: Kind, *, strict: bool, extended_boolean: bool = True) -> Optional[Converter]:
    """Parser for the ``STRING → kind`` cell; ``None`` if *kind* has no text form."""
    core = _core_for(kind, extended_boolean)
    if core is None or core is identity:
        return core
    return make_parser(core, KIND_INFO[kind].type, strict=strict)
