"""Seeded converters for common open types.

Python ``int`` (arbitrary precision), ``uuid.UUID``, ``datetime.date``,
``datetime.time`` and ``datetime.timedelta`` have no matrix slot.  Their most
common pairs are written into the resolution cache when an engine is built,
so they never go through reflection.  Formatting them to ``str`` needs no seed:
the resolver's text step uses ``str(value)``, which every parser here accepts.

``bool`` is a subclass of ``int`` in Python; ``bool ↔ int`` is seeded as
``invalid`` unless the profile enables boolean numerics, so that assignability
does not silently pass booleans through as integers.
"""

from __future__ import annotations

import uuid
from datetime import date, time, timedelta
from typing import Any, Iterator, Tuple

import numpy as np
import regex

from ..core import Converter, TypePair, invalid
from ..errors import MALFORMED
from ..kinds import FLOAT_KINDS, INTEGER_KINDS, KIND_INFO, Kind
from ..policy import PolicyProfile
from .numeric import (
    integer_extractor,
    make_decimal_converter,
    make_float_converter,
    make_integer_converter,
    numeric_to_bool,
)
from .text import make_integer_parse, make_parser

TIMEDELTA_RE = regex.compile(
    r"""\s*
    (?:(?P<days>[+-]?[0-9]+)\ days?,\s*)?
    (?P<hours>[0-9]+):(?P<minutes>[0-5][0-9]):(?P<seconds>[0-5][0-9])
    (?:\.(?P<fraction>[0-9]{1,6}))?
    \s*""",
    regex.VERBOSE,
)


# ─────────────────────────────────────────────────────────────────────────────
# Parse cores
# ─────────────────────────────────────────────────────────────────────────────


def parse_uuid(text: str) -> Any:
    try:
        return uuid.UUID(text.strip())
    except ValueError:
        return MALFORMED


def parse_date(text: str) -> Any:
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        return MALFORMED


def parse_time(text: str) -> Any:
    try:
        return time.fromisoformat(text.strip())
    except ValueError:
        return MALFORMED


def parse_timedelta(text: str) -> Any:
    """Parse the ``str(timedelta)`` form: ``[D day[s], ]H:MM:SS[.ffffff]``."""
    match = TIMEDELTA_RE.fullmatch(text)
    if match is None:
        return MALFORMED
    fraction = match.group("fraction") or "0"
    try:
        return timedelta(
            days=int(match.group("days") or 0),
            hours=int(match.group("hours")),
            minutes=int(match.group("minutes")),
            seconds=int(match.group("seconds")),
            microseconds=int(fraction.ljust(6, "0")),
        )
    except OverflowError:
        return MALFORMED


# ─────────────────────────────────────────────────────────────────────────────
# Seed table
# ─────────────────────────────────────────────────────────────────────────────


def _int_pairs(checked: bool) -> Iterator[Tuple[TypePair, Converter]]:
    for kind in INTEGER_KINDS + (Kind.CHAR,):
        tp = KIND_INFO[kind].type
        yield (int, tp), make_integer_converter(None, kind, checked)
        yield (tp, int), integer_extractor(kind)
    for kind in FLOAT_KINDS:
        tp = KIND_INFO[kind].type
        yield (int, tp), make_float_converter(None, kind, checked)
        yield (tp, int), integer_extractor(kind)
    yield (np.float64, int), integer_extractor(Kind.FLOAT64)
    yield (int, KIND_INFO[Kind.DECIMAL].type), make_decimal_converter(None)
    yield (KIND_INFO[Kind.DECIMAL].type, int), integer_extractor(Kind.DECIMAL)


def _bool_pairs(boolean_numerics: bool) -> Iterator[Tuple[TypePair, Converter]]:
    if boolean_numerics:
        yield (bool, int), integer_extractor(Kind.BOOLEAN)
        yield (int, bool), numeric_to_bool
    else:
        yield (bool, int), invalid
        yield (int, bool), invalid


def _text_pairs(strict: bool) -> Iterator[Tuple[TypePair, Converter]]:
    yield (str, int), make_parser(make_integer_parse(None, None), int, strict=strict)
    yield (str, uuid.UUID), make_parser(parse_uuid, uuid.UUID, strict=strict)
    yield (str, date), make_parser(parse_date, date, strict=strict)
    yield (str, time), make_parser(parse_time, time, strict=strict)
    yield (str, timedelta), make_parser(parse_timedelta, timedelta, strict=strict)


def seed_entries(profile: PolicyProfile) -> dict[TypePair, Converter]:
    """All seeded ``(source_type, target_type) → converter`` entries for *profile*."""
    entries: dict[TypePair, Converter] = {}
    entries.update(_int_pairs(profile.overflow_checked))
    entries.update(_bool_pairs(profile.boolean_numerics))
    entries.update(_text_pairs(profile.strict_text))
    return entries
