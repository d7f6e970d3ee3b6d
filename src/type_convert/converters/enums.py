"""Enum-like conversions.

An enum-like type is an ``Enum`` subclass whose member values are all plain
integers (see ``kinds.is_enum_like``).  Numerically it behaves as its
underlying kind (INT32, INT64 or UINT64); textually it is its member names.

Exports
-------
make_enum_parser(enum_type, *, ignore_case, strict)
    Text → member.  Accepts a member name (trimmed, case per *ignore_case*)
    or an integer literal naming a defined value.  Cached per
    ``(enum_type, ignore_case, strict)``.

format_member(member)
    Member → its name.

make_from_enum(enum_type), make_to_enum(enum_type)
    Pre/post steps that let a numeric matrix cell serve an enum pair.
"""

from __future__ import annotations

import functools
from enum import Enum
from typing import Any

from ..core import Converter
from ..errors import Failure, MALFORMED, UNSUPPORTED
from ..kinds import KIND_INFO, underlying_kind
from .text import INTEGER_RE, make_parser


@functools.lru_cache(maxsize=None)
def _name_table(enum_type: type[Enum], ignore_case: bool) -> dict[str, Enum]:
    members = enum_type.__members__.items()
    if ignore_case:
        # First definition wins when two names differ only by case.
        table: dict[str, Enum] = {}
        for name, member in members:
            table.setdefault(name.casefold(), member)
        return table
    return dict(members)


@functools.lru_cache(maxsize=None)
def make_enum_parser(enum_type: type[Enum], *, ignore_case: bool, strict: bool) -> Converter:
    table = _name_table(enum_type, ignore_case)

    def parse(text: str) -> Any:
        word = text.strip()
        member = table.get(word.casefold() if ignore_case else word)
        if member is not None:
            return member
        if INTEGER_RE.fullmatch(word) is not None:
            try:
                return enum_type(int(word))
            except ValueError:
                return MALFORMED
        return MALFORMED

    return make_parser(parse, enum_type, strict=strict)


def format_member(member: Enum) -> str:
    return member.name


def make_from_enum(enum_type: type[Enum]) -> Converter:
    """Member → its value boxed in the underlying kind's canonical type."""
    box = KIND_INFO[underlying_kind(enum_type)].box
    return lambda member: box(member.value)


def make_to_enum(enum_type: type[Enum]) -> Converter:
    """Integral value → member; undefined values are ``UNSUPPORTED``."""

    def to_enum(value: Any) -> Any:
        if isinstance(value, Failure):
            return value
        try:
            return enum_type(int(value))
        except ValueError:
            return UNSUPPORTED

    return to_enum
