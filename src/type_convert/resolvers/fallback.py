"""FallbackResolver — ordered resolution for pairs the matrix cannot answer.

Steps, first match wins::

    1. assignable     issubclass(source, target)            → identity
    2. text target    target is str                         → enum name / str()
    3. enum-like      text → enum                           → enum parser
                      enum ↔ primitive / enum / int         → matrix cell via
                                                              underlying kind
    4. numpy alias    numpy.float64 / numpy.str_ on a side  → canonical pair,
                                                              re-boxed if target
    5. implicit operator
    6. explicit operator
    7. TypeConverter  registered or ``__type_converter__`` on the source
    8. constructor    target(source) with one annotated parameter

Nothing matched → ``None`` (the cache stores ``invalid``).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..core import ConversionEngine, Converter, Resolver, compose, identity, invalid
from ..converters.enums import format_member, make_enum_parser, make_from_enum, make_to_enum
from ..converters.text import format_object
from ..kinds import ALIAS_TYPES, Kind, canonical_type, is_enum_like, kind_of, underlying_kind
from .operators import EXPLICIT, IMPLICIT, find_constructor, find_operator

logger = logging.getLogger(__name__)


def _is_subclass(source_type: Any, target_type: Any) -> bool:
    try:
        return isinstance(source_type, type) and issubclass(source_type, target_type)
    except TypeError:
        return False


def _name(tp: Any) -> str:
    return getattr(tp, "__qualname__", repr(tp))


class FallbackResolver(Resolver):
    """Resolver combining enum support, operators, type converters and
    constructors."""

    def resolve(self, source_type: Any, target_type: Any, engine: ConversionEngine) -> Optional[Converter]:
        converter, step = self._resolve(source_type, target_type, engine)
        if converter is not None:
            logger.debug("resolved %s -> %s via %s", _name(source_type), _name(target_type), step)
        else:
            logger.debug("no conversion %s -> %s", _name(source_type), _name(target_type))
        return converter

    def _resolve(self, source_type: Any, target_type: Any, engine: ConversionEngine) -> tuple[Optional[Converter], str]:
        if _is_subclass(source_type, target_type):
            return identity, "assignability"

        if target_type is str:
            return self.formatter(source_type), "formatter"

        if is_enum_like(source_type) or is_enum_like(target_type):
            converter = self.enum_converter(source_type, target_type, engine)
            if converter is not None:
                return converter, "enum"

        if source_type in ALIAS_TYPES or target_type in ALIAS_TYPES:
            converter = self.alias_converter(source_type, target_type, engine)
            if converter is not None:
                return converter, "alias"

        converter = find_operator(source_type, target_type, IMPLICIT)
        if converter is not None:
            return converter, "implicit operator"

        converter = find_operator(source_type, target_type, EXPLICIT)
        if converter is not None:
            return converter, "explicit operator"

        converter = self.type_converter(source_type, target_type, engine)
        if converter is not None:
            return converter, "type converter"

        converter = find_constructor(source_type, target_type)
        if converter is not None:
            return converter, "constructor"

        return None, ""

    # -- steps ----------------------------------------------------------------

    @staticmethod
    def formatter(source_type: Any) -> Converter:
        if is_enum_like(source_type):
            return format_member
        return format_object

    @staticmethod
    def enum_converter(source_type: Any, target_type: Any, engine: ConversionEngine) -> Optional[Converter]:
        profile = engine.profile
        src_enum = is_enum_like(source_type)
        dst_enum = is_enum_like(target_type)

        if dst_enum and kind_of(source_type) is Kind.STRING:
            return make_enum_parser(
                target_type,
                ignore_case=profile.ignore_enum_case,
                strict=profile.strict_enum,
            )

        # Python int is unbounded: map straight through the member values.
        if dst_enum and source_type is int:
            return make_to_enum(target_type)
        if src_enum and target_type is int:
            return lambda member: member.value

        src_kind = underlying_kind(source_type) if src_enum else kind_of(source_type)
        dst_kind = underlying_kind(target_type) if dst_enum else kind_of(target_type)
        # Members wider than 64 bits leave the enum without a numeric path.
        if src_kind is None or dst_kind is None:
            return None
        if Kind.OBJECT in (src_kind, dst_kind) or target_type in ALIAS_TYPES:
            return None

        cell = engine.matrix.lookup(src_kind, dst_kind)
        if cell is invalid:
            return None
        return compose(
            make_from_enum(source_type) if src_enum else None,
            cell,
            make_to_enum(target_type) if dst_enum else None,
        )

    @staticmethod
    def alias_converter(source_type: Any, target_type: Any, engine: ConversionEngine) -> Optional[Converter]:
        """Serve a pair with a numpy alias on either side through the
        canonical type of the same kind."""
        src_alias = source_type in ALIAS_TYPES
        dst_alias = target_type in ALIAS_TYPES
        base = engine.lookup(
            canonical_type(kind_of(source_type)) if src_alias else source_type,
            canonical_type(kind_of(target_type)) if dst_alias else target_type,
        )
        if base is invalid:
            return None
        return compose(base, target_type if dst_alias else None)

    @staticmethod
    def type_converter(source_type: Any, target_type: Any, engine: ConversionEngine) -> Optional[Converter]:
        registry = engine.type_converters
        if registry is None:
            return None
        hook = registry.find(source_type)
        if hook is None or not hook.can_convert_to(target_type):
            return None

        def convert(value: Any) -> Any:
            return hook.convert_to(value, target_type)

        return convert
