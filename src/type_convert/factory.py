"""Engine factory — the single place where all pieces are assembled.

``build_default_engine`` is the recommended entry point for users who want a
fully functional ConversionEngine without hand-wiring the matrix, cache and
resolver.

Customisation points:

* **profile**         – ``PolicyProfile`` the engine is bound to
                        (default ``STRICT``).
* **converters**      – mapping ``(source_type, target_type) → converter``
                        installed as overrides after seeding.
* **type_converters** – mapping ``type → TypeConverter`` or a ready
                        ``TypeConverterRegistry``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .converters import build_cells, seed_entries
from .core import ConversionEngine, ConversionMatrix, Converter, ResolutionCache, TypeConverter, TypePair
from .policy import STRICT, PolicyProfile
from .resolvers import FallbackResolver, TypeConverterRegistry

logger = logging.getLogger(__name__)


def build_default_engine(
        *,
        profile: PolicyProfile = STRICT,
        converters: Mapping[TypePair, Converter] | None = None,
        type_converters: Mapping[Any, TypeConverter] | TypeConverterRegistry | None = None,
) -> ConversionEngine:
    """Assemble a ConversionEngine for *profile*.

    What gets wired
    ---------------
    matrix
        ``ConversionMatrix`` over ``converters.build_cells(profile)`` —
        identity diagonal, policy-specific numeric cells, formatters and
        strict or lenient parsers.

    cache
        ``ResolutionCache`` seeded with ``converters.seed_entries(profile)``
        (``int``, ``UUID``, ``date``, ``time``, ``timedelta`` pairs and the
        ``bool ↔ int`` guard).

    resolver
        ``FallbackResolver`` — assignability, text formatting, enum bridging,
        conversion operators, type converters, constructors.

    Args:
        profile:         Behavioural flags; the engine keeps it for life.
        converters:      Overrides applied through ``set_converter`` after
                         seeding, so they win over both matrix and seeds.
        type_converters: External ``TypeConverter`` hooks keyed by source type.

    Returns:
        Fully wired ``ConversionEngine`` ready for use.

    Example::

        engine = build_default_engine(profile=LENIENT)
        engine.change_type("300", numpy.uint8)   # → None (overflow)
        engine.change_type(300, numpy.uint8)     # → numpy.uint8(44)
    """
    if isinstance(type_converters, TypeConverterRegistry):
        registry = type_converters
    else:
        registry = TypeConverterRegistry(type_converters)

    cache = ResolutionCache()
    cache.seed(seed_entries(profile))

    engine = ConversionEngine(
        profile=profile,
        matrix=ConversionMatrix(build_cells(profile)),
        resolver=FallbackResolver(),
        cache=cache,
        type_converters=registry,
    )

    for (source_type, target_type), converter in (converters or {}).items():
        engine.set_converter(source_type, target_type, converter)

    logger.debug(
        "built engine profile=%s overflow_checked=%s strict_text=%s on_fail=%s seeded=%d",
        profile.name, profile.overflow_checked, profile.strict_text,
        profile.on_fail.name, len(cache),
    )
    return engine
