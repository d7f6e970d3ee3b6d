"""Core abstractions, containers, and the ConversionEngine facade.

This module owns every *interface* in the system.  Concrete converters live in
the ``converters`` sub-package, the fallback resolution logic in
``resolvers``, and ``factory`` wires them together.

Request flow (``ConversionEngine.change_type`` entry point)::

    value, target_type
      │
      ├─ value is None ───────────────────────────► OnFail(MISSING)
      │
      ▼
    canonical_kind(type(value)), canonical_kind(target_type)   ← exact-type dict lookup
      │
      ├─ both canonical primitive types ──────────► ConversionMatrix.lookup   (fast path)
      │
      └─ otherwise ───────────────────────────────► ResolutionCache.get_or_resolve
                                                        └── Resolver.resolve on first miss
      │
      ▼
    converter(value) → value | Failure | raises
      │
      └─ Failure / exception ─────────────────────► OnFail (raise or None)
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from .errors import (
    ConversionError,
    Failure,
    MISSING,
    UNSUPPORTED,
    failure_for,
)
from .kinds import KIND_COUNT, KIND_INFO, Kind, canonical_kind
from .policy import PolicyProfile

logger = logging.getLogger(__name__)

Converter = Callable[[Any], Any]
TypePair = Tuple[Any, Any]

_MISSING_ARG = object()


# ─────────────────────────────────────────────────────────────────────────────
# Converter primitives
# ─────────────────────────────────────────────────────────────────────────────


def identity(value: Any) -> Any:
    """Return *value* unchanged.  Installed on the matrix diagonal."""
    return value


def invalid(value: Any) -> Any:
    """The "no conversion" converter.  ``can_convert`` tests for it by identity."""
    return UNSUPPORTED


def compose(*converters: Optional[Converter]) -> Converter:
    """Chain converters left to right, stopping at the first failure.

    ``None`` entries are skipped, so optional pre/post steps can be passed
    directly.  A single remaining converter is returned as-is.
    """
    steps = [c for c in converters if c is not None]
    if not steps:
        return identity
    if len(steps) == 1:
        return steps[0]
    if any(step is invalid for step in steps):
        return invalid

    def chained(value: Any) -> Any:
        for step in steps:
            value = step(value)
            if value is None or isinstance(value, Failure):
                return value
        return value

    return chained


# ─────────────────────────────────────────────────────────────────────────────
# Extension points
# ─────────────────────────────────────────────────────────────────────────────


class TypeConverter(ABC):
    """Type-scoped "describe how to convert me" hook.

    A type exposes one through a ``__type_converter__`` class attribute (an
    instance or a subclass of this ABC), or an application registers one with
    ``TypeConverterRegistry.register``.  The resolver consults it for the
    *source* type of a pair.
    """

    @abstractmethod
    def can_convert_to(self, target_type: Any) -> bool:
        """Return True if ``convert_to(value, target_type)`` is supported."""

    @abstractmethod
    def convert_to(self, value: Any, target_type: Any) -> Any:
        """Convert *value* to *target_type*.  May raise or return a ``Failure``."""


class Resolver(ABC):
    """Builds a converter for a type pair the matrix cannot answer.

    Called at most once per pair per engine in steady state; the result
    (including ``invalid``) is memoised by ``ResolutionCache``.
    """

    @abstractmethod
    def resolve(self, source_type: Any, target_type: Any, engine: ConversionEngine) -> Optional[Converter]:
        """Return a converter, or ``None`` when no conversion exists."""


# ─────────────────────────────────────────────────────────────────────────────
# ConversionMatrix — dense Kind × Kind table
# ─────────────────────────────────────────────────────────────────────────────


class ConversionMatrix:
    """Fully populated ``[source Kind][target Kind]`` table of converters.

    Rows are tuples and the whole table is swapped as one reference on
    override, so a reader always sees either the old or the new converter.
    ``override(..., None)`` restores the cell built at construction time.
    """

    def __init__(self, cells: Sequence[Sequence[Converter]]) -> None:
        rows = tuple(tuple(row) for row in cells)
        if len(rows) != KIND_COUNT or any(len(row) != KIND_COUNT for row in rows):
            raise ValueError(f"conversion matrix must be {KIND_COUNT}x{KIND_COUNT}")
        for src, row in enumerate(rows):
            for dst, cell in enumerate(row):
                if not callable(cell):
                    raise ValueError(f"matrix cell {Kind(src).name}->{Kind(dst).name} is not populated")
        self._built = rows
        self._rows = rows
        self._lock = threading.Lock()

    def lookup(self, source: Kind, target: Kind) -> Converter:
        return self._rows[source][target]

    def override(self, source: Kind, target: Kind, converter: Optional[Converter]) -> None:
        """Replace one cell (``None`` restores the constructed converter)."""
        with self._lock:
            rows = list(self._rows)
            row = list(rows[source])
            row[target] = converter if converter is not None else self._built[source][target]
            rows[source] = tuple(row)
            self._rows = tuple(rows)
        logger.debug("matrix cell %s->%s %s", source.name, target.name,
                     "restored" if converter is None else "overridden")

    def is_overridden(self, source: Kind, target: Kind) -> bool:
        return self._rows[source][target] is not self._built[source][target]


# ─────────────────────────────────────────────────────────────────────────────
# ResolutionCache — memoised resolver output per concrete type pair
# ─────────────────────────────────────────────────────────────────────────────


class ResolutionCache:
    """Read-through cache keyed by ``(source_type, target_type)``.

    Reads are a single ``dict.get``.  A miss calls *resolve* and publishes the
    result with ``dict.setdefault``, so concurrent first misses agree on one
    stored converter and never clobber an override installed in between.
    "Resolved to invalid" is stored as ``invalid``; absence means unresolved.
    """

    def __init__(self) -> None:
        self._entries: dict[TypePair, Converter] = {}
        self._overrides: set[TypePair] = set()
        self._lock = threading.Lock()

    def get(self, source_type: Any, target_type: Any) -> Optional[Converter]:
        return self._entries.get((source_type, target_type))

    def get_or_resolve(
            self,
            source_type: Any,
            target_type: Any,
            resolve: Callable[[Any, Any], Optional[Converter]],
    ) -> Converter:
        key = (source_type, target_type)
        converter = self._entries.get(key)
        if converter is None:
            converter = resolve(source_type, target_type) or invalid
            converter = self._entries.setdefault(key, converter)
        return converter

    def seed(self, entries: Mapping[TypePair, Converter]) -> None:
        """Pre-populate entries.  Seeds are not overrides."""
        with self._lock:
            self._entries.update(entries)

    def override(self, source_type: Any, target_type: Any, converter: Optional[Converter]) -> None:
        """Install *converter* for the pair; ``None`` reverts it to unresolved."""
        key = (source_type, target_type)
        with self._lock:
            if converter is None:
                self._entries.pop(key, None)
                self._overrides.discard(key)
            else:
                self._entries[key] = converter
                self._overrides.add(key)
        logger.debug("cache entry %s->%s %s", _name(source_type), _name(target_type),
                     "removed" if converter is None else "overridden")

    def is_override(self, source_type: Any, target_type: Any) -> bool:
        return (source_type, target_type) in self._overrides

    def target_types(self) -> list[Any]:
        """Distinct target types with a usable (non-invalid) converter."""
        return list(dict.fromkeys(
            dst for (_, dst), converter in list(self._entries.items()) if converter is not invalid
        ))

    def __contains__(self, pair: TypePair) -> bool:
        return pair in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _name(tp: Any) -> str:
    return getattr(tp, "__qualname__", repr(tp))


# ─────────────────────────────────────────────────────────────────────────────
# ConversionEngine — public entry point
# ─────────────────────────────────────────────────────────────────────────────


class ConversionEngine:
    """Routes conversion requests through the matrix or the resolver.

    An engine owns one ``ConversionMatrix``, one ``ResolutionCache`` and is
    bound to one ``PolicyProfile`` for its lifetime.  Use
    ``factory.build_default_engine`` rather than wiring one by hand.

    Public API:

    * ``change_type``     – convert or apply the profile's OnFail strategy.
    * ``try_change_type`` – ``(ok, result)``; never raises.
    * ``can_convert``     – is there a non-invalid converter for the pair?
    * ``get_converter``   – reusable ``value → value`` function.
    * ``set_converter``   – install / remove an override for a pair.
    """

    def __init__(
            self,
            *,
            profile: PolicyProfile,
            matrix: ConversionMatrix,
            resolver: Resolver,
            cache: Optional[ResolutionCache] = None,
            type_converters: Any = None,
    ) -> None:
        self._profile = profile
        self.matrix = matrix
        self.resolver = resolver
        self.cache = cache if cache is not None else ResolutionCache()
        self.type_converters = type_converters
        self._on_fail = profile.on_fail_handler

    @property
    def profile(self) -> PolicyProfile:
        return self._profile

    @property
    def output_types(self) -> list[Any]:
        """Canonical primitive types plus every target type held in the cache."""
        basic = [
            info.type for kind, info in KIND_INFO.items()
            if info.type is not None and kind is not Kind.NULL
        ]
        return list(dict.fromkeys(basic + self.cache.target_types()))

    def __repr__(self) -> str:
        return f"<ConversionEngine profile={self._profile.name!r}>"

    # -- lookup ---------------------------------------------------------------

    def lookup(self, source_type: Any, target_type: Any) -> Converter:
        """Return the raw converter for the pair (``invalid`` if none)."""
        if target_type is object:
            return identity
        src = canonical_kind(source_type)
        dst = canonical_kind(target_type)
        if src is not None and dst is not None:
            return self.matrix.lookup(src, dst)
        return self.cache.get_or_resolve(source_type, target_type, self._resolve)

    def _resolve(self, source_type: Any, target_type: Any) -> Optional[Converter]:
        return self.resolver.resolve(source_type, target_type, self)

    def _apply(self, converter: Converter, value: Any, source_type: Any, target_type: Any) -> Any:
        try:
            result = converter(value)
        except ConversionError as exc:
            return self._on_fail(failure_for(exc.kind), value, source_type, target_type, exc)
        except Exception as exc:
            return self._on_fail(UNSUPPORTED, value, source_type, target_type, exc)
        if result is None:
            return self._on_fail(UNSUPPORTED, value, source_type, target_type, None)
        if isinstance(result, Failure):
            return self._on_fail(result, value, source_type, target_type, None)
        return result

    # -- public API -----------------------------------------------------------

    def change_type(self, value: Any, target_type: Any) -> Any:
        """Convert *value* to *target_type*.

        On failure the profile's OnFail strategy either raises a
        ``ConversionError`` subclass or returns ``None``.  ``None`` as input is
        always a ``MissingValue`` failure.
        """
        if value is None:
            return self._on_fail(MISSING, value, None, target_type, None)
        source_type = type(value)
        try:
            converter = self.lookup(source_type, target_type)
        except Exception as exc:
            return self._on_fail(UNSUPPORTED, value, source_type, target_type, exc)
        return self._apply(converter, value, source_type, target_type)

    def try_change_type(self, value: Any, target_type: Any) -> Tuple[bool, Any]:
        """Convert *value*, reporting failure as ``(False, None)`` instead of raising."""
        if value is None:
            return False, None
        try:
            result = self.lookup(type(value), target_type)(value)
        except Exception:
            return False, None
        if result is None or isinstance(result, Failure):
            return False, None
        return True, result

    def can_convert(self, source_type: Any, target_type: Any) -> bool:
        """True unless the pair resolves to ``invalid``.  Never runs a converter."""
        return self.lookup(source_type, target_type) is not invalid

    def get_converter(self, source_type: Any, target_type: Any = _MISSING_ARG) -> Converter:
        """Return a reusable conversion function.

        ``get_converter(target)`` detects the source type on every call.
        ``get_converter(source, target)`` resolves once and reuses the result.
        Both apply the profile's OnFail strategy.
        """
        if target_type is _MISSING_ARG:
            target = source_type

            def convert_any(value: Any) -> Any:
                return self.change_type(value, target)

            return convert_any

        if source_type is object:
            return self.get_converter(target_type)

        try:
            converter = self.lookup(source_type, target_type)
        except Exception:
            logger.debug("lookup %s->%s failed", _name(source_type), _name(target_type), exc_info=True)
            converter = invalid

        def convert(value: Any) -> Any:
            if value is None:
                return self._on_fail(MISSING, value, None, target_type, None)
            return self._apply(converter, value, source_type, target_type)

        return convert

    def set_converter(self, source_type: Any, target_type: Any, converter: Optional[Converter]) -> None:
        """Install *converter* for the pair, or remove an override with ``None``.

        Primitive pairs replace the matrix cell; every other pair goes into the
        cache where it takes precedence over resolution.
        """
        if target_type is object:
            raise ValueError("target type object cannot be overridden")
        if converter is not None and not callable(converter):
            raise TypeError(f"converter must be callable, got {type(converter).__name__}")
        src = canonical_kind(source_type)
        dst = canonical_kind(target_type)
        if src is not None and dst is not None:
            self.matrix.override(src, dst, converter)
        else:
            self.cache.override(source_type, target_type, converter)
