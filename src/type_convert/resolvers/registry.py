"""Registry of type-scoped ``TypeConverter`` hooks.

Lookup order for a source type:

1. an explicit ``register(tp, converter)`` entry;
2. a ``__type_converter__`` attribute on the type (a ``TypeConverter`` instance,
   or a ``TypeConverter`` subclass which is instantiated once).
"""

from __future__ import annotations

import threading
from typing import Any, Mapping, Optional

from ..core import TypeConverter


class TypeConverterRegistry:
    """Maps a source type to the ``TypeConverter`` describing it."""

    def __init__(self, converters: Optional[Mapping[Any, TypeConverter]] = None) -> None:
        self._converters: dict[Any, TypeConverter] = {}
        self._lock = threading.Lock()
        for tp, converter in (converters or {}).items():
            self.register(tp, converter)

    def register(self, tp: Any, converter: TypeConverter) -> None:
        if isinstance(converter, type) and issubclass(converter, TypeConverter):
            converter = converter()
        if not isinstance(converter, TypeConverter):
            raise TypeError(f"expected a TypeConverter, got {type(converter).__name__}")
        with self._lock:
            self._converters[tp] = converter

    def unregister(self, tp: Any) -> None:
        with self._lock:
            self._converters.pop(tp, None)

    def find(self, tp: Any) -> Optional[TypeConverter]:
        """Return the converter registered or declared for *tp*, if any."""
        converter = self._converters.get(tp)
        if converter is not None:
            return converter
        declared = getattr(tp, "__type_converter__", None)
        if isinstance(declared, type) and issubclass(declared, TypeConverter):
            return declared()
        if isinstance(declared, TypeConverter):
            return declared
        return None

    def __contains__(self, tp: Any) -> bool:
        return tp in self._converters
