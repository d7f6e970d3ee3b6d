"""Resolvers sub-package — fallback resolution for open and enum-like types.

fallback  – ``FallbackResolver``, the ordered resolution algorithm
operators – ``implicit_operator`` / ``explicit_operator`` and constructor discovery
registry  – ``TypeConverterRegistry`` for type-scoped converter hooks
"""

from .fallback import FallbackResolver
from .operators import explicit_operator, find_constructor, find_operator, implicit_operator
from .registry import TypeConverterRegistry

__all__ = [
    "FallbackResolver",
    "TypeConverterRegistry",
    "explicit_operator",
    "find_constructor",
    "find_operator",
    "implicit_operator",
]
