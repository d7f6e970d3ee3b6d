"""Conversion operators and single-argument constructors.

A class declares a conversion operator by decorating a function taking one
annotated parameter and annotated with its return type::

    class Celsius:
        @implicit_operator
        def from_float(value: float) -> "Celsius":
            return Celsius(value)

        @explicit_operator
        def to_float(value: "Celsius") -> float:
            return value.degrees

The decorators return a ``staticmethod``.  Discovery looks at the *target*
type first, then the source type, and requires the parameter annotation to be
exactly the source type and the return annotation exactly the target type.
Annotations are resolved with ``typing.get_type_hints``, so string and
postponed annotations work as long as the names are importable from the
defining module.
"""

from __future__ import annotations

import inspect
import typing
from typing import Any, Callable, Iterator, Optional

OPERATOR_ATTR = "__conversion_operator__"
IMPLICIT = "implicit"
EXPLICIT = "explicit"

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _mark(func: Callable[..., Any], flavour: str) -> staticmethod:
    if isinstance(func, staticmethod):
        func = func.__func__
    setattr(func, OPERATOR_ATTR, flavour)
    return staticmethod(func)


def implicit_operator(func: Callable[..., Any]) -> staticmethod:
    """Declare a lossless conversion operator on the enclosing class."""
    return _mark(func, IMPLICIT)


def explicit_operator(func: Callable[..., Any]) -> staticmethod:
    """Declare a (possibly lossy) conversion operator on the enclosing class."""
    return _mark(func, EXPLICIT)


def _operators(owner: type, flavour: str) -> Iterator[Callable[..., Any]]:
    for attr in vars(owner).values():
        func = attr.__func__ if isinstance(attr, (staticmethod, classmethod)) else attr
        if getattr(func, OPERATOR_ATTR, None) == flavour:
            yield func


def _single_parameter(func: Callable[..., Any]) -> Optional[str]:
    try:
        params = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        return None
    if len(params) != 1 or params[0].kind not in _POSITIONAL:
        return None
    return params[0].name


def _hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except Exception:
        # Unresolvable forward references make the candidate unusable.
        return {}


def find_operator(source_type: Any, target_type: Any, flavour: str) -> Optional[Callable[..., Any]]:
    """Return the operator of *flavour* converting *source_type* to *target_type*."""
    for owner in (target_type, source_type):
        if not isinstance(owner, type):
            continue
        for func in _operators(owner, flavour):
            name = _single_parameter(func)
            if name is None:
                continue
            hints = _hints(func)
            if hints.get(name) is source_type and hints.get("return") is target_type:
                return func
    return None


def find_constructor(source_type: Any, target_type: Any) -> Optional[Callable[..., Any]]:
    """Return *target_type* itself if its constructor takes exactly one
    parameter annotated as *source_type*."""
    if not isinstance(target_type, type) or target_type.__init__ is object.__init__:
        return None
    name = _single_parameter(target_type)
    if name is None:
        return None
    if _hints(target_type.__init__).get(name) is not source_type:
        return None
    return target_type
