"""Tests for FallbackResolver: assignability, operators, type converters,
constructors."""

from decimal import Decimal

import numpy as np
import pytest

from type_convert import (
    TypeConverter,
    TypeConverterRegistry,
    UnsupportedConversionError,
    build_default_engine,
    explicit_operator,
    implicit_operator,
)
from type_convert.core import identity, invalid
from type_convert.resolvers.operators import (
    EXPLICIT,
    IMPLICIT,
    OPERATOR_ATTR,
    find_constructor,
    find_operator,
)


class Celsius:
    def __init__(self, degrees: float) -> None:
        self.degrees = degrees

    def __eq__(self, other):
        return isinstance(other, Celsius) and other.degrees == self.degrees

    def __str__(self):
        return f"{self.degrees}C"

    @implicit_operator
    def from_int(value: int) -> "Celsius":
        return Celsius(float(value))

    @explicit_operator
    def to_float(value: "Celsius") -> float:
        return value.degrees


class Kelvin:
    @implicit_operator
    def from_celsius(value: Celsius) -> "Kelvin":
        k = Kelvin()
        k.degrees = value.degrees + 273.15
        return k


class Animal:
    pass


class Dog(Animal):
    pass


class Pair:
    def __init__(self, first: int, second: int) -> None:
        self.first, self.second = first, second


class Fragile:
    @implicit_operator
    def from_str(value: str) -> "Fragile":
        raise ValueError("boom")


class MoneyConverter(TypeConverter):
    def can_convert_to(self, target_type):
        return target_type is Decimal

    def convert_to(self, value, target_type):
        return Decimal(value.cents) / 100


class Money:
    __type_converter__ = MoneyConverter

    def __init__(self, cents):
        self.cents = cents


class Point:
    def __init__(self, x, y):
        self.x, self.y = x, y


class PointConverter(TypeConverter):
    def can_convert_to(self, target_type):
        return target_type is tuple

    def convert_to(self, value, target_type):
        return (value.x, value.y)


class TestAssignability:
    """Test the identity step for subclasses."""

    def test_subclass_to_base(self, strict_engine):
        dog = Dog()
        assert strict_engine.change_type(dog, Animal) is dog

    def test_base_to_subclass_is_invalid(self, strict_engine):
        assert not strict_engine.can_convert(Animal, Dog)

    def test_any_type_to_object(self, strict_engine):
        dog = Dog()
        assert strict_engine.change_type(dog, object) is dog


class TestTextTarget:
    """Test the generic text formatter for open types."""

    def test_uses_str(self, strict_engine):
        assert strict_engine.change_type(Celsius(1.5), str) == "1.5C"

    def test_numpy_alias_to_str(self, strict_engine):
        assert strict_engine.change_type(np.float64(0.5), str) == "0.5"


class TestOperators:
    """Test implicit / explicit conversion operators."""

    def test_decorator_marks_function(self):
        func = vars(Celsius)["from_int"].__func__
        assert getattr(func, OPERATOR_ATTR) == IMPLICIT
        assert getattr(vars(Celsius)["to_float"].__func__, OPERATOR_ATTR) == EXPLICIT

    def test_operators_stay_callable(self):
        assert Celsius.from_int(3) == Celsius(3.0)

    def test_implicit_on_target(self, strict_engine):
        assert strict_engine.change_type(5, Celsius) == Celsius(5.0)

    def test_explicit_on_source(self, strict_engine):
        assert strict_engine.change_type(Celsius(3.5), float) == 3.5

    def test_operator_between_custom_types(self, strict_engine):
        kelvin = strict_engine.change_type(Celsius(0.0), Kelvin)
        assert kelvin.degrees == pytest.approx(273.15)

    def test_exact_parameter_type_required(self):
        """An operator taking int does not serve a bool source."""
        assert find_operator(bool, Celsius, IMPLICIT) is None
        assert find_operator(int, Celsius, IMPLICIT) is Celsius.from_int

    def test_flavour_is_respected(self):
        assert find_operator(Celsius, float, IMPLICIT) is None
        assert find_operator(Celsius, float, EXPLICIT) is Celsius.to_float

    def test_failing_operator(self, strict_engine, lenient_engine):
        """User exceptions collapse to UnsupportedConversionError with a cause."""
        with pytest.raises(UnsupportedConversionError) as exc_info:
            strict_engine.change_type("x", Fragile)
        assert isinstance(exc_info.value.__cause__, ValueError)
        assert lenient_engine.change_type("x", Fragile) is None
        assert strict_engine.try_change_type("x", Fragile) == (False, None)


class TestConstructors:
    """Test the single-argument constructor step."""

    def test_matching_constructor(self, strict_engine):
        assert strict_engine.change_type(2.5, Celsius) == Celsius(2.5)

    def test_find_constructor(self):
        assert find_constructor(float, Celsius) is Celsius
        assert find_constructor(int, Pair) is None

    def test_two_argument_constructor_is_ignored(self, strict_engine):
        with pytest.raises(UnsupportedConversionError):
            strict_engine.change_type(np.int32(1), Pair)

    def test_builtin_without_init(self):
        assert find_constructor(str, int) is None


class TestTypeConverters:
    """Test the type-scoped converter hook."""

    def test_class_attribute_hook(self, strict_engine):
        assert strict_engine.change_type(Money(250), Decimal) == Decimal("2.5")

    def test_hook_declines_target(self, strict_engine):
        assert not strict_engine.can_convert(Money, float)

    def test_registered_hook(self):
        engine = build_default_engine(type_converters={Point: PointConverter()})
        assert engine.change_type(Point(1, 2), tuple) == (1, 2)

    def test_unregistered_engine_ignores_hook(self, strict_engine):
        assert not strict_engine.can_convert(Point, tuple)

    def test_registry_accepts_class(self):
        registry = TypeConverterRegistry()
        registry.register(Point, PointConverter)
        assert isinstance(registry.find(Point), PointConverter)
        assert Point in registry
        registry.unregister(Point)
        assert registry.find(Point) is None

    def test_registry_rejects_non_converters(self):
        with pytest.raises(TypeError):
            TypeConverterRegistry().register(Point, object())

    def test_engine_accepts_ready_registry(self):
        registry = TypeConverterRegistry({Point: PointConverter()})
        engine = build_default_engine(type_converters=registry)
        assert engine.type_converters is registry


class TestResolutionOutcome:
    """Test what the resolver leaves in the cache."""

    def test_invalid_is_cached(self, strict_engine):
        with pytest.raises(UnsupportedConversionError):
            strict_engine.change_type(Celsius(1.0), np.int32)
        assert strict_engine.cache.get(Celsius, np.int32) is invalid

    def test_resolved_identity_is_cached(self, strict_engine):
        strict_engine.change_type(Dog(), Animal)
        assert strict_engine.cache.get(Dog, Animal) is identity

    def test_numpy_alias_target(self, strict_engine):
        result = strict_engine.change_type("1.5", np.float64)
        assert result == 1.5
        assert type(result) is np.float64

    def test_numpy_alias_source(self, strict_engine):
        result = strict_engine.change_type(np.float64(2.5), np.int32)
        assert result == 2
        assert type(result) is np.int32
