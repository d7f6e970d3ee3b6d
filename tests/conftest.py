"""pytest configuration and shared fixtures."""

import pytest

from type_convert import LENIENT, STRICT, EnumCase, build_default_engine


@pytest.fixture
def strict_engine():
    """Fresh engine on the strict profile (raises on failure)."""
    return build_default_engine(profile=STRICT)


@pytest.fixture
def lenient_engine():
    """Fresh engine on the lenient profile (wraps, returns None on failure)."""
    return build_default_engine(profile=LENIENT)


@pytest.fixture
def numeric_bool_engine():
    """Strict engine with the bool ↔ numeric cells installed."""
    return build_default_engine(profile=STRICT.derive(boolean_numerics=True))


@pytest.fixture
def ignore_case_engine():
    """Strict engine that matches enum names case-insensitively."""
    return build_default_engine(profile=STRICT.derive(enum_case=EnumCase.IGNORE))


@pytest.fixture(params=["strict", "lenient"])
def any_engine(request):
    """Parametrised over both canonical profiles."""
    profile = STRICT if request.param == "strict" else LENIENT
    return build_default_engine(profile=profile)
