from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError, requires

import pytest

import aexchange


def test_version() -> None:
    """Test that the package exposes a version string."""
    assert isinstance(aexchange.__version__, str)


def test_public_api() -> None:
    """Test that every exported name is available."""
    for name in aexchange.__all__:
        assert hasattr(aexchange, name)


@pytest.mark.parametrize("distribution", ["httpx", "pydantic", "pydantic-core"])
def test_runtime_dependency_declared(distribution: str) -> None:
    """Test that every distribution imported at runtime is a declared
    requirement."""
    try:
        requirements = requires("aexchange") or []
    except PackageNotFoundError:
        pytest.skip("aexchange is not installed")
    names = {re.split(r"[\s;\[<>=!~]", req, maxsplit=1)[0].lower() for req in requirements}
    assert distribution in names
