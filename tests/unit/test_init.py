r"""Unit tests for package initialization and metadata."""

from __future__ import annotations

import aresume


def test_package_version_is_string() -> None:
    assert isinstance(aresume.__version__, str)


def test_package_version_format() -> None:
    assert "." in aresume.__version__


def test_all_exports_defined() -> None:
    for name in aresume.__all__:
        assert hasattr(aresume, name), f"{name} is in __all__ but not defined in module"


def test_all_exports_no_duplicates() -> None:
    assert len(set(aresume.__all__)) == len(aresume.__all__)


def test_defaults_exported() -> None:
    assert aresume.DEFAULT_MAX_TRIES == 3
    assert aresume.DEFAULT_DELAY is None
    assert aresume.DEFAULT_TIMEOUT == 10.0
