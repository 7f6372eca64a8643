"""Unit coverage for the project version helper."""

from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path

import pytest

from calendarl10n.version import get_project_version

PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


@pytest.fixture(autouse=True)
def _reset_version_cache():
    get_project_version.cache_clear()  # type: ignore[attr-defined]
    yield
    get_project_version.cache_clear()  # type: ignore[attr-defined]


def _declared_version() -> str:
    match = re.search(r'^version\s*=\s*"([^"]+)"', PYPROJECT.read_text(encoding="utf-8"), re.M)
    assert match is not None, "pyproject.toml must declare a version"
    return match.group(1)


def test_installed_metadata_takes_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(metadata, "version", lambda package: "9.9.9")

    assert get_project_version() == "9.9.9"


def test_checkout_without_metadata_reads_pyproject(monkeypatch: pytest.MonkeyPatch) -> None:
    def _not_installed(package: str) -> str:
        raise metadata.PackageNotFoundError(package)

    monkeypatch.setattr(metadata, "version", _not_installed)

    assert get_project_version() == _declared_version()
