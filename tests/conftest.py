"""Pytest fixtures for cargows tests."""

import logging
import os
from collections.abc import Callable
from pathlib import Path

import pytest

from cargows.foundation.config import CargowsConfig, reset_config
from cargows.foundation.errors import metadata_error


class FakeMetadataResolver:
    """Stands in for ``cargo metadata``.

    By default a manifest's workspace root is its own directory. ``roots``
    overrides that per crate directory, ``failures`` makes resolution fail.
    """

    def __init__(
        self,
        roots: dict[Path, Path] | None = None,
        failures: set[Path] | None = None,
    ) -> None:
        self.roots = roots or {}
        self.failures = failures or set()
        self.calls: list[Path] = []

    def resolve(self, manifest_path: Path) -> Path:
        self.calls.append(manifest_path)
        crate_dir = manifest_path.parent.resolve()
        if crate_dir in self.failures:
            raise metadata_error(manifest_path, "error: failed to parse manifest")
        return self.roots.get(crate_dir, crate_dir)


class FakeVersionControl:
    """Records init calls instead of running git."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.calls: list[Path] = []

    def init(self, path: Path) -> bool:
        self.calls.append(path)
        return self.succeed


def write_crate(directory: Path, name: str | None = None, extra: str = "") -> Path:
    """Create a minimal package manifest in ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    manifest = directory / "Cargo.toml"
    manifest.write_text(
        f'[package]\nname = "{name or directory.name}"\nversion = "0.1.0"\n{extra}',
        encoding="utf-8",
    )
    return manifest


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run in tmp_path with no user config and no CARGOWS_* env vars."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("CARGOWS_"):
            monkeypatch.delenv(key)
    reset_config()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """configure_logging replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config() -> CargowsConfig:
    return CargowsConfig()


@pytest.fixture
def metadata() -> FakeMetadataResolver:
    return FakeMetadataResolver()


@pytest.fixture
def vcs() -> FakeVersionControl:
    return FakeVersionControl()


@pytest.fixture
def failing_vcs() -> FakeVersionControl:
    return FakeVersionControl(succeed=False)


@pytest.fixture
def crate() -> Callable[..., Path]:
    """Factory fixture: ``crate(directory, name=None, extra="")``."""
    return write_crate
