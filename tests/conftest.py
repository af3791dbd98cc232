"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from archinstaller.core.classifier import Classifier
from archinstaller.core.deployer import Deployer
from archinstaller.core.environment import StaticEnvironment
from archinstaller.core.manifest import ManifestStore
from archinstaller.core.reverser import Reverser

from tests.fakes import PKGINFO, FakeSniffer


@pytest.fixture
def fake_sniffer() -> FakeSniffer:
    return FakeSniffer()


@pytest.fixture
def classifier(fake_sniffer: FakeSniffer) -> Classifier:
    return Classifier(fake_sniffer)


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """Home directory of the fake user, with an unrelated file in it."""
    home = tmp_path / "home" / "alice"
    home.mkdir(parents=True)
    (home / ".bashrc").write_text("# bashrc\n")
    return home


@pytest.fixture
def env(home_dir: Path) -> StaticEnvironment:
    """Unprivileged environment for the fake user."""
    return StaticEnvironment(variables={}, home_dir=home_dir, root=False)


@pytest.fixture
def store(tmp_path: Path) -> ManifestStore:
    return ManifestStore(log_dir=tmp_path / "state" / "arch-installer")


@pytest.fixture
def prefix(tmp_path: Path) -> Path:
    """A prefix that does not require root, holding one unrelated file."""
    root = tmp_path / "testroot"
    root.mkdir()
    (root / "README").write_text("not ours\n")
    return root


@pytest.fixture
def refresher() -> MagicMock:
    return MagicMock(return_value=True)


@pytest.fixture
def make_package(tmp_path: Path) -> Callable[..., Path]:
    """Factory for extracted package trees.

    Usage:
        root = make_package({"usr/bin/foo": EXECUTABLE})
    """
    counter = iter(range(1000))

    def _make(files: dict[str, bytes], pkginfo: str | None = PKGINFO) -> Path:
        root = tmp_path / "extracted" / str(next(counter))
        root.mkdir(parents=True)
        if pkginfo is not None:
            (root / ".PKGINFO").write_text(pkginfo)
        for rel, data in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        return root

    return _make


@pytest.fixture
def deployer(
    env: StaticEnvironment,
    store: ManifestStore,
    classifier: Classifier,
    refresher: MagicMock,
) -> Deployer:
    return Deployer(
        env=env,
        store=store,
        classifier=classifier,
        confirm=lambda _message: True,
        refresher=refresher,
    )


@pytest.fixture
def reverser(env: StaticEnvironment, store: ManifestStore, refresher: MagicMock) -> Reverser:
    return Reverser(
        env=env,
        store=store,
        confirm=lambda _message: True,
        refresher=refresher,
    )
