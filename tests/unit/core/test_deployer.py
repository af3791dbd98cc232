"""Unit tests for the Deployer.

Packages are built as extracted trees under tmp_path and deployed into a
prefix that does not require root. Content detection uses FakeSniffer.
"""

import logging
import stat
import struct
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from archinstaller.core.classifier import Classifier
from archinstaller.core.deployer import Deployer, iter_files
from archinstaller.core.environment import StaticEnvironment
from archinstaller.core.errors import (
    InstallerIOError,
    MetadataUnreadableError,
    PermissionPolicyError,
    UserCancelledError,
)
from archinstaller.core.manifest import ManifestStore
from archinstaller.core.policy import Category
from archinstaller.models.package import PackageIdentity

from tests.fakes import EXECUTABLE, JPEG, PNG, SHARED_LIBRARY, SVG, TEXT, make_elf

FOO = PackageIdentity(name="foo")

DESKTOP_ENTRY = b"[Desktop Entry]\nName=Foo\nExec=foo\n"


@pytest.fixture
def full_package(make_package: Callable[..., Path]) -> Path:
    return make_package(
        {
            "usr/bin/foo": EXECUTABLE,
            "usr/bin/libfoo.so": SHARED_LIBRARY,
            "usr/bin/foo-wrapper": TEXT,
            "usr/share/applications/foo.desktop": DESKTOP_ENTRY,
            "usr/share/applications/README": b"not a desktop entry",
            "usr/share/icons/hicolor/48x48/apps/foo.png": PNG,
            "usr/share/icons/hicolor/scalable/apps/foo.svg": SVG,
            "usr/share/icons/hicolor/48x48/apps/foo.jpg": JPEG,
            "usr/share/icons/hicolor/48x48/apps/broken.png": TEXT,
            "usr/share/doc/foo/README": b"documentation",
        }
    )


class TestDeployContents:
    """Tests for what gets deployed where."""

    def test_binaries_installed_executable(
        self, deployer: Deployer, full_package: Path, prefix: Path
    ) -> None:
        """ELF executables and libraries land in PREFIX/bin with mode 0755."""
        report = deployer.deploy(full_package, str(prefix), FOO)

        for name in ("foo", "libfoo.so"):
            dest = prefix / "bin" / name
            assert dest.is_file()
            assert stat.S_IMODE(dest.stat().st_mode) == 0o755
            assert dest in report.installed

    def test_non_elf_binary_rejected(
        self, deployer: Deployer, full_package: Path, prefix: Path
    ) -> None:
        """A shell script in usr/bin is not deployed."""
        report = deployer.deploy(full_package, str(prefix), FOO)
        assert not (prefix / "bin" / "foo-wrapper").exists()
        assert full_package / "usr/bin/foo-wrapper" in report.rejected

    def test_desktop_entries_filtered_by_extension(
        self, deployer: Deployer, full_package: Path, prefix: Path, home_dir: Path
    ) -> None:
        """Desktop entries go to the user's applications directory for custom prefixes."""
        deployer.deploy(full_package, str(prefix), FOO)
        applications = home_dir / ".local/share/applications"
        assert (applications / "foo.desktop").read_bytes() == DESKTOP_ENTRY
        assert not (applications / "README").exists()

    def test_icons_keep_theme_layout(
        self, deployer: Deployer, full_package: Path, prefix: Path, home_dir: Path
    ) -> None:
        """PNG and SVG icons keep their relative path under the icon root."""
        report = deployer.deploy(full_package, str(prefix), FOO)
        icons = home_dir / ".local/share/icons/hicolor"
        assert (icons / "48x48/apps/foo.png").read_bytes() == PNG
        assert (icons / "scalable/apps/foo.svg").read_bytes() == SVG
        assert not (icons / "48x48/apps/foo.jpg").exists()
        assert not (icons / "48x48/apps/broken.png").exists()
        assert full_package / "usr/share/icons/hicolor/48x48/apps/broken.png" in report.rejected

    def test_icon_mode_not_forced_executable(
        self, deployer: Deployer, full_package: Path, prefix: Path, home_dir: Path
    ) -> None:
        deployer.deploy(full_package, str(prefix), FOO)
        icon = home_dir / ".local/share/icons/hicolor/48x48/apps/foo.png"
        assert not stat.S_IMODE(icon.stat().st_mode) & stat.S_IXUSR

    def test_other_directories_ignored(
        self, deployer: Deployer, full_package: Path, prefix: Path
    ) -> None:
        deployer.deploy(full_package, str(prefix), FOO)
        assert not (prefix / "share" / "doc").exists()

    def test_rejected_files_never_recorded(
        self, deployer: Deployer, full_package: Path, prefix: Path, store: ManifestStore
    ) -> None:
        deployer.deploy(full_package, str(prefix), FOO)
        entries = store.read("foo")
        rejected = ("foo-wrapper", "foo.jpg", "broken.png", "README")
        assert not any(e.endswith(rejected) for e in entries)

    def test_classifies_by_content_not_name(
        self, deployer: Deployer, make_package: Callable[..., Path], prefix: Path, home_dir: Path
    ) -> None:
        """A PNG named .svg is still a valid icon; a PNG in usr/bin is not a binary."""
        package = make_package(
            {
                "usr/bin/image": PNG,
                "usr/share/icons/foo.svg": PNG,
            }
        )
        deployer.deploy(package, str(prefix), FOO)
        assert not (prefix / "bin" / "image").exists()
        assert (home_dir / ".local/share/icons/foo.svg").exists()

    def test_malformed_elf_rejected(
        self,
        env: StaticEnvironment,
        store: ManifestStore,
        make_package: Callable[..., Path],
        prefix: Path,
    ) -> None:
        """An ELF with a corrupt program header table is skipped, not fatal."""
        image = make_elf(3, interp=True)
        broken = image[:32] + struct.pack("<Q", 2**64 - 16) + image[40:]
        package = make_package({"usr/bin/foo": make_elf(2), "usr/bin/broken": broken})
        deployer = Deployer(
            env=env,
            store=store,
            classifier=Classifier(),
            confirm=lambda _message: True,
            refresher=MagicMock(return_value=True),
        )

        report = deployer.deploy(package, str(prefix), FOO)

        assert report.installed == [prefix / "bin" / "foo"]
        assert package / "usr/bin/broken" in report.rejected
        assert not (prefix / "bin" / "broken").exists()


class TestManifestCompleteness:
    """Tests for the manifest written during deployment."""

    def test_manifest_lists_every_written_path(
        self, deployer: Deployer, full_package: Path, prefix: Path, store: ManifestStore
    ) -> None:
        report = deployer.deploy(full_package, str(prefix), FOO)
        entries = store.read("foo")

        assert sorted(entries) == sorted(str(p) for p in report.installed)
        assert report.manifest_path == store.path_for("foo")
        assert all(Path(e).is_absolute() for e in entries)

    def test_processing_order(
        self, deployer: Deployer, full_package: Path, prefix: Path, store: ManifestStore
    ) -> None:
        """Binaries are recorded first, then desktop entries, then icons."""
        deployer.deploy(full_package, str(prefix), FOO)
        entries = store.read("foo")
        assert entries[0].endswith("/bin/foo")
        assert entries[2].endswith("/applications/foo.desktop")
        assert entries[-1].endswith(".svg")

    def test_path_recorded_before_copy(
        self,
        deployer: Deployer,
        make_package: Callable[..., Path],
        prefix: Path,
        store: ManifestStore,
    ) -> None:
        """A failed copy still leaves its destination in the manifest."""
        package = make_package({"usr/bin/foo": EXECUTABLE})
        with (
            patch(
                "archinstaller.core.deployer.shutil.copyfile",
                side_effect=OSError("No space left on device"),
            ),
            pytest.raises(InstallerIOError, match="Failed to copy"),
        ):
            deployer.deploy(package, str(prefix), FOO)

        assert store.read("foo") == [str(prefix / "bin" / "foo")]

    def test_empty_package_writes_empty_manifest(
        self,
        deployer: Deployer,
        make_package: Callable[..., Path],
        prefix: Path,
        store: ManifestStore,
    ) -> None:
        package = make_package({})
        report = deployer.deploy(package, str(prefix), FOO)
        assert store.read("foo") == []
        assert report.missing_categories == [Category.BINARIES, Category.DESKTOP, Category.ICONS]


class TestExistingDestinations:
    """Tests for collisions with files already on disk."""

    def test_existing_file_never_overwritten(
        self,
        deployer: Deployer,
        make_package: Callable[..., Path],
        prefix: Path,
        store: ManifestStore,
    ) -> None:
        """An existing destination is recorded and left untouched."""
        (prefix / "bin").mkdir()
        (prefix / "bin" / "foo").write_bytes(b"theirs")
        package = make_package({"usr/bin/foo": EXECUTABLE})

        report = deployer.deploy(package, str(prefix), FOO)

        assert (prefix / "bin" / "foo").read_bytes() == b"theirs"
        assert report.existing == [prefix / "bin" / "foo"]
        assert report.installed == []
        assert store.read("foo") == [str(prefix / "bin" / "foo")]

    def test_existing_prints_warning(
        self,
        deployer: Deployer,
        make_package: Callable[..., Path],
        prefix: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        (prefix / "bin").mkdir()
        (prefix / "bin" / "foo").write_bytes(b"theirs")
        deployer.deploy(make_package({"usr/bin/foo": EXECUTABLE}), str(prefix), FOO)
        assert "already exists, skipping" in capsys.readouterr().err

    def test_second_install_is_idempotent(
        self, deployer: Deployer, full_package: Path, prefix: Path, store: ManifestStore
    ) -> None:
        """Installing twice yields the same manifest and copies nothing new."""
        deployer.deploy(full_package, str(prefix), FOO)
        first = store.read("foo")

        report = deployer.deploy(full_package, str(prefix), FOO)

        assert store.read("foo") == first
        assert report.installed == []
        assert sorted(str(p) for p in report.existing) == sorted(first)


class TestConsentAndGates:
    """Tests for the checks that happen before any write."""

    def test_shows_dependencies(
        self,
        deployer: Deployer,
        full_package: Path,
        prefix: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        deployer.deploy(full_package, str(prefix), FOO)
        out = capsys.readouterr().out
        assert "Required dependencies:" in out
        assert "gtk3>=3.24" in out
        assert "git: version control support" in out
        assert "Package: foo 1.0-1" in out

    def test_no_dependencies_listed(
        self,
        deployer: Deployer,
        make_package: Callable[..., Path],
        prefix: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        deployer.deploy(make_package({}, pkginfo="pkgname = foo\n"), str(prefix), FOO)
        out = capsys.readouterr().out
        assert "Package: foo\n" in out
        assert "No required dependencies listed." in out
        assert "No optional dependencies listed." in out

    def test_cancellation_writes_nothing(
        self,
        env: StaticEnvironment,
        store: ManifestStore,
        classifier: Classifier,
        full_package: Path,
        prefix: Path,
    ) -> None:
        prompts: list[str] = []

        def refuse(message: str) -> bool:
            prompts.append(message)
            return False

        deployer = Deployer(env=env, store=store, classifier=classifier, confirm=refuse)
        with pytest.raises(UserCancelledError, match="Installation cancelled by user."):
            deployer.deploy(full_package, str(prefix), FOO)

        assert prompts == ["Are you sure you want to install this package?"]
        assert not store.exists("foo")
        assert not (prefix / "bin").exists()

    def test_missing_metadata_aborts(
        self,
        deployer: Deployer,
        make_package: Callable[..., Path],
        prefix: Path,
        store: ManifestStore,
    ) -> None:
        package = make_package({"usr/bin/foo": EXECUTABLE}, pkginfo=None)
        with pytest.raises(MetadataUnreadableError):
            deployer.deploy(package, str(prefix), FOO)
        assert not store.exists("foo")
        assert not (prefix / "bin").exists()

    def test_privilege_gate(
        self, deployer: Deployer, full_package: Path, store: ManifestStore
    ) -> None:
        """Installing to /usr/local unprivileged fails before anything is written."""
        confirm = MagicMock(return_value=True)
        deployer._confirm = confirm

        with pytest.raises(PermissionPolicyError, match="sudo or doas"):
            deployer.deploy(full_package, "/usr/local", FOO)

        confirm.assert_not_called()
        assert not store.log_dir.exists()


class TestDesktopRefresh:
    """Tests for the desktop database refresh."""

    def test_not_refreshed_for_custom_prefix(
        self, deployer: Deployer, full_package: Path, prefix: Path, refresher: MagicMock
    ) -> None:
        report = deployer.deploy(full_package, str(prefix), FOO)
        refresher.assert_not_called()
        assert report.desktop_database_refreshed is False

    def test_refreshed_for_system_prefix(
        self,
        deployer: Deployer,
        full_package: Path,
        prefix: Path,
        refresher: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """The system prefix keeps desktop entries under PREFIX/share and refreshes."""
        monkeypatch.setattr("archinstaller.core.policy.SYSTEM_PREFIX", str(prefix))

        report = deployer.deploy(full_package, str(prefix), FOO)

        assert (prefix / "share/applications/foo.desktop").exists()
        refresher.assert_called_once_with(prefix / "share/applications")
        assert report.desktop_database_refreshed is True

    def test_refresh_failure_does_not_fail_install(
        self,
        deployer: Deployer,
        full_package: Path,
        prefix: Path,
        refresher: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("archinstaller.core.policy.SYSTEM_PREFIX", str(prefix))
        refresher.return_value = False

        report = deployer.deploy(full_package, str(prefix), FOO)

        assert report.desktop_database_refreshed is False
        assert (prefix / "bin" / "foo").exists()

    def test_not_refreshed_without_desktop_entries(
        self,
        deployer: Deployer,
        make_package: Callable[..., Path],
        prefix: Path,
        refresher: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("archinstaller.core.policy.SYSTEM_PREFIX", str(prefix))
        deployer.deploy(make_package({"usr/bin/foo": EXECUTABLE}), str(prefix), FOO)
        refresher.assert_not_called()

    def test_refresh_disabled(
        self,
        env: StaticEnvironment,
        store: ManifestStore,
        classifier: Classifier,
        full_package: Path,
        prefix: Path,
        refresher: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("archinstaller.core.policy.SYSTEM_PREFIX", str(prefix))
        deployer = Deployer(
            env=env,
            store=store,
            classifier=classifier,
            confirm=lambda _message: True,
            refresher=refresher,
            refresh_desktop=False,
        )
        deployer.deploy(full_package, str(prefix), FOO)
        refresher.assert_not_called()


class TestIterFiles:
    """Tests for source file enumeration."""

    def test_recursive_sorted_files_only(self, tmp_path: Path) -> None:
        (tmp_path / "b").mkdir()
        (tmp_path / "b" / "z").write_text("")
        (tmp_path / "a").write_text("")
        (tmp_path / "empty").mkdir()
        assert list(iter_files(tmp_path)) == [tmp_path / "a", tmp_path / "b" / "z"]

    def test_symlink_inside_package_followed(self, tmp_path: Path) -> None:
        (tmp_path / "real").write_text("")
        (tmp_path / "link").symlink_to(tmp_path / "real")
        assert tmp_path / "link" in list(iter_files(tmp_path))

    def test_symlink_leaving_package_skipped(self, tmp_path: Path) -> None:
        outside = tmp_path / "outside"
        outside.write_text("secret")
        package = tmp_path / "package"
        package.mkdir()
        (package / "link").symlink_to(outside)
        assert list(iter_files(package)) == []

    def test_dangling_symlink_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "dangling").symlink_to(tmp_path / "missing")
        assert list(iter_files(tmp_path)) == []


class TestDeployLogging:
    """Tests for diagnostic logging."""

    def test_logs_summary(
        self,
        deployer: Deployer,
        full_package: Path,
        prefix: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level(logging.INFO, logger="archinstaller.core.deployer")
        deployer.deploy(full_package, str(prefix), FOO)
        assert "Deployed foo: 5 installed, 0 existing, 2 rejected" in caplog.text

    def test_logs_rejected_mime_type(
        self,
        deployer: Deployer,
        make_package: Callable[..., Path],
        prefix: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="archinstaller.core.deployer")
        deployer.deploy(make_package({"usr/share/icons/foo.png": JPEG}), str(prefix), FOO)
        assert "detected image/jpeg" in caplog.text
