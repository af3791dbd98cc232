"""Install command.

This module provides the `arch-installer install` command, which
extracts a package archive and deploys its binaries, desktop entries
and icons under a prefix.
"""

from pathlib import Path
from typing import Annotated

import typer

from archinstaller.cli.types import PrefixOption, YesOption, build_deployer, get_prefix
from archinstaller.core.archive import extracted_package
from archinstaller.core.config import InstallerConfig, load_config
from archinstaller.core.environment import Environment
from archinstaller.core.errors import InstallerError
from archinstaller.core.paths import get_config_path
from archinstaller.core.policy import ensure_privilege, resolve
from archinstaller.models.package import PackageIdentity
from archinstaller.models.report import DeployReport
from archinstaller.utils.formatting import console, print_error, print_success


def install(
    package: Annotated[
        Path,
        typer.Argument(help="Package archive (*.pkg.tar.zst).", show_default=False),
    ],
    prefix: PrefixOption = None,
    yes: YesOption = False,
) -> None:
    """Install an Arch Linux package archive.

    Binaries go to PREFIX/bin. Desktop entries and icons go to
    PREFIX/share for /usr/local and to ~/.local/share otherwise.

    Examples:
        sudo arch-installer install foo-1.0-1-x86_64.pkg.tar.zst
        arch-installer install foo-1.0-1-x86_64.pkg.tar.zst --prefix ~/.local
    """
    env = Environment()
    try:
        config = load_config(get_config_path(env))
        report = install_archive(package, get_prefix(prefix, config), env, config, yes)
    except InstallerError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    show_deploy_summary(report)
    print_success("Installation completed!")


def install_archive(
    package: Path,
    prefix: str,
    env: Environment,
    config: InstallerConfig,
    yes: bool,
) -> DeployReport:
    """Extract an archive and deploy it under a prefix.

    Raises:
        InstallerError: If any step of the install fails.
    """
    identity = PackageIdentity.from_archive(package)
    # Fail before extracting when the prefix is out of reach
    ensure_privilege(resolve(prefix, env), env, action="install to")

    deployer = build_deployer(env, config, yes)
    with extracted_package(package) as extracted_dir:
        return deployer.deploy(extracted_dir, prefix, identity)


def show_deploy_summary(report: DeployReport) -> None:
    """Print a one-line summary of a deployment."""
    console.print(
        f"[muted]{len(report.installed)} installed, {len(report.existing)} already present, "
        f"{len(report.rejected)} skipped[/]"
    )
