"""Uninstall command.

This module provides the `arch-installer uninstall` command, which
removes every file recorded in a package's installation manifest.
"""

from typing import Annotated

import typer

from archinstaller.cli.types import PrefixOption, YesOption, build_reverser, get_prefix
from archinstaller.core.config import InstallerConfig, load_config
from archinstaller.core.environment import Environment
from archinstaller.core.errors import InstallerError
from archinstaller.core.paths import get_config_path
from archinstaller.models.package import PackageIdentity
from archinstaller.models.report import ReverseReport
from archinstaller.utils.formatting import console, print_error, print_success


def uninstall(
    package: Annotated[
        str,
        typer.Argument(help="Package name or archive it was installed from.", show_default=False),
    ],
    prefix: PrefixOption = None,
    yes: YesOption = False,
) -> None:
    """Uninstall a package installed by arch-installer.

    Use the same --prefix the package was installed with so that the
    right directories are cleaned up.

    Examples:
        sudo arch-installer uninstall foo
        arch-installer uninstall foo --prefix ~/.local
    """
    env = Environment()
    try:
        config = load_config(get_config_path(env))
        report = uninstall_package(
            PackageIdentity.from_argument(package), get_prefix(prefix, config), env, config, yes
        )
    except (InstallerError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    show_reverse_summary(report)
    print_success("Uninstallation completed!")


def uninstall_package(
    package: PackageIdentity,
    prefix: str,
    env: Environment,
    config: InstallerConfig,
    yes: bool,
) -> ReverseReport:
    """Remove a package recorded in the manifest store.

    Raises:
        InstallerError: If any step of the uninstall fails.
    """
    return build_reverser(env, config, yes).reverse(package, prefix)


def show_reverse_summary(report: ReverseReport) -> None:
    """Print a one-line summary of a removal."""
    console.print(
        f"[muted]{len(report.removed)} removed, {len(report.missing)} already gone, "
        f"{len(report.pruned_dirs)} empty directories cleaned up[/]"
    )
