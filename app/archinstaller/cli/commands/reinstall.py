"""Reinstall command.

This module provides the `arch-installer reinstall` command: an
uninstall of the package followed by a fresh install from the archive.
"""

from pathlib import Path
from typing import Annotated

import typer

from archinstaller.cli.commands.install import install_archive, show_deploy_summary
from archinstaller.cli.commands.uninstall import show_reverse_summary, uninstall_package
from archinstaller.cli.types import PrefixOption, YesOption, get_prefix
from archinstaller.core.config import load_config
from archinstaller.core.environment import Environment
from archinstaller.core.errors import InstallerError
from archinstaller.core.paths import get_config_path
from archinstaller.models.package import PackageIdentity
from archinstaller.utils.formatting import print_error, print_success


def reinstall(
    package: Annotated[
        Path,
        typer.Argument(help="Package archive (*.pkg.tar.zst).", show_default=False),
    ],
    prefix: PrefixOption = None,
    yes: YesOption = False,
) -> None:
    """Uninstall a package, then install it again from an archive.

    The package must have been installed before; its name is derived
    from the archive file name.

    Examples:
        sudo arch-installer reinstall foo-1.1-1-x86_64.pkg.tar.zst
    """
    env = Environment()
    try:
        config = load_config(get_config_path(env))
        effective_prefix = get_prefix(prefix, config)
        identity = PackageIdentity.from_archive(package)

        reverse_report = uninstall_package(identity, effective_prefix, env, config, yes)
        show_reverse_summary(reverse_report)

        deploy_report = install_archive(package, effective_prefix, env, config, yes)
        show_deploy_summary(deploy_report)
    except InstallerError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success("Reinstallation completed!")
