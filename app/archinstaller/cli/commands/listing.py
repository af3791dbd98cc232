"""List command.

This module provides the `arch-installer list` command, which reports
how many packages have an installation manifest.
"""

from typing import Annotated

import typer

from archinstaller.core.environment import Environment
from archinstaller.core.manifest import ManifestStore
from archinstaller.utils.formatting import console


def list_packages(
    names: Annotated[
        bool,
        typer.Option(
            "--names",
            "-n",
            help="Also print the installed package names.",
        ),
    ] = False,
) -> None:
    """Print the number of installed packages.

    Examples:
        arch-installer list
        arch-installer list --names
    """
    store = ManifestStore(env=Environment())
    package_names = store.list_names()

    console.print(str(len(package_names)), markup=False)
    if names:
        for name in package_names:
            console.print(name, markup=False)
