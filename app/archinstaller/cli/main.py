"""arch-installer command line.

Global flags configure output before any subcommand runs; the
subcommands themselves live in ``archinstaller.cli.commands``.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from archinstaller import __version__
from archinstaller.cli.commands import info, install, listing, reinstall, uninstall
from archinstaller.utils.formatting import err_console, set_quiet

app = typer.Typer(
    name="arch-installer",
    help="Install and uninstall Arch Linux packages on any distribution.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"arch-installer {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=_show_version,
            is_eager=True,
            help="Print the version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log diagnostic details to stderr."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only print warnings, errors and results."),
    ] = False,
) -> None:
    """Deploy binaries, desktop entries and icons from Arch Linux packages.

    Every installed file is recorded so that `uninstall` can remove
    exactly what `install` wrote.
    """
    configure_logging(verbose)
    set_quiet(quiet)


app.command(name="install")(install.install)
app.command(name="uninstall")(uninstall.uninstall)
app.command(name="reinstall")(reinstall.reinstall)
app.command(name="list")(listing.list_packages)
app.command(name="info")(info.info)


if __name__ == "__main__":
    app()
