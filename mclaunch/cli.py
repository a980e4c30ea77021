"""Command-line interface.

``mclaunch launch <version> [username]`` resolves, downloads and starts a
version; ``mclaunch versions`` lists what the version index offers.
"""

import asyncio
import logging
import shlex
from typing import Optional

import typer

from .auth import DEFAULT_USERNAME
from .config import LauncherSettings
from .core.game_launcher import GameLauncher, LaunchCommand, new_launcher
from .errors import LauncherError
from .utils.fetcher import select_fetcher
from .utils.logger import setup_logging
from .versions.manager import VersionManager

log = logging.getLogger(__name__)

app = typer.Typer(
    name="mclaunch",
    help="Download and launch Minecraft versions from the command line.",
    no_args_is_help=True,
    add_completion=False,
)

USAGE = """Usage: mclaunch launch <VERSION> [USERNAME]
Example: mclaunch launch 1.21.6 MyPlayer

Environment variables:
  MC_DIR    : Minecraft directory (default: ~/.minecraft)"""


def _fail(error: LauncherError):
    log.debug("Aborting", exc_info=error)
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=error.exit_code)


async def _prepare(settings: LauncherSettings, version_id: str, username: str) -> LaunchCommand:
    launcher = new_launcher(settings)
    async with launcher.fetcher:
        return await launcher.prepare_launch(version_id, username)


@app.command(name="launch", help="Download VERSION if needed and start it.")
def launch_cmd(
    version_id: Optional[str] = typer.Argument(None, metavar="VERSION", help="Version id, e.g. 1.21.5."),
    username: str = typer.Argument(DEFAULT_USERNAME, help="Offline player name."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the command instead of running it."),
) -> None:
    if not version_id:
        typer.echo(USAGE, err=True)
        raise typer.Exit(code=1)

    settings = LauncherSettings()
    setup_logging(settings.log_level, settings.log_file)
    log.info("Minecraft Client Launcher: version %s, user %s, directory %s",
             version_id, username, settings.mc_dir)

    try:
        command = asyncio.run(_prepare(settings, version_id, username))
        if dry_run:
            typer.echo(shlex.join(command.argv))
            return
        GameLauncher.launch_game(command)
    except LauncherError as e:
        _fail(e)


async def _list_versions(settings: LauncherSettings):
    async with select_fetcher(settings) as fetcher:
        return await VersionManager(settings, fetcher).fetch_manifest()


@app.command(name="versions", help="List versions published in the version index.")
def versions_cmd(
    version_type: Optional[str] = typer.Option(None, "--type", help="Only show this type (release, snapshot, ...)."),
) -> None:
    settings = LauncherSettings()
    setup_logging(settings.log_level, settings.log_file)
    try:
        manifest = asyncio.run(_list_versions(settings))
    except LauncherError as e:
        _fail(e)

    for version in manifest.versions:
        if version_type is None or version.type == version_type:
            typer.echo(f"{version.id}\t{version.type}")
