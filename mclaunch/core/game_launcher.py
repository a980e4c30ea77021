"""Game launcher for Minecraft."""

import asyncio
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, NoReturn, Optional

from ..auth import DEFAULT_USERNAME, OfflineAuthenticator, OfflineProfile
from ..config import LauncherSettings
from ..errors import JavaNotFoundError
from ..utils.fetcher import Fetcher, select_fetcher
from ..versions.assets import AssetCache, CacheReport
from ..versions.libraries import LibraryResolver, ResolvedNative
from ..versions.manager import VersionManager
from ..versions.models import VersionDescriptor
from .arguments import RELEASE_VERSION_TYPE, ArgumentTemplater
from .classpath import ClasspathBuilder, join_classpath
from .natives import NativeExtractor

log = logging.getLogger(__name__)

CLASSPATH_FLAGS = ("-cp", "-classpath", "--class-path")


@dataclass
class LaunchCommand:
    executable: str
    args: List[str]
    cwd: Path

    @property
    def argv(self) -> List[str]:
        return [self.executable, *self.args]


class GameLauncher:
    def __init__(self, settings: LauncherSettings, fetcher: Fetcher):
        self.settings = settings
        self.fetcher = fetcher
        self.versions = VersionManager(settings, fetcher)
        self.libraries = LibraryResolver(settings)
        self.assets = AssetCache(settings, fetcher)
        self.natives = NativeExtractor()
        self.classpath = ClasspathBuilder(fetcher)
        self.templater = ArgumentTemplater(settings.target_os)

    async def ensure_client_jar(self, descriptor: VersionDescriptor) -> Path:
        client_jar = self.settings.client_jar_path(descriptor.id)
        if client_jar.is_file():
            log.info("Client JAR already exists")
        else:
            log.info("Downloading client JAR...")
            await self.fetcher.fetch_to_file(descriptor.client_download_url, client_jar)
        return client_jar

    async def prepare_natives(self, natives: List[ResolvedNative], natives_dir: Path) -> int:
        """Download missing native bundles, then extract them in declaration order."""
        for native in natives:
            if not native.path.is_file():
                log.info("Downloading native %s...", native.path.name)
                await self.fetcher.fetch_to_file(native.url, native.path)
        natives_dir.mkdir(parents=True, exist_ok=True)
        return await self.natives.extract_all((native.path for native in natives), natives_dir)

    def build_bindings(self, descriptor: VersionDescriptor, profile: OfflineProfile,
                       classpath: str) -> Dict[str, str]:
        return {
            "auth_player_name": profile.name,
            "version_name": descriptor.id,
            "game_directory": str(self.settings.mc_dir),
            "assets_root": str(self.settings.assets_dir),
            "assets_index_name": descriptor.asset_index.id,
            "auth_uuid": profile.uuid,
            "auth_access_token": profile.access_token,
            "user_type": profile.user_type,
            "version_type": RELEASE_VERSION_TYPE,
            "natives_directory": str(self.settings.natives_dir(descriptor.id)),
            "library_directory": str(self.settings.libraries_dir),
            "classpath": classpath,
            "classpath_separator": os.pathsep,
            "launcher_name": self.settings.launcher_name,
            "launcher_version": self.settings.launcher_version,
            "clientid": "0",
            "auth_xuid": profile.xuid,
        }

    async def prepare_launch(self, version_id: str, username: str = DEFAULT_USERNAME) -> LaunchCommand:
        """Resolve, download and extract everything ``version_id`` needs.

        Returns the command line without running it.
        """
        profile = await OfflineAuthenticator.authenticate(username)

        log.info("[1/5] Fetching version manifest...")
        descriptor = await self.versions.resolve_version(version_id)

        log.info("[2/5] Downloading client JAR...")
        client_jar = await self.ensure_client_jar(descriptor)

        log.info("[3/5] Resolving libraries, assets and natives...")
        resolved = self.libraries.resolve(descriptor, self.settings.target_os)
        natives_dir = self.settings.natives_dir(descriptor.id)
        report, _ = await asyncio.gather(
            self.assets.ensure(descriptor.asset_index),
            self.prepare_natives(resolved.natives, natives_dir),
        )
        self._log_report(report)

        log.info("[4/5] Building classpath...")
        classpath = await self.classpath.build(client_jar, resolved.artifacts)
        bindings = self.build_bindings(descriptor, profile, join_classpath(classpath))

        jvm_args = self.templater.render_jvm(descriptor.jvm_arg_template, bindings)
        game_args = self.templater.render_game(descriptor.game_arg_template, bindings)

        args = [*self.settings.extra_jvm_args, *jvm_args]
        if not any(arg in CLASSPATH_FLAGS for arg in jvm_args):
            args.extend(["-cp", bindings["classpath"]])
        args.append(descriptor.main_class)
        args.extend(game_args)

        return LaunchCommand(
            executable=self.settings.java_executable,
            args=args,
            cwd=self.settings.mc_dir,
        )

    @staticmethod
    def launch_game(command: LaunchCommand) -> NoReturn:
        """Replace the current process with the game."""
        executable = shutil.which(command.executable)
        if executable is None:
            raise JavaNotFoundError(command.executable)

        log.info("[5/5] Launching Minecraft...")
        os.chdir(command.cwd)
        os.execv(executable, command.argv)

    async def launch(self, version_id: str, username: str = DEFAULT_USERNAME) -> NoReturn:
        command = await self.prepare_launch(version_id, username)
        await self.fetcher.close()
        self.launch_game(command)

    @staticmethod
    def _log_report(report: CacheReport):
        if report.downloaded:
            log.info("Downloaded %d asset objects (%d already present)",
                     report.downloaded, report.skipped)


def new_launcher(settings: Optional[LauncherSettings] = None,
                 fetcher: Optional[Fetcher] = None) -> GameLauncher:
    settings = settings or LauncherSettings()
    return GameLauncher(settings, fetcher or select_fetcher(settings))
