"""Launcher configuration.

Settings are read once, from ``MC_DIR`` / ``MCLAUNCH_*`` environment
variables or a ``.env`` file, and passed explicitly to the components that
need them. The path helpers below define the on-disk cache layout.
"""

import platform
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def detect_os_name() -> str:
    """Return the current OS in the naming used by version rules."""
    system = platform.system()
    if system == "Windows":
        return "windows"
    if system == "Darwin":
        return "osx"
    return "linux"


class LauncherSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MCLAUNCH_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mc_dir: Path = Field(
        default_factory=lambda: Path.home() / ".minecraft",
        validation_alias=AliasChoices("MC_DIR", "mc_dir"),
    )

    manifest_url: str = "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"
    resources_url: str = "https://resources.download.minecraft.net"

    # Runtime hand-off; heap sizing and GC flags belong in extra_jvm_args
    java_executable: str = "java"
    extra_jvm_args: List[str] = Field(default_factory=list)
    launcher_name: str = "mclaunch"
    launcher_version: str = "1.0"

    # Downloads
    concurrent_downloads: int = Field(default=8, ge=1)
    use_aria2c: bool = True
    aria2c_connections: int = Field(default=16, ge=1)

    target_os: str = Field(default_factory=detect_os_name)

    log_level: str = "INFO"
    log_file: Optional[Path] = Field(
        default_factory=lambda: Path.home() / ".cache" / "mclaunch" / "launcher.log"
    )

    @property
    def versions_dir(self) -> Path:
        return self.mc_dir / "versions"

    @property
    def libraries_dir(self) -> Path:
        return self.mc_dir / "libraries"

    @property
    def assets_dir(self) -> Path:
        return self.mc_dir / "assets"

    def version_dir(self, version_id: str) -> Path:
        return self.versions_dir / version_id

    def descriptor_path(self, version_id: str) -> Path:
        return self.version_dir(version_id) / "version.json"

    def client_jar_path(self, version_id: str) -> Path:
        return self.version_dir(version_id) / f"{version_id}.jar"

    def natives_dir(self, version_id: str) -> Path:
        return self.version_dir(version_id) / "natives"

    def asset_index_path(self, asset_index_id: str) -> Path:
        return self.assets_dir / "indexes" / f"{asset_index_id}.json"

    def library_path(self, artifact_path: str) -> Path:
        return self.libraries_dir / artifact_path
