"""Version management module."""

from .manager import VersionManager
from .assets import AssetCache, CacheReport
from .libraries import LibraryResolver, ResolvedLibraries
from .models import VersionManifest, VersionInfo, VersionDescriptor, AssetIndex

__all__ = [
    "VersionManager",
    "AssetCache",
    "CacheReport",
    "LibraryResolver",
    "ResolvedLibraries",
    "VersionManifest",
    "VersionInfo",
    "VersionDescriptor",
    "AssetIndex",
]
