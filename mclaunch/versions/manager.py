"""Version index and descriptor resolution."""

import logging
from typing import Optional

import aiofiles

from ..config import LauncherSettings
from ..errors import VersionNotFoundError
from ..utils.fetcher import Fetcher, write_bytes_atomic
from .models import VersionDescriptor, VersionInfo, VersionManifest

log = logging.getLogger(__name__)


class VersionManager:
    def __init__(self, settings: LauncherSettings, fetcher: Fetcher):
        self.settings = settings
        self.fetcher = fetcher

    async def fetch_manifest(self) -> VersionManifest:
        """Fetch the global version index."""
        log.info("Downloading version list...")
        raw = await self.fetcher.fetch_to_memory(self.settings.manifest_url)
        return VersionManifest.from_json(raw, source=self.settings.manifest_url)

    async def get_version_info(self, version_id: str,
                               manifest: Optional[VersionManifest] = None) -> VersionInfo:
        """Find ``version_id`` in the index (exact, case-sensitive match)."""
        if not manifest:
            manifest = await self.fetch_manifest()

        info = manifest.find(version_id)
        if info is None:
            raise VersionNotFoundError(version_id)
        return info

    async def resolve_version(self, version_id: str) -> VersionDescriptor:
        """Return the descriptor for ``version_id``, caching it on first use.

        A cached ``version.json`` is trusted as is: no network call and no
        freshness check.
        """
        cache_path = self.settings.descriptor_path(version_id)
        target_os = self.settings.target_os

        if cache_path.is_file():
            log.info("Using cached version manifest %s", cache_path)
            async with aiofiles.open(cache_path, 'rb') as f:
                raw = await f.read()
            return VersionDescriptor.from_json(raw, target_os, source=str(cache_path))

        info = await self.get_version_info(version_id)
        log.info("Downloading version manifest for %s", version_id)
        raw = await self.fetcher.fetch_to_memory(info.url)
        descriptor = VersionDescriptor.from_json(raw, target_os, source=info.url)

        # Stored byte for byte as served
        await write_bytes_atomic(cache_path, raw)
        return descriptor
