"""Content-addressed asset cache."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import aiofiles

from ..config import LauncherSettings
from ..errors import AssetFetchError, FetchError
from ..utils.fetcher import Fetcher, FetchJob, write_bytes_atomic
from .models import AssetIndex, AssetIndexRef

log = logging.getLogger(__name__)


def asset_object_path(objects_dir: Path, asset_hash: str) -> Path:
    """``<objects_dir>/<first two hex chars>/<full hash>``."""
    return objects_dir / asset_hash[:2] / asset_hash


@dataclass(frozen=True)
class CacheReport:
    downloaded: int
    skipped: int


class AssetCache:
    """Keeps ``assets/`` in step with an asset index.

    Presence of a file at its hash-addressed path is taken as proof that it
    is complete; sizes and hashes of present files are not re-checked.
    """

    def __init__(self, settings: LauncherSettings, fetcher: Fetcher):
        self.settings = settings
        self.fetcher = fetcher
        self.objects_dir = settings.assets_dir / "objects"

    def object_url(self, asset_hash: str) -> str:
        return f"{self.settings.resources_url.rstrip('/')}/{asset_hash[:2]}/{asset_hash}"

    def object_path(self, asset_hash: str) -> Path:
        return asset_object_path(self.objects_dir, asset_hash)

    async def load_index(self, ref: AssetIndexRef) -> AssetIndex:
        """Fetch the index document unless it is already cached, then decode it."""
        index_path = self.settings.asset_index_path(ref.id)
        if index_path.is_file():
            async with aiofiles.open(index_path, 'rb') as f:
                return AssetIndex.from_json(await f.read(), source=str(index_path))

        log.info("Downloading asset index %s", ref.id)
        raw = await self.fetcher.fetch_to_memory(ref.url)
        index = AssetIndex.from_json(raw, source=ref.url)
        # Only a document that decodes is cached
        await write_bytes_atomic(index_path, raw)
        return index

    async def ensure(self, ref: AssetIndexRef) -> CacheReport:
        """Download every object of the index that is not on disk yet.

        Safe to re-run after a failure: objects already written are skipped.
        """
        index = await self.load_index(ref)

        # Several names may share one hash; they share one file too
        missing: Dict[str, FetchJob] = {}
        present = set()
        for obj in index.objects.values():
            asset_hash = obj.hash
            if asset_hash in present or asset_hash in missing:
                continue
            path = self.object_path(asset_hash)
            if path.is_file():
                present.add(asset_hash)
            else:
                missing[asset_hash] = FetchJob(self.object_url(asset_hash), path)

        log.info("Assets: %d objects in index %s, %d missing",
                 len(present) + len(missing), ref.id, len(missing))
        if missing:
            await self._download(list(missing.values()))
        else:
            log.info("All assets already downloaded")

        return CacheReport(downloaded=len(missing), skipped=len(present))

    async def _download(self, jobs: List[FetchJob]):
        if self.fetcher.supports_batch:
            result = await self.fetcher.fetch_batch_to_files(jobs)
            if result.failed:
                raise AssetFetchError(result.failed)
            return

        log.info("No parallel downloader available, fetching assets one by one")
        for job in jobs:
            try:
                await self.fetcher.fetch_to_file(job.url, job.dest)
            except FetchError as e:
                raise AssetFetchError([e]) from e
