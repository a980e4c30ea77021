"""Native library extraction."""

import asyncio
import logging
import shutil
import zipfile
from pathlib import Path
from typing import Iterable

from ..errors import NativeExtractionError

log = logging.getLogger(__name__)

METADATA_DIR = "META-INF"


class NativeExtractor:
    def _unpack(self, bundle: Path, natives_dir: Path):
        try:
            natives_dir.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(bundle, 'r') as zip_ref:
                zip_ref.extractall(natives_dir)
        except (zipfile.BadZipFile, OSError) as e:
            raise NativeExtractionError(bundle, e) from e
        finally:
            shutil.rmtree(natives_dir / METADATA_DIR, ignore_errors=True)

    def extract(self, bundle: Path, natives_dir: Path) -> bool:
        """Unzip ``bundle`` into ``natives_dir`` and drop its ``META-INF``.

        Existing files are overwritten, so when bundles share a file name the
        last one extracted wins. Failures are logged and swallowed.
        """
        try:
            self._unpack(bundle, natives_dir)
        except NativeExtractionError as e:
            log.warning("%s", e)
            return False
        log.debug("Extracted %s", bundle.name)
        return True

    async def extract_all(self, bundles: Iterable[Path], natives_dir: Path) -> int:
        """Extract bundles in order in the default executor; returns the success count."""
        loop = asyncio.get_running_loop()
        extracted = 0
        for bundle in bundles:
            if await loop.run_in_executor(None, self.extract, bundle, natives_dir):
                extracted += 1
        return extracted
