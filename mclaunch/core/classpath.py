"""Classpath assembly."""

import logging
import os
from pathlib import Path
from typing import Iterable, List

from ..utils.fetcher import Fetcher
from ..versions.libraries import ResolvedArtifact

log = logging.getLogger(__name__)


def join_classpath(paths: Iterable[Path]) -> str:
    """Join with the platform separator (``:`` or ``;``)."""
    return os.pathsep.join(str(path) for path in paths)


class ClasspathBuilder:
    def __init__(self, fetcher: Fetcher):
        self.fetcher = fetcher

    async def build(self, client_jar: Path, artifacts: Iterable[ResolvedArtifact]) -> List[Path]:
        """Client jar first, then every artifact in resolution order.

        Missing artifacts are downloaded on the way. Repeated paths are kept.
        """
        paths = [client_jar]
        for artifact in artifacts:
            if not artifact.path.is_file():
                log.info("Downloading %s...", artifact.path.name)
                await self.fetcher.fetch_to_file(artifact.url, artifact.path)
            paths.append(artifact.path)
        return paths
