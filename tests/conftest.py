"""Shared test fixtures."""

import io
import json
import zipfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from mclaunch.config import LauncherSettings
from mclaunch.errors import FetchError
from mclaunch.utils.fetcher import BatchResult, Fetcher, FetchJob


class FakeFetcher(Fetcher):
    """Serves canned bodies from memory and records what was requested."""

    name = "fake"

    def __init__(self, responses: Optional[Dict[str, bytes]] = None, batch: bool = True):
        self.responses = dict(responses or {})
        self.batch = batch
        self.requests: List[str] = []
        self.batches: List[List[FetchJob]] = []

    @property
    def supports_batch(self) -> bool:
        return self.batch

    async def fetch_to_memory(self, url: str) -> bytes:
        self.requests.append(url)
        if url not in self.responses:
            raise FetchError(url, "404 Not Found")
        return self.responses[url]

    async def fetch_to_file(self, url: str, dest: Path) -> None:
        body = await self.fetch_to_memory(url)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(body)

    async def fetch_batch_to_files(self, jobs: Iterable[FetchJob]) -> BatchResult:
        jobs = list(jobs)
        self.batches.append(jobs)
        return await super().fetch_batch_to_files(jobs)


def make_zip(files: Dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buffer.getvalue()


def library(name: str, path: Optional[str] = None, rules: Optional[list] = None,
            native_os: Optional[str] = None) -> dict:
    lib = {"name": name, "downloads": {}}
    if path:
        lib["downloads"]["artifact"] = {"path": path, "url": f"https://libraries.test/{path}"}
    if native_os:
        native_path = f"natives/{name}-natives-{native_os}.jar"
        lib["downloads"]["classifiers"] = {
            f"natives-{native_os}": {"path": native_path, "url": f"https://libraries.test/{native_path}"}
        }
    if rules is not None:
        lib["rules"] = rules
    return lib


def descriptor_json(version_id: str = "1.21.5", libraries: Optional[list] = None,
                    arguments: Optional[dict] = None, **extra) -> dict:
    doc = {
        "id": version_id,
        "type": "release",
        "mainClass": "net.minecraft.client.main.Main",
        "assetIndex": {"id": "24", "url": "https://meta.test/assets/24.json"},
        "downloads": {"client": {"url": f"https://meta.test/{version_id}/client.jar"}},
        "libraries": libraries or [],
    }
    if arguments is not None:
        doc["arguments"] = arguments
    doc.update(extra)
    return doc


def dumps(doc: dict) -> bytes:
    return json.dumps(doc).encode()


@pytest.fixture
def settings(tmp_path: Path) -> LauncherSettings:
    return LauncherSettings(
        mc_dir=tmp_path / ".minecraft",
        manifest_url="https://meta.test/version_manifest_v2.json",
        resources_url="https://resources.test",
        target_os="linux",
        use_aria2c=False,
        log_file=None,
    )


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()
