"""HTTP fetchers.

Every fetcher can read a URL into memory, stream it to a file and download a
batch of files. Implementations are ranked and one is picked at startup by
``select_fetcher``; callers never probe for tools themselves.
"""

import asyncio
import logging
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import aiofiles
import aiofiles.os
import aiohttp

from ..config import LauncherSettings
from ..errors import FetchError

log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class FetchJob:
    url: str
    dest: Path


@dataclass
class BatchResult:
    succeeded: List[FetchJob] = field(default_factory=list)
    failed: List[FetchError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def partial_path(dest: Path) -> Path:
    """Temporary path a download is written to before the final rename."""
    return dest.with_name(dest.name + ".part")


class Fetcher(ABC):
    """Base fetcher. Batches fall back to sequential single fetches."""

    name = "base"

    @property
    def supports_batch(self) -> bool:
        """Whether batches are downloaded in parallel."""
        return False

    @abstractmethod
    async def fetch_to_memory(self, url: str) -> bytes:
        ...

    @abstractmethod
    async def fetch_to_file(self, url: str, dest: Path) -> None:
        ...

    async def fetch_batch_to_files(self, jobs: Iterable[FetchJob]) -> BatchResult:
        result = BatchResult()
        for job in jobs:
            try:
                await self.fetch_to_file(job.url, job.dest)
            except FetchError as e:
                result.failed.append(e)
            else:
                result.succeeded.append(job)
        return result

    async def close(self):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


class AiohttpFetcher(Fetcher):
    """Streaming aiohttp client with a bounded-concurrency batch mode."""

    name = "aiohttp"

    def __init__(self, concurrent_downloads: int = 8,
                 session: Optional[aiohttp.ClientSession] = None,
                 headers: Optional[Dict[str, str]] = None):
        self.concurrent_downloads = concurrent_downloads
        self.default_headers = headers or {"Accept-Encoding": "identity"}
        self.session = session
        self._owns_session = session is None
        self.semaphore = asyncio.Semaphore(concurrent_downloads)

    @property
    def supports_batch(self) -> bool:
        return self.concurrent_downloads > 1

    def _session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.default_headers)
            self._owns_session = True
        return self.session

    async def close(self):
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch_to_memory(self, url: str) -> bytes:
        log.debug("GET %s", url)
        try:
            async with self._session().get(url) as resp:
                resp.raise_for_status()
                return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(url, e) from e

    async def fetch_to_file(self, url: str, dest: Path) -> None:
        """Stream ``url`` into ``dest``.

        The body goes to ``<dest>.part`` first and is renamed onto ``dest``
        only once complete, so an interrupted download never leaves a file
        at the final path.
        """
        log.debug("GET %s -> %s", url, dest)
        tmp = partial_path(dest)
        try:
            await aiofiles.os.makedirs(dest.parent, exist_ok=True)
            async with self._session().get(url) as resp:
                resp.raise_for_status()
                async with aiofiles.open(tmp, 'wb') as f:
                    async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                        await f.write(chunk)
            await aiofiles.os.replace(tmp, dest)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            await _remove_quietly(tmp)
            raise FetchError(url, e) from e

    async def _fetch_bounded(self, job: FetchJob) -> None:
        async with self.semaphore:
            await self.fetch_to_file(job.url, job.dest)

    async def fetch_batch_to_files(self, jobs: Iterable[FetchJob]) -> BatchResult:
        jobs = list(jobs)
        if not self.supports_batch:
            return await super().fetch_batch_to_files(jobs)

        outcomes = await asyncio.gather(
            *(self._fetch_bounded(job) for job in jobs), return_exceptions=True
        )
        result = BatchResult()
        for job, outcome in zip(jobs, outcomes):
            if isinstance(outcome, FetchError):
                result.failed.append(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.succeeded.append(job)
        return result


class Aria2cFetcher(AiohttpFetcher):
    """Single fetches over aiohttp, batches through one aria2c process."""

    name = "aria2c"

    def __init__(self, executable: str = "aria2c", connections: int = 16, **kwargs):
        super().__init__(**kwargs)
        self.executable = executable
        self.connections = connections

    @property
    def supports_batch(self) -> bool:
        return True

    async def fetch_batch_to_files(self, jobs: Iterable[FetchJob]) -> BatchResult:
        jobs = list(jobs)
        result = BatchResult()
        if not jobs:
            return result

        for job in jobs:
            await aiofiles.os.makedirs(job.dest.parent, exist_ok=True)
            await _discard_stale_partial(job.dest)

        fd, input_path = tempfile.mkstemp(prefix="mclaunch-", suffix=".aria2")
        os.close(fd)
        try:
            async with aiofiles.open(input_path, 'w', encoding='utf-8') as f:
                await f.write(build_input_file(jobs))
            returncode = await self._run(input_path)
        finally:
            await _remove_quietly(Path(input_path))

        cause = f"{self.executable} exited with status {returncode}"
        for job in jobs:
            if _promote_partial(job.dest):
                result.succeeded.append(job)
            else:
                result.failed.append(FetchError(job.url, cause))
        if result.failed:
            log.warning("%s: %d of %d downloads failed", cause, len(result.failed), len(jobs))
        return result

    async def _run(self, input_path: str) -> int:
        args = [
            self.executable,
            f"--input-file={input_path}",
            "-x", str(self.connections),
            "-s", str(self.connections),
            "-j", str(self.concurrent_downloads),
            "--auto-file-renaming=false",
            "--allow-overwrite=true",
            "--console-log-level=warn",
            "--summary-interval=0",
        ]
        log.debug("Running %s", " ".join(args))
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise FetchError(self.executable, e) from e
        _, stderr = await process.communicate()
        if process.returncode and stderr:
            log.debug("aria2c stderr:\n%s", stderr.decode(errors='ignore'))
        return process.returncode


def build_input_file(jobs: Iterable[FetchJob]) -> str:
    """Render jobs in aria2c ``--input-file`` format."""
    lines = []
    for job in jobs:
        lines.append(job.url)
        lines.append(f"  dir={job.dest.parent}")
        lines.append(f"  out={partial_path(job.dest).name}")
    return "\n".join(lines) + "\n"


def select_fetcher(settings: LauncherSettings,
                   session: Optional[aiohttp.ClientSession] = None) -> Fetcher:
    """Pick the best available fetcher once, at startup."""
    if settings.use_aria2c:
        executable = shutil.which("aria2c")
        if executable:
            log.debug("Using aria2c at %s for batch downloads", executable)
            return Aria2cFetcher(
                executable=executable,
                connections=settings.aria2c_connections,
                concurrent_downloads=settings.concurrent_downloads,
                session=session,
            )
        log.info("aria2c not found, downloading with aiohttp")
    return AiohttpFetcher(concurrent_downloads=settings.concurrent_downloads, session=session)


async def write_bytes_atomic(dest: Path, data: bytes):
    """Write ``data`` to ``dest`` through a ``.part`` file and a rename."""
    tmp = partial_path(dest)
    await aiofiles.os.makedirs(dest.parent, exist_ok=True)
    async with aiofiles.open(tmp, 'wb') as f:
        await f.write(data)
    await aiofiles.os.replace(tmp, dest)


async def _remove_quietly(path: Path):
    try:
        await aiofiles.os.remove(path)
    except FileNotFoundError:
        pass


def _control_path(tmp: Path) -> Path:
    return tmp.with_name(tmp.name + ".aria2")


async def _discard_stale_partial(dest: Path):
    """Drop a ``<dest>.part`` that aria2c cannot resume.

    Without its control file a partial is indistinguishable from a finished
    download once aria2c exits, so it has to go before the run.
    """
    tmp = partial_path(dest)
    if tmp.is_file() and not _control_path(tmp).exists():
        log.debug("Removing stale partial download %s", tmp)
        await _remove_quietly(tmp)


def _promote_partial(dest: Path) -> bool:
    """Move a finished aria2c download from ``<dest>.part`` onto ``dest``.

    aria2c deletes its ``.aria2`` control file once a download completes; a
    control file left behind marks an unfinished download.
    """
    tmp = partial_path(dest)
    if tmp.is_file() and not _control_path(tmp).exists():
        os.replace(tmp, dest)
    return dest.is_file()
