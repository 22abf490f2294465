"""Fetch export source media into a scratch directory."""

import asyncio
import logging
import shutil
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path, PurePosixPath

from reelcut.pipeline.config import TranscodeConfig
from reelcut.pipeline.errors import DownloadError

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https", "file")

ProgressCallback = Callable[[int, int, str], Awaitable[None]]


def local_filename(index: int, url: str) -> str:
    """Scratch file name for the ``index``-th distinct URL, keeping its extension."""
    suffix = PurePosixPath(urllib.parse.urlparse(url).path).suffix.lower()
    if len(suffix) > 6 or not suffix[1:].isalnum():
        suffix = ""
    return f"source_{index:03d}{suffix}"


class Downloader:
    """Downloads URLs concurrently with bounded parallelism.

    Each transfer runs ``urllib.request`` in a worker thread so the event
    loop is never blocked.
    """

    def __init__(self, config: TranscodeConfig) -> None:
        self.concurrency = config.download_concurrency
        self.timeout = config.download_timeout_seconds

    async def download_all(
        self,
        urls: Sequence[str],
        dest_dir: Path,
        on_progress: ProgressCallback | None = None,
    ) -> dict[str, Path]:
        """Download every distinct URL into ``dest_dir``.

        Args:
            urls: Source URLs; duplicates are fetched once.
            dest_dir: Existing scratch directory.
            on_progress: Awaited after each finished download with
                ``(completed, total, url)``.

        Returns:
            Mapping of URL to local path.

        Raises:
            DownloadError: On the first failed download. Remaining
                downloads are cancelled.
        """
        distinct = list(dict.fromkeys(urls))
        total = len(distinct)
        semaphore = asyncio.Semaphore(self.concurrency)
        lock = asyncio.Lock()
        completed = 0

        async def download_one(index: int, url: str) -> tuple[str, Path]:
            nonlocal completed
            dest = dest_dir / local_filename(index, url)
            async with semaphore:
                await asyncio.to_thread(self._fetch, url, dest)
            async with lock:
                completed += 1
                if on_progress is not None:
                    await on_progress(completed, total, url)
            return url, dest

        tasks = [asyncio.create_task(download_one(i, url)) for i, url in enumerate(distinct)]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return dict(results)

    def _fetch(self, url: str, dest: Path) -> None:
        scheme = urllib.parse.urlparse(url).scheme.lower()
        if scheme not in SUPPORTED_SCHEMES:
            raise DownloadError(url, f"unsupported URL scheme '{scheme}'")

        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as response, dest.open("wb") as f:
                shutil.copyfileobj(response, f)
        except urllib.error.HTTPError as e:
            raise DownloadError(url, f"HTTP {e.code}") from e
        except (urllib.error.URLError, OSError, ValueError) as e:
            reason = getattr(e, "reason", None) or str(e)
            raise DownloadError(url, str(reason)) from e

        logger.debug("Downloaded %s -> %s (%d bytes)", url, dest, dest.stat().st_size)
