"""Async HTTP(S) archive download with redirect following and progress logging."""

from __future__ import annotations

from pathlib import Path

import httpx
import structlog

from jrekit.cache import CachePolicy
from jrekit.exceptions import DownloadError

log = structlog.get_logger("jrekit.fetch")

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})
_CHUNK_SIZE = 64 * 1024
_PROGRESS_STEP = 10  # percent

_DEFAULT_TIMEOUT = httpx.Timeout(30.0, read=300.0)


def _mb(num_bytes: int) -> str:
    return f"{num_bytes / 1024 / 1024:.1f} MB"


class ArchiveFetcher:
    """Download remote archives into the local cache.

    A destination that already exists and is large enough to be a real
    archive is reused without any network request. Redirects are followed
    one hop at a time with no hop limit. Any failure removes the partial
    file before raising :class:`DownloadError`.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        cache: CachePolicy | None = None,
    ) -> None:
        self._client = client
        self._cache = cache or CachePolicy()

    async def fetch(self, url: str, dest: Path) -> bool:
        """Download *url* to *dest*. Returns False when the cached file was reused."""
        if self._cache.archive_is_cached(dest):
            log.info("fetch.cached", path=str(dest))
            return False

        dest.parent.mkdir(parents=True, exist_ok=True)
        log.info("fetch.start", url=url, dest=str(dest))

        try:
            if self._client is not None:
                await self._download(self._client, url, dest)
            else:
                async with httpx.AsyncClient(timeout=_DEFAULT_TIMEOUT) as client:
                    await self._download(client, url, dest)
        except httpx.HTTPError as e:
            _remove_partial(dest)
            raise DownloadError(f"Download failed for {url}: {e}") from e
        except BaseException:
            _remove_partial(dest)
            raise
        return True

    async def _download(self, client: httpx.AsyncClient, url: str, dest: Path) -> None:
        current = url
        while True:
            async with client.stream("GET", current, follow_redirects=False) as resp:
                if resp.status_code in REDIRECT_STATUSES:
                    location = resp.headers.get("location")
                    if not location:
                        raise DownloadError(
                            f"HTTP {resp.status_code} without Location header: {current}"
                        )
                    current = str(resp.url.join(location))
                    log.debug("fetch.redirect", status=resp.status_code, location=current)
                    continue

                if resp.status_code != 200:
                    raise DownloadError(f"HTTP {resp.status_code}: {resp.reason_phrase}")

                await self._write_body(resp, dest)
                return

    async def _write_body(self, resp: httpx.Response, dest: Path) -> None:
        total = int(resp.headers.get("content-length", 0) or 0)
        downloaded = 0
        last_progress = 0

        with dest.open("wb") as fh:
            async for chunk in resp.aiter_bytes(_CHUNK_SIZE):
                fh.write(chunk)
                downloaded += len(chunk)
                if total <= 0:
                    continue
                progress = min(downloaded * 100 // total, 100) // _PROGRESS_STEP * _PROGRESS_STEP
                if progress > last_progress:
                    log.info(
                        "fetch.progress",
                        percent=progress,
                        downloaded=_mb(downloaded),
                        total=_mb(total),
                    )
                    last_progress = progress

        log.info("fetch.done", path=str(dest), size=_mb(downloaded))


def _remove_partial(dest: Path) -> None:
    if dest.exists():
        dest.unlink()
        log.debug("fetch.partial_removed", path=str(dest))

