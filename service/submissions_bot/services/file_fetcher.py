"""
Transient file downloads.

Documents are streamed to a uniquely named file in the temp directory,
handed to the caller, and removed as soon as the caller is done with them.
Nothing downloaded here is meant to outlive a single request.
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional
from urllib.parse import urlparse

import httpx

from submissions_bot.logging_config import bot_logger as logger

DEFAULT_EXTENSION = "bin"
CHUNK_SIZE = 64 * 1024


def ensure_temp_dir(path: str | Path) -> Path:
    """Create the download directory if it does not exist yet."""
    temp_dir = Path(path)
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


def file_extension_from_url(url: str, default: str = DEFAULT_EXTENSION) -> str:
    """
    Extension of the file a URL points at, lowercased and without the dot.

    Only the last path segment is considered, so query strings, fragments and
    dotted host names never leak into the result:

        https://x/docs/a.JPG?token=1  -> "jpg"
        https://cdn.example.com/file  -> default
        https://x/archive.tar.gz      -> "gz"
    """
    if not url:
        return default

    path = urlparse(url.strip()).path
    filename = path.rsplit("/", 1)[-1]
    if "." not in filename:
        return default

    extension = filename.rsplit(".", 1)[-1].lower()
    if not extension or not extension.isalnum():
        return default
    return extension


def build_temp_filename(
    winner_id: Optional[str],
    side: str,
    extension: str = DEFAULT_EXTENSION,
    now_ms: Optional[int] = None,
) -> str:
    """<winner_id>_<side>_<epoch millis>.<extension>, safe for any filesystem."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    safe_winner = "".join(c if c.isalnum() or c in "-_" else "-" for c in str(winner_id or "unknown"))
    return f"{safe_winner}_{side}_{now_ms}.{extension}"


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.error(f"Error deleting file {path}: {e}")


async def download_file(
    url: str,
    dest_path: Path,
    timeout: float = 60.0,
    client: Optional[httpx.AsyncClient] = None,
) -> Path:
    """
    Stream `url` into `dest_path`.

    Raises httpx errors for transport failures and non-2xx responses, and
    OSError for write failures. A partially written file is removed before
    the error propagates.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    logger.info(f"Downloading {url} -> {dest_path.name}")
    try:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            with open(dest_path, "wb") as f:
                async for chunk in response.aiter_bytes(CHUNK_SIZE):
                    f.write(chunk)
    except (httpx.HTTPError, OSError):
        _remove_quietly(dest_path)
        raise
    finally:
        if owns_client:
            await client.aclose()

    logger.info(f"Downloaded {dest_path.stat().st_size} bytes to {dest_path.name}")
    return dest_path


@asynccontextmanager
async def transient_download(
    url: str,
    temp_dir: str | Path,
    winner_id: Optional[str],
    side: str,
    timeout: float = 60.0,
) -> AsyncIterator[Path]:
    """
    Download `url` into `temp_dir` and yield the local path.

    The file is deleted when the block exits, whether the download, the
    caller's use of the file, or neither failed.
    """
    filename = build_temp_filename(winner_id, side, file_extension_from_url(url))
    local_path = Path(temp_dir) / filename
    try:
        await download_file(url, local_path, timeout=timeout)
        yield local_path
    finally:
        _remove_quietly(local_path)
        logger.debug(f"Removed transient file {filename}")
