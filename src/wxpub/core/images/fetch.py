"""Resolve an image reference (local path or remote URL) to raw bytes"""

import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import requests

from wxpub.errors import FetchError


logger = logging.getLogger(__name__)

BODY_IMAGE_NAME = "img.jpg"
THUMB_IMAGE_NAME = "cover.jpg"


@dataclass(frozen=True)
class FetchedImage:
    data: bytes
    filename: str


def is_remote(ref: str) -> bool:
    return ref.startswith(("http://", "https://"))


def guess_filename(ref: str, fallback: str) -> str:
    """Final path segment of ref, or fallback when it is empty, '.' or '/'.

    URL segments without a file suffix also fall back; the platform rejects
    uploads it cannot infer an image type for.
    """
    if not ref:
        return fallback
    if is_remote(ref):
        base = posixpath.basename(urlparse(ref).path)
        return base if base and Path(base).suffix else fallback
    base = Path(ref).name
    return base if base and base not in (".", "/") else fallback


def _download(url: str, session: requests.Session, timeout: float) -> bytes:
    try:
        resp = session.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(url, f"download failed: {e}") from e
    if not resp.ok:
        raise FetchError(url, f"download http {resp.status_code}: {resp.text}")
    return resp.content


def _read(path: Path, ref: str) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise FetchError(ref, str(e)) from e


def fetch_bytes(
    ref: str,
    base_dir: Path,
    fallback_name: str = BODY_IMAGE_NAME,
    session: Optional[requests.Session] = None,
    timeout: float = 30.0,
    ) -> FetchedImage:
    """Read ref as a URL download or a file path relative to base_dir.

    Errors name ref as written in the token, percent-escapes included.
    """
    if is_remote(ref):
        data = _download(ref, session or requests.Session(), timeout)
        filename = guess_filename(ref, fallback_name)
    else:
        # The parser percent-encodes link destinations; the file on disk is not.
        path = Path(unquote(ref))
        if not path.is_absolute():
            path = base_dir / path
        data = _read(path, ref)
        filename = guess_filename(str(path), fallback_name)
    logger.debug("fetched %s (%d bytes) as %s", ref, len(data), filename)
    return FetchedImage(data=data, filename=filename)
