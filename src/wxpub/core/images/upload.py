"""Fingerprint-deduplicated image uploads, scoped to one document conversion"""

import logging
import threading
from concurrent.futures import Future
from typing import Callable, Protocol

from wxpub.core.utils.hashing import sha256_bytes
from wxpub.errors import EmptyImageError, PlatformApiError, TransportError, UploadError


logger = logging.getLogger(__name__)


class ImageHost(Protocol):
    """Platform endpoint that hosts body images and answers with their URL."""

    def upload_image(self, filename: str, data: bytes) -> dict: ...


class FingerprintCache:
    """Thread-safe fingerprint -> platform URL map.

    A fingerprint is uploaded at most once: callers that arrive while an
    upload is in flight wait for its result instead of uploading again.
    """

    def __init__(self):
        self._urls: dict[str, str] = {}
        self._pending: dict[str, Future] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)

    def get(self, fingerprint: str) -> str | None:
        with self._lock:
            return self._urls.get(fingerprint)

    def get_or_upload(self, fingerprint: str, upload: Callable[[], str]) -> tuple[str, bool]:
        """Return (url, fresh); fresh is True only for the caller that ran upload()."""
        with self._lock:
            if fingerprint in self._urls:
                return self._urls[fingerprint], False
            pending = self._pending.get(fingerprint)
            owner = pending is None
            if owner:
                pending = Future()
                self._pending[fingerprint] = pending

        if not owner:
            return pending.result(), False

        try:
            url = upload()
        except BaseException as e:
            with self._lock:
                del self._pending[fingerprint]
            pending.set_exception(e)
            raise
        with self._lock:
            self._urls[fingerprint] = url
            del self._pending[fingerprint]
        pending.set_result(url)
        return url, True


class ImageUploader:
    """Upload image bytes once per distinct content fingerprint."""

    def __init__(self, host: ImageHost, cache: FingerprintCache | None = None):
        self.host = host
        self.cache = cache if cache is not None else FingerprintCache()

    def _upload(self, data: bytes, filename: str, ref: str) -> str:
        try:
            resp = self.host.upload_image(filename, data)
        except (PlatformApiError, TransportError) as e:
            raise UploadError(ref, len(data), str(e)) from e
        url = (resp or {}).get("url")
        if not url:
            raise UploadError(ref, len(data), "empty url from uploadimg")
        logger.info("uploaded %s (%d bytes) -> %s", ref, len(data), url)
        return url

    def upload_once(self, data: bytes, filename: str, ref: str) -> tuple[str, bool]:
        """Return (platform_url, fresh) for data; empty payloads are rejected."""
        if not data:
            raise EmptyImageError(ref)
        fingerprint = sha256_bytes(data)
        url, fresh = self.cache.get_or_upload(fingerprint, lambda: self._upload(data, filename, ref))
        if not fresh:
            logger.debug("cache hit for %s (sha256=%s)", ref, fingerprint[:12])
        return url, fresh
