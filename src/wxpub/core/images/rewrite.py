"""Rewrite every image reference in a token tree to its platform-hosted URL"""

import copy
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

import requests

from wxpub.core.images.fetch import BODY_IMAGE_NAME, fetch_bytes
from wxpub.core.images.upload import ImageUploader
from wxpub.core.utils.tokens import iter_images


logger = logging.getLogger(__name__)


def _resolve(
    ref: str,
    uploader: ImageUploader,
    base_dir: Path,
    session: Optional[requests.Session],
    timeout: float,
    ) -> tuple[str, bool]:
    fetched = fetch_bytes(ref, base_dir, BODY_IMAGE_NAME, session=session, timeout=timeout)
    return uploader.upload_once(fetched.data, fetched.filename, ref)


def _resolve_all(refs: list[str], workers: int, resolve) -> list[tuple[str, bool]]:
    """Resolve refs in order; on the first failure pending work is cancelled and the error raised."""
    if workers <= 1 or len(refs) <= 1:
        return [resolve(ref) for ref in refs]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(resolve, ref) for ref in refs]
        try:
            return [f.result() for f in futures]
        except Exception:
            for f in futures:
                f.cancel()
            raise


def rewrite_images(
    tokens: list,
    uploader: ImageUploader,
    base_dir: Path,
    workers: int = 1,
    session: Optional[requests.Session] = None,
    timeout: float = 30.0,
    ) -> tuple[list, list[str]]:
    """Return (new_tokens, uploaded_urls); the input tokens are left untouched.

    Image tokens are visited depth-first in document order. uploaded_urls holds
    one entry per distinct image content, in the order first uploaded.
    """
    new_tokens = copy.deepcopy(tokens)
    images = [tok for tok in iter_images(new_tokens) if (tok.attrGet('src') or '').strip()]
    refs = [str(tok.attrGet('src')).strip() for tok in images]
    session = session or requests.Session()

    outcomes = _resolve_all(
        refs, workers, lambda ref: _resolve(ref, uploader, base_dir, session, timeout)
    )

    uploaded: list[str] = []
    for tok, (url, fresh) in zip(images, outcomes):
        tok.attrSet('src', url)
        if fresh:
            uploaded.append(url)
    logger.info("rewrote %d image(s), %d uploaded", len(images), len(uploaded))
    return new_tokens, uploaded
