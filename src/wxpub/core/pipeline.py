"""Pipeline step functions: convert a markdown article, upload a cover thumbnail"""

import logging
from pathlib import Path
from typing import Optional

import requests

from wxpub.config import Theme
from wxpub.core.digest import auto_digest
from wxpub.core.images.fetch import THUMB_IMAGE_NAME, fetch_bytes
from wxpub.core.images.rewrite import rewrite_images
from wxpub.core.images.upload import FingerprintCache, ImageHost, ImageUploader
from wxpub.core.models import ConversionResult, DigestOptions
from wxpub.core.parse import parse_file
from wxpub.core.render import render
from wxpub.core.title import resolve_title
from wxpub.core.transform.chain import transform_html
from wxpub.errors import EmptyImageError


logger = logging.getLogger(__name__)


def _digest(options: DigestOptions, markdown: str) -> str:
    """Explicit digest text wins; otherwise auto-digest when enabled."""
    text = (options.text or "").strip()
    if not text and options.auto:
        text = auto_digest(markdown, options.max_chars)
    return text


def convert(
    path: Path,
    host: ImageHost,
    title: Optional[str] = None,
    digest: Optional[DigestOptions] = None,
    *,
    parser_config: str = 'gfm-like',
    linkify: bool = False,
    theme: Optional[Theme] = None,
    workers: int = 1,
    session: Optional[requests.Session] = None,
    fetch_timeout: float = 30.0,
    ) -> ConversionResult:
    """Convert the markdown file at path into platform-ready HTML.

    The title is resolved before any image is uploaded; any fetch or upload
    failure aborts the whole conversion.
    """
    parsed = parse_file(path, parser_config, linkify)
    resolved_title = resolve_title(title, parsed)

    uploader = ImageUploader(host, FingerprintCache())
    tokens, uploaded = rewrite_images(
        parsed.tokens, uploader, parsed.base_dir,
        workers=workers, session=session, timeout=fetch_timeout,
    )

    html = render(tokens, parsed.env, parser_config, linkify)
    html = transform_html(html, theme)
    logger.info("converted %s: %d chars of html, %d image(s) uploaded", path, len(html), len(uploaded))

    return ConversionResult(
        html=html,
        title=resolved_title,
        digest=_digest(digest or DigestOptions(), parsed.raw_markdown),
        uploaded_image_urls=uploaded,
    )


def upload_thumbnail(
    client,
    ref: str,
    base_dir: Path = Path("."),
    session: Optional[requests.Session] = None,
    timeout: float = 30.0,
    ) -> dict:
    """Register a cover image as permanent material; returns the platform response (media_id, url)."""
    fetched = fetch_bytes(ref, base_dir, THUMB_IMAGE_NAME, session=session, timeout=timeout)
    if not fetched.data:
        raise EmptyImageError(ref)
    return client.upload_thumb(fetched.filename, fetched.data)
