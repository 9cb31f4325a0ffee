"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from wxpub.config import Settings, load_config
from wxpub.core.digest import auto_digest
from wxpub.core.models import DigestOptions
from wxpub.core.parse import parse_file
from wxpub.core.pipeline import convert, upload_thumbnail
from wxpub.core.render import render
from wxpub.core.transform.chain import transform_html
from wxpub.errors import PublishError
from wxpub.logging_config import configure_logging
from wxpub.wechat.client import DraftArticle, WeChatClient
from wxpub.wechat.transport import Transport


PREVIEW_CHARS = 200

MarkdownPath = Annotated[
    Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Markdown file")
]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _usage(msg: str) -> None:
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(2)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _client(settings: Settings) -> WeChatClient:
    return WeChatClient(
        settings.app_id,
        settings.app_secret,
        transport=Transport(timeout=settings.timeout),
        api_base=settings.api_base,
    )


def _preview(text: str) -> str:
    text = text.strip()
    cut = text[:PREVIEW_CHARS] + ("..." if len(text) > PREVIEW_CHARS else "")
    return " ".join(cut.split())


def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr")] = False,
    ):
    """Publish markdown articles to a WeChat official account."""
    configure_logging(verbose)


def upload_thumb_cmd(
    file: Annotated[Optional[Path], typer.Option("--file", help="Local image file")] = None,
    url: Annotated[Optional[str], typer.Option("--url", help="Image URL")] = None,
    ):
    """Upload a cover image and print its thumb_media_id."""
    if bool(file) == bool(url):
        _usage("provide exactly one of --file or --url")
    settings = _settings()
    try:
        resp = upload_thumbnail(_client(settings), str(file) if file else url, timeout=settings.timeout)
    except PublishError as e:
        _fail("Thumbnail upload failed", e)
    typer.echo("ok")
    typer.echo(f"thumb_media_id: {resp['media_id']}")
    if resp.get("url"):
        typer.echo(f"thumb_url: {resp['url']}")


def draft_cmd(
    md_file: MarkdownPath,
    thumb_media_id: Annotated[Optional[str], typer.Option("--thumb-media-id", help="Cover thumb media_id")] = None,
    title: Annotated[Optional[str], typer.Option("--title", help="Article title (fallback to markdown title)")] = None,
    author: Annotated[Optional[str], typer.Option("--author", help="Author")] = None,
    content_source_url: Annotated[Optional[str], typer.Option("--content-source-url", help="Source url")] = None,
    digest: Annotated[Optional[str], typer.Option("--digest", help="Digest")] = None,
    digest_auto: Annotated[bool, typer.Option("--digest-auto", help="Generate digest from markdown")] = False,
    digest_n: Annotated[Optional[int], typer.Option("--digest-n", help="Auto digest length (characters)")] = None,
    dump_html: Annotated[bool, typer.Option("--dump-html", help="Print converted HTML and exit")] = False,
    ):
    """Convert a markdown file and create a draft from it."""
    if not thumb_media_id and not dump_html:
        _usage("missing required: --thumb-media-id")
    settings = _settings(overrides={"digest_chars": digest_n})
    client = _client(settings)

    try:
        result = convert(
            md_file, client, title,
            DigestOptions(text=digest, auto=digest_auto, max_chars=settings.digest_chars),
            parser_config=settings.parser_config,
            linkify=settings.linkify,
            theme=settings.theme,
            workers=settings.upload_workers,
            fetch_timeout=settings.timeout,
        )
    except (PublishError, ValueError, OSError) as e:
        _fail(f"Conversion of {md_file} failed", e)

    if dump_html:
        typer.echo(result.html)
        return

    article = DraftArticle(
        title=result.title,
        content=result.html,
        thumb_media_id=thumb_media_id,
        author=(author or "").strip() or None,
        digest=result.digest or None,
        content_source_url=(content_source_url or "").strip() or None,
    )
    try:
        media_id = client.add_draft(article)
    except PublishError as e:
        _fail("Draft creation failed", e)

    typer.echo("ok")
    typer.echo(f"draft_media_id: {media_id}")
    typer.echo(f"title: {result.title}")
    if result.digest:
        typer.echo(f"digest: {result.digest}")
    typer.echo(f"md_preview: {_preview(md_file.read_text(encoding='utf-8'))}")
    typer.echo(f"uploaded_content_images: {len(result.uploaded_image_urls)}")
    typer.echo(f"next_step: run `wxpub publish --media-id {media_id}` after checking the draft")


def publish_cmd(
    media_id: Annotated[str, typer.Option("--media-id", help="Draft media_id")],
    ):
    """Submit a draft for publication."""
    settings = _settings()
    try:
        publish_id = _client(settings).submit_publish(media_id)
    except PublishError as e:
        _fail("Publish failed", e)
    typer.echo("ok")
    typer.echo(f"publish_id: {publish_id}")


def status_cmd(
    publish_id: Annotated[str, typer.Option("--publish-id", help="publish_id")],
    ):
    """Print the publish status JSON."""
    settings = _settings()
    try:
        status = _client(settings).publish_status(publish_id)
    except PublishError as e:
        _fail("Status query failed", e)
    typer.echo(json.dumps(status, indent=2, ensure_ascii=False))


def digest_cmd(
    md_file: MarkdownPath,
    max_chars: Annotated[Optional[int], typer.Option("--max-chars", help="Digest length (characters)")] = None,
    ):
    """Preview the auto-generated digest without contacting the platform."""
    settings = _settings(overrides={"digest_chars": max_chars})
    typer.echo(auto_digest(md_file.read_text(encoding="utf-8"), settings.digest_chars))


def render_cmd(md_file: MarkdownPath):
    """Preview converted HTML offline; image references are left as written."""
    settings = _settings()
    try:
        parsed = parse_file(md_file, settings.parser_config, settings.linkify)
    except ValueError as e:
        _fail(f"Failed to parse {md_file}", e)
    html = render(parsed.tokens, parsed.env, settings.parser_config, settings.linkify)
    typer.echo(transform_html(html, settings.theme))
