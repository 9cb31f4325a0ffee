"""Unit tests for core/images/rewrite.py"""

import pytest

from wxpub.core.images.rewrite import rewrite_images
from wxpub.core.images.upload import ImageUploader
from wxpub.core.parse import parse_text
from wxpub.core.utils.tokens import iter_images
from wxpub.errors import EmptyImageError, FetchError


def _srcs(tokens):
    return [t.attrGet("src") for t in iter_images(tokens)]


def test_rewrites_every_image_in_order(tmp_path, host):
    (tmp_path / "a.png").write_bytes(b"first")
    (tmp_path / "b.png").write_bytes(b"second")
    parsed = parse_text("![a](a.png)\n\n- item ![b](b.png)\n")

    tokens, uploaded = rewrite_images(parsed.tokens, ImageUploader(host), tmp_path)

    assert _srcs(tokens) == uploaded
    assert [name for name, _ in host.calls] == ["a.png", "b.png"]


def test_input_tokens_are_not_mutated(tmp_path, host):
    (tmp_path / "a.png").write_bytes(b"first")
    parsed = parse_text("![a](a.png)\n")
    rewrite_images(parsed.tokens, ImageUploader(host), tmp_path)
    assert _srcs(parsed.tokens) == ["a.png"]


@pytest.mark.parametrize("workers", [1, 4])
def test_duplicate_content_uploads_once(tmp_path, host, png_bytes, workers):
    """Byte-identical images under different paths share one upload and one URL."""
    (tmp_path / "a.png").write_bytes(png_bytes)
    (tmp_path / "copy").mkdir()
    (tmp_path / "copy" / "a2.png").write_bytes(png_bytes)
    parsed = parse_text("![a](a.png)\n\n![b](copy/a2.png)\n\n![c](./a.png)\n")

    tokens, uploaded = rewrite_images(parsed.tokens, ImageUploader(host), tmp_path, workers=workers)

    assert len(host.calls) == 1
    assert len(uploaded) == 1
    assert _srcs(tokens) == uploaded * 3


def test_remote_image(host, make_session, png_bytes):
    session = make_session((200, png_bytes))
    parsed = parse_text("![r](https://cdn.example.com/r.png)\n")
    tokens, uploaded = rewrite_images(parsed.tokens, ImageUploader(host), None, session=session)
    assert _srcs(tokens) == uploaded
    assert host.calls[0][0] == "r.png"


def test_empty_src_left_alone(host):
    parsed = parse_text("![nothing]()\n")
    tokens, uploaded = rewrite_images(parsed.tokens, ImageUploader(host), None)
    assert uploaded == []
    assert host.calls == []


def test_missing_image_aborts(tmp_path, host):
    (tmp_path / "a.png").write_bytes(b"first")
    parsed = parse_text("![a](a.png)\n\n![b](nope.png)\n")
    with pytest.raises(FetchError, match="nope.png"):
        rewrite_images(parsed.tokens, ImageUploader(host), tmp_path)


def test_empty_image_aborts(tmp_path, host):
    (tmp_path / "zero.png").write_bytes(b"")
    parsed = parse_text("![z](zero.png)\n")
    with pytest.raises(EmptyImageError, match="zero.png"):
        rewrite_images(parsed.tokens, ImageUploader(host), tmp_path, workers=2)


def test_failure_on_worker_pool_names_ref(tmp_path, host, png_bytes):
    """With several workers the first failing image still aborts the rewrite."""
    (tmp_path / "a.png").write_bytes(png_bytes)
    (tmp_path / "c.png").write_bytes(b"other")
    parsed = parse_text("![a](a.png)\n\n![b](nope.png)\n\n![c](c.png)\n")
    with pytest.raises(FetchError, match="nope.png") as exc:
        rewrite_images(parsed.tokens, ImageUploader(host), tmp_path, workers=4)
    assert exc.value.ref == "nope.png"
    assert _srcs(parsed.tokens) == ["a.png", "nope.png", "c.png"]


@pytest.mark.parametrize("markdown,name", [
    ("![x](图片.png)\n",        "图片.png"),
    ("![x](<my pic.png>)\n",    "my pic.png"),
])
def test_non_ascii_and_spaced_local_paths(tmp_path, host, png_bytes, markdown, name):
    """Percent-encoded destinations resolve to the file the author named."""
    (tmp_path / name).write_bytes(png_bytes)
    parsed = parse_text(markdown)
    assert _srcs(parsed.tokens)[0] != name

    tokens, uploaded = rewrite_images(parsed.tokens, ImageUploader(host), tmp_path)

    assert _srcs(tokens) == uploaded
    assert host.calls == [(name, png_bytes)]
