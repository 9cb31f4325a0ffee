"""End-to-end tests for core/pipeline.py: markdown file -> platform HTML"""

import pytest
from bs4 import BeautifulSoup

from wxpub.core.models import DigestOptions
from wxpub.core.pipeline import convert, upload_thumbnail
from wxpub.errors import EmptyImageError, FetchError, MissingTitleError


SAMPLE = "# T\n\n![x](./a.png)\n\n- one\n- two\n\n| A | B |\n|---|---|\n| 1 | 2 |\n"


@pytest.fixture(name="article")
def article_fixture(tmp_path, png_bytes):
    (tmp_path / "a.png").write_bytes(png_bytes)
    path = tmp_path / "post.md"
    path.write_text(SAMPLE, encoding="utf-8")
    return path


def test_convert_sample_article(article, host):
    result = convert(article, host)
    soup = BeautifulSoup(result.html, "html.parser")

    for tag in ("h1", "table", "ul", "li"):
        assert soup.find(tag) is None
    paragraphs = [p.get_text("\n") for p in soup.find_all("p")]
    assert "• one" in paragraphs
    assert "• two" in paragraphs
    assert any("1 | 2" in p.split("\n") for p in paragraphs)

    assert len(host.calls) == 1
    assert result.uploaded_image_urls == [soup.img["src"]]
    assert result.title == "T"
    assert result.digest == ""


def test_convert_checkbox(tmp_path, host):
    path = tmp_path / "tasks.md"
    path.write_text("# Tasks\n\n- [x] done\n", encoding="utf-8")
    html = convert(path, host).html
    assert "[x] done" in html
    assert "<input" not in html


def test_convert_duplicate_images_one_upload(tmp_path, host, png_bytes):
    (tmp_path / "a.png").write_bytes(png_bytes)
    (tmp_path / "b.png").write_bytes(png_bytes)
    path = tmp_path / "dup.md"
    path.write_text("# Dup\n\n![a](a.png)\n\n![b](b.png)\n", encoding="utf-8")

    result = convert(path, host, workers=2)

    assert len(host.calls) == 1
    assert len(result.uploaded_image_urls) == 1
    srcs = {img["src"] for img in BeautifulSoup(result.html, "html.parser").find_all("img")}
    assert srcs == set(result.uploaded_image_urls)


def test_convert_remote_and_local_same_bytes(tmp_path, host, make_session, png_bytes):
    (tmp_path / "a.png").write_bytes(png_bytes)
    path = tmp_path / "mixed.md"
    path.write_text("# M\n\n![a](a.png)\n\n![r](https://cdn.example.com/r.png)\n", encoding="utf-8")
    session = make_session((200, png_bytes))

    result = convert(path, host, session=session)

    assert len(host.calls) == 1
    assert len(session.requests) == 1
    assert len(result.uploaded_image_urls) == 1


def test_frontmatter_title_and_explicit_override(tmp_path, host):
    path = tmp_path / "fm.md"
    path.write_text('---\ntitle: "Foo"\n---\n# Heading\n\nBody.\n', encoding="utf-8")
    assert convert(path, host).title == "Foo"
    assert convert(path, host, title="Bar").title == "Bar"


def test_missing_title_fails_before_upload(tmp_path, host, png_bytes):
    (tmp_path / "a.png").write_bytes(png_bytes)
    path = tmp_path / "untitled.md"
    path.write_text("Intro\n\n![a](a.png)\n", encoding="utf-8")
    with pytest.raises(MissingTitleError):
        convert(path, host)
    assert host.calls == []


def test_missing_image_aborts_conversion(tmp_path, host):
    path = tmp_path / "broken.md"
    path.write_text("# B\n\n![a](missing.png)\n", encoding="utf-8")
    with pytest.raises(FetchError, match="missing.png"):
        convert(path, host)


@pytest.mark.parametrize("options,expected", [
    (DigestOptions(text="  Given  "),                          "Given"),
    (DigestOptions(text="Given", auto=True, max_chars=3),      "Given"),
    (DigestOptions(auto=True, max_chars=5),                    "Hello..."),
    (DigestOptions(auto=False),                                ""),
])
def test_convert_digest(tmp_path, host, options, expected):
    path = tmp_path / "d.md"
    path.write_text("Hello world, this is the body.\n", encoding="utf-8")
    assert convert(path, host, title="D", digest=options).digest == expected


def test_upload_thumbnail(tmp_path, png_bytes):
    class ThumbClient:
        def __init__(self):
            self.calls = []

        def upload_thumb(self, filename, data):
            self.calls.append((filename, data))
            return {"media_id": "MEDIA", "url": "https://mmbiz.example.com/cover.png"}

    (tmp_path / "cover.png").write_bytes(png_bytes)
    client = ThumbClient()
    resp = upload_thumbnail(client, "cover.png", tmp_path)
    assert resp["media_id"] == "MEDIA"
    assert client.calls == [("cover.png", png_bytes)]


def test_upload_thumbnail_empty(tmp_path):
    (tmp_path / "empty.jpg").write_bytes(b"")
    with pytest.raises(EmptyImageError):
        upload_thumbnail(object(), "empty.jpg", tmp_path)
