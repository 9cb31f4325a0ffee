"""Frontmatter extraction and markdown-it tokenization"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt
from mdit_py_plugins.attrs import attrs_block_plugin, attrs_plugin
from mdit_py_plugins.container import container_plugin
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.subscript import sub_plugin
from mdit_py_plugins.superscript import superscript_plugin
from mdit_py_plugins.tasklists import tasklists_plugin
from mdit_py_plugins.texmath import texmath_plugin

from wxpub.core.models import ParsedDoc


FRONTMATTER_RE = re.compile(r'^---[ \t]*\n(.*?)\n---[ \t]*(?:\n|$)', re.DOTALL)
# A header needs at least one "key:" or "- item" line; otherwise the leading
# "---" is a thematic break.
YAML_LINE_RE = re.compile(r'^(?:[\w.-]+[ \t]*:|-[ \t])', re.MULTILINE)

CONTAINERS = ['info', 'warning', 'tip']


@lru_cache(maxsize=None)
def make_parser(preset: str = 'gfm-like', linkify: bool = False) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name.

    Raw HTML passes through and single newlines become <br>, matching how
    articles are authored for the platform editor. On top of the preset:
    task lists, footnotes, definition lists, ::: info/warning/tip containers,
    {.class #id key=val} attributes, ~sub~, ^sup^ and $tex$ math.
    """
    md = MarkdownIt(preset, options_update={"linkify": linkify, "html": True, "breaks": True})
    md.use(attrs_plugin).use(attrs_block_plugin)
    for name in CONTAINERS:
        md.use(container_plugin, name=name)
    return (
        md.use(deflist_plugin)
        .use(footnote_plugin)
        .use(sub_plugin)
        .use(superscript_plugin)
        .use(tasklists_plugin)
        .use(texmath_plugin)
    )


def strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    block = m.group(1)
    if block.strip() and not YAML_LINE_RE.search(block):
        return {}, text
    try:
        fm = yaml.safe_load(block) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(fm, dict):
        raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
    return fm, text[m.end():]


def parse_text(
    text: str,
    path: Path = Path("document.md"),
    parser_config: str = 'gfm-like',
    linkify: bool = False,
    ) -> ParsedDoc:
    """Parse markdown source into a ParsedDoc with token stream."""
    frontmatter, body = strip_frontmatter(text)
    env: dict = {}
    tokens = make_parser(parser_config, linkify).parse(body, env)
    return ParsedDoc(
        path=path,
        raw_markdown=text,
        markdown=body,
        frontmatter=frontmatter,
        tokens=tokens,
        env=env,
    )


def parse_file(path: Path, parser_config: str = 'gfm-like', linkify: bool = False) -> ParsedDoc:
    """Parse a single markdown file; relative image paths later resolve against its directory."""
    raw = path.read_text(encoding='utf-8')
    return parse_text(raw, path, parser_config, linkify)
