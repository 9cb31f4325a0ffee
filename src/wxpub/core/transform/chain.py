"""Ordered transform chain: parse rendered HTML once, apply every stage, serialize once"""

from typing import Callable, Optional

from bs4 import BeautifulSoup

from wxpub.config import Theme
from wxpub.core.transform.stages import (
    apply_theme,
    convert_headings,
    flatten_item_paragraphs,
    flatten_tables,
    lists_to_paragraphs,
    neutralize_checkboxes,
    remove_empty_items,
    remove_rules,
    style_paragraphs,
    unwrap_links,
)


Stage = Callable[[BeautifulSoup, Theme], None]

# Later stages rely on the simplifications made by earlier ones.
STAGES: list[Stage] = [
    neutralize_checkboxes,
    flatten_tables,
    remove_rules,
    unwrap_links,
    flatten_item_paragraphs,
    remove_empty_items,
    lists_to_paragraphs,
    convert_headings,
    style_paragraphs,
    apply_theme,
]


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, 'html.parser')


def transform_html(html: str, theme: Optional[Theme] = None, stages: list[Stage] = STAGES) -> str:
    """Run stages in order over one parsed tree and return the serialized result."""
    theme = theme or Theme()
    soup = _soup(html)
    for stage in stages:
        stage(soup, theme)
    return str(soup)


def apply_stage(stage: Stage, html: str, theme: Optional[Theme] = None) -> str:
    """Run a single stage string-to-string; html is returned unchanged when the stage is a no-op."""
    soup = _soup(html)
    before = str(soup)
    stage(soup, theme or Theme())
    after = str(soup)
    return html if after == before else after
