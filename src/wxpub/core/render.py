"""Serialize a markdown-it token stream to HTML"""

from typing import Optional

from wxpub.core.parse import make_parser


def render(
    tokens: list,
    env: Optional[dict] = None,
    parser_config: str = 'gfm-like',
    linkify: bool = False,
    ) -> str:
    """Render tokens with the same parser configuration that produced them.

    Task-list checkboxes come out as <input type="checkbox"> elements; the
    transform chain neutralizes them for the platform.
    """
    md = make_parser(parser_config, linkify)
    return md.renderer.render(tokens, md.options, env if env is not None else {})
