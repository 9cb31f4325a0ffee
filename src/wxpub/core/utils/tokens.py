"""Shared markdown-it token utilities"""

from typing import Iterator


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def walk(tokens: list) -> Iterator:
    """Yield every token depth-first in document order, descending into inline children."""
    for tok in tokens:
        yield tok
        if tok.children:
            yield from walk(tok.children)


def iter_images(tokens: list) -> Iterator:
    """Yield image tokens in document order."""
    return (tok for tok in walk(tokens) if tok.type == 'image')
