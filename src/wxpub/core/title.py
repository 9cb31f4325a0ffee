"""Title resolution: ordered resolvers, first non-empty result wins"""

from typing import Callable, Optional

from wxpub.core.models import ParsedDoc
from wxpub.core.utils.tokens import heading_level
from wxpub.errors import MissingTitleError


Resolver = Callable[[Optional[str], ParsedDoc], str]


def _clean(value) -> str:
    return str(value).strip().strip('"\'').strip() if value is not None else ""


def from_explicit(explicit: Optional[str], parsed: ParsedDoc) -> str:
    return (explicit or "").strip()


def from_frontmatter(explicit: Optional[str], parsed: ParsedDoc) -> str:
    return _clean(parsed.frontmatter.get('title'))


def from_first_h1(explicit: Optional[str], parsed: ParsedDoc) -> str:
    """Text of the first level-1 heading; the inline token follows heading_open."""
    tokens = parsed.tokens
    for i, tok in enumerate(tokens):
        if heading_level(tok) == 1 and i + 1 < len(tokens):
            text = tokens[i + 1].content.strip()
            if text:
                return text
    return ""


RESOLVERS: list[Resolver] = [from_explicit, from_frontmatter, from_first_h1]


def resolve_title(explicit: Optional[str], parsed: ParsedDoc, resolvers: list[Resolver] = RESOLVERS) -> str:
    """Return the first non-empty title, else raise MissingTitleError."""
    for resolver in resolvers:
        title = resolver(explicit, parsed)
        if title:
            return title
    raise MissingTitleError()
