"""Plain-text digest derived from markdown source"""

import re


ELLIPSIS = "..."

# Applied in order; each pattern is replaced with its paired substitution.
_STRIP_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r'```.*?```', re.DOTALL), ' '),      # fenced code
    (re.compile(r'`[^`]*`'), ' '),                   # inline code
    (re.compile(r'!\[[^\]]*\]\([^)]+\)'), ' '),      # images
    (re.compile(r'\[([^\]]*)\]\([^)]+\)'), r'\1'),   # links keep their text
    (re.compile(r'<[^>]+>'), ' '),                   # raw html
    (re.compile(r'[#>*_|-]'), ' '),                  # markdown markers
    (re.compile(r'\s+'), ' '),
]


def _drop_frontmatter(text: str) -> str:
    if not text.startswith('---'):
        return text
    end = text.find('\n---', 3)
    return text[end + 4:] if end >= 0 else text


def auto_digest(markdown_text: str, max_chars: int) -> str:
    """Summarize markdown as plain text of at most max_chars characters (+ ellipsis if cut)."""
    if not markdown_text or max_chars <= 0:
        return ""
    text = _drop_frontmatter(markdown_text.strip())
    for pattern, repl in _STRIP_RULES:
        text = pattern.sub(repl, text)
    text = text.strip()

    if len(text) <= max_chars:
        return text
    return text[:max_chars] + ELLIPSIS
