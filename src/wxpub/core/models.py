"""Intermediate data models for the parse and convert pipeline"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class ParsedDoc:
    """Internal parse result carrying markdown-it tokens; not persisted."""
    path:         Path
    raw_markdown: str          # full file content (includes frontmatter)
    markdown:     str          # body only (frontmatter stripped)
    frontmatter:  dict[str, Any]
    tokens:       list         # markdown-it Token objects
    env:          dict = field(default_factory=dict)

    @property
    def base_dir(self) -> Path:
        """Directory that relative image references resolve against."""
        return self.path.parent


class DigestOptions(BaseModel):
    """How the article digest is chosen: explicit text wins, else auto when enabled."""
    text:      Optional[str] = None
    auto:      bool = False
    max_chars: int = Field(default=120, ge=0)


class ConversionResult(BaseModel):
    html: str
    title: str
    digest: str = ""
    uploaded_image_urls: list[str] = []
