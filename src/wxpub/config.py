"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Theme(BaseModel):
    """Inline styles injected into the article body; the platform strips stylesheets."""
    bullet:      str = "• "
    list_indent: str = "\u3000\u3000"
    h2_style: str = (
        "padding:1px 12.5px;color:#fff;margin:1.2em 0 1em;border-radius:4px;display:inline-block;"
        "background-color:rgb(72,112,172);font-size:1.3em;visibility:visible;"
    )
    h2_span_style: str = "visibility:visible;"
    h3_style:   str = "padding:0;color:rgb(72,112,172);margin:1.2em 0 1em;font-size:1.3em;"
    p_style:    str = "margin:10px 0;letter-spacing:0;word-break:break-word;line-height:1.75;color:#242424"
    blockquote_style: str = (
        "margin:12px 0;padding-left:12px;border-left:3px solid #e0e0e0;letter-spacing:0;"
        "word-break:break-word;color:#3a3a3a;line-height:1.75"
    )
    body_style: str = (
        "color:#242424;padding:8px 0;line-height:1.75;font-size:17px;"
        "font-family:'PingFang SC','Hiragino Sans GB','Helvetica Neue',Arial,sans-serif;word-break:break-word;"
    )
    link_style: str = "color:#576b95;font-weight:600;text-decoration:none"
    code_style: str = "background:#f7f7f7;color:#202124;padding:2px 4px;border-radius:4px"
    pre_style:  str = "background:#f7f7f7;color:#202124;padding:12px;border-radius:8px;overflow:auto"


class Settings(BaseModel):
    app_name:       str = "wxpub"
    app_id:         str = Field(default="", description="Official account AppID")
    app_secret:     str = Field(default="", description="Official account AppSecret")
    api_base:       str = Field(default="https://api.weixin.qq.com", description="Platform API root")
    parser_config:  str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    linkify:        bool = Field(default=False, description="Autolink bare URLs (needs linkify-it-py)")
    digest_chars:   int = Field(default=120, ge=0, description="Auto digest length in characters")
    upload_workers: int = Field(default=1, ge=1, description="Concurrent image fetch/upload workers")
    timeout:        float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    theme:          Theme = Field(default_factory=Theme)


# Nested models can only come from config.yaml.
_ENV_FIELDS = [name for name in Settings.model_fields if name != "theme"]


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then WXPUB_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in _ENV_FIELDS:
        if val := os.getenv(f"WXPUB_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
