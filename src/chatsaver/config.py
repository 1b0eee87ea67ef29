"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "CHATSAVER_"


class Settings(BaseModel):
    app_name:      str  = "chatsaver"
    db_url:        str  = "sqlite:///chatsaver.db"
    log_level:     str  = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$", description="loguru level for the stderr sink")
    output_dir:    str  = Field(default="exports", description="Directory for exported conversations")
    export_format: str  = Field(default="md", pattern="^(md|html)$", description="md or html")
    include_html:  bool = Field(default=True, description="Store sanitized HTML alongside the markdown content")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then CHATSAVER_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
