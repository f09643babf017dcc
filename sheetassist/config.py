from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field


class GatewaySettings(BaseModel):
    """Tunables for the provider gateway.

    Defaults reproduce the stock behaviour: temperature 0.7, a 500 token answer
    budget for spreadsheet requests and 2048 for plain content generation.
    """

    model_config = ConfigDict(extra="forbid")

    openai_model: str = "gpt-4o-mini"
    claude_model: str = "claude-3-5-sonnet-20240620"
    gemini_model: str = "gemini-2.0-flash"

    openai_base_url: str = "https://api.openai.com/v1"
    anthropic_base_url: str = "https://api.anthropic.com/v1"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    anthropic_version: str = "2023-06-01"

    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(500, gt=0)
    content_max_tokens: int = Field(2048, gt=0)
    timeout_s: float = Field(60.0, gt=0.0, description="Per-request HTTP timeout")
    strict_responses: bool = Field(
        False, description="Treat a missing answer field as a failure instead of empty text"
    )
    credentials_path: Optional[str] = None


def load_settings(path: Optional[str] = None) -> GatewaySettings:
    if path is None:
        return GatewaySettings()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if isinstance(data, dict) and "gateway" in data:
        data = data["gateway"]
    if not isinstance(data, dict):
        raise ValueError("Settings YAML must be a mapping or contain a 'gateway:' mapping")
    settings = GatewaySettings.model_validate(data)
    if settings.credentials_path:
        # Relative store paths are resolved against the settings file.
        p = Path(settings.credentials_path).expanduser()
        if not p.is_absolute():
            p = Path(path).resolve().parent / p
        settings = settings.model_copy(update={"credentials_path": str(p)})
    return settings
