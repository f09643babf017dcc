from __future__ import annotations

from typing import Any, Dict, Optional

from sheetassist.llm.prompt import inline_prompt

from .base import Auth, PromptParts, ProviderSpec


def _endpoint(settings) -> str:
    return f"{settings.anthropic_base_url.rstrip('/')}/messages"


def _auth(secret: str, settings) -> Auth:
    headers = {
        "x-api-key": secret,
        "anthropic-version": settings.anthropic_version,
        "Content-Type": "application/json",
    }
    return headers, {}


def _build_body(prompt: PromptParts, settings, max_tokens: int) -> Dict[str, Any]:
    return {
        "model": settings.claude_model,
        "max_tokens": max_tokens,
        "messages": [{"role": "user", "content": inline_prompt(prompt)}],
    }


def _extract_text(raw: Dict[str, Any]) -> Optional[str]:
    try:
        return raw["content"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None


CLAUDE = ProviderSpec(
    name="claude",
    endpoint=_endpoint,
    auth=_auth,
    build_body=_build_body,
    extract_text=_extract_text,
)
