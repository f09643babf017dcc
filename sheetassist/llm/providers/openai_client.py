from __future__ import annotations

from typing import Any, Dict, Optional

from .base import Auth, PromptParts, ProviderSpec


def _endpoint(settings) -> str:
    return f"{settings.openai_base_url.rstrip('/')}/chat/completions"


def _auth(secret: str, settings) -> Auth:
    headers = {
        "Authorization": f"Bearer {secret}",
        "Content-Type": "application/json",
    }
    return headers, {}


def _build_body(prompt: PromptParts, settings, max_tokens: int) -> Dict[str, Any]:
    messages = []
    if prompt.system is not None:
        messages.append({"role": "system", "content": prompt.system})
    messages.append({"role": "user", "content": prompt.user})
    return {
        "model": settings.openai_model,
        "messages": messages,
        "temperature": settings.temperature,
        "max_tokens": max_tokens,
    }


def _extract_text(raw: Dict[str, Any]) -> Optional[str]:
    try:
        return raw["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None


# OpenAI Chat Completions. The system prompt travels as its own message.
OPENAI = ProviderSpec(
    name="openai",
    endpoint=_endpoint,
    auth=_auth,
    build_body=_build_body,
    extract_text=_extract_text,
)
