from __future__ import annotations

from typing import Any, Dict, Optional

from sheetassist.llm.prompt import inline_prompt

from .base import Auth, PromptParts, ProviderSpec


def _endpoint(settings) -> str:
    """Generative Language API (v1beta):
      {base}/models/{model}:generateContent?key=...
    """
    return f"{settings.gemini_base_url.rstrip('/')}/models/{settings.gemini_model}:generateContent"


def _auth(secret: str, settings) -> Auth:
    # Gemini takes the key as a query parameter, not a header.
    return {"Content-Type": "application/json"}, {"key": secret}


def _build_body(prompt: PromptParts, settings, max_tokens: int) -> Dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": inline_prompt(prompt)}]}],
        "generationConfig": {
            "temperature": settings.temperature,
            "maxOutputTokens": max_tokens,
        },
    }


def _extract_text(raw: Dict[str, Any]) -> Optional[str]:
    try:
        return raw["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None


GEMINI = ProviderSpec(
    name="gemini",
    endpoint=_endpoint,
    auth=_auth,
    build_body=_build_body,
    extract_text=_extract_text,
)
