from __future__ import annotations

from typing import Dict

from .base import ProviderSpec, UnsupportedProvider
from .claude_client import CLAUDE
from .gemini_client import GEMINI
from .openai_client import OPENAI

PROVIDERS: Dict[str, ProviderSpec] = {
    "openai": OPENAI,
    "claude": CLAUDE,
    "gemini": GEMINI,
}


def get_provider(name: str) -> ProviderSpec:
    spec = PROVIDERS.get(name)
    if spec is None:
        raise UnsupportedProvider(name)
    return spec
