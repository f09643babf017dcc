from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from sheetassist.llm.cells import CellRef

# Fallback sweeps walk this order, skipping the provider that just failed.
PROVIDER_ORDER: Tuple[str, ...] = ("openai", "claude", "gemini")


@dataclass(frozen=True)
class RequestContext:
    """Spreadsheet context for a single assistant call."""

    prompt: str
    selected_cell: Optional[CellRef] = None
    cell_value: str = ""
    surrounding_data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PromptParts:
    """Provider-neutral prompt. `system` is None for plain-prompt calls."""

    user: str
    system: Optional[str] = None


@dataclass
class ProviderResponse:
    text: str
    cell_updates: Optional[List[Any]] = None
    actions: Optional[List[Any]] = None
    provider: str = ""
    raw: Dict[str, Any] = field(default_factory=dict)


class ProviderError(RuntimeError):
    pass


class MissingCredential(ProviderError):
    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"API key for {provider} is not configured")


class UnsupportedProvider(ProviderError):
    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider}")


class HttpError(ProviderError):
    def __init__(self, provider: str, status: int, message: str):
        self.provider = provider
        self.status = status
        self.message = message
        super().__init__(f"API request failed: {status} {message}")


class TransportError(ProviderError):
    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider} request failed: {message}")


class ResponseFormatError(ProviderError):
    """Raised when a provider answers 2xx with a body we cannot read."""


class AllProvidersFailed(ProviderError):
    """Terminal failure of a fallback sweep.

    `last_message` carries the message of the primary (first) failure, which is
    usually the one the caller cares about. `errors` maps every attempted
    provider to its own failure message.
    """

    def __init__(self, last_message: str, errors: Optional[Dict[str, str]] = None):
        self.last_message = last_message
        self.errors = dict(errors or {})
        super().__init__(f"All AI providers failed. Last error: {last_message}")


Auth = Tuple[Dict[str, str], Dict[str, str]]


@dataclass(frozen=True)
class ProviderSpec:
    """Everything that differs between providers, as plain callables.

    endpoint:     settings -> URL
    auth:         (secret, settings) -> (headers, query params)
    build_body:   (prompt, settings, max_tokens) -> JSON payload
    extract_text: decoded response body -> text, or None when the path is absent
    """

    name: str
    endpoint: Callable[[Any], str]
    auth: Callable[[str, Any], Auth]
    build_body: Callable[[PromptParts, Any, int], Dict[str, Any]]
    extract_text: Callable[[Dict[str, Any]], Optional[str]]
