from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from sheetassist.config import GatewaySettings
from sheetassist.gateway import ProviderGateway
from sheetassist.llm.credentials import CredentialStore

HOSTS = {
    "api.openai.com": "openai",
    "api.anthropic.com": "claude",
    "generativelanguage.googleapis.com": "gemini",
}


def ok_body(provider: str, text: str) -> Dict[str, Any]:
    if provider == "openai":
        return {"choices": [{"message": {"role": "assistant", "content": text}}]}
    if provider == "claude":
        return {"content": [{"type": "text", "text": text}]}
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeProviders:
    """MockTransport handler keyed by provider.

    Each entry is (status, json body), (status, raw text), the string
    "connect_error" or "read_timeout" to simulate a network failure, or an
    exception instance to raise as-is.
    """

    def __init__(self, replies: Optional[Dict[str, Any]] = None):
        self.replies = dict(replies or {})
        self.calls: List[Tuple[str, httpx.Request]] = []

    @property
    def providers_called(self) -> List[str]:
        return [p for p, _ in self.calls]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        provider = HOSTS[request.url.host]
        self.calls.append((provider, request))
        reply = self.replies[provider]
        if isinstance(reply, Exception):
            raise reply
        if reply == "connect_error":
            raise httpx.ConnectError("connection refused", request=request)
        if reply == "read_timeout":
            raise httpx.ReadTimeout("timed out", request=request)
        status, body = reply
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)


def make_gateway(fake: FakeProviders, keys: Dict[str, str], **settings: Any) -> ProviderGateway:
    creds = CredentialStore(environ={})
    for provider, secret in keys.items():
        creds.set(provider, secret)
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake))
    return ProviderGateway(creds, GatewaySettings(**settings), client=client)


@pytest.fixture
def all_keys() -> Dict[str, str]:
    return {"openai": "sk-openai", "claude": "sk-ant", "gemini": "g-key"}
