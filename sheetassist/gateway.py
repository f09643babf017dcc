"""Provider gateway: one spreadsheet-assistant call, fanned out over providers.

Callers pick a provider; on failure the gateway walks the remaining providers
in PROVIDER_ORDER (only those with a configured key) until one answers.
Attempts are strictly sequential.

Usage::

    creds = CredentialStore.open("~/.sheetassist/keys.db")
    async with ProviderGateway(creds) as gw:
        resp = await gw.request("openai", RequestContext(prompt="Sum column B"))
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional, Sequence

import httpx
import structlog

from sheetassist.config import GatewaySettings
from sheetassist.llm.cells import CellRef
from sheetassist.llm.credentials import CredentialStore
from sheetassist.llm.prompt import build_prompt
from sheetassist.llm.providers.base import (
    PROVIDER_ORDER,
    AllProvidersFailed,
    HttpError,
    MissingCredential,
    PromptParts,
    ProviderError,
    ProviderResponse,
    RequestContext,
    ResponseFormatError,
    TransportError,
)
from sheetassist.llm.providers.registry import get_provider
from sheetassist.llm.structured import extract_structured_payload

logger = structlog.get_logger(__name__)

_QUERY_KEY_RE = re.compile(r"([?&]key=)[^&\s\"']+")


class _RedactQueryKey(logging.Filter):
    """Masks `key=` query values in httpx's own request log lines (Gemini auth)."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "key=" in message:
            record.msg = _QUERY_KEY_RE.sub(r"\1REDACTED", message)
            record.args = ()
        return True


def _install_log_redaction() -> None:
    httpx_logger = logging.getLogger("httpx")
    if not any(isinstance(f, _RedactQueryKey) for f in httpx_logger.filters):
        httpx_logger.addFilter(_RedactQueryKey())


def _error_message(response: httpx.Response) -> str:
    """Provider error text from an error body, else the HTTP reason phrase."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return response.reason_phrase or str(response.status_code)


class ProviderGateway:
    def __init__(
        self,
        credentials: CredentialStore,
        settings: Optional[GatewaySettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings or GatewaySettings()
        self._credentials = credentials
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.settings.timeout_s)
        _install_log_redaction()

    async def __aenter__(self) -> "ProviderGateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ── Credentials ──────────────────────────────────────────
    def set_credential(self, provider: str, secret: str) -> None:
        self._credentials.set(provider, secret)

    def get_credential(self, provider: str) -> Optional[str]:
        return self._credentials.get(provider)

    def has_credential(self, provider: str) -> bool:
        return self._credentials.has(provider)

    # ── Single-provider primitive ────────────────────────────
    async def _call(self, provider: str, prompt: PromptParts, max_tokens: int) -> Dict[str, Any]:
        spec = get_provider(provider)
        secret = self._credentials.get(provider) or ""
        headers, params = spec.auth(secret, self.settings)
        url = spec.endpoint(self.settings)
        body = spec.build_body(prompt, self.settings, max_tokens)

        logger.debug("provider_request", provider=provider, url=url)
        try:
            r = await self._client.post(url, headers=headers, params=params, json=body)
        except httpx.RequestError as e:
            raise TransportError(provider, str(e) or type(e).__name__) from e

        if not r.is_success:
            raise HttpError(provider, r.status_code, _error_message(r))
        try:
            raw = r.json()
        except ValueError as e:
            raise ResponseFormatError(f"{provider} returned a non-JSON body") from e
        if not isinstance(raw, dict):
            raise ResponseFormatError(f"{provider} returned an unexpected JSON body")
        return raw

    def _extract_text(self, provider: str, raw: Dict[str, Any], strict: bool) -> str:
        text = get_provider(provider).extract_text(raw)
        if not isinstance(text, str):
            text = None
        if strict and not text:
            raise ResponseFormatError(f"Invalid response from {provider} API")
        return text or ""

    async def _respond(self, provider: str, context: RequestContext) -> ProviderResponse:
        raw = await self._call(provider, build_prompt(context), self.settings.max_tokens)
        text = self._extract_text(provider, raw, strict=self.settings.strict_responses)
        cell_updates, actions = extract_structured_payload(text)
        return ProviderResponse(
            text=text,
            cell_updates=cell_updates,
            actions=actions,
            provider=provider,
            raw=raw,
        )

    # ── Public calls ─────────────────────────────────────────
    async def request(
        self,
        provider: str,
        context: RequestContext,
        allow_fallback: bool = True,
    ) -> ProviderResponse:
        """Ask `provider`, falling back to the other configured providers.

        Raises:
            MissingCredential: `provider` has no key. Nothing is sent.
            AllProvidersFailed: every attempt failed (fallback enabled).
            ProviderError: the primary failure itself when fallback is disabled.
        """
        if not self.has_credential(provider):
            raise MissingCredential(provider)

        try:
            return await self._respond(provider, context)
        except ProviderError as primary:
            logger.warning("provider_request_failed", provider=provider, error=str(primary))
            if not allow_fallback:
                raise
            errors = {provider: str(primary)}

            for fallback in PROVIDER_ORDER:
                if fallback == provider or not self.has_credential(fallback):
                    continue
                logger.info("provider_fallback_attempt", provider=fallback, failed=list(errors))
                try:
                    resp = await self._respond(fallback, context)
                except ProviderError as e:
                    errors[fallback] = str(e)
                    logger.warning("provider_fallback_failed", provider=fallback, error=str(e))
                    continue
                logger.info("provider_failover_success", provider=fallback, failed_providers=list(errors))
                return resp

            raise AllProvidersFailed(str(primary), errors) from primary

    async def generate_content(self, prompt: str, providers: Sequence[str] = ("openai", "gemini")) -> str:
        """Plain prompt in, plain text out. No spreadsheet context or structured parsing.

        Providers are tried in the given order, skipping those without a key.
        An empty answer counts as a failure. Like `request`, a total failure
        reports the first error; the rest are in `AllProvidersFailed.errors`.
        """
        eligible = [p for p in providers if self.has_credential(p)]
        if not eligible:
            raise MissingCredential(", ".join(providers))

        errors: Dict[str, str] = {}
        first: Optional[ProviderError] = None
        for provider in eligible:
            try:
                raw = await self._call(provider, PromptParts(user=prompt), self.settings.content_max_tokens)
                return self._extract_text(provider, raw, strict=True)
            except ProviderError as e:
                errors[provider] = str(e)
                first = first or e
                logger.warning("provider_request_failed", provider=provider, error=str(e))
        raise AllProvidersFailed(str(first), errors) from first

    async def check_api_status(self, provider: str) -> bool:
        """True when a minimal test call to `provider` returns a readable body. Never raises."""
        if not self.has_credential(provider):
            return False
        ctx = RequestContext(prompt="Test connection", selected_cell=CellRef(0, 0))
        try:
            await self._call(provider, build_prompt(ctx), self.settings.max_tokens)
        except Exception as e:
            logger.info("provider_status_check_failed", provider=provider, error=str(e))
            return False
        # _call only returns once the body decoded to a JSON object, even `{}`.
        return True

    async def check_all(self) -> Dict[str, bool]:
        return {p: await self.check_api_status(p) for p in PROVIDER_ORDER}
