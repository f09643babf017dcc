"""Spreadsheet assistant gateway for OpenAI, Claude and Gemini."""

from sheetassist.config import GatewaySettings, load_settings
from sheetassist.gateway import ProviderGateway
from sheetassist.llm.cells import CellRef, column_label
from sheetassist.llm.credentials import CredentialStore
from sheetassist.llm.providers.base import (
    PROVIDER_ORDER,
    AllProvidersFailed,
    HttpError,
    MissingCredential,
    ProviderError,
    ProviderResponse,
    RequestContext,
    ResponseFormatError,
    TransportError,
    UnsupportedProvider,
)
from sheetassist.llm.structured import extract_structured_payload

__all__ = [
    "AllProvidersFailed",
    "CellRef",
    "CredentialStore",
    "GatewaySettings",
    "HttpError",
    "MissingCredential",
    "PROVIDER_ORDER",
    "ProviderError",
    "ProviderGateway",
    "ProviderResponse",
    "RequestContext",
    "ResponseFormatError",
    "TransportError",
    "UnsupportedProvider",
    "column_label",
    "extract_structured_payload",
    "load_settings",
]
