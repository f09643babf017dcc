from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from sheetassist.llm.providers.base import PROVIDER_ORDER

# Environment variables consulted when the store has no key for a provider.
ENV_VARS: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


def storage_key(provider: str) -> str:
    return f"{provider}_api_key"


class KeyValueStore:
    """String key-value persistence used for API keys."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


@dataclass
class MemoryKeyValueStore(KeyValueStore):
    data: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


@dataclass
class SQLiteKeyValueStore(KeyValueStore):
    """SQLite-backed key-value store.

    One row per key; writes commit immediately so a key set from the CLI is
    visible to the next process.
    """

    path: Path

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.path))
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                k TEXT PRIMARY KEY,
                v TEXT NOT NULL
            )
            """
        )
        self._conn.commit()

    def get(self, key: str) -> Optional[str]:
        cur = self._conn.execute("SELECT v FROM kv WHERE k=?", (key,))
        row = cur.fetchone()
        if not row:
            return None
        return row[0]

    def set(self, key: str, value: str) -> None:
        self._conn.execute("INSERT OR REPLACE INTO kv (k, v) VALUES (?, ?)", (key, value))
        self._conn.commit()

    def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM kv WHERE k=?", (key,))
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()


class CredentialStore:
    """API keys per provider, cached in memory and written through to a store.

    Keys are read once at construction. A provider whose stored value is
    missing or empty falls back to its environment variable (see ENV_VARS).
    """

    def __init__(self, backend: Optional[KeyValueStore] = None, environ: Optional[Mapping[str, str]] = None):
        self._backend = backend if backend is not None else MemoryKeyValueStore()
        env = os.environ if environ is None else environ
        self._keys: Dict[str, str] = {}
        for provider in PROVIDER_ORDER:
            value = self._backend.get(storage_key(provider)) or env.get(ENV_VARS[provider], "")
            if value:
                self._keys[provider] = value

    @classmethod
    def open(cls, path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> "CredentialStore":
        backend = SQLiteKeyValueStore(Path(path).expanduser()) if path else MemoryKeyValueStore()
        return cls(backend, environ=environ)

    def get(self, provider: str) -> Optional[str]:
        return self._keys.get(provider) or None

    def has(self, provider: str) -> bool:
        return bool(self._keys.get(provider))

    def set(self, provider: str, secret: str) -> None:
        # No validation of the secret's shape; an empty value clears the key.
        if secret:
            self._keys[provider] = secret
            self._backend.set(storage_key(provider), secret)
        else:
            self._keys.pop(provider, None)
            self._backend.delete(storage_key(provider))

    def configured(self) -> Dict[str, bool]:
        return {p: self.has(p) for p in PROVIDER_ORDER}

    def close(self) -> None:
        self._backend.close()
