"""ServerConfigStore — the list of configured tool-provider servers.

Persisted as a small YAML document::

    servers:
      - name: docs
        url: http://localhost:8080/mcp
    default_server: docs
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import BaseModel, ValidationError

from mcpbridge.core.registry.models import ServerDescriptor

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset({"http", "https", "ws", "wss"})


class StoreResult(BaseModel):
    """Outcome of a store mutation, with a user-facing message."""

    success: bool
    message: str


class _StoredServer(BaseModel):
    name: str
    url: str


class _StoreDocument(BaseModel):
    servers: list[_StoredServer] = []
    default_server: str | None = None


class ServerConfigStore:
    """CRUD over the configured servers, persisted to a YAML file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def list_servers(self) -> list[ServerDescriptor]:
        """All servers in insertion order, with ``is_default`` filled in."""
        doc = self._read()
        return [
            ServerDescriptor(name=s.name, url=s.url, is_default=s.name == doc.default_server)
            for s in doc.servers
        ]

    def get_server(self, name: str) -> ServerDescriptor | None:
        return next((s for s in self.list_servers() if s.name == name), None)

    def get_default_server(self) -> ServerDescriptor | None:
        return next((s for s in self.list_servers() if s.is_default), None)

    def add_server(self, name: str, url: str) -> StoreResult:
        """Add a server.  The first server added becomes the default."""
        doc = self._read()
        if any(s.name == name for s in doc.servers):
            return self._fail(f'Server with name "{name}" already exists.')
        if not name.strip():
            return self._fail("Server name must not be empty.")
        if not is_valid_server_url(url):
            return self._fail(f"Invalid URL format: {url}")

        doc.servers.append(_StoredServer(name=name, url=url))
        if len(doc.servers) == 1 and not doc.default_server:
            doc.default_server = name
        self._write(doc)
        message = f'Server "{name}" ({url}) added.'
        logger.info(message)
        return StoreResult(success=True, message=message)

    def remove_server(self, name: str) -> StoreResult:
        """Remove a server, promoting the first remaining one if it was default."""
        doc = self._read()
        if not any(s.name == name for s in doc.servers):
            return self._fail(f'Server "{name}" not found.')

        doc.servers = [s for s in doc.servers if s.name != name]
        message = f'Server "{name}" removed.'
        if doc.default_server == name:
            doc.default_server = doc.servers[0].name if doc.servers else None
            if doc.default_server:
                message += f' New default set to "{doc.default_server}".'
            else:
                message += " No servers left to set as default."
        self._write(doc)
        logger.info(message)
        return StoreResult(success=True, message=message)

    def set_default_server(self, name: str) -> StoreResult:
        doc = self._read()
        if not any(s.name == name for s in doc.servers):
            return self._fail(f'Server "{name}" not found. Cannot set as default.')
        doc.default_server = name
        self._write(doc)
        message = f'Server "{name}" is now the default.'
        logger.info(message)
        return StoreResult(success=True, message=message)

    def _read(self) -> _StoreDocument:
        """Load the document; unreadable or corrupt files count as empty."""
        if not self._path.exists():
            return _StoreDocument()
        try:
            data: Any = yaml.safe_load(self._path.read_text(encoding="utf-8"))
            if data is None:
                return _StoreDocument()
            doc = _StoreDocument.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as exc:
            logger.error("Error reading server config %s: %s", self._path, exc)
            return _StoreDocument()
        if doc.default_server and not any(s.name == doc.default_server for s in doc.servers):
            doc.default_server = None
        return doc

    def _write(self, doc: _StoreDocument) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            yaml.safe_dump(doc.model_dump(), sort_keys=False),
            encoding="utf-8",
        )

    @staticmethod
    def _fail(message: str) -> StoreResult:
        logger.warning(message)
        return StoreResult(success=False, message=message)


def is_valid_server_url(url: str) -> bool:
    """True for absolute http(s)/ws(s) URLs with a host."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError):
        return False
    return parsed.scheme in _ALLOWED_SCHEMES and bool(parsed.host)
