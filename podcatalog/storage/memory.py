"""In-memory document store for dev and tests.

Documents are kept serialized, exactly as a remote store would hold them, so
tests can plant malformed or foreign content with ``put_raw``. Containers are
implied by URI prefixes: a container exists as soon as one resource lives
under it.
"""

from __future__ import annotations

import asyncio
import json

from podcatalog.codec.vocab import LDP
from podcatalog.errors import NotFoundError
from podcatalog.models.document import Document
from podcatalog.storage.base import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store keyed by absolute URI."""

    def __init__(self) -> None:
        self._resources: dict[str, bytes] = {}

    async def get(self, uri: str) -> Document:
        # Yield so concurrent read-modify-write callers interleave like real I/O.
        await asyncio.sleep(0)
        content = self._resources.get(uri)
        if content is None:
            msg = f"No document at {uri}."
            raise NotFoundError(msg, uri=uri)
        doc = Document.from_bytes(content, uri=uri)
        doc.uri = uri
        return doc

    async def put(self, uri: str, doc: Document) -> None:
        await asyncio.sleep(0)
        stored = doc.model_copy(deep=True)
        stored.uri = uri
        self._resources[uri] = stored.to_bytes()

    async def delete(self, uri: str) -> None:
        await asyncio.sleep(0)
        if self._resources.pop(uri, None) is None:
            msg = f"No document at {uri}."
            raise NotFoundError(msg, uri=uri)

    async def list(self, container_uri: str) -> list[str]:
        await asyncio.sleep(0)
        children = self._children(container_uri)
        if not children:
            msg = f"No container at {container_uri}."
            raise NotFoundError(msg, uri=container_uri)
        return children

    async def read_raw(self, uri: str) -> str:
        await asyncio.sleep(0)
        if uri in self._resources:
            return self._resources[uri].decode("utf-8", errors="replace")
        children = self._children(uri)
        if not children:
            msg = f"Nothing stored at {uri}."
            raise NotFoundError(msg, uri=uri)
        listing = {"@id": uri, LDP.contains: [{"@id": c} for c in children]}
        return json.dumps(listing, indent=2)

    # ----- Test helpers -----

    def put_raw(self, uri: str, content: bytes | str) -> None:
        """Store arbitrary bytes at ``uri`` (bypasses serialization)."""
        self._resources[uri] = content.encode("utf-8") if isinstance(content, str) else content

    def contains(self, uri: str) -> bool:
        return uri in self._resources

    @property
    def uris(self) -> list[str]:
        return sorted(self._resources)

    # ----- Helpers -----

    def _children(self, container_uri: str) -> list[str]:
        prefix = container_uri if container_uri.endswith("/") else f"{container_uri}/"
        children: dict[str, None] = {}
        for uri in sorted(self._resources):
            if not uri.startswith(prefix) or uri == prefix:
                continue
            rest = uri[len(prefix):]
            head, sep, _ = rest.partition("/")
            children[f"{prefix}{head}{sep}"] = None
        return list(children)
