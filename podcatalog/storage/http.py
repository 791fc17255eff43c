"""HTTP document store for pods exposing LDP containers.

Documents are exchanged as JSON-LD. Container listings are read from the
``ldp:contains`` triples of the container's own representation. The caller
credential is a bearer token attached to every request; acquiring it is the
job of the external authentication layer.
"""

from __future__ import annotations

import json
import logging
from urllib.parse import urljoin

import httpx

from podcatalog.codec.vocab import LDP
from podcatalog.config.settings import Settings
from podcatalog.errors import NotFoundError, ReadError, WriteError
from podcatalog.models.document import JSONLD_MEDIA_TYPE, Document
from podcatalog.storage.base import DocumentStore

logger = logging.getLogger(__name__)

_CONTAINS_KEYS = (LDP.contains, "ldp:contains", "contains")


class HttpDocumentStore(DocumentStore):
    """``DocumentStore`` over plain HTTP GET / PUT / DELETE.

    The ``httpx.AsyncClient`` can be injected (tests use ``MockTransport``);
    otherwise one is created with the configured timeout and owned by the
    store.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        access_token: str = "",
        timeout: float = 30.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._headers: dict[str, str] = {}
        if access_token:
            self._headers["Authorization"] = f"Bearer {access_token}"

    @classmethod
    def from_settings(cls, settings: Settings) -> HttpDocumentStore:
        return cls(access_token=settings.STORE_ACCESS_TOKEN, timeout=settings.STORE_TIMEOUT_SECONDS)

    async def get(self, uri: str) -> Document:
        resp = await self._send("GET", uri, headers={"Accept": JSONLD_MEDIA_TYPE})
        doc = Document.from_bytes(resp.content, uri=uri)
        doc.uri = uri
        return doc

    async def put(self, uri: str, doc: Document) -> None:
        body = doc.model_copy(deep=True)
        body.uri = uri
        try:
            resp = await self._client.put(
                uri,
                content=body.to_bytes(),
                headers={**self._headers, "Content-Type": JSONLD_MEDIA_TYPE},
            )
        except httpx.HTTPError as exc:
            msg = f"PUT {uri} failed: {exc}"
            raise WriteError(msg, uri=uri) from exc
        if resp.is_error:
            msg = f"PUT {uri} rejected with HTTP {resp.status_code}."
            raise WriteError(msg, uri=uri)

    async def delete(self, uri: str) -> None:
        try:
            resp = await self._client.delete(uri, headers=self._headers)
        except httpx.HTTPError as exc:
            msg = f"DELETE {uri} failed: {exc}"
            raise WriteError(msg, uri=uri) from exc
        if resp.status_code == 404:
            msg = f"No document at {uri}."
            raise NotFoundError(msg, uri=uri)
        if resp.is_error:
            msg = f"DELETE {uri} rejected with HTTP {resp.status_code}."
            raise WriteError(msg, uri=uri)

    async def list(self, container_uri: str) -> list[str]:
        resp = await self._send("GET", container_uri, headers={"Accept": JSONLD_MEDIA_TYPE})
        try:
            payload = json.loads(resp.content)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            msg = f"Container listing at {container_uri} is not JSON-LD: {exc}"
            raise ReadError(msg, uri=container_uri) from exc
        return _contained_uris(payload, container_uri)

    async def read_raw(self, uri: str) -> str:
        resp = await self._send("GET", uri)
        return resp.text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _send(self, method: str, uri: str, headers: dict[str, str] | None = None) -> httpx.Response:
        try:
            resp = await self._client.request(method, uri, headers={**self._headers, **(headers or {})})
        except httpx.HTTPError as exc:
            msg = f"{method} {uri} failed: {exc}"
            raise ReadError(msg, uri=uri) from exc
        if resp.status_code == 404:
            msg = f"No resource at {uri}."
            raise NotFoundError(msg, uri=uri)
        if resp.is_error:
            msg = f"{method} {uri} failed with HTTP {resp.status_code}."
            raise ReadError(msg, uri=uri)
        return resp


def _contained_uris(payload: object, container_uri: str) -> list[str]:
    """Collect ``ldp:contains`` targets from a (compacted or expanded) listing."""
    if isinstance(payload, dict):
        nodes = payload.get("@graph", [payload])
    elif isinstance(payload, list):
        nodes = payload
    else:
        return []

    found: dict[str, None] = {}
    for node in nodes:
        if not isinstance(node, dict):
            continue
        for key in _CONTAINS_KEYS:
            raw = node.get(key)
            if raw is None:
                continue
            for item in raw if isinstance(raw, list) else [raw]:
                ref = item.get("@id") if isinstance(item, dict) else item
                if isinstance(ref, str) and ref:
                    found[urljoin(container_uri, ref)] = None
    logger.debug("Container %s lists %d resources", container_uri, len(found))
    return list(found)
