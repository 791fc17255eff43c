"""Tests for HttpDocumentStore against an httpx.MockTransport pod."""

import json

import httpx
import pytest

from podcatalog.codec.vocab import LDP
from podcatalog.errors import NotFoundError, ParseError, ReadError, WriteError
from podcatalog.models.document import JSONLD_MEDIA_TYPE, Document, Term, Thing
from podcatalog.storage.http import HttpDocumentStore

ROOT = "https://alice.example/dataspaces/"
DOC_URI = f"{ROOT}ds-1.jsonld"


def _doc() -> Document:
    thing = Thing(iri=f"{DOC_URI}#ds-1")
    thing.set("http://purl.org/dc/terms/title", [Term.literal("Research")])
    return Document(uri=DOC_URI, things=[thing])


class FakePod:
    """Minimal LDP-ish server: dict of resources, records requests."""

    def __init__(self) -> None:
        self.resources: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with)
        url = str(request.url)
        if request.method == "PUT":
            self.resources[url] = request.content
            return httpx.Response(201)
        if request.method == "DELETE":
            if self.resources.pop(url, None) is None:
                return httpx.Response(404)
            return httpx.Response(205)
        if url.endswith("/"):
            children = sorted(u for u in self.resources if u.startswith(url))
            if not children:
                return httpx.Response(404)
            listing = {"@id": url, LDP.contains: [{"@id": u[len(url):]} for u in children]}
            return httpx.Response(200, json=listing)
        if url not in self.resources:
            return httpx.Response(404)
        return httpx.Response(200, content=self.resources[url], headers={"Content-Type": JSONLD_MEDIA_TYPE})


@pytest.fixture
def pod() -> FakePod:
    return FakePod()


@pytest.fixture
async def http_store(pod: FakePod):
    client = httpx.AsyncClient(transport=httpx.MockTransport(pod.handler))
    store = HttpDocumentStore(client, access_token="secret-token")
    yield store
    await client.aclose()


class TestHttpDocumentStore:
    @pytest.mark.anyio
    async def test_put_and_get(self, http_store: HttpDocumentStore, pod: FakePod) -> None:
        await http_store.put(DOC_URI, _doc())
        assert pod.requests[-1].headers["Content-Type"] == JSONLD_MEDIA_TYPE
        assert await http_store.get(DOC_URI) == _doc()

    @pytest.mark.anyio
    async def test_bearer_token_sent(self, http_store: HttpDocumentStore, pod: FakePod) -> None:
        await http_store.put(DOC_URI, _doc())
        await http_store.get(DOC_URI)
        assert all(r.headers["Authorization"] == "Bearer secret-token" for r in pod.requests)

    @pytest.mark.anyio
    async def test_get_missing_is_not_found(self, http_store: HttpDocumentStore) -> None:
        with pytest.raises(NotFoundError):
            await http_store.get(DOC_URI)

    @pytest.mark.anyio
    async def test_get_server_error_is_read_error(self, http_store: HttpDocumentStore, pod: FakePod) -> None:
        pod.fail_with = 500
        with pytest.raises(ReadError):
            await http_store.get(DOC_URI)

    @pytest.mark.anyio
    async def test_get_malformed_is_parse_error(self, http_store: HttpDocumentStore, pod: FakePod) -> None:
        pod.resources[DOC_URI] = b"<html>not json-ld</html>"
        with pytest.raises(ParseError):
            await http_store.get(DOC_URI)

    @pytest.mark.anyio
    async def test_put_rejected_is_write_error(self, http_store: HttpDocumentStore, pod: FakePod) -> None:
        pod.fail_with = 403
        with pytest.raises(WriteError):
            await http_store.put(DOC_URI, _doc())

    @pytest.mark.anyio
    async def test_delete(self, http_store: HttpDocumentStore, pod: FakePod) -> None:
        await http_store.put(DOC_URI, _doc())
        await http_store.delete(DOC_URI)
        assert DOC_URI not in pod.resources
        with pytest.raises(NotFoundError):
            await http_store.delete(DOC_URI)

    @pytest.mark.anyio
    async def test_list_resolves_relative_children(self, http_store: HttpDocumentStore) -> None:
        await http_store.put(DOC_URI, _doc())
        await http_store.put(f"{ROOT}ds-2.jsonld", _doc())
        assert await http_store.list(ROOT) == [DOC_URI, f"{ROOT}ds-2.jsonld"]

    @pytest.mark.anyio
    async def test_list_missing_container(self, http_store: HttpDocumentStore) -> None:
        with pytest.raises(NotFoundError):
            await http_store.list(ROOT)

    @pytest.mark.anyio
    async def test_list_compacted_contains(self, pod: FakePod) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            body = {"@context": {"ldp": "http://www.w3.org/ns/ldp#"}, "@graph": [
                {"@id": ROOT, "ldp:contains": [{"@id": "ds-1.jsonld"}, {"@id": "ds-2.jsonld"}]},
            ]}
            return httpx.Response(200, content=json.dumps(body).encode())

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            store = HttpDocumentStore(client)
            assert await store.list(ROOT) == [DOC_URI, f"{ROOT}ds-2.jsonld"]

    @pytest.mark.anyio
    async def test_transport_error_on_put_is_write_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("pod unreachable", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(WriteError):
                await HttpDocumentStore(client).put(DOC_URI, _doc())
