"""Tests for InMemoryDocumentStore."""

import pytest

from podcatalog.errors import NotFoundError, ParseError
from podcatalog.models.document import Document, Term, Thing
from podcatalog.storage.base import DocumentStore
from podcatalog.storage.memory import InMemoryDocumentStore

ROOT = "https://alice.example/dataspaces/"


def _doc(uri: str, title: str = "x") -> Document:
    thing = Thing(iri=f"{uri}#a")
    thing.set("http://purl.org/dc/terms/title", [Term.literal(title)])
    return Document(uri=uri, things=[thing])


class TestInMemoryDocumentStore:
    def test_is_document_store(self) -> None:
        assert isinstance(InMemoryDocumentStore(), DocumentStore)

    @pytest.mark.anyio
    async def test_put_then_get(self) -> None:
        store = InMemoryDocumentStore()
        await store.put(f"{ROOT}ds-1.jsonld", _doc(f"{ROOT}ds-1.jsonld", "Research"))
        doc = await store.get(f"{ROOT}ds-1.jsonld")
        assert doc == _doc(f"{ROOT}ds-1.jsonld", "Research")

    @pytest.mark.anyio
    async def test_get_missing_raises(self) -> None:
        with pytest.raises(NotFoundError):
            await InMemoryDocumentStore().get(f"{ROOT}nope.jsonld")

    @pytest.mark.anyio
    async def test_stored_copy_is_isolated(self) -> None:
        store = InMemoryDocumentStore()
        doc = _doc(f"{ROOT}ds-1.jsonld")
        await store.put(doc.uri, doc)
        doc.things.clear()
        assert len((await store.get(doc.uri)).things) == 1

    @pytest.mark.anyio
    async def test_delete(self) -> None:
        store = InMemoryDocumentStore()
        await store.put(f"{ROOT}ds-1.jsonld", _doc(f"{ROOT}ds-1.jsonld"))
        await store.delete(f"{ROOT}ds-1.jsonld")
        assert not store.contains(f"{ROOT}ds-1.jsonld")
        with pytest.raises(NotFoundError):
            await store.delete(f"{ROOT}ds-1.jsonld")

    @pytest.mark.anyio
    async def test_list_direct_children_and_subcontainers(self) -> None:
        store = InMemoryDocumentStore()
        for uri in (f"{ROOT}ds-1.jsonld", f"{ROOT}ds-2.jsonld", f"{ROOT}ds-1/assets/asset-1.jsonld"):
            await store.put(uri, _doc(uri))
        assert await store.list(ROOT) == [f"{ROOT}ds-1.jsonld", f"{ROOT}ds-1/", f"{ROOT}ds-2.jsonld"]

    @pytest.mark.anyio
    async def test_list_missing_container_raises(self) -> None:
        with pytest.raises(NotFoundError):
            await InMemoryDocumentStore().list(ROOT)

    @pytest.mark.anyio
    async def test_put_raw_surfaces_parse_error(self) -> None:
        store = InMemoryDocumentStore()
        store.put_raw(f"{ROOT}broken.jsonld", "{ not json")
        with pytest.raises(ParseError):
            await store.get(f"{ROOT}broken.jsonld")

    @pytest.mark.anyio
    async def test_read_raw_container_lists_members(self) -> None:
        store = InMemoryDocumentStore()
        await store.put(f"{ROOT}ds-1.jsonld", _doc(f"{ROOT}ds-1.jsonld"))
        raw = await store.read_raw(ROOT)
        assert f"{ROOT}ds-1.jsonld" in raw
