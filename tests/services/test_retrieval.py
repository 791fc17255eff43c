"""Tests for the retrieval service and manifest generation."""

import json
from datetime import datetime, timezone

import pytest

from podcatalog.errors import ReadError
from podcatalog.identity.resolver import ContainerResolver, StaticIdentityProvider
from podcatalog.models.catalog import CreateAssetInput, CreateDataSpaceInput, StringValue
from podcatalog.repositories.catalog import CatalogStore, EntityRef
from podcatalog.services.retrieval import RetrievalService, RetrievedAsset, generate_manifest
from podcatalog.storage.memory import InMemoryDocumentStore

ALICE = "https://alice.example/profile/card#me"


class FlakyStore(InMemoryDocumentStore):
    """Fails listing of any container whose URI contains a marker."""

    def __init__(self) -> None:
        super().__init__()
        self.broken: set[str] = set()

    async def list(self, container_uri: str) -> list[str]:
        if any(marker in container_uri for marker in self.broken):
            msg = "503 Service Unavailable"
            raise ReadError(msg, uri=container_uri)
        return await super().list(container_uri)


@pytest.fixture
def flaky() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def catalog(flaky: FlakyStore, resolver: ContainerResolver) -> CatalogStore:
    return CatalogStore(flaky, resolver, StaticIdentityProvider(ALICE))


class TestRetrieveAll:
    @pytest.mark.anyio
    async def test_flattens_assets_across_data_spaces(self, catalog: CatalogStore) -> None:
        one = await catalog.create_data_space(CreateDataSpaceInput(title="One"))
        two = await catalog.create_data_space(CreateDataSpaceInput(title="Two"))
        a = await catalog.create_asset(one.id, CreateAssetInput(title="A", tags=["t"]))
        b = await catalog.create_asset(two.id, CreateAssetInput(title="B"))
        await catalog.add_metadata(EntityRef.asset(one.id, a.id), "status", StringValue(value="active"))

        result = await RetrievalService(catalog).retrieve_all()
        assert result.success
        assert result.errors == []
        assert result.total_assets == 2
        by_id = {r.id: r for r in result.assets}
        assert by_id[a.id].data_space_name == "One"
        assert by_id[a.id].metadata_count == 1
        assert by_id[a.id].tags == ["t"]
        assert by_id[b.id].document_uri == (
            f"https://alice.example/dataspaces/{two.id}/assets/{b.id}.jsonld"
        )

    @pytest.mark.anyio
    async def test_sorted_newest_first(self, catalog: CatalogStore) -> None:
        ds = await catalog.create_data_space(CreateDataSpaceInput(title="One"))
        for title in ("A", "B", "C"):
            await catalog.create_asset(ds.id, CreateAssetInput(title=title))
        result = await RetrievalService(catalog).retrieve_all()
        stamps = [r.uploaded_at for r in result.assets]
        assert stamps == sorted(stamps, reverse=True)

    @pytest.mark.anyio
    async def test_limit(self, catalog: CatalogStore) -> None:
        ds = await catalog.create_data_space(CreateDataSpaceInput(title="One"))
        for title in ("A", "B", "C"):
            await catalog.create_asset(ds.id, CreateAssetInput(title=title))

        assert (await RetrievalService(catalog).retrieve_all(limit=2)).total_assets == 2
        assert (await RetrievalService(catalog, default_limit=1).retrieve_all()).total_assets == 1
        assert (await RetrievalService(catalog, default_limit=1).retrieve_all(limit=0)).total_assets == 3

    @pytest.mark.anyio
    async def test_partial_failure_is_reported(self, catalog: CatalogStore, flaky: FlakyStore) -> None:
        good = await catalog.create_data_space(CreateDataSpaceInput(title="Good"))
        bad = await catalog.create_data_space(CreateDataSpaceInput(title="Bad"))
        asset = await catalog.create_asset(good.id, CreateAssetInput(title="A"))
        await catalog.create_asset(bad.id, CreateAssetInput(title="B"))
        flaky.broken.add(f"{bad.id}/assets/")

        result = await RetrievalService(catalog).retrieve_all()
        assert result.success
        assert [r.id for r in result.assets] == [asset.id]
        [error] = result.errors
        assert error.startswith("Failed to retrieve assets from Bad:")

    @pytest.mark.anyio
    async def test_total_failure_is_reported(self, catalog: CatalogStore, flaky: FlakyStore) -> None:
        await catalog.create_data_space(CreateDataSpaceInput(title="One"))
        flaky.broken.add("/dataspaces/")

        result = await RetrievalService(catalog).retrieve_all()
        assert not result.success
        assert result.total_assets == 0
        assert result.errors[0].startswith("Asset retrieval failed:")

    @pytest.mark.anyio
    async def test_empty_pod(self, catalog: CatalogStore) -> None:
        result = await RetrievalService(catalog).retrieve_all()
        assert result.success
        assert result.assets == []


class TestManifest:
    def test_manifest_shape(self) -> None:
        uploaded = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)
        asset = RetrievedAsset(
            id="asset-1",
            title="Dataset A",
            data_space_id="ds-1",
            data_space_name="Research",
            uploaded_at=uploaded,
            document_uri="https://alice.example/dataspaces/ds-1/assets/asset-1.jsonld",
            tags=["x"],
        )
        payload = json.loads(generate_manifest([asset], retrieved_at=uploaded))

        assert payload["retrievedAt"] == uploaded.isoformat()
        assert payload["totalAssets"] == 1
        assert payload["assets"][0] == {
            "id": "asset-1",
            "title": "Dataset A",
            "description": "",
            "category": None,
            "tags": ["x"],
            "dataSpace": "Research",
            "dataSpaceId": "ds-1",
            "uploadedAt": uploaded.isoformat(),
            "documentUri": "https://alice.example/dataspaces/ds-1/assets/asset-1.jsonld",
        }

    def test_empty_manifest(self) -> None:
        payload = json.loads(generate_manifest([]))
        assert payload["totalAssets"] == 0
        assert payload["assets"] == []
