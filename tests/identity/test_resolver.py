"""Tests for the identity & container resolver."""

import pytest

from podcatalog.errors import NotAuthenticatedError, UnresolvedIdentityError
from podcatalog.identity.resolver import (
    ContainerResolver,
    StaticIdentityProvider,
    pod_root,
    require_identity,
)
from podcatalog.models.common import EntityKind

ALICE = "https://alice.example/profile/card#me"


class TestPodRoot:
    def test_profile_webid(self) -> None:
        assert pod_root(ALICE) == "https://alice.example"

    def test_nested_pod(self) -> None:
        assert pod_root("https://host.example/alice/profile/card#me") == "https://host.example/alice"

    def test_webid_without_profile(self) -> None:
        assert pod_root("https://bob.example/#i") == "https://bob.example"


class TestContainerResolver:
    def test_data_space_container(self) -> None:
        r = ContainerResolver()
        assert r.container_for(ALICE, EntityKind.DATA_SPACE) == "https://alice.example/dataspaces/"

    def test_data_space_document(self) -> None:
        r = ContainerResolver()
        uri = r.document_for(ALICE, EntityKind.DATA_SPACE, "ds-1")
        assert uri == "https://alice.example/dataspaces/ds-1.jsonld"

    def test_asset_document(self) -> None:
        r = ContainerResolver(".ttl")
        uri = r.document_for(ALICE, EntityKind.ASSET, "asset-9", parent_id="ds-1")
        assert uri == "https://alice.example/dataspaces/ds-1/assets/asset-9.ttl"

    def test_asset_container_requires_parent(self) -> None:
        with pytest.raises(ValueError):
            ContainerResolver().container_for(ALICE, EntityKind.ASSET)

    def test_attachment_locations(self) -> None:
        r = ContainerResolver()
        assert r.attachment_index_for(ALICE, "ds-1") == "https://alice.example/dataspaces/ds-1/index.jsonld"
        assert r.attachment_container_for(ALICE, "ds-1") == "https://alice.example/dataspaces/ds-1/data/"

    def test_notifications_document(self) -> None:
        assert ContainerResolver(".ttl").notifications_for(ALICE) == "https://alice.example/notifications.ttl"

    def test_deterministic_across_instances(self) -> None:
        a = ContainerResolver().document_for(ALICE, EntityKind.DATA_SPACE, "ds-1")
        b = ContainerResolver().document_for(ALICE, EntityKind.DATA_SPACE, "ds-1")
        assert a == b

    @pytest.mark.parametrize("tenant", [None, ""])
    def test_missing_tenant_raises(self, tenant) -> None:
        with pytest.raises(UnresolvedIdentityError):
            ContainerResolver().container_for(tenant, EntityKind.DATA_SPACE)

    def test_unresolved_is_not_authenticated(self) -> None:
        assert issubclass(UnresolvedIdentityError, NotAuthenticatedError)

    def test_entity_id_from_uri(self) -> None:
        r = ContainerResolver()
        assert r.entity_id_from_uri("https://alice.example/dataspaces/ds-1.jsonld") == "ds-1"


class TestIdentity:
    def test_static_identity(self) -> None:
        assert require_identity(StaticIdentityProvider(ALICE)) == ALICE

    @pytest.mark.parametrize("web_id", [None, ""])
    def test_no_identity_raises(self, web_id) -> None:
        with pytest.raises(NotAuthenticatedError):
            require_identity(StaticIdentityProvider(web_id))
