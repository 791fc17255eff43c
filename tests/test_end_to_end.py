"""End-to-end catalog flows over the in-memory store with auditing enabled."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from podcatalog.models.audit import AuditEvent
from podcatalog.models.catalog import (
    CreateAssetInput,
    CreateDataSpaceInput,
    StringValue,
)
from podcatalog.models.common import AccessMode, AuditAction, EntityKind, Role
from podcatalog.observability.audit_log import AuditLog
from podcatalog.observability.events import AuditEventBus
from podcatalog.repositories.catalog import CatalogStore, EntityRef
from podcatalog.storage.memory import InMemoryDocumentStore

ALICE = "https://alice.example/profile/card#me"
W2 = "https://w2.example/profile/card#me"
BOB = "https://bob.example/profile/card#me"
CAROL = "https://carol.example/profile/card#me"


class TestResearchScenario:
    @pytest.mark.anyio
    async def test_research_data_space_with_one_asset(
        self, alice: CatalogStore, audit_bus: AuditEventBus,
    ) -> None:
        ds = await alice.create_data_space(
            CreateDataSpaceInput(title="Research", access_mode=AccessMode.PRIVATE),
        )
        await alice.add_member(EntityRef.data_space(ds.id), W2, Role.WRITE)
        asset = await alice.create_asset(ds.id, CreateAssetInput(title="Dataset A"))
        await alice.add_metadata(EntityRef.asset(ds.id, asset.id), "status", StringValue(value="active"))

        container = alice.resolver.container_for(ALICE, EntityKind.DATA_SPACE)
        [listed] = await alice.list_in_container(EntityKind.DATA_SPACE, container)
        assert listed.id == ds.id
        assert listed.active
        assert sorted((m.web_id, m.role) for m in listed.members) == sorted(
            [(ALICE, Role.ADMIN), (W2, Role.WRITE)]
        )

        [listed_asset] = await alice.list_assets(ds.id)
        assert listed_asset.title == "Dataset A"
        [entry] = listed_asset.metadata
        assert (entry.key, entry.value) == ("status", StringValue(value="active"))

        await audit_bus.flush()
        events = (await audit_bus.log.read_all()).events
        creates = {e.object for e in events if e.action == AuditAction.CREATE}
        assert creates == {
            f"{alice.document_uri(EntityRef.data_space(ds.id))}#{ds.id}",
            f"{alice.document_uri(EntityRef.asset(ds.id, asset.id))}#{asset.id}",
        }


class TestConcurrentMembershipEdits:
    @pytest.mark.anyio
    async def test_last_write_wins_without_hybrid(self, alice: CatalogStore, bob: CatalogStore) -> None:
        ds = await alice.create_data_space(CreateDataSpaceInput(title="Shared"))
        ref = EntityRef.data_space(ds.id, tenant_id=ALICE)
        await alice.add_member(ref, BOB, Role.ADMIN)
        await alice.add_member(ref, CAROL, Role.READ)

        await asyncio.gather(
            alice.update_member_role(ref, CAROL, Role.WRITE),
            bob.update_member_role(ref, CAROL, Role.ADMIN),
        )

        final = await alice.get(ref)
        roles = {m.web_id: m.role for m in final.members}
        assert len(final.members) == 3
        assert roles[ALICE] == Role.ADMIN
        assert roles[BOB] == Role.ADMIN
        assert roles[CAROL] in {Role.WRITE, Role.ADMIN}


class TestAuditTrail:
    @pytest.mark.anyio
    async def test_event_timestamp_within_call_bounds(
        self, alice: CatalogStore, audit_bus: AuditEventBus,
    ) -> None:
        start = datetime.now(timezone.utc)
        ds = await alice.create_data_space(CreateDataSpaceInput(title="Timed"))
        end = datetime.now(timezone.utc)
        await audit_bus.flush()

        [event] = (await audit_bus.log.read_all()).events
        assert (event.actor, event.action, event.target) == (
            ALICE, AuditAction.CREATE, alice.resolver.container_for(ALICE, EntityKind.DATA_SPACE),
        )
        assert event.object.endswith(f"#{ds.id}")
        assert start <= event.created_at <= end

    @pytest.mark.anyio
    async def test_one_malformed_among_two_well_formed(self) -> None:
        store = InMemoryDocumentStore()
        log = AuditLog(store, "http://localhost:3000/org/audit/ldes/")
        base = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
        for n in range(2):
            await log.append(AuditEvent(
                actor=ALICE,
                action=AuditAction.UPDATE,
                object=f"https://alice.example/dataspaces/ds-{n}.jsonld#ds-{n}",
                target="https://alice.example/dataspaces/",
                created_at=base + timedelta(seconds=n),
            ))
        store.put_raw("http://localhost:3000/org/audit/ldes/2026-10-19T09-00-05.000000Z.jsonld", b"not json")

        result = await log.read_all()
        assert len(result.events) == 2
        assert result.skipped == 1
