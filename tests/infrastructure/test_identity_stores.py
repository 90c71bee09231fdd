"""Contract tests shared by every identity store implementation."""
import numpy as np
import pytest

from faceauth.core.exceptions import IdentityAlreadyExistsError, IdentityNotFoundError
from faceauth.infrastructure.database import SqlAlchemyIdentityStore
from faceauth.infrastructure.storage import InMemoryIdentityStore


@pytest.fixture(params=["memory", "sqlite"])
async def identity_store(request, tmp_path):
    """Provide each identity store implementation."""
    if request.param == "memory":
        store = InMemoryIdentityStore()
    else:
        store = SqlAlchemyIdentityStore.from_url(f"sqlite+aiosqlite:///{tmp_path / 'faceauth.db'}")
        await store.initialize()
    yield store
    await store.close()


class TestIdentities:

    async def test_create_and_resolve_by_any_reference(self, identity_store):
        identity = await identity_store.create_identity(
            "alice", "alice@example.com", first_name="Alice", last_name="Liddell"
        )

        for ref in (identity.id, "alice", "alice@example.com"):
            found = await identity_store.get_identity(ref)
            assert found is not None
            assert found.id == identity.id

        assert await identity_store.get_identity("missing@example.com") is None

    async def test_duplicate_username(self, identity_store):
        await identity_store.create_identity("alice", "alice@example.com")
        with pytest.raises(IdentityAlreadyExistsError):
            await identity_store.create_identity("alice", "other@example.com")

    async def test_display_info(self, identity_store):
        await identity_store.create_identity("alice", "alice@example.com", first_name="Alice")
        info = await identity_store.resolve_display_info("alice")
        assert info.display_name == "Alice"
        assert info.handle == "alice"
        assert await identity_store.resolve_display_info("nobody") is None


class TestDescriptors:

    async def test_descriptor_round_trips_exactly(self, identity_store, make_descriptor):
        descriptor = make_descriptor()
        await identity_store.create_identity("bob", "bob@example.com", face_descriptor=descriptor)

        stored = await identity_store.get_enrolled_descriptor("bob")
        assert stored.tolist() == descriptor

    async def test_unenrolled_identity(self, identity_store):
        await identity_store.create_identity("carol", "carol@example.com")
        assert await identity_store.get_enrolled_descriptor("carol") is None

    async def test_unknown_identity(self, identity_store):
        with pytest.raises(IdentityNotFoundError):
            await identity_store.get_enrolled_descriptor("ghost")

    async def test_population_excludes_unenrolled(self, identity_store, make_descriptor):
        enrolled = await identity_store.create_identity(
            "dan", "dan@example.com", face_descriptor=make_descriptor()
        )
        await identity_store.create_identity("erin", "erin@example.com")

        population = await identity_store.list_population()

        assert [candidate.identity_id for candidate in population] == [enrolled.id]
        assert len(await identity_store.list_identities()) == 2

    async def test_set_enrolled_descriptor(self, identity_store, make_descriptor):
        await identity_store.create_identity("fay", "fay@example.com")
        descriptor = make_descriptor()

        updated = await identity_store.set_enrolled_descriptor("fay", np.array(descriptor))

        assert updated.is_enrolled
        assert (await identity_store.get_enrolled_descriptor("fay")).tolist() == descriptor

    async def test_enroll_if_absent_keeps_first_descriptor(self, identity_store, make_descriptor):
        await identity_store.create_identity("hal", "hal@example.com")
        first, second = make_descriptor(), make_descriptor()

        assert await identity_store.set_enrolled_descriptor_if_absent("hal", np.array(first)) is True
        assert await identity_store.set_enrolled_descriptor_if_absent("hal", np.array(second)) is False
        assert (await identity_store.get_enrolled_descriptor("hal")).tolist() == first

    async def test_enroll_if_absent_unknown_identity(self, identity_store, make_descriptor):
        with pytest.raises(IdentityNotFoundError):
            await identity_store.set_enrolled_descriptor_if_absent(
                "ghost", np.array(make_descriptor())
            )

    async def test_face_samples_append(self, identity_store, make_descriptor):
        identity = await identity_store.create_identity("gus", "gus@example.com")
        first, second = make_descriptor(), make_descriptor()

        await identity_store.add_face_sample(identity.id, np.array(first))
        await identity_store.add_face_sample("gus", np.array(second))

        samples = await identity_store.list_face_samples("gus@example.com")
        assert [sample.descriptor.tolist() for sample in samples] == [first, second]
        assert all(sample.identity_id == identity.id for sample in samples)

    async def test_face_sample_for_unknown_identity(self, identity_store, make_descriptor):
        with pytest.raises(IdentityNotFoundError):
            await identity_store.add_face_sample("ghost", np.array(make_descriptor()))
