"""Tests for identity registration and face sample enrollment."""
import asyncio
from typing import Optional

import numpy as np
import pytest

from faceauth.core.exceptions import (
    DimensionMismatchError,
    IdentityAlreadyExistsError,
    IdentityNotFoundError,
)
from faceauth.domain.entities.identity import Identity
from faceauth.infrastructure.storage import InMemoryIdentityStore
from faceauth.services.enrollment import EnrollmentService


class YieldingStore(InMemoryIdentityStore):
    """Store that yields to the event loop on every lookup."""

    async def get_identity(self, identity_ref: str) -> Optional[Identity]:
        await asyncio.sleep(0)
        return await super().get_identity(identity_ref)


@pytest.fixture
def enrollment(store):
    return EnrollmentService(store)


class TestRegister:

    async def test_register_with_descriptor(self, store, enrollment, make_descriptor):
        """Should enroll the descriptor and record it as the first sample."""
        descriptor = make_descriptor()
        identity = await enrollment.register("alice", "alice@example.com", descriptor=descriptor)

        assert identity.is_enrolled
        np.testing.assert_array_equal(identity.face_descriptor, descriptor)
        samples = await store.list_face_samples(identity.id)
        assert len(samples) == 1

    async def test_register_password_only(self, store, enrollment):
        identity = await enrollment.register("bob", "bob@example.com", "Bob", "Stone")
        assert not identity.is_enrolled
        assert identity.display_info.display_name == "Bob Stone"
        assert await store.list_face_samples(identity.id) == []

    async def test_duplicate_email(self, enrollment):
        await enrollment.register("alice", "alice@example.com")
        with pytest.raises(IdentityAlreadyExistsError):
            await enrollment.register("alice2", "alice@example.com")

    async def test_expected_dimension(self, store, make_descriptor):
        service = EnrollmentService(store, expected_dimension=128)
        with pytest.raises(DimensionMismatchError):
            await service.register("eve", "eve@example.com", descriptor=make_descriptor(64))
        assert await store.list_identities() == []


class TestAddFaceSample:

    async def test_first_sample_becomes_canonical(self, store, enrollment, make_descriptor):
        identity = await enrollment.register("carol", "carol@example.com")
        first, second = make_descriptor(), make_descriptor()

        await enrollment.add_face_sample("carol", first)
        await enrollment.add_face_sample("carol@example.com", second)

        stored = await store.get_enrolled_descriptor(identity.id)
        np.testing.assert_array_equal(stored, first)
        assert len(await store.list_face_samples(identity.id)) == 2

    async def test_concurrent_first_samples_keep_the_first(self, make_descriptor):
        """Should enroll the first of two concurrent samples as canonical."""
        store = YieldingStore()
        service = EnrollmentService(store)
        identity = await service.register("dave", "dave@example.com")
        first, second = make_descriptor(), make_descriptor()

        await asyncio.gather(
            service.add_face_sample("dave", first),
            service.add_face_sample("dave", second),
        )

        np.testing.assert_array_equal(await store.get_enrolled_descriptor(identity.id), first)
        assert len(await store.list_face_samples(identity.id)) == 2

    async def test_unknown_identity(self, enrollment, make_descriptor):
        with pytest.raises(IdentityNotFoundError):
            await enrollment.add_face_sample("ghost", make_descriptor())


class TestStatistics:

    async def test_statistics(self, enrollment, make_descriptor):
        await enrollment.register("a", "a@example.com", descriptor=make_descriptor())
        await enrollment.register("b", "b@example.com")
        await enrollment.add_face_sample("a", make_descriptor())

        stats = await enrollment.get_statistics()

        assert stats.total_identities == 2
        assert stats.with_face_auth == 1
        assert stats.without_face_auth == 1
        assert stats.percent_with_face_auth == 50.0
        assert stats.total_face_samples == 2
        assert stats.average_samples_per_identity == 1.0

    async def test_empty_statistics(self, enrollment):
        stats = await enrollment.get_statistics()
        assert stats.total_identities == 0
        assert stats.percent_with_face_auth == 0.0
        assert stats.average_samples_per_identity == 0.0
