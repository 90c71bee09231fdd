"""Tests for single-identity face authentication."""
import math
from typing import Optional

import pytest

from faceauth.core.exceptions import (
    DimensionMismatchError,
    IdentityNotFoundError,
    NoEnrolledDescriptorError,
)
from faceauth.domain.entities.identity import Identity
from faceauth.infrastructure.storage import InMemoryIdentityStore
from faceauth.services.authentication import AuthenticationService


class TestDecide:

    def test_self_match_authenticates(self, authentication, make_descriptor):
        """Should authenticate a descriptor against itself."""
        d = make_descriptor()
        outcome = authentication.decide(d, d, 0.6)
        assert outcome.authenticated is True
        assert outcome.distance == 0.0
        assert outcome.similarity == 1.0

    def test_unit_distance_is_rejected(self, authentication):
        """Should reject a probe at distance 1.0 with the 0.6 threshold."""
        outcome = authentication.decide([0, 0, 0], [1, 0, 0], 0.6)
        assert outcome.authenticated is False
        assert outcome.distance == 1.0
        assert outcome.similarity == pytest.approx(math.exp(-1.0))
        assert outcome.threshold == 0.6

    def test_threshold_is_exclusive(self, authentication):
        assert authentication.decide([0.0], [0.5], 0.5).authenticated is False
        assert authentication.decide([0.0], [0.5], 0.51).authenticated is True

    def test_default_threshold(self, authentication):
        assert authentication.decide([0.0], [0.59]).authenticated is True
        assert authentication.decide([0.0], [0.6]).threshold == 0.6

    def test_missing_enrollment(self, authentication, make_descriptor):
        with pytest.raises(NoEnrolledDescriptorError):
            authentication.decide(None, make_descriptor())

    def test_dimension_mismatch(self, authentication, make_descriptor):
        with pytest.raises(DimensionMismatchError):
            authentication.decide(make_descriptor(128), make_descriptor(64))


class TestAuthenticate:

    async def test_authenticates_enrolled_identity(self, store, authentication, make_descriptor):
        enrolled = make_descriptor()
        await store.create_identity("alice", "alice@example.com", face_descriptor=enrolled)

        outcome = await authentication.authenticate("alice@example.com", enrolled)
        assert outcome.authenticated is True

    async def test_resolves_username_and_id(self, store, authentication, make_descriptor):
        enrolled = make_descriptor()
        identity = await store.create_identity("alice", "alice@example.com", face_descriptor=enrolled)

        assert (await authentication.authenticate("alice", enrolled)).authenticated
        assert (await authentication.authenticate(identity.id, enrolled)).authenticated

    async def test_rejects_distant_probe(self, store, authentication):
        await store.create_identity("bob", "bob@example.com", face_descriptor=[0.0, 0.0, 0.0])
        outcome = await authentication.authenticate("bob", [1.0, 0.0, 0.0])
        assert outcome.authenticated is False

    async def test_password_only_identity(self, store, authentication, make_descriptor):
        await store.create_identity("carol", "carol@example.com")
        with pytest.raises(NoEnrolledDescriptorError):
            await authentication.authenticate("carol", make_descriptor())

    async def test_unknown_identity(self, authentication, make_descriptor):
        with pytest.raises(IdentityNotFoundError):
            await authentication.authenticate("nobody@example.com", make_descriptor())


class CountingStore(InMemoryIdentityStore):
    """Store that counts identity lookups."""

    def __init__(self) -> None:
        super().__init__()
        self.lookups = 0

    async def get_identity(self, identity_ref: str) -> Optional[Identity]:
        self.lookups += 1
        return await super().get_identity(identity_ref)


class TestAuthenticateIdentity:

    async def test_returns_resolved_identity_from_one_lookup(self, make_descriptor):
        store = CountingStore()
        enrolled = make_descriptor()
        created = await store.create_identity("alice", "alice@example.com", face_descriptor=enrolled)
        service = AuthenticationService(store, threshold=0.6)

        identity, outcome = await service.authenticate_identity("alice", enrolled)

        assert identity.id == created.id
        assert outcome.authenticated is True
        assert store.lookups == 1

    async def test_unknown_identity(self, authentication, make_descriptor):
        with pytest.raises(IdentityNotFoundError):
            await authentication.authenticate_identity("ghost", make_descriptor())
