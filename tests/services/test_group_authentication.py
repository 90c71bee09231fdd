"""Tests for group (quorum) authentication."""
import pytest

from faceauth.core.exceptions import DimensionMismatchError, EmptyGroupError
from faceauth.services.group_authentication import (
    NO_ENROLLMENT_ERROR,
    NO_IDENTITY_ERROR,
    GroupAuthenticationService,
)


@pytest.fixture
def group_service(store, authentication):
    return GroupAuthenticationService(store, authentication)


@pytest.fixture
async def enrolled_trio(store):
    """Three enrolled identities with well-separated descriptors."""
    descriptors = {
        "ann": [0.0, 0.0, 0.0],
        "ben": [1.0, 1.0, 1.0],
        "cat": [2.0, 2.0, 2.0],
    }
    for name, descriptor in descriptors.items():
        await store.create_identity(
            name, f"{name}@example.com", first_name=name.title(), last_name="Doe",
            face_descriptor=descriptor,
        )
    return descriptors


class TestQuorum:

    async def test_two_of_three_meets_quorum_of_two(self, group_service, enrolled_trio):
        """Should authenticate the group when exactly the quorum passes."""
        members = [
            ("ann@example.com", enrolled_trio["ann"]),
            ("ben@example.com", [5.0, 5.0, 5.0]),
            ("cat@example.com", enrolled_trio["cat"]),
        ]
        result = await group_service.authenticate_group(members, required_count=2)

        assert result.group_authenticated is True
        assert result.authenticated_count == 2
        assert result.required_count == 2
        assert result.total_members == 3
        assert [m.identity for m in result.members] == [ref for ref, _ in members]
        assert [m.authenticated for m in result.members] == [True, False, True]

    async def test_default_quorum_is_unanimous(self, group_service, enrolled_trio):
        members = [
            ("ann", enrolled_trio["ann"]),
            ("ben", enrolled_trio["ben"]),
            ("cat", [9.0, 9.0, 9.0]),
        ]
        result = await group_service.authenticate_group(members)
        assert result.required_count == 3
        assert result.authenticated_count == 2
        assert result.group_authenticated is False

    async def test_member_report_carries_display_info(self, group_service, enrolled_trio):
        result = await group_service.authenticate_group([("ann", enrolled_trio["ann"])])
        member = result.members[0]
        assert member.handle == "ann"
        assert member.display_name == "Ann Doe"
        assert member.distance == 0.0
        assert member.similarity == 1.0
        assert member.error is None


class TestSoftFailures:

    async def test_unknown_and_unenrolled_members_do_not_abort(
        self, store, group_service, enrolled_trio
    ):
        """Should report per-member failures and still evaluate everyone."""
        await store.create_identity("dan", "dan@example.com")
        members = [
            ("ghost@example.com", [0.0, 0.0, 0.0]),
            ("dan", [0.0, 0.0, 0.0]),
            ("ann", enrolled_trio["ann"]),
        ]
        result = await group_service.authenticate_group(members, required_count=1)

        ghost, dan, ann = result.members
        assert ghost.authenticated is False and ghost.error == NO_IDENTITY_ERROR
        assert dan.authenticated is False and dan.error == NO_ENROLLMENT_ERROR
        assert dan.handle == "dan"
        assert ann.authenticated is True
        assert result.authenticated_count == 1
        assert result.group_authenticated is True


class TestStructuralErrors:

    async def test_empty_group(self, group_service):
        with pytest.raises(EmptyGroupError):
            await group_service.authenticate_group([])

    async def test_non_positive_quorum(self, group_service, enrolled_trio):
        with pytest.raises(ValueError):
            await group_service.authenticate_group([("ann", enrolled_trio["ann"])], required_count=0)

    async def test_dimension_mismatch_aborts(self, group_service, enrolled_trio):
        with pytest.raises(DimensionMismatchError):
            await group_service.authenticate_group([("ann", [0.0, 0.0])])
