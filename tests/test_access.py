"""Workspace access gate tests: personal vs shared ownership, 404 vs 403."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from taskhub.models import ROLE_ADMIN, ROLE_MEMBER
from taskhub.services.access import (
    PersonalOwner,
    SharedWorkspace,
    is_personal_workspace_of,
    personal_workspace_id,
    require_admin,
    require_member,
    resolve_owner,
)
from taskhub.services.errors import ForbiddenError, NotFoundError
from tests.helpers import make_workspace
from tests.test_constants import TEST_ADMIN_ID, TEST_MEMBER_ID, TEST_OUTSIDER_ID


class TestResolveOwner:
    def test_personal_prefix_maps_to_personal_owner(self):
        assert resolve_owner("user_abc") == PersonalOwner(user_id="abc")

    def test_other_ids_map_to_shared_workspace(self):
        assert resolve_owner("org_123") == SharedWorkspace(workspace_id="org_123")

    def test_bare_prefix_is_not_personal(self):
        assert resolve_owner("user_") == SharedWorkspace(workspace_id="user_")

    def test_personal_workspace_id_round_trips_through_resolver(self):
        assert is_personal_workspace_of(personal_workspace_id("abc"), "abc") is True
        assert is_personal_workspace_of(personal_workspace_id("abc"), "xyz") is False


class TestRequireMember:
    def test_own_personal_workspace_passes_without_membership_row(self, db: Session):
        access = require_member(db, personal_workspace_id("solo"), "solo")
        assert access.role == ROLE_ADMIN
        assert access.membership is None
        assert access.is_admin is True

    def test_member_passes_with_role(self, db: Session):
        make_workspace(db, "org_1", TEST_ADMIN_ID, members=(TEST_MEMBER_ID,))
        access = require_member(db, "org_1", TEST_MEMBER_ID)
        assert access.role == ROLE_MEMBER
        assert access.membership is not None

    def test_outsider_gets_not_found(self, db: Session):
        make_workspace(db, "org_1", TEST_ADMIN_ID)
        with pytest.raises(NotFoundError):
            require_member(db, "org_1", TEST_OUTSIDER_ID)

    def test_missing_workspace_is_indistinguishable_from_hidden(self, db: Session):
        with pytest.raises(NotFoundError) as missing:
            require_member(db, "org_missing", TEST_OUTSIDER_ID)
        make_workspace(db, "org_hidden", TEST_ADMIN_ID)
        with pytest.raises(NotFoundError) as hidden:
            require_member(db, "org_hidden", TEST_OUTSIDER_ID)
        assert missing.value.message == hidden.value.message

    def test_someone_elses_personal_workspace_is_not_found(self, db: Session):
        with pytest.raises(NotFoundError):
            require_member(db, personal_workspace_id("owner"), TEST_OUTSIDER_ID)


class TestRequireAdmin:
    def test_admin_passes(self, db: Session):
        make_workspace(db, "org_1", TEST_ADMIN_ID)
        assert require_admin(db, "org_1", TEST_ADMIN_ID).is_admin is True

    def test_member_is_forbidden(self, db: Session):
        make_workspace(db, "org_1", TEST_ADMIN_ID, members=(TEST_MEMBER_ID,))
        with pytest.raises(ForbiddenError):
            require_admin(db, "org_1", TEST_MEMBER_ID)

    def test_outsider_is_not_found(self, db: Session):
        make_workspace(db, "org_1", TEST_ADMIN_ID)
        with pytest.raises(NotFoundError):
            require_admin(db, "org_1", TEST_OUTSIDER_ID)

    def test_own_personal_workspace_counts_as_admin(self, db: Session):
        assert require_admin(db, personal_workspace_id("solo"), "solo").is_admin is True
