"""Membership API tests (GET/POST /api/workspaces/{id}/members)."""

from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from taskhub.models import ROLE_ADMIN, ROLE_MEMBER, WorkspaceMember
from taskhub.services.membership_service import map_provider_role
from tests.helpers import auth_headers, make_task, make_workspace, member_id
from tests.test_constants import TEST_ADMIN_ID, TEST_MEMBER_ID, TEST_OUTSIDER_ID


class TestAddMember:
    def test_admin_adds_member(self, db: Session, client_with_db: TestClient) -> None:
        make_workspace(db, "org_a", TEST_ADMIN_ID)
        response = client_with_db.post(
            "/api/workspaces/org_a/members",
            json={"user_id": TEST_MEMBER_ID},
            headers=auth_headers(TEST_ADMIN_ID),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == TEST_MEMBER_ID
        assert data["role"] == ROLE_MEMBER

    def test_admin_can_add_another_admin(self, db: Session, client_with_db: TestClient) -> None:
        make_workspace(db, "org_a", TEST_ADMIN_ID)
        response = client_with_db.post(
            "/api/workspaces/org_a/members",
            json={"user_id": "user_cofounder", "role": "ADMIN"},
            headers=auth_headers(TEST_ADMIN_ID),
        )
        assert response.status_code == 201
        assert response.json()["role"] == ROLE_ADMIN

    def test_duplicate_member_returns_409(self, db: Session, client_with_db: TestClient) -> None:
        make_workspace(db, "org_a", TEST_ADMIN_ID, members=(TEST_MEMBER_ID,))
        response = client_with_db.post(
            "/api/workspaces/org_a/members",
            json={"user_id": TEST_MEMBER_ID},
            headers=auth_headers(TEST_ADMIN_ID),
        )
        assert response.status_code == 409
        assert db.query(WorkspaceMember).filter(WorkspaceMember.user_id == TEST_MEMBER_ID).count() == 1

    def test_insert_race_on_membership_returns_409(
        self, db: Session, client_with_db: TestClient
    ) -> None:
        make_workspace(db, "org_a", TEST_ADMIN_ID, members=(TEST_MEMBER_ID,))
        with patch("taskhub.services.membership_service.get_membership", return_value=None):
            response = client_with_db.post(
                "/api/workspaces/org_a/members",
                json={"user_id": TEST_MEMBER_ID},
                headers=auth_headers(TEST_ADMIN_ID),
            )
        assert response.status_code == 409
        assert response.json() == {"error": "User is already a member"}
        assert db.query(WorkspaceMember).filter(WorkspaceMember.user_id == TEST_MEMBER_ID).count() == 1

    def test_member_cannot_add_members(self, db: Session, client_with_db: TestClient) -> None:
        make_workspace(db, "org_a", TEST_ADMIN_ID, members=(TEST_MEMBER_ID,))
        response = client_with_db.post(
            "/api/workspaces/org_a/members",
            json={"user_id": "user_friend"},
            headers=auth_headers(TEST_MEMBER_ID),
        )
        assert response.status_code == 403

    def test_outsider_gets_404(self, db: Session, client_with_db: TestClient) -> None:
        make_workspace(db, "org_a", TEST_ADMIN_ID)
        response = client_with_db.post(
            "/api/workspaces/org_a/members",
            json={"user_id": "user_friend"},
            headers=auth_headers(TEST_OUTSIDER_ID),
        )
        assert response.status_code == 404


class TestListMembers:
    def test_members_include_assigned_task_summaries(
        self, db: Session, client_with_db: TestClient
    ) -> None:
        make_workspace(db, "org_a", TEST_ADMIN_ID, members=(TEST_MEMBER_ID,))
        make_task(db, "org_a", "Write docs", assignee_id=member_id(db, "org_a", TEST_MEMBER_ID))

        response = client_with_db.get(
            "/api/workspaces/org_a/members", headers=auth_headers(TEST_MEMBER_ID)
        )
        assert response.status_code == 200
        by_user = {m["user_id"]: m for m in response.json()}
        assert by_user[TEST_ADMIN_ID]["assigned_tasks"] == []
        assigned = by_user[TEST_MEMBER_ID]["assigned_tasks"]
        assert len(assigned) == 1
        assert assigned[0]["title"] == "Write docs"
        assert assigned[0]["status"] == "TODO"

    def test_outsider_gets_404(self, db: Session, client_with_db: TestClient) -> None:
        make_workspace(db, "org_a", TEST_ADMIN_ID)
        response = client_with_db.get(
            "/api/workspaces/org_a/members", headers=auth_headers(TEST_OUTSIDER_ID)
        )
        assert response.status_code == 404


class TestProviderRoleMapping:
    def test_org_admin_maps_to_admin(self) -> None:
        assert map_provider_role("org:admin") == ROLE_ADMIN
        assert map_provider_role("admin") == ROLE_ADMIN

    def test_anything_else_maps_to_member(self) -> None:
        assert map_provider_role("org:member") == ROLE_MEMBER
        assert map_provider_role("basic_member") == ROLE_MEMBER
        assert map_provider_role(None) == ROLE_MEMBER
