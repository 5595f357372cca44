"""Tag API tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from taskhub.models import Tag, Task, task_tags
from tests.helpers import auth_headers, make_tag, make_task, make_workspace
from tests.test_constants import TEST_ADMIN_ID, TEST_MEMBER_ID, TEST_OUTSIDER_ID

ADMIN = auth_headers(TEST_ADMIN_ID)
MEMBER = auth_headers(TEST_MEMBER_ID)


@pytest.fixture
def workspace(db: Session):
    return make_workspace(db, "org_w1", TEST_ADMIN_ID, members=(TEST_MEMBER_ID,))


class TestCreateTag:
    def test_duplicate_name_in_workspace_is_409(
        self, db: Session, workspace, client_with_db: TestClient
    ) -> None:
        first = client_with_db.post(
            "/api/tags",
            json={"name": "urgent", "color": "#EF4444", "workspace_id": "org_w1"},
            headers=ADMIN,
        )
        assert first.status_code == 201
        assert first.json()["color"] == "#EF4444"

        second = client_with_db.post(
            "/api/tags", json={"name": "urgent", "workspace_id": "org_w1"}, headers=ADMIN
        )
        assert second.status_code == 409
        assert second.json() == {"error": "Tag with this name already exists"}
        assert db.query(Tag).filter(Tag.workspace_id == "org_w1").count() == 1

    def test_insert_race_on_name_is_409(
        self, db: Session, workspace, client_with_db: TestClient
    ) -> None:
        make_tag(db, "org_w1", "urgent")
        with patch("taskhub.services.tag_service._name_taken", return_value=False):
            response = client_with_db.post(
                "/api/tags", json={"name": "urgent", "workspace_id": "org_w1"}, headers=ADMIN
            )
        assert response.status_code == 409
        assert response.json() == {"error": "Tag with this name already exists"}
        assert db.query(Tag).filter(Tag.workspace_id == "org_w1").count() == 1

    def test_same_name_allowed_in_different_workspaces(
        self, db: Session, workspace, client_with_db: TestClient
    ) -> None:
        make_workspace(db, "org_w2", TEST_ADMIN_ID)
        for workspace_id in ("org_w1", "org_w2"):
            response = client_with_db.post(
                "/api/tags", json={"name": "urgent", "workspace_id": workspace_id}, headers=ADMIN
            )
            assert response.status_code == 201

    def test_default_color(self, workspace, client_with_db: TestClient) -> None:
        response = client_with_db.post(
            "/api/tags", json={"name": "plain", "workspace_id": "org_w1"}, headers=MEMBER
        )
        assert response.status_code == 201
        assert response.json()["color"] == "#3B82F6"
        assert response.json()["task_count"] == 0

    def test_invalid_color_is_400(self, workspace, client_with_db: TestClient) -> None:
        response = client_with_db.post(
            "/api/tags",
            json={"name": "bad", "color": "red", "workspace_id": "org_w1"},
            headers=ADMIN,
        )
        assert response.status_code == 400

    def test_outsider_gets_404(self, workspace, client_with_db: TestClient) -> None:
        response = client_with_db.post(
            "/api/tags",
            json={"name": "urgent", "workspace_id": "org_w1"},
            headers=auth_headers(TEST_OUTSIDER_ID),
        )
        assert response.status_code == 404


class TestListTags:
    def test_alphabetical_with_task_counts(
        self, db: Session, workspace, client_with_db: TestClient
    ) -> None:
        zeta = make_tag(db, "org_w1", "zeta")
        make_tag(db, "org_w1", "alpha")
        task = make_task(db, "org_w1", "Tagged")
        task.tags = [zeta]
        db.commit()

        response = client_with_db.get("/api/tags?workspaceId=org_w1", headers=MEMBER)
        assert response.status_code == 200
        data = response.json()
        assert [t["name"] for t in data] == ["alpha", "zeta"]
        assert [t["task_count"] for t in data] == [0, 1]

    def test_workspace_id_is_required(self, client_with_db: TestClient) -> None:
        response = client_with_db.get("/api/tags", headers=ADMIN)
        assert response.status_code == 400

    def test_outsider_gets_404(self, workspace, client_with_db: TestClient) -> None:
        response = client_with_db.get(
            "/api/tags?workspaceId=org_w1", headers=auth_headers(TEST_OUTSIDER_ID)
        )
        assert response.status_code == 404


class TestUpdateAndDeleteTag:
    def test_rename_keeps_color_when_omitted(
        self, db: Session, workspace, client_with_db: TestClient
    ) -> None:
        tag = make_tag(db, "org_w1", "urgent", "#EF4444")
        response = client_with_db.put(f"/api/tags/{tag.id}", json={"name": "asap"}, headers=MEMBER)
        assert response.status_code == 200
        assert response.json()["name"] == "asap"
        assert response.json()["color"] == "#EF4444"

    def test_rename_to_existing_name_is_409(
        self, db: Session, workspace, client_with_db: TestClient
    ) -> None:
        make_tag(db, "org_w1", "urgent")
        later = make_tag(db, "org_w1", "later")
        response = client_with_db.put(f"/api/tags/{later.id}", json={"name": "urgent"}, headers=ADMIN)
        assert response.status_code == 409

    def test_rename_race_on_name_is_409(
        self, db: Session, workspace, client_with_db: TestClient
    ) -> None:
        make_tag(db, "org_w1", "urgent")
        later_id = make_tag(db, "org_w1", "later").id
        with patch("taskhub.services.tag_service._name_taken", return_value=False):
            response = client_with_db.put(
                f"/api/tags/{later_id}", json={"name": "urgent"}, headers=ADMIN
            )
        assert response.status_code == 409
        db.expire_all()
        assert db.get(Tag, later_id).name == "later"

    def test_rename_to_own_name_is_allowed(
        self, db: Session, workspace, client_with_db: TestClient
    ) -> None:
        tag = make_tag(db, "org_w1", "urgent")
        response = client_with_db.put(
            f"/api/tags/{tag.id}", json={"name": "urgent", "color": "#000000"}, headers=ADMIN
        )
        assert response.status_code == 200
        assert response.json()["color"] == "#000000"

    def test_delete_removes_task_links(
        self, db: Session, workspace, client_with_db: TestClient
    ) -> None:
        tag = make_tag(db, "org_w1", "urgent")
        task = make_task(db, "org_w1", "Tagged")
        task.tags = [tag]
        db.commit()
        tag_id, task_id = tag.id, task.id

        response = client_with_db.delete(f"/api/tags/{tag_id}", headers=MEMBER)
        assert response.status_code == 200

        db.expire_all()
        assert db.get(Tag, tag_id) is None
        assert db.get(Task, task_id).tags == []
        assert db.query(task_tags).count() == 0

    def test_outsider_cannot_update_or_delete(
        self, db: Session, workspace, client_with_db: TestClient
    ) -> None:
        tag = make_tag(db, "org_w1", "urgent")
        outsider = auth_headers(TEST_OUTSIDER_ID)
        assert (
            client_with_db.put(f"/api/tags/{tag.id}", json={"name": "x"}, headers=outsider).status_code
            == 404
        )
        assert client_with_db.delete(f"/api/tags/{tag.id}", headers=outsider).status_code == 404
