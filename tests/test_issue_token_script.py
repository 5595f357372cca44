"""Tests for the issue_token operator script."""

from __future__ import annotations

import pytest

from taskhub.models import Workspace
from taskhub.scripts.issue_token import main
from taskhub.services.auth import get_caller_id_from_token


def test_prints_token_for_user(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--user-id", "user_ada", "--hours", "1"]) == 0
    token = capsys.readouterr().out.strip()
    assert get_caller_id_from_token(token) == "user_ada"


def test_blank_user_id_fails(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--user-id", "  "]) == 1
    assert "must not be blank" in capsys.readouterr().err


def test_provision_creates_personal_workspace(db, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--user-id", "user_ada", "--provision"]) == 0
    assert "user_user_ada" in capsys.readouterr().err
    assert db.get(Workspace, "user_user_ada") is not None
