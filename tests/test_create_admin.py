# tests/test_create_admin.py
"""Tests for the admin bootstrap script."""

from __future__ import annotations

import pytest

from phayao_hub.core.security import verify_password
from phayao_hub.models import User
from phayao_hub.scripts import create_admin
from phayao_hub.scripts.create_admin import create_or_reset_admin


def test_creates_new_admin(db_session):
    user, created = create_or_reset_admin(db_session, "root", "root@example.com", "s3cret!!", "Root")

    assert created is True
    assert user.is_admin
    assert user.full_name == "Root"
    assert verify_password("s3cret!!", user.password_hash)


def test_promotes_and_resets_existing_user(db_session, test_user):
    test_user.status = "suspended"
    db_session.flush()

    user, created = create_or_reset_admin(db_session, test_user.username, "x@example.com", "new-pass")

    assert created is False
    assert user.id == test_user.id
    assert user.is_admin
    assert not user.is_suspended
    assert verify_password("new-pass", user.password_hash)


def test_main_rejects_short_password(capsys):
    with pytest.raises(SystemExit) as exc_info:
        create_admin.main(["root", "root@example.com", "--password", "123"])
    assert exc_info.value.code == 1
    assert "at least 6 characters" in capsys.readouterr().err


def test_main_uses_session_factory(mocker, db_session, capsys):
    mocker.patch.object(create_admin, "SessionLocal", return_value=db_session)
    mocker.patch.object(db_session, "close")

    create_admin.main(["boss", "boss@example.com", "--password", "longenough"])

    assert db_session.query(User).filter_by(username="boss").one().is_admin
    assert "created admin boss" in capsys.readouterr().out
