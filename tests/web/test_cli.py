from __future__ import annotations

from werkzeug.security import check_password_hash

from src.shift_scheduler.shift_scheduler.core.enums import Role
from src.shift_scheduler.shift_scheduler.main import create_app


def test_seed_creates_admin_and_demo_staff(monkeypatch, container, users_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    from app import users_cli

    flask_app = create_app(container=container)
    flask_app.cli.add_command(users_cli)

    result = flask_app.test_cli_runner().invoke(
        args=["users", "seed", "--admin-name", "Boss", "--admin-password", "topsecret", "--demo-staff"]
    )

    assert result.exit_code == 0, result.output
    boss = next(u for u in users_repo.users.values() if u.name == "Boss")
    assert boss.role == Role.ADMIN
    assert check_password_hash(boss.password_hash, "topsecret")
    assert sum(1 for u in users_repo.users.values() if u.role == Role.STAFF) == 4


def test_seed_resets_existing_password(monkeypatch, container, users_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    from app import ensure_user

    uid = ensure_user(container, name="Admin", password="newpass1", role=Role.ADMIN)

    assert uid == "u1"
    assert check_password_hash(users_repo.users["u1"].password_hash, "newpass1")
