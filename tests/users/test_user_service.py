from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from src.shift_scheduler.shift_scheduler.container import wire_container
from src.shift_scheduler.shift_scheduler.core.enums import Role
from src.shift_scheduler.shift_scheduler.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CascadeError,
    ValidationError,
)
from src.shift_scheduler.shift_scheduler.users.service import public_user


def test_authenticate_checks_password_hash(container):
    s_user = container.auth_service.authenticate("u2", "secret1")
    assert (s_user.user_id, s_user.name, s_user.role) == ("u2", "Hanako", Role.STAFF)

    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("u2", "wrong")
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("ghost", "secret1")
    with pytest.raises(ValidationError):
        container.auth_service.authenticate("u2", "")


def test_corrupted_hash_fails_login_instead_of_crashing(container, users_repo):
    from dataclasses import replace

    users_repo.users["u3"] = replace(users_repo.users["u3"], password_hash="not-a-hash")
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("u3", "secret1")


def test_login_choices_list_staff_by_registration_then_admins(container):
    choices = container.auth_service.list_login_choices()
    assert [c["id"] for c in choices] == ["u3", "u2", "u1"]
    assert all("password_hash" not in c for c in choices)


def test_public_user_never_exposes_hash(users_repo):
    assert "password_hash" not in public_user(users_repo.users["u2"])


def test_create_user_hashes_password(container, users_repo):
    uid = container.user_service.create_user(current_role=Role.ADMIN, name=" Jiro ", password="abcdef")

    created = users_repo.users[uid]
    assert created.name == "Jiro"
    assert created.role == Role.STAFF
    assert check_password_hash(created.password_hash, "abcdef")


def test_create_user_validation_and_permission(container):
    svc = container.user_service
    with pytest.raises(AuthorizationError):
        svc.create_user(current_role=Role.STAFF, name="Jiro", password="abcdef")
    with pytest.raises(ValidationError):
        svc.create_user(current_role=Role.ADMIN, name="", password="abcdef")
    with pytest.raises(ValidationError):
        svc.create_user(current_role=Role.ADMIN, name="Jiro", password="abc")


def test_rename_cascades_to_shifts_and_requests(container, users_repo, shifts_repo, requests_repo):
    report = container.user_service.update_user(current_role=Role.ADMIN, user_id="u2", name="Hanako S.")

    assert report.ok
    assert sorted(report.succeeded) == ["request:r1", "request:r2", "shift:s1"]
    assert users_repo.users["u2"].name == "Hanako S."
    assert shifts_repo.shifts["s1"].user_name == "Hanako S."
    assert requests_repo.requests["r1"].user_name == "Hanako S."
    assert requests_repo.requests["r3"].user_name == "Taro"


def test_rename_reports_partial_failure(container, shifts_repo, requests_repo):
    shifts_repo.fail_ids = {"s1"}

    report = container.user_service.update_user(current_role=Role.ADMIN, user_id="u2", name="Hanako S.")

    assert not report.ok
    assert [label for label, _ in report.failed] == ["shift:s1"]
    assert requests_repo.requests["r2"].user_name == "Hanako S."


def test_unchanged_name_skips_cascade(container, shifts_repo):
    report = container.user_service.update_user(current_role=Role.ADMIN, user_id="u2", name="Hanako")
    assert report.succeeded == [] and report.ok
    assert shifts_repo.list_calls == 0


def test_delete_user_removes_owned_records(container, users_repo, shifts_repo, requests_repo):
    report = container.user_service.delete_user(current_role=Role.ADMIN, current_user_id="u1", user_id="u2")

    assert report.ok
    assert "u2" not in users_repo.users
    assert shifts_repo.shifts == {}
    assert set(requests_repo.requests) == {"r3"}
    assert report.succeeded[-1] == "user:u2"


def test_delete_user_keeps_user_when_cascade_fails(container, users_repo, requests_repo):
    requests_repo.fail_ids = {"r2"}

    with pytest.raises(CascadeError) as exc:
        container.user_service.delete_user(current_role=Role.ADMIN, current_user_id="u1", user_id="u2")

    report = exc.value.report
    assert [label for label, _ in report.failed] == ["request:r2"]
    assert sorted(report.succeeded) == ["request:r1", "shift:s1"]
    assert "u2" in users_repo.users
    assert "r2" in requests_repo.requests
    assert report.as_dict()["failed"][0]["target"] == "request:r2"


def test_delete_user_refuses_when_listing_hits_fetch_limit(users_repo, shifts_repo, requests_repo):
    # r3 (owned by u3) sits past the first two rows.
    limited = wire_container(users_repo, shifts_repo, requests_repo, cascade_limit=2)

    with pytest.raises(CascadeError) as exc:
        limited.user_service.delete_user(current_role=Role.ADMIN, current_user_id="u1", user_id="u3")

    assert [label for label, _ in exc.value.report.failed] == ["requests:remaining"]
    assert "u3" in users_repo.users
    assert "r3" in requests_repo.requests

    roomy = wire_container(users_repo, shifts_repo, requests_repo, cascade_limit=10)
    report = roomy.user_service.delete_user(current_role=Role.ADMIN, current_user_id="u1", user_id="u3")

    assert report.succeeded == ["request:r3", "user:u3"]
    assert "r3" not in requests_repo.requests


def test_rename_reports_fetch_limit_as_failure(users_repo, shifts_repo, requests_repo):
    limited = wire_container(users_repo, shifts_repo, requests_repo, cascade_limit=1)

    report = limited.user_service.update_user(current_role=Role.ADMIN, user_id="u2", name="Hanako S.")

    assert sorted(label for label, _ in report.failed) == ["requests:remaining", "shifts:remaining"]
    assert users_repo.users["u2"].name == "Hanako S."


def test_admin_cannot_delete_self(container, users_repo):
    with pytest.raises(ValidationError):
        container.user_service.delete_user(current_role=Role.ADMIN, current_user_id="u1", user_id="u1")
    assert "u1" in users_repo.users


def test_list_staff_reads_snapshot(container):
    assert {u.user_id for u in container.user_service.list_staff()} == {"u2", "u3"}
    assert len(container.user_service.list_users()) == 3
