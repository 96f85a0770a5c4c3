import pytest

from app import crud
from app.models.profile import Profile
from app.models.registration_request import RequestStatus
from app.models.user_roles import AppRole
from app.services.admin_bootstrap import AdminBootstrapError, bootstrap_admin
from create_admin import main


def test_creates_admin_with_password(db):
    result = bootstrap_admin(db, "root@lab.edu", password="rootpass")

    assert result.account_created
    profile = db.get(Profile, result.user_id)
    assert profile.approved
    assert profile.full_name == "Admin User"
    assert crud.user_role.get_by_user(db, user_id=result.user_id).role == AppRole.ADMIN
    assert crud.user.authenticate(db, email="root@lab.edu", password="rootpass") is not None


def test_promotes_existing_account(db, make_user):
    user = make_user("promote@lab.edu", role=AppRole.STAFF)

    result = bootstrap_admin(db, "Promote@lab.edu", full_name="Promoted")

    assert result.user_id == user.id
    assert not result.account_created
    assert crud.user_role.get_by_user(db, user_id=user.id).role == AppRole.ADMIN
    assert db.get(Profile, user.id).full_name == "Promoted"


def test_missing_account_without_password(db):
    with pytest.raises(AdminBootstrapError):
        bootstrap_admin(db, "ghost@lab.edu")


def test_email_is_required(db):
    with pytest.raises(AdminBootstrapError):
        bootstrap_admin(db, "  ", password="x")


def test_marks_pending_requests_approved(db, make_request):
    request = make_request("applicant.admin@lab.edu")

    result = bootstrap_admin(db, "applicant.admin@lab.edu", password="pw123456")

    assert result.requests_approved == 1
    db.refresh(request)
    assert request.status == RequestStatus.APPROVED.value
    assert request.user_id == result.user_id


def test_running_twice_keeps_one_role(db):
    first = bootstrap_admin(db, "again@lab.edu", password="pw123456")
    second = bootstrap_admin(db, "again@lab.edu", password="pw123456")

    assert first.user_id == second.user_id
    assert not second.account_created


def test_cli_reports_missing_account(monkeypatch, db, capsys):
    monkeypatch.setattr("create_admin.SessionLocal", lambda: db)

    assert main(["nobody@lab.edu"]) == 1
    assert "not found" in capsys.readouterr().err
