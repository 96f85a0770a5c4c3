from app.core.security import create_password_reset_token
from app.models.department import Department
from app.models.registration_request import RegistrationRequest
from app.models.user import User
from app.models.user_roles import AppRole

API = "/api/v1"


def login(client, email, password):
    return client.post(f"{API}/auth/login", data={"username": email, "password": password})


def test_login_returns_token_with_session(client, make_user):
    make_user("hod@lab.edu", role=AppRole.HOD, department=Department.CSE)

    response = login(client, "HOD@lab.edu", "secret123")

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["session"]["role"] == "hod"
    assert body["session"]["department"] == "CSE"

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "hod@lab.edu"


def test_wrong_password(client, make_user):
    make_user("staff@lab.edu")

    assert login(client, "staff@lab.edu", "nope").status_code == 401


def test_unapproved_staff_cannot_login(client, make_user):
    make_user("pending@lab.edu", approved=False)

    response = login(client, "pending@lab.edu", "secret123")

    assert response.status_code == 403
    assert response.json()["detail"] == "Your account is pending approval"


def test_unapproved_admin_can_login(client, make_user):
    make_user("boot@lab.edu", role=AppRole.ADMIN, department=None, approved=False)

    assert login(client, "boot@lab.edu", "secret123").status_code == 200


def test_protected_route_requires_token(client):
    assert client.get(f"{API}/inventory/").status_code in (401, 403)


def test_signup_creates_unconfirmed_account_and_pending_request(client, db):
    response = client.post(f"{API}/registration/signup", json={
        "email": "New.Staff@lab.edu",
        "full_name": "New Staff",
        "department": "AI&DS",
        "requested_role": "staff",
        "password": "abcdef",
        "confirm_password": "abcdef",
    })

    assert response.status_code == 201
    assert response.json()["status"] == "pending"
    user = db.query(User).filter(User.email == "new.staff@lab.edu").one()
    assert not user.email_confirmed
    assert db.query(RegistrationRequest).count() == 1
    assert login(client, "new.staff@lab.edu", "abcdef").status_code == 403


def test_signup_validation(client):
    base = {"email": "x@lab.edu", "full_name": "X", "department": "IT", "requested_role": "staff"}

    short = client.post(f"{API}/registration/signup", json={**base, "password": "abc", "confirm_password": "abc"})
    mismatch = client.post(f"{API}/registration/signup", json={**base, "password": "abcdef", "confirm_password": "abcdeg"})
    bad_department = client.post(f"{API}/registration/signup", json={**base, "department": "History"})

    assert short.status_code == 422
    assert mismatch.status_code == 422
    assert bad_department.status_code == 422


def test_signup_duplicate_email(client, make_user):
    make_user("taken@lab.edu")

    response = client.post(f"{API}/registration/signup", json={
        "email": "taken@lab.edu", "full_name": "T", "department": "IT", "requested_role": "staff",
    })

    assert response.status_code == 400


def test_forgot_password_always_succeeds(client, make_user, sent_emails):
    make_user("forgot@lab.edu")

    known = client.post(f"{API}/password/forgot", json={"email": "forgot@lab.edu"})
    unknown = client.post(f"{API}/password/forgot", json={"email": "ghost@lab.edu"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()
    assert len(sent_emails) == 1
    assert "reset-password?token=" in sent_emails[0]["html"]


def test_reset_password_with_token(client, make_user):
    user = make_user("reset@lab.edu")
    token = create_password_reset_token(user.id, user.email)

    response = client.post(f"{API}/password/reset", json={
        "token": token, "password": "brandnew", "confirm_password": "brandnew",
    })

    assert response.status_code == 200
    assert login(client, "reset@lab.edu", "brandnew").status_code == 200


def test_reset_password_rejects_access_token(client, make_user, staff_headers):
    token = staff_headers["Authorization"].split()[1]

    response = client.post(f"{API}/password/reset", json={
        "token": token, "password": "brandnew", "confirm_password": "brandnew",
    })

    assert response.status_code == 400


def test_profile_and_password_change(client, staff_headers):
    profile = client.get(f"{API}/profile/me", headers=staff_headers)
    assert profile.status_code == 200
    assert profile.json()["email"] == "staff@lab.edu"

    mismatch = client.post(f"{API}/profile/password", headers=staff_headers,
                           json={"password": "newpass1", "confirm_password": "other"})
    assert mismatch.status_code == 422

    changed = client.post(f"{API}/profile/password", headers=staff_headers,
                          json={"password": "newpass1", "confirm_password": "newpass1"})
    assert changed.status_code == 200
    assert login(client, "staff@lab.edu", "newpass1").status_code == 200
