from app.models.department import Department
from app.models.profile import Profile
from app.models.user import User
from app.models.user_roles import AppRole, UserRole

API = "/api/v1"


def test_requests_listing_by_status(client, make_request, admin_headers):
    make_request("one@lab.edu")
    second = make_request("two@lab.edu")
    client.post(f"{API}/users/requests/{second.id}/reject", headers=admin_headers)

    everything = client.get(f"{API}/users/requests", headers=admin_headers).json()
    pending = client.get(f"{API}/users/requests", headers=admin_headers, params={"status": "pending"}).json()

    assert len(everything) == 2
    assert [r["email"] for r in pending] == ["one@lab.edu"]


def test_requests_require_admin(client, hod_headers):
    assert client.get(f"{API}/users/requests", headers=hod_headers).status_code == 403


def test_approve_through_api(client, db, make_request, admin_headers, sent_emails):
    request = make_request("new.hod@lab.edu", department=Department.CSE, role=AppRole.HOD, full_name="New Hod")

    first = client.post(f"{API}/users/requests/{request.id}/approve", headers=admin_headers)
    second = client.post(f"{API}/users/requests/{request.id}/approve", headers=admin_headers)

    assert first.status_code == 200
    assert first.json()["account_created"] is True
    assert second.json()["already_approved"] is True
    assert second.json()["user_id"] == first.json()["user_id"]
    assert db.query(User).filter(User.email == "new.hod@lab.edu").count() == 1
    assert len(sent_emails) == 1

    role = db.query(UserRole).filter(UserRole.user_id == first.json()["user_id"]).one()
    assert role.role == AppRole.HOD
    assert role.department == Department.CSE


def test_reject_delete_and_invalid_transitions(client, make_request, admin_headers, sent_emails):
    request = make_request("someone@lab.edu")

    assert client.delete(f"{API}/users/requests/{request.id}", headers=admin_headers).status_code == 400
    assert client.post(f"{API}/users/requests/{request.id}/reject", headers=admin_headers).json()["status"] == "rejected"
    assert client.post(f"{API}/users/requests/{request.id}/approve", headers=admin_headers).status_code == 400
    assert client.delete(f"{API}/users/requests/{request.id}", headers=admin_headers).status_code == 200
    assert client.post(f"{API}/users/requests/{request.id}/reject", headers=admin_headers).status_code == 404


def test_active_and_deactivated_lists(client, make_user, admin_headers):
    active = make_user("active@lab.edu", department=Department.PHYSICS)
    make_user("inactive@lab.edu", approved=False)

    active_rows = client.get(f"{API}/users/active", headers=admin_headers).json()
    deactivated_rows = client.get(f"{API}/users/deactivated", headers=admin_headers).json()

    row = next(r for r in active_rows if r["id"] == active.id)
    assert row["role"] == "staff"
    assert row["department"] == "Physics"
    assert [r["email"] for r in deactivated_rows] == ["inactive@lab.edu"]


def test_promote_to_hod(client, db, make_user, admin_headers):
    user = make_user("promote@lab.edu", department=Department.MECHANICAL)

    response = client.put(f"{API}/users/{user.id}/role", headers=admin_headers,
                          json={"role": "hod", "department": "Chemical"})

    assert response.status_code == 200
    assert response.json()["role"] == "hod"
    assert response.json()["role_department"] == "Chemical"
    db.expire_all()
    assert db.get(Profile, user.id).department == Department.CHEMICAL


def test_hod_needs_department(client, make_user, admin_headers):
    user = make_user("nodept@lab.edu", department=None)

    response = client.put(f"{API}/users/{user.id}/role", headers=admin_headers, json={"role": "hod"})

    assert response.status_code == 422


def test_deactivate_and_reactivate(client, make_user, admin_headers):
    user = make_user("toggle@lab.edu")

    off = client.post(f"{API}/users/{user.id}/deactivate", headers=admin_headers)
    assert off.json()["approved"] is False
    login = client.post(f"{API}/auth/login", data={"username": "toggle@lab.edu", "password": "secret123"})
    assert login.status_code == 403

    on = client.post(f"{API}/users/{user.id}/reactivate", headers=admin_headers)
    assert on.json()["approved"] is True


def test_cannot_deactivate_self(client, db, admin_headers):
    admin = db.query(Profile).filter(Profile.email == "admin@lab.edu").one()

    response = client.post(f"{API}/users/{admin.id}/deactivate", headers=admin_headers)

    assert response.status_code == 400
