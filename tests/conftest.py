import os

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEND_EMAILS"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.email_service import EmailService
from app.core.security import create_access_token
from app.db.database import Base, get_db
from app.main import app
from app.models.department import Department
from app.models.inventory import InventoryItem
from app.models.profile import Profile
from app.models.registration_request import RegistrationRequest
from app.models.user import User
from app.models.user_roles import AppRole, UserRole
from app.core.security import get_password_hash

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sent_emails(monkeypatch):
    outbox = []

    def fake_send(self, to_emails, subject, html_content, text_content=None):
        outbox.append({"to": to_emails, "subject": subject, "html": html_content})
        return True

    monkeypatch.setattr(EmailService, "send_email", fake_send)
    return outbox


@pytest.fixture
def make_user(db):
    def _make_user(email, role=AppRole.STAFF, department=Department.IT, approved=True, password="secret123"):
        user = User(email=email, hashed_password=get_password_hash(password), full_name=email.split("@")[0],
                    email_confirmed=True)
        db.add(user)
        db.flush()
        db.add(Profile(id=user.id, email=email, full_name=user.full_name, department=department, approved=approved))
        if role is not None:
            db.add(UserRole(user_id=user.id, role=role, department=department))
        db.commit()
        db.refresh(user)
        return user
    return _make_user


def auth_headers(user, role, department, approved=True):
    claims = {
        "email": user.email,
        "name": user.full_name,
        "role": role.value if role else None,
        "department": department.value if department else None,
        "approved": approved,
    }
    return {"Authorization": f"Bearer {create_access_token(user.id, claims=claims)}"}


@pytest.fixture
def admin_headers(make_user):
    user = make_user("admin@lab.edu", role=AppRole.ADMIN, department=None)
    return auth_headers(user, AppRole.ADMIN, None)


@pytest.fixture
def hod_headers(make_user):
    user = make_user("hod.it@lab.edu", role=AppRole.HOD, department=Department.IT)
    return auth_headers(user, AppRole.HOD, Department.IT)


@pytest.fixture
def staff_headers(make_user):
    user = make_user("staff@lab.edu", role=AppRole.STAFF, department=Department.IT)
    return auth_headers(user, AppRole.STAFF, Department.IT)


@pytest.fixture
def make_item(db):
    def _make_item(name, department=Department.IT, quantity=1, low_stock_threshold=5, **extra):
        item = InventoryItem(name=name, department=department, quantity=quantity,
                             low_stock_threshold=low_stock_threshold, **extra)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item
    return _make_item


@pytest.fixture
def make_request(db):
    def _make_request(email, department=Department.IT, role=AppRole.STAFF, full_name="Applicant"):
        request = RegistrationRequest(email=email, full_name=full_name, department=department,
                                      requested_role=role, status="pending")
        db.add(request)
        db.commit()
        db.refresh(request)
        return request
    return _make_request
