import sys
import os

# Ensure repo root on sys.path for imports like `app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# In-memory database shared across connections (StaticPool); must be set before app imports.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("ALLOW_ADMIN_REGISTRATION", "true")

import pytest
from fastapi.testclient import TestClient

from app.db.base import Base
from app.db.session import SessionLocal, engine
import app.db.models  # noqa: F401
from app.main import app

ADMIN = {"fullname": "Ada Admin", "email": "admin@example.com", "password": "admin-pass"}

STUDENT = {
    "fullname": "A B",
    "idNumber": "9901015800084",
    "studentNo": "S001",
    "email": "a@x.com",
    "password": "student-pass",
    "course": "Networking",
    "status": "Pending",
}


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def login(client, email, password, role=None):
    body = {"email": email, "password": password}
    if role:
        body["role"] = role
    resp = client.post("/api/login", json=body)
    assert resp.status_code == 200, resp.text
    client.cookies.clear()  # tests pass tokens explicitly
    return resp.json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    resp = client.post("/api/register_admin", json=ADMIN)
    assert resp.status_code == 200, resp.text
    data = login(client, ADMIN["email"], ADMIN["password"])
    return bearer(data["token"])


@pytest.fixture
def student(client, admin_headers):
    resp = client.post("/api/students", json=STUDENT, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    return resp.json()["student"]


@pytest.fixture
def student_headers(client, student):
    data = login(client, STUDENT["email"], STUDENT["password"])
    return bearer(data["token"])
