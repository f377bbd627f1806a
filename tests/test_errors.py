from sqlalchemy.exc import OperationalError

from app.features.students import service


def test_store_fault_is_reported_as_server_error(client, admin_headers, monkeypatch):
    def boom(db, q=None):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(service, "list_students", boom)
    resp = client.get("/api/students", headers=admin_headers)
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Server error"}


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json()["success"] is False
