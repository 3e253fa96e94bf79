from fastapi.testclient import TestClient

from school_records.main import create_app
from school_records.tests.test_fixtures.settings_fixtures import make_settings


def test_lifespan_creates_tables(tmp_path):
    """
    Behavior:
        - Run the app with its lifespan (TestClient as a context manager) on a fresh SQLite file.
        - Tables exist at startup, so the first write succeeds.
    """
    app = create_app(make_settings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'school.db'}"))
    with TestClient(app) as client:
        resp = client.post("/api/students", json={"name": "Ada", "age": 17, "grade": 88})
        assert resp.status_code == 201
        assert resp.headers["X-Trace-Id"]

        resp = client.get("/health")
        assert resp.json()["env"] == "testing"
