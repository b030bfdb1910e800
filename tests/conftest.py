import os
import sys
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


# Ensure `import backend.careercraft...` works regardless of where pytest is run from.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Must be set before anything imports backend.careercraft.config.
os.environ["DISABLE_DOTENV"] = "1"
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ["SECRET_KEY"] = "test-secret"
# Tests never talk to a real mail server.
os.environ["SMTP_HOST"] = ""
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASS"] = ""

PASSWORD = "Testpass123!"


@pytest.fixture()
def app(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> FastAPI:
    """
    Create a FastAPI app wired to a temporary SQLite DB.

    Startup table creation is skipped; tables are created here instead.
    """
    from backend.careercraft import config
    from backend.careercraft import database as db

    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(config, "SMTP_HOST", "")

    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'test.sqlite3'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    db.install_sqlite_pragmas(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Patch the shared database module so router dependencies use the test DB.
    monkeypatch.setattr(db, "engine", engine)
    monkeypatch.setattr(db, "SessionLocal", TestingSessionLocal)

    # Import models so Base metadata is populated, then create tables.
    from backend.careercraft import models  # noqa: F401

    db.Base.metadata.create_all(bind=engine)

    from backend.careercraft.main import create_app

    yield create_app(init_database=False)

    engine.dispose()


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def db_session(app: FastAPI):
    """
    Direct SQLAlchemy session bound to the same temporary SQLite DB used by the test app.
    """
    from backend.careercraft import database

    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, *, role: str, username: str, email: str | None = None, **extra):
    body = {
        "firstName": extra.pop("firstName", username.capitalize()),
        "username": username,
        "email": email or f"{username}@example.com",
        "password": extra.pop("password", PASSWORD),
        "role": role,
    }
    if role == "employer":
        body.setdefault("companyName", f"{username.capitalize()} Ltd")
    body.update(extra)
    return client.post("/api/auth/register", json=body)


def login(client, identifier: str, password: str = PASSWORD):
    return client.post("/api/auth/login", json={"email": identifier, "password": password})


@pytest.fixture()
def make_user(client):
    """Register + login; returns (user_dict, headers)."""

    def _make(role: str, username: str, **extra):
        r = register(client, role=role, username=username, **extra)
        assert r.status_code == 201, r.text
        data = login(client, username).json()
        return data["user"], auth_headers(data["token"])

    return _make


@pytest.fixture()
def admin_headers(client, db_session):
    from backend.seed_admin import seed_admin

    seed_admin(db_session, username="root", email="root@example.com", password=PASSWORD)
    r = login(client, "root")
    assert r.status_code == 200, r.text
    return auth_headers(r.json()["token"])


def post_job(client, headers, **overrides):
    body = {
        "title": "Data Analyst",
        "description": "Analyse hiring data",
        "skills": ["SQL", "Python"],
        "experienceYears": 2,
        "experienceMonths": 0,
        "location": "Pune",
    }
    body.update(overrides)
    return client.post("/api/jobs", json=body, headers=headers)


def apply(client, headers, job_id: int, **data):
    return client.post("/api/applications", data={"jobId": str(job_id), **data}, headers=headers)
