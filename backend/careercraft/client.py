"""
HTTP client for the CareerCraft API.

The logged-in session (token plus the user record returned by login) is owned
by a `SessionStore` with an explicit load/save/clear lifecycle instead of
module-level state.
"""
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class PortalClientError(RuntimeError):
    def __init__(self, *, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


@dataclass(frozen=True)
class PortalSession:
    token: str
    user: dict[str, Any]

    @property
    def role(self) -> str | None:
        return self.user.get("role")


class SessionStore:
    """
    Holds at most one session. With a `path`, the session survives restarts
    as a small JSON file; without one it lives in memory only.
    """

    def __init__(self, path: str | Path | None = None):
        self._path = Path(path) if path else None
        self._session: PortalSession | None = None

    @property
    def current(self) -> PortalSession | None:
        return self._session

    def load(self) -> PortalSession | None:
        if self._path is None or not self._path.is_file():
            return self._session
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            self._session = PortalSession(token=data["token"], user=dict(data["user"]))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self._path, e)
            self._session = None
        return self._session

    def save(self, session: PortalSession) -> None:
        self._session = session
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(asdict(session)), encoding="utf-8")

    def clear(self) -> None:
        self._session = None
        if self._path is not None:
            self._path.unlink(missing_ok=True)


class PortalClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        store: SessionStore | None = None,
        http: httpx.Client | None = None,
        timeout_s: float = 15.0,
    ):
        self.store = store or SessionStore()
        self.store.load()
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout_s)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "PortalClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------- plumbing --------------------

    def _headers(self) -> dict[str, str]:
        session = self.store.current
        return {"Authorization": f"Bearer {session.token}"} if session else {}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        r = self._http.request(method, path, headers=self._headers(), **kwargs)
        if r.status_code >= 400:
            try:
                message = (r.json() or {}).get("message") or r.text
            except ValueError:
                message = r.text
            raise PortalClientError(status_code=r.status_code, message=message)
        return r.json()

    # -------------------- auth --------------------

    def register(self, **fields) -> dict:
        return self._request("POST", "/api/auth/register", json=fields)

    def login(self, identifier: str, password: str) -> PortalSession:
        data = self._request("POST", "/api/auth/login", json={"identifier": identifier, "password": password})
        session = PortalSession(token=data["token"], user=data["user"])
        self.store.save(session)
        return session

    def logout(self) -> None:
        try:
            self._request("POST", "/api/auth/logout")
        finally:
            self.store.clear()

    def profile(self) -> dict:
        return self._request("GET", "/api/auth/profile")

    # -------------------- jobs --------------------

    def post_job(self, **fields) -> dict:
        return self._request("POST", "/api/jobs", json=fields)

    def list_jobs(self) -> list[dict]:
        return self._request("GET", "/api/jobs")

    def employer_jobs(self) -> list[dict]:
        return self._request("GET", "/api/jobs/employer")

    # -------------------- applications --------------------

    def apply(self, job_id: int, *, cover_letter: str | None = None, resume_path: str | Path | None = None) -> dict:
        data = {"jobId": str(job_id)}
        if cover_letter:
            data["coverLetter"] = cover_letter
        if resume_path is None:
            return self._request("POST", "/api/applications", data=data)
        path = Path(resume_path)
        with open(path, "rb") as fh:
            return self._request("POST", "/api/applications", data=data, files={"resume": (path.name, fh)})

    def my_applications(self) -> list[dict]:
        return self._request("GET", "/api/applications/student")

    def job_applications(self, job_id: int) -> list[dict]:
        return self._request("GET", f"/api/applications/job/{int(job_id)}")

    def update_status(self, application_id: int, status: str, *, employer_notes: str | None = None) -> dict:
        body: dict[str, Any] = {"status": status}
        if employer_notes is not None:
            body["employerNotes"] = employer_notes
        return self._request("PATCH", f"/api/applications/{int(application_id)}/status", json=body)

    # -------------------- stats / admin --------------------

    def employer_stats(self) -> dict:
        return self._request("GET", "/api/stats/employer")

    def student_stats(self) -> dict:
        return self._request("GET", "/api/stats/student")

    def admin_view(self, name: str) -> Any:
        """One of: users, students, employers, jobs, applications, stats, notifications."""
        return self._request("GET", f"/api/admin/{name}")
