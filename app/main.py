"""Repo-root Uvicorn entrypoint.

Allows running the backend from the repo root:

    uvicorn app.main:app --reload

This simply re-exports the FastAPI app defined in `backend/careercraft/main.py`.
"""

from backend.careercraft.main import app  # noqa: F401  re-export
