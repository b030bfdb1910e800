#!/usr/bin/env python3
"""
One-off migration for databases created by earlier versions of the portal.

- creates any missing tables
- adds the (job_id, student_id) unique index if an old schema lacks it
- rewrites job skills stored as strings into the JSON list format

Safe to run repeatedly.
"""

import json
import sys
from pathlib import Path

from sqlalchemy import inspect, text

# Make `backend.careercraft` importable when run as a plain script.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from backend.careercraft.database import engine, init_db  # noqa: E402
from backend.careercraft.utils.validation import normalize_skills  # noqa: E402

UNIQUE_APPLICATION_INDEX = "uq_applications_job_student"


def ensure_unique_application_index(target_engine) -> bool:  # noqa: ANN001
    inspector = inspect(target_engine)
    existing_index_names = {i.get("name") for i in inspector.get_indexes("applications") if i.get("name")}
    existing_unique_names = {
        u.get("name") for u in inspector.get_unique_constraints("applications") if u.get("name")
    }
    unique_column_sets = [
        set(u.get("column_names") or []) for u in inspector.get_unique_constraints("applications")
    ] + [
        set(i.get("column_names") or []) for i in inspector.get_indexes("applications") if i.get("unique")
    ]
    if (
        UNIQUE_APPLICATION_INDEX in existing_index_names
        or UNIQUE_APPLICATION_INDEX in existing_unique_names
        or {"job_id", "student_id"} in unique_column_sets
    ):
        return False

    with target_engine.begin() as conn:
        conn.execute(text(
            f"CREATE UNIQUE INDEX {UNIQUE_APPLICATION_INDEX} ON applications (job_id, student_id)"
        ))
    return True


def normalize_stored_skills(target_engine) -> int:  # noqa: ANN001
    """Rewrite every jobs.skills value that is not already a clean JSON list."""
    updated = 0
    with target_engine.begin() as conn:
        rows = conn.execute(text("SELECT id, skills FROM jobs")).fetchall()
        for job_id, raw in rows:
            skills = normalize_skills(raw)
            encoded = json.dumps(skills)
            if isinstance(raw, str):
                try:
                    if json.loads(raw) == skills:
                        continue
                except ValueError:
                    pass
            elif raw == skills:
                continue
            conn.execute(
                text("UPDATE jobs SET skills = :skills WHERE id = :id"),
                {"skills": encoded, "id": job_id},
            )
            updated += 1
    return updated


def migrate() -> bool:
    print("Initializing database with all models...")
    init_db()
    print("✓ Tables created/verified")

    try:
        if ensure_unique_application_index(engine):
            print(f"✓ Added unique index: {UNIQUE_APPLICATION_INDEX}")
        else:
            print("✓ Unique (job_id, student_id) index already exists")
    except Exception as e:
        # Existing duplicate rows must be resolved by hand before the index can be built.
        print(f"✗ Could not add unique index {UNIQUE_APPLICATION_INDEX}: {e}")
        return False

    count = normalize_stored_skills(engine)
    print(f"✓ Normalized skills on {count} job(s)")
    return True


if __name__ == "__main__":
    success = migrate()
    sys.exit(0 if success else 1)
