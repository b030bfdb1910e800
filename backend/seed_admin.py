#!/usr/bin/env python3
"""
Seed Admin Account

Creates the administrator used by the admin panel. Credentials come from
ADMIN_USERNAME / ADMIN_EMAIL / ADMIN_PASSWORD.

Usage:
    ADMIN_PASSWORD=... python backend/seed_admin.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from backend.careercraft import config  # noqa: E402
from backend.careercraft import database  # noqa: E402
from backend.careercraft.models.admin import Admin  # noqa: E402
from backend.careercraft.utils.security import hash_password  # noqa: E402


def seed_admin(db, *, username: str, email: str, password: str) -> tuple[Admin, bool]:  # noqa: ANN001
    """Create the admin if missing. Returns (admin, created)."""
    existing = db.query(Admin).filter(Admin.username == username).first()
    if existing:
        return existing, False

    admin = Admin(username=username, email=email, password=hash_password(password))
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin, True


def main() -> int:
    if not config.ADMIN_PASSWORD:
        print("ADMIN_PASSWORD is not set; refusing to create an admin without a password.")
        return 1

    database.init_db()
    db = database.SessionLocal()
    try:
        admin, created = seed_admin(
            db,
            username=config.ADMIN_USERNAME,
            email=config.ADMIN_EMAIL,
            password=config.ADMIN_PASSWORD,
        )
    finally:
        db.close()

    if created:
        print("Admin created successfully!")
    else:
        print(f"Admin already exists: {admin.username}")
    print(f"  Username: {admin.username}")
    print(f"  ID: {admin.id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
