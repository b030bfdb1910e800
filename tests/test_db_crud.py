import pytest
from sqlalchemy.exc import IntegrityError

from backend.careercraft.models import Application, EmailNotification, Job, User


def _employer(db_session) -> User:
    employer = User(
        first_name="Ravi",
        username="crud_employer",
        email="crud_employer@example.com",
        password="hashed",
        role="employer",
        company_name="Crud Co",
    )
    db_session.add(employer)
    db_session.commit()
    db_session.refresh(employer)
    return employer


def test_db_crud_operations_and_relationships(db_session):
    employer = _employer(db_session)
    student = User(
        first_name="Asha",
        last_name="Rao",
        username="crud_student",
        email="crud_student@example.com",
        password="hashed",
        role="student",
    )
    db_session.add(student)
    db_session.commit()

    job = Job(
        employer_id=employer.id,
        title="CRUD Job",
        description="A" * 20,
        skills=["SQL", "Python"],
        location="Pune",
    )
    db_session.add(job)
    db_session.commit()
    db_session.refresh(job)
    assert job.status == "active"
    assert job.experience_years == 0
    assert job.employer.display_name == "Crud Co"
    assert job.skills == ["SQL", "Python"]

    application = Application(job_id=job.id, student_id=student.id)
    db_session.add(application)
    db_session.commit()
    db_session.refresh(application)
    assert application.status == "pending"
    assert application.applied_date is not None
    assert application.job.title == "CRUD Job"
    assert application.student.display_name == "Asha Rao"
    assert [a.id for a in job.applications] == [application.id]
    assert [a.id for a in student.applications] == [application.id]

    # Deleting a job removes its applications.
    db_session.delete(job)
    db_session.commit()
    assert db_session.query(Application).count() == 0


def test_unique_application_per_student_and_job(db_session):
    employer = _employer(db_session)
    student = User(first_name="S", username="dup_student", email="dup@example.com", password="x", role="student")
    job = Job(employer_id=employer.id, title="T", description="D", skills=["Go"], location="L")
    db_session.add_all([student, job])
    db_session.commit()

    db_session.add(Application(job_id=job.id, student_id=student.id))
    db_session.commit()

    db_session.add(Application(job_id=job.id, student_id=student.id))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_invalid_enum_values_are_rejected(db_session):
    db_session.add(User(first_name="A", username="bad_role", email="bad@example.com", password="x", role="admin"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_notification_rows_allow_missing_user(db_session):
    row = EmailNotification(
        email="nobody@example.com",
        subject="Hello",
        message="Body",
        type="registration",
        status="failed",
    )
    db_session.add(row)
    db_session.commit()
    db_session.refresh(row)
    assert row.user_id is None
    assert row.created_at is not None
