import pytest

from conftest import apply, post_job, register


def _notifications(db_session):
    from backend.careercraft.models import EmailNotification

    db_session.expire_all()
    return db_session.query(EmailNotification).order_by(EmailNotification.id).all()


def test_registration_succeeds_and_logs_failure_without_smtp(client, db_session):
    r = register(client, role="student", username="asha")
    assert r.status_code == 201, r.text

    rows = _notifications(db_session)
    assert len(rows) == 1
    assert rows[0].type == "registration"
    assert rows[0].status == "failed"
    assert rows[0].email == "asha@example.com"
    assert rows[0].user_id == r.json()["userId"]
    assert "not configured" in rows[0].message
    assert rows[0].sent_at is None


def test_registration_logs_sent_email(client, db_session, monkeypatch):
    from backend.careercraft.services import notifications

    outbox = []
    monkeypatch.setattr(notifications, "send_email", lambda **kwargs: outbox.append(kwargs))

    register(client, role="employer", username="acme")

    assert len(outbox) == 1
    assert outbox[0]["to_email"] == "acme@example.com"
    assert outbox[0]["subject"] == "Welcome to CareerCraft"
    rows = _notifications(db_session)
    assert rows[0].status == "sent"
    assert rows[0].sent_at is not None


def test_status_change_notifies_student(client, make_user, db_session, monkeypatch):
    from backend.careercraft.services import notifications

    _, employer = make_user("employer", "acme", companyName="Acme Corp")
    _, student = make_user("student", "asha")
    job_id = post_job(client, employer, title="QA Engineer").json()["jobId"]
    app_id = apply(client, student, job_id).json()["applicationId"]

    outbox = []
    monkeypatch.setattr(notifications, "send_email", lambda **kwargs: outbox.append(kwargs))
    r = client.patch(
        f"/api/applications/{app_id}/status",
        json={"status": "accepted", "employerNotes": "Start Monday"},
        headers=employer,
    )
    assert r.status_code == 200, r.text

    assert len(outbox) == 1
    assert outbox[0]["to_email"] == "asha@example.com"
    assert outbox[0]["subject"] == "Application accepted: QA Engineer"
    assert "Acme Corp" in outbox[0]["body"]
    assert "Start Monday" in outbox[0]["body"]
    assert _notifications(db_session)[-1].type == "status_update"


def test_mail_server_errors_never_fail_the_request(client, make_user, db_session, monkeypatch):
    from backend.careercraft.services import notifications

    def boom(**kwargs):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(notifications, "send_email", boom)
    _, employer = make_user("employer", "acme")
    _, student = make_user("student", "asha")
    job_id = post_job(client, employer).json()["jobId"]
    app_id = apply(client, student, job_id).json()["applicationId"]

    r = client.patch(f"/api/applications/{app_id}/status", json={"status": "rejected"}, headers=employer)
    assert r.status_code == 200, r.text
    rows = _notifications(db_session)
    assert [n.status for n in rows] == ["failed", "failed", "failed"]
    assert rows[-1].message == "smtp down"


def test_deliver_returns_outcome(app, db_session, monkeypatch):
    from backend.careercraft.services import notifications

    message = notifications.OutboundEmail(
        user_id=None, to_email="x@example.com", subject="Hi", body="Hello", kind="registration"
    )
    assert notifications.deliver(message) == "failed"

    monkeypatch.setattr(notifications, "send_email", lambda **kwargs: None)
    assert notifications.deliver(message) == "sent"
    assert [n.status for n in _notifications(db_session)] == ["failed", "sent"]


def test_notify_safely_absorbs_queueing_errors():
    from backend.careercraft.services import notifications

    def broken(message):
        raise RuntimeError("queue full")

    message = notifications.OutboundEmail(
        user_id=1, to_email="x@example.com", subject="Hi", body="Hello", kind="registration"
    )
    notifications.notify_safely(broken, message)
    notifications.notify_safely(None, message)


def test_send_email_requires_configuration(monkeypatch):
    from backend.careercraft import config
    from backend.careercraft.services.emailer import EmailNotConfigured, send_email

    monkeypatch.setattr(config, "SMTP_HOST", "")
    with pytest.raises(EmailNotConfigured):
        send_email(to_email="x@example.com", subject="s", body="b")
