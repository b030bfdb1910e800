from conftest import apply, post_job


def test_employer_posts_job(client, make_user):
    _, headers = make_user("employer", "acme", companyName="Acme Corp")

    r = post_job(client, headers, skills=["SQL", " python ", "sql", ""])
    assert r.status_code == 201, r.text
    data = r.json()
    assert isinstance(data["jobId"], int)
    job = data["job"]
    assert job["status"] == "active"
    assert job["skills"] == ["SQL", "python"]
    assert job["companyName"] == "Acme Corp"


def test_student_cannot_create_job(client, make_user):
    _, headers = make_user("student", "asha")
    r = post_job(client, headers)
    assert r.status_code == 403, r.text


def test_create_job_requires_token(client):
    r = post_job(client, {})
    assert r.status_code == 401, r.text


def test_job_requires_title_description_location(client, make_user):
    _, headers = make_user("employer", "acme")
    r = post_job(client, headers, title="   ")
    assert r.status_code == 400, r.text
    assert r.json()["message"] == "Title, description, and location are required"


def test_job_requires_at_least_one_skill(client, make_user):
    _, headers = make_user("employer", "acme")
    r = post_job(client, headers, skills=[" ", ""])
    assert r.status_code == 400, r.text
    assert r.json()["message"] == "At least one skill is required"


def test_job_rejects_out_of_range_experience(client, make_user):
    _, headers = make_user("employer", "acme")
    r = post_job(client, headers, experienceMonths=12)
    assert r.status_code == 400, r.text


def test_list_jobs_shows_active_jobs_newest_first(client, make_user):
    _, employer = make_user("employer", "acme", companyName="Acme Corp")
    _, student = make_user("student", "asha")

    first = post_job(client, employer, title="First").json()["jobId"]
    second = post_job(client, employer, title="Second").json()["jobId"]
    closed = post_job(client, employer, title="Closed").json()["jobId"]
    r = client.patch(f"/api/jobs/{closed}/status", json={"status": "closed"}, headers=employer)
    assert r.status_code == 200, r.text

    r = client.get("/api/jobs", headers=student)
    assert r.status_code == 200, r.text
    ids = [j["id"] for j in r.json()]
    assert ids == [second, first]
    assert r.json()[0]["employerName"] == "Acme Corp"


def test_employer_name_falls_back_to_person_name(client, make_user):
    _, employer = make_user("employer", "solo", firstName="Sam", lastName="Lee", companyName="Solo")
    post_job(client, employer)

    from backend.careercraft.models import User

    r = client.get("/api/jobs", headers=employer)
    assert r.json()[0]["employerName"] == "Solo"
    assert User(first_name="Sam", last_name="Lee").display_name == "Sam Lee"


def test_employer_jobs_include_live_application_counts(client, make_user):
    _, employer = make_user("employer", "acme")
    _, s1 = make_user("student", "asha")
    _, s2 = make_user("student", "bala")

    busy = post_job(client, employer, title="Busy").json()["jobId"]
    quiet = post_job(client, employer, title="Quiet").json()["jobId"]
    app_id = apply(client, s1, busy).json()["applicationId"]
    apply(client, s2, busy)
    client.patch(f"/api/applications/{app_id}/status", json={"status": "accepted"}, headers=employer)

    r = client.get("/api/jobs/employer", headers=employer)
    assert r.status_code == 200, r.text
    by_id = {j["id"]: j for j in r.json()}
    assert by_id[busy]["applicationCount"] == 2
    assert by_id[busy]["pendingApplications"] == 1
    assert by_id[busy]["acceptedApplications"] == 1
    assert by_id[busy]["rejectedApplications"] == 0
    assert by_id[quiet]["applicationCount"] == 0


def test_employer_jobs_only_lists_own_jobs(client, make_user):
    _, acme = make_user("employer", "acme")
    _, globex = make_user("employer", "globex")
    post_job(client, acme, title="Acme job")

    r = client.get("/api/jobs/employer", headers=globex)
    assert r.status_code == 200, r.text
    assert r.json() == []


def test_get_job_hides_closed_jobs_from_students(client, make_user):
    _, employer = make_user("employer", "acme")
    _, student = make_user("student", "asha")
    job_id = post_job(client, employer).json()["jobId"]

    assert client.get(f"/api/jobs/{job_id}", headers=student).status_code == 200
    client.patch(f"/api/jobs/{job_id}/status", json={"status": "closed"}, headers=employer)

    assert client.get(f"/api/jobs/{job_id}", headers=student).status_code == 404
    r = client.get(f"/api/jobs/{job_id}", headers=employer)
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "closed"


def test_only_owner_can_change_job_status(client, make_user):
    _, acme = make_user("employer", "acme")
    _, globex = make_user("employer", "globex")
    job_id = post_job(client, acme).json()["jobId"]

    r = client.patch(f"/api/jobs/{job_id}/status", json={"status": "closed"}, headers=globex)
    assert r.status_code == 403, r.text

    r = client.patch(f"/api/jobs/{job_id}/status", json={"status": "archived"}, headers=acme)
    assert r.status_code == 400, r.text

    r = client.patch("/api/jobs/9999/status", json={"status": "closed"}, headers=acme)
    assert r.status_code == 404, r.text
