"""API tests: routing, auth dependencies, response and error shapes."""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError, OperationFailure

from jobbee.api import deps
from jobbee.database.query import QueryCastError
from jobbee.errors import ErrorHandler
from jobbee.main import app
from jobbee.services.auth_service import AuthService
from jobbee.services.job_service import JobService
from jobbee.services.security import create_access_token
from jobbee.services.user_service import UserService


@pytest.fixture
def job_service():
    return MagicMock(spec=JobService)


@pytest.fixture
def user_service():
    return MagicMock(spec=UserService)


@pytest.fixture
def auth_service():
    return MagicMock(spec=AuthService)


@pytest.fixture
def client(job_service, user_service, auth_service):
    # The lifespan does not run here, so no database is attached to app.state
    app.dependency_overrides[deps.get_db] = lambda: MagicMock()
    app.dependency_overrides[deps.get_job_service] = lambda: job_service
    app.dependency_overrides[deps.get_user_service] = lambda: user_service
    app.dependency_overrides[deps.get_auth_service] = lambda: auth_service
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def login_as(user):
    app.dependency_overrides[deps.get_current_user] = lambda: user


def test_list_jobs_passes_nested_params(client, job_service):
    job_id = ObjectId()
    job_service.list_jobs.return_value = [{"_id": job_id, "title": "Python Developer"}]

    resp = client.get("/api/v1/jobs", params={"salary[gte]": "50", "q": "remote-engineer", "page": "2"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "results": 1, "data": [{"_id": str(job_id), "title": "Python Developer"}]}
    job_service.list_jobs.assert_called_once_with({"salary": {"gte": "50"}, "q": "remote-engineer", "page": "2"})


def test_unknown_route(client):
    resp = client.get("/api/v1/nope")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "/api/v1/nope route not found"}


def test_new_job_requires_login(client):
    resp = client.post("/api/v1/job/new", json={})

    assert resp.status_code == 401
    assert resp.json()["message"] == "Login first to access this resource."


def test_new_job_forbidden_for_candidates(client, candidate):
    login_as(candidate)

    resp = client.post("/api/v1/job/new", json={})

    assert resp.status_code == 403
    assert resp.json()["message"] == "Role(user) is not allowed to access this resource."


def test_new_job_validation_error(client, employer):
    login_as(employer)

    resp = client.post("/api/v1/job/new", json={"title": "x" * 101})

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert isinstance(resp.json()["message"], list)


def test_new_job_created(client, job_service, employer):
    login_as(employer)
    job_service.create_job.return_value = {"_id": ObjectId(), "title": "Python Developer", "user": employer["_id"]}

    resp = client.post("/api/v1/job/new", json={
        "title": "Python Developer",
        "description": "Build APIs",
        "address": "10001",
        "company": "Acme",
        "industry": ["Banking"],
        "jobType": "Permanent",
        "minEducation": "Masters",
        "experience": "5 Years+",
        "salary": 100000,
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Job Created."
    assert body["data"]["user"] == str(employer["_id"])


def test_invalid_object_id_is_404(client, job_service):
    from bson.errors import InvalidId
    job_service.get_job.side_effect = InvalidId("bad")

    resp = client.get("/api/v1/job/not-an-id/some-slug")

    assert resp.status_code == 404
    assert resp.json()["message"] == "Resource not found. Invalid: _id"


def test_error_handler_status_is_used(client, job_service, employer):
    login_as(employer)
    job_service.delete_job.side_effect = ErrorHandler("Job not found", 404)

    resp = client.delete(f"/api/v1/job/{ObjectId()}")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Job not found"}


def test_bad_filter_value_is_client_error(client, job_service):
    job_service.list_jobs.side_effect = QueryCastError("salary", "lots")

    resp = client.get("/api/v1/jobs", params={"salary[gt]": "lots"})

    assert resp.status_code == 400


def test_backend_rejected_query_is_client_error(client, job_service):
    job_service.list_jobs.side_effect = OperationFailure("text index required for $text query", code=27)

    resp = client.get("/api/v1/jobs", params={"q": "python"})

    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_unexpected_error_is_500(client, job_service):
    job_service.list_jobs.side_effect = RuntimeError("boom")

    resp = client.get("/api/v1/jobs")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal Server Error."}


def test_stats_empty(client, job_service):
    job_service.job_stats.return_value = []

    resp = client.get("/api/v1/stats/python")

    assert resp.status_code == 200
    assert resp.json() == {"success": False, "message": "No stats found for - python"}


def test_apply_job_upload(client, job_service, candidate):
    login_as(candidate)
    job_service.apply_job.return_value = "John_Smith_1.pdf"
    job_id = str(ObjectId())

    resp = client.put(f"/api/v1/job/{job_id}/apply", files={"file": ("cv.pdf", b"%PDF-1.4", "application/pdf")})

    assert resp.status_code == 200
    assert resp.json()["data"] == "John_Smith_1.pdf"
    job_service.apply_job.assert_called_once_with(job_id, candidate, "cv.pdf", b"%PDF-1.4")


def test_register_sets_token_cookie(client, auth_service):
    user_id = ObjectId()
    auth_service.register.return_value = {"_id": user_id, "role": "user"}

    resp = client.post("/api/v1/register", json={"name": "Ann", "email": "ann@example.com", "password": "password1"})

    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.cookies.get("token") == resp.json()["token"]


def test_register_duplicate_email(client, auth_service):
    auth_service.register.side_effect = DuplicateKeyError(
        "E11000 duplicate key", code=11000, details={"keyValue": {"email": "ann@example.com"}}
    )

    resp = client.post("/api/v1/register", json={"name": "Ann", "email": "ann@example.com", "password": "password1"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Duplicate email entered."


def test_logout_clears_cookie(client, candidate):
    login_as(candidate)

    resp = client.get("/api/v1/logout")

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Logged out successfully."}
    assert "token=none" in resp.headers["set-cookie"]


def test_admin_lists_users(client, user_service, admin):
    login_as(admin)
    user_service.list_users.return_value = [{"_id": ObjectId(), "name": "Ann"}]

    resp = client.get("/api/v1/users", params={"role": "employeer", "fields": "name"})

    assert resp.status_code == 200
    assert resp.json()["results"] == 1
    user_service.list_users.assert_called_once_with({"role": "employeer", "fields": "name"})


def test_users_forbidden_for_employer(client, employer):
    login_as(employer)

    assert client.get("/api/v1/users").status_code == 403


def test_bearer_token_resolves_user(client, candidate):
    db = MagicMock()
    db.users.find_one.return_value = candidate
    app.dependency_overrides[deps.get_db] = lambda: db
    token = create_access_token(str(candidate["_id"]))

    resp = client.get("/api/v1/logout", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    assert db.users.find_one.call_args.args[0] == {"_id": candidate["_id"]}


def test_invalid_bearer_token(client):
    app.dependency_overrides[deps.get_db] = lambda: MagicMock()

    resp = client.get("/api/v1/logout", headers={"Authorization": "Bearer not.a.token"})

    assert resp.status_code == 401
    assert resp.json()["message"] == "JSON Web token is invalid. Try Again!"
