import pytest
from rest_framework.test import APIClient

from UniCourseApp.users.models import User
from UniCourseApp.tests.utils import PASSWORD, TOKEN_URL, call, login

pytestmark = pytest.mark.django_db

REGISTER_URL = "/api/v1/auth/register/"


def register(client, **fields):
    payload = {"email": "new@example.com", "password": "longenough", "full_name": "New Person", **fields}
    return client.post(REGISTER_URL, payload, format="json")


def test_register_defaults_to_student():
    resp = register(APIClient())
    assert resp.status_code == 201
    assert resp.data["role"] == "student"
    assert "password" not in resp.data
    user = User.objects.get(email="new@example.com")
    assert user.check_password("longenough")


def test_register_as_lecturer():
    resp = register(APIClient(), role="lecturer")
    assert resp.status_code == 201
    assert resp.data["role"] == "lecturer"


def test_anonymous_cannot_register_admin():
    resp = register(APIClient(), role="admin")
    assert resp.status_code == 403
    assert not User.objects.filter(email="new@example.com").exists()


def test_admin_can_register_admin(admin):
    resp = register(login(admin), role="admin")
    assert resp.status_code == 201
    assert resp.data["role"] == "admin"


def test_register_rejects_short_password():
    resp = register(APIClient(), password="short")
    assert resp.status_code == 400
    assert "password" in resp.data


def test_register_rejects_duplicate_email(student):
    resp = register(APIClient(), email=student.email)
    assert resp.status_code == 400
    assert "email" in resp.data


def test_token_login(student):
    resp = APIClient().post(TOKEN_URL, {"email": student.email, "password": PASSWORD}, format="json")
    assert resp.status_code == 200
    assert "access" in resp.data and "refresh" in resp.data


def test_token_login_wrong_password(student):
    resp = APIClient().post(TOKEN_URL, {"email": student.email, "password": "nope"}, format="json")
    assert resp.status_code == 401


def test_get_own_profile(student):
    resp = call(login(student), "user-service", "get")
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == student.email


def test_cannot_get_other_profile(student, other_student):
    resp = call(login(student), "user-service", "get", {"user_id": str(other_student.pk)})
    assert resp.status_code == 403


def test_admin_gets_any_profile(admin, student):
    resp = call(login(admin), "user-service", "get", {"user_id": str(student.pk)})
    assert resp.json()["user"]["full_name"] == "Sam Student"


def test_update_profile(student):
    resp = call(login(student), "user-service", "update-profile", {"full_name": "Samantha Student"})
    assert resp.status_code == 200
    student.refresh_from_db()
    assert student.full_name == "Samantha Student"


def test_user_switches_own_role_to_lecturer(student):
    resp = call(login(student), "user-service", "set-role", {"user_id": str(student.pk), "role": "lecturer"})
    assert resp.status_code == 200
    student.refresh_from_db()
    assert student.role == "lecturer"


def test_user_cannot_promote_self_to_admin(student):
    resp = call(login(student), "user-service", "set-role", {"user_id": str(student.pk), "role": "admin"})
    assert resp.status_code == 403
    student.refresh_from_db()
    assert student.role == "student"


def test_user_cannot_change_someone_elses_role(student, other_student):
    resp = call(login(student), "user-service", "set-role", {"user_id": str(other_student.pk), "role": "lecturer"})
    assert resp.status_code == 403


def test_admin_assigns_admin_role(admin, lecturer):
    resp = call(login(admin), "user-service", "set-role", {"user_id": str(lecturer.pk), "role": "admin"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "admin"


def test_list_users_is_admin_only(admin, lecturer, student):
    assert call(login(student), "user-service", "list").status_code == 403

    resp = call(login(admin), "user-service", "list", {"role": "student"})
    assert [u["email"] for u in resp.json()["users"]] == [student.email]
