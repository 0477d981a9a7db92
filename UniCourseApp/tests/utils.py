from django.db.models import QuerySet
from model_bakery import baker
from rest_framework.test import APIClient

PASSWORD = "pass1234"
TOKEN_URL = "/api/v1/auth/token/"


def make_user(role: str, email: str, full_name: str = ""):
    user = baker.make("users.User", email=email, username=email, role=role, full_name=full_name)
    user.set_password(PASSWORD)
    user.save()
    return user


def login(user) -> APIClient:
    client = APIClient()
    token = client.post(TOKEN_URL, {"email": user.email, "password": PASSWORD}, format="json").data["access"]
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


def call(client: APIClient, service: str, action: str, data: dict | None = None):
    """POST an `{action, data}` body to one service endpoint."""
    return client.post(f"/functions/v1/{service}/", {"action": action, "data": data or {}}, format="json")


def miss_first_lookup(monkeypatch, model) -> None:
    """Make the first `.get()` on `model` miss, as if a concurrent insert raced ours."""
    original = QuerySet.get
    missed = []

    def get(self, *args, **kwargs):
        if self.model is model and not missed:
            missed.append(True)
            raise model.DoesNotExist
        return original(self, *args, **kwargs)

    monkeypatch.setattr(QuerySet, "get", get)
