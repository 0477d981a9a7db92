import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models

from UniCourseApp.core.choices import UserRole

class User(AbstractUser):
    """Account with exactly one system role (admin, lecturer or student)."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=255, blank=True)
    role = models.CharField(max_length=16, choices=UserRole.choices, default=UserRole.STUDENT)
    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __str__(self) -> str:
        return self.full_name or self.email
