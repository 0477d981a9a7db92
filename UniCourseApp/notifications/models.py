"""Notification model: an in-app message addressed to one user."""

import uuid

from django.db import models
from django.conf import settings

from UniCourseApp.core.choices import NotificationType

User = settings.AUTH_USER_MODEL

class Notification(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="notifications")
    type = models.CharField(max_length=16, choices=NotificationType.choices, default=NotificationType.SYSTEM)
    title = models.CharField(max_length=255)
    message = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "is_read", "created_at"], name="ix_notification_user_read"),
        ]

    def __str__(self) -> str:
        return f"{self.title} -> {self.user_id}"
