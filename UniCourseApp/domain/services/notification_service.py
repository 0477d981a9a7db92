"""Domain service functions for in-app notifications."""
import logging
from typing import Any, Iterable

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import QuerySet
from django.shortcuts import get_object_or_404

from UniCourseApp.notifications.models import Notification
from UniCourseApp.core.access import ensure_authenticated

logger = logging.getLogger(__name__)

User = get_user_model()

def send(actor: User, data: dict[str, Any]) -> Notification:
    """Store one notification addressed to `data["user_id"]`."""
    ensure_authenticated(actor)
    recipient = get_object_or_404(User, pk=data["user_id"])
    notification = Notification.objects.create(
        user=recipient,
        type=data["type"],
        title=data["title"],
        message=data["message"],
    )
    logger.info("Notification sent: %s -> %s", notification.pk, recipient.pk)
    return notification

@transaction.atomic
def send_batch(user_ids: Iterable, type: str, title: str, message: str) -> list[Notification]:
    """Store the same notification for many users in a single insert."""
    notifications = Notification.objects.bulk_create(
        Notification(user_id=uid, type=type, title=title, message=message) for uid in user_ids
    )
    logger.info("Notifications sent: type=%s count=%d", type, len(notifications))
    return notifications

def list_for_user(actor: User, unread_only: bool = False) -> QuerySet[Notification]:
    ensure_authenticated(actor)
    qs = Notification.objects.filter(user=actor)
    if unread_only:
        qs = qs.filter(is_read=False)
    return qs.order_by("-created_at")

def unread_count(actor: User) -> int:
    return Notification.objects.filter(user=actor, is_read=False).count()

def mark_read(actor: User, notification_id) -> Notification:
    ensure_authenticated(actor)
    notification = get_object_or_404(Notification, pk=notification_id, user=actor)
    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=["is_read"])
    return notification

def mark_all_read(actor: User) -> int:
    """Mark every unread notification of the actor as read; returns how many changed."""
    ensure_authenticated(actor)
    return Notification.objects.filter(user=actor, is_read=False).update(is_read=True)

def delete(actor: User, notification_id) -> None:
    ensure_authenticated(actor)
    get_object_or_404(Notification, pk=notification_id, user=actor).delete()
    logger.info("Notification deleted: %s", notification_id)
