"""Domain service functions for user accounts and roles.

Role rules:
    - A user may pick only the student or lecturer role for themself.
    - Admins may assign any role to anyone, including admin.
"""
import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from rest_framework.exceptions import PermissionDenied

from UniCourseApp.core.access import ensure_admin, ensure_authenticated, is_admin
from UniCourseApp.core.choices import SELF_ASSIGNABLE_ROLES, UserRole

logger = logging.getLogger(__name__)

User = get_user_model()

def ensure_role_assignable(actor: User | None, target_id, role: str) -> None:
    """Raise PermissionDenied unless actor may give `role` to user `target_id`."""
    if is_admin(actor):
        return
    if role not in SELF_ASSIGNABLE_ROLES:
        raise PermissionDenied("Admin role can only be assigned by an admin")
    if target_id is not None and (actor is None or str(actor.pk) != str(target_id)):
        raise PermissionDenied("Cannot change another user's role")

@transaction.atomic
def register(actor: User | None, data: dict[str, Any]) -> User:
    """Create an account; `actor` is the (possibly anonymous) caller."""
    ensure_role_assignable(actor, None, data.get("role", UserRole.STUDENT))
    user = User(
        email=data["email"],
        full_name=data.get("full_name", ""),
        role=data.get("role", UserRole.STUDENT),
        username=data["email"],
    )
    user.set_password(data["password"])
    user.save()
    logger.info("User registered: %s (%s)", user.pk, user.role)
    return user

def list_users(actor: User, role: str | None = None) -> QuerySet[User]:
    ensure_admin(actor)
    qs = User.objects.all()
    if role:
        qs = qs.filter(role=role)
    return qs.order_by("email")

def get_user(actor: User, user_id=None) -> User:
    """A user's profile; non-admins may only read their own."""
    ensure_authenticated(actor)
    user_id = user_id or actor.pk
    if str(user_id) != str(actor.pk) and not is_admin(actor):
        raise PermissionDenied("Cannot view another user's profile")
    return get_object_or_404(User, pk=user_id)

def update_profile(actor: User, changes: dict[str, Any]) -> User:
    ensure_authenticated(actor)
    if "full_name" in changes:
        actor.full_name = changes["full_name"]
        actor.save(update_fields=["full_name"])
        logger.info("Profile updated: %s", actor.pk)
    return actor

@transaction.atomic
def set_role(actor: User, user_id, role: str) -> User:
    ensure_authenticated(actor)
    user = get_object_or_404(User.objects.select_for_update(), pk=user_id)
    ensure_role_assignable(actor, user.pk, role)
    user.role = role
    user.save(update_fields=["role"])
    logger.info("Role set: %s -> %s", user.pk, role)
    return user
