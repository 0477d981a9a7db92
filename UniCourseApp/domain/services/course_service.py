"""Domain service functions for the course lifecycle.

These helpers encapsulate business rules (only lecturers and admins create
courses, only a course's creator/lecturer or an admin changes it) and keep the
view layer thin. All mutating operations run inside atomic transactions; the
creator notification is scheduled to run after commit.
"""
import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import QuerySet
from django.shortcuts import get_object_or_404

from UniCourseApp.courses.models import Course
from UniCourseApp.core.access import ensure_can_create_course, ensure_course_manager
from UniCourseApp.core.choices import NotificationType, UserRole
from UniCourseApp.core.errors import DomainError
from UniCourseApp.notifications.dispatch import notify

logger = logging.getLogger(__name__)

User = get_user_model()

LECTURER_ROLES = (UserRole.LECTURER, UserRole.ADMIN)

def _course_lecturer(lecturer_id) -> User:
    """Resolve a course lecturer; only lecturers and admins may teach."""
    lecturer = get_object_or_404(User, pk=lecturer_id)
    if lecturer.role not in LECTURER_ROLES:
        raise DomainError("Course lecturer must have the lecturer role")
    return lecturer

@transaction.atomic
def create_course(actor: User, data: dict[str, Any]) -> Course:
    """Create a course owned by the actor and notify them.

    Args:
        actor: Lecturer or admin creating the course.
        data: Validated payload (title, description, optional lecturer_id).

    Returns:
        The newly created Course instance.
    """
    ensure_can_create_course(actor)
    lecturer_id = data.get("lecturer_id") or actor.pk
    lecturer = _course_lecturer(lecturer_id)
    course = Course.objects.create(
        title=data["title"],
        description=data.get("description", ""),
        lecturer=lecturer,
        created_by=actor,
    )
    logger.info("Course created: %s", course.pk)
    notify(
        actor.pk,
        NotificationType.COURSE,
        "Course Created",
        f'Course "{course.title}" has been created successfully.',
    )
    return course

@transaction.atomic
def update_course(actor: User, course_id, changes: dict[str, Any]) -> Course:
    """Apply a partial update (title, description, lecturer_id)."""
    course = get_object_or_404(Course.objects.select_for_update(), pk=course_id)
    ensure_course_manager(actor, course)
    if "lecturer_id" in changes:
        lecturer_id = changes["lecturer_id"]
        course.lecturer = _course_lecturer(lecturer_id) if lecturer_id else None
    for field in ("title", "description"):
        if field in changes:
            setattr(course, field, changes[field])
    course.save()
    logger.info("Course updated: %s", course.pk)
    return course

@transaction.atomic
def delete_course(actor: User, course_id) -> None:
    """Delete a course together with its enrollments, assignments and submissions."""
    course = get_object_or_404(Course, pk=course_id)
    ensure_course_manager(actor, course)
    course.delete()
    logger.info("Course deleted: %s", course_id)

def list_courses(lecturer_id=None) -> QuerySet[Course]:
    """All courses, newest first, optionally only those of one lecturer."""
    qs = Course.objects.all()
    if lecturer_id:
        qs = qs.for_lecturer(lecturer_id)
    return qs.order_by("-created_at")

def get_course(course_id) -> Course:
    return get_object_or_404(Course, pk=course_id)
