"""Domain service functions for assignments.

Creating an assignment notifies every actively-enrolled student of the
course through one batched notification job scheduled after commit.
"""
import logging
from typing import Any

from django.db import transaction
from django.db.models import QuerySet
from django.shortcuts import get_object_or_404

from UniCourseApp.courses.models import Course, Enrollment, User
from UniCourseApp.learning.models import Assignment, Submission
from UniCourseApp.core.access import ensure_course_manager
from UniCourseApp.core.choices import NotificationType
from UniCourseApp.core.errors import DomainError
from UniCourseApp.notifications.dispatch import notify_many

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "due_date", "max_grade")

@transaction.atomic
def create_assignment(actor: User, data: dict[str, Any]) -> Assignment:
    """Create an assignment (course lecturer/creator or admin) and announce it."""
    course = get_object_or_404(Course, pk=data["course_id"])
    ensure_course_manager(actor, course)
    assignment = Assignment.objects.create(
        course=course,
        title=data["title"],
        description=data.get("description", ""),
        due_date=data["due_date"],
        max_grade=data.get("max_grade") or 100,
        created_by=actor,
    )
    logger.info("Assignment created: %s", assignment.pk)

    student_ids = list(
        Enrollment.objects.active().filter(course=course).values_list("student_id", flat=True)
    )
    notify_many(
        student_ids,
        NotificationType.ASSIGNMENT,
        "New Assignment",
        f'New assignment "{assignment.title}" has been posted.',
    )
    return assignment

@transaction.atomic
def update_assignment(actor: User, assignment_id, changes: dict[str, Any]) -> Assignment:
    assignment = get_object_or_404(
        Assignment.objects.select_for_update().select_related("course"), pk=assignment_id
    )
    ensure_course_manager(actor, assignment)
    new_max = changes.get("max_grade")
    if new_max is not None and Submission.objects.filter(assignment=assignment, grade__gt=new_max).exists():
        raise DomainError(f"Existing grades exceed max_grade {new_max}")
    for field in UPDATABLE_FIELDS:
        if field in changes:
            setattr(assignment, field, changes[field])
    assignment.save()
    logger.info("Assignment updated: %s", assignment.pk)
    return assignment

@transaction.atomic
def delete_assignment(actor: User, assignment_id) -> None:
    assignment = get_object_or_404(Assignment.objects.select_related("course"), pk=assignment_id)
    ensure_course_manager(actor, assignment)
    assignment.delete()
    logger.info("Assignment deleted: %s", assignment_id)

def list_assignments(course_id=None) -> QuerySet[Assignment]:
    """Assignments ordered by due date (soonest first), optionally for one course."""
    qs = Assignment.objects.all()
    if course_id:
        qs = qs.for_course(course_id)
    return qs.order_by("due_date")

def get_assignment(assignment_id) -> Assignment:
    return get_object_or_404(Assignment, pk=assignment_id)
