"""Domain service functions for student submissions.

Rules:
    - Only students actively enrolled in the assignment's course submit.
    - One submission per (student, assignment), enforced by the unique constraint.
    - A graded submission is frozen for its student.
"""
import logging
from typing import Any

from django.db import transaction
from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from rest_framework.exceptions import PermissionDenied

from UniCourseApp.courses.models import Enrollment, User
from UniCourseApp.learning.models import Assignment, Submission
from UniCourseApp.core.access import ensure_authenticated, ensure_submission_owner
from UniCourseApp.core.choices import NotificationType
from UniCourseApp.core.errors import DomainError
from UniCourseApp.notifications.dispatch import notify

logger = logging.getLogger(__name__)

def _ensure_enrolled(student: User, assignment: Assignment) -> None:
    if not Enrollment.objects.active().filter(course=assignment.course, student=student).exists():
        raise PermissionDenied("Not enrolled in course")

@transaction.atomic
def create_submission(actor: User, data: dict[str, Any]) -> Submission:
    """Submit an answer to an assignment and notify the course creator.

    Raises:
        PermissionDenied: Actor is not actively enrolled in the course.
        DomainError: The actor already submitted this assignment.
    """
    ensure_authenticated(actor)
    assignment = get_object_or_404(Assignment.objects.select_related("course"), pk=data["assignment_id"])
    _ensure_enrolled(actor, assignment)

    submission, created = Submission.objects.get_or_create(
        student=actor,
        assignment=assignment,
        defaults={
            "content": data.get("content", ""),
            "file_url": data.get("file_url"),
        },
    )
    if not created:
        raise DomainError("Assignment already submitted")

    logger.info("Submission created: %s", submission.pk)
    notify(
        assignment.course.created_by_id,
        NotificationType.SUBMISSION,
        "New Submission",
        f'A student has submitted assignment "{assignment.title}".',
    )
    return submission

@transaction.atomic
def update_submission(actor: User, submission_id, changes: dict[str, Any]) -> Submission:
    """Edit content / file_url of the actor's own ungraded submission."""
    submission = get_object_or_404(Submission.objects.select_for_update(), pk=submission_id)
    ensure_submission_owner(actor, submission)
    if submission.is_graded:
        raise DomainError("Submission has been graded and can no longer be changed")
    for field in ("content", "file_url"):
        if field in changes:
            setattr(submission, field, changes[field])
    submission.save()
    logger.info("Submission updated: %s", submission.pk)
    return submission

def list_submissions(actor: User, assignment_id=None, student_id=None) -> QuerySet[Submission]:
    """Submissions visible to the actor, most recent first."""
    qs = Submission.objects.visible_to(actor)
    if assignment_id:
        qs = qs.filter(assignment_id=assignment_id)
    if student_id:
        qs = qs.filter(student_id=student_id)
    return qs.order_by("-submitted_at")

def get_submission(actor: User, submission_id) -> Submission:
    return get_object_or_404(Submission.objects.visible_to(actor), pk=submission_id)
