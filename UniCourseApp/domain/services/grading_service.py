"""Domain service functions for grading submissions.

Validates:
    grade within 0..assignment.max_grade inclusive.
Grading writes grade, feedback, grader and timestamp in one update and tells
the student their grade; re-grading keeps the original grader and is silent.
"""
import logging
from typing import Any

from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone

from UniCourseApp.courses.models import User
from UniCourseApp.learning.models import Submission
from UniCourseApp.core.access import ensure_course_manager
from UniCourseApp.core.choices import NotificationType
from UniCourseApp.core.validators import validate_grade_range
from UniCourseApp.domain import metrics
from UniCourseApp.notifications.dispatch import notify

logger = logging.getLogger(__name__)

_UNSET = object()

def _locked_submission(submission_id) -> Submission:
    return get_object_or_404(
        Submission.objects.select_for_update().select_related("assignment__course"),
        pk=submission_id,
    )

@transaction.atomic
def grade_submission(actor: User, submission_id, grade: int, feedback: str | None = None) -> Submission:
    """Grade a submission (course lecturer/creator or admin) and notify the student."""
    submission = _locked_submission(submission_id)
    ensure_course_manager(actor, submission)
    validate_grade_range(grade, submission.assignment.max_grade)

    submission.grade = grade
    submission.feedback = feedback
    submission.graded_by = actor
    submission.graded_at = timezone.now()
    submission.save(update_fields=["grade", "feedback", "graded_by", "graded_at", "updated_at"])
    logger.info("Submission graded: %s", submission.pk)

    notify(
        submission.student_id,
        NotificationType.GRADE,
        "Assignment Graded",
        f'Your submission for "{submission.assignment.title}" has been graded. Grade: {submission.grade}',
    )
    return submission

@transaction.atomic
def update_grade(actor: User, submission_id, grade: int, feedback: Any = _UNSET) -> Submission:
    """Change an existing grade; feedback is kept unless given."""
    submission = _locked_submission(submission_id)
    ensure_course_manager(actor, submission)
    validate_grade_range(grade, submission.assignment.max_grade)

    submission.grade = grade
    if feedback is not _UNSET:
        submission.feedback = feedback
    submission.graded_at = timezone.now()
    submission.save(update_fields=["grade", "feedback", "graded_at", "updated_at"])
    logger.info("Grade updated: %s", submission.pk)
    return submission

def get_statistics(actor: User, assignment_id=None, course_id=None) -> dict[str, Any]:
    """Count/average/min/max over graded submissions visible to the actor."""
    qs = Submission.objects.visible_to(actor).graded()
    if assignment_id:
        qs = qs.filter(assignment_id=assignment_id)
    if course_id:
        qs = qs.for_course(course_id)
    return metrics.grade_statistics(qs.values_list("grade", flat=True))
