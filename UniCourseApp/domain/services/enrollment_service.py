"""Domain service functions for enrolling students in courses.

Enrollment uniqueness rests on the (student, course) unique constraint: the
row is fetched-or-created under a lock, so two concurrent enroll requests for
the same pair end with exactly one row and one of them sees the duplicate.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import QuerySet
from django.shortcuts import get_object_or_404

from UniCourseApp.courses.models import Course, Enrollment
from UniCourseApp.core.access import ensure_authenticated, ensure_course_manager, ensure_self_or_course_manager
from UniCourseApp.core.choices import EnrollmentStatus, NotificationType, UserRole
from UniCourseApp.core.errors import DomainError
from UniCourseApp.notifications.dispatch import notify

logger = logging.getLogger(__name__)

User = get_user_model()

@transaction.atomic
def enroll(actor: User, course_id, student_id=None) -> Enrollment:
    """Enroll a student (the actor by default) in a course.

    Rules:
        - Students enroll themselves; the course lecturer/creator or an admin may enroll anyone.
        - Only users with the student role can be enrolled.
        - An active enrollment for the pair is a duplicate; an inactive one is reactivated.

    Raises:
        DomainError: Student already enrolled, or target user is not a student.
    """
    ensure_authenticated(actor)
    course = get_object_or_404(Course, pk=course_id)
    student = get_object_or_404(User, pk=student_id or actor.pk)
    ensure_self_or_course_manager(actor, student.pk, course)
    if student.role != UserRole.STUDENT:
        raise DomainError("Only students can be enrolled in a course")

    enrollment, created = Enrollment.objects.select_for_update().get_or_create(
        student=student,
        course=course,
        defaults={"status": EnrollmentStatus.ACTIVE},
    )
    if not created:
        if enrollment.status == EnrollmentStatus.ACTIVE:
            raise DomainError("Student already enrolled in this course")
        enrollment.status = EnrollmentStatus.ACTIVE
        enrollment.save(update_fields=["status"])

    logger.info("Student enrolled: %s", enrollment.pk)
    notify(
        student.pk,
        NotificationType.ENROLLMENT,
        "Enrollment Successful",
        f'You have been enrolled in "{course.title or "the course"}".',
    )
    return enrollment

@transaction.atomic
def unenroll(actor: User, course_id, student_id=None) -> None:
    """Remove the (student, course) enrollment if present."""
    ensure_authenticated(actor)
    course = get_object_or_404(Course, pk=course_id)
    student_id = student_id or actor.pk
    ensure_self_or_course_manager(actor, student_id, course)
    Enrollment.objects.filter(course=course, student_id=student_id).delete()
    logger.info("Student unenrolled: %s", student_id)

@transaction.atomic
def update_status(actor: User, enrollment_id, status: str) -> Enrollment:
    """Change an enrollment's status (course lecturer/creator or admin)."""
    enrollment = get_object_or_404(
        Enrollment.objects.select_for_update().select_related("course"), pk=enrollment_id
    )
    ensure_course_manager(actor, enrollment)
    enrollment.status = status
    enrollment.save(update_fields=["status"])
    logger.info("Enrollment status updated: %s", enrollment.pk)
    return enrollment

def list_enrollments(
    actor: User, student_id=None, course_id=None, status: str | None = None
) -> QuerySet[Enrollment]:
    """Enrollments visible to the actor with their course, newest first."""
    qs = Enrollment.objects.visible_to(actor).select_related("course")
    if student_id:
        qs = qs.filter(student_id=student_id)
    if course_id:
        qs = qs.filter(course_id=course_id)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-enrolled_at")
