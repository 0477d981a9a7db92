"""Role & row access helpers applied by domain services."""

from typing import Any

from rest_framework.exceptions import PermissionDenied

from UniCourseApp.courses.models import Course, Enrollment
from UniCourseApp.learning.models import Assignment, Submission
from UniCourseApp.core.choices import UserRole


def course_from(obj: Any) -> Course | None:
    if obj is None:
        return None
    if isinstance(obj, Course):
        return obj
    if isinstance(obj, (Assignment, Enrollment)):
        return obj.course
    if isinstance(obj, Submission):
        return obj.assignment.course
    return getattr(obj, "course", None)


def is_authenticated(user) -> bool:
    return bool(user and user.is_authenticated)


def is_admin(user) -> bool:
    return is_authenticated(user) and user.role == UserRole.ADMIN


def is_lecturer(user) -> bool:
    return is_authenticated(user) and user.role == UserRole.LECTURER


def manages_course(user, course: Course | None) -> bool:
    """User created or teaches the course."""
    if not (is_authenticated(user) and course):
        return False
    return user.pk in (course.created_by_id, course.lecturer_id)


def ensure_authenticated(user) -> None:
    if not is_authenticated(user):
        raise PermissionDenied("Authentication required")


def ensure_admin(user) -> None:
    if not is_admin(user):
        raise PermissionDenied("Admin role required")


def ensure_can_create_course(user) -> None:
    """Only lecturers and admins create courses."""
    if not (is_lecturer(user) or is_admin(user)):
        raise PermissionDenied("Lecturer role required")


def ensure_course_manager(user, obj: Any) -> None:
    """Raise PermissionDenied unless user manages the object's course or is an admin."""
    if is_admin(user):
        return
    if not manages_course(user, course_from(obj)):
        raise PermissionDenied("Course lecturer role required")


def ensure_self_or_course_manager(user, student_id, obj: Any) -> None:
    """Allow the student acting on their own row, the course manager, or an admin."""
    ensure_authenticated(user)
    if str(user.pk) == str(student_id):
        return
    ensure_course_manager(user, obj)


def ensure_submission_owner(user, submission: Submission) -> None:
    ensure_authenticated(user)
    if submission.student_id != user.pk:
        raise PermissionDenied("Only the submitting student may change this submission")
