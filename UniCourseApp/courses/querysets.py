"""Custom querysets encapsulating row-level visibility and filtering for courses and learning objects."""

from django.db.models import QuerySet, Q
from typing import Self

from UniCourseApp.core.choices import EnrollmentStatus


def _is_admin(user) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "is_admin", False))


class CourseQuerySet(QuerySet):
    """QuerySet with helpers for course ownership."""

    def for_lecturer(self, lecturer_id) -> Self:
        """Courses taught by the given lecturer."""
        return self.filter(lecturer_id=lecturer_id)


class EnrollmentQuerySet(QuerySet):
    """QuerySet helpers for enrollment visibility and status."""

    def active(self) -> Self:
        return self.filter(status=EnrollmentStatus.ACTIVE)

    def visible_to(self, user) -> Self:
        """Enrollments visible to user:
        - Admin: all
        - Lecturer/creator: enrollments of courses they manage
        - Student: their own
        - Anonymous: none
        """
        if not user or not user.is_authenticated:
            return self.none()
        if _is_admin(user):
            return self
        return self.filter(
            Q(student=user) |
            Q(course__created_by=user) |
            Q(course__lecturer=user)
        )


class AssignmentQuerySet(QuerySet):

    def for_course(self, course_id) -> Self:
        return self.filter(course_id=course_id)


class SubmissionQuerySet(QuerySet):
    """QuerySet helpers for filtering submissions by role and grading state."""

    def graded(self) -> Self:
        return self.filter(grade__isnull=False)

    def for_course(self, course_id) -> Self:
        return self.filter(assignment__course_id=course_id)

    def visible_to(self, user) -> Self:
        """Submissions visible to user:
        - Admin: all
        - Lecturer/creator: submissions in courses they manage
        - Student: their own
        - Anonymous: none
        """
        if not user or not user.is_authenticated:
            return self.none()
        if _is_admin(user):
            return self
        return self.filter(
            Q(student=user) |
            Q(assignment__course__created_by=user) |
            Q(assignment__course__lecturer=user)
        )
