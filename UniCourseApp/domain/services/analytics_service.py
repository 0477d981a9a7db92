"""Analytics queries: fetch the raw rows, then reduce them with `domain.metrics`.

Every request recomputes from the current rows; nothing is cached.
"""
from typing import Any

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework.exceptions import PermissionDenied

from UniCourseApp.courses.models import Course, Enrollment
from UniCourseApp.learning.models import Assignment, Submission
from UniCourseApp.core.access import ensure_admin, ensure_authenticated, ensure_course_manager, is_admin, is_lecturer
from UniCourseApp.core.choices import UserRole
from UniCourseApp.domain import metrics

User = get_user_model()

def course_analytics(actor: User, course_id) -> dict[str, Any]:
    """Enrollment, submission and grade summary for one course."""
    course = get_object_or_404(Course, pk=course_id)
    ensure_course_manager(actor, course)
    enrollment_count = Enrollment.objects.filter(course=course).count()
    assignment_count = Assignment.objects.for_course(course.pk).count()
    grades = list(Submission.objects.for_course(course.pk).values_list("grade", flat=True))
    return metrics.course_analytics(enrollment_count, assignment_count, grades)

def student_performance(actor: User, student_id=None) -> dict[str, Any]:
    """Grade summary across every course of one student (the actor by default).

    Students only see their own figures; lecturers and admins may ask for anyone.
    """
    ensure_authenticated(actor)
    student_id = student_id or actor.pk
    if str(student_id) != str(actor.pk) and not (is_admin(actor) or is_lecturer(actor)):
        raise PermissionDenied("Cannot view another student's performance")

    rows = [
        {
            "id": row["id"],
            "assignment_id": row["assignment_id"],
            "assignment_title": row["assignment__title"],
            "course_id": row["assignment__course_id"],
            "max_grade": row["assignment__max_grade"],
            "grade": row["grade"],
            "feedback": row["feedback"],
            "submitted_at": row["submitted_at"],
            "graded_at": row["graded_at"],
        }
        for row in Submission.objects.filter(student_id=student_id).order_by("-submitted_at").values(
            "id", "assignment_id", "assignment__title", "assignment__course_id",
            "assignment__max_grade", "grade", "feedback", "submitted_at", "graded_at",
        )
    ]
    enrollment_count = Enrollment.objects.filter(student_id=student_id).count()
    return metrics.student_performance(rows, enrollment_count)

def student_progress(actor: User, course_id) -> dict[str, Any]:
    """Per-student assignment checklist for one course (lecturer/creator or admin)."""
    course = get_object_or_404(Course, pk=course_id)
    ensure_course_manager(actor, course)

    student_ids = list(
        Enrollment.objects.active().filter(course=course).values_list("student_id", flat=True)
    )
    students = list(User.objects.filter(pk__in=student_ids).values("id", "full_name", "email"))
    assignments = list(
        Assignment.objects.for_course(course.pk)
        .order_by("due_date")
        .values("id", "title", "max_grade", "due_date")
    )
    submissions = list(
        Submission.objects.filter(
            assignment_id__in=[a["id"] for a in assignments], student_id__in=student_ids
        ).values("student_id", "assignment_id", "grade")
    )
    return {
        "course": {"id": course.pk, "title": course.title},
        "students": metrics.student_progress(students, assignments, submissions),
    }

def system_metrics(actor: User) -> dict[str, int]:
    """Flat platform-wide counts (admin only)."""
    ensure_admin(actor)
    return {
        "total_courses": Course.objects.count(),
        "total_students": User.objects.filter(role=UserRole.STUDENT).count(),
        "total_lecturers": User.objects.filter(role=UserRole.LECTURER).count(),
        "total_assignments": Assignment.objects.count(),
        "total_submissions": Submission.objects.count(),
        "total_enrollments": Enrollment.objects.count(),
    }
