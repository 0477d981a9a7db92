"""Course domain models: Course and Enrollment."""

import uuid

from django.db import models
from django.conf import settings

from simple_history.models import HistoricalRecords

from UniCourseApp.core.choices import EnrollmentStatus
from UniCourseApp.courses.querysets import CourseQuerySet, EnrollmentQuerySet


User = settings.AUTH_USER_MODEL

class Course(models.Model):
    """A course created by a lecturer (or admin) and optionally taught by another lecturer.

    Fields:
        title: Human readable course title.
        description: Optional longer text.
        lecturer: User teaching the course (defaults to the creator).
        created_by: User who created the course; receives submission notifications.
        created_at / updated_at: Timestamps.
        history: Audit history (django-simple-history).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    lecturer = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="taught_courses"
    )
    created_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name="created_courses")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    history = HistoricalRecords()

    objects = CourseQuerySet.as_manager()

    def __str__(self) -> str:
        return f"{self.title} (#{self.pk})"

class Enrollment(models.Model):
    """Link between a student and a course with a lifecycle status.

    Constraints:
        uq_enrollment_student_course: at most one row per (student, course).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="enrollments")
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="enrollments")
    status = models.CharField(max_length=16, choices=EnrollmentStatus.choices, default=EnrollmentStatus.ACTIVE)
    enrolled_at = models.DateTimeField(auto_now_add=True)
    history = HistoricalRecords()

    objects = EnrollmentQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["student", "course"], name="uq_enrollment_student_course"),
        ]

    def __str__(self) -> str:
        return f"{self.student} -> {self.course} ({self.status})"
