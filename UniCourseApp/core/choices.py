"""Typed enumerations (TextChoices) for user roles, enrollment states and notification types."""
from django.db import models

class UserRole(models.TextChoices):
    """System-level role assigned to a user account."""
    ADMIN = "admin", "Admin"
    LECTURER = "lecturer", "Lecturer"
    STUDENT = "student", "Student"

SELF_ASSIGNABLE_ROLES = (UserRole.STUDENT, UserRole.LECTURER)

class EnrollmentStatus(models.TextChoices):
    """Lifecycle states for a course enrollment."""
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"
    COMPLETED = "completed", "Completed"
    DROPPED = "dropped", "Dropped"

class NotificationType(models.TextChoices):
    COURSE = "course", "Course"
    ENROLLMENT = "enrollment", "Enrollment"
    ASSIGNMENT = "assignment", "Assignment"
    SUBMISSION = "submission", "Submission"
    GRADE = "grade", "Grade"
    SYSTEM = "system", "System"
