"""Serializers for action payloads and for the entities returned in response envelopes."""

from rest_framework import serializers
from django.contrib.auth import get_user_model

from UniCourseApp.courses.models import Course, Enrollment
from UniCourseApp.learning.models import Assignment, Submission
from UniCourseApp.notifications.models import Notification
from UniCourseApp.core.choices import UserRole, EnrollmentStatus, NotificationType
from UniCourseApp.core.validators import validate_resource_url

User = get_user_model()


class ActionRequestSerializer(serializers.Serializer):
    """Envelope every service endpoint accepts (used for the OpenAPI schema)."""
    action = serializers.CharField(help_text="Name of the handler to invoke.")
    data = serializers.DictField(required=False, help_text="Free-form payload for the handler.")


class IdSerializer(serializers.Serializer):
    id = serializers.UUIDField()


# ---------- Users ----------
class RegistrationSerializer(serializers.ModelSerializer):
    """Serializer handling user registration with role validation."""
    password = serializers.CharField(write_only=True, min_length=8, help_text="User password (write‑only).")

    class Meta:
        model = User
        fields = ["id", "email", "password", "full_name", "role"]


class UserSerializer(serializers.ModelSerializer):
    """Public, safe representation of a user."""

    class Meta:
        model = User
        fields = ["id", "email", "full_name", "role", "date_joined"]


class UserFilterSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserRole.choices, required=False)


class UserLookupSerializer(serializers.Serializer):
    user_id = serializers.UUIDField(required=False)


class ProfileUpdateSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255, allow_blank=True)


class RoleWriteSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    role = serializers.ChoiceField(choices=UserRole.choices)


# ---------- Courses ----------
class CourseWriteSerializer(serializers.Serializer):
    """Serializer for creating/updating a course."""
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    lecturer_id = serializers.UUIDField(required=False, allow_null=True)


class CourseReadSerializer(serializers.ModelSerializer):
    """Serializer for reading course details."""
    lecturer_id = serializers.UUIDField(read_only=True)
    created_by = serializers.UUIDField(source="created_by_id", read_only=True)

    class Meta:
        model = Course
        fields = ["id", "title", "description", "lecturer_id", "created_by", "created_at", "updated_at"]


class CourseFilterSerializer(serializers.Serializer):
    lecturer_id = serializers.UUIDField(required=False)


# ---------- Assignments ----------
class AssignmentWriteSerializer(serializers.Serializer):
    """Serializer for creating/updating an assignment."""
    course_id = serializers.UUIDField()
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    due_date = serializers.DateTimeField()
    max_grade = serializers.IntegerField(min_value=1, default=100)


class AssignmentUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    due_date = serializers.DateTimeField(required=False)
    max_grade = serializers.IntegerField(required=False, min_value=1)


class AssignmentReadSerializer(serializers.ModelSerializer):
    course_id = serializers.UUIDField(read_only=True)
    created_by = serializers.UUIDField(source="created_by_id", read_only=True)

    class Meta:
        model = Assignment
        fields = [
            "id", "course_id", "title", "description", "due_date", "max_grade",
            "created_by", "created_at", "updated_at",
        ]


class AssignmentFilterSerializer(serializers.Serializer):
    course_id = serializers.UUIDField(required=False)


# ---------- Enrollments ----------
class EnrollmentWriteSerializer(serializers.Serializer):
    """Target pair for enroll / unenroll; student defaults to the caller."""
    course_id = serializers.UUIDField()
    student_id = serializers.UUIDField(required=False, allow_null=True)


class EnrollmentStatusSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    status = serializers.ChoiceField(choices=EnrollmentStatus.choices)


class EnrollmentReadSerializer(serializers.ModelSerializer):
    """Enrollment with its course embedded."""
    student_id = serializers.UUIDField(read_only=True)
    course_id = serializers.UUIDField(read_only=True)
    course = CourseReadSerializer(read_only=True)

    class Meta:
        model = Enrollment
        fields = ["id", "student_id", "course_id", "status", "enrolled_at", "course"]


class EnrollmentFilterSerializer(serializers.Serializer):
    student_id = serializers.UUIDField(required=False)
    course_id = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=EnrollmentStatus.choices, required=False)


# ---------- Submissions ----------
class SubmissionWriteSerializer(serializers.Serializer):
    """Serializer for creating a submission."""
    assignment_id = serializers.UUIDField()
    content = serializers.CharField(
        allow_blank=True,
        default="",
        help_text="Textual answer (optional if file_url provided)."
    )
    file_url = serializers.URLField(
        required=False,
        allow_null=True,
        validators=[validate_resource_url],
        help_text="HTTPS link to an uploaded file."
    )

    def validate(self, data):
        if not data.get("content") and not data.get("file_url"):
            raise serializers.ValidationError("At least one of `content` or `file_url` is required.")
        return super().validate(data)


class SubmissionUpdateSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    content = serializers.CharField(required=False, allow_blank=True)
    file_url = serializers.URLField(required=False, allow_null=True, validators=[validate_resource_url])


class SubmissionReadSerializer(serializers.ModelSerializer):
    assignment_id = serializers.UUIDField(read_only=True)
    student_id = serializers.UUIDField(read_only=True)
    graded_by = serializers.UUIDField(source="graded_by_id", read_only=True, allow_null=True)

    class Meta:
        model = Submission
        fields = [
            "id", "assignment_id", "student_id", "content", "file_url", "grade",
            "feedback", "graded_by", "graded_at", "submitted_at", "updated_at",
        ]


class GradedSubmissionReadSerializer(SubmissionReadSerializer):
    """Submission plus the assignment title it was graded against."""
    assignment_title = serializers.CharField(source="assignment.title", read_only=True)

    class Meta(SubmissionReadSerializer.Meta):
        fields = SubmissionReadSerializer.Meta.fields + ["assignment_title"]


class SubmissionFilterSerializer(serializers.Serializer):
    assignment_id = serializers.UUIDField(required=False)
    student_id = serializers.UUIDField(required=False)


# ---------- Grading ----------
class GradeWriteSerializer(serializers.Serializer):
    """Grade payload; the 0..max_grade range is checked against the assignment."""
    submission_id = serializers.UUIDField()
    grade = serializers.IntegerField()
    feedback = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class StatisticsFilterSerializer(serializers.Serializer):
    assignment_id = serializers.UUIDField(required=False)
    course_id = serializers.UUIDField(required=False)


# ---------- Analytics ----------
class CourseLookupSerializer(serializers.Serializer):
    course_id = serializers.UUIDField()


class StudentLookupSerializer(serializers.Serializer):
    student_id = serializers.UUIDField(required=False)


# ---------- Notifications ----------
class NotificationWriteSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    type = serializers.ChoiceField(choices=NotificationType.choices)
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()


class NotificationReadSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Notification
        fields = ["id", "user_id", "type", "title", "message", "is_read", "created_at"]


class NotificationFilterSerializer(serializers.Serializer):
    unread_only = serializers.BooleanField(default=False)
