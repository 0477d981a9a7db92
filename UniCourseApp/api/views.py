"""Service endpoints: one action-router view per service, plus registration."""

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.request import Request
from rest_framework.views import APIView

from drf_spectacular.utils import (
    extend_schema,
    extend_schema_view,
    OpenApiResponse,
)

from UniCourseApp.api.router import ActionRouterView
from UniCourseApp.api.throttles import SubmissionRateThrottle
from UniCourseApp.domain.services import (
    analytics_service,
    assignment_service,
    course_service,
    enrollment_service,
    grading_service,
    notification_service,
    submission_service,
    user_service,
)
from UniCourseApp.api.serializers import (
    ActionRequestSerializer,
    IdSerializer,
    RegistrationSerializer,
    UserSerializer,
    UserFilterSerializer,
    UserLookupSerializer,
    ProfileUpdateSerializer,
    RoleWriteSerializer,
    CourseWriteSerializer,
    CourseReadSerializer,
    CourseFilterSerializer,
    AssignmentWriteSerializer,
    AssignmentUpdateSerializer,
    AssignmentReadSerializer,
    AssignmentFilterSerializer,
    EnrollmentWriteSerializer,
    EnrollmentStatusSerializer,
    EnrollmentReadSerializer,
    EnrollmentFilterSerializer,
    SubmissionWriteSerializer,
    SubmissionUpdateSerializer,
    SubmissionReadSerializer,
    GradedSubmissionReadSerializer,
    SubmissionFilterSerializer,
    GradeWriteSerializer,
    StatisticsFilterSerializer,
    CourseLookupSerializer,
    StudentLookupSerializer,
    NotificationWriteSerializer,
    NotificationReadSerializer,
    NotificationFilterSerializer,
)

ENVELOPE_RESPONSES = {
    200: OpenApiResponse(description='`{"success": true, ...}` envelope.'),
    400: OpenApiResponse(description='Invalid action, invalid payload or business-rule violation: `{"error": ...}`.'),
    403: OpenApiResponse(description="Rejected by a row-level policy."),
    404: OpenApiResponse(description="Referenced row not found."),
    500: OpenApiResponse(description="Unexpected or data-layer failure."),
}


def service_schema(tag: str, actions: dict[str, str]):
    """OpenAPI description shared by all action-router endpoints."""
    return extend_schema_view(
        post=extend_schema(
            tags=[tag],
            request=ActionRequestSerializer,
            responses=ENVELOPE_RESPONSES,
            description=f"Dispatch on `action`; one of: {', '.join(f'`{a}`' for a in actions)}.",
        )
    )


# ---------- Auth ----------
@extend_schema(
    tags=["Auth"],
    request=RegistrationSerializer,
    responses={201: UserSerializer, 400: OpenApiResponse(description="Validation error")},
    description="Register a new user. The admin role requires an admin caller."
)
class RegistrationView(APIView):
    """User registration endpoint."""
    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        """Create a user after validating role constraints."""
        ser = RegistrationSerializer(data=request.data, context={"request": request})
        ser.is_valid(raise_exception=True)
        user = user_service.register(request.user, ser.validated_data)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


# ---------- Courses ----------
COURSE_ACTIONS = {
    "create": "create",
    "update": "update",
    "delete": "delete",
    "list": "list",
    "get": "retrieve",
}

@service_schema("Courses", COURSE_ACTIONS)
class CourseServiceView(ActionRouterView):
    """Course CRUD."""
    service_name = "course-service"
    actions = COURSE_ACTIONS

    def create(self, request: Request, data: dict) -> dict:
        course = course_service.create_course(request.user, self.validated(CourseWriteSerializer, data))
        return {"course": CourseReadSerializer(course).data}

    def update(self, request: Request, data: dict) -> dict:
        course_id = self.validated(IdSerializer, data)["id"]
        changes = self.validated(CourseWriteSerializer, data, partial=True)
        course = course_service.update_course(request.user, course_id, changes)
        return {"course": CourseReadSerializer(course).data}

    def delete(self, request: Request, data: dict) -> dict:
        course_service.delete_course(request.user, self.validated(IdSerializer, data)["id"])
        return {}

    def list(self, request: Request, data: dict) -> dict:
        filters = self.validated(CourseFilterSerializer, data)
        courses = course_service.list_courses(filters.get("lecturer_id"))
        return {"courses": CourseReadSerializer(courses, many=True).data}

    def retrieve(self, request: Request, data: dict) -> dict:
        course = course_service.get_course(self.validated(IdSerializer, data)["id"])
        return {"course": CourseReadSerializer(course).data}


# ---------- Assignments ----------
ASSIGNMENT_ACTIONS = {
    "create": "create",
    "update": "update",
    "delete": "delete",
    "list": "list",
    "get": "retrieve",
}

@service_schema("Assignments", ASSIGNMENT_ACTIONS)
class AssignmentServiceView(ActionRouterView):
    """Assignment CRUD; create announces the assignment to enrolled students."""
    service_name = "assignment-service"
    actions = ASSIGNMENT_ACTIONS

    def create(self, request: Request, data: dict) -> dict:
        assignment = assignment_service.create_assignment(
            request.user, self.validated(AssignmentWriteSerializer, data)
        )
        return {"assignment": AssignmentReadSerializer(assignment).data}

    def update(self, request: Request, data: dict) -> dict:
        assignment_id = self.validated(IdSerializer, data)["id"]
        changes = self.validated(AssignmentUpdateSerializer, data)
        assignment = assignment_service.update_assignment(request.user, assignment_id, changes)
        return {"assignment": AssignmentReadSerializer(assignment).data}

    def delete(self, request: Request, data: dict) -> dict:
        assignment_service.delete_assignment(request.user, self.validated(IdSerializer, data)["id"])
        return {}

    def list(self, request: Request, data: dict) -> dict:
        filters = self.validated(AssignmentFilterSerializer, data)
        assignments = assignment_service.list_assignments(filters.get("course_id"))
        return {"assignments": AssignmentReadSerializer(assignments, many=True).data}

    def retrieve(self, request: Request, data: dict) -> dict:
        assignment = assignment_service.get_assignment(self.validated(IdSerializer, data)["id"])
        return {"assignment": AssignmentReadSerializer(assignment).data}


# ---------- Enrollments ----------
ENROLLMENT_ACTIONS = {
    "enroll": "enroll",
    "unenroll": "unenroll",
    "list": "list",
    "update-status": "update_status",
}

@service_schema("Enrollments", ENROLLMENT_ACTIONS)
class EnrollmentServiceView(ActionRouterView):
    service_name = "enrollment-service"
    actions = ENROLLMENT_ACTIONS

    def enroll(self, request: Request, data: dict) -> dict:
        target = self.validated(EnrollmentWriteSerializer, data)
        enrollment = enrollment_service.enroll(request.user, target["course_id"], target.get("student_id"))
        return {"enrollment": EnrollmentReadSerializer(enrollment).data}

    def unenroll(self, request: Request, data: dict) -> dict:
        target = self.validated(EnrollmentWriteSerializer, data)
        enrollment_service.unenroll(request.user, target["course_id"], target.get("student_id"))
        return {}

    def list(self, request: Request, data: dict) -> dict:
        filters = self.validated(EnrollmentFilterSerializer, data)
        enrollments = enrollment_service.list_enrollments(request.user, **filters)
        return {"enrollments": EnrollmentReadSerializer(enrollments, many=True).data}

    def update_status(self, request: Request, data: dict) -> dict:
        payload = self.validated(EnrollmentStatusSerializer, data)
        enrollment = enrollment_service.update_status(request.user, payload["id"], payload["status"])
        return {"enrollment": EnrollmentReadSerializer(enrollment).data}


# ---------- Submissions ----------
SUBMISSION_ACTIONS = {
    "create": "create",
    "update": "update",
    "list": "list",
    "get": "retrieve",
}

@service_schema("Submissions", SUBMISSION_ACTIONS)
class SubmissionServiceView(ActionRouterView):
    """Submission create/update/read; create is rate-limited per user."""
    service_name = "submission-service"
    actions = SUBMISSION_ACTIONS

    def get_throttles(self):
        """Apply rate throttle only on create."""
        if self.request.method == "POST" and self.requested_action(self.request) == "create":
            return [SubmissionRateThrottle()]
        return super().get_throttles()

    def create(self, request: Request, data: dict) -> dict:
        submission = submission_service.create_submission(
            request.user, self.validated(SubmissionWriteSerializer, data)
        )
        return {"submission": SubmissionReadSerializer(submission).data}

    def update(self, request: Request, data: dict) -> dict:
        payload = dict(self.validated(SubmissionUpdateSerializer, data))
        submission_id = payload.pop("id")
        submission = submission_service.update_submission(request.user, submission_id, payload)
        return {"submission": SubmissionReadSerializer(submission).data}

    def list(self, request: Request, data: dict) -> dict:
        filters = self.validated(SubmissionFilterSerializer, data)
        submissions = submission_service.list_submissions(request.user, **filters)
        return {"submissions": SubmissionReadSerializer(submissions, many=True).data}

    def retrieve(self, request: Request, data: dict) -> dict:
        submission = submission_service.get_submission(request.user, self.validated(IdSerializer, data)["id"])
        return {"submission": SubmissionReadSerializer(submission).data}


# ---------- Grading ----------
GRADING_ACTIONS = {
    "grade": "grade",
    "update-grade": "update_grade",
    "get-statistics": "statistics",
}

@service_schema("Grading", GRADING_ACTIONS)
class GradingServiceView(ActionRouterView):
    service_name = "grading-service"
    actions = GRADING_ACTIONS

    def grade(self, request: Request, data: dict) -> dict:
        payload = self.validated(GradeWriteSerializer, data)
        submission = grading_service.grade_submission(
            request.user, payload["submission_id"], payload["grade"], payload.get("feedback")
        )
        return {"submission": GradedSubmissionReadSerializer(submission).data}

    def update_grade(self, request: Request, data: dict) -> dict:
        payload = dict(self.validated(GradeWriteSerializer, data))
        submission = grading_service.update_grade(
            request.user, payload.pop("submission_id"), payload.pop("grade"), **payload
        )
        return {"submission": GradedSubmissionReadSerializer(submission).data}

    def statistics(self, request: Request, data: dict) -> dict:
        filters = self.validated(StatisticsFilterSerializer, data)
        return {"statistics": grading_service.get_statistics(request.user, **filters)}


# ---------- Analytics ----------
ANALYTICS_ACTIONS = {
    "course-analytics": "course_analytics",
    "student-performance": "student_performance",
    "student-progress": "student_progress",
    "system-metrics": "system_metrics",
}

@service_schema("Analytics", ANALYTICS_ACTIONS)
class AnalyticsServiceView(ActionRouterView):
    """Derived metrics, recomputed on every request."""
    service_name = "analytics-service"
    actions = ANALYTICS_ACTIONS

    def course_analytics(self, request: Request, data: dict) -> dict:
        course_id = self.validated(CourseLookupSerializer, data)["course_id"]
        return {"analytics": analytics_service.course_analytics(request.user, course_id)}

    def student_performance(self, request: Request, data: dict) -> dict:
        student_id = self.validated(StudentLookupSerializer, data).get("student_id")
        return {"performance": analytics_service.student_performance(request.user, student_id)}

    def student_progress(self, request: Request, data: dict) -> dict:
        course_id = self.validated(CourseLookupSerializer, data)["course_id"]
        return {"progress": analytics_service.student_progress(request.user, course_id)}

    def system_metrics(self, request: Request, data: dict) -> dict:
        return {"metrics": analytics_service.system_metrics(request.user)}


# ---------- Notifications ----------
NOTIFICATION_ACTIONS = {
    "send": "send",
    "list": "list",
    "mark-read": "mark_read",
    "mark-all-read": "mark_all_read",
    "delete": "delete",
}

@service_schema("Notifications", NOTIFICATION_ACTIONS)
class NotificationServiceView(ActionRouterView):
    service_name = "notification-service"
    actions = NOTIFICATION_ACTIONS

    def send(self, request: Request, data: dict) -> dict:
        notification = notification_service.send(request.user, self.validated(NotificationWriteSerializer, data))
        return {"notification": NotificationReadSerializer(notification).data}

    def list(self, request: Request, data: dict) -> dict:
        filters = self.validated(NotificationFilterSerializer, data)
        notifications = notification_service.list_for_user(request.user, filters["unread_only"])
        return {
            "notifications": NotificationReadSerializer(notifications, many=True).data,
            "unread_count": notification_service.unread_count(request.user),
        }

    def mark_read(self, request: Request, data: dict) -> dict:
        notification = notification_service.mark_read(request.user, self.validated(IdSerializer, data)["id"])
        return {"notification": NotificationReadSerializer(notification).data}

    def mark_all_read(self, request: Request, data: dict) -> dict:
        return {"updated": notification_service.mark_all_read(request.user)}

    def delete(self, request: Request, data: dict) -> dict:
        notification_service.delete(request.user, self.validated(IdSerializer, data)["id"])
        return {}


# ---------- Users ----------
USER_ACTIONS = {
    "list": "list",
    "get": "retrieve",
    "update-profile": "update_profile",
    "set-role": "set_role",
}

@service_schema("Users", USER_ACTIONS)
class UserServiceView(ActionRouterView):
    """Profiles and role management."""
    service_name = "user-service"
    actions = USER_ACTIONS

    def list(self, request: Request, data: dict) -> dict:
        filters = self.validated(UserFilterSerializer, data)
        users = user_service.list_users(request.user, filters.get("role"))
        return {"users": UserSerializer(users, many=True).data}

    def retrieve(self, request: Request, data: dict) -> dict:
        user = user_service.get_user(request.user, self.validated(UserLookupSerializer, data).get("user_id"))
        return {"user": UserSerializer(user).data}

    def update_profile(self, request: Request, data: dict) -> dict:
        user = user_service.update_profile(request.user, self.validated(ProfileUpdateSerializer, data))
        return {"user": UserSerializer(user).data}

    def set_role(self, request: Request, data: dict) -> dict:
        payload = self.validated(RoleWriteSerializer, data)
        user = user_service.set_role(request.user, payload["user_id"], payload["role"])
        return {"user": UserSerializer(user).data}
