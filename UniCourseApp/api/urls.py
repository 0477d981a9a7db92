from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from UniCourseApp.api.views import (
    AnalyticsServiceView,
    AssignmentServiceView,
    CourseServiceView,
    EnrollmentServiceView,
    GradingServiceView,
    NotificationServiceView,
    RegistrationView,
    SubmissionServiceView,
    UserServiceView,
)

api_urlpatterns = [
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),
    path("auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("auth/register/", RegistrationView.as_view(), name="auth-register"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
]

function_urlpatterns = [
    path("course-service/", CourseServiceView.as_view(), name="course-service"),
    path("assignment-service/", AssignmentServiceView.as_view(), name="assignment-service"),
    path("enrollment-service/", EnrollmentServiceView.as_view(), name="enrollment-service"),
    path("submission-service/", SubmissionServiceView.as_view(), name="submission-service"),
    path("grading-service/", GradingServiceView.as_view(), name="grading-service"),
    path("analytics-service/", AnalyticsServiceView.as_view(), name="analytics-service"),
    path("notification-service/", NotificationServiceView.as_view(), name="notification-service"),
    path("user-service/", UserServiceView.as_view(), name="user-service"),
]
