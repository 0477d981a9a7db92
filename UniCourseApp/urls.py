from django.urls import path, include

from UniCourseApp.api.urls import api_urlpatterns, function_urlpatterns

urlpatterns = [
    path("api/v1/", include(api_urlpatterns)),
    path("functions/v1/", include(function_urlpatterns)),
]
