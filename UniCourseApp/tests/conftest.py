import pytest
from django.core.cache import cache
from django.utils import timezone
from model_bakery import baker

from UniCourseApp.core.choices import EnrollmentStatus, UserRole
from UniCourseApp.tests.utils import make_user


@pytest.fixture(autouse=True)
def fast_password_hashing(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture(autouse=True)
def clear_throttle_history():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def admin():
    return make_user(UserRole.ADMIN, "admin@example.com", "Ada Admin")


@pytest.fixture
def lecturer():
    return make_user(UserRole.LECTURER, "lecturer@example.com", "Lena Lecturer")


@pytest.fixture
def other_lecturer():
    return make_user(UserRole.LECTURER, "lecturer2@example.com", "Otto Other")


@pytest.fixture
def student():
    return make_user(UserRole.STUDENT, "student@example.com", "Sam Student")


@pytest.fixture
def other_student():
    return make_user(UserRole.STUDENT, "student2@example.com", "Alex Another")


@pytest.fixture
def course(lecturer):
    return baker.make("courses.Course", title="Algorithms", description="", lecturer=lecturer, created_by=lecturer)


@pytest.fixture
def enrollment(course, student):
    return baker.make("courses.Enrollment", course=course, student=student, status=EnrollmentStatus.ACTIVE)


@pytest.fixture
def assignment(course, lecturer):
    return baker.make(
        "learning.Assignment",
        course=course,
        title="Sorting",
        due_date=timezone.now() + timezone.timedelta(days=7),
        max_grade=100,
        created_by=lecturer,
    )
