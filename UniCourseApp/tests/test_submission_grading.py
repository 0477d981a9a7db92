import pytest
from django.db import IntegrityError, transaction
from model_bakery import baker
from rest_framework.test import APIClient

from UniCourseApp.courses.models import Enrollment
from UniCourseApp.learning.models import Submission
from UniCourseApp.notifications.models import Notification
from UniCourseApp.tests.utils import call, login, miss_first_lookup

pytestmark = pytest.mark.django_db


@pytest.fixture
def submission(assignment, student, enrollment):
    return baker.make(Submission, assignment=assignment, student=student, content="my answer")


def grade(client, submission, value, **extra):
    return call(client, "grading-service", "grade", {"submission_id": str(submission.pk), "grade": value, **extra})


# ---------- submissions ----------
def test_enrolled_student_submits_and_lecturer_is_notified(
    assignment, student, lecturer, enrollment, django_capture_on_commit_callbacks
):
    with django_capture_on_commit_callbacks(execute=True):
        resp = call(
            login(student), "submission-service", "create",
            {"assignment_id": str(assignment.pk), "content": "quick sort"},
        )

    assert resp.status_code == 200
    body = resp.json()["submission"]
    assert body["student_id"] == str(student.pk)
    assert body["grade"] is None

    note = Notification.objects.get(user=lecturer)
    assert note.type == "submission"
    assert note.title == "New Submission"


def test_second_submission_is_rejected(submission, assignment, student):
    resp = call(login(student), "submission-service", "create", {"assignment_id": str(assignment.pk), "content": "again"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Assignment already submitted"}
    assert Submission.objects.filter(assignment=assignment, student=student).count() == 1


def test_not_enrolled_student_cannot_submit(assignment, other_student):
    resp = call(login(other_student), "submission-service", "create", {"assignment_id": str(assignment.pk), "content": "x"})
    assert resp.status_code == 403
    assert resp.json() == {"error": "Not enrolled in course"}


def test_inactive_enrollment_cannot_submit(assignment, student, enrollment):
    Enrollment.objects.filter(pk=enrollment.pk).update(status="dropped")
    resp = call(login(student), "submission-service", "create", {"assignment_id": str(assignment.pk), "content": "x"})
    assert resp.status_code == 403


def test_submission_needs_content_or_file(assignment, student, enrollment):
    resp = call(login(student), "submission-service", "create", {"assignment_id": str(assignment.pk)})
    assert resp.status_code == 400


def test_file_url_must_be_https(assignment, student, enrollment):
    resp = call(
        login(student), "submission-service", "create",
        {"assignment_id": str(assignment.pk), "file_url": "http://files.example.com/a.pdf"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("file_url:")


def test_file_url_only_submission(assignment, student, enrollment):
    resp = call(
        login(student), "submission-service", "create",
        {"assignment_id": str(assignment.pk), "file_url": "https://files.example.com/a.pdf"},
    )
    assert resp.status_code == 200
    assert resp.json()["submission"]["file_url"] == "https://files.example.com/a.pdf"


def test_student_updates_ungraded_submission(submission, student):
    resp = call(login(student), "submission-service", "update", {"id": str(submission.pk), "content": "revised"})
    assert resp.status_code == 200
    submission.refresh_from_db()
    assert submission.content == "revised"


def test_graded_submission_is_frozen(submission, student):
    Submission.objects.filter(pk=submission.pk).update(grade=70)
    resp = call(login(student), "submission-service", "update", {"id": str(submission.pk), "content": "late fix"})
    assert resp.status_code == 400
    submission.refresh_from_db()
    assert submission.content == "my answer"


def test_other_student_cannot_update_submission(submission, other_student):
    resp = call(login(other_student), "submission-service", "update", {"id": str(submission.pk), "content": "hijack"})
    assert resp.status_code == 403


def test_list_scoping(submission, assignment, student, other_student, lecturer, other_lecturer):
    baker.make(Enrollment, course=assignment.course, student=other_student)
    baker.make(Submission, assignment=assignment, student=other_student, content="b")

    own = call(login(student), "submission-service", "list").json()["submissions"]
    assert [s["id"] for s in own] == [str(submission.pk)]

    managed = call(login(lecturer), "submission-service", "list", {"assignment_id": str(assignment.pk)}).json()["submissions"]
    assert len(managed) == 2

    assert call(login(other_lecturer), "submission-service", "list").json()["submissions"] == []
    assert call(APIClient(), "submission-service", "list").json()["submissions"] == []


def test_get_foreign_submission_is_404(submission, other_student):
    resp = call(login(other_student), "submission-service", "get", {"id": str(submission.pk)})
    assert resp.status_code == 404


def test_submission_create_is_throttled(assignment, student, enrollment):
    client = login(student)
    payload = {"assignment_id": str(assignment.pk), "content": "x"}
    statuses = [call(client, "submission-service", "create", payload).status_code for _ in range(11)]
    assert statuses[0] == 200
    assert statuses[1:10] == [400] * 9
    assert statuses[10] == 429


# ---------- grading ----------
def test_grade_sets_fields_and_notifies_student(submission, lecturer, student, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        resp = grade(login(lecturer), submission, 85, feedback="Nice work")

    assert resp.status_code == 200
    body = resp.json()["submission"]
    assert body["grade"] == 85
    assert body["feedback"] == "Nice work"
    assert body["graded_by"] == str(lecturer.pk)
    assert body["graded_at"] is not None
    assert body["assignment_title"] == "Sorting"

    note = Notification.objects.get(user=student)
    assert note.type == "grade"
    assert note.message == 'Your submission for "Sorting" has been graded. Grade: 85'


@pytest.mark.parametrize("value", [-1, 101])
def test_grade_out_of_range_is_rejected(submission, lecturer, value):
    resp = grade(login(lecturer), submission, value)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Grade must be between 0 and 100"}
    submission.refresh_from_db()
    assert submission.grade is None


@pytest.mark.parametrize("value", [0, 100])
def test_grade_bounds_are_inclusive(submission, lecturer, value):
    assert grade(login(lecturer), submission, value).status_code == 200


def test_student_cannot_grade(submission, student):
    assert grade(login(student), submission, 100).status_code == 403


def test_other_lecturer_cannot_grade(submission, other_lecturer):
    assert grade(login(other_lecturer), submission, 50).status_code == 403


def test_update_grade_keeps_grader_and_is_silent(submission, lecturer, admin, django_capture_on_commit_callbacks):
    grade(login(lecturer), submission, 60, feedback="ok")

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        resp = call(login(admin), "grading-service", "update-grade", {"submission_id": str(submission.pk), "grade": 75})

    assert resp.status_code == 200
    assert callbacks == []
    submission.refresh_from_db()
    assert submission.grade == 75
    assert submission.feedback == "ok"
    assert submission.graded_by == lecturer


def test_grading_writes_share_response_shape(submission, lecturer):
    client = login(lecturer)
    graded = grade(client, submission, 60).json()["submission"]
    updated = call(client, "grading-service", "update-grade", {"submission_id": str(submission.pk), "grade": 70}).json()["submission"]
    assert set(graded) == set(updated)
    assert updated["assignment_title"] == "Sorting"
    assert updated["grade"] == 70


def test_statistics(assignment, lecturer, student, other_student, admin):
    baker.make(Submission, assignment=assignment, student=student, grade=70)
    baker.make(Submission, assignment=assignment, student=other_student, grade=90)
    baker.make(Submission, assignment=assignment, student=admin)

    resp = call(login(lecturer), "grading-service", "get-statistics", {"assignment_id": str(assignment.pk)})
    assert resp.status_code == 200
    assert resp.json()["statistics"] == {"count": 2, "average": 80.0, "min": 70, "max": 90}


def test_statistics_without_grades_are_zero(assignment, lecturer):
    resp = call(login(lecturer), "grading-service", "get-statistics", {"course_id": str(assignment.course_id)})
    assert resp.json()["statistics"] == {"count": 0, "average": 0, "min": 0, "max": 0}


def test_database_rejects_second_submission_for_pair(submission, assignment, student):
    with pytest.raises(IntegrityError), transaction.atomic():
        baker.make(Submission, assignment=assignment, student=student, content="copy")
    assert Submission.objects.filter(assignment=assignment, student=student).count() == 1


def test_submit_race_resolves_to_existing_row(submission, assignment, student, monkeypatch):
    client = login(student)
    miss_first_lookup(monkeypatch, Submission)

    resp = call(client, "submission-service", "create", {"assignment_id": str(assignment.pk), "content": "again"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Assignment already submitted"}
    assert Submission.objects.filter(assignment=assignment, student=student).count() == 1
    submission.refresh_from_db()
    assert submission.content == "my answer"
