from hypothesis import given, strategies as st

from UniCourseApp.domain import metrics


class TestRounding:
    """Half-up rounding used for every reported percentage and average."""

    def test_halves_round_up(self) -> None:
        assert metrics.round_half_up(82.5) == 83
        assert metrics.round_half_up(2.5) == 3
        assert metrics.round_half_up(2.345, 2) == 2.35

    def test_integer_result_without_digits(self) -> None:
        assert isinstance(metrics.round_half_up(74.4), int)

    def test_average(self) -> None:
        assert metrics.average([70, 80, 90]) == 80.0
        assert metrics.average([1, 2]) == 1.5
        assert metrics.average([]) == 0.0

    def test_percentage(self) -> None:
        assert metrics.percentage(3, 4) == 75
        assert metrics.percentage(1, 3) == 33
        assert metrics.percentage(2, 3) == 67
        assert metrics.percentage(5, 0) == 0


class TestCourseMetrics:

    def test_completion_rate(self) -> None:
        assert metrics.completion_rate(3, 3, 1) == 100
        assert metrics.completion_rate(1, 2, 2) == 25

    def test_completion_rate_of_empty_course_is_zero(self) -> None:
        assert metrics.completion_rate(0, 0, 5) == 0
        assert metrics.completion_rate(0, 5, 0) == 0

    def test_course_analytics_counts_ungraded_submissions(self) -> None:
        summary = metrics.course_analytics(2, 1, [90, None])
        assert summary["total_submissions"] == 2
        assert summary["graded_submissions"] == 1
        assert summary["average_grade"] == 90.0
        assert summary["completion_rate"] == 50

    def test_grade_statistics(self) -> None:
        assert metrics.grade_statistics([70, None, 90]) == {"count": 2, "average": 80.0, "min": 70, "max": 90}
        assert metrics.grade_statistics([]) == {"count": 0, "average": 0, "min": 0, "max": 0}

    @given(
        enrollments=st.integers(min_value=0, max_value=50),
        assignments=st.integers(min_value=0, max_value=20),
        data=st.data(),
    )
    def test_completion_rate_is_a_percentage(self, enrollments: int, assignments: int, data) -> None:
        """Property-based test: graded pairs never exceed expected pairs, so the rate stays in 0..100."""
        graded = data.draw(st.integers(min_value=0, max_value=enrollments * assignments))
        rate = metrics.completion_rate(graded, enrollments, assignments)
        assert 0 <= rate <= 100

    @given(st.lists(st.one_of(st.none(), st.integers(min_value=0, max_value=100)), max_size=40))
    def test_statistics_bounds(self, grades: list) -> None:
        """Property-based test: average lies between min and max of graded values."""
        stats = metrics.grade_statistics(grades)
        graded = [g for g in grades if g is not None]
        assert stats["count"] == len(graded)
        if graded:
            assert stats["min"] <= stats["average"] <= stats["max"]


class TestStudentMetrics:

    def test_student_performance_groups_by_course(self) -> None:
        rows = [
            {"course_id": "c1", "grade": 40, "max_grade": 50},
            {"course_id": "c1", "grade": None, "max_grade": 100},
            {"course_id": "c2", "grade": 70, "max_grade": 100},
        ]
        summary = metrics.student_performance(rows, enrollment_count=2)
        assert summary["total_courses"] == 2
        assert summary["graded_submissions"] == 2
        assert summary["average_grade_percentage"] == 75.0
        assert {k: len(v) for k, v in summary["submissions_by_course"].items()} == {"c1": 2, "c2": 1}

    def test_student_progress_row(self) -> None:
        students = [{"id": "s1", "full_name": "Sam", "email": "sam@example.com"}]
        assignments = [{"id": f"a{i}", "title": f"A{i}", "max_grade": 100, "due_date": None} for i in range(4)]
        submissions = [
            {"student_id": "s1", "assignment_id": "a0", "grade": 90},
            {"student_id": "s1", "assignment_id": "a1", "grade": 75},
            {"student_id": "s1", "assignment_id": "a2", "grade": None},
        ]
        [row] = metrics.student_progress(students, assignments, submissions)
        assert row["submission_rate"] == 75
        assert row["average_grade"] == 83
        assert [a["submitted"] for a in row["assignments"]] == [True, True, True, False]

    def test_student_without_name_is_unknown(self) -> None:
        [row] = metrics.student_progress([{"id": "s1", "full_name": "", "email": None}], [], [])
        assert row["student_name"] == "Unknown Student"
        assert row["student_email"] == ""
        assert row["submission_rate"] == 0
        assert row["average_grade"] is None

    @given(st.lists(st.text(min_size=1, max_size=12), max_size=15))
    def test_progress_sorted_by_name(self, names: list[str]) -> None:
        """Property-based test: output order follows case-insensitive student name."""
        students = [{"id": str(i), "full_name": n, "email": ""} for i, n in enumerate(names)]
        rows = metrics.student_progress(students, [], [])
        ordered = [r["student_name"].lower() for r in rows]
        assert ordered == sorted(ordered)
