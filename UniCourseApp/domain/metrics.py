"""Pure reductions from fetched rows to summary numbers (averages, rates, counts).

Nothing here touches the database; the analytics and grading services fetch
rows and hand them over as plain values or dicts.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable


def round_half_up(value: float, ndigits: int = 0) -> float | int:
    """Round halves away from zero (82.5 -> 83); returns int when ndigits == 0."""
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if ndigits == 0 else float(rounded)


def average(values: Iterable[float]) -> float:
    """Mean rounded to 2 decimals, 0.0 for no values."""
    items = list(values)
    if not items:
        return 0.0
    return round_half_up(sum(items) / len(items), 2)


def percentage(part: float, whole: float) -> int:
    """Whole-number percentage, 0 when whole is 0."""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


def completion_rate(graded_count: int, enrollment_count: int, assignment_count: int) -> int:
    """Share of all expected (student, assignment) pairs that have been graded.

    An empty course (no assignments or no enrollments) has a rate of 0.
    """
    if not assignment_count or not enrollment_count:
        return 0
    return round_half_up(graded_count / enrollment_count / assignment_count * 100)


def grade_percentage(grade: float, max_grade: float) -> float:
    return grade / max_grade * 100


def grade_statistics(grades: Iterable[int | None]) -> dict[str, Any]:
    graded = [g for g in grades if g is not None]
    if not graded:
        return {"count": 0, "average": 0, "min": 0, "max": 0}
    return {
        "count": len(graded),
        "average": average(graded),
        "min": min(graded),
        "max": max(graded),
    }


def course_analytics(enrollment_count: int, assignment_count: int, grades: list[int | None]) -> dict[str, Any]:
    """Summary for one course; `grades` holds one entry per submission (None when ungraded)."""
    graded = [g for g in grades if g is not None]
    return {
        "total_students": enrollment_count,
        "total_assignments": assignment_count,
        "total_submissions": len(grades),
        "graded_submissions": len(graded),
        "average_grade": average(graded),
        "completion_rate": completion_rate(len(graded), enrollment_count, assignment_count),
    }


def student_performance(submissions: list[dict[str, Any]], enrollment_count: int) -> dict[str, Any]:
    """Summary across all of one student's submissions.

    Each submission row needs `grade`, `max_grade` and `course_id`.
    """
    graded = [s for s in submissions if s["grade"] is not None]
    by_course: dict[str, list[dict[str, Any]]] = {}
    for row in submissions:
        by_course.setdefault(str(row["course_id"]), []).append(row)
    return {
        "total_courses": enrollment_count,
        "total_submissions": len(submissions),
        "graded_submissions": len(graded),
        "average_grade_percentage": average(
            grade_percentage(s["grade"], s["max_grade"]) for s in graded
        ),
        "submissions_by_course": by_course,
    }


def student_progress(
    students: list[dict[str, Any]],
    assignments: list[dict[str, Any]],
    submissions: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Per-student assignment checklist for one course, sorted by student name.

    students: rows with `id`, `full_name`, `email`.
    assignments: rows with `id`, `title`, `max_grade`, `due_date` (already ordered).
    submissions: rows with `student_id`, `assignment_id`, `grade`.
    """
    submitted: dict[tuple[str, str], int | None] = {
        (str(s["student_id"]), str(s["assignment_id"])): s["grade"] for s in submissions
    }
    progress = []
    for student in students:
        student_id = str(student["id"])
        items = []
        for assignment in assignments:
            key = (student_id, str(assignment["id"]))
            items.append({
                "assignment_id": assignment["id"],
                "assignment_title": assignment["title"],
                "max_grade": assignment["max_grade"],
                "due_date": assignment["due_date"],
                "submitted": key in submitted,
                "grade": submitted.get(key),
            })
        graded = [a for a in items if a["grade"] is not None]
        average_grade = None
        if graded:
            total = sum(grade_percentage(a["grade"], a["max_grade"]) for a in graded)
            average_grade = round_half_up(total / len(graded))
        progress.append({
            "student_id": student["id"],
            "student_name": student.get("full_name") or "Unknown Student",
            "student_email": student.get("email") or "",
            "assignments": items,
            "average_grade": average_grade,
            "submission_rate": percentage(sum(1 for a in items if a["submitted"]), len(items)),
        })
    return sorted(progress, key=lambda p: p["student_name"].lower())
