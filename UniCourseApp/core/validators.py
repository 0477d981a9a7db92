"""Validation helpers for submission file references and grades."""

from urllib.parse import urlparse
from django.conf import settings
from django.core.exceptions import ValidationError

from UniCourseApp.core.errors import DomainError


def validate_resource_url(url: str) -> None:
    """Ensure URL uses https and, when configured, matches an allowed domain suffix."""
    if not url:
        return
    result = urlparse(url)
    if result.scheme != "https":
        raise ValidationError("URL must use https.")
    allowed = getattr(settings, "ALLOWED_RESOURCE_DOMAINS", [])
    if allowed and not any(result.netloc.endswith(d) for d in allowed):
        raise ValidationError("URL domain not allowed.")


def validate_grade_range(grade: int, max_grade: int) -> None:
    """Reject grades outside 0..max_grade inclusive."""
    if grade is None:
        raise DomainError("Grade is required")
    if not (0 <= grade <= max_grade):
        raise DomainError(f"Grade must be between 0 and {max_grade}")
