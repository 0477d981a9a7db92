"""Business-rule errors raised by domain services and rendered as 400 envelopes."""

from rest_framework import status
from rest_framework.exceptions import APIException


class DomainError(APIException):
    """A request that is well-formed but violates a business rule (duplicate, out of range...)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request violates a business rule."
    default_code = "domain_error"


class InvalidAction(DomainError):
    default_detail = "Invalid action"
    default_code = "invalid_action"
