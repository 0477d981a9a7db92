"""Action router shared by every service endpoint.

A service is an ``ActionRouterView`` subclass declaring ``service_name`` and an
``actions`` map from the client-visible action string to a handler method. The
router accepts ``OPTIONS`` (CORS preflight) and ``POST {action, data}``,
dispatches to the handler and wraps its result as ``{"success": true, ...}``.
Every failure is rendered as ``{"error": <message>}`` and every response
carries the CORS headers.
"""

import logging
from typing import Any

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import serializers, status
from rest_framework.exceptions import APIException, ParseError
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from UniCourseApp.core.errors import DomainError, InvalidAction

logger = logging.getLogger(__name__)


def cors_headers() -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.CORS_ALLOW_ORIGIN,
        "Access-Control-Allow-Headers": settings.CORS_ALLOW_HEADERS,
        "Access-Control-Allow-Methods": "POST, OPTIONS",
    }


def error_message(detail: Any) -> str:
    """Flatten a DRF error detail (str, list or dict) into one readable line."""
    if isinstance(detail, dict):
        parts = []
        for field, value in detail.items():
            text = error_message(value)
            parts.append(text if field == "non_field_errors" else f"{field}: {text}")
        return "; ".join(parts)
    if isinstance(detail, (list, tuple)):
        return " ".join(error_message(item) for item in detail)
    return str(detail)


class ActionRouterView(APIView):
    """Dispatch ``{action, data}`` bodies to handler methods.

    Handlers have the signature ``handler(request, data) -> dict`` and return the
    keys merged into the success envelope. Access control is left to the domain
    services, so the router itself allows every caller through.
    """
    service_name: str = ""
    actions: dict[str, str] = {}
    permission_classes = [AllowAny]
    http_method_names = ["post", "options"]

    def requested_action(self, request: Request) -> str | None:
        body = request.data
        if not isinstance(body, dict):
            return None
        action = body.get("action")
        return action if isinstance(action, str) else None

    def options(self, request: Request, *args, **kwargs) -> Response:
        """CORS preflight: empty body, headers only."""
        return Response(status=status.HTTP_200_OK)

    def post(self, request: Request, *args, **kwargs) -> Response:
        if not isinstance(request.data, dict):
            raise ParseError("Request body must be a JSON object.")
        action = self.requested_action(request)
        handler_name = self.actions.get(action) if action else None
        if handler_name is None:
            raise InvalidAction()
        data = request.data.get("data") or {}
        if not isinstance(data, dict):
            raise DomainError("`data` must be an object.")

        logger.info("%s action: %s", self.service_name, action)
        payload = getattr(self, handler_name)(request, data)
        return Response({"success": True, **payload}, status=status.HTTP_200_OK)

    def validated(self, serializer_cls: type[serializers.Serializer], data: dict, **kwargs) -> dict:
        """Validate a handler payload; failures surface as a 400 envelope."""
        ser = serializer_cls(data=data, **kwargs)
        ser.is_valid(raise_exception=True)
        return ser.validated_data

    def handle_exception(self, exc: Exception) -> Response:
        """Render any error as ``{"error": message}`` with a matching status code."""
        headers = {}
        if isinstance(exc, APIException):
            code = exc.status_code
            message = error_message(exc.detail)
            wait = getattr(exc, "wait", None)
            if wait:
                headers["Retry-After"] = str(int(wait))
        elif isinstance(exc, (Http404, ObjectDoesNotExist)):
            code = status.HTTP_404_NOT_FOUND
            message = str(exc) or "Not found."
        elif isinstance(exc, DjangoValidationError):
            code = status.HTTP_400_BAD_REQUEST
            message = " ".join(exc.messages)
        else:
            logger.exception("Error in %s", self.service_name or type(self).__name__)
            code = status.HTTP_500_INTERNAL_SERVER_ERROR
            message = str(exc) or exc.__class__.__name__

        if code < 500:
            logger.warning("%s rejected request: %s (%s)", self.service_name, message, code)

        response = Response({"error": message}, status=code, headers=headers)
        response.exception = True
        return response

    def finalize_response(self, request: Request, response: Response, *args, **kwargs) -> Response:
        response = super().finalize_response(request, response, *args, **kwargs)
        for header, value in cors_headers().items():
            response[header] = value
        return response
