"""Render pipeline errors as ``{"kind", "message"}`` JSON responses."""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from weathercore.errors import RateLimitError, WeatherError


logger = logging.getLogger(__name__)

GENERIC_ERROR = {"kind": "InternalError", "message": "Something went wrong, please try again later."}


def weather_exception_handler(exc, context):
    if isinstance(exc, WeatherError):
        headers = {}
        if isinstance(exc, RateLimitError) and exc.retry_after:
            headers["Retry-After"] = str(exc.retry_after)
        return Response(exc.to_dict(), status=exc.status_code, headers=headers)

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data.get("detail") if isinstance(response.data, dict) else None
        response.data = {
            "kind": exc.__class__.__name__,
            "message": str(detail) if detail else "Invalid request.",
        }
        return response

    view = context.get("view")
    logger.error("Unhandled error while serving %s", view.__class__.__name__, exc_info=exc)
    return Response(GENERIC_ERROR, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


__all__ = ["weather_exception_handler", "GENERIC_ERROR"]
