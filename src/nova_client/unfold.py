"""Turn raw HTTP responses into Success/Failure results."""

from __future__ import annotations

import logging
import traceback
from typing import Any, Iterable, TypeVar

import requests
from pydantic import TypeAdapter, ValidationError

from .errors import NO_RESPONSE_CODE, ErrorDescription, Failure, Result, Success

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_success_status(status_code: int) -> bool:
    return 200 <= status_code < 300


def status_band_message(status_code: int) -> str:
    if 400 <= status_code < 500:
        return "Request error"
    if 500 <= status_code < 600:
        return "Server error"
    return "Unknown error"


def unfold_response(response: requests.Response | None, expected: type[T]) -> Result[T]:
    """
    Parse the server response into ``expected`` or describe the error.

    Rules, in order:
      - no body, no reason phrase -> generic message for the status band
      - no body, reason phrase    -> the reason phrase
      - body, 2xx                 -> body validated as ``expected``
      - body, not 2xx             -> raw body text, unparsed
      - anything raising          -> exception text plus traceback
    """
    try:
        if response is None:
            return Failure(ErrorDescription("No response received", NO_RESPONSE_CODE))

        code = str(response.status_code)

        if not response.content:
            if not response.reason:
                return Failure(ErrorDescription(status_band_message(response.status_code), code))
            return Failure(ErrorDescription(response.reason, code))

        if is_success_status(response.status_code):
            return Success(TypeAdapter(expected).validate_json(response.content))

        return Failure(ErrorDescription(response.text, code))
    except Exception as e:
        status = getattr(response, "status_code", None)
        return Failure(
            ErrorDescription(
                f"{e}\n{traceback.format_exc()}",
                str(status) if status is not None else NO_RESPONSE_CODE,
            )
        )


def cast_each(items: Iterable[Any], model: type[T]) -> list[T]:
    """Validate every element as ``model``; elements that fail are logged and dropped."""
    adapter = TypeAdapter(model)
    result: list[T] = []
    for item in items:
        try:
            result.append(adapter.validate_python(item))
        except ValidationError:
            logger.exception("Failed to cast %r to %s", item, getattr(model, "__name__", model))
    return result
