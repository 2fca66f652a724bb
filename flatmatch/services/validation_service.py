"""
Flatmatch — Quiz answer validation.

Turns an untrusted answer mapping (a form submission, or a record read back
from storage) into a canonical :class:`QuizAnswers`.  Unrecognised keys are
dropped, selection lists are trimmed rather than rejected, and the first
field that fails a type/range/option check is reported through
:class:`QuizValidationError`.

Validation is idempotent: feeding a ``QuizAnswers`` (or its dump) back in
yields an equal record.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pydantic
import structlog

from flatmatch.schemas.quiz import QuizAnswers

logger = structlog.get_logger("flatmatch.validation_service")


class QuizValidationError(ValueError):
    """A quiz answer failed validation.

    ``field`` names the offending question key (``None`` when the payload as
    a whole is unusable) and ``message`` is safe to show next to the form
    field.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


def validate_quiz_answers(raw: Mapping[str, Any] | QuizAnswers) -> QuizAnswers:
    """Validate and normalise a quiz submission.

    Raises
    ------
    QuizValidationError
        If the payload is not a mapping or any recognised field is invalid.
    """
    if isinstance(raw, QuizAnswers):
        raw = raw.model_dump(exclude_none=True)
    if not isinstance(raw, Mapping):
        raise QuizValidationError("Quiz answers must be a valid object")

    try:
        return QuizAnswers.model_validate(dict(raw))
    except pydantic.ValidationError as exc:
        field, message = _first_error(exc)
        logger.info("quiz_validation_failed", field=field, reason=message)
        raise QuizValidationError(message, field) from exc


def _first_error(exc: pydantic.ValidationError) -> tuple[str | None, str]:
    """Extract the field name and plain message of the first failure."""
    errors = exc.errors()
    if not errors:
        return None, "Quiz answers are invalid"
    error = errors[0]
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else None
    cause = (error.get("ctx") or {}).get("error")
    message = str(cause) if cause is not None else error.get("msg", "Invalid value")
    return field, message
