"""Problem payloads returned by the translation API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from flask import jsonify

from calendarl10n.catalog import IndexOutOfRange, LocalizationError, MissingTranslation


@dataclass(frozen=True)
class ProblemResponse:
    """Lightweight representation of an RFC 7807-style error payload."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return the serialisable payload for this problem response."""

        payload: dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        """Convert the problem payload into a Flask response tuple."""

        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Convenience factory mirroring Flask's ``jsonify`` interface."""

    additional: Mapping[str, Any] | None = extra or None
    return ProblemResponse(error=error, status=status, message=message, extra=additional)


def localization_problem(error: LocalizationError) -> ProblemResponse:
    """Map a catalogue failure onto the problem shape clients expect.

    Missing keys are the caller's concern (404); a plural entry with too few
    variants or malformed catalogue data is a server-side data bug (500).
    """

    if isinstance(error, MissingTranslation):
        return problem_response(
            "missing_translation",
            status=404,
            message=str(error),
            key=error.key,
            locale=error.locale,
        )
    if isinstance(error, IndexOutOfRange):
        return problem_response(
            "plural_form_out_of_range",
            status=500,
            message=str(error),
            key=error.key,
            form=error.index,
            available=error.available,
        )
    return problem_response("localization_error", status=500, message=str(error))


__all__ = ["ProblemResponse", "localization_problem", "problem_response"]
