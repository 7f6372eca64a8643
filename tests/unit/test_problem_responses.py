"""Problem payloads built from catalogue failures."""

from __future__ import annotations

from flask import Flask

from calendarl10n.app.http import localization_problem, problem_response
from calendarl10n.catalog import IndexOutOfRange, InvalidCatalog, MissingTranslation


def test_problem_payload_omits_empty_fields() -> None:
    assert problem_response("bad_request", status=400).as_dict() == {"error": "bad_request"}


def test_missing_translation_maps_to_not_found() -> None:
    problem = localization_problem(MissingTranslation("Calendar", "de"))

    assert problem.status == 404
    assert problem.as_dict() == {
        "error": "missing_translation",
        "message": "No translation for 'Calendar' in locale 'de'",
        "key": "Calendar",
        "locale": "de",
    }


def test_short_plural_entry_maps_to_server_error() -> None:
    problem = localization_problem(IndexOutOfRange("Partially imported, {n} failures", 1, 1))

    assert problem.status == 500
    payload = problem.as_dict()
    assert payload["error"] == "plural_form_out_of_range"
    assert (payload["form"], payload["available"]) == (1, 1)


def test_other_catalogue_failures_map_to_generic_error() -> None:
    problem = localization_problem(InvalidCatalog("Catalogue locale must not be empty"))

    assert problem.status == 500
    assert problem.as_dict() == {
        "error": "localization_error",
        "message": "Catalogue locale must not be empty",
    }


def test_problem_converts_to_json_response(app: Flask) -> None:
    with app.app_context():
        response, status = localization_problem(MissingTranslation("Calendar", "de")).to_response()

    assert status == 404
    assert response.get_json()["error"] == "missing_translation"
