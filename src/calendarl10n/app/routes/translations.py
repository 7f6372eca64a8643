"""Expose translation catalogues to front-end consumers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from calendarl10n.app.http import localization_problem, problem_response
from calendarl10n.catalog import (
    IndexOutOfRange,
    MissingTranslation,
    load_catalog,
    load_translations,
    normalise_locale,
)

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")


def _required_key():
    key = request.args.get("key")
    if not key:
        return None, problem_response(
            "bad_request", status=400, message="Query parameter 'key' is required"
        )
    return key, None


@blueprint.get("/")
def get_default_translations():
    """Return translations for the requested or default locale."""

    locale_hint = request.args.get("locale")
    payload = load_translations(locale_hint)
    return jsonify(payload), 200


@blueprint.get("/<locale>")
def get_locale_translations(locale: str):
    """Return translations for a specific locale slug."""

    payload = load_translations(locale)
    return jsonify(payload), 200


@blueprint.get("/<locale>/lookup")
def lookup_message(locale: str):
    """Return the catalogue entry for a single message key."""

    key, problem = _required_key()
    if problem is not None:
        return problem.to_response()

    normalized = normalise_locale(locale)
    try:
        value = load_catalog(normalized).lookup(key)
    except MissingTranslation as exc:
        return localization_problem(exc).to_response()

    return jsonify({"locale": normalized, "key": key, "value": value}), 200


@blueprint.get("/<locale>/plural")
def select_plural(locale: str):
    """Return the plural variant selected for ``n``."""

    key, problem = _required_key()
    if problem is not None:
        return problem.to_response()

    raw_count = request.args.get("n", "")
    try:
        count = int(raw_count)
    except ValueError:
        return problem_response(
            "bad_request", status=400, message="Query parameter 'n' must be an integer"
        ).to_response()

    normalized = normalise_locale(locale)
    catalog = load_catalog(normalized)
    try:
        value = catalog.select_plural_form(key, count)
    except (MissingTranslation, IndexOutOfRange) as exc:
        return localization_problem(exc).to_response()

    return (
        jsonify(
            {
                "locale": normalized,
                "key": key,
                "n": count,
                "form": catalog.rule(count),
                "value": value,
            }
        ),
        200,
    )
