"""Tests for fallback handling and placeholder substitution."""

from __future__ import annotations

import logging

import pytest

from calendarl10n.catalog import (
    GERMAN_PLURAL_FORMS,
    Catalog,
    IndexOutOfRange,
    Translator,
    format_message,
)

FAILURES_KEY = "Partially imported, {n} failures"


@pytest.fixture()
def english() -> Catalog:
    return Catalog(
        locale_id="en",
        entries={"Calendar": "Calendar", "Only English": "Only English"},
        plural_rule=GERMAN_PLURAL_FORMS,
        plural_entries={
            FAILURES_KEY: ["Partially imported, 1 failure", "Partially imported, {n} failures"],
            "{n} reminders": ["1 reminder", "{n} reminders"],
        },
    )


@pytest.fixture()
def german() -> Catalog:
    return Catalog(
        locale_id="de",
        entries={
            "Calendar": "Kalender",
            "Week {number} of {year}": "Woche {number} von {year}",
        },
        plural_rule=GERMAN_PLURAL_FORMS,
        plural_entries={
            FAILURES_KEY: ["Teilweise importiert, 1 Fehler", "Teilweise importiert, {n} Fehler"],
        },
    )


@pytest.fixture()
def translator(german: Catalog, english: Catalog) -> Translator:
    return Translator(locale="de", catalog=german, fallbacks=(english,))


def test_translate_substitutes_placeholders(translator: Translator) -> None:
    assert translator("Week {number} of {year}", number=7, year=2024) == "Woche 7 von 2024"


def test_translate_consults_fallback_catalogue(translator: Translator) -> None:
    assert translator.translate("Only English") == "Only English"


def test_translate_returns_key_when_no_catalogue_matches(
    translator: Translator, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG, logger="calendarl10n.catalog.translator"):
        result = translator("{type} at {time}", type="Pop-up", time="10:00")

    assert result == "Pop-up at 10:00"
    assert "Missing translation" in caplog.text


def test_translate_plural_uses_count_placeholder(translator: Translator) -> None:
    assert (
        translator.translate_plural("Partially imported, 1 failure", FAILURES_KEY, 3)
        == "Teilweise importiert, 3 Fehler"
    )
    assert (
        translator.translate_plural("Partially imported, 1 failure", FAILURES_KEY, 1)
        == "Teilweise importiert, 1 Fehler"
    )


def test_translate_plural_falls_back_to_next_catalogue(translator: Translator) -> None:
    assert translator.translate_plural("1 reminder", "{n} reminders", 2) == "2 reminders"


def test_translate_plural_defaults_to_source_strings(translator: Translator) -> None:
    assert translator.translate_plural("{n} day", "{n} days", 1) == "1 day"
    assert translator.translate_plural("{n} day", "{n} days", 4) == "4 days"


def test_translate_plural_surfaces_variant_count_bugs(english: Catalog) -> None:
    broken = Catalog(
        locale_id="de",
        entries={},
        plural_rule=GERMAN_PLURAL_FORMS,
        plural_entries={FAILURES_KEY: ["Teilweise importiert, 1 Fehler"]},
    )
    translator = Translator(locale="de", catalog=broken, fallbacks=(english,))

    with pytest.raises(IndexOutOfRange):
        translator.translate_plural("Partially imported, 1 failure", FAILURES_KEY, 2)


def test_format_message_leaves_unknown_placeholders() -> None:
    assert (
        format_message("{calendar} geteilt von {owner}", {"calendar": "Arbeit"})
        == "Arbeit geteilt von {owner}"
    )


def test_format_message_ignores_non_placeholder_braces() -> None:
    assert format_message("{ 1 } {owner}", {"owner": "Ana"}) == "{ 1 } Ana"
    assert format_message("Kalender", None) == "Kalender"
