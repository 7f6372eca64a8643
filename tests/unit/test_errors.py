"""Behaviour of the catalogue exception hierarchy."""

from __future__ import annotations

import pickle

import pytest

from calendarl10n.catalog import (
    IndexOutOfRange,
    InvalidCatalog,
    LocalizationError,
    MissingTranslation,
)


def test_missing_translation_survives_pickling() -> None:
    error = MissingTranslation("Calendar", "de")

    restored = pickle.loads(pickle.dumps(error))

    assert isinstance(restored, MissingTranslation)
    assert (restored.key, restored.locale) == ("Calendar", "de")
    assert str(restored) == str(error)


def test_index_out_of_range_survives_pickling() -> None:
    error = IndexOutOfRange("Partially imported, {n} failures", 1, 1)

    restored = pickle.loads(pickle.dumps(error))

    assert isinstance(restored, IndexOutOfRange)
    assert (restored.key, restored.index, restored.available) == (
        "Partially imported, {n} failures",
        1,
        1,
    )
    assert str(restored) == str(error)


@pytest.mark.parametrize(
    ("error", "builtin"),
    [
        (InvalidCatalog("broken"), ValueError),
        (MissingTranslation("Calendar", "de"), LookupError),
        (IndexOutOfRange("Calendar", 2, 1), IndexError),
    ],
)
def test_errors_share_base_and_builtin_category(
    error: LocalizationError, builtin: type[Exception]
) -> None:
    assert isinstance(error, LocalizationError)
    assert isinstance(error, builtin)
