"""Translation catalogues, plural rules and the registry that loads them."""

from .catalog import Catalog
from .errors import IndexOutOfRange, InvalidCatalog, LocalizationError, MissingTranslation
from .plural import GERMAN_PLURAL_FORMS, PluralRule
from .registry import (
    available_locales,
    get_translator,
    load_catalog,
    load_translations,
    normalise_locale,
)
from .translator import Translator, format_message

__all__ = [
    "Catalog",
    "GERMAN_PLURAL_FORMS",
    "IndexOutOfRange",
    "InvalidCatalog",
    "LocalizationError",
    "MissingTranslation",
    "PluralRule",
    "Translator",
    "available_locales",
    "format_message",
    "get_translator",
    "load_catalog",
    "load_translations",
    "normalise_locale",
]
