"""Caller-side helpers applying fallback policy and placeholder substitution."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping

from .catalog import Catalog
from .errors import MissingTranslation

_LOGGER = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"{\s*([A-Za-z_][A-Za-z0-9_]*)\s*}")


def format_message(template: str, values: Mapping[str, Any] | None = None) -> str:
    """Replace ``{name}`` tokens in ``template`` with entries from ``values``.

    Tokens without a matching value are left in place so a missing argument
    degrades to visible text instead of an exception.
    """

    if not values:
        return template

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in values:
            return str(values[name])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_substitute, template)


@dataclass(frozen=True)
class Translator:
    """Callable helper for retrieving localized strings."""

    locale: str
    catalog: Catalog
    fallbacks: tuple[Catalog, ...] = ()

    def __call__(self, key: str, **values: Any) -> str:
        return self.translate(key, **values)

    def translate(self, key: str, **values: Any) -> str:
        """Return ``key`` translated, falling back to the key itself."""

        for catalog in (self.catalog, *self.fallbacks):
            try:
                message = catalog.lookup(key)
            except MissingTranslation:
                continue
            return format_message(message, values)

        _LOGGER.debug("Missing translation for %r in locale %s", key, self.locale)
        return format_message(key, values)

    def translate_plural(self, singular: str, plural: str, n: int, **values: Any) -> str:
        """Return the plural form for ``n``, keyed by the plural source string.

        ``n`` is always available to the message as the ``{n}`` placeholder.
        Without any catalogue entry the English two-form choice applies.
        """

        arguments = {"n": n, **values}
        for catalog in (self.catalog, *self.fallbacks):
            try:
                message = catalog.select_plural_form(plural, n)
            except MissingTranslation:
                continue
            return format_message(message, arguments)

        _LOGGER.debug("Missing plural translation for %r in locale %s", plural, self.locale)
        return format_message(singular if n == 1 else plural, arguments)


__all__ = ["PLACEHOLDER_PATTERN", "Translator", "format_message"]
