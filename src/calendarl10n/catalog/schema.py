"""Pydantic models describing catalogue payloads and the locale manifest."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import InvalidCatalog
from .plural import PluralRule


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _check_keys(keys: Sequence[str], section: str) -> None:
    for key in keys:
        if not key.strip():
            raise InvalidCatalog(f"{section} keys must be non-empty strings")


class CatalogDocument(ImmutableModel):
    """Serialised form of a single locale catalogue.

    Singular messages and plural-form variants live in separate sections so
    a plural entry is never inferred from the shape of its value.
    """

    locale: str = Field(alias="localeId", min_length=1)
    plural_forms: str = Field(alias="pluralRule")
    messages: Mapping[str, str] = Field(default_factory=dict, alias="entries")
    plurals: Mapping[str, tuple[str, ...]] = Field(
        default_factory=dict, alias="pluralEntries"
    )

    @field_validator("locale")
    @classmethod
    def _strip_locale(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise InvalidCatalog("Catalogue locale must not be empty")
        return stripped

    @field_validator("plural_forms")
    @classmethod
    def _validate_plural_forms(cls, value: str) -> str:
        return PluralRule.parse(value).header

    @model_validator(mode="after")
    def _validate_sections(self) -> CatalogDocument:
        _check_keys(list(self.messages), "Message")
        _check_keys(list(self.plurals), "Plural entry")

        overlap = set(self.messages) & set(self.plurals)
        if overlap:
            raise InvalidCatalog(
                "Keys cannot be both messages and plural entries: "
                f"{', '.join(sorted(overlap))}"
            )

        expected = self.plural_rule.nplurals
        for key, variants in self.plurals.items():
            if len(variants) != expected:
                raise InvalidCatalog(
                    f"Plural entry '{key}' defines {len(variants)} variant(s); "
                    f"the plural rule requires {expected}"
                )
        return self

    @property
    def plural_rule(self) -> PluralRule:
        return PluralRule.parse(self.plural_forms)


class LocaleManifestEntry(ImmutableModel):
    """Describes a packaged catalogue declared in the manifest."""

    locale: str = Field(min_length=1)
    filename: str | None = None
    fallback: str | None = None
    label: str | None = None

    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.locale}.json"


class TranslationManifest(ImmutableModel):
    """Manifest enumerating the catalogues shipped with the package."""

    base_locale: str
    locales: tuple[LocaleManifestEntry, ...]

    @model_validator(mode="before")
    @classmethod
    def _coerce_locale_entries(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        raw_entries = data.get("locales")
        if not isinstance(raw_entries, Sequence) or isinstance(raw_entries, str):
            return data

        entries: list[Any] = []
        for entry in raw_entries:
            if isinstance(entry, str):
                entries.append({"locale": entry})
            else:
                entries.append(entry)
        copied = dict(data)
        copied["locales"] = entries
        return copied

    @model_validator(mode="after")
    def _validate_entries(self) -> TranslationManifest:
        if not self.locales:
            raise InvalidCatalog("Manifest must declare at least one locale")

        seen: set[str] = set()
        for entry in self.locales:
            if entry.locale in seen:
                raise InvalidCatalog(
                    f"Duplicate locale '{entry.locale}' declared in manifest"
                )
            seen.add(entry.locale)

        if self.base_locale not in seen:
            raise InvalidCatalog(
                f"Base locale '{self.base_locale}' is not declared in the manifest"
            )

        for entry in self.locales:
            if entry.fallback is not None and entry.fallback not in seen:
                raise InvalidCatalog(
                    f"Locale '{entry.locale}' falls back to unknown locale "
                    f"'{entry.fallback}'"
                )
            if entry.fallback == entry.locale:
                raise InvalidCatalog(
                    f"Locale '{entry.locale}' cannot fall back to itself"
                )
        return self

    @property
    def supported_locales(self) -> tuple[str, ...]:
        return tuple(entry.locale for entry in self.locales)

    def get_entry(self, locale: str) -> LocaleManifestEntry:
        for entry in self.locales:
            if entry.locale == locale:
                return entry
        raise KeyError(locale)

    def fallback_for(self, locale: str) -> str | None:
        """Return the locale consulted when ``locale`` lacks a translation."""

        entry = self.get_entry(locale)
        if entry.fallback is not None:
            return entry.fallback
        return None if locale == self.base_locale else self.base_locale


__all__ = [
    "CatalogDocument",
    "ImmutableModel",
    "LocaleManifestEntry",
    "TranslationManifest",
]
