"""Catalogue registry backed by the packaged JSON resources and manifest."""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .catalog import Catalog
from .errors import InvalidCatalog
from .schema import LocaleManifestEntry, TranslationManifest
from .translator import Translator

_LOGGER = logging.getLogger(__name__)

TRANSLATIONS_DIRECTORY = Path(__file__).resolve().parents[1] / "translations"
MANIFEST_FILE = TRANSLATIONS_DIRECTORY / "manifest.yaml"
DEFAULT_LOCALE_ENV = "CALENDARL10N_DEFAULT_LOCALE"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise InvalidCatalog("Manifest must define a mapping at the top level")
    return data


def _reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key, value in pairs:
        if key in payload:
            raise InvalidCatalog(f"Duplicate key '{key}' in catalogue payload")
        payload[key] = value
    return payload


def _load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle, object_pairs_hook=_reject_duplicates)
        except json.JSONDecodeError as error:
            raise InvalidCatalog(f"Catalogue {path.name} is not valid JSON: {error}") from error
    if not isinstance(data, dict):
        raise InvalidCatalog(f"Catalogue {path.name} must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> TranslationManifest:
    """Load and cache the catalogue manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Translation manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return TranslationManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise InvalidCatalog(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[LocaleManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().locales


def available_locales() -> tuple[str, ...]:
    """Return the locales declared in the manifest."""

    return load_manifest().supported_locales


def base_locale() -> str:
    """Return the locale used when a request names no supported locale."""

    manifest = load_manifest()
    override = os.getenv(DEFAULT_LOCALE_ENV)
    if override and override.strip():
        candidate = override.strip().lower()
        if candidate in manifest.supported_locales:
            return candidate
        _LOGGER.warning("Ignoring unknown locale for %s: %s", DEFAULT_LOCALE_ENV, override)
    return manifest.base_locale


@lru_cache(maxsize=16)
def load_catalog(locale: str) -> Catalog:
    """Load the catalogue declared for ``locale`` from disk."""

    try:
        manifest_entry = load_manifest().get_entry(locale)
    except KeyError as exc:
        raise FileNotFoundError(f"Catalogue for locale '{locale}' not declared in manifest") from exc

    catalog_file = TRANSLATIONS_DIRECTORY / manifest_entry.resolved_filename
    if not catalog_file.exists():
        raise FileNotFoundError(
            f"Catalogue file for locale '{locale}' missing: {catalog_file.name}"
        )

    payload = _load_json(catalog_file)
    catalog = Catalog.from_payload(payload)

    if catalog.locale_id != locale:
        raise InvalidCatalog(
            f"Catalogue locale mismatch: expected {locale}, found {catalog.locale_id}"
        )

    _LOGGER.debug("Loaded catalogue %s with %d entries", locale, len(catalog))
    return catalog


def normalise_locale(locale: str | None) -> str:
    """Normalise a requested locale to a supported catalogue key."""

    if not locale or not locale.strip():
        return base_locale()

    supported = available_locales()
    normalized = locale.strip().lower().replace("_", "-")
    if normalized in supported:
        return normalized

    primary = normalized.split("-")[0]
    return primary if primary in supported else base_locale()


def fallback_chain(locale: str) -> tuple[str, ...]:
    """Return the locales consulted after ``locale``, in order."""

    manifest = load_manifest()
    chain: list[str] = []
    current = manifest.fallback_for(locale)
    while current is not None and current != locale and current not in chain:
        chain.append(current)
        current = manifest.fallback_for(current)
    return tuple(chain)


def get_translator(locale: str | None = None) -> Translator:
    """Return a translator instance for the requested locale."""

    normalized = normalise_locale(locale)
    return Translator(
        locale=normalized,
        catalog=load_catalog(normalized),
        fallbacks=tuple(load_catalog(code) for code in fallback_chain(normalized)),
    )


def load_translations(locale: str | None = None) -> dict[str, Any]:
    """Expose a catalogue and its fallback for API consumers."""

    normalized = normalise_locale(locale)
    catalog = load_catalog(normalized)
    chain = fallback_chain(normalized)
    fallback = load_catalog(chain[0]) if chain else catalog

    return {
        "locale": normalized,
        "available_locales": list(available_locales()),
        "plural_forms": catalog.rule.header,
        "messages": dict(catalog.messages),
        "plurals": {key: list(value) for key, value in catalog.variants.items()},
        "fallback": {
            "locale": fallback.locale_id,
            "messages": dict(fallback.messages),
            "plurals": {key: list(value) for key, value in fallback.variants.items()},
        },
    }


def clear_caches() -> None:
    """Drop cached manifest and catalogues so the next access reloads them."""

    load_catalog.cache_clear()
    load_manifest.cache_clear()


__all__ = [
    "DEFAULT_LOCALE_ENV",
    "MANIFEST_FILE",
    "TRANSLATIONS_DIRECTORY",
    "available_locales",
    "base_locale",
    "clear_caches",
    "fallback_chain",
    "get_translator",
    "load_catalog",
    "load_manifest",
    "load_translations",
    "manifest_entries",
    "normalise_locale",
]
