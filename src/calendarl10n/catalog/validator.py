"""Utilities for validating translation catalogues and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Sequence

from .catalog import Catalog
from .errors import InvalidCatalog
from .registry import available_locales, fallback_chain, load_catalog, load_manifest
from .translator import PLACEHOLDER_PATTERN


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _placeholders(text: str) -> set[str]:
    return set(PLACEHOLDER_PATTERN.findall(text))


def _validate_messages(catalog: Catalog) -> list[str]:
    errors: list[str] = []
    scope = f"{catalog.locale_id}.entries"

    for key, message in catalog.messages.items():
        if not message.strip():
            errors.append(_format_scope(scope, f"translation for '{key}' is empty"))
            continue

        unknown = _placeholders(message) - _placeholders(key)
        if unknown:
            errors.append(
                _format_scope(
                    scope,
                    (
                        f"translation for '{key}' introduces unknown placeholders: "
                        f"{', '.join(sorted(unknown))}"
                    ),
                )
            )

    return errors


def _validate_plurals(catalog: Catalog) -> list[str]:
    errors: list[str] = []
    scope = f"{catalog.locale_id}.pluralEntries"
    expected = catalog.rule.nplurals

    for key, variants in catalog.variants.items():
        if len(variants) != expected:
            errors.append(
                _format_scope(
                    scope,
                    (
                        f"'{key}' defines {len(variants)} variant(s) but the plural "
                        f"rule requires {expected}"
                    ),
                )
            )

        allowed = _placeholders(key) | {"n"}
        for index, variant in enumerate(variants):
            if not variant.strip():
                errors.append(_format_scope(scope, f"variant {index} of '{key}' is empty"))
                continue
            unknown = _placeholders(variant) - allowed
            if unknown:
                errors.append(
                    _format_scope(
                        scope,
                        (
                            f"variant {index} of '{key}' introduces unknown placeholders: "
                            f"{', '.join(sorted(unknown))}"
                        ),
                    )
                )

    return errors


def _missing_keys(catalog: Catalog, base: Catalog) -> list[str]:
    missing = sorted(set(base.keys()) - set(catalog.keys()))
    if not missing:
        return []
    return [
        _format_scope(
            catalog.locale_id,
            (
                f"missing {len(missing)} key(s) present in '{base.locale_id}': "
                f"{', '.join(missing)}"
            ),
        )
    ]


def validate_catalog(catalog: Catalog, base: Catalog | None = None) -> list[str]:
    """Return a list of validation issues for the provided catalogue."""

    errors: list[str] = []

    errors.extend(_validate_messages(catalog))
    errors.extend(_validate_plurals(catalog))

    if base is not None and base.locale_id != catalog.locale_id:
        errors.extend(_missing_keys(catalog, base))

    return errors


def validate_all_locales(locales: Sequence[str] | None = None) -> dict[str, list[str]]:
    """Validate all declared locales and return issues keyed by locale."""

    targets = locales or available_locales()
    base = load_catalog(load_manifest().base_locale)
    results: dict[str, list[str]] = {}

    for locale in targets:
        catalog = load_catalog(locale)
        results[locale] = validate_catalog(catalog, base)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate packaged translation catalogues and report issues helpful to translators."
        )
    )
    parser.add_argument(
        "locales",
        nargs="*",
        help="Specific locales to validate (defaults to all declared locales)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    try:
        locales = list(args.locales or available_locales())
        base_code = load_manifest().base_locale
    except (FileNotFoundError, InvalidCatalog) as error:
        print(f"failed to load manifest: {error}")
        return 1

    try:
        base: Catalog | None = load_catalog(base_code)
    except (FileNotFoundError, InvalidCatalog) as error:
        print(f"[{base_code}] failed to load base catalogue: {error}")
        base = None

    exit_code = 0 if base is not None else 1

    for locale in locales:
        try:
            catalog = load_catalog(locale)
            chain = fallback_chain(locale)
        except (FileNotFoundError, InvalidCatalog, KeyError) as error:
            print(f"[{locale}] failed to load catalogue: {error}")
            exit_code = 1
            continue

        issues = validate_catalog(catalog, base)
        if issues:
            exit_code = 1
            print(f"[{locale}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            suffix = f" (falls back to {', '.join(chain)})" if chain else ""
            print(f"[{locale}] OK{suffix}")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
