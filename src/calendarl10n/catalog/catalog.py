"""Immutable translation catalogue for a single locale."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Sequence, Union

from pydantic import ValidationError

from .errors import IndexOutOfRange, InvalidCatalog, MissingTranslation
from .plural import PluralRule
from .schema import CatalogDocument

MessageSource = Union[Mapping[str, str], Iterable[tuple[str, str]]]
VariantSource = Union[
    Mapping[str, Sequence[str]], Iterable[tuple[str, Sequence[str]]]
]


def _iter_pairs(source: Any) -> Iterator[tuple[Any, Any]]:
    if isinstance(source, Mapping):
        yield from source.items()
        return
    for item in source:
        try:
            key, value = item
        except (TypeError, ValueError) as exc:
            raise InvalidCatalog(f"Catalogue entries must be key/value pairs, got {item!r}") from exc
        yield key, value


def _check_key(key: Any, seen: set[str], locale: str) -> str:
    if not isinstance(key, str) or not key.strip():
        raise InvalidCatalog(f"Catalogue '{locale}' contains an empty or non-string key")
    if key in seen:
        raise InvalidCatalog(f"Catalogue '{locale}' contains duplicate key '{key}'")
    seen.add(key)
    return key


def _freeze_messages(source: Any, locale: str) -> Mapping[str, str]:
    seen: set[str] = set()
    frozen: dict[str, str] = {}
    for key, value in _iter_pairs(source):
        key = _check_key(key, seen, locale)
        if not isinstance(value, str):
            raise InvalidCatalog(f"Translation for '{key}' must be a string")
        frozen[key] = value
    return MappingProxyType(frozen)


def _freeze_variants(source: Any, locale: str) -> Mapping[str, tuple[str, ...]]:
    seen: set[str] = set()
    frozen: dict[str, tuple[str, ...]] = {}
    for key, value in _iter_pairs(source):
        key = _check_key(key, seen, locale)
        if isinstance(value, str) or not isinstance(value, Sequence):
            raise InvalidCatalog(f"Plural entry '{key}' must be a sequence of strings")
        variants = tuple(value)
        if not variants or not all(isinstance(variant, str) for variant in variants):
            raise InvalidCatalog(f"Plural entry '{key}' must be a sequence of strings")
        frozen[key] = variants
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class Catalog:
    """Read-only mapping of message keys to translations for one locale.

    ``entries`` holds singular messages, ``plural_entries`` holds ordered
    per-form variants selected through ``plural_rule``. Both accept either a
    mapping or an iterable of ``(key, value)`` pairs; duplicate keys in the
    pairs raise :class:`InvalidCatalog`.
    Placeholders such as ``{name}`` are returned untouched.
    """

    locale_id: str
    entries: MessageSource
    plural_rule: PluralRule | str
    plural_entries: VariantSource = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.locale_id, str) or not self.locale_id.strip():
            raise InvalidCatalog("Catalogue locale must not be empty")

        rule = self.plural_rule
        if not isinstance(rule, PluralRule):
            rule = PluralRule.parse(rule)

        entries = _freeze_messages(self.entries, self.locale_id)
        plural_entries = _freeze_variants(self.plural_entries, self.locale_id)

        overlap = set(entries) & set(plural_entries)
        if overlap:
            raise InvalidCatalog(
                "Keys cannot be both messages and plural entries: "
                f"{', '.join(sorted(overlap))}"
            )

        object.__setattr__(self, "plural_rule", rule)
        object.__setattr__(self, "entries", entries)
        object.__setattr__(self, "plural_entries", plural_entries)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Catalog:
        """Build a catalogue from its serialised form.

        Plural entries are checked against ``nplurals`` here so that variant
        count mistakes fail the load rather than a later lookup.
        """

        try:
            document = CatalogDocument.model_validate(payload)
        except ValidationError as error:
            raise InvalidCatalog(f"Catalogue validation failed: {error}") from error

        return cls(
            locale_id=document.locale,
            entries=document.messages,
            plural_rule=document.plural_rule,
            plural_entries=document.plurals,
        )

    def to_payload(self) -> dict[str, Any]:
        """Return the serialised form accepted by :meth:`from_payload`."""

        return {
            "localeId": self.locale_id,
            "pluralRule": self.rule.header,
            "entries": dict(self.messages),
            "pluralEntries": {key: list(value) for key, value in self.variants.items()},
        }

    @property
    def rule(self) -> PluralRule:
        return self.plural_rule  # type: ignore[return-value]

    @property
    def messages(self) -> Mapping[str, str]:
        return self.entries  # type: ignore[return-value]

    @property
    def variants(self) -> Mapping[str, tuple[str, ...]]:
        return self.plural_entries  # type: ignore[return-value]

    def lookup(self, key: str) -> str:
        """Return the translation stored for ``key``."""

        try:
            return self.messages[key]
        except KeyError:
            raise MissingTranslation(key, self.locale_id) from None

    def select_plural_form(self, key: str, n: int) -> str:
        """Return the variant of ``key`` selected by the plural rule for ``n``."""

        variants = self.variants.get(key)
        if variants is None:
            raise MissingTranslation(key, self.locale_id)

        index = self.rule(n)
        if index < 0 or index >= len(variants):
            raise IndexOutOfRange(key, index, len(variants))
        return variants[index]

    def keys(self) -> tuple[str, ...]:
        return (*self.messages, *self.variants)

    def __contains__(self, key: object) -> bool:
        return key in self.messages or key in self.variants

    def __len__(self) -> int:
        return len(self.messages) + len(self.variants)

    def __hash__(self) -> int:
        return hash(
            (
                self.locale_id,
                self.rule.header,
                frozenset(self.messages.items()),
                frozenset(self.variants.items()),
            )
        )


__all__ = ["Catalog"]
