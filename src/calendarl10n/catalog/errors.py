"""Exception hierarchy shared by the catalogue helpers."""

from __future__ import annotations


class LocalizationError(Exception):
    """Base class for catalogue failures surfaced to callers."""


class InvalidCatalog(LocalizationError, ValueError):
    """Raised when catalogue data is malformed at load time."""


class MissingTranslation(LocalizationError, LookupError):
    """Raised when a key has no entry in the requested catalogue."""

    def __init__(self, key: str, locale: str) -> None:
        super().__init__(f"No translation for '{key}' in locale '{locale}'")
        self.key = key
        self.locale = locale

    def __reduce__(self) -> tuple[type[MissingTranslation], tuple[str, str]]:
        return type(self), (self.key, self.locale)


class IndexOutOfRange(LocalizationError, IndexError):
    """Raised when a plural entry defines fewer variants than the rule selects."""

    def __init__(self, key: str, index: int, available: int) -> None:
        super().__init__(
            f"Plural form {index} requested for '{key}' but only "
            f"{available} variant(s) are defined"
        )
        self.key = key
        self.index = index
        self.available = available

    def __reduce__(self) -> tuple[type[IndexOutOfRange], tuple[str, int, int]]:
        return type(self), (self.key, self.index, self.available)


__all__ = [
    "IndexOutOfRange",
    "InvalidCatalog",
    "LocalizationError",
    "MissingTranslation",
]
