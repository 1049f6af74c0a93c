"""Name-suffix exemption for exported type declarations."""

from __future__ import annotations

from collections.abc import Iterable


def is_suffix_exempt(name: str, suffixes: Iterable[str]) -> bool:
    """Return True if *name* ends with any of *suffixes* (case-sensitive)."""
    return any(name.endswith(suffix) for suffix in suffixes)


class DeclarationClassifier:
    """Suffix exemption bound to a fixed suffix set."""

    def __init__(self, suffixes: Iterable[str]):
        self._suffixes = tuple(suffixes)

    @property
    def suffixes(self) -> tuple[str, ...]:
        return self._suffixes

    def is_exempt(self, name: str) -> bool:
        return is_suffix_exempt(name, self._suffixes)
