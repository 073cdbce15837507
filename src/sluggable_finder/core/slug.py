"""Slug normalization for URL-safe record identifiers."""

from __future__ import annotations

import re
from typing import Any

_ALNUM_RUN = re.compile(r"[a-z0-9]+")
_TRAILING_NON_ALNUM = re.compile(r"[^a-z0-9]+$")


class SlugGenerator:
    """Turn arbitrary source values into URL-safe tokens.

    Tokens contain only lower-case ASCII letters, digits and single
    separators, never start or end with a separator, and are empty when
    the input has no ASCII alphanumerics.
    """

    def __init__(self, separator: str = "-", max_length: int | None = None) -> None:
        """Initialize slug generator.

        Args:
            separator: String placed between alphanumeric runs; must not contain ASCII letters or digits.
            max_length: Maximum length for generated slugs. Use None to disable truncation.
        """
        self.separator = separator
        self.max_length = max_length

    def normalize(self, raw: Any) -> str:
        """Generate a URL-safe token from any value."""
        if raw is None:
            return ""
        token = self.separator.join(_ALNUM_RUN.findall(str(raw).lower()))
        return self.truncate(token)

    def truncate(self, value: str) -> str:
        """Truncate a value to the configured max length."""
        if self.max_length is None or len(value) <= self.max_length:
            return value
        # separators never contain ASCII alphanumerics
        return _TRAILING_NON_ALNUM.sub("", value[: self.max_length])

    def in_family(self, candidate: str, token: str | None) -> bool:
        """Check whether token is the candidate or ``candidate + separator + <digits>``."""
        if not token:
            return False
        if token == candidate:
            return True
        prefix = candidate + self.separator
        if not token.startswith(prefix):
            return False
        suffix = token[len(prefix) :]
        return suffix.isascii() and suffix.isdigit()

    def with_suffix(self, candidate: str, n: int) -> str:
        """Build the disambiguated form of a candidate."""
        return f"{candidate}{self.separator}{n}"
