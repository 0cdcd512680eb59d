"""
Naming utilities for generated namespaces.

Turns arbitrary display strings (product names, user input) into dotted
namespace identifiers that the target language accepts.
"""

import unicodedata
from typing import Set


# Unicode categories that may start an identifier
LETTER_CATEGORIES = frozenset({"Lu", "Ll", "Lt", "Lm", "Lo", "Nl"})

# Unicode categories that may appear anywhere in an identifier
IDENTIFIER_CATEGORIES = LETTER_CATEGORIES | {"Nd", "Mn", "Mc", "Pc"}

SEPARATOR = "."
REPLACEMENT = "_"


class NamespaceSanitizer:
    """Sanitizes dotted namespace identifiers."""

    def __init__(self, reserved_words: Set[str] = None, escape_marker: str = "@"):
        """
        Initialize namespace sanitizer.

        Args:
            reserved_words: Keywords of the target language
            escape_marker: Prefix that lets a keyword be used as an identifier
        """
        self.reserved_words = frozenset(reserved_words or ())
        self.escape_marker = escape_marker

    def sanitize(self, text: str) -> str:
        """
        Sanitize a string into a dotted namespace identifier.

        Never raises. The result is a fixed point: sanitizing it again
        returns it unchanged.

        Args:
            text: Arbitrary input string

        Returns:
            Valid dotted identifier
        """
        # Step 1: Boundary dots become underscores
        text = self._replace_trailing_dots(self._replace_leading_dots(text))

        # Step 2: Accept segments that are still escaped keywords
        text = self._unescape_keywords(text)

        # Step 3: Replace characters that can't appear in an identifier
        cleaned = "".join(self._clean_char(c) for c in text)

        if not cleaned:
            return REPLACEMENT

        # Step 4: Fix each segment
        segments = [part for part in cleaned.split(SEPARATOR) if part]
        return SEPARATOR.join(self._sanitize_segment(part) for part in segments)

    def is_valid(self, name: str) -> bool:
        """Check whether a name is already in sanitized form."""
        return name == self.sanitize(name)

    def _unescape_keywords(self, text: str) -> str:
        """Strip escape markers that precede a reserved word."""
        if self.escape_marker not in text:
            return text

        parts = text.split(SEPARATOR)
        for i, part in enumerate(parts):
            if (
                part.startswith(self.escape_marker)
                and part[len(self.escape_marker):] in self.reserved_words
            ):
                parts[i] = part[len(self.escape_marker):]
        return SEPARATOR.join(parts)

    @staticmethod
    def _clean_char(char: str) -> str:
        if char == SEPARATOR or unicodedata.category(char) in IDENTIFIER_CATEGORIES:
            return char
        return REPLACEMENT

    @staticmethod
    def _replace_leading_dots(text: str) -> str:
        stripped = text.lstrip(SEPARATOR)
        return REPLACEMENT * (len(text) - len(stripped)) + stripped

    @staticmethod
    def _replace_trailing_dots(text: str) -> str:
        stripped = text.rstrip(SEPARATOR)
        return stripped + REPLACEMENT * (len(text) - len(stripped))

    def _sanitize_segment(self, segment: str) -> str:
        first = segment[0]
        if first != REPLACEMENT and unicodedata.category(first) not in LETTER_CATEGORIES:
            segment = REPLACEMENT + segment

        if segment in self.reserved_words:
            segment = f"{self.escape_marker}{segment}"

        return segment
