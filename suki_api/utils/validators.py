"""
==============================================================================
Validation Utilities Module
==============================================================================

Parsing and validation helpers for request input.

This module implements:
- StoreIdParser: Lenient store identifier parsing
- ShortCodeValidator: Normalization of vendor-issued short codes

Store ID Parsing Rules:
----------------------
- Leading whitespace is ignored
- An optional sign followed by ASCII digits is read; anything after is
  ignored ("12abc" -> 12)
- No leading digits at all yields None ("abc" -> None); other scripts'
  digits do not count
- A number too long to convert yields None; it could match no store

None is the sentinel for an unusable identifier. Callers treat it as
"matches no store" rather than as a client error.

==============================================================================
"""

from __future__ import annotations

import re
from typing import Optional, Tuple


class StoreIdParser:
    """
    Lenient parser for store identifiers taken from URL paths.

    Example:
        >>> parser = StoreIdParser()
        >>> parser.parse("2")
        2
        >>> parser.parse("abc") is None
        True
    """

    PATTERN = re.compile(r"^\s*([+-]?[0-9]+)")

    def parse(self, raw: Optional[str]) -> Optional[int]:
        """
        Parse a raw identifier.

        Args:
            raw: Path segment as received

        Returns:
            Parsed integer, or None when no leading integer is present
        """
        if raw is None:
            return None

        match = self.PATTERN.match(raw)
        if not match:
            return None

        try:
            return int(match.group(1))
        except ValueError:
            # Beyond the interpreter's integer string limit
            return None


class ShortCodeValidator:
    """
    Validator for vendor-issued short codes.

    Codes are six characters drawn from A-Z and 0-9. Matching is
    case-insensitive, so input is normalized to uppercase.
    """

    ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    LENGTH = 6
    PATTERN = re.compile(r"^[A-Z0-9]{6}$")

    def validate(self, code: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate and normalize a short code.

        Returns:
            Tuple of (is_valid, normalized_code, error_message)
        """
        if not code:
            return False, None, "Short code is required"

        normalized = code.strip().upper()

        if not self.PATTERN.match(normalized):
            return False, None, f"Short code must be {self.LENGTH} letters or digits"

        return True, normalized, None
