"""First-name plausibility set and full-name validation."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import ConfigError
from .validation import load_lines_from_file

DEFAULT_FIRST_NAMES_PATH = Path(__file__).with_name("data") / "first_names.txt"
STOP_WORDS = frozenset({"and", "the", "of", "at", "for", "by"})
MIN_NAME_TOKENS = 2
MAX_NAME_TOKENS = 4


def load_first_names(path: str | Path | None = None) -> frozenset[str]:
    """Load the first-name set once at startup.

    Falls back to the name list bundled with the package. Raises ConfigError
    when the file is missing or holds no names.
    """
    source = Path(path) if path else DEFAULT_FIRST_NAMES_PATH
    try:
        names = frozenset(load_lines_from_file(source))
    except OSError as exc:
        raise ConfigError(f"Cannot read first-name list {source}: {exc}") from exc
    if not names:
        raise ConfigError(f"First-name list {source} is empty.")
    return names


class NameValidator:
    """Decides whether a word sequence is plausibly a human full name."""

    def __init__(self, first_names: frozenset[str], *, logger: logging.Logger | None = None) -> None:
        self._first_names = first_names
        self._logger = logger or logging.getLogger("contact_finder")

    def is_plausible_name(self, text: str) -> bool:
        words = (text or "").split()
        if not MIN_NAME_TOKENS <= len(words) <= MAX_NAME_TOKENS:
            self._logger.debug("Rejected %r: wrong word count (%d)", text, len(words))
            return False
        if words[0] not in self._first_names:
            self._logger.debug("Rejected %r: %r not in name list", text, words[0])
            return False
        if not all(word[0].isupper() for word in words):
            self._logger.debug("Rejected %r: not properly capitalized", text)
            return False
        if len(words[-1]) < 2:
            self._logger.debug("Rejected %r: last name too short", text)
            return False
        return True


def parse_full_name(raw: str, validator: NameValidator) -> tuple[str, str, str] | None:
    """Return (full, first, last) for a plausible name, dropping stop-words."""
    parts = [part for part in (raw or "").split() if part.lower() not in STOP_WORDS]
    if len(parts) < MIN_NAME_TOKENS:
        return None
    full_name = " ".join(parts)
    if not validator.is_plausible_name(full_name):
        return None
    return full_name, parts[0], parts[-1]
