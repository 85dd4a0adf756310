"""Name/title pattern extraction from search snippets and page text."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .models import CandidateContact, ContactSource
from .names import MIN_NAME_TOKENS, NameValidator, parse_full_name

_LETTERS = "A-Za-zÀ-ÿ"

# One capitalized word: upper, lower, then a bounded tail (Jean-Luc, O'Neil, McKay).
# "And" never counts as a name word so name lists split on it.
NAME_TOKEN = rf"(?!And(?![{_LETTERS}]))[A-ZÀ-Þ][a-zß-ÿ'][{_LETTERS}'\-]{{0,28}}"
# Two to four such words separated by single spaces, not glued to other letters.
NAME = rf"(?<![{_LETTERS}'\-]){NAME_TOKEN}(?: {NAME_TOKEN}){{1,3}}(?![{_LETTERS}])"

_TITLE_QUALIFIER = (
    r"(?:Marketing|Operations|Sales|General|Managing|Executive|Senior|Creative"
    r"|Technical|Office|Account|Store|Practice|Founding|Regional)\s+"
)
# Known-title gazetteer, longest alternatives first.
TITLE = (
    rf"(?i:(?:{_TITLE_QUALIFIER})?"
    r"(?:Chief\s+[A-Za-z]{2,20}\s+Officer|Co-?Founder|Founder|Vice\s+President"
    r"|President|CEO|CTO|CFO|COO|CMO|CIO|CPO|VP|Director|Manager|Owner"
    r"|Principal|Partner|Head\s+of\s+[A-Za-z]{2,20}))"
)
# Free-form capitalized title words as they appear on team pages.
TITLE_WORDS = r"[A-Z][A-Za-z&/\-]{0,30}(?:[ ](?:of|and|&|[A-Z][A-Za-z&/\-]{0,30})){0,5}"

_KNOWN_TITLE_RE = re.compile(rf"\b{TITLE}\b")
_NAME_LIST_SPLIT_RE = re.compile(r"\s*,\s*(?:and\s+)?|\s+and\s+", re.IGNORECASE)


def is_known_title(text: str | None) -> bool:
    """Return True when the text contains a gazetteer title as a whole word."""
    return bool(text) and _KNOWN_TITLE_RE.search(text) is not None


def clean_title(text: str | None) -> str | None:
    """Collapse whitespace and strip trailing punctuation from a title."""
    if not text:
        return None
    value = " ".join(text.split()).strip(" -–—|:,.;")
    return value or None


@dataclass(frozen=True)
class ContactPattern:
    """One phrasing that ties a person name to a role."""

    label: str
    regex: re.Pattern[str]
    default_title: str | None = None
    require_known_title: bool = False
    multi_name: bool = False


NAME_TITLE = ContactPattern(
    label="name_title",
    regex=re.compile(rf"(?P<name>{NAME})(?:\s*[,\-–—|])?\s+(?P<title>{TITLE})\b"),
)
FOUNDED_BY = ContactPattern(
    label="founded_by",
    regex=re.compile(
        r"\b(?i:founded|started|created|established|launched)\s+(?i:by)\s+"
        rf"(?P<name>{NAME}(?:(?:,\s+|,?\s+(?i:and)\s+){NAME}){{0,3}})"
    ),
    default_title="Founder",
    multi_name=True,
)
TITLE_NAME = ContactPattern(
    label="title_name",
    regex=re.compile(rf"\b(?P<title>{TITLE})(?:\s*[:\-–—|]\s*|\s+)(?P<name>{NAME})"),
)
IS_ROLE = ContactPattern(
    label="is_role",
    regex=re.compile(
        rf"(?P<name>{NAME})\s+(?:is|serves\s+as|works\s+as)\s+(?:(?:the|a|an|our)\s+)?"
        r"(?P<title>[A-Za-z][A-Za-z&\- ]{0,60}?)"
        r"(?=\s*[.,;:!?()]|\s*$|\s+(?:of|at|for|with|in)\b)",
        re.MULTILINE,
    ),
    require_known_title=True,
)
BOLD_NAME = ContactPattern(
    label="bold_name",
    regex=re.compile(
        rf"\*\*(?P<name>{NAME})\*\*(?:[ \t]*[-–—|:,][ \t]*|[ \t]*\n+[ \t]*)"
        rf"(?P<title>{TITLE_WORDS})"
    ),
)
HEADING_NAME = ContactPattern(
    label="heading_name",
    regex=re.compile(
        rf"^#{{1,6}}[ \t]+(?P<name>{NAME})[ \t]*\n+[ \t]*(?P<title>{TITLE_WORDS})",
        re.MULTILINE,
    ),
    require_known_title=True,
)
NAME_COMMA_TITLE = ContactPattern(
    label="name_comma_title",
    regex=re.compile(rf"(?P<name>{NAME}),[ \t]*(?P<title>{TITLE_WORDS})"),
    require_known_title=True,
)
TITLE_COLON_NAME = ContactPattern(
    label="title_colon_name",
    regex=re.compile(rf"(?P<title>{TITLE_WORDS}):[ \t]*(?P<name>{NAME})"),
    require_known_title=True,
)

SNIPPET_PATTERNS: tuple[ContactPattern, ...] = (NAME_TITLE, FOUNDED_BY, TITLE_NAME, IS_ROLE)
MARKDOWN_PATTERNS: tuple[ContactPattern, ...] = (
    BOLD_NAME,
    HEADING_NAME,
    NAME_COMMA_TITLE,
    TITLE_COLON_NAME,
    FOUNDED_BY,
    IS_ROLE,
)


class ContactExtractor:
    """Runs an ordered battery of patterns over text and validates every name.

    Overlapping matches are kept; deduplication happens once all sources for a
    lead have been collected.
    """

    def __init__(
        self,
        validator: NameValidator,
        *,
        patterns: Sequence[ContactPattern],
        source: ContactSource,
        logger: logging.Logger | None = None,
    ) -> None:
        self._validator = validator
        self._patterns = tuple(patterns)
        self._source = source
        self._logger = logger or logging.getLogger("contact_finder")

    def extract_contacts(self, text: str | None, business_name: str | None = None) -> list[CandidateContact]:
        """Return every validated contact found in ``text``.

        ``business_name`` is unused; matches are never filtered by it.
        """
        if not text or not text.strip():
            return []
        contacts: list[CandidateContact] = []
        for pattern in self._patterns:
            contacts.extend(self.match_pattern(pattern, text))
        return contacts

    def match_pattern(self, pattern: ContactPattern, text: str) -> list[CandidateContact]:
        """Match, validate and collect contacts for a single pattern."""
        contacts: list[CandidateContact] = []
        for match in pattern.regex.finditer(text):
            groups = match.groupdict()
            title = clean_title(groups.get("title")) or pattern.default_title
            if pattern.require_known_title and not is_known_title(title):
                self._logger.debug("[%s] %r is not a known title", pattern.label, title)
                continue
            contacts.extend(self._build(self._split_names(pattern, groups["name"]), title))
        return contacts

    @staticmethod
    def _split_names(pattern: ContactPattern, raw: str) -> list[str]:
        if not pattern.multi_name:
            return [raw]
        return [part for part in _NAME_LIST_SPLIT_RE.split(raw) if part.strip()]

    def _resolve_name(self, raw: str) -> tuple[str, str, str] | None:
        """Validate a matched name, retrying without leading words.

        Regex matches swallow capitalized words in front of a name ("Meet Jane
        Doe", "Acme Bakery Jane Doe"), so shorter trailing windows get a try
        before the match is dropped.
        """
        words = raw.split()
        for start in range(max(len(words) - MIN_NAME_TOKENS + 1, 1)):
            parsed = parse_full_name(" ".join(words[start:]), self._validator)
            if parsed is not None:
                return parsed
        return None

    def _build(self, raw_names: Iterable[str], title: str | None) -> list[CandidateContact]:
        contacts: list[CandidateContact] = []
        for raw in raw_names:
            parsed = self._resolve_name(raw)
            if parsed is None:
                continue
            full_name, first_name, last_name = parsed
            contacts.append(
                CandidateContact(
                    full_name=full_name,
                    first_name=first_name,
                    last_name=last_name,
                    title=title,
                    source=self._source,
                )
            )
        return contacts


def snippet_extractor(validator: NameValidator, logger: logging.Logger | None = None) -> ContactExtractor:
    """Extractor tuned for search-result titles and snippets."""
    return ContactExtractor(
        validator, patterns=SNIPPET_PATTERNS, source=ContactSource.SEARCH, logger=logger
    )


def markdown_extractor(validator: NameValidator, logger: logging.Logger | None = None) -> ContactExtractor:
    """Extractor tuned for markdown-formatted page content."""
    return ContactExtractor(
        validator, patterns=MARKDOWN_PATTERNS, source=ContactSource.PAGE, logger=logger
    )
