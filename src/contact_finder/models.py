"""Protocols and lightweight model types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol


class ContactSource(str, Enum):
    """Which adapter a candidate contact came from."""

    SEARCH = "search"
    PAGE = "page"


@dataclass(frozen=True)
class Lead:
    """Canonical business identity handed to the discovery engine."""

    business_name: str
    address: str | None = None
    website: str | None = None


@dataclass(frozen=True)
class CandidateContact:
    """An unconfirmed person/title pair extracted from free text."""

    full_name: str
    first_name: str
    last_name: str
    title: str | None
    source: ContactSource


@dataclass(frozen=True)
class DiscoveryResult:
    """Deduplicated, capped contacts for one lead."""

    contacts: tuple[CandidateContact, ...] = ()
    page_source_exhausted: bool = False


@dataclass(frozen=True)
class OrganicResult:
    title: str = ""
    snippet: str = ""


@dataclass(frozen=True)
class SearchResponse:
    """Organic results plus the optional knowledge panel description."""

    organic_results: tuple[OrganicResult, ...] = ()
    knowledge_panel_description: str | None = None


@dataclass(frozen=True)
class PageContent:
    text: str | None = None


@dataclass(frozen=True)
class AccountBalance:
    """Remaining provider credits; None when the provider does not say."""

    credits_remaining: int | None = None


@dataclass(frozen=True)
class ContactRecord:
    """Caller-side mapping of a discovered contact with its email guess."""

    business_name: str
    full_name: str
    title: str | None
    email: str | None
    source: str
    email_status: str = "pending"
    email_candidates: tuple[str, ...] = field(default_factory=tuple)


class SearchAdapter(Protocol):
    """Contract for search-snippet providers."""

    def search(self, query: str, num: int) -> SearchResponse:
        """Return organic results for a query."""


class PageContentAdapter(Protocol):
    """Contract for page-text providers."""

    def fetch_clean_text(self, url: str, timeout: float) -> PageContent:
        """Return cleaned text for a URL; empty content on soft failure."""

    def get_account_balance(self) -> AccountBalance:
        """Return remaining credits for the provider account."""

