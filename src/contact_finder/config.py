"""Runtime configuration model."""

from __future__ import annotations

from dataclasses import dataclass

from .pacing import PacingPolicy
from .validation import validate_runtime_constraints

DEFAULT_USER_AGENT = "ContactFinder/1.0 (+https://github.com/contact-finder/contact-finder)"
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_PAGE_TIMEOUT = 10.0
DEFAULT_MAX_CONTACTS = 15
DEFAULT_RESULTS_PER_QUERY = 10
DEFAULT_QUERY_DELAY = 1.0
DEFAULT_PATH_DELAY = 1.0
DEFAULT_LEAD_DELAY = 2.0
DEFAULT_TEAM_PATHS = (
    "/about",
    "/team",
    "/about-us",
    "/our-team",
    "/leadership",
    "/people",
    "/meet-the-team",
    "/founders",
)


@dataclass(frozen=True)
class DiscoverySettings:
    """Per-lead discovery policy consumed by the orchestrator."""

    max_contacts: int = DEFAULT_MAX_CONTACTS
    results_per_query: int = DEFAULT_RESULTS_PER_QUERY
    page_timeout: float = DEFAULT_PAGE_TIMEOUT
    team_paths: tuple[str, ...] = DEFAULT_TEAM_PATHS
    stop_after_first_productive_page: bool = True
    prefer_search_source: bool = True


@dataclass(frozen=True)
class DiscoveryConfig:
    """Validated configuration used by the discovery pipeline."""

    output: str
    leads_file: str | None = None
    business_name: str | None = None
    address: str | None = None
    website: str | None = None
    serper_key: str | None = None
    serpapi_key: str | None = None
    firecrawl_key: str | None = None
    use_page_fetch: bool = True
    first_names_file: str | None = None
    max_contacts: int = DEFAULT_MAX_CONTACTS
    results_per_query: int = DEFAULT_RESULTS_PER_QUERY
    query_delay: float = DEFAULT_QUERY_DELAY
    path_delay: float = DEFAULT_PATH_DELAY
    lead_delay: float = DEFAULT_LEAD_DELAY
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    page_timeout: float = DEFAULT_PAGE_TIMEOUT
    team_paths: tuple[str, ...] = DEFAULT_TEAM_PATHS
    stop_after_first_productive_page: bool = True
    prefer_search_source: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    show_progress: bool = True

    def __post_init__(self) -> None:
        validate_runtime_constraints(
            leads_file=self.leads_file,
            business_name=self.business_name,
            max_contacts=self.max_contacts,
            results_per_query=self.results_per_query,
            query_delay=self.query_delay,
            path_delay=self.path_delay,
            lead_delay=self.lead_delay,
            request_timeout=self.request_timeout,
            page_timeout=self.page_timeout,
            team_paths=self.team_paths,
        )

    def settings(self) -> DiscoverySettings:
        return DiscoverySettings(
            max_contacts=self.max_contacts,
            results_per_query=self.results_per_query,
            page_timeout=self.page_timeout,
            team_paths=self.team_paths,
            stop_after_first_productive_page=self.stop_after_first_productive_page,
            prefer_search_source=self.prefer_search_source,
        )

    def pacing(self) -> PacingPolicy:
        return PacingPolicy(
            query_delay=self.query_delay,
            path_delay=self.path_delay,
            lead_delay=self.lead_delay,
        )
