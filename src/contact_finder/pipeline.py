"""Core orchestration pipeline."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from tqdm import tqdm

from .config import DiscoveryConfig, DiscoverySettings
from .emails import extract_domain, fallback_domain, generate_email_candidates
from .errors import ProviderError, QuotaExhaustedError, RateLimitError
from .extraction import ContactExtractor, markdown_extractor, snippet_extractor
from .fetchers import (
    FirecrawlPageAdapter,
    RequestsFetcher,
    RequestsPageAdapter,
    RobotsPolicy,
    make_retry_session,
)
from .io_leads import read_leads, write_results
from .models import (
    CandidateContact,
    ContactRecord,
    DiscoveryResult,
    Lead,
    PageContentAdapter,
    SearchAdapter,
)
from .names import NameValidator, load_first_names
from .pacing import PacingPolicy
from .search_backends import FallbackSearchBackend, build_queries
from .validation import site_origin


def merge_contacts(*groups: Iterable[CandidateContact]) -> list[CandidateContact]:
    """Dedupe by case-insensitive full name; earlier groups win collisions."""
    output: list[CandidateContact] = []
    seen: set[str] = set()
    for group in groups:
        for contact in group:
            key = contact.full_name.lower()
            if key in seen:
                continue
            seen.add(key)
            output.append(contact)
    return output


@dataclass
class BulkDiscoveryReport:
    """Outcome of a sequential discovery run over many leads."""

    records: list[ContactRecord] = field(default_factory=list)
    leads_processed: int = 0
    page_source_exhausted: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def contacts_found(self) -> int:
        return len(self.records)


class ContactDiscoverer:
    """Drives both sources for a lead and reconciles their contacts."""

    def __init__(
        self,
        *,
        search_adapter: SearchAdapter | None,
        page_adapter: PageContentAdapter | None,
        snippet_extractor: ContactExtractor,
        page_extractor: ContactExtractor,
        settings: DiscoverySettings,
        pacing: PacingPolicy,
        logger: logging.Logger,
    ) -> None:
        self._search_adapter = search_adapter
        self._page_adapter = page_adapter
        self._snippet_extractor = snippet_extractor
        self._page_extractor = page_extractor
        self._settings = settings
        self._pacing = pacing
        self._logger = logger

    def discover_contacts(self, lead: Lead, *, skip_page_source: bool = False) -> DiscoveryResult:
        """Return capped, deduplicated contacts for one lead.

        ``skip_page_source`` lets a bulk run stop paying for page fetches once
        the provider has reported exhausted credits; the result is then
        flagged as exhausted too.
        """
        search_contacts = self._search_pass(lead)
        page_contacts: list[CandidateContact] = []
        exhausted = skip_page_source
        if not skip_page_source:
            page_contacts, exhausted = self._page_pass(lead)

        if self._settings.prefer_search_source:
            merged = merge_contacts(search_contacts, page_contacts)
        else:
            merged = merge_contacts(page_contacts, search_contacts)
        contacts = tuple(merged[: self._settings.max_contacts])
        self._logger.info(
            "%s: %d contacts (%d search, %d page candidates)",
            lead.business_name,
            len(contacts),
            len(search_contacts),
            len(page_contacts),
        )
        return DiscoveryResult(contacts=contacts, page_source_exhausted=exhausted)

    def _search_pass(self, lead: Lead) -> list[CandidateContact]:
        if self._search_adapter is None:
            return []
        contacts: list[CandidateContact] = []
        queries = build_queries(lead.business_name, lead.address)
        for index, query in enumerate(queries):
            if index:
                self._pacing.between_queries()
            self._logger.debug("Searching: %s", query)
            try:
                response = self._search_adapter.search(query, self._settings.results_per_query)
            except RateLimitError as exc:
                self._logger.warning("Search pass stopped for %s: %s", lead.business_name, exc)
                break
            except ProviderError as exc:
                self._logger.warning("Search failed for %r: %s", query, exc)
                continue
            except Exception:
                self._logger.exception("Search failed for %r", query)
                continue
            for result in response.organic_results:
                text = f"{result.title} {result.snippet}"
                contacts.extend(self._snippet_extractor.extract_contacts(text, lead.business_name))
            if response.knowledge_panel_description:
                contacts.extend(
                    self._snippet_extractor.extract_contacts(
                        response.knowledge_panel_description, lead.business_name
                    )
                )
        return contacts

    def _page_pass(self, lead: Lead) -> tuple[list[CandidateContact], bool]:
        origin = site_origin(lead.website)
        if self._page_adapter is None or origin is None:
            return [], False

        try:
            balance = self._page_adapter.get_account_balance()
        except ProviderError as exc:
            self._logger.warning("Balance probe failed, crawling anyway: %s", exc)
        except Exception:
            self._logger.exception("Balance probe failed, crawling anyway")
        else:
            if balance.credits_remaining is not None and balance.credits_remaining <= 0:
                self._logger.warning("Page source has no credits left; skipping %s", origin)
                return [], True

        contacts: list[CandidateContact] = []
        for index, path in enumerate(self._settings.team_paths):
            if index:
                self._pacing.between_paths()
            url = f"{origin}{path}"
            try:
                page = self._page_adapter.fetch_clean_text(url, self._settings.page_timeout)
            except QuotaExhaustedError as exc:
                self._logger.warning("Page pass stopped for %s: %s", origin, exc)
                return contacts, True
            except RateLimitError as exc:
                self._logger.warning("Page pass stopped for %s: %s", origin, exc)
                break
            except ProviderError as exc:
                self._logger.debug("Page fetch failed for %s: %s", url, exc)
                continue
            except Exception:
                self._logger.exception("Page fetch failed for %s", url)
                continue
            if not page.text:
                self._logger.debug("No content for %s", url)
                continue
            found = self._page_extractor.extract_contacts(page.text, lead.business_name)
            if not found:
                continue
            self._logger.info("Found %d contacts on %s", len(found), url)
            contacts.extend(found)
            if self._settings.stop_after_first_productive_page:
                break
        return contacts, False

    def discover_many(
        self, leads: Sequence[Lead], *, show_progress: bool = False
    ) -> BulkDiscoveryReport:
        """Process leads one at a time with a pause between them."""
        report = BulkDiscoveryReport()
        iterator: Iterable[Lead] = leads
        if show_progress:
            iterator = tqdm(leads, total=len(leads), desc="discovering contacts")
        for index, lead in enumerate(iterator):
            if index:
                self._pacing.between_leads()
            try:
                result = self.discover_contacts(
                    lead, skip_page_source=report.page_source_exhausted
                )
            except Exception as exc:
                self._logger.exception("Failed to process %s", lead.business_name)
                report.errors.append(f"Failed to process {lead.business_name}: {exc}")
                continue
            if result.page_source_exhausted:
                report.page_source_exhausted = True
            report.records.extend(build_contact_records(lead, result))
            report.leads_processed += 1
        return report


def build_contact_records(lead: Lead, result: DiscoveryResult) -> list[ContactRecord]:
    """Map contacts to records with the first synthesized email chosen."""
    domain = extract_domain(lead.website) if lead.website else ""
    if not domain:
        domain = fallback_domain(lead.business_name)
    records: list[ContactRecord] = []
    for contact in result.contacts:
        candidates = generate_email_candidates(contact.first_name, contact.last_name, domain)
        records.append(
            ContactRecord(
                business_name=lead.business_name,
                full_name=contact.full_name,
                title=contact.title,
                email=candidates[0] if candidates else None,
                source=contact.source.value,
                email_candidates=tuple(candidates),
            )
        )
    return records


def build_discoverer(config: DiscoveryConfig, *, logger: logging.Logger) -> ContactDiscoverer:
    """Wire concrete adapters, extractors, and policies from configuration."""
    validator = NameValidator(load_first_names(config.first_names_file), logger=logger)
    session = make_retry_session(config.user_agent)
    search_adapter = FallbackSearchBackend(
        session,
        user_agent=config.user_agent,
        timeout=config.request_timeout,
        serper_key=config.serper_key,
        serpapi_key=config.serpapi_key,
        logger=logger,
    )
    page_adapter: PageContentAdapter | None = None
    if config.use_page_fetch:
        if config.firecrawl_key:
            page_adapter = FirecrawlPageAdapter(
                session=session, api_key=config.firecrawl_key, logger=logger
            )
        else:
            page_adapter = RequestsPageAdapter(
                RequestsFetcher(
                    session=session,
                    robots_policy=RobotsPolicy(config.user_agent),
                    timeout=config.request_timeout,
                    logger=logger,
                )
            )
    return ContactDiscoverer(
        search_adapter=search_adapter,
        page_adapter=page_adapter,
        snippet_extractor=snippet_extractor(validator, logger),
        page_extractor=markdown_extractor(validator, logger),
        settings=config.settings(),
        pacing=config.pacing(),
        logger=logger,
    )


def load_input_leads(config: DiscoveryConfig, *, logger: logging.Logger) -> list[Lead]:
    if config.leads_file:
        return read_leads(config.leads_file, logger=logger)
    return [
        Lead(
            business_name=(config.business_name or "").strip(),
            address=config.address,
            website=config.website,
        )
    ]


def run_pipeline(config: DiscoveryConfig, *, logger: logging.Logger) -> BulkDiscoveryReport:
    """Build concrete dependencies, run discovery, and write JSON output."""
    leads = load_input_leads(config, logger=logger)
    logger.info("Leads to process: %d", len(leads))
    discoverer = build_discoverer(config, logger=logger)
    report = discoverer.discover_many(leads, show_progress=config.show_progress)
    write_results(config.output, report.records)
    if report.page_source_exhausted:
        logger.warning("Page source ran out of credits; results are partial.")
    return report
