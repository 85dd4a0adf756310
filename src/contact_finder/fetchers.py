"""HTTP fetchers and page-content adapters."""

from __future__ import annotations

import logging
import urllib.robotparser
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from requests import Session
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException, Timeout
from urllib3.util.retry import Retry

from .errors import ProviderError, QuotaExhaustedError, RateLimitError
from .models import AccountBalance, PageContent
from .validation import is_supported_url

FIRECRAWL_SCRAPE_URL = "https://api.firecrawl.dev/v1/scrape"
FIRECRAWL_CREDITS_URL = "https://api.firecrawl.dev/v1/team/credit-usage"

_DROP_TAGS = ("script", "style", "noscript", "template", "svg", "nav", "header", "footer", "form")
_BLOCK_TAGS = (
    "p", "div", "section", "article", "li", "ul", "ol", "tr", "td", "th", "table",
    "h1", "h2", "h3", "h4", "h5", "h6", "br", "figure", "figcaption", "blockquote",
)


class RobotsPolicy:
    """robots.txt cache and allow checks."""

    def __init__(self, user_agent: str) -> None:
        self._user_agent = user_agent
        self._cache: dict[str, urllib.robotparser.RobotFileParser | None] = {}

    def allowed(self, url: str) -> bool:
        """Return True if robots policy allows this URL."""
        if not is_supported_url(url):
            return False
        parsed = urlparse(url)
        origin = f"{parsed.scheme}://{parsed.netloc}"

        if origin not in self._cache:
            parser = urllib.robotparser.RobotFileParser()
            parser.set_url(origin.rstrip("/") + "/robots.txt")
            try:
                parser.read()
                self._cache[origin] = parser
            except (OSError, ValueError):
                self._cache[origin] = None
        parser = self._cache[origin]

        if parser is None:
            return True
        return parser.can_fetch(self._user_agent, url)


def make_retry_session(user_agent: str) -> Session:
    """Create requests session with retry/backoff defaults.

    HTTP 429 is neither retried nor waited out here; callers turn it into
    RateLimitError.
    """
    session = Session()
    session.headers.update({"User-Agent": user_agent})
    retry = Retry(
        total=3,
        backoff_factor=0.6,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=frozenset({"GET", "POST"}),
        respect_retry_after_header=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def html_to_text(html: str) -> str:
    """Reduce HTML to markdown-ish text: one block per line, bold kept as **...**."""
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup.find_all(_DROP_TAGS):
        tag.extract()
    for tag in soup.find_all(["strong", "b"]):
        text = tag.get_text(" ", strip=True)
        if text:
            tag.replace_with(f"**{text}**")
        else:
            tag.extract()
    for level in range(1, 7):
        for tag in soup.find_all(f"h{level}"):
            tag.insert(0, "#" * level + " ")
    for tag in soup.find_all(_BLOCK_TAGS):
        tag.insert_before("\n")
        tag.insert_after("\n")
    lines = (" ".join(line.split()) for line in soup.get_text().splitlines())
    return "\n".join(line for line in lines if line)


class RequestsFetcher:
    """Requests-based fetcher with robots checks."""

    def __init__(
        self,
        *,
        session: Session,
        robots_policy: RobotsPolicy,
        timeout: float,
        logger: logging.Logger,
    ) -> None:
        self._session = session
        self._robots_policy = robots_policy
        self._timeout = timeout
        self._logger = logger

    def fetch(self, url: str, timeout: float | None = None) -> str:
        if not is_supported_url(url):
            self._logger.debug("Skipping unsupported URL: %s", url)
            return ""
        if not self._robots_policy.allowed(url):
            self._logger.info("Skipping due to robots.txt: %s", url)
            return ""
        try:
            response = self._session.get(url, timeout=timeout or self._timeout)
            if response.status_code == 429:
                raise RateLimitError(f"Rate limited while fetching {url}")
            response.raise_for_status()
            return str(response.text)
        except RequestException as exc:
            self._logger.debug("Requests fetch failed for %s: %s", url, exc)
            return ""


class RequestsPageAdapter:
    """Free page-text source: direct fetch plus local HTML cleanup."""

    def __init__(self, fetcher: RequestsFetcher) -> None:
        self._fetcher = fetcher

    def fetch_clean_text(self, url: str, timeout: float) -> PageContent:
        html = self._fetcher.fetch(url, timeout=timeout)
        if not html:
            return PageContent()
        return PageContent(text=html_to_text(html) or None)

    def get_account_balance(self) -> AccountBalance:
        return AccountBalance(credits_remaining=None)


class FirecrawlPageAdapter:
    """Firecrawl scrape API returning main-content markdown."""

    def __init__(self, *, session: Session, api_key: str, logger: logging.Logger) -> None:
        self._session = session
        self._api_key = api_key
        self._logger = logger

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}", "Content-Type": "application/json"}

    def fetch_clean_text(self, url: str, timeout: float) -> PageContent:
        body = {
            "url": url,
            "formats": ["markdown"],
            "onlyMainContent": True,
            "timeout": int(timeout * 1000),
        }
        try:
            response = self._session.post(
                FIRECRAWL_SCRAPE_URL,
                json=body,
                headers=self._headers,
                timeout=timeout + 5.0,
            )
        except Timeout:
            self._logger.debug("Firecrawl timed out for %s", url)
            return PageContent()
        except RequestException as exc:
            self._logger.debug("Firecrawl request failed for %s: %s", url, exc)
            return PageContent()

        if response.status_code == 429:
            raise RateLimitError("Firecrawl rate limit reached")
        if response.status_code == 402:
            raise QuotaExhaustedError("Firecrawl credits exhausted")
        if response.status_code != 200:
            self._logger.debug("Firecrawl returned HTTP %s for %s", response.status_code, url)
            return PageContent()
        try:
            payload = response.json()
        except ValueError:
            return PageContent()
        data = payload.get("data") if isinstance(payload, dict) else None
        markdown = data.get("markdown") if isinstance(data, dict) else None
        return PageContent(text=markdown if isinstance(markdown, str) and markdown else None)

    def get_account_balance(self) -> AccountBalance:
        try:
            response = self._session.get(FIRECRAWL_CREDITS_URL, headers=self._headers, timeout=5.0)
            response.raise_for_status()
            payload = response.json()
        except (RequestException, ValueError) as exc:
            raise ProviderError(f"Firecrawl balance probe failed: {exc}") from exc
        data = payload.get("data") if isinstance(payload, dict) else None
        remaining = data.get("remaining_credits") if isinstance(data, dict) else None
        try:
            return AccountBalance(credits_remaining=int(remaining) if remaining is not None else None)
        except (TypeError, ValueError):
            return AccountBalance(credits_remaining=None)
