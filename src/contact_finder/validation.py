"""Validation and runtime guardrails."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

from .errors import ConfigError


def is_supported_url(url: str) -> bool:
    """Allow only absolute HTTP(S) URLs with a hostname."""
    parsed = urlparse(url)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def site_origin(website: str | None) -> str | None:
    """Return scheme://host for a lead website, assuming https when bare."""
    value = (website or "").strip()
    if not value:
        return None
    if "://" not in value:
        value = f"https://{value}"
    if not is_supported_url(value):
        return None
    parsed = urlparse(value)
    return f"{parsed.scheme}://{parsed.netloc.lower()}"


def load_lines_from_file(path: str | Path) -> list[str]:
    """Load non-empty, non-comment lines from a UTF-8 text file."""
    content = Path(path).read_text(encoding="utf-8")
    lines = (line.strip() for line in content.splitlines())
    return [line for line in lines if line and not line.startswith("#")]


def validate_runtime_constraints(
    *,
    leads_file: str | None,
    business_name: str | None,
    max_contacts: int,
    results_per_query: int,
    query_delay: float,
    path_delay: float,
    lead_delay: float,
    request_timeout: float,
    page_timeout: float,
    team_paths: tuple[str, ...],
) -> None:
    """Validate CLI/runtime configuration and raise ConfigError on invalid values."""
    if not leads_file and not (business_name or "").strip():
        raise ConfigError("Provide --leads-file or --business-name.")
    if max_contacts < 1:
        raise ConfigError("--max-contacts must be >= 1.")
    if results_per_query < 1:
        raise ConfigError("--results-per-query must be >= 1.")
    if min(query_delay, path_delay, lead_delay) < 0:
        raise ConfigError("Delays must be >= 0.")
    if request_timeout <= 0 or page_timeout <= 0:
        raise ConfigError("Timeouts must be > 0.")
    if not team_paths:
        raise ConfigError("At least one team page path is required.")
    for path in team_paths:
        if not path.startswith("/"):
            raise ConfigError(f"Team page path must start with '/': {path!r}")
