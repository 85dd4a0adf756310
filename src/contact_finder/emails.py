"""Email address synthesis from a person name and a company domain."""

from __future__ import annotations

import re

_PROTOCOL_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)
_WWW_RE = re.compile(r"^www\.", re.IGNORECASE)


def extract_domain(website: str) -> str:
    """Strip protocol, leading www., and any path from a website URL."""
    value = _PROTOCOL_RE.sub("", (website or "").strip())
    value = _WWW_RE.sub("", value)
    value = re.split(r"[/?#]", value, maxsplit=1)[0]
    return value.strip().lower()


def fallback_domain(business_name: str) -> str:
    """Guess a .com domain for a business without a website."""
    return "".join((business_name or "").lower().split()) + ".com"


def _local_part(value: str) -> str:
    return "".join(value.lower().split())


def generate_email_candidates(first_name: str, last_name: str, domain: str) -> list[str]:
    """Return plausible addresses in a fixed, reproducible order.

    The order is first, last, first.last, firstlast, flast, firstl, f.last,
    first_last. Duplicates collapse onto their first position. Empty input
    yields an empty list.
    """
    first = _local_part(first_name)
    last = _local_part(last_name)
    clean_domain = extract_domain(domain)
    if not (first and last and clean_domain):
        return []

    local_parts = [
        first,
        last,
        f"{first}.{last}",
        f"{first}{last}",
        f"{first[0]}{last}",
        f"{first}{last[0]}",
        f"{first[0]}.{last}",
        f"{first}_{last}",
    ]
    return list(dict.fromkeys(f"{local}@{clean_domain}" for local in local_parts))
