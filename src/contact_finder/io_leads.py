"""Lead input and contact output helpers."""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Iterable
from dataclasses import asdict
from pathlib import Path

from .errors import ConfigError
from .models import ContactRecord, Lead

# Accepted header spellings for each lead field; first match wins.
LEAD_COLUMNS = {
    "business_name": ("business_name", "businessName", "name", "title"),
    "address": ("address",),
    "website": ("website", "url"),
}


def _column(row: dict[str, str | None], field_name: str) -> str | None:
    for key in LEAD_COLUMNS[field_name]:
        value = row.get(key)
        if value and value.strip():
            return value.strip()
    return None


def lead_from_row(row: dict[str, str | None]) -> Lead | None:
    """Adapt one CSV/database row into a Lead; None without a business name."""
    business_name = _column(row, "business_name")
    if not business_name:
        return None
    return Lead(
        business_name=business_name,
        address=_column(row, "address"),
        website=_column(row, "website"),
    )


def read_leads(path: str, *, logger: logging.Logger) -> list[Lead]:
    """Read leads from a UTF-8 CSV file with a header row.

    Raises ConfigError when the file cannot be opened or decoded.
    """
    leads: list[Lead] = []
    try:
        with Path(path).open(newline="", encoding="utf-8") as file_obj:
            for line_number, row in enumerate(csv.DictReader(file_obj), start=2):
                lead = lead_from_row(row)
                if lead is None:
                    logger.warning("Skipping row %d without a business name", line_number)
                    continue
                leads.append(lead)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read leads file {path}: {exc}") from exc
    return leads


def write_results(path: str, records: Iterable[ContactRecord]) -> None:
    """Write contact records as a JSON array."""
    payload = [asdict(record) for record in records]
    Path(path).write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
