"""Claim list CSV export."""

from __future__ import annotations

import csv
import io
from datetime import date, datetime, timezone
from typing import Any, Iterable, Sequence

from app.services.claim_lifecycle import find_accepted_scheduled_date, format_claim_number
from app.services.claim_records import ClaimRecord
from app.services.claim_selection_service import ClaimsFilter, apply_filter
from app.utils.datetime_parsing import coerce_datetime


EXPORT_COLUMNS = [
    "Claim #",
    "Status",
    "Title",
    "Description",
    "Classification",
    "Homeowner",
    "Contractor",
    "Scheduled Date",
    "Date Submitted",
    "Date Evaluated",
    "Attachments",
]

CSV_DANGEROUS_PREFIXES = ("=", "+", "-", "@")


def _csv_safe(value: str) -> str:
    if value and value.startswith(CSV_DANGEROUS_PREFIXES):
        return f"'{value}"
    return value


def _format_date(value: Any) -> str:
    parsed = coerce_datetime(value).value
    if parsed is None:
        return ""
    return parsed.date().isoformat()


def _serialize_csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def prepare_claims_for_export(claims: Iterable[ClaimRecord]) -> list[dict[str, Any]]:
    """One row per claim keyed by EXPORT_COLUMNS."""
    rows: list[dict[str, Any]] = []
    for claim in claims:
        scheduled = find_accepted_scheduled_date(claim)
        rows.append(
            {
                "Claim #": format_claim_number(claim),
                "Status": claim.status.value,
                "Title": claim.title,
                "Description": claim.description or "",
                "Classification": claim.classification.value,
                "Homeowner": claim.homeowner_name or "",
                "Contractor": claim.contractor_name or "",
                "Scheduled Date": _format_date(scheduled.date) if scheduled else "",
                "Date Submitted": _format_date(claim.date_submitted),
                "Date Evaluated": _format_date(claim.date_evaluated),
                "Attachments": claim.attachment_count,
            }
        )
    return rows


def write_claims_csv(rows: Sequence[dict[str, Any]]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    for row in rows:
        writer.writerow([_csv_safe(_serialize_csv_value(row[column])) for column in EXPORT_COLUMNS])
    return output.getvalue()


def export_claims_csv(claims: Sequence[ClaimRecord], claims_filter: ClaimsFilter | str) -> str:
    return write_claims_csv(prepare_claims_for_export(apply_filter(claims, claims_filter)))


def generate_export_filename(claims_filter: ClaimsFilter | str, today: date | None = None) -> str:
    claims_filter = ClaimsFilter(claims_filter)
    day = today or datetime.now(timezone.utc).date()
    return f"Warranty_Claims_{claims_filter.value}_{day.isoformat()}.csv"
