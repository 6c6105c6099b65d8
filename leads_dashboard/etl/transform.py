"""Utilities for turning scrape API records into display rows."""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlparse

from leads_dashboard.models import CompanyRow, Record

logger = logging.getLogger(__name__)

RESTAURANT_PLACEHOLDERS = {
    "name": "Unnamed",
    "address": "N/A",
    "category": "-",
    "phone": "-",
}
PROFILE_FIELDS = ("url", "name", "description", "address", "phone", "email", "website")
NOT_FOUND = "Not Found"

_WORD_START = re.compile(r"\b\w")


def _text_or(value: Any, placeholder: str) -> str:
    if value is None:
        return placeholder
    text = str(value)
    return text if text else placeholder


def to_restaurant_row(record: Record) -> Dict[str, str]:
    return {field: _text_or(record.get(field), default) for field, default in RESTAURANT_PLACEHOLDERS.items()}


def to_profile_row(profile: Record) -> Dict[str, str]:
    return {field: _text_or(profile.get(field), NOT_FOUND) for field in PROFILE_FIELDS}


def extract_company_name(url: str) -> Optional[str]:
    """Derive a readable company name from a TrustPilot review URL.

    ``https://www.trustpilot.com/review/acme-shop.com`` becomes ``Acme Shop``.
    A final segment without a dot is returned as is; unparseable input gives None.
    """
    try:
        parsed = urlparse(url)
    except (TypeError, ValueError) as exc:
        logger.debug("Unable to parse company url %r: %s", url, exc)
        return None
    if not parsed.scheme or not parsed.netloc:
        return None

    segment = parsed.path.split("/")[-1]
    if "." not in segment:
        return segment
    name_part = segment.split(".")[0].replace("-", " ").replace("_", " ")
    return _WORD_START.sub(lambda match: match.group(0).upper(), name_part)


def to_company_rows(urls: Iterable[str]) -> List[CompanyRow]:
    return [CompanyRow(url=url, company_name=extract_company_name(url), has_reviews=True) for url in urls]


def company_export_records(rows: Iterable[CompanyRow]) -> List[Dict[str, str]]:
    return [
        {
            "Company Name": row.company_name or "Unknown",
            "TrustPilot URL": row.url,
            "Status": "Active Page" if row.has_reviews else "No Reviews/Invalid",
        }
        for row in rows
    ]


def profile_export_records(rows: Iterable[Dict[str, str]]) -> List[Dict[str, str]]:
    headers = {
        "url": "URL",
        "name": "Company Name",
        "description": "Description",
        "address": "Address",
        "phone": "Phone",
        "email": "Email",
        "website": "Website",
    }
    return [{label: row.get(field) for field, label in headers.items()} for row in rows]
