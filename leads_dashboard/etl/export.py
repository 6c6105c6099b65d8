"""CSV and Excel encoders for dashboard result sets."""

import io
import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from leads_dashboard.core.config import get_settings
from leads_dashboard.models import ExportResult, Record

logger = logging.getLogger(__name__)

CSV_MIMETYPE = "text/csv"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EMPTY_WARNING = "No data to export!"
NO_DOWNLOAD_WARNING = "No data to download"
TOO_LARGE_WARNING = "Data too large to export on frontend. Use smaller limit or server-side export."


def export_warning(
    records: Sequence[Record],
    row_limit: Optional[int] = None,
    empty_warning: str = EMPTY_WARNING,
) -> Optional[str]:
    """Return the reason an export is refused, or None when it may proceed."""
    if row_limit is None:
        row_limit = get_settings().export_row_limit
    if not records:
        return empty_warning
    if len(records) > row_limit:
        return TOO_LARGE_WARNING
    return None


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def to_frame(records: Sequence[Record], columns: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """Build a string-only frame; headers come from the first record unless given."""
    headers = list(columns) if columns is not None else list(records[0].keys())
    rows: List[Dict[str, str]] = [{h: _stringify(record.get(h)) for h in headers} for record in records]
    return pd.DataFrame(rows, columns=headers)


def to_csv_text(records: Sequence[Record], columns: Optional[Sequence[str]] = None) -> str:
    # Fields with a comma, quote or newline are quoted and inner quotes doubled.
    return to_frame(records, columns).to_csv(index=False, lineterminator="\n")


def to_xlsx_bytes(records: Sequence[Record], sheet_name: str = "Data", columns: Optional[Sequence[str]] = None) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        to_frame(records, columns).to_excel(writer, index=False, sheet_name=sheet_name)
    return buf.getvalue()


def location_slug(location: str) -> str:
    return re.sub(r"[^a-z0-9]", "-", location, flags=re.IGNORECASE)


def timestamped_filename(prefix: str, extension: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"{prefix}_{int(now.timestamp() * 1000)}.{extension}"


def dated_filename(prefix: str, extension: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"{prefix}{now.date().isoformat()}.{extension}"


def export_csv(
    records: Sequence[Record],
    filename: str,
    columns: Optional[Sequence[str]] = None,
    empty_warning: str = EMPTY_WARNING,
) -> ExportResult:
    warning = export_warning(records, empty_warning=empty_warning)
    if warning:
        logger.warning("CSV export refused for %s: %s", filename, warning)
        return ExportResult(warning=warning)
    content = to_csv_text(records, columns).encode("utf-8")
    logger.info("Encoded %d rows to %s", len(records), filename)
    return ExportResult(filename=filename, content=content, mimetype=CSV_MIMETYPE)


def export_xlsx(
    records: Sequence[Record],
    filename: str,
    sheet_name: str = "Data",
    columns: Optional[Sequence[str]] = None,
) -> ExportResult:
    warning = export_warning(records)
    if warning:
        logger.warning("Excel export refused for %s: %s", filename, warning)
        return ExportResult(warning=warning)
    content = to_xlsx_bytes(records, sheet_name=sheet_name, columns=columns)
    logger.info("Encoded %d rows to %s", len(records), filename)
    return ExportResult(filename=filename, content=content, mimetype=XLSX_MIMETYPE)
