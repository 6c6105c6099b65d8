"""Scan uploaded CSV files for TrustPilot profile URLs."""

import io
import logging
from typing import List, Union

import pandas as pd

from leads_dashboard.models import ExtractionResult

logger = logging.getLogger(__name__)

HOST_MARKER = "trustpilot.com"
_QUOTE_CHARS = "\"'"


def clean_url(value: str) -> str:
    return value.strip().strip(_QUOTE_CHARS).strip()


def extract_urls(upload: Union[str, bytes], host_marker: str = HOST_MARKER) -> ExtractionResult:
    """Collect every cell containing ``host_marker``, deduplicated in first-seen order.

    Parse failures and "nothing found" are both reported through the result
    message; neither raises.
    """
    if isinstance(upload, bytes):
        try:
            upload = upload.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            logger.warning("Uploaded CSV is not valid UTF-8: %s", exc)
            return ExtractionResult(message=f"Error parsing CSV file: {exc}", parse_failed=True)

    try:
        frame = pd.read_csv(
            io.StringIO(upload),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            # A first data row wider than the header must not become an index.
            index_col=False,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        logger.warning("Failed to parse uploaded CSV: %s", exc)
        return ExtractionResult(message=f"Error parsing CSV file: {exc}", parse_failed=True)

    urls: List[str] = []
    for row in frame.itertuples(index=False, name=None):
        for value in row:
            if not isinstance(value, str) or host_marker not in value:
                continue
            url = clean_url(value)
            if url and url not in urls:
                urls.append(url)

    logger.info("Extracted %d unique URLs from %d rows", len(urls), len(frame))
    if not urls:
        return ExtractionResult(message="No TrustPilot URLs found in the CSV file")
    return ExtractionResult(urls=urls, message=f"Found {len(urls)} TrustPilot URLs")
