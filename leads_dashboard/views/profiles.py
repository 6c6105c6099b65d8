"""TrustPilot profile enrichment from an uploaded CSV of URLs."""

import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional, Union

from leads_dashboard.core.config import ConfigError, require_api_base_url
from leads_dashboard.etl import export
from leads_dashboard.etl.transform import profile_export_records, to_profile_row
from leads_dashboard.etl.url_extract import extract_urls
from leads_dashboard.models import ExportResult, ExtractionResult
from leads_dashboard.vendors import scrape_api

logger = logging.getLogger(__name__)

NO_URLS_MESSAGE = "Please upload a CSV file with URLs first"
PROFILE_COLUMNS = ("URL", "Company Name", "Description", "Address", "Phone", "Email", "Website")


class ProfileView:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.profiles: List[Dict[str, str]] = []
        self.uploaded_urls: List[str] = []
        self.filename: Optional[str] = None
        self.total = 0
        self.loading = False
        self.message: Optional[str] = None

    def upload(self, content: Union[str, bytes], filename: Optional[str] = None) -> ExtractionResult:
        result = extract_urls(content)
        self.filename = filename
        self.message = result.message
        if not result.parse_failed:
            self.uploaded_urls = list(result.urls)
        return result

    def enrich(self) -> bool:
        try:
            require_api_base_url()
        except ConfigError as exc:
            self.message = str(exc)
            return False
        if not self.uploaded_urls:
            self.message = NO_URLS_MESSAGE
            return False

        with self._lock:
            if self.loading:
                logger.debug("Profile enrichment already in flight; ignoring trigger")
                return False
            self.loading = True
            self.message = None

        logger.info("Enriching %d TrustPilot profiles", len(self.uploaded_urls))
        try:
            payload = scrape_api.enrich_profiles(self.uploaded_urls)
        except (scrape_api.ScrapeApiError, ConfigError) as exc:
            logger.warning("Profile enrichment failed: %s", exc)
            with self._lock:
                self.message = f"Failed to load profiles. {exc}"
                self.loading = False
            return False

        with self._lock:
            self.profiles = [to_profile_row(profile) for profile in payload["results"]]
            self.total = payload["total"]
            self.loading = False
        return True

    def clear(self) -> None:
        with self._lock:
            self.profiles = []
            self.uploaded_urls = []
            self.filename = None
            self.total = 0
            self.message = None

    def export_csv(self, now: Optional[datetime] = None) -> ExportResult:
        result = export.export_csv(
            profile_export_records(self.profiles),
            export.dated_filename("trustpilot_profiles_", "csv", now),
            columns=PROFILE_COLUMNS,
            empty_warning=export.NO_DOWNLOAD_WARNING,
        )
        if result.warning:
            self.message = result.warning
        return result
