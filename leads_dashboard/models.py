"""Core data models shared by the dashboard views."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Flat API record: field name -> text or None. No schema is enforced.
Record = Dict[str, Any]

DEFAULT_WINDOW = (1, 5)


@dataclass(slots=True)
class CompanyRow:
    """One TrustPilot company search hit."""

    url: str
    company_name: Optional[str] = None
    has_reviews: bool = True


@dataclass(slots=True)
class ExtractionResult:
    """Outcome of scanning an uploaded CSV for TrustPilot URLs."""

    urls: List[str] = field(default_factory=list)
    message: str = ""
    parse_failed: bool = False

    @property
    def found(self) -> bool:
        return bool(self.urls)


@dataclass(slots=True)
class ExportResult:
    """Either an encoded export payload or a user-facing warning."""

    filename: Optional[str] = None
    content: Optional[bytes] = None
    mimetype: Optional[str] = None
    warning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.warning is None and self.content is not None
