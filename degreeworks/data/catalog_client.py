"""
Catalogue-of-record API client.

The registrar's major/degree reporting API lists every (school, major,
degree) combination UCI has ever offered. DegreeWorks cannot enumerate its
own programs, so this is where program discovery starts.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from ..config import CATALOG_API_URL, REQUEST_TIMEOUT_SECONDS
from .session import create_retry_session

logger = logging.getLogger(__name__)


@dataclass
class CatalogReport:
    """
    One per-major-per-degree record from the catalogue.

    end_term is a term letter followed by a year (e.g. "F06"), or None if
    the major is still offered. The catalogue's own "active" flag is true
    even for majors whose end term has passed, so it is not kept.

    degree_code is None for teaching credentials, n-ple majors, undeclared
    and similar records that DegreeWorks never audits.
    """
    school_code: str
    major_code: str
    end_term: Optional[str]
    degree_code: Optional[str]

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogReport":
        return cls(
            school_code=data["school"]["schoolCode"],
            major_code=data["major"]["majorCode"],
            end_term=data["major"].get("endTermYyyyst"),
            degree_code=data["degree"].get("degreeCode"),
        )


# The broadest search the reports endpoint accepts
REPORTS_QUERY = {
    "schoolCode": None,
    "majorCode": None,
    "majorTitle": None,
    "majorStartTermYyyyst": None,
    "majorEndTermYyyyst": None,
    "majorActive": True,
    "majorInactive": True,
    "underGraduate": True,
    "graduate": True,
    "degreeListAwarded": None,
    "degreeTitleRc": None,
    "degreeStartTermYyyyst": None,
    "degreeEndTermYyyyst": None,
    "degreeActive": True,
    "degreeInactive": True,
}


class CatalogClient:
    """Fetches award types and major/degree reports from the catalogue API."""

    def __init__(self, session: requests.Session = None, base_url: str = CATALOG_API_URL):
        self.session = session or create_retry_session({"Content-Type": "application/json"})
        self.base_url = base_url

    def get_award_types(self) -> dict:
        """Award types as {degreeCode: degreeShort}, e.g. {"1": "B.S."}."""
        resp = self.session.get(f"{self.base_url}/lookups/awardTypes", timeout=REQUEST_TIMEOUT_SECONDS)
        resp.raise_for_status()

        award_types = {}
        for entry in resp.json():
            try:
                award_types[entry["degreeCode"]] = entry["degreeShort"]
            except (KeyError, TypeError):
                logger.warning("Skipping malformed award type: %r", entry)
        return award_types

    def get_reports(self) -> List[CatalogReport]:
        resp = self.session.post(
            f"{self.base_url}/reports",
            json=REPORTS_QUERY,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()

        reports = []
        for entry in resp.json():
            try:
                reports.append(CatalogReport.from_dict(entry))
            except (KeyError, TypeError):
                logger.warning("Skipping malformed catalogue report: %r", entry)
        return reports
