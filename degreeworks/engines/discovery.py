"""
Program Discovery Engine.

DegreeWorks will audit any (school, major, degree) combination we name, but
it will not tell us which combinations exist. This module builds the list
of combinations worth asking about from the registrar's catalogue.

ASSUMPTIONS:
------------
- The combination of school and major is not unique; Computer Science and
  Engineering belongs to two schools at once. Both triplets are emitted.
- Not every emitted triplet is valid in DegreeWorks (the Doctor of Pharmacy
  maps to two DegreeWorks degrees, only one of which audits). Invalid
  triplets simply produce no audit later on.
- Every valid triplet IS among the emitted ones. Discovery is best-effort
  in what it includes, not in what it leaves out.
"""

import logging
import re
from typing import Collection, Dict, List, Mapping, Optional

from ..config import DEGREE_LABEL_ALIASES, MAJOR_END_TERM_CUTOFF_YEAR
from ..data.catalog_client import CatalogClient, CatalogReport
from ..models import ProgramTriplet

logger = logging.getLogger(__name__)

_TERM_YEAR = re.compile(r"^[A-Za-z]*(\d{2}|\d{4})$")


def end_term_year(end_term: str) -> Optional[int]:
    """
    Calendar year of a catalogue end term, or None if it cannot be read.

    Terms are a term letter followed by a year: "F06" -> 2006, "S99" -> 1999.
    Two-digit years below 50 are 20xx. Four-digit years are accepted as is.
    """
    match = _TERM_YEAR.match(end_term.strip())
    if not match:
        return None
    digits = match.group(1)
    year = int(digits)
    if len(digits) == 2:
        year += 2000 if year < 50 else 1900
    return year


def is_current_major(report: CatalogReport, cutoff_year: int = MAJOR_END_TERM_CUTOFF_YEAR) -> bool:
    """
    True unless the major was retired strictly before `cutoff_year`.

    Majors with no end term are current. An end term we cannot read is
    kept: auditing one extra triplet is cheaper than missing a program.
    """
    if not report.end_term:
        return True
    year = end_term_year(report.end_term)
    if year is None:
        logger.debug("Unreadable end term %r for major %s", report.end_term, report.major_code)
        return True
    return year >= cutoff_year


def matching_degree_keys(degree_short: str, degrees: Mapping[str, str],
                         aliases: Mapping[str, str] = None) -> List[str]:
    """
    DegreeWorks degree keys whose name matches a catalogue degree label.

    Matching is case-insensitive after translating known label aliases.

    Example:
        matching_degree_keys("B.S.", {"BS": "B.S.", "BA": "B.A."})  ->  ["BS"]
    """
    aliases = DEGREE_LABEL_ALIASES if aliases is None else aliases
    wanted = aliases.get(degree_short, degree_short).lower()
    return [key for key, name in degrees.items() if name.lower() == wanted]


class ProgramDiscovery:
    """
    Enumerates candidate (school, major, degree) triplets.

    FILTERS (in order):
    -------------------
    1. The catalogue record has a degree code
    2. The major was not retired before MAJOR_END_TERM_CUTOFF_YEAR
    3. DegreeWorks knows the major code
    4. The catalogue's award type matches at least one DegreeWorks degree;
       a record with no match is logged and dropped

    USAGE:
    ------
    discovery = ProgramDiscovery(CatalogClient())
    triplets = discovery.discover(degrees={"BS": "B.S."}, major_codes={"201"})
    """

    def __init__(self, catalog: CatalogClient, cutoff_year: int = MAJOR_END_TERM_CUTOFF_YEAR):
        self.catalog = catalog
        self.cutoff_year = cutoff_year

    def discover(self, degrees: Mapping[str, str], major_codes: Collection[str]) -> List[ProgramTriplet]:
        """
        Args:
            degrees: DegreeWorks degree vocabulary {key: name}
            major_codes: Major codes known to DegreeWorks

        Returns:
            Triplets in catalogue order
        """
        award_types = self.catalog.get_award_types()
        reports = self.catalog.get_reports()
        logger.info("Fetched %d award types and %d catalogue records", len(award_types), len(reports))
        return self.filter_reports(reports, award_types, degrees, major_codes)

    def filter_reports(self, reports: List[CatalogReport], award_types: Dict[str, str],
                       degrees: Mapping[str, str], major_codes: Collection[str]) -> List[ProgramTriplet]:
        major_codes = set(major_codes)
        triplets = []

        for report in reports:
            if report.degree_code is None:
                continue
            if not is_current_major(report, self.cutoff_year):
                continue
            if report.major_code not in major_codes:
                continue

            degree_short = award_types.get(report.degree_code)
            keys = matching_degree_keys(degree_short, degrees) if degree_short else []
            if not keys:
                logger.warning(
                    "No degree code matched for school and major (%s, %s)",
                    report.school_code, report.major_code,
                )
                continue

            for key in keys:
                triplets.append(ProgramTriplet(report.school_code, report.major_code, key))

        logger.info("Discovered %d candidate program triplets", len(triplets))
        return triplets
