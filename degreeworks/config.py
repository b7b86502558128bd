"""
Configuration constants for the DegreeWorks scraper.

This module contains all configuration values and constants used throughout
the scraper. Centralizing these makes it easy to adjust behavior when the
upstream systems change their conventions.
"""

import os
from pathlib import Path

# =============================================================================
# FILE PATHS
# =============================================================================

# Base data directory (relative to this file's location)
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DEGREEWORKS_DATA_DIR", BASE_DIR / "data"))
CACHE_DIR = Path(os.getenv("DEGREEWORKS_CACHE_DIR", DATA_DIR / "cache"))
OUTPUT_DIR = DATA_DIR / "output"


# =============================================================================
# UPSTREAM ENDPOINTS
# =============================================================================

AUDIT_API_URL = "https://reg.uci.edu/RespDashboard/api"
AUDIT_ORIGIN = "https://reg.uci.edu"
CATALOG_API_URL = "https://www.reg.uci.edu/mdsd/api"


# =============================================================================
# RATE LIMITING AND RETRIES
# =============================================================================

# DegreeWorks throttles aggressively; one request per second keeps a full
# run (several thousand audits) from degrading into 429s.
REQUEST_DELAY_SECONDS = float(os.getenv("DEGREEWORKS_REQUEST_DELAY", "1.0"))
REQUEST_TIMEOUT_SECONDS = 60

# Wait 2s, 4s, 8s, 16s... on 429/5xx before giving up on a request
RETRY_TOTAL = 5
RETRY_BACKOFF_FACTOR = 2
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


# =============================================================================
# CATALOG YEAR SAMPLE
# =============================================================================
# Catalog years are keyed as two concatenated calendar years, e.g. "20252026".
# The B.S. in Computer Science (major code 201) has existed every year
# DegreeWorks has been in use, so a successful audit for it proves that the
# catalog year has been published.

SAMPLE_DEGREE = "BS"
SAMPLE_SCHOOL = "U"
SAMPLE_MAJOR_CODE = "201"


def catalog_year_for(start_year: int) -> str:
    """Catalog year key for the academic year starting in `start_year` (2025 -> "20252026")."""
    return f"{start_year}{start_year + 1}"


def division_for_degree(degree_code: str) -> str:
    """DegreeWorks division ("school") for a degree; bachelor's codes start with B."""
    return "U" if degree_code.startswith("B") else "G"


# =============================================================================
# PROGRAM DISCOVERY
# =============================================================================

# The oldest major present in DegreeWorks (Applied Ecology) was retired during
# academic year 2006-2007. Any major retired earlier cannot have an audit.
MAJOR_END_TERM_CUTOFF_YEAR = 2006

# Some degreeShort labels in the catalogue disagree with the DegreeWorks
# degree name but really are the same award.
DEGREE_LABEL_ALIASES = {
    "M.MGMT.": "M.I.M.",
}


# =============================================================================
# SPECIALIZATIONS
# =============================================================================

# Specializations that break the "major code + letter" convention, mapped to
# the title of the major they belong to. Only one exception is known; the
# true set is not published anywhere.
SPECIALIZATION_PARENT_EXCEPTIONS = {
    # "Optional American Chemical Society Certification" is accepted by
    # DegreeWorks with any major, but only really belongs to chemistry.
    "OACSC": "Major in Chemistry",
}

# Majors that require the union of several of their "specializations".
# Those specializations are folded into the major and dropped.
MERGED_SPECIALIZATIONS = {
    "Major in Art History": ("AHGEO", "AHPER"),
}
