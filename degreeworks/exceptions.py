"""
Exceptions raised by the scraper.

Absent upstream data is represented by None throughout the package; these
exceptions are reserved for conditions that end the run.
"""


class DegreeWorksError(Exception):
    """Base class for all scraper errors."""


class SessionError(DegreeWorksError):
    """The auth token was rejected, or no catalog year could be bootstrapped."""


class ScrapeAbortedError(DegreeWorksError):
    """A stage could not obtain data that every later stage depends on."""


class ScraperStateError(DegreeWorksError):
    """A Scraper was used out of order (run twice, or read before finishing)."""


class SpecializationCacheError(DegreeWorksError):
    """The specialization cache file exists but cannot be read."""
