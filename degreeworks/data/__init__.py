"""
Upstream access and file I/O.

This package handles all network access (audit and catalogue APIs), the
persistent specialization cache, and record export.
"""

from .rate_limit import RateLimiter
from .session import create_retry_session
from .audit_client import AuditClient
from .catalog_client import CatalogClient, CatalogReport
from .spec_cache import SpecializationCache, cache_path_for
from .exporter import ScrapeRecords, build_records, write_records

__all__ = [
    "RateLimiter",
    "create_retry_session",
    "AuditClient",
    "CatalogClient",
    "CatalogReport",
    "SpecializationCache",
    "cache_path_for",
    "ScrapeRecords",
    "build_records",
    "write_records",
]
