"""
User interface implementations.

Currently only terminal output; the scraper itself never prints.
"""

from .terminal import ScrapeSummaryDisplay

__all__ = ["ScrapeSummaryDisplay"]
