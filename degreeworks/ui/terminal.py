"""
Terminal Display Implementation.

This module handles all console output of the scraper.
It's the ONLY place where printing happens in the degreeworks package;
everything else reports progress through logging.
"""

from ..data import ScrapeRecords


class ScrapeSummaryDisplay:
    """
    Pretty terminal output for a finished scrape.

    To report somewhere else (Slack, a dashboard, ...), create a class with
    the same method signatures and different output handling.
    """

    # ANSI color codes for terminal styling
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"

    @classmethod
    def print_summary(cls, catalog_year: str, records: ScrapeRecords, output_dir=None) -> None:
        print(f"\n{cls.BOLD}{cls.GREEN}")
        print("═" * 60)
        print(f"  ✨ DegreeWorks scrape complete (catalog year {catalog_year})")
        print("═" * 60)
        print(f"{cls.RESET}")

        rows = [
            ("School requirements", records.school_requirements),
            ("Degrees awarded", records.degrees),
            ("College blocks", records.college_requirements),
            ("Majors", records.majors),
            ("Minors", records.minors),
            ("Specializations", records.specializations),
        ]
        for label, items in rows:
            color = cls.GREEN if items else cls.YELLOW
            print(f"  {label:<22} {color}{len(items):>6}{cls.RESET}")

        empty = sum(1 for m in records.majors if not m["requirements"])
        if empty:
            print(f"\n  {cls.YELLOW}⚠️  {empty} majors parsed with no requirements{cls.RESET}")

        if output_dir is not None:
            print(f"\n  {cls.DIM}📂 Saved to: {output_dir}{cls.RESET}")
        print()

    @classmethod
    def print_error(cls, message: str) -> None:
        print(f"{cls.RED}❌ {message}{cls.RESET}")
