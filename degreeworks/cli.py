"""
Command-Line Interface for the DegreeWorks scraper.

Runs one full scrape and writes the resulting records as JSON.

The student id must be supplied alongside the auth token; decoding it out
of the token is left to whoever obtains the token.

    degreeworks-scraper --student-id 12345678 --auth-token "Bearer ..."

or with DEGREEWORKS_SCRAPER_STUDENT_ID / DEGREEWORKS_SCRAPER_X_AUTH_TOKEN set.
"""

import argparse
import logging
import os
import sys

import requests

from .config import CACHE_DIR, OUTPUT_DIR, REQUEST_DELAY_SECONDS
from .data import AuditClient, CatalogClient, build_records, write_records
from .exceptions import DegreeWorksError
from .scraper import Scraper
from .ui import ScrapeSummaryDisplay


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="degreeworks-scraper",
        description="Scrape degree requirements for every UCI program from DegreeWorks.",
    )
    parser.add_argument("--student-id", default=os.getenv("DEGREEWORKS_SCRAPER_STUDENT_ID"),
                        help="8-digit student id the auth token belongs to")
    parser.add_argument("--auth-token", default=os.getenv("DEGREEWORKS_SCRAPER_X_AUTH_TOKEN"),
                        help="value of the X-AUTH-TOKEN cookie")
    parser.add_argument("--delay", type=float, default=REQUEST_DELAY_SECONDS,
                        help="seconds to wait after every audit request (default: %(default)s)")
    parser.add_argument("--cache-dir", default=str(CACHE_DIR),
                        help="where specialization caches are kept (default: %(default)s)")
    parser.add_argument("--output-dir", default=str(OUTPUT_DIR),
                        help="where record JSON files are written (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")

    args = parser.parse_args(argv)
    if not args.auth_token:
        parser.error("auth token not set (--auth-token or DEGREEWORKS_SCRAPER_X_AUTH_TOKEN)")
    if not args.student_id or len(args.student_id) != 8:
        parser.error("an 8-digit student id is required (--student-id or DEGREEWORKS_SCRAPER_STUDENT_ID)")
    return args


def main(argv=None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    try:
        client = AuditClient.bootstrap(args.student_id, args.auth_token, delay=args.delay)
        scraper = Scraper(client, CatalogClient(), cache_dir=args.cache_dir)
        result = scraper.run()
    except DegreeWorksError as e:
        ScrapeSummaryDisplay.print_error(str(e))
        return 1
    except requests.RequestException as e:
        ScrapeSummaryDisplay.print_error(f"Network error: {e}")
        return 1

    records = build_records(result)
    output_dir = write_records(records, args.output_dir)
    ScrapeSummaryDisplay.print_summary(result.catalog_year, records, output_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
