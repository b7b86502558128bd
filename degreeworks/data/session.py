"""
HTTP session setup shared by both upstream clients.
"""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import RETRY_BACKOFF_FACTOR, RETRY_STATUS_CODES, RETRY_TOTAL

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def create_retry_session(headers: dict = None) -> requests.Session:
    """
    Session that retries throttling and server errors with exponential backoff.

    POST is retried too: every POST we send is a read-only audit query.
    Once the retry budget is spent the last response is returned, and the
    caller treats it like any other failed request.
    """
    session = requests.Session()
    retries = Retry(
        total=RETRY_TOTAL,
        backoff_factor=RETRY_BACKOFF_FACTOR,
        status_forcelist=list(RETRY_STATUS_CODES),
        allowed_methods=["GET", "POST"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"User-Agent": USER_AGENT})
    if headers:
        session.headers.update(headers)
    return session
