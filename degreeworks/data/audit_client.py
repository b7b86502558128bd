"""
DegreeWorks audit API client.

DegreeWorks has no endpoint that lists programs. Everything we learn about a
major, minor or specialization comes from asking for a (hypothetical)
student audit that declares it as a goal and reading back the blocks.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import requests

from ..config import (
    AUDIT_API_URL,
    AUDIT_ORIGIN,
    SAMPLE_DEGREE,
    SAMPLE_MAJOR_CODE,
    SAMPLE_SCHOOL,
    REQUEST_DELAY_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
    catalog_year_for,
)
from ..exceptions import DegreeWorksError, SessionError
from ..models import MajorAudit, UndergraduateRequirements
from .rate_limit import RateLimiter
from .session import create_retry_session

logger = logging.getLogger(__name__)


class AuditClient:
    """
    Rate-limited client for the DegreeWorks audit API.

    RESPONSE HANDLING:
    ------------------
    An audit response is one of:
    - {"blockArray": [...]}    success
    - {"error": "..."}         the goals did not make a valid audit
    - not JSON at all          DegreeWorks failed in some other way
    All three mean "no data for this query" and come back as None. The one
    exception is a rejected session (401/403), which raises SessionError:
    nothing later in the run can succeed without a valid token.

    PACING:
    -------
    Every request, successful or not, is followed by the RateLimiter delay
    before the next one may start.

    Usage:
        client = AuditClient.bootstrap(student_id, auth_token)
        audit = client.get_major_audit("BS", "U", "201", college="CS")
    """

    AUDIT_URL = f"{AUDIT_API_URL}/audit"
    MAPPING_URL = f"{AUDIT_API_URL}/validations/special-entities"

    def __init__(self, student_id: str, session: requests.Session,
                 rate_limiter: RateLimiter, catalog_year: str = ""):
        self.student_id = student_id
        self.session = session
        self.rate_limiter = rate_limiter
        self.catalog_year = catalog_year

    @classmethod
    def bootstrap(cls, student_id: str, auth_token: str, delay: float = REQUEST_DELAY_SECONDS,
                  session: requests.Session = None, today=None) -> "AuditClient":
        """
        Create a client and settle on the active catalog year.

        Depending on when we are scraping, the catalog year may be the one
        starting this calendar year or the one that started last year. We try
        the former first by auditing a major that exists every year.

        Raises:
            SessionError: if neither year yields the sample audit
        """
        headers = {
            "Content-Type": "application/json",
            "Cookie": f"X-AUTH-TOKEN={auth_token}",
            "Origin": AUDIT_ORIGIN,
        }
        if session is None:
            session = create_retry_session(headers)
        else:
            session.headers.update(headers)

        client = cls(student_id, session, RateLimiter(delay))
        year = (today or datetime.now(timezone.utc).date()).year

        for start_year in (year, year - 1):
            client.catalog_year = catalog_year_for(start_year)
            sample = client.get_major_audit(SAMPLE_DEGREE, SAMPLE_SCHOOL, SAMPLE_MAJOR_CODE)
            if sample and sample.major:
                logger.info("Set catalog year to %s", client.catalog_year)
                return client
            logger.info("Catalog year %s is not available", client.catalog_year)

        raise SessionError(
            f"Could not bootstrap a catalog year from {catalog_year_for(year - 1)} "
            f"or {catalog_year_for(year)}; is the auth token still valid?"
        )

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(self, method: str, url: str, **kwargs) -> Optional[dict]:
        with self.rate_limiter:
            resp = self.session.request(method, url, timeout=REQUEST_TIMEOUT_SECONDS, **kwargs)

        if resp.status_code in (401, 403):
            raise SessionError(f"DegreeWorks rejected the session ({resp.status_code} on {url})")

        try:
            data = resp.json()
        except ValueError:
            logger.debug("Malformed JSON from %s %s (status %s)", method, url, resp.status_code)
            return None

        if not isinstance(data, dict) or "error" in data:
            return None
        return data

    def _audit(self, degree: str, school: str, goals: list) -> Optional[list]:
        data = self._request("POST", self.AUDIT_URL, json={
            "catalogYear": self.catalog_year,
            "degree": degree,
            "school": school,
            "studentId": self.student_id,
            "classes": [],
            "goals": goals,
        })
        if data is None:
            return None
        return _block_array(data)

    @staticmethod
    def _find_block(blocks: list, types, value=None) -> Optional[dict]:
        for block in blocks:
            if not isinstance(block, dict) or block.get("requirementType") not in types:
                continue
            if value is None or block.get("requirementValue") == value:
                return block
        return None

    # -------------------------------------------------------------------------
    # Audits
    # -------------------------------------------------------------------------

    def get_ugrad_requirements(self) -> Optional[UndergraduateRequirements]:
        """
        University-wide undergraduate requirements.

        The "DEGREE" block holds nothing of substance; the "SCHOOL" block has
        the UC requirements and the "PROGRAM" block has GE. It makes no
        difference which bachelor's degree we ask for.
        """
        data = self._request("GET", self.AUDIT_URL, params={
            "studentId": self.student_id,
            "school": "U",
            "degree": "BS",
        })
        blocks = _block_array(data) if data is not None else None
        if blocks is None:
            return None

        uc = self._find_block(blocks, ("SCHOOL",))
        ge = self._find_block(blocks, ("PROGRAM",))
        if uc is None or ge is None:
            return None

        return UndergraduateRequirements(
            uc=uc,
            ge=ge,
            chc4=self._find_block(blocks, ("OTHER",), "CHP"),
        )

    def get_major_audit(self, degree: str, school: str, major_code: str,
                        college: str = None) -> Optional[MajorAudit]:
        """
        Audit one major.

        Args:
            degree: Degree code, e.g. "BS"
            school: Division, "U" or "G"
            major_code: Major code, e.g. "201"
            college: UCI school code, e.g. "55"; adds the college block when given
        """
        goals = [{"code": "MAJOR", "value": major_code}]
        if college:
            goals.append({"code": "COLLEGE", "value": college})

        blocks = self._audit(degree, school, goals)
        if blocks is None:
            return None

        return MajorAudit(
            college=self._find_block(blocks, ("COLLEGE",), college) if college else None,
            major=self._find_block(blocks, ("MAJOR",), major_code),
        )

    def get_minor_audit(self, minor_code: str) -> Optional[dict]:
        # "000" is the undeclared major; a minor needs some major alongside it
        blocks = self._audit("BA", "U", [
            {"code": "MAJOR", "value": "000"},
            {"code": "MINOR", "value": minor_code},
        ])
        if blocks is None:
            return None
        return self._find_block(blocks, ("MINOR",), minor_code)

    def get_spec_audit(self, degree: str, school: str, major_code: str,
                       spec_code: str) -> Optional[dict]:
        # some specializations are filed under OTHER rather than SPEC
        blocks = self._audit(degree, school, [
            {"code": "MAJOR", "value": major_code},
            {"code": "SPEC", "value": spec_code},
            {"code": "OTHER", "value": spec_code},
        ])
        if blocks is None:
            return None
        return self._find_block(blocks, ("SPEC", "OTHER"), spec_code)

    # -------------------------------------------------------------------------
    # Vocabularies
    # -------------------------------------------------------------------------

    def get_mapping(self, collection: str) -> dict:
        """
        Controlled vocabulary as {key: description}, in upstream order.

        Used for "degrees", "majors", "minors" and "specializations". Later
        stages cannot run without these, so a bad payload raises.
        """
        data = self._request("GET", f"{self.MAPPING_URL}/{collection}")
        try:
            entries = data["_embedded"][collection]
            return {entry["key"]: entry["description"] for entry in entries}
        except (KeyError, TypeError) as e:
            raise DegreeWorksError(f"Malformed {collection} vocabulary from DegreeWorks") from e


def _block_array(data: dict) -> Optional[list]:
    # an audit without blocks is empty, not absent; anything but a list is absent
    blocks = data.get("blockArray")
    if blocks is None:
        return []
    if not isinstance(blocks, list):
        logger.debug("Unexpected blockArray of type %s", type(blocks).__name__)
        return None
    return blocks
