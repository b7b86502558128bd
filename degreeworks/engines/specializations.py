"""
Specialization Resolver.

DegreeWorks gives us the list of specialization codes, but not which major
each one belongs to. A specialization audit only succeeds when it is paired
with its own major, so we guess candidate majors and audit each in turn.

HEURISTICS (in order):
----------------------
1. Cache: an association found in an earlier run (or a confirmed miss) is
   reused without any network access.
2. Exceptions: SPECIALIZATION_PARENT_EXCEPTIONS binds a few codes to a
   named major regardless of their shape.
3. Suffix convention: specialization codes are, by soft convention, their
   major's code followed by an uppercase letter starting from A
   ("201A" -> "201"). Every discovered major with that code is tried.
4. Otherwise the specialization is unresolved, and that is cached too.

KNOWN GAP:
----------
If the suffix convention is broken for a code not in the exception table,
the only way to find its major would be to audit it against every major.
That multiplies the run length by the number of majors and is not done.
"""

import logging
import re
from typing import List, Mapping, Optional

from ..config import SPECIALIZATION_PARENT_EXCEPTIONS, division_for_degree
from ..data.audit_client import AuditClient
from ..data.spec_cache import SpecializationCache
from ..models import (
    MajorProgram,
    ParsedSpecialization,
    Program,
    ProgramIdentity,
    SpecializationCacheEntry,
)
from .parser import RequirementTreeParser

logger = logging.getLogger(__name__)

_SUFFIXED_MAJOR_CODE = re.compile(r"^(.+)[A-Z]$")


def specialization_parent_candidates(spec_code: str, programs: Mapping[str, MajorProgram],
                                     exceptions: Mapping[str, str] = None) -> List[Program]:
    """
    Majors that might own `spec_code`, most likely first.

    Args:
        spec_code: Specialization code, e.g. "201A"
        programs: Parsed majors keyed by block title, in discovery order
        exceptions: {spec code: major title} overrides

    Returns:
        Candidate majors; empty if no heuristic applies
    """
    exceptions = SPECIALIZATION_PARENT_EXCEPTIONS if exceptions is None else exceptions

    if spec_code in exceptions:
        bound = programs.get(exceptions[spec_code])
        return [bound.major] if bound else []

    match = _SUFFIXED_MAJOR_CODE.match(spec_code)
    if not match:
        return []

    major_code = match.group(1)
    return [entry.major for entry in programs.values() if entry.major.code == major_code]


class SpecializationResolver:
    """
    Matches specializations to their parent majors and parses their blocks.

    CACHE DISCIPLINE:
    -----------------
    The cache file is rewritten after each specialization resolved during
    this run, found or not. An interrupted run therefore loses at most the
    specialization in flight. Cache hits never write.
    """

    def __init__(self, client: AuditClient, parser: RequirementTreeParser,
                 cache: SpecializationCache, exceptions: Mapping[str, str] = None):
        self.client = client
        self.parser = parser
        self.cache = cache
        self.exceptions = exceptions

    def resolve_all(self, specializations: Mapping[str, str],
                    programs: Mapping[str, MajorProgram]) -> dict:
        """
        Resolve every known specialization.

        Args:
            specializations: Specialization vocabulary {code: display name}
            programs: Parsed majors keyed by block title

        Returns:
            {spec code: ParsedSpecialization} for the resolved ones, in vocabulary order
        """
        resolved = {}
        for spec_code, spec_name in specializations.items():
            parsed = self.resolve(spec_code, spec_name, programs)
            if parsed is not None:
                resolved[spec_code] = parsed
        return resolved

    def resolve(self, spec_code: str, spec_name: str,
                programs: Mapping[str, MajorProgram]) -> Optional[ParsedSpecialization]:
        if spec_code in self.cache:
            logger.info("Found cached association for %s", spec_code)
            entry = self.cache.get(spec_code)
        else:
            entry = self._search(spec_code, programs)
            self.cache.set(spec_code, entry)
            self.cache.save()

        if entry is None:
            logger.warning('No known major associated with "%s" (specCode = %s)', spec_name, spec_code)
            return None

        parent = entry.parent
        logger.info(
            'Specialization "%s" (specCode = %s) is associated with (majorCode = %s, degree = %s)',
            spec_name, spec_code, parent.code, parent.degree_type,
        )
        identity = ProgramIdentity(parent.school, "SPEC", spec_code, parent.degree_type)
        return ParsedSpecialization(
            parent=parent,
            name=spec_name,
            program=self.parser.parse_block(identity, entry.block),
        )

    def _search(self, spec_code: str, programs: Mapping[str, MajorProgram]) -> Optional[SpecializationCacheEntry]:
        for candidate in specialization_parent_candidates(spec_code, programs, self.exceptions):
            if not candidate.degree_type:
                raise ValueError(f"Candidate major {candidate.id} has no degree type")

            block = self.client.get_spec_audit(
                candidate.degree_type,
                division_for_degree(candidate.degree_type),
                candidate.code,
                spec_code,
            )
            if block:
                return SpecializationCacheEntry(parent=candidate.identity, block=block)
        return None
