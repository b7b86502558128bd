"""
Post-processing corrections applied once all programs are scraped.
"""

import logging
from dataclasses import replace
from typing import Dict, Mapping, Tuple

from ..config import MERGED_SPECIALIZATIONS
from ..models import MajorProgram, ParsedSpecialization

logger = logging.getLogger(__name__)


def merge_specializations(majors: Mapping[str, MajorProgram],
                          specializations: Mapping[str, ParsedSpecialization],
                          merges: Mapping[str, tuple] = None) -> Tuple[dict, dict]:
    """
    Fold "specializations" that are really mandatory parts of a major into it.

    As of writing, the only program requiring both of its specializations
    is the B.A. in Art History. For each configured major whose listed
    specializations were all resolved, the major's requirements become its
    own followed by each specialization's, in the configured order; the
    major's specs list is cleared and the specializations are dropped.

    Returns:
        New (majors, specializations) maps; the inputs are not modified
    """
    merges = MERGED_SPECIALIZATIONS if merges is None else merges
    majors = dict(majors)
    specializations = dict(specializations)

    for title, spec_codes in merges.items():
        entry = majors.get(title)
        if entry is None or any(code not in specializations for code in spec_codes):
            continue

        requirements = list(entry.major.requirements)
        for code in spec_codes:
            requirements.extend(specializations.pop(code).program.requirements)

        majors[title] = replace(entry, major=replace(entry.major, requirements=requirements, specs=[]))
        logger.info("Merged specializations %s into %s", ", ".join(spec_codes), title)

    return majors, specializations


def degrees_awarded(majors: Mapping[str, MajorProgram], degrees: Mapping[str, str]) -> Dict[str, str]:
    """
    Degree types actually used by parsed majors, mapped to their display names.

    Ordered by first appearance; unknown degree types get an empty name.
    """
    awarded = {}
    for entry in majors.values():
        degree_type = entry.major.degree_type or ""
        if degree_type not in awarded:
            awarded[degree_type] = degrees.get(degree_type, "")
    return awarded
