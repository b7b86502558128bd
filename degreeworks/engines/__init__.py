"""
Parsing, discovery and resolution engines.

This package contains the logic that turns raw upstream data into
programs: which programs exist, what they require, and which major each
specialization belongs to.
"""

from .parser import RequirementTreeParser
from .discovery import ProgramDiscovery
from .specializations import SpecializationResolver, specialization_parent_candidates
from .postprocess import degrees_awarded, merge_specializations

__all__ = [
    "RequirementTreeParser",
    "ProgramDiscovery",
    "SpecializationResolver",
    "specialization_parent_candidates",
    "degrees_awarded",
    "merge_specializations",
]
