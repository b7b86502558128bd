"""
Data models for the scraper.

This package contains all dataclasses used throughout the system.
These serve as "contracts" between the client, the engines and the
orchestrator.
"""

from .requirement import (
    AllOf,
    AnyOf,
    NoneOf,
    CourseRequirement,
    ExamRequirement,
    RequirementNode,
    iter_leaves,
    iter_nodes,
    requirements_to_json,
    requirements_to_list,
)
from .program import (
    ProgramTriplet,
    ProgramIdentity,
    Program,
    MajorProgram,
    ParsedSpecialization,
    SpecializationCacheEntry,
    UndergraduateRequirements,
    MajorAudit,
)

__all__ = [
    # Requirement tree
    "AllOf",
    "AnyOf",
    "NoneOf",
    "CourseRequirement",
    "ExamRequirement",
    "RequirementNode",
    "iter_leaves",
    "iter_nodes",
    "requirements_to_json",
    "requirements_to_list",
    # Programs
    "ProgramTriplet",
    "ProgramIdentity",
    "Program",
    "MajorProgram",
    "ParsedSpecialization",
    "SpecializationCacheEntry",
    "UndergraduateRequirements",
    "MajorAudit",
]
