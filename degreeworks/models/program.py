"""
Program data models.

Contains the dataclasses that describe what is queried from DegreeWorks
(ProgramTriplet), what comes back (MajorAudit, UndergraduateRequirements)
and what the scraper produces from it (Program, MajorProgram,
ParsedSpecialization).
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional


class ProgramTriplet(NamedTuple):
    """
    One (school, major, degree) combination to audit.

    school_code is UCI's notion of a school (e.g. "55" for Biological
    Sciences), which DegreeWorks calls a college. A triplet is only a query
    input: two triplets can return the same major.
    """
    school_code: str
    major_code: str
    degree_code: str


@dataclass(frozen=True)
class ProgramIdentity:
    """
    Identifies a parsed program.

    The string form joins the parts with dashes, e.g. "55-MAJOR-201-BS" or
    "U-MINOR-25" for programs without a degree.
    """
    school: str
    program_type: str
    code: str
    degree_type: Optional[str] = None

    @property
    def id(self) -> str:
        parts = [self.school, self.program_type, self.code]
        if self.degree_type:
            parts.append(self.degree_type)
        return "-".join(parts)

    def to_dict(self) -> dict:
        return {
            "school": self.school,
            "programType": self.program_type,
            "code": self.code,
            "degreeType": self.degree_type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProgramIdentity":
        return cls(
            school=data["school"],
            program_type=data["programType"],
            code=data["code"],
            degree_type=data.get("degreeType"),
        )


@dataclass
class Program:
    """
    A parsed major, minor, specialization or college block.

    Attributes:
        identity: Where this program came from (school, type, code, degree)
        name: Block title as DegreeWorks reports it (e.g. "Major in Computer Science")
        requirements: Top-level requirement groups, in audit order
        specs: Codes of specializations resolved to this program (majors only)
    """
    identity: ProgramIdentity
    name: str
    requirements: list = field(default_factory=list)
    specs: List[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def code(self) -> str:
        return self.identity.code

    @property
    def degree_type(self) -> Optional[str]:
        return self.identity.degree_type


@dataclass
class MajorProgram:
    """A major together with the college (school-wide) block that applies to it, if any."""
    college: Optional[Program]
    major: Program


@dataclass
class ParsedSpecialization:
    """
    A specialization resolved to its parent major.

    name is the display name from the specializations vocabulary, not the
    block title, so it matches what students see in the DegreeWorks dropdown.
    """
    parent: ProgramIdentity
    name: str
    program: Program


@dataclass
class SpecializationCacheEntry:
    """A resolved specialization as persisted across runs: parent identity plus raw block."""
    parent: ProgramIdentity
    block: dict

    def to_dict(self) -> dict:
        return {"parent": self.parent.to_dict(), "block": self.block}

    @classmethod
    def from_dict(cls, data: dict) -> "SpecializationCacheEntry":
        return cls(parent=ProgramIdentity.from_dict(data["parent"]), block=data["block"])


@dataclass
class UndergraduateRequirements:
    """University-wide blocks: UC requirements, GE, and the optional campus honors block."""
    uc: dict
    ge: dict
    chc4: Optional[dict] = None


@dataclass
class MajorAudit:
    """Blocks returned by a major audit; either may be missing."""
    college: Optional[dict] = None
    major: Optional[dict] = None
