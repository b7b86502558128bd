"""
Requirement tree data models.

A program's requirements are stored as a list of RequirementNode trees.
Internal nodes combine their children with boolean logic; leaves always
name a concrete course or exam.

    AllOf(label="Lower-Division Requirements", children=[
        CourseRequirement("I&C SCI 31"),
        AnyOf(children=[
            CourseRequirement("MATH 2A", min_grade="C"),
            ExamRequirement("AP CALCULUS AB", min_grade="4"),
        ]),
    ])
"""

import json
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union


@dataclass
class CourseRequirement:
    """
    A single course that must be completed.

    Attributes:
        course_id: Department and number as they appear in the catalogue (e.g., "COMPSCI 161")
        min_grade: Lowest acceptable grade, if the rule sets one
        is_coreq: True if the course may be taken concurrently
    """
    course_id: str
    min_grade: Optional[str] = None
    is_coreq: bool = False

    def to_dict(self) -> dict:
        return {
            "type": "Course",
            "courseId": self.course_id,
            "minGrade": self.min_grade,
            "isCoreq": self.is_coreq,
        }


@dataclass
class ExamRequirement:
    """An exam (AP, placement, ...) that must be passed, optionally with a minimum score."""
    exam_name: str
    min_grade: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "type": "Exam",
            "examName": self.exam_name,
            "minGrade": self.min_grade,
        }


@dataclass
class _RequirementGroup:
    children: list = field(default_factory=list)
    label: Optional[str] = None

    TYPE = ""

    def _header(self) -> dict:
        out = {"type": self.TYPE}
        if self.label is not None:
            out["label"] = self.label
        return out

    def to_dict(self) -> dict:
        out = self._header()
        out["children"] = [child.to_dict() for child in self.children]
        return out


@dataclass
class AllOf(_RequirementGroup):
    """Every child must be satisfied."""
    TYPE = "AllOf"


@dataclass
class AnyOf(_RequirementGroup):
    """
    At least `count` children must be satisfied.

    count is 1 for a plain OR. DegreeWorks also expresses "choose 2 of the
    following" rules, which keep the number here rather than being expanded.
    """
    count: int = 1

    TYPE = "AnyOf"

    def to_dict(self) -> dict:
        out = self._header()
        if self.count != 1:
            out["count"] = self.count
        out["children"] = [child.to_dict() for child in self.children]
        return out


@dataclass
class NoneOf(_RequirementGroup):
    """No child may be used toward the enclosing requirement."""
    TYPE = "NoneOf"


RequirementNode = Union[AllOf, AnyOf, NoneOf, CourseRequirement, ExamRequirement]
GROUP_TYPES = (AllOf, AnyOf, NoneOf)
LEAF_TYPES = (CourseRequirement, ExamRequirement)


def requirements_to_list(requirements: List[RequirementNode]) -> list:
    """Convert a requirement list to plain JSON-compatible data."""
    return [node.to_dict() for node in requirements]


def requirements_to_json(requirements: List[RequirementNode]) -> str:
    """
    Canonical JSON for a requirement list.

    Two structurally equal lists always give the same string, which is what
    college-block deduplication compares on.
    """
    return json.dumps(requirements_to_list(requirements), separators=(",", ":"))


def iter_nodes(requirements: List[RequirementNode]) -> Iterator[RequirementNode]:
    """Depth-first, pre-order walk over every node of every tree."""
    for node in requirements:
        yield node
        if isinstance(node, GROUP_TYPES):
            yield from iter_nodes(node.children)


def iter_leaves(requirements: List[RequirementNode]) -> Iterator[RequirementNode]:
    for node in iter_nodes(requirements):
        if not isinstance(node, GROUP_TYPES):
            yield node
