"""
Requirement Tree Parser.

This module converts DegreeWorks audit blocks into Program objects whose
requirements are canonical boolean trees (see models/requirement.py).
"""

import logging
from typing import List, Optional

from ..models import (
    AllOf,
    AnyOf,
    NoneOf,
    CourseRequirement,
    ExamRequirement,
    Program,
    ProgramIdentity,
    RequirementNode,
)

logger = logging.getLogger(__name__)


class RequirementTreeParser:
    """
    Parses DegreeWorks rule arrays into requirement trees.

    RULE TYPES:
    -----------
    A block's "ruleArray" is an ordered list of rules. Each rule has a
    "ruleType" and a type-specific "requirement" object:

    Course:    Take courses from requirement.courseArray.
               classesBegin says how many (missing: all if the connector
               is "+", else any one); "except" lists courses that may not
               be used.
    Group:     Satisfy requirement.numberOfGroups of the nested ruleArray.
    Subset:    Satisfy every rule of the nested ruleArray.
    IfStmt:    ifPart / elsePart rule arrays chosen by a student-dependent
               condition. With no student, either branch may apply.
    Block:     Another block embedded in this one (e.g. a concentration
               inside a major); parsed like any other block.
    Noncourse: Exams and other non-course items (requirement.noncourseArray).

    Anything else is skipped. The upstream format is only partly
    documented, so a rule we do not understand must never fail the run.

    COUNT MAPPING:
    --------------
    "Take N of these K"  ->  N >= K: AllOf
                             N <= 1: AnyOf
                             else:   AnyOf(count=N)

    GUARANTEES:
    -----------
    - Every leaf is a CourseRequirement or ExamRequirement.
    - Groups left with no children are dropped, never emitted empty.
    - Output order follows input order, so identical input always gives
      identical output. College-block deduplication relies on this.
    """

    # Rule types that carry no course requirements of their own
    IGNORED_RULE_TYPES = {"Complete", "Incomplete", "Blocktype"}

    # Disciplines DegreeWorks uses for exam credit in course arrays
    EXAM_DISCIPLINES = {"AP"}

    def parse_block(self, identity: ProgramIdentity, block: dict) -> Program:
        """
        Parse one audit block into a Program.

        Args:
            identity: What the block is (school, type, code, degree)
            block: Raw block from an audit's blockArray
        """
        return Program(
            identity=identity,
            name=block.get("title", ""),
            requirements=self.rule_array_to_requirements(block.get("ruleArray"), identity),
        )

    def rule_array_to_requirements(self, rule_array,
                                   identity: ProgramIdentity = None) -> List[RequirementNode]:
        """Parse a rule array into its top-level requirement groups, in order."""
        if rule_array is None:
            return []
        if not isinstance(rule_array, list):
            logger.warning("Expected a rule array, got %s", type(rule_array).__name__)
            return []

        requirements = []
        for rule in rule_array:
            node = self._parse_rule(rule, identity)
            if node is not None:
                requirements.append(node)
        return requirements

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _parse_rule(self, rule, identity) -> Optional[RequirementNode]:
        if not isinstance(rule, dict):
            logger.warning("Skipping rule that is not an object: %r", rule)
            return None

        rule_type = rule.get("ruleType")
        if rule_type == "Course":
            return self._parse_course_rule(rule)
        if rule_type == "Group":
            return self._parse_group_rule(rule, identity)
        if rule_type == "Subset":
            children = self.rule_array_to_requirements(rule.get("ruleArray"), identity)
            return _group(AllOf, children, _label(rule))
        if rule_type == "IfStmt":
            return self._parse_if_rule(rule, identity)
        if rule_type == "Block":
            return self._parse_block_rule(rule, identity)
        if rule_type == "Noncourse":
            return self._parse_noncourse_rule(rule)

        if rule_type in self.IGNORED_RULE_TYPES:
            logger.debug("Skipping %s rule %r", rule_type, _label(rule))
        else:
            logger.warning("Skipping unrecognized rule type %r (%r)", rule_type, _label(rule))
        return None

    def _parse_course_rule(self, rule: dict) -> Optional[RequirementNode]:
        requirement = _requirement(rule)
        label = _label(rule)

        courses = [
            leaf for leaf in map(self._parse_course, _list(requirement.get("courseArray")))
            if leaf is not None
        ]
        if not courses:
            logger.debug("Course rule %r has no concrete courses", label)
            return None

        # credit-only rules ("8 units from ...") have no class count;
        # their courses are alternatives unless joined with "+"
        classes = _as_int(requirement.get("classesBegin"))
        if classes is None:
            classes = len(courses) if requirement.get("connector") == "+" else 1
        node = _counted_group(courses, classes, label)

        excluded = [
            leaf for leaf in map(self._parse_course, _list(_mapping(requirement.get("except")).get("courseArray")))
            if leaf is not None
        ]
        if not excluded:
            return node

        exclusion = NoneOf(children=excluded)
        if isinstance(node, AllOf):
            node.children.append(exclusion)
            return node
        node.label = None
        return AllOf(children=[node, exclusion], label=label)

    def _parse_group_rule(self, rule: dict, identity) -> Optional[RequirementNode]:
        children = self.rule_array_to_requirements(rule.get("ruleArray"), identity)
        if not children:
            return None
        count = _as_int(_requirement(rule).get("numberOfGroups"))
        return _counted_group(children, count, _label(rule))

    def _parse_if_rule(self, rule: dict, identity) -> Optional[RequirementNode]:
        requirement = _requirement(rule)
        branches = []
        for part in ("ifPart", "elsePart"):
            rules = _mapping(requirement.get(part)).get("ruleArray")
            branch = _group(AllOf, self.rule_array_to_requirements(rules, identity))
            if branch is not None:
                branches.append(branch)
        return _group(AnyOf, branches, _label(rule))

    def _parse_block_rule(self, rule: dict, identity) -> Optional[RequirementNode]:
        nested = rule.get("block") or _requirement(rule).get("block")
        if not isinstance(nested, dict):
            logger.warning("Skipping block rule %r without an embedded block", _label(rule))
            return None

        parent = identity or ProgramIdentity("", "", "")
        nested_identity = ProgramIdentity(
            school=parent.school,
            program_type=_text(nested.get("requirementType")) or "BLOCK",
            code=_text(nested.get("requirementValue")),
            degree_type=parent.degree_type,
        )
        program = self.parse_block(nested_identity, nested)
        return _group(AllOf, program.requirements, program.name or _label(rule))

    def _parse_noncourse_rule(self, rule: dict) -> Optional[RequirementNode]:
        exams = []
        for entry in _list(_requirement(rule).get("noncourseArray")):
            code = _text(entry.get("code")) if isinstance(entry, dict) else ""
            if not code:
                logger.warning("Skipping malformed noncourse entry %r", entry)
                continue
            exams.append(ExamRequirement(exam_name=code, min_grade=_first(entry.get("valueList"))))
        if not exams:
            return None
        if len(exams) == 1 and _label(rule) is None:
            return exams[0]
        return _group(AllOf, exams, _label(rule))

    # -------------------------------------------------------------------------
    # Leaves
    # -------------------------------------------------------------------------

    def _parse_course(self, entry) -> Optional[RequirementNode]:
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed course entry %r", entry)
            return None

        discipline = _text(entry.get("discipline"))
        number = _text(entry.get("number"))
        if not discipline or not number:
            logger.warning("Skipping course entry without discipline/number: %r", entry)
            return None

        # "COMPSCI 1@" and "COMPSCI 100:199" stand for many courses at once
        if "@" in discipline or "@" in number or entry.get("numberEnd"):
            logger.debug("Skipping wildcard or ranged course %s %s", discipline, number)
            return None

        with_clauses = _list(entry.get("withArray"))
        min_grade = None
        is_coreq = False
        for clause in with_clauses:
            if not isinstance(clause, dict):
                continue
            if clause.get("code") == "DWGRADE":
                min_grade = _first(clause.get("valueList"))
            elif clause.get("code") == "DWCOREQ":
                is_coreq = True

        if discipline in self.EXAM_DISCIPLINES:
            return ExamRequirement(exam_name=f"{discipline} {number}", min_grade=min_grade)
        return CourseRequirement(course_id=f"{discipline} {number}", min_grade=min_grade, is_coreq=is_coreq)


# =============================================================================
# Helpers
# =============================================================================

def _requirement(rule: dict) -> dict:
    return _mapping(rule.get("requirement"))


def _mapping(value) -> dict:
    return value if isinstance(value, dict) else {}


def _list(value) -> list:
    return value if isinstance(value, list) else []


def _text(value) -> str:
    # course numbers sometimes arrive as JSON ints
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return str(value).strip()
    return ""


def _label(rule: dict) -> Optional[str]:
    label = rule.get("label")
    return label if isinstance(label, str) and label else None


def _first(values) -> Optional[str]:
    if isinstance(values, list) and values:
        return str(values[0])
    return None


def _as_int(value) -> Optional[int]:
    # DegreeWorks sends counts as strings ("2") or numbers
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _group(kind, children: list, label: str = None, **kwargs) -> Optional[RequirementNode]:
    if not children:
        return None
    return kind(children=children, label=label, **kwargs)


def _counted_group(children: list, count: Optional[int], label: str = None) -> Optional[RequirementNode]:
    if count is None or count >= len(children):
        return _group(AllOf, children, label)
    if count <= 1:
        return _group(AnyOf, children, label)
    return _group(AnyOf, children, label, count=count)
