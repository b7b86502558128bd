"""
Shared fixtures and fakes.

The fakes stand in for the upstream clients and record every call so
tests can assert exactly how much network traffic a scenario causes.
"""

import pytest

from degreeworks.data.catalog_client import CatalogReport
from degreeworks.models import MajorAudit, UndergraduateRequirements


# ── Block builders ───────────────────────────────────────────────────────────

def course(discipline, number, grade=None, coreq=False):
    entry = {"discipline": discipline, "number": number}
    with_array = []
    if grade is not None:
        with_array.append({"code": "DWGRADE", "operator": ">=", "valueList": [grade]})
    if coreq:
        with_array.append({"code": "DWCOREQ"})
    if with_array:
        entry["withArray"] = with_array
    return entry


def course_rule(label, *courses, classes=None, connector=None, exclude=()):
    requirement = {"courseArray": list(courses)}
    if classes is not None:
        requirement["classesBegin"] = str(classes)
    if connector is not None:
        requirement["connector"] = connector
    if exclude:
        requirement["except"] = {"courseArray": list(exclude)}
    return {"ruleType": "Course", "label": label, "requirement": requirement}


def group_rule(label, count, *rules):
    return {
        "ruleType": "Group",
        "label": label,
        "requirement": {"numberOfGroups": str(count), "numberOfRules": str(len(rules))},
        "ruleArray": list(rules),
    }


def block(title, requirement_type, value, *rules):
    return {
        "requirementType": requirement_type,
        "requirementValue": value,
        "title": title,
        "ruleArray": list(rules),
    }


# ── Fake clients ─────────────────────────────────────────────────────────────

class FakeAuditClient:
    """
    In-memory AuditClient.

    major_audits: {(degree, major_code): MajorAudit}
    minor_audits: {minor_code: block}
    spec_audits:  {(major_code, spec_code): block}
    """

    def __init__(self, ugrad=None, mappings=None, major_audits=None,
                 minor_audits=None, spec_audits=None, catalog_year="20252026"):
        self.catalog_year = catalog_year
        self.ugrad = ugrad
        self.mappings = mappings or {}
        self.major_audits = major_audits or {}
        self.minor_audits = minor_audits or {}
        self.spec_audits = spec_audits or {}
        self.calls = []

    def get_ugrad_requirements(self):
        self.calls.append(("ugrad",))
        return self.ugrad

    def get_mapping(self, collection):
        self.calls.append(("mapping", collection))
        return dict(self.mappings.get(collection, {}))

    def get_major_audit(self, degree, school, major_code, college=None):
        self.calls.append(("major", degree, school, major_code, college))
        return self.major_audits.get((degree, major_code))

    def get_minor_audit(self, minor_code):
        self.calls.append(("minor", minor_code))
        return self.minor_audits.get(minor_code)

    def get_spec_audit(self, degree, school, major_code, spec_code):
        self.calls.append(("spec", degree, school, major_code, spec_code))
        return self.spec_audits.get((major_code, spec_code))

    def calls_of(self, kind):
        return [c for c in self.calls if c[0] == kind]


class FakeCatalogClient:
    def __init__(self, award_types=None, reports=None):
        self.award_types = award_types or {}
        self.reports = reports or []

    def get_award_types(self):
        return dict(self.award_types)

    def get_reports(self):
        return list(self.reports)


def report(school, major, degree, end_term=None):
    return CatalogReport(school_code=school, major_code=major, end_term=end_term, degree_code=degree)


# ── Scenario fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def ugrad_requirements():
    return UndergraduateRequirements(
        uc=block("UC Requirements", "SCHOOL", "U",
                 course_rule("Entry Level Writing", course("WRITING", "39A"))),
        ge=block("General Education", "PROGRAM", "GE",
                 course_rule("GE Ia", course("WRITING", "40"), course("WRITING", "50"), classes=1)),
    )


@pytest.fixture
def campus():
    """
    A small campus: computer science (with two specializations), chemistry,
    art history (whose two specializations are both required), and a minor.
    """
    college = block("School of ICS", "COLLEGE", "CS",
                    course_rule("Writing", course("WRITING", "60")))
    major_audits = {
        ("BS", "201"): MajorAudit(
            college=college,
            major=block("Major in Computer Science", "MAJOR", "201",
                        course_rule("Core", course("COMPSCI", "161"), classes=1)),
        ),
        ("BS", "203"): MajorAudit(
            college=college,
            major=block("Major in Chemistry", "MAJOR", "203",
                        course_rule("Core", course("CHEM", "1A"), classes=1)),
        ),
        ("BA", "0A1"): MajorAudit(
            major=block("Major in Art History", "MAJOR", "0A1",
                        course_rule("Core", course("ART HIS", "40A"), classes=1)),
        ),
    }
    return {
        "mappings": {
            "degrees": {"BS": "B.S.", "BA": "B.A."},
            "majors": {"201": "Computer Science", "203": "Chemistry", "0A1": "Art History"},
            "minors": {"25": "Digital Arts"},
            "specializations": {
                "201A": "Algorithms",
                "201B": "Systems",
                "OACSC": "ACS Certification",
                "AHGEO": "Geography of Art",
                "AHPER": "Periods of Art",
                "ZZZ": "Orphan",
            },
        },
        "major_audits": major_audits,
        "minor_audits": {
            "25": block("Minor in Digital Arts", "MINOR", "25",
                        course_rule("Core", course("ARTS", "1"), classes=1)),
        },
        "spec_audits": {
            ("201", "201A"): block("Algorithms", "SPEC", "201A",
                                   course_rule("Spec", course("COMPSCI", "162"), classes=1)),
            ("201", "201B"): block("Systems", "OTHER", "201B",
                                   course_rule("Spec", course("COMPSCI", "143A"), classes=1)),
            ("203", "OACSC"): block("ACS", "SPEC", "OACSC",
                                    course_rule("Spec", course("CHEM", "107"), classes=1)),
        },
        "award_types": {"1": "B.S.", "2": "B.A."},
        "reports": [
            report("CS", "201", "1"),
            report("PS", "203", "1"),
            report("HU", "0A1", "2"),
        ],
    }


@pytest.fixture
def fake_client(campus, ugrad_requirements):
    return FakeAuditClient(
        ugrad=ugrad_requirements,
        mappings=campus["mappings"],
        major_audits=campus["major_audits"],
        minor_audits=campus["minor_audits"],
        spec_audits=campus["spec_audits"],
    )


@pytest.fixture
def fake_catalog(campus):
    return FakeCatalogClient(campus["award_types"], campus["reports"])
