"""
Record export tests.
"""

import json

import pytest

from degreeworks import Scraper
from degreeworks.data import build_records, write_records
from degreeworks.data.exporter import division_name
from degreeworks.engines import RequirementTreeParser
from degreeworks.models import MajorProgram, ProgramIdentity
from degreeworks.scraper import ScrapeResult

from conftest import block, course, course_rule


@pytest.fixture
def records(fake_client, fake_catalog, tmp_path):
    return build_records(Scraper(fake_client, fake_catalog, cache_dir=tmp_path).run())


def college_major(school, code, college_course):
    parser = RequirementTreeParser()
    return MajorProgram(
        college=parser.parse_block(ProgramIdentity(school, "COLLEGE", code, "BS"),
                                   block("College", "COLLEGE", school, course_rule("Req", course("X", college_course)))),
        major=parser.parse_block(ProgramIdentity(school, "MAJOR", code, "BS"),
                                 block(f"Major {code}", "MAJOR", code)),
    )


@pytest.mark.parametrize("degree, division", [
    ("BS", "Undergraduate"),
    ("BFA", "Undergraduate"),
    ("MS", "Graduate"),
    ("PHD", "Graduate"),
])
def test_division_name(degree, division):
    assert division_name(degree) == division


class TestBuildRecords:
    def test_school_requirements(self, records):
        assert [r["id"] for r in records.school_requirements] == ["UC", "GE"]
        assert records.school_requirements[0]["requirements"][0]["type"] == "AllOf"

    def test_degrees(self, records):
        assert records.degrees == [
            {"id": "BS", "name": "B.S.", "division": "Undergraduate"},
            {"id": "BA", "name": "B.A.", "division": "Undergraduate"},
        ]

    def test_majors(self, records):
        assert [m["id"] for m in records.majors] == ["BS-201", "BS-203", "BA-0A1"]
        cs = records.majors[0]
        assert (cs["degreeId"], cs["code"], cs["name"]) == ("BS", "201", "Major in Computer Science")
        assert cs["requirements"] == [
            {"type": "AllOf", "label": "Core", "children": [
                {"type": "Course", "courseId": "COMPSCI 161", "minGrade": None, "isCoreq": False},
            ]},
        ]

    def test_identical_college_blocks_stored_once(self, records):
        assert len(records.college_requirements) == 1
        college = records.college_requirements[0]
        assert college["name"] == "School of ICS"
        assert records.majors[0]["college"] == college["id"]
        assert records.majors[1]["college"] == college["id"]
        assert records.majors[2]["college"] is None

    def test_minors(self, records):
        assert [(m["id"], m["name"]) for m in records.minors] == [("25", "Minor in Digital Arts")]

    def test_specializations(self, records):
        assert [(s["id"], s["majorId"]) for s in records.specializations] == [
            ("BS-201A", "BS-201"),
            ("BS-201B", "BS-201"),
            ("BS-OACSC", "BS-203"),
        ]
        assert records.specializations[1]["name"] == "Systems"


class TestCollegeIds:
    @staticmethod
    def _result(majors):
        return ScrapeResult(
            catalog_year="20252026", ugrad_requirements={}, minors={},
            majors=majors, specializations={}, degrees_awarded={},
        )

    def test_distinct_blocks_get_distinct_ids(self):
        records = build_records(self._result({
            "A": college_major("CS", "201", "1"),
            "B": college_major("EN", "161", "2"),
        }))
        ids = [c["id"] for c in records.college_requirements]
        assert len(set(ids)) == 2
        assert [m["college"] for m in records.majors] == ids

    def test_ids_are_stable_across_runs(self):
        majors = {"A": college_major("CS", "201", "1")}
        first = build_records(self._result(majors)).college_requirements[0]["id"]
        second = build_records(self._result(dict(majors))).college_requirements[0]["id"]
        assert first == second

    def test_empty_college_block_is_still_linked(self):
        records = build_records(self._result({
            "A": college_major("CS", "201", "1@"),
            "B": college_major("EN", "161", "2@"),
        }))
        [college] = records.college_requirements
        assert college["requirements"] == []
        assert [m["college"] for m in records.majors] == [college["id"], college["id"]]

    def test_major_without_college_block(self):
        entry = MajorProgram(college=None, major=college_major("CS", "201", "1").major)
        records = build_records(self._result({"A": entry}))
        assert records.college_requirements == []
        assert records.majors[0]["college"] is None


def test_write_records(records, tmp_path):
    output_dir = write_records(records, tmp_path / "out")
    names = sorted(p.name for p in output_dir.iterdir())
    assert names == [
        "college_requirements.json",
        "degrees.json",
        "majors.json",
        "minors.json",
        "school_requirements.json",
        "specializations.json",
    ]
    assert json.loads((output_dir / "majors.json").read_text()) == records.majors
