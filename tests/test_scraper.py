"""
Scraper orchestration tests.

Every test runs the whole pipeline against the in-memory campus from
conftest.py, so these double as integration tests for the engines.
"""

import pytest

from degreeworks import Scraper, Stage
from degreeworks.data import SpecializationCache, cache_path_for
from degreeworks.exceptions import ScrapeAbortedError, ScraperStateError
from degreeworks.models import (
    ProgramIdentity,
    SpecializationCacheEntry,
    UndergraduateRequirements,
    requirements_to_json,
)

from conftest import block, course, course_rule, report

ART_HISTORY = ProgramIdentity("HU", "MAJOR", "0A1", "BA")


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def seeded_cache(cache_dir):
    """Art history's specializations cannot be found by suffix, so they come from an earlier run."""
    cache = SpecializationCache(cache_path_for(cache_dir, "20252026"))
    cache.set("AHGEO", SpecializationCacheEntry(ART_HISTORY, block(
        "Geography of Art", "SPEC", "AHGEO", course_rule("Geography", course("ART HIS", "150"), classes=1),
    )))
    cache.set("AHPER", SpecializationCacheEntry(ART_HISTORY, block(
        "Periods of Art", "SPEC", "AHPER", course_rule("Periods", course("ART HIS", "160"), classes=1),
    )))
    cache.save()
    return cache


@pytest.fixture
def scraper(fake_client, fake_catalog, cache_dir):
    return Scraper(fake_client, fake_catalog, cache_dir=cache_dir)


class TestLifecycle:
    def test_get_before_run_raises(self, scraper):
        assert scraper.stage is Stage.INIT
        with pytest.raises(ScraperStateError):
            scraper.get()

    def test_run_twice_raises(self, scraper):
        scraper.run()
        assert scraper.stage is Stage.DONE
        with pytest.raises(ScraperStateError):
            scraper.run()

    def test_get_after_run_returns_same_result(self, scraper):
        result = scraper.run()
        assert scraper.get() == result
        assert result.catalog_year == "20252026"

    def test_missing_university_requirements_aborts(self, scraper, fake_client):
        fake_client.ugrad = None
        with pytest.raises(ScrapeAbortedError):
            scraper.run()
        assert fake_client.calls == [("ugrad",)]
        with pytest.raises(ScraperStateError):
            scraper.get()

    def test_empty_major_vocabulary_aborts(self, scraper, fake_client):
        fake_client.mappings = dict(fake_client.mappings, majors={})
        with pytest.raises(ScrapeAbortedError):
            scraper.run()
        assert scraper.stage is Stage.UNIVERSITY_REQUIREMENTS
        assert fake_client.calls_of("minor") == []

    def test_aborted_scraper_cannot_be_rerun(self, scraper, fake_client):
        fake_client.ugrad = None
        with pytest.raises(ScrapeAbortedError):
            scraper.run()
        with pytest.raises(ScraperStateError):
            scraper.run()


class TestUniversityRequirements:
    def test_uc_and_ge(self, scraper):
        result = scraper.run()
        assert list(result.ugrad_requirements) == ["UC", "GE"]
        assert result.ugrad_requirements["UC"][0].label == "Entry Level Writing"

    def test_honors_included_when_present(self, scraper, fake_client, ugrad_requirements):
        fake_client.ugrad = UndergraduateRequirements(
            uc=ugrad_requirements.uc,
            ge=ugrad_requirements.ge,
            chc4=block("Campuswide Honors", "OTHER", "CHP", course_rule("Honors", course("HONORS", "1A"))),
        )
        result = scraper.run()
        assert list(result.ugrad_requirements) == ["UC", "GE", "CHC4"]


class TestPrograms:
    def test_majors_keyed_by_title(self, scraper):
        result = scraper.run()
        assert list(result.majors) == ["Major in Computer Science", "Major in Chemistry", "Major in Art History"]
        cs = result.majors["Major in Computer Science"]
        assert cs.major.id == "CS-MAJOR-201-BS"
        assert cs.college.id == "CS-COLLEGE-201-BS"
        assert result.majors["Major in Art History"].college is None

    def test_major_audit_queries(self, scraper, fake_client):
        scraper.run()
        assert fake_client.calls_of("major") == [
            ("major", "BS", "U", "201", "CS"),
            ("major", "BS", "U", "203", "PS"),
            ("major", "BA", "U", "0A1", "HU"),
        ]

    def test_graduate_degree_uses_graduate_division(self, scraper, fake_client, fake_catalog):
        fake_client.mappings = dict(fake_client.mappings, degrees={"BS": "B.S.", "BA": "B.A.", "MS": "M.S."})
        fake_catalog.award_types["9"] = "M.S."
        fake_catalog.reports.append(report("CS", "201", "9"))
        scraper.run()
        assert ("major", "MS", "G", "201", "CS") in fake_client.calls_of("major")

    def test_duplicate_major_title_first_wins(self, scraper, fake_client, fake_catalog):
        fake_catalog.reports.append(report("EN", "201", "1"))
        result = scraper.run()
        assert len(fake_client.calls_of("major")) == 4
        assert result.majors["Major in Computer Science"].major.identity.school == "CS"

    def test_missing_major_audit_skipped(self, scraper, fake_client):
        del fake_client.major_audits[("BS", "203")]
        result = scraper.run()
        assert "Major in Chemistry" not in result.majors
        assert "OACSC" not in result.specializations

    def test_minors(self, scraper):
        result = scraper.run()
        minor = result.minors["Minor in Digital Arts"]
        assert minor.id == "U-MINOR-25"
        assert minor.requirements

    def test_duplicate_minor_title_first_wins(self, scraper, fake_client):
        fake_client.mappings = dict(fake_client.mappings, minors={"25": "Digital Arts", "26": "Digital Arts 2"})
        fake_client.minor_audits["26"] = block("Minor in Digital Arts", "MINOR", "26")
        result = scraper.run()
        assert list(result.minors) == ["Minor in Digital Arts"]
        assert result.minors["Minor in Digital Arts"].code == "25"

    def test_degrees_awarded(self, scraper):
        result = scraper.run()
        assert result.degrees_awarded == {"BS": "B.S.", "BA": "B.A."}


class TestSpecializations:
    def test_resolved_and_attached(self, scraper):
        result = scraper.run()
        assert list(result.specializations) == ["201A", "201B", "OACSC"]
        assert result.majors["Major in Computer Science"].major.specs == ["201A", "201B"]
        assert result.majors["Major in Chemistry"].major.specs == ["OACSC"]

        systems = result.specializations["201B"]
        assert systems.name == "Systems"
        assert systems.parent.id == "CS-MAJOR-201-BS"
        assert systems.program.id == "CS-SPEC-201B-BS"

    def test_unresolved_are_cached(self, scraper, cache_dir):
        scraper.run()
        cache = SpecializationCache.load(cache_path_for(cache_dir, "20252026"))
        assert len(cache) == 6
        assert cache.get("ZZZ") is None
        assert cache.get("201A").parent.id == "CS-MAJOR-201-BS"

    def test_warm_run_makes_no_spec_calls(self, fake_client, fake_catalog, cache_dir):
        first = Scraper(fake_client, fake_catalog, cache_dir=cache_dir).run()
        spec_calls = len(fake_client.calls_of("spec"))
        second = Scraper(fake_client, fake_catalog, cache_dir=cache_dir).run()

        assert spec_calls == 3
        assert len(fake_client.calls_of("spec")) == spec_calls
        assert second == first

    def test_cached_parent_from_other_school_is_attached(self, scraper, cache_dir):
        # Computer Science under Engineering in an earlier run, under ICS in this one
        cache = SpecializationCache(cache_path_for(cache_dir, "20252026"))
        cache.set("201A", SpecializationCacheEntry(
            ProgramIdentity("EN", "MAJOR", "201", "BS"),
            block("Algorithms", "SPEC", "201A", course_rule("Spec", course("COMPSCI", "162"))),
        ))
        cache.save()

        result = scraper.run()
        assert "201A" in result.specializations
        assert result.specializations["201A"].parent.id == "CS-MAJOR-201-BS"
        assert result.majors["Major in Computer Science"].major.specs == ["201A", "201B"]

    def test_cached_parent_with_other_degree_is_skipped(self, scraper, cache_dir):
        cache = SpecializationCache(cache_path_for(cache_dir, "20252026"))
        cache.set("201A", SpecializationCacheEntry(ProgramIdentity("CS", "MAJOR", "201", "MCS"), block("Algorithms", "SPEC", "201A")))
        cache.save()

        result = scraper.run()
        assert "201A" not in result.specializations
        assert result.majors["Major in Computer Science"].major.specs == ["201B"]

    def test_cached_parent_not_scraped_is_skipped(self, scraper, cache_dir):
        cache = SpecializationCache(cache_path_for(cache_dir, "20252026"))
        cache.set("ZZZ", SpecializationCacheEntry(ProgramIdentity("XX", "MAJOR", "999", "BS"), block("Orphan", "SPEC", "ZZZ")))
        cache.save()

        result = scraper.run()
        assert "ZZZ" not in result.specializations
        assert all("ZZZ" not in entry.major.specs for entry in result.majors.values())


class TestMerge:
    def test_art_history_absorbs_both_specializations(self, scraper, seeded_cache):
        result = scraper.run()
        art = result.majors["Major in Art History"].major

        assert art.specs == []
        assert [node.label for node in art.requirements] == ["Core", "Geography", "Periods"]
        assert "AHGEO" not in result.specializations
        assert "AHPER" not in result.specializations

    def test_merge_skipped_when_one_is_missing(self, scraper, seeded_cache):
        seeded_cache.set("AHPER", None)
        seeded_cache.save()

        result = scraper.run()
        art = result.majors["Major in Art History"].major
        assert art.specs == ["AHGEO"]
        assert [node.label for node in art.requirements] == ["Core"]
        assert "AHGEO" in result.specializations

    def test_determinism(self, fake_client, fake_catalog, cache_dir, seeded_cache):
        first = Scraper(fake_client, fake_catalog, cache_dir=cache_dir).run()
        second = Scraper(fake_client, fake_catalog, cache_dir=cache_dir).run()
        for title in first.majors:
            assert requirements_to_json(first.majors[title].major.requirements) == \
                requirements_to_json(second.majors[title].major.requirements)
