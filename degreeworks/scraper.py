"""
DegreeWorks Scraper - Main Orchestrator.

This module contains the Scraper class that sequences one full scrape:
university requirements, vocabularies, discovery, minors, majors,
specializations and post-processing.

NOTE: Don't run this file directly. Use the CLI:
    degreeworks-scraper --student-id ... --auth-token ...
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum

from .config import CACHE_DIR, division_for_degree
from .data import AuditClient, CatalogClient, SpecializationCache, cache_path_for
from .engines import (
    ProgramDiscovery,
    RequirementTreeParser,
    SpecializationResolver,
    degrees_awarded,
    merge_specializations,
)
from .exceptions import ScrapeAbortedError, ScraperStateError
from .models import MajorProgram, ProgramIdentity

logger = logging.getLogger(__name__)


class Stage(Enum):
    """Scrape stages, in the only order they can run."""
    INIT = "init"
    UNIVERSITY_REQUIREMENTS = "university_requirements"
    VOCABULARIES = "vocabularies"
    DISCOVERY = "discovery"
    MINORS = "minors"
    MAJORS = "majors"
    SPECIALIZATIONS = "specializations"
    POST_PROCESS = "post_process"
    DONE = "done"


@dataclass(frozen=True)
class ScrapeState:
    """
    Everything accumulated so far in a run.

    Each stage receives the previous state and returns a new one; nothing
    is mutated in place between stages.
    """
    stage: Stage = Stage.INIT
    ugrad_requirements: dict = field(default_factory=dict)  # "UC"/"GE"/"CHC4" -> requirements
    degrees: dict = field(default_factory=dict)             # degree key -> name
    major_codes: tuple = ()
    minor_codes: tuple = ()
    specialization_names: dict = field(default_factory=dict)  # spec code -> display name
    triplets: tuple = ()
    minors: dict = field(default_factory=dict)              # title -> Program
    majors: dict = field(default_factory=dict)              # title -> MajorProgram
    specializations: dict = field(default_factory=dict)     # spec code -> ParsedSpecialization
    degrees_awarded: dict = field(default_factory=dict)     # degree key -> name


@dataclass(frozen=True)
class ScrapeResult:
    """What a finished run hands to the persistence layer."""
    catalog_year: str
    ugrad_requirements: dict
    minors: dict
    majors: dict
    specializations: dict
    degrees_awarded: dict


class Scraper:
    """
    Runs one complete, sequential scrape.

    ═══════════════════════════════════════════════════════════════════════════
    LIFECYCLE
    ═══════════════════════════════════════════════════════════════════════════

    INIT → UNIVERSITY_REQUIREMENTS → VOCABULARIES → DISCOVERY → MINORS
         → MAJORS → SPECIALIZATIONS → POST_PROCESS → DONE

    - Stages never run concurrently and never go backwards. The audit API's
      rate limit makes parallel requests pointless.
    - A stage that cannot get data the later stages depend on raises
      ScrapeAbortedError; there is no partial result.
    - A Scraper is single-use: run() a second time raises, and get() before
      the run is DONE raises.
    - Only specialization resolutions survive a restart (via the cache);
      majors and minors are always scraped again.

    ═══════════════════════════════════════════════════════════════════════════

    USAGE:
        client = AuditClient.bootstrap(student_id, auth_token)
        scraper = Scraper(client, CatalogClient())
        scraper.run()
        result = scraper.get()
    """

    def __init__(self, client: AuditClient, catalog: CatalogClient, cache_dir=CACHE_DIR,
                 parser: RequirementTreeParser = None):
        self.client = client
        self.parser = parser or RequirementTreeParser()
        self.discovery = ProgramDiscovery(catalog)
        self.cache_dir = cache_dir
        self._state = ScrapeState()
        self._started = False

    @property
    def stage(self) -> Stage:
        return self._state.stage

    def run(self) -> "ScrapeResult":
        if self._started:
            raise ScraperStateError("This scraper instance has already been run.")
        self._started = True
        logger.info("Scrape starting for catalog year %s", self.client.catalog_year)

        state = self._state
        for step in (
            self._fetch_university_requirements,
            self._fetch_vocabularies,
            self._discover_programs,
            self._scrape_minors,
            self._scrape_majors,
            self._resolve_specializations,
            self._post_process,
        ):
            state = step(state)
            self._state = state
            logger.info("Stage %s complete", state.stage.value)

        self._state = replace(state, stage=Stage.DONE)
        logger.info(
            "Scrape finished: %d majors, %d minors, %d specializations",
            len(state.majors), len(state.minors), len(state.specializations),
        )
        return self.get()

    def get(self) -> ScrapeResult:
        state = self._state
        if state.stage is not Stage.DONE:
            raise ScraperStateError("This scraper instance has not yet finished its run.")
        return ScrapeResult(
            catalog_year=self.client.catalog_year,
            ugrad_requirements=state.ugrad_requirements,
            minors=state.minors,
            majors=state.majors,
            specializations=state.specializations,
            degrees_awarded=state.degrees_awarded,
        )

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _fetch_university_requirements(self, state: ScrapeState) -> ScrapeState:
        reqs = self.client.get_ugrad_requirements()
        if reqs is None:
            raise ScrapeAbortedError("Could not fetch university and GE requirements")

        parsed = {
            "UC": self.parser.rule_array_to_requirements(reqs.uc.get("ruleArray")),
            "GE": self.parser.rule_array_to_requirements(reqs.ge.get("ruleArray")),
        }
        if reqs.chc4 is not None:
            parsed["CHC4"] = self.parser.rule_array_to_requirements(reqs.chc4.get("ruleArray"))
        logger.info("Fetched university and GE requirements")
        return replace(state, stage=Stage.UNIVERSITY_REQUIREMENTS, ugrad_requirements=parsed)

    def _fetch_vocabularies(self, state: ScrapeState) -> ScrapeState:
        degrees = self.client.get_mapping("degrees")
        logger.info("Fetched %d degrees", len(degrees))
        major_codes = tuple(self.client.get_mapping("majors"))
        logger.info("Fetched %d major programs", len(major_codes))
        minor_codes = tuple(self.client.get_mapping("minors"))
        logger.info("Fetched %d minor programs", len(minor_codes))
        specializations = self.client.get_mapping("specializations")
        logger.info("Fetched %d specializations", len(specializations))

        if not degrees or not major_codes:
            raise ScrapeAbortedError("DegreeWorks returned an empty degree or major vocabulary")

        return replace(
            state,
            stage=Stage.VOCABULARIES,
            degrees=degrees,
            major_codes=major_codes,
            minor_codes=minor_codes,
            specialization_names=specializations,
        )

    def _discover_programs(self, state: ScrapeState) -> ScrapeState:
        triplets = self.discovery.discover(state.degrees, state.major_codes)
        return replace(state, stage=Stage.DISCOVERY, triplets=tuple(triplets))

    def _scrape_minors(self, state: ScrapeState) -> ScrapeState:
        minors = {}
        for minor_code in state.minor_codes:
            block = self.client.get_minor_audit(minor_code)
            if not block:
                logger.warning("Requirements block not found (minorCode = %s)", minor_code)
                continue

            title = block.get("title", "")
            if title in minors:
                logger.warning('Requirements block already exists for "%s" (minorCode = %s)', title, minor_code)
                continue

            minors[title] = self.parser.parse_block(ProgramIdentity("U", "MINOR", minor_code), block)
            logger.info('Requirements block found and parsed for "%s" (minorCode = %s)', title, minor_code)

        return replace(state, stage=Stage.MINORS, minors=minors)

    def _scrape_majors(self, state: ScrapeState) -> ScrapeState:
        majors = {}
        for school_code, major_code, degree_code in state.triplets:
            audit = self.client.get_major_audit(
                degree_code,
                division_for_degree(degree_code),
                major_code,
                school_code,
            )
            block = audit.major if audit else None
            if not block:
                logger.warning(
                    "Requirements block not found (majorCode = %s, degree = %s)", major_code, degree_code,
                )
                continue

            title = block.get("title", "")
            if title in majors:
                logger.warning(
                    'Requirements block already exists for "%s" (majorCode = %s, degree = %s)',
                    title, major_code, degree_code,
                )
                continue

            college = None
            if audit.college:
                college = self.parser.parse_block(
                    ProgramIdentity(school_code, "COLLEGE", major_code, degree_code), audit.college,
                )
            majors[title] = MajorProgram(
                college=college,
                major=self.parser.parse_block(
                    ProgramIdentity(school_code, "MAJOR", major_code, degree_code), block,
                ),
            )
            logger.info(
                'Requirements block found and parsed for "%s" (majorCode = %s, degree = %s)',
                title, major_code, degree_code,
            )

        return replace(state, stage=Stage.MAJORS, majors=majors)

    def _resolve_specializations(self, state: ScrapeState) -> ScrapeState:
        cache = SpecializationCache.load(cache_path_for(self.cache_dir, self.client.catalog_year))
        resolver = SpecializationResolver(self.client, self.parser, cache)
        resolved = resolver.resolve_all(state.specialization_names, state.majors)

        # attach each specialization to this run's copy of its parent major;
        # matched on (code, degree) since the school can differ between runs
        majors = dict(state.majors)
        by_program = {}
        for title, entry in majors.items():
            by_program.setdefault((entry.major.code, entry.major.degree_type), title)
        specializations = {}
        for spec_code, parsed in resolved.items():
            title = by_program.get((parsed.parent.code, parsed.parent.degree_type))
            if title is None:
                logger.warning(
                    "Parent major %s of specialization %s was not scraped this run; skipping",
                    parsed.parent.id, spec_code,
                )
                continue
            entry = majors[title]
            major = replace(entry.major, specs=entry.major.specs + [spec_code])
            majors[title] = replace(entry, major=major)
            specializations[spec_code] = replace(parsed, parent=major.identity)

        return replace(state, stage=Stage.SPECIALIZATIONS, majors=majors, specializations=specializations)

    def _post_process(self, state: ScrapeState) -> ScrapeState:
        majors, specializations = merge_specializations(state.majors, state.specializations)
        return replace(
            state,
            stage=Stage.POST_PROCESS,
            majors=majors,
            specializations=specializations,
            degrees_awarded=degrees_awarded(majors, state.degrees),
        )
