"""
DegreeWorks Requirements Scraper
================================

Collects the degree requirements of every UCI major, minor and
specialization from DegreeWorks and normalizes them into boolean
requirement trees.

ARCHITECTURE OVERVIEW
---------------------

┌─────────────────────────────────────────────────────────────────────────┐
│                           DATA LAYER                                    │
│              (Network and file I/O - returns raw data)                  │
│                                                                         │
│  ┌─────────────┐  ┌───────────────┐  ┌────────────────────────────────┐ │
│  │ AuditClient │  │ CatalogClient │  │ SpecializationCache / exporter │ │
│  │(rate-limited│  │ (registrar    │  │ (cross-run cache, JSON output) │ │
│  │ DegreeWorks)│  │  catalogue)   │  │                                │ │
│  └─────────────┘  └───────────────┘  └────────────────────────────────┘ │
└─────────────────────────────────────────────────────────────────────────┘
                                   │
                                   ▼
┌─────────────────────────────────────────────────────────────────────────┐
│                          ENGINE LAYER                                   │
│          (Pure logic - returns dataclasses, NO printing)                │
│                                                                         │
│ ┌──────────────────┐ ┌───────────────────────┐ ┌──────────────────────┐ │
│ │ ProgramDiscovery │ │ RequirementTreeParser │ │SpecializationResolver│ │
│ │ (which triplets) │ │ (rules -> trees)      │ │ (spec -> major)      │ │
│ └──────────────────┘ └───────────────────────┘ └──────────────────────┘ │
└─────────────────────────────────────────────────────────────────────────┘
                                   │
                                   ▼
┌─────────────────────────────────────────────────────────────────────────┐
│                            Scraper                                      │
│       (Orchestrator - runs every stage once, in order, then DONE)       │
└─────────────────────────────────────────────────────────────────────────┘

PACKAGE STRUCTURE
-----------------

degreeworks/
├── __init__.py          # This file - main exports
├── config.py            # Configuration constants
├── exceptions.py        # Fatal error types
├── scraper.py           # Scraper orchestrator
├── cli.py               # Command-line interface
│
├── models/              # Data classes
│   ├── requirement.py   # AllOf, AnyOf, NoneOf, CourseRequirement, ExamRequirement
│   └── program.py       # ProgramTriplet, ProgramIdentity, Program, ...
│
├── data/                # Upstream access and file I/O
│   ├── rate_limit.py    # RateLimiter
│   ├── session.py       # Retrying requests session
│   ├── audit_client.py  # AuditClient
│   ├── catalog_client.py # CatalogClient
│   ├── spec_cache.py    # SpecializationCache
│   └── exporter.py      # build_records, write_records
│
├── engines/             # Parsing, discovery and resolution
│   ├── parser.py        # RequirementTreeParser
│   ├── discovery.py     # ProgramDiscovery
│   ├── specializations.py # SpecializationResolver
│   └── postprocess.py   # merge_specializations, degrees_awarded
│
└── ui/
    └── terminal.py      # ScrapeSummaryDisplay

USAGE
-----

    from degreeworks import AuditClient, CatalogClient, Scraper, build_records

    client = AuditClient.bootstrap(student_id, auth_token)
    scraper = Scraper(client, CatalogClient())
    scraper.run()
    records = build_records(scraper.get())

Running from command line:

    degreeworks-scraper --student-id 12345678 --auth-token "..."

"""

# Version
__version__ = "1.0.0"

# Main exports
from .scraper import Scraper, ScrapeResult, Stage
from .cli import main

# Model exports
from .models import (
    AllOf,
    AnyOf,
    NoneOf,
    CourseRequirement,
    ExamRequirement,
    ProgramTriplet,
    ProgramIdentity,
    Program,
    MajorProgram,
    ParsedSpecialization,
    SpecializationCacheEntry,
)

# Engine exports (for advanced use)
from .engines import (
    RequirementTreeParser,
    ProgramDiscovery,
    SpecializationResolver,
    specialization_parent_candidates,
)

# Data exports
from .data import (
    AuditClient,
    CatalogClient,
    RateLimiter,
    SpecializationCache,
    build_records,
    write_records,
)

# Exceptions
from .exceptions import (
    DegreeWorksError,
    SessionError,
    ScrapeAbortedError,
    ScraperStateError,
    SpecializationCacheError,
)

__all__ = [
    # Version
    "__version__",
    # Main entry points
    "Scraper",
    "ScrapeResult",
    "Stage",
    "main",
    # Models
    "AllOf",
    "AnyOf",
    "NoneOf",
    "CourseRequirement",
    "ExamRequirement",
    "ProgramTriplet",
    "ProgramIdentity",
    "Program",
    "MajorProgram",
    "ParsedSpecialization",
    "SpecializationCacheEntry",
    # Engines
    "RequirementTreeParser",
    "ProgramDiscovery",
    "SpecializationResolver",
    "specialization_parent_candidates",
    # Data
    "AuditClient",
    "CatalogClient",
    "RateLimiter",
    "SpecializationCache",
    "build_records",
    "write_records",
    # Exceptions
    "DegreeWorksError",
    "SessionError",
    "ScrapeAbortedError",
    "ScraperStateError",
    "SpecializationCacheError",
]
