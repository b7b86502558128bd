"""
Record export.

Turns a finished ScrapeResult into the flat records the database loader
upserts, and writes them out as JSON.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from ..models import requirements_to_json, requirements_to_list

logger = logging.getLogger(__name__)

# Fixed namespace so a college block keeps its id from one run to the next
COLLEGE_REQUIREMENT_NAMESPACE = uuid.UUID("9b1f3a52-6f0e-4c1d-8e57-3d2f1c0a7b64")


@dataclass
class ScrapeRecords:
    """
    Rows for each table, ready to upsert.

    majors[i]["college"] is the id of an entry in college_requirements, or
    None when the major has no college block.
    """
    school_requirements: list = field(default_factory=list)
    degrees: list = field(default_factory=list)
    college_requirements: list = field(default_factory=list)
    majors: list = field(default_factory=list)
    minors: list = field(default_factory=list)
    specializations: list = field(default_factory=list)


def division_name(degree_id: str) -> str:
    return "Undergraduate" if degree_id.startswith("B") else "Graduate"


def build_records(result) -> ScrapeRecords:
    """
    Build all records from a ScrapeResult.

    COLLEGE BLOCK DEDUPLICATION:
    ----------------------------
    Most majors in a school share one byte-identical college block. Blocks
    are compared on their canonical requirement JSON and each distinct
    block is stored once, keeping the title of its first occurrence. A
    college block with no requirements is still stored and linked.
    """
    records = ScrapeRecords()

    for req_id, requirements in result.ugrad_requirements.items():
        records.school_requirements.append({
            "id": req_id,
            "requirements": requirements_to_list(requirements),
        })

    for degree_id, name in result.degrees_awarded.items():
        records.degrees.append({"id": degree_id, "name": name, "division": division_name(degree_id)})

    college_ids = {}
    for entry in result.majors.values():
        college_id = None
        if entry.college is not None:
            key = requirements_to_json(entry.college.requirements)
            if key not in college_ids:
                college_ids[key] = str(uuid.uuid5(COLLEGE_REQUIREMENT_NAMESPACE, key))
                records.college_requirements.append({
                    "id": college_ids[key],
                    "name": entry.college.name,
                    "requirements": requirements_to_list(entry.college.requirements),
                })
            college_id = college_ids[key]

        major = entry.major
        records.majors.append({
            "id": f"{major.degree_type}-{major.code}",
            "degreeId": major.degree_type or "",
            "code": major.code,
            "name": major.name,
            "requirements": requirements_to_list(major.requirements),
            "college": college_id,
        })

    for minor in result.minors.values():
        records.minors.append({
            "id": minor.code,
            "name": minor.name,
            "requirements": requirements_to_list(minor.requirements),
        })

    for spec_code, spec in result.specializations.items():
        records.specializations.append({
            "id": f"{spec.program.degree_type}-{spec_code}",
            "name": spec.name,
            "majorId": f"{spec.parent.degree_type}-{spec.parent.code}",
            "requirements": requirements_to_list(spec.program.requirements),
        })

    return records


def write_records(records: ScrapeRecords, output_dir) -> Path:
    """Write one JSON file per record kind into output_dir."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    for name, rows in vars(records).items():
        with open(output_dir / f"{name}.json", "w", encoding="utf-8") as f:
            json.dump(rows, f, indent=4)
        logger.info("Wrote %d %s to %s", len(rows), name, output_dir)
    return output_dir
