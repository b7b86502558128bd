"""
Persistent specialization cache.

Matching a specialization to its major costs one audit per candidate major,
so associations found in earlier runs are kept on disk and reused. This is
the only state that outlives a run.

File format (one file per catalog year, spec-cache-20252026.json):
    {
        "CSA": {"parent": {"school": "CS", "programType": "MAJOR", ...}, "block": {...}},
        "XYZ": null
    }
null records a specialization that was searched for and not found.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from ..exceptions import SpecializationCacheError
from ..models import SpecializationCacheEntry

logger = logging.getLogger(__name__)


def cache_path_for(cache_dir, catalog_year: str) -> Path:
    return Path(cache_dir) / f"spec-cache-{catalog_year}.json"


class SpecializationCache:
    """
    In-memory view of the cache file, written back with save().

    WHY ATOMIC WRITES: the cache is rewritten after every newly resolved
    specialization. Writing to a temp file and renaming it over the old one
    means an interrupted run leaves either the old or the new file, never a
    truncated one.
    """

    def __init__(self, path, entries: dict = None):
        self.path = Path(path)
        self._entries = entries if entries is not None else {}

    @classmethod
    def load(cls, path) -> "SpecializationCache":
        """
        Read the cache file. A missing or empty file is an empty cache.

        Raises:
            SpecializationCacheError: if the file is not a JSON object
        """
        path = Path(path)
        if not path.exists():
            return cls(path)

        text = path.read_text(encoding="utf-8")
        if not text.strip():
            return cls(path)

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise SpecializationCacheError(f"{path} is not valid JSON: {e}") from e
        if not isinstance(raw, dict):
            raise SpecializationCacheError(f"{path} does not hold a JSON object")

        entries = {}
        for code, value in raw.items():
            try:
                entries[code] = None if value is None else SpecializationCacheEntry.from_dict(value)
            except (KeyError, TypeError) as e:
                raise SpecializationCacheError(f"{path}: bad entry for {code!r}") from e

        logger.info("Loaded %d cached specializations from %s", len(entries), path)
        return cls(path, entries)

    def __contains__(self, spec_code: str) -> bool:
        return spec_code in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, spec_code: str) -> Optional[SpecializationCacheEntry]:
        return self._entries.get(spec_code)

    def set(self, spec_code: str, entry: Optional[SpecializationCacheEntry]) -> None:
        self._entries[spec_code] = entry

    def to_dict(self) -> dict:
        return {
            code: None if entry is None else entry.to_dict()
            for code, entry in self._entries.items()
        }

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=4)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise
