"""In-memory catalog with category grouping and read-only queries."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import jsonpatch

from .catalog_loader import CatalogLoader, CatalogLoadResult
from .records import ALL_CATEGORIES, UNCATEGORIZED, CatalogRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogSnapshot:
    records: List[CatalogRecord] = field(default_factory=list)
    groups: Dict[str, List[CatalogRecord]] = field(default_factory=dict)
    positions: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def build(cls, records: Sequence[CatalogRecord]) -> "CatalogSnapshot":
        ordered = sorted(records, key=lambda record: record.display_name.casefold())
        groups: Dict[str, List[CatalogRecord]] = {}
        positions: Dict[str, int] = {}
        for idx, record in enumerate(ordered):
            if record.category == ALL_CATEGORIES:
                logger.warning(
                    "Record %s uses reserved category %r, grouped as %s",
                    record.id,
                    ALL_CATEGORIES,
                    UNCATEGORIZED,
                )
            groups.setdefault(record.resolved_category, []).append(record)
            positions[record.id] = idx
        return cls(records=ordered, groups=groups, positions=positions)


class CatalogStore:
    """Hold one subsystem's catalog. ``load()`` is the only mutator."""

    def __init__(self, loader: CatalogLoader):
        self.loader = loader
        self._snapshot = CatalogSnapshot()
        self.last_result: Optional[CatalogLoadResult] = None

    @property
    def kind(self) -> str:
        return self.loader.kind

    def load(self) -> CatalogLoadResult:
        result = self.loader.load()
        snapshot = CatalogSnapshot.build(result.records)
        # single assignment, readers see either the old or the new catalog
        self._snapshot = snapshot
        self.last_result = result
        logger.info(
            "%s catalog loaded: %d records in %d categories",
            self.kind.capitalize(),
            len(snapshot.records),
            len(snapshot.groups),
        )
        return result

    # ----------------------- queries -----------------------
    def __len__(self) -> int:
        return len(self._snapshot.records)

    def all_records(self) -> List[CatalogRecord]:
        return list(self._snapshot.records)

    def records_in_category(self, category: str) -> List[CatalogRecord]:
        return list(self._snapshot.groups.get(category, []))

    def records_matching(self, filter_name: str) -> List[CatalogRecord]:
        if filter_name == ALL_CATEGORIES:
            return self.all_records()
        return self.records_in_category(filter_name)

    def all_categories(self) -> List[str]:
        names = sorted(name for name in self._snapshot.groups if name != ALL_CATEGORIES)
        return [ALL_CATEGORIES] + names

    def record_by_id(self, record_id: str) -> Optional[CatalogRecord]:
        idx = self._snapshot.positions.get(record_id)
        if idx is None:
            return None
        return self._snapshot.records[idx]

    def record_at(self, index: int) -> Optional[CatalogRecord]:
        records = self._snapshot.records
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(records):
            return records[index]
        return None

    def index_of(self, record_id: str) -> Optional[int]:
        return self._snapshot.positions.get(record_id)

    def first(self) -> Optional[CatalogRecord]:
        return self.record_at(0)

    # ----------------------- diffing -----------------------
    def diff(self, previous: Sequence[CatalogRecord]) -> str:
        """JSON patch from ``previous`` ids to the current catalog ids."""
        before = [record.id for record in previous]
        after = [record.id for record in self._snapshot.records]
        return jsonpatch.make_patch(before, after).to_string()
