"""Catalog loader: reads theme or pencil sources and decodes them into records."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml
from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from .errors import DecodeError, SourceNotFound
from .records import RECORD_TYPES, CatalogRecord

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".json", ".yaml", ".yml")
SCHEMA_DIR = Path(__file__).resolve().parents[1] / "schemas"


@dataclass
class CatalogLoadResult:
    records: List[CatalogRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    dedupe_hits: int = 0
    loaded_sources: List[str] = field(default_factory=list)
    skipped_sources: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def count(self) -> int:
        return len(self.records)

    def summary(self) -> Dict[str, object]:
        return {
            "ok": self.ok,
            "count": self.count,
            "errors": list(self.errors),
            "dedupe_hits": self.dedupe_hits,
            "loaded_sources": list(self.loaded_sources),
            "skipped_sources": list(self.skipped_sources),
        }


def load_schema(kind: str, schema_dir: Optional[Path] = None) -> Dict[str, Any]:
    path = Path(schema_dir or SCHEMA_DIR) / f"{kind}.schema.json"
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


class CatalogLoader:
    """Decode a fixed, ordered list of sources into one record sequence.

    Holds no state between calls. A source that cannot be found, read,
    parsed or validated is logged and contributes nothing; the remaining
    sources still merge. Duplicate ids keep their first occurrence.
    """

    def __init__(
        self,
        kind: str,
        data_dir: Path | str,
        sources: Sequence[str],
        schema: Optional[Dict[str, Any]] = None,
    ):
        if kind not in RECORD_TYPES:
            raise ValueError(f"Unknown catalog kind: {kind}")
        self.kind = kind
        self.record_type = RECORD_TYPES[kind]
        self.data_dir = Path(data_dir)
        self.sources = list(sources)
        self.validator = Draft7Validator(schema if schema is not None else load_schema(kind))

    # ----------------------- public api -----------------------
    def load(self) -> CatalogLoadResult:
        result = CatalogLoadResult()
        merged: List[CatalogRecord] = []
        for source in self.sources:
            try:
                records = self.load_source(source)
            except (SourceNotFound, DecodeError) as error:
                logger.warning("Skipping %s source: %s", self.kind, error)
                result.errors.append(str(error))
                result.skipped_sources.append(source)
                continue
            logger.info("Loaded %d %s records from %s", len(records), self.kind, source)
            result.loaded_sources.append(source)
            merged.extend(records)
        result.records, result.dedupe_hits = self._dedupe(merged)
        return result

    def load_source(self, source: str) -> List[CatalogRecord]:
        path = self.resolve(source)
        payload = self._read(source, path)
        if isinstance(payload, dict):
            payload = [payload]
        if not isinstance(payload, list):
            raise DecodeError(source, f"expected a list of records, got {type(payload).__name__}")
        return [self._decode(source, idx, item) for idx, item in enumerate(payload)]

    # ----------------------- loader helpers -----------------------
    def resolve(self, source: str) -> Path:
        candidate = Path(source)
        if candidate.suffix.lower() in SOURCE_SUFFIXES:
            if not candidate.is_absolute():
                candidate = self.data_dir / candidate
            if candidate.is_file():
                return candidate
            raise SourceNotFound(source, [candidate])
        searched = [self.data_dir / f"{source}{suffix}" for suffix in SOURCE_SUFFIXES]
        for path in searched:
            if path.is_file():
                return path
        raise SourceNotFound(source, searched)

    def _read(self, source: str, path: Path) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as handle:
                if path.suffix.lower() == ".json":
                    return json.load(handle)
                return yaml.safe_load(handle) or []
        except FileNotFoundError as exc:
            raise SourceNotFound(source, [path]) from exc
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
            raise DecodeError(source, str(exc)) from exc

    def _decode(self, source: str, idx: int, item: Any) -> CatalogRecord:
        if not isinstance(item, dict):
            raise DecodeError(source, f"record {idx} is not an object")
        error = best_match(self.validator.iter_errors(item))
        if error is not None:
            raise DecodeError(source, f"record {idx}: {error.message}")
        return self.record_type.from_mapping(item)

    # ----------------------- dedupe -----------------------
    def _dedupe(self, records: List[CatalogRecord]):
        seen: Dict[str, CatalogRecord] = {}
        unique: List[CatalogRecord] = []
        dedupe_hits = 0
        for record in records:
            if record.id in seen:
                dedupe_hits += 1
                logger.warning(
                    "Duplicate %s id '%s' dropped, keeping '%s'",
                    self.kind,
                    record.id,
                    seen[record.id].display_name,
                )
                continue
            seen[record.id] = record
            unique.append(record)
        return unique, dedupe_hits
