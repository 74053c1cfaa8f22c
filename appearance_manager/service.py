"""High-level wiring of the theme and pencil subsystems."""
from __future__ import annotations

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional

import yaml
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .enginelib.catalog_loader import SCHEMA_DIR, CatalogLoader, load_schema
from .enginelib.catalog_store import CatalogStore
from .enginelib.profile import ProfileManager
from .enginelib.selection import PencilSelection, ThemeSelection
from .enginelib.state_store import JsonStateStore, KeyValueStore

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
THEME_SOURCES = ["slaykenThemes", "characterThemes", "seasonalThemes"]
PENCIL_SOURCES = ["pencilData"]
EVENT_LIMIT = 200


@dataclass
class AppearanceConfig:
    data_dir: Path
    state_file: Path
    schema_dir: Path = SCHEMA_DIR
    theme_sources: List[str] = field(default_factory=lambda: list(THEME_SOURCES))
    pencil_sources: List[str] = field(default_factory=lambda: list(PENCIL_SOURCES))
    default_theme_index: int = 0
    default_pencil_id: str = "pencil_white"
    watch: bool = False

    @staticmethod
    def from_mapping(
        mapping: Dict[str, Any],
        base_dir: Optional[Path] = None,
    ) -> "AppearanceConfig":
        def resolve(value: str) -> Path:
            path = Path(value)
            if not path.is_absolute() and base_dir is not None:
                path = base_dir / path
            return path

        return AppearanceConfig(
            data_dir=resolve(mapping.get("data_dir", str(DATA_DIR))),
            state_file=resolve(mapping["state_file"]),
            schema_dir=resolve(mapping.get("schema_dir", str(SCHEMA_DIR))),
            theme_sources=[str(name) for name in mapping.get("theme_sources", THEME_SOURCES)],
            pencil_sources=[str(name) for name in mapping.get("pencil_sources", PENCIL_SOURCES)],
            default_theme_index=int(mapping.get("default_theme_index", 0)),
            default_pencil_id=str(mapping.get("default_pencil_id", "pencil_white")),
            watch=bool(mapping.get("watch", False)),
        )

    @classmethod
    def bundled(cls, state_file: Path | str) -> "AppearanceConfig":
        return cls(data_dir=DATA_DIR, state_file=Path(state_file))


def load_config(path: Path) -> AppearanceConfig:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return AppearanceConfig.from_mapping(data, path.parent)


class AppearanceService:
    """Build both subsystems in order and serialize every mutation."""

    def __init__(self, config: AppearanceConfig, state: Optional[KeyValueStore] = None):
        self.config = config
        self.state = state if state is not None else JsonStateStore(config.state_file)
        self._lock = threading.RLock()
        self.recent_events: Deque[Dict[str, Any]] = deque(maxlen=EVENT_LIMIT)

        self.themes = CatalogStore(
            CatalogLoader(
                "theme",
                config.data_dir,
                config.theme_sources,
                load_schema("theme", config.schema_dir),
            )
        )
        self.pencils = CatalogStore(
            CatalogLoader(
                "pencil",
                config.data_dir,
                config.pencil_sources,
                load_schema("pencil", config.schema_dir),
            )
        )
        self._record_event("load", {"theme": self.themes.load().summary(), "pencil": self.pencils.load().summary()})

        self.theme_selection = ThemeSelection(self.themes, self.state, default=config.default_theme_index)
        self.pencil_selection = PencilSelection(self.pencils, self.state, default=config.default_pencil_id)
        self.profile = ProfileManager(self.state)

        self._watch_thread: Optional[threading.Thread] = None
        self._watch_handler: Optional[ReloadHandler] = None
        self._watch_stop = threading.Event()
        if config.watch:
            self.start_watcher()

    @classmethod
    def from_config_file(cls, config_path: Path, state: Optional[KeyValueStore] = None) -> "AppearanceService":
        return cls(load_config(config_path), state=state)

    # ----------------------- catalog ops -----------------------
    def reload(self) -> Dict[str, Any]:
        """Reload both catalogs and re-validate both selections."""
        with self._lock:
            payload: Dict[str, Any] = {}
            for store, selection in (
                (self.themes, self.theme_selection),
                (self.pencils, self.pencil_selection),
            ):
                previous = store.all_records()
                result = store.load()
                still_valid = selection.refresh_after_catalog_change()
                payload[store.kind] = dict(
                    result.summary(),
                    patch=store.diff(previous),
                    selection_kept=still_valid,
                )
            self._record_event("reload", payload)
        return payload

    # ----------------------- selection ops -----------------------
    def select_theme(self, target: Any) -> bool:
        with self._lock:
            ok = self.theme_selection.select(target)
            self._record_event("theme", {"target": _describe(target), "ok": ok})
        return ok

    def next_theme(self) -> bool:
        with self._lock:
            ok = self.theme_selection.next()
            self._record_event("theme_next", {"index": self.theme_selection.selected_index, "ok": ok})
        return ok

    def select_pencil(self, target: Any) -> bool:
        with self._lock:
            ok = self.pencil_selection.select(target)
            self._record_event("pencil", {"target": _describe(target), "ok": ok})
        return ok

    def reset_theme(self):
        with self._lock:
            record = self.theme_selection.reset_to_default()
            self._record_event("theme_reset", {"index": self.theme_selection.selected_index})
        return record

    def reset_pencil(self):
        with self._lock:
            record = self.pencil_selection.reset_to_default()
            self._record_event("pencil_reset", {"id": self.pencil_selection.selected_id})
        return record

    @property
    def current_theme(self):
        return self.theme_selection.current_record

    @property
    def current_pencil(self):
        return self.pencil_selection.current_record

    # ----------------------- status & logs -----------------------
    def status_payload(self) -> Dict[str, Any]:
        theme = self.current_theme
        pencil = self.current_pencil
        return {
            "theme": {
                "selected_index": self.theme_selection.selected_index,
                "current": theme.to_dict() if theme else None,
                "count": len(self.themes),
                "categories": self.themes.all_categories(),
            },
            "pencil": {
                "selected_id": self.pencil_selection.selected_id,
                "current": pencil.to_dict() if pencil else None,
                "count": len(self.pencils),
                "categories": self.pencils.all_categories(),
            },
            "profile": {
                "name": self.profile.name,
                "appearance": self.profile.appearance_mode.value,
            },
            "config": {
                "data_dir": str(self.config.data_dir),
                "state_file": str(self.config.state_file),
                "theme_sources": list(self.config.theme_sources),
                "pencil_sources": list(self.config.pencil_sources),
            },
        }

    def recent_logs(self, limit: int = 50) -> List[Dict[str, Any]]:
        return list(self.recent_events)[-limit:]

    def _record_event(self, event_type: str, payload: Dict[str, Any]):
        event = {"type": event_type, "timestamp": time.time(), "payload": payload}
        self.recent_events.append(event)

    # ----------------------- watcher -----------------------
    def start_watcher(
        self,
        debounce_seconds: float = 0.5,
        observer_factory=None,
        timer_factory=None,
    ):
        if self._watch_thread and self._watch_thread.is_alive():
            return

        self._watch_stop.clear()
        self.config.data_dir.mkdir(parents=True, exist_ok=True)
        handler = ReloadHandler(self, debounce_seconds, timer_factory)
        self._watch_handler = handler

        def loop():
            observer_cls = observer_factory or Observer
            observer = observer_cls()
            observer.schedule(handler, str(self.config.data_dir), recursive=True)
            observer.start()
            try:
                while not self._watch_stop.is_set():
                    time.sleep(0.1)
            finally:
                observer.stop()
                observer.join()

        self._watch_thread = threading.Thread(target=loop, daemon=True)
        self._watch_thread.start()
        self._record_event("watch_start", {"data_dir": str(self.config.data_dir)})

    def stop_watcher(self):
        if not self._watch_thread:
            return
        self._watch_stop.set()
        self._watch_thread.join(timeout=2)
        if self._watch_handler:
            self._watch_handler.cancel()
            self._watch_handler = None
        self._record_event("watch_stop", {})


def _describe(target: Any) -> Any:
    record_id = getattr(target, "id", None)
    if record_id is not None:
        return record_id
    return target


class ReloadHandler(FileSystemEventHandler):
    """Debounce file events in the data directory into one ``reload()``."""

    def __init__(self, service: AppearanceService, debounce_seconds: float, timer_factory=None):
        self.service = service
        self.debounce_seconds = debounce_seconds
        self.timer_factory = timer_factory or threading.Timer
        self._timer: Optional[threading.Timer] = None

    def on_any_event(self, event):  # type: ignore[override]
        if event.is_directory:
            return
        if self._timer:
            self._timer.cancel()
        self._timer = self.timer_factory(self.debounce_seconds, self._run)
        self._timer.start()

    def cancel(self):
        if self._timer:
            self._timer.cancel()
            self._timer = None

    def _run(self):
        try:
            self.service.reload()
        except Exception as error:  # pragma: no cover - logged for troubleshooting
            logger.exception("Catalog reload after file change failed")
            self.service._record_event("watch_error", {"error": str(error)})
