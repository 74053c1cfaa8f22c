"""Persisted selection of the active theme or pencil."""
from __future__ import annotations

import logging
from typing import Any, Optional

from .catalog_store import CatalogStore
from .errors import EmptyCatalog, SelectionOutOfRange
from .records import CatalogRecord
from .state_store import KeyValueStore

logger = logging.getLogger(__name__)


class SelectionManager:
    """Own one persisted selection value and resolve it against a store.

    The active record is never cached: ``current_record`` looks the persisted
    value up in the store's current catalog on every access. After calling
    ``store.load()`` again, callers must run ``refresh_after_catalog_change()``
    so an invalidated value is rewritten to the canonical default.
    """

    key: str = ""
    default: Any = None

    def __init__(
        self,
        store: CatalogStore,
        state: KeyValueStore,
        key: Optional[str] = None,
        default: Any = None,
    ):
        self.store = store
        self.state = state
        if key is not None:
            self.key = key
        if default is not None:
            self.default = default
        self._value = state.get(self.key, self.default)
        self._resolve()

    # ----------------------- addressing -----------------------
    def _check(self, value: Any) -> CatalogRecord:
        raise NotImplementedError

    def _coerce(self, target: Any) -> Any:
        return target

    def _lookup(self, value: Any) -> Optional[CatalogRecord]:
        try:
            return self._check(value)
        except (SelectionOutOfRange, EmptyCatalog):
            return None

    # ----------------------- state -----------------------
    @property
    def value(self) -> Any:
        return self._value

    @property
    def current_record(self) -> Optional[CatalogRecord]:
        record = self._lookup(self._value)
        if record is None:
            return self._fallback_record()
        return record

    def _fallback_record(self) -> Optional[CatalogRecord]:
        record = self._lookup(self.default)
        if record is None:
            return self.store.first()
        return record

    def _canonical_value(self) -> Any:
        return self.default

    def _persist(self, value: Any) -> None:
        self.state.set(self.key, value)
        self._value = value

    def _resolve(self) -> bool:
        try:
            self._check(self._value)
        except (SelectionOutOfRange, EmptyCatalog) as error:
            canonical = self._canonical_value()
            logger.warning("Resetting %s to %r: %s", self.key, canonical, error)
            self._persist(canonical)
            return False
        return True

    # ----------------------- operations -----------------------
    def select(self, target: Any) -> bool:
        """Persist ``target`` if it addresses a record; otherwise change nothing."""
        value = self._coerce(target)
        try:
            record = self._check(value)
        except (SelectionOutOfRange, EmptyCatalog) as error:
            logger.info("Ignoring %s selection: %s", self.store.kind, error)
            return False
        self._persist(value)
        logger.info("Active %s changed to %s", self.store.kind, record.display_name)
        return True

    def reset_to_default(self) -> Optional[CatalogRecord]:
        self._persist(self._canonical_value())
        record = self.current_record
        logger.info(
            "%s reset to %s",
            self.store.kind.capitalize(),
            record.display_name if record else "default",
        )
        return record

    def refresh_after_catalog_change(self) -> bool:
        return self._resolve()


class ThemeSelection(SelectionManager):
    """Index-addressed selection with wrap-around navigation."""

    key = "selectedThemeIndex"
    default = 0

    def _check(self, value: Any) -> CatalogRecord:
        size = len(self.store)
        if size == 0:
            raise EmptyCatalog(self.store.kind)
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < size:
            raise SelectionOutOfRange(value, size)
        return self.store.record_at(value)

    def _coerce(self, target: Any) -> Any:
        if isinstance(target, CatalogRecord):
            return self.store.index_of(target.id)
        return target

    def _canonical_value(self) -> int:
        # a configured default outside the catalog degrades to the first index
        if self._lookup(self.default) is None:
            return 0
        return self.default

    @property
    def selected_index(self) -> int:
        return self._value

    def next(self) -> bool:
        size = len(self.store)
        if size == 0:
            return False
        return self.select((self._value + 1) % size)


class PencilSelection(SelectionManager):
    """Id-addressed selection."""

    key = "selectedPencilID"
    default = "pencil_white"

    def _check(self, value: Any) -> CatalogRecord:
        size = len(self.store)
        if size == 0:
            raise EmptyCatalog(self.store.kind)
        record = self.store.record_by_id(value) if isinstance(value, str) else None
        if record is None:
            raise SelectionOutOfRange(value, size)
        return record

    def _coerce(self, target: Any) -> Any:
        if isinstance(target, CatalogRecord):
            return target.id
        return target

    @property
    def selected_id(self) -> str:
        return self._value
