"""User profile and app appearance preferences."""
from __future__ import annotations

import logging
from enum import Enum

from .state_store import KeyValueStore

logger = logging.getLogger(__name__)


class AppAppearance(str, Enum):
    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"


class ProfileManager:
    NAME_KEY = "userName"
    APPEARANCE_KEY = "appAppearance"

    def __init__(self, state: KeyValueStore):
        self.state = state
        self.name: str = str(state.get(self.NAME_KEY, "") or "")

    def save(self) -> str:
        self.name = self.name.strip()
        self.state.set(self.NAME_KEY, self.name)
        return self.name

    def reset(self) -> None:
        self.name = ""
        self.state.set(self.NAME_KEY, "")

    @property
    def appearance_mode(self) -> AppAppearance:
        raw = self.state.get(self.APPEARANCE_KEY, AppAppearance.SYSTEM.value)
        try:
            return AppAppearance(raw)
        except ValueError:
            logger.warning("Unknown appearance mode %r, using system", raw)
            return AppAppearance.SYSTEM

    def set_appearance_mode(self, mode: AppAppearance | str) -> AppAppearance:
        resolved = AppAppearance(mode)
        self.state.set(self.APPEARANCE_KEY, resolved.value)
        return resolved
