"""Error kinds raised inside the engine and recovered before reaching callers."""
from __future__ import annotations


class AppearanceError(Exception):
    """Base class for engine errors."""


class SourceNotFound(AppearanceError):
    def __init__(self, source: str, searched=()):
        self.source = source
        self.searched = [str(path) for path in searched]
        super().__init__(f"Source '{source}' not found")


class DecodeError(AppearanceError):
    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to decode '{source}': {reason}")


class SelectionOutOfRange(AppearanceError):
    def __init__(self, value, size: int):
        self.value = value
        self.size = size
        super().__init__(f"Selection {value!r} does not address a record (catalog size {size})")


class EmptyCatalog(AppearanceError):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"{kind} catalog is empty")
