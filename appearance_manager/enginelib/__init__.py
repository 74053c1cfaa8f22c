"""Engine layer modules for the appearance manager."""

from .appearance import (
    Appearance,
    ImageReference,
    LinearGradient,
    RadialGradient,
    Solid,
    decode_appearance,
    encode_appearance,
)
from .catalog_loader import CatalogLoader, CatalogLoadResult
from .catalog_store import CatalogStore
from .errors import AppearanceError, DecodeError, EmptyCatalog, SelectionOutOfRange, SourceNotFound
from .profile import AppAppearance, ProfileManager
from .records import ALL_CATEGORIES, UNCATEGORIZED, CatalogRecord, PencilRecord, ThemeRecord
from .selection import PencilSelection, SelectionManager, ThemeSelection
from .state_store import JsonStateStore, KeyValueStore, MemoryStateStore

__all__ = [
    "ALL_CATEGORIES",
    "UNCATEGORIZED",
    "AppAppearance",
    "Appearance",
    "AppearanceError",
    "CatalogLoadResult",
    "CatalogLoader",
    "CatalogRecord",
    "CatalogStore",
    "DecodeError",
    "EmptyCatalog",
    "ImageReference",
    "JsonStateStore",
    "KeyValueStore",
    "LinearGradient",
    "MemoryStateStore",
    "PencilRecord",
    "PencilSelection",
    "ProfileManager",
    "RadialGradient",
    "SelectionManager",
    "SelectionOutOfRange",
    "Solid",
    "SourceNotFound",
    "ThemeRecord",
    "ThemeSelection",
    "decode_appearance",
    "encode_appearance",
]
