"""Theme and pencil catalogs with persisted user selection."""

from .service import AppearanceConfig, AppearanceService, load_config

__all__ = ["AppearanceConfig", "AppearanceService", "load_config"]
