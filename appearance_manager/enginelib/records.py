"""Typed catalog records for themes and pencils."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .appearance import BLACK, WHITE, Appearance, Solid, decode_appearance, encode_appearance

UNCATEGORIZED = "Uncategorized"
ALL_CATEGORIES = "All"


def _display_name(item: Mapping[str, Any]) -> str:
    for key in ("title", "displayName", "name"):
        value = item.get(key)
        if isinstance(value, str):
            return value
    return ""


def _optional(item: Mapping[str, Any], key: str) -> Optional[str]:
    value = item.get(key)
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class CatalogRecord:
    id: str
    display_name: str
    appearance: Appearance
    category: Optional[str] = None
    category_icon: Optional[str] = None
    category_icon_color: Optional[str] = None

    @property
    def resolved_category(self) -> str:
        if self.category is None or not self.category.strip():
            return UNCATEGORIZED
        # "All" is reserved for the pseudo-category that lists every record
        if self.category == ALL_CATEGORIES:
            return UNCATEGORIZED
        return self.category

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "category": self.resolved_category,
            "categoryIcon": self.category_icon,
            "categoryIconColor": self.category_icon_color,
            "appearance": encode_appearance(self.appearance),
        }


@dataclass(frozen=True)
class ThemeRecord(CatalogRecord):
    text_hex: str = WHITE
    button_background_hex: str = BLACK
    button_text_hex: str = WHITE
    accent_hex: str = WHITE
    overlay_image: Optional[str] = None

    @classmethod
    def from_mapping(cls, item: Mapping[str, Any]) -> "ThemeRecord":
        background = item.get("background")
        if isinstance(background, Mapping):
            appearance = decode_appearance(background)
        else:
            appearance = decode_appearance(item)
        return cls(
            id=str(item["id"]),
            display_name=_display_name(item),
            appearance=appearance,
            category=_optional(item, "category"),
            category_icon=_optional(item, "categoryIcon"),
            category_icon_color=_optional(item, "categoryIconColor"),
            text_hex=item.get("textHex", WHITE),
            button_background_hex=item.get("buttonBackgroundHex", BLACK),
            button_text_hex=item.get("buttonTextHex", WHITE),
            accent_hex=item.get("accentHex", WHITE),
            # a string "image" next to a nested background is the overlay
            overlay_image=_optional(item, "image") if isinstance(background, Mapping) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update(
            {
                "textHex": self.text_hex,
                "buttonBackgroundHex": self.button_background_hex,
                "buttonTextHex": self.button_text_hex,
                "accentHex": self.accent_hex,
                "overlayImage": self.overlay_image,
            }
        )
        return payload


@dataclass(frozen=True)
class PencilRecord(CatalogRecord):
    description: str = ""
    icon: Optional[str] = None
    colors: Tuple[str, ...] = ()
    input_field_appearance: Appearance = Solid(WHITE)

    @classmethod
    def from_mapping(cls, item: Mapping[str, Any]) -> "PencilRecord":
        appearance = decode_appearance(item, colors_key="pencilColor")
        colors = tuple(str(color) for color in item.get("pencilColor") or ())
        field_background = item.get("textFieldBackground")
        if isinstance(field_background, Mapping):
            input_field = decode_appearance(field_background, fallback=BLACK)
        else:
            input_field = Solid(colors[0] if colors else WHITE)
        return cls(
            id=str(item["id"]),
            display_name=_display_name(item),
            appearance=appearance,
            category=_optional(item, "category"),
            category_icon=_optional(item, "categoryIcon"),
            category_icon_color=_optional(item, "categoryIconColor"),
            description=str(item.get("description") or ""),
            icon=_optional(item, "icon"),
            colors=colors,
            input_field_appearance=input_field,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update(
            {
                "description": self.description,
                "icon": self.icon,
                "pencilColor": list(self.colors),
                "textFieldBackground": encode_appearance(self.input_field_appearance),
            }
        )
        return payload


RECORD_TYPES = {
    "theme": ThemeRecord,
    "pencil": PencilRecord,
}
