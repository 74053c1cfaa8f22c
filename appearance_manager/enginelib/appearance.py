"""Appearance variants and the single decoder for their ``type`` discriminator."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

WHITE = "#FFFFFF"
BLACK = "#000000"


@dataclass(frozen=True)
class Solid:
    color: str
    kind = "solid"

    @property
    def colors(self) -> Tuple[str, ...]:
        return (self.color,)


@dataclass(frozen=True)
class LinearGradient:
    colors: Tuple[str, ...]
    kind = "linearGradient"


@dataclass(frozen=True)
class RadialGradient:
    colors: Tuple[str, ...]
    kind = "radial"


@dataclass(frozen=True)
class ImageReference:
    name: str
    kind = "image"

    @property
    def colors(self) -> Tuple[str, ...]:
        return ()


Appearance = Union[Solid, LinearGradient, RadialGradient, ImageReference]

# Discriminators are case-sensitive. "linear" comes from the theme files,
# "meshGradient" from the pencil files where it is drawn radially.
_GRADIENTS = {
    "linearGradient": LinearGradient,
    "linear": LinearGradient,
    "radial": RadialGradient,
    "radialGradient": RadialGradient,
    "meshGradient": RadialGradient,
}


def _color_list(payload: Mapping[str, Any], key: str) -> List[str]:
    value = payload.get(key)
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(entry) for entry in value if entry]
    return []


def decode_appearance(
    payload: Optional[Mapping[str, Any]],
    colors_key: str = "colors",
    fallback: str = WHITE,
) -> Appearance:
    """Resolve ``type`` plus ``colors``/``image`` into one appearance variant.

    Anything that does not form a complete gradient or image, including a
    missing or unknown ``type``, takes the default branch: ``Solid`` over the
    first available color, or ``fallback`` when there is none.
    """
    payload = payload or {}
    kind = payload.get("type")
    colors = _color_list(payload, colors_key)

    gradient = _GRADIENTS.get(kind) if isinstance(kind, str) else None
    if gradient is not None and colors:
        return gradient(tuple(colors))
    if kind == "image":
        name = payload.get("image")
        if isinstance(name, str) and name:
            return ImageReference(name)
    return Solid(colors[0] if colors else fallback)


def encode_appearance(appearance: Appearance) -> Dict[str, Any]:
    if isinstance(appearance, ImageReference):
        return {"type": appearance.kind, "image": appearance.name}
    return {"type": appearance.kind, "colors": list(appearance.colors)}
