from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image

ICON_EXTENSION = ".png"


def normalize_icon_name(filename: str) -> str:
    """`Icon_One.PNG` -> `icon-one`."""
    stem = Path(filename).stem if Path(filename).suffix.lower() == ICON_EXTENSION else filename
    return stem.lower().replace("_", "-")


def manifest_key(filename: str) -> str:
    return normalize_icon_name(filename) + ICON_EXTENSION


def is_icon_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() == ICON_EXTENSION


@dataclass(frozen=True)
class IconFile:
    name: str
    path: Path
    data: bytes = field(repr=False)

    @property
    def key(self) -> str:
        return self.name + ICON_EXTENSION

    @classmethod
    def read(cls, path: Path) -> "IconFile":
        return cls(name=normalize_icon_name(path.name), path=path, data=path.read_bytes())


@dataclass(frozen=True)
class Composite:
    image_ref: str
    width: int
    height: int


@dataclass(frozen=True)
class LayoutEntry:
    name: str
    composite: Composite
    width: int
    height: int
    x: int
    y: int

    def overlaps(self, other: "LayoutEntry") -> bool:
        return (
            self.x < other.x + other.width
            and other.x < self.x + self.width
            and self.y < other.y + other.height
            and other.y < self.y + self.height
        )


@dataclass(frozen=True)
class SpriteSheet:
    image: Image.Image
    composite: Composite
    entries: tuple[LayoutEntry, ...]

    @property
    def keys(self) -> list[str]:
        return [e.name + ICON_EXTENSION for e in self.entries]
