"""Incremental sprite sheet: manifest, change detection, layout and stylesheet."""

from .detector import icon_keys, list_icon_paths, needs_repack
from .layout import pack_icons
from .manifest import Manifest, ManifestStore
from .models import Composite, IconFile, LayoutEntry, SpriteSheet, manifest_key, normalize_icon_name
from .regenerate import SpriteTargets, regenerate_sprites
from .stylesheet import generate_stylesheet

__all__ = [
    "Composite",
    "IconFile",
    "LayoutEntry",
    "Manifest",
    "ManifestStore",
    "SpriteSheet",
    "SpriteTargets",
    "generate_stylesheet",
    "icon_keys",
    "list_icon_paths",
    "manifest_key",
    "needs_repack",
    "normalize_icon_name",
    "pack_icons",
    "regenerate_sprites",
]
