from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from ..util import atomic_write_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Manifest:
    """Icons packed into the current composite; `loaded` is False when the file was absent or unreadable."""

    keys: frozenset[str]
    loaded: bool = True

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def __len__(self) -> int:
        return len(self.keys)

    @classmethod
    def absent(cls) -> "Manifest":
        return cls(keys=frozenset(), loaded=False)

    @classmethod
    def of(cls, keys: Iterable[str]) -> "Manifest":
        return cls(keys=frozenset(keys), loaded=True)


class ManifestStore:
    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Manifest:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Sprite manifest %s not found; assuming nothing is packed", self.path)
            return Manifest.absent()
        except OSError as e:
            logger.warning("Sprite manifest %s unreadable (%s); assuming nothing is packed", self.path, e)
            return Manifest.absent()

        try:
            obj = json.loads(raw)
        except ValueError as e:
            logger.warning("Sprite manifest %s is not valid JSON (%s); assuming nothing is packed", self.path, e)
            return Manifest.absent()
        if not isinstance(obj, dict):
            logger.warning("Sprite manifest %s is not a JSON object; assuming nothing is packed", self.path)
            return Manifest.absent()

        return Manifest.of(str(k) for k, v in obj.items() if v)

    def save(self, manifest: Manifest) -> None:
        body = {key: True for key in sorted(manifest.keys)}
        atomic_write_text(self.path, json.dumps(body, indent=2) + "\n")
        logger.info("Wrote sprite manifest %s (%d icons)", self.path, len(body))
