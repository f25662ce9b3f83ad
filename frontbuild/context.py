from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .config import BuildOptions


@dataclass(frozen=True)
class UploadAsset:
    path: Path
    key: str
    content_type: str


class Renderer(Protocol):
    def render(self, route: str) -> str: ...


class Uploader(Protocol):
    def upload(self, assets: list[UploadAsset]) -> None: ...


@dataclass(frozen=True)
class ChunkModule:
    """A bundled module path (e.g. `/app/node_modules/element-ui/lib/index.js`) and whether it is loaded initially."""

    module_id: str
    initial: bool = True


@dataclass
class BuildContext:
    options: BuildOptions
    renderer: Renderer | None = None
    uploader: Uploader | None = None
    modules: list[ChunkModule] | None = None
    aliases: dict[str, str] = field(default_factory=dict)
    completed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def output_path(self) -> Path:
        return self.options.output_path
