from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from .config import (
    ALIASES,
    ANALYSIS_OPTIONS,
    GZIP_OPTIONS,
    IMAGE_COMPRESSION_OPTIONS,
    MINIFY_OPTIONS,
    PRERENDER_OPTIONS,
    PURGE_OPTIONS,
    SPLIT_CHUNK_GROUPS,
    SPRITE_OPTIONS,
    UPLOAD_OPTIONS,
    BuildOptions,
)

Mode = Literal["development", "production"]

# Transforms whose failures are logged and skipped instead of aborting the build.
BEST_EFFORT = frozenset({"image-compression", "bundle-analysis"})


@dataclass(frozen=True)
class TransformDescriptor:
    name: str
    options: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def best_effort(self) -> bool:
        return self.name in BEST_EFFORT


@dataclass(frozen=True)
class AssemblyInputs:
    mode: Mode
    repack_needed: bool
    analyze: bool


@dataclass(frozen=True)
class _Row:
    name: str
    when: Callable[[AssemblyInputs], bool]
    options: Callable[[BuildOptions], dict[str, Any]]


def _always(_: AssemblyInputs) -> bool:
    return True


def _production(i: AssemblyInputs) -> bool:
    return i.mode == "production"


def _repack(i: AssemblyInputs) -> bool:
    return i.repack_needed


def _analyze(i: AssemblyInputs) -> bool:
    return i.analyze


def _const(value: Any) -> Callable[[BuildOptions], dict[str, Any]]:
    return lambda _opts: copy.deepcopy(value)


def _alias_options(opts: BuildOptions) -> dict[str, Any]:
    return {"aliases": {k: str(opts.resolve(v)) for k, v in ALIASES.items()}}


def sprite_options(opts: BuildOptions) -> dict[str, Any]:
    out = dict(SPRITE_OPTIONS)
    for key in ("icon_dir", "image_path", "stylesheet_path"):
        out[key] = str(opts.resolve(SPRITE_OPTIONS[key]))
    out["manifest_path"] = str(opts.manifest_path)
    return out


def _split_options(_opts: BuildOptions) -> dict[str, Any]:
    return {"groups": copy.deepcopy(SPLIT_CHUNK_GROUPS)}


# Evaluated top to bottom; order is the execution order.
PIPELINE_TABLE: tuple[_Row, ...] = (
    _Row("aliases", _always, _alias_options),
    _Row("image-compression", _always, _const(IMAGE_COMPRESSION_OPTIONS)),
    _Row("sprites", _repack, sprite_options),
    _Row("purge-css", _production, _const(PURGE_OPTIONS)),
    _Row("minify", _production, _const(MINIFY_OPTIONS)),
    _Row("split-chunks", _production, _split_options),
    _Row("gzip", _production, _const(GZIP_OPTIONS)),
    _Row("prerender", _production, _const(PRERENDER_OPTIONS)),
    _Row("upload", _production, _const(UPLOAD_OPTIONS)),
    _Row("bundle-analysis", _analyze, _const(ANALYSIS_OPTIONS)),
)


def assemble_pipeline(
    *,
    mode: Mode,
    repack_needed: bool,
    analyze: bool,
    options: BuildOptions | None = None,
) -> tuple[TransformDescriptor, ...]:
    """Pure mapping from build inputs to the ordered transforms to run."""
    if mode not in ("development", "production"):
        raise ValueError(f"Unknown build mode: {mode!r}")
    opts = options or BuildOptions(mode=mode, analyze=analyze)
    inputs = AssemblyInputs(mode=mode, repack_needed=repack_needed, analyze=analyze)
    return tuple(TransformDescriptor(row.name, row.options(opts)) for row in PIPELINE_TABLE if row.when(inputs))


def pipeline_names(pipeline: tuple[TransformDescriptor, ...]) -> list[str]:
    return [d.name for d in pipeline]
