from __future__ import annotations

import logging
from typing import Mapping

from .assembler import TransformDescriptor, assemble_pipeline
from .config import SPRITE_OPTIONS, BuildOptions
from .context import BuildContext
from .errors import TransformError
from .sprites import ManifestStore, needs_repack
from .transforms import REGISTRY, TransformFn

logger = logging.getLogger(__name__)


def plan_build(options: BuildOptions) -> tuple[TransformDescriptor, ...]:
    """Read the sprite manifest, check the icon directory, and assemble the pipeline."""
    manifest = ManifestStore(options.manifest_path).load()
    icon_dir = options.resolve(SPRITE_OPTIONS["icon_dir"])
    repack = needs_repack(icon_dir, manifest, repack_on_removal=options.repack_on_removal)
    return assemble_pipeline(mode=options.mode, repack_needed=repack, analyze=options.analyze, options=options)


def run_pipeline(
    pipeline: tuple[TransformDescriptor, ...],
    ctx: BuildContext,
    *,
    registry: Mapping[str, TransformFn] = REGISTRY,
) -> BuildContext:
    """
    Run each transform in order.

    A failing best-effort transform is logged and skipped; any other failure is
    raised as TransformError and stops the build.
    """
    for desc in pipeline:
        fn = registry.get(desc.name)
        if fn is None:
            raise TransformError(desc.name, KeyError(f"no transform registered for {desc.name!r}"))
        logger.info("Running %s", desc.name)
        try:
            fn(ctx, dict(desc.options))
        except Exception as e:
            if desc.best_effort:
                logger.warning("Best-effort transform %s failed: %s", desc.name, e)
                ctx.skipped.append(desc.name)
                continue
            logger.error("Transform %s failed: %s", desc.name, e)
            raise TransformError(desc.name, e) from e
        ctx.completed.append(desc.name)
    return ctx


def build(options: BuildOptions, **capabilities) -> BuildContext:
    pipeline = plan_build(options)
    ctx = BuildContext(options=options, **capabilities)
    return run_pipeline(pipeline, ctx)
