"""Build transforms, keyed by the names the pipeline assembler emits."""

from typing import Any, Callable

from ..context import BuildContext
from . import aliases, analysis, chunks, gzip_assets, images, minify, prerender, purge, sprites, upload

TransformFn = Callable[[BuildContext, dict[str, Any]], None]

REGISTRY: dict[str, TransformFn] = {
    "aliases": aliases.run,
    "image-compression": images.run,
    "sprites": sprites.run,
    "purge-css": purge.run,
    "minify": minify.run,
    "split-chunks": chunks.run,
    "gzip": gzip_assets.run,
    "prerender": prerender.run,
    "upload": upload.run,
    "bundle-analysis": analysis.run,
}

__all__ = ["REGISTRY", "TransformFn"]
