from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image

from ..context import BuildContext
from ..util import atomic_write_bytes, iter_files

logger = logging.getLogger(__name__)

RASTER_FORMATS = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".gif": "GIF",
    ".webp": "WEBP",
}


@dataclass(frozen=True)
class CompressionResult:
    path: Path
    before: int
    after: int

    @property
    def saved(self) -> int:
        return max(self.before - self.after, 0)


def parse_quality_range(value: Any) -> tuple[int, int]:
    """Accept `"65-90"` or `(65, 90)` and return the bounds clamped to 0..100."""
    if isinstance(value, str):
        lo_s, _, hi_s = value.partition("-")
        lo, hi = int(lo_s), int(hi_s or lo_s)
    else:
        lo, hi = (int(v) for v in value)
    lo, hi = max(0, min(lo, 100)), max(0, min(hi, 100))
    if lo > hi:
        raise ValueError(f"Invalid quality range: {value!r}")
    return lo, hi


def quality_to_mse(quality: int) -> float:
    """Largest mean squared error (channels scaled to 0..1) a quality score tolerates."""
    if quality <= 0:
        return float("inf")
    if quality >= 100:
        return 0.0
    low_fudge = max(0.0, 0.016 / (0.001 + quality) - 0.001)
    return low_fudge + 2.5 / (210.0 + quality) ** 1.2 * (100.1 - quality) / 100.0


def quantization_mse(before: Image.Image, after: Image.Image) -> float:
    a = np.asarray(before.convert("RGBA"), dtype=np.float64) / 255.0
    b = np.asarray(after.convert("RGBA"), dtype=np.float64) / 255.0
    return float(np.mean((a - b) ** 2))


def _quantize_png(im: Image.Image, cfg: dict[str, Any], optimize: bool) -> bytes | None:
    colors = int(cfg.get("colors", 256))
    src = im if im.mode in ("RGB", "RGBA") else im.convert("RGBA")
    quantized = src.quantize(colors=colors, method=Image.Quantize.FASTOCTREE)
    if cfg.get("quality") is not None:
        min_quality, _max_quality = parse_quality_range(cfg["quality"])
        if quantization_mse(src, quantized) > quality_to_mse(min_quality):
            logger.debug("Quantized PNG falls below quality %d; keeping original", min_quality)
            return None
    buf = BytesIO()
    quantized.save(buf, format="PNG", optimize=optimize)
    return buf.getvalue()


def _encode(im: Image.Image, fmt: str, options: dict[str, Any]) -> bytes | None:
    buf = BytesIO()
    if fmt == "JPEG":
        cfg = options.get("jpeg") or {}
        im.convert("RGB").save(
            buf,
            format="JPEG",
            quality=int(cfg.get("quality", 65)),
            progressive=bool(cfg.get("progressive", True)),
            optimize=True,
        )
    elif fmt == "PNG":
        cfg = options.get("png") or {}
        if not cfg.get("enabled", True):
            return None
        optimize = bool((options.get("optipng") or {}).get("enabled", False))
        return _quantize_png(im, cfg, optimize)
    elif fmt == "GIF":
        cfg = options.get("gif") or {}
        im.save(buf, format="GIF", interlace=bool(cfg.get("interlaced", False)), save_all=getattr(im, "is_animated", False))
    elif fmt == "WEBP":
        cfg = options.get("webp") or {}
        im.save(buf, format="WEBP", quality=int(cfg.get("quality", 75)))
    else:
        return None
    return buf.getvalue()


def compress_image(path: Path, options: dict[str, Any]) -> CompressionResult:
    """Recompress one raster file in place; the original is kept when the result is not smaller."""
    fmt = RASTER_FORMATS[path.suffix.lower()]
    original = path.read_bytes()
    with Image.open(BytesIO(original)) as im:
        im.load()
        encoded = _encode(im, fmt, options)
    if encoded is None or len(encoded) >= len(original):
        return CompressionResult(path=path, before=len(original), after=len(original))
    atomic_write_bytes(path, encoded)
    return CompressionResult(path=path, before=len(original), after=len(encoded))


def _safe_compress(path: Path, options: dict[str, Any]) -> CompressionResult | None:
    try:
        return compress_image(path, options)
    except Exception as e:  # noqa: BLE001
        logger.warning("Skipping image %s: %s", path, e)
        return None


def compress_images(paths: list[Path], options: dict[str, Any], *, max_workers: int = 4) -> list[CompressionResult]:
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = list(pool.map(lambda p: _safe_compress(p, options), paths))
    return [r for r in results if r is not None]


def run(ctx: BuildContext, options: dict[str, Any]) -> None:
    paths = [p for p in iter_files(ctx.output_path) if p.suffix.lower() in RASTER_FORMATS]
    if not paths:
        logger.debug("No raster assets under %s", ctx.output_path)
        return
    results = compress_images(paths, options)
    saved = sum(r.saved for r in results)
    logger.info("Compressed %d/%d images, saved %d bytes", len(results), len(paths), saved)
