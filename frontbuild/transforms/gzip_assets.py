from __future__ import annotations

import gzip
import logging
import re
from pathlib import Path
from typing import Any

from ..context import BuildContext
from ..util import atomic_write_bytes, iter_files

logger = logging.getLogger(__name__)


def gzip_asset(path: Path, *, threshold: int, min_ratio: float) -> Path | None:
    """Write `<path>.gz` next to the original when it is large enough and compresses well."""
    body = path.read_bytes()
    if len(body) < threshold:
        return None
    compressed = gzip.compress(body, compresslevel=9, mtime=0)
    if len(compressed) / len(body) >= min_ratio:
        return None
    target = path.with_name(path.name + ".gz")
    atomic_write_bytes(target, compressed)
    return target


def run(ctx: BuildContext, options: dict[str, Any]) -> None:
    pattern = re.compile(options.get("test") or r".*", re.IGNORECASE)
    threshold = int(options.get("threshold", 10240))
    min_ratio = float(options.get("min_ratio", 0.8))
    emitted = 0
    for path in iter_files(ctx.output_path):
        if path.suffix == ".gz" or not pattern.search(path.name):
            continue
        if gzip_asset(path, threshold=threshold, min_ratio=min_ratio) is not None:
            emitted += 1
    logger.info("Emitted %d gzip asset(s)", emitted)
