from __future__ import annotations

import os
import tempfile
from pathlib import Path


def stage_bytes(path: Path, body: bytes) -> Path:
    """Write `body` to a synced temp file beside `path` and return the temp path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(body)
            f.flush()
            os.fsync(f.fileno())
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return Path(tmp_name)


def publish_staged(staged: list[tuple[Path, Path]]) -> None:
    """
    Rename each staged temp file over its target, in order.

    Every temp file that has not been renamed is removed if anything fails.
    """
    pending = list(staged)
    try:
        while pending:
            tmp, target = pending[0]
            os.replace(tmp, target)
            pending.pop(0)
    finally:
        for tmp, _target in pending:
            tmp.unlink(missing_ok=True)


def atomic_write_bytes(path: Path, body: bytes) -> None:
    """Write `body` to a sibling temp file and rename it over `path`."""
    publish_staged([(stage_bytes(path, body), path)])


def atomic_write_text(path: Path, text: str) -> None:
    atomic_write_bytes(path, text.encode("utf-8"))


def iter_files(root: Path) -> list[Path]:
    if not root.is_dir():
        return []
    return sorted(p for p in root.rglob("*") if p.is_file())


def posix_rel(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()
