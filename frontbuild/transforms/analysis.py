from __future__ import annotations

import gzip
import html
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from ..context import BuildContext
from ..util import atomic_write_text, iter_files, posix_rel

logger = logging.getLogger(__name__)

ETI_BLUE = "#1F4E79"
MUTED_GREY = "#777777"
GRID_GREY = "#D0D3D6"


@dataclass(frozen=True)
class ModuleSize:
    name: str
    stat_size: int
    gzip_size: int


def measure_assets(output_dir: Path, *, skip: set[str] | None = None) -> list[ModuleSize]:
    """Raw and gzip sizes of every built asset, largest first; unreadable files are skipped."""
    skip = skip or set()
    sizes: list[ModuleSize] = []
    for path in iter_files(output_dir):
        rel = posix_rel(path, output_dir)
        if rel in skip or path.suffix == ".gz":
            continue
        try:
            body = path.read_bytes()
        except OSError as e:
            logger.warning("Skipping %s in bundle report: %s", rel, e)
            continue
        sizes.append(ModuleSize(name=rel, stat_size=len(body), gzip_size=len(gzip.compress(body, mtime=0))))
    sizes.sort(key=lambda m: (-m.stat_size, m.name))
    return sizes


def render_report_html(sizes: list[ModuleSize], *, chart_filename: str | None = None) -> str:
    total = sum(m.stat_size for m in sizes)
    total_gz = sum(m.gzip_size for m in sizes)
    rows = "\n".join(
        f"<tr><td>{html.escape(m.name)}</td><td>{m.stat_size}</td><td>{m.gzip_size}</td></tr>" for m in sizes
    )
    chart = f'<img src="{html.escape(chart_filename)}" alt="Largest assets">' if chart_filename else ""
    return (
        "<!doctype html>\n"
        '<html><head><meta charset="utf-8"><title>Bundle report</title></head><body>\n'
        f"<h1>Bundle report</h1>\n<p>{len(sizes)} assets, {total} bytes ({total_gz} gzipped)</p>\n"
        f"{chart}\n"
        "<table><thead><tr><th>Asset</th><th>Size</th><th>Gzip</th></tr></thead><tbody>\n"
        f"{rows}\n"
        "</tbody></table>\n</body></html>\n"
    )


def render_size_chart(sizes: list[ModuleSize], *, output_path: Path, top_n: int = 20) -> None:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    top = sizes[:top_n][::-1]
    y = np.arange(len(top))
    kib = np.array([m.stat_size for m in top], dtype=float) / 1024.0
    gz_kib = np.array([m.gzip_size for m in top], dtype=float) / 1024.0

    fig, ax = plt.subplots(figsize=(10, max(2.0, 0.4 * len(top) + 1)))
    ax.set_axisbelow(True)
    ax.xaxis.grid(True, color=GRID_GREY, linewidth=0.8)
    for spine in ax.spines.values():
        spine.set_visible(False)

    ax.barh(y, kib, color=MUTED_GREY, alpha=0.45, label="stat")
    ax.barh(y, gz_kib, color=ETI_BLUE, height=0.4, label="gzip")
    ax.set_yticks(y)
    ax.set_yticklabels([m.name for m in top], fontsize=8)
    ax.set_xlabel("KiB", color=MUTED_GREY)
    ax.legend(loc="lower right", frameon=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=120, bbox_inches="tight")
    plt.close(fig)


def run(ctx: BuildContext, options: dict[str, Any]) -> None:
    out_dir = ctx.output_path
    report_name = str(options.get("report_filename") or "report.html")
    chart_name = str(options.get("chart_filename") or "")
    sizes = measure_assets(out_dir, skip={report_name, chart_name})

    if chart_name and sizes:
        try:
            render_size_chart(sizes, output_path=out_dir / chart_name, top_n=int(options.get("top_n", 20)))
        except Exception as e:  # noqa: BLE001
            logger.warning("Bundle size chart failed: %s", e)
            chart_name = ""
    else:
        chart_name = ""

    atomic_write_text(out_dir / report_name, render_report_html(sizes, chart_filename=chart_name or None))
    logger.info("Bundle report: %s (%d assets)", out_dir / report_name, len(sizes))
