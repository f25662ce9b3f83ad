from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..context import BuildContext
from ..util import atomic_write_text, iter_files

logger = logging.getLogger(__name__)

_STYLE_BLOCK_RE = re.compile(r"<style([\s\S]*?)</style>+", re.IGNORECASE)
_TOKEN_RE = re.compile(r"[A-Za-z0-9_:/-]+")
_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
_SELECTOR_NAME_RE = re.compile(r"[.#]((?:\\.|[\w-])+)")

# At-rules whose bodies hold nested rules that can be purged.
_NESTED_AT_RULES = ("@media", "@supports", "@document")


def extract_tokens(content: str) -> set[str]:
    """Candidate class names from a template; `<style>` blocks are ignored."""
    return set(_TOKEN_RE.findall(_STYLE_BLOCK_RE.sub("", content)))


@dataclass(frozen=True)
class Safelist:
    names: frozenset[str]
    patterns: tuple[re.Pattern[str], ...]
    children: tuple[re.Pattern[str], ...]

    @classmethod
    def from_options(cls, options: dict[str, Any]) -> "Safelist":
        return cls(
            names=frozenset(options.get("safelist") or []),
            patterns=tuple(re.compile(p) for p in options.get("safelist_patterns") or []),
            children=tuple(re.compile(p) for p in options.get("safelist_patterns_children") or []),
        )

    def protects(self, name: str) -> bool:
        return name in self.names or any(p.search(name) for p in self.patterns)


def _selector_names(selector: str) -> list[str]:
    return [m.group(1).replace("\\", "") for m in _SELECTOR_NAME_RE.finditer(selector)]


def keep_selector(selector: str, used: set[str], safelist: Safelist) -> bool:
    names = _selector_names(selector)
    if any(c.search(n) for n in names for c in safelist.children):
        return True
    return all(n in used or safelist.protects(n) for n in names)


def _split_top_level(text: str, sep: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    quote = ""
    start = 0
    for i, ch in enumerate(text):
        if quote:
            if ch == quote and text[i - 1] != "\\":
                quote = ""
        elif ch in "\"'":
            quote = ch
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth -= 1
        elif ch == sep and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


def _blocks(css: str) -> list[tuple[str, str | None]]:
    """Split CSS into top-level (prelude, body) pairs; statements like `@import ...;` have no body."""
    out: list[tuple[str, str | None]] = []
    i = 0
    n = len(css)
    start = 0
    quote = ""
    while i < n:
        ch = css[i]
        if quote:
            if ch == quote and css[i - 1] != "\\":
                quote = ""
        elif ch in "\"'":
            quote = ch
        elif ch == ";":
            stmt = css[start:i].strip()
            if stmt:
                out.append((stmt + ";", None))
            start = i + 1
        elif ch == "{":
            prelude = css[start:i].strip()
            depth = 1
            j = i + 1
            inner_quote = ""
            while j < n and depth:
                c = css[j]
                if inner_quote:
                    if c == inner_quote and css[j - 1] != "\\":
                        inner_quote = ""
                elif c in "\"'":
                    inner_quote = c
                elif c == "{":
                    depth += 1
                elif c == "}":
                    depth -= 1
                j += 1
            if depth:
                raise ValueError(f"Unbalanced braces after {prelude[:40]!r}")
            out.append((prelude, css[i + 1 : j - 1]))
            i = j
            start = j
            continue
        i += 1
    tail = css[start:].strip()
    if tail:
        out.append((tail, None))
    return out


def purge_css(css: str, used: set[str], safelist: Safelist) -> str:
    """Drop style rules whose selectors reference no used or protected class/id names."""
    kept: list[str] = []
    for prelude, body in _blocks(_COMMENT_RE.sub("", css)):
        if body is None:
            kept.append(prelude)
            continue
        if prelude.startswith("@"):
            if prelude.lower().startswith(_NESTED_AT_RULES):
                inner = purge_css(body, used, safelist)
                if inner:
                    kept.append(f"{prelude}{{{inner}}}")
            else:
                kept.append(f"{prelude}{{{body.strip()}}}")
            continue
        selectors = [s.strip() for s in _split_top_level(prelude, ",") if s.strip()]
        survivors = [s for s in selectors if keep_selector(s, used, safelist)]
        if survivors:
            kept.append(f"{','.join(survivors)}{{{body.strip()}}}")
    return "\n".join(kept)


def collect_used_tokens(root: Path, globs: list[str], *, exclude: tuple[str, ...] = ("node_modules",)) -> set[str]:
    used: set[str] = set()
    for pattern in globs:
        for path in sorted(root.glob(pattern)):
            if not path.is_file() or any(part in exclude for part in path.relative_to(root).parts):
                continue
            used |= extract_tokens(path.read_text(encoding="utf-8", errors="replace"))
    return used


def run(ctx: BuildContext, options: dict[str, Any]) -> None:
    root = ctx.options.project_root
    out_dir = ctx.output_path
    used = collect_used_tokens(root, list(options.get("content") or []), exclude=("node_modules", ctx.options.output_dir))
    safelist = Safelist.from_options(options)
    for path in iter_files(out_dir):
        if path.suffix.lower() != ".css":
            continue
        before = path.read_text(encoding="utf-8")
        after = purge_css(before, used, safelist)
        if after != before:
            atomic_write_text(path, after)
            logger.info("Purged %s: %d -> %d bytes", path, len(before), len(after))
