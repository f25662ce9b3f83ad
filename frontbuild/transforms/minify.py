from __future__ import annotations

import logging
import re
from typing import Any

import rjsmin

from ..context import BuildContext
from ..util import atomic_write_text, iter_files

logger = logging.getLogger(__name__)

_IDENT_CHAR_RE = re.compile(r"[\w$.]")
_WORD_CHAR_RE = re.compile(r"[\w$]")

# A `/` after one of these starts a regex literal rather than a division.
_REGEX_PRECEDERS = set("(,=:[!&|?{};+-*%<>~^")
_REGEX_KEYWORDS = {
    "return",
    "typeof",
    "instanceof",
    "in",
    "of",
    "new",
    "delete",
    "void",
    "throw",
    "case",
    "do",
    "else",
    "yield",
    "await",
}


def _skip_string(src: str, i: int) -> int:
    """Index just past the string/template literal that starts at `i`."""
    quote = src[i]
    i += 1
    n = len(src)
    while i < n:
        ch = src[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return n


def _skip_comment(src: str, i: int) -> int:
    if src.startswith("//", i):
        end = src.find("\n", i)
        return len(src) if end < 0 else end
    end = src.find("*/", i + 2)
    return len(src) if end < 0 else end + 2


def _regex_allowed(src: str, i: int) -> bool:
    """Whether a `/` at `i` sits where an expression may start."""
    k = i - 1
    while k >= 0 and src[k].isspace():
        k -= 1
    if k < 0 or src[k] in _REGEX_PRECEDERS:
        return True
    end = k + 1
    while k >= 0 and _WORD_CHAR_RE.match(src[k]):
        k -= 1
    if end == k + 1 or (k >= 0 and src[k] == "."):
        return False
    return src[k + 1 : end] in _REGEX_KEYWORDS


def _skip_regex(src: str, i: int) -> int:
    """Index just past the regex literal (flags included) that starts at `i`."""
    n = len(src)
    j = i + 1
    in_class = False
    while j < n:
        ch = src[j]
        if ch == "\\":
            j += 2
            continue
        if ch == "\n":
            # not a regex after all; treat the slash as an operator
            return i + 1
        if ch == "[":
            in_class = True
        elif ch == "]":
            in_class = False
        elif ch == "/" and not in_class:
            j += 1
            while j < n and _WORD_CHAR_RE.match(src[j]):
                j += 1
            return j
        j += 1
    return i + 1


def _skip_literal(src: str, i: int) -> int | None:
    """End of the string, comment or regex literal at `i`, or None if `i` is code."""
    ch = src[i]
    if ch in "\"'`":
        return _skip_string(src, i)
    if src.startswith("//", i) or src.startswith("/*", i):
        return _skip_comment(src, i)
    if ch == "/" and _regex_allowed(src, i):
        return _skip_regex(src, i)
    return None


def _matching_paren(src: str, i: int) -> int:
    """Index of the `)` closing the `(` at `i`, honoring strings, comments and regexes."""
    depth = 0
    n = len(src)
    while i < n:
        j = _skip_literal(src, i)
        if j is not None:
            i = j
            continue
        ch = src[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise ValueError("Unbalanced parentheses in call")


def _debugger_end(src: str, i: int) -> int | None:
    """End of a `debugger` statement (its `;` included) starting at `i`."""
    if not src.startswith("debugger", i):
        return None
    if i > 0 and _IDENT_CHAR_RE.match(src[i - 1]):
        return None
    j = i + len("debugger")
    if j < len(src) and _WORD_CHAR_RE.match(src[j]):
        return None
    k = j
    while k < len(src) and src[k] in " \t":
        k += 1
    return k + 1 if k < len(src) and src[k] == ";" else j


def strip_calls(src: str, funcs: list[str], *, drop_debugger: bool = False) -> str:
    """
    Replace calls to the named functions (e.g. `console.log`) with `void 0`.

    Calls inside strings, comments and regex literals are left alone; everything
    else in the source is preserved. With `drop_debugger`, `debugger` statements
    become empty statements.
    """
    if not funcs and not drop_debugger:
        return src
    out: list[str] = []
    i = 0
    n = len(src)
    while i < n:
        j = _skip_literal(src, i)
        if j is not None:
            out.append(src[i:j])
            i = j
            continue
        if drop_debugger:
            j = _debugger_end(src, i)
            if j is not None:
                out.append(";")
                i = j
                continue
        ch = src[i]
        matched = next((f for f in funcs if src.startswith(f, i)), None)
        if matched and (i == 0 or not _IDENT_CHAR_RE.match(src[i - 1])):
            j = i + len(matched)
            while j < n and src[j] in " \t\r\n":
                j += 1
            if j < n and src[j] == "(":
                i = _matching_paren(src, j) + 1
                out.append("void 0")
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def minify_js(src: str, options: dict[str, Any]) -> str:
    stripped = strip_calls(
        src,
        list(options.get("pure_funcs") or []),
        drop_debugger=bool(options.get("drop_debugger", False)),
    )
    return rjsmin.jsmin(stripped)


def run(ctx: BuildContext, options: dict[str, Any]) -> None:
    count = 0
    for path in iter_files(ctx.output_path):
        if path.suffix.lower() != ".js":
            continue
        before = path.read_text(encoding="utf-8")
        after = minify_js(before, options)
        if after != before:
            atomic_write_text(path, after)
            count += 1
    logger.info("Minified %d script(s)", count)
