"""Unified diff parsing and ignore-pattern filtering.

Contains:
- DiffSection / UnifiedDiff: A diff split into per-file sections
- parse_unified_diff: Split raw `git diff` output into sections
- section_path: Extract the post-image path from a `diff --git` header
- glob_to_regex: Compile an ignore glob into an anchored regex
- filter_diff: Drop every section whose path matches an ignore glob
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Optional

_SECTION_SPLIT_RE = re.compile(r"(?=^diff --git )", re.MULTILINE)

_QUOTED_ESCAPES = {"\\\\": "\\", '\\"': '"', "\\t": "\t", "\\n": "\n"}


@dataclass(frozen=True)
class DiffSection:
    """One file's part of a unified diff, from its `diff --git` line on."""

    path: str
    text: str


@dataclass(frozen=True)
class UnifiedDiff:
    """A unified diff as an ordered sequence of file sections.

    ``preamble`` holds any text before the first `diff --git` line so that
    ``render()`` reproduces the input exactly.
    """

    sections: tuple[DiffSection, ...] = ()
    preamble: str = ""

    def render(self) -> str:
        return self.preamble + "".join(section.text for section in self.sections)

    @property
    def paths(self) -> list[str]:
        return [section.path for section in self.sections]


def _unquote(path: str) -> str:
    # git C-quotes paths with special characters: "b/with \"quote\""
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        path = path[1:-1]
        path = re.sub(r'\\[\\"tn]', lambda m: _QUOTED_ESCAPES[m.group(0)], path)
    return path


def section_path(header: str) -> Optional[str]:
    """Extract the normalized file path from a `diff --git a/x b/x` line.

    The `b/` side is used (the post-image path, which differs on renames) and
    its `b/` prefix is stripped.

    Args:
        header: The first line of a file section.

    Returns:
        The path, or None if the line is not a recognizable header.
    """
    header = header.rstrip("\n")
    if not header.startswith("diff --git "):
        return None

    if header.endswith('"'):
        idx = header.rfind(' "b/')
        if idx != -1:
            return _unquote(header[idx + 1:])[2:]

    idx = header.rfind(" b/")
    if idx == -1:
        return None
    return header[idx + 3:]


def parse_unified_diff(text: str) -> UnifiedDiff:
    """Split raw diff output into per-file sections.

    Args:
        text: Raw output of `git diff`.

    Returns:
        The parsed diff. Section order follows the input.
    """
    if not text:
        return UnifiedDiff()

    preamble = ""
    sections = []
    for block in _SECTION_SPLIT_RE.split(text):
        if not block:
            continue
        if not block.startswith("diff --git "):
            preamble += block
            continue
        first_line = block.split("\n", 1)[0]
        sections.append(DiffSection(path=section_path(first_line) or "", text=block))

    return UnifiedDiff(sections=tuple(sections), preamble=preamble)


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> re.Pattern:
    """Compile an ignore glob into an anchored regular expression.

    `*` matches any run of characters (including `/`), `?` matches one
    character, everything else is literal. Unlike `fnmatch.translate`,
    `[...]` is not a character class: ignore globs only know `*` and `?`.
    The whole path must match, so `dist/*` matches `dist/bundle.js` but not
    `other/dist/x`.

    Args:
        pattern: The glob pattern.

    Returns:
        The compiled regex.
    """
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + "$", re.DOTALL)


def _matches_any(path: str, compiled: list[re.Pattern]) -> bool:
    return any(regex.match(path) for regex in compiled)


def filter_sections(diff: UnifiedDiff, patterns: Iterable[str]) -> UnifiedDiff:
    """Drop every section whose path matches one of the ignore globs.

    Args:
        diff: The parsed diff.
        patterns: Ignore globs.

    Returns:
        A diff holding the surviving sections in their original order.
    """
    compiled = [glob_to_regex(p) for p in patterns]
    if not compiled:
        return diff

    kept = tuple(s for s in diff.sections if not _matches_any(s.path, compiled))
    return UnifiedDiff(sections=kept, preamble=diff.preamble)


def filter_diff(diff_text: str, patterns: Iterable[str]) -> str:
    """Remove whole file sections matching ignore globs from a diff.

    Args:
        diff_text: Raw unified diff.
        patterns: Ignore globs (e.g. "*.lock", "dist/*").

    Returns:
        The filtered diff. With no patterns the input is returned unchanged.
    """
    patterns = list(patterns)
    if not patterns:
        return diff_text
    return filter_sections(parse_unified_diff(diff_text), patterns).render()
