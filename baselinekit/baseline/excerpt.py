"""
Excerpt reader for documents in a resolved baseline.

A missing document is an expected outcome and yields None, as does an
unavailable baseline. Nothing here raises for absent content.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import frontmatter
import yaml

from baselinekit.baseline.engine import SyncEngine
from baselinekit.model.baseline import SyncOptions

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORDS = 25

_HEADING = re.compile(r"^(#{1,6})\s+(.+)$")
_CODE_FENCE = re.compile(r"```.*?```", re.DOTALL)
_EMPHASIS = re.compile(r"[#*_`]")


@dataclass(frozen=True)
class Excerpt:
    excerpt: str
    citation: str


@dataclass
class _Heading:
    level: int
    text: str
    start_line: int
    end_line: int


def resolve_document(root: Path, relative_path: str) -> Optional[Path]:
    """Join *relative_path* onto *root*; None if missing or outside the root."""
    root = Path(root).resolve()
    candidate = (root / relative_path).resolve()
    if candidate != root and root not in candidate.parents:
        logger.debug(f"Refusing path outside baseline root: {relative_path}")
        return None
    if not candidate.is_file():
        return None
    return candidate


def _extract_headings(lines: List[str]) -> List[_Heading]:
    headings: List[_Heading] = []
    for i, line in enumerate(lines):
        match = _HEADING.match(line)
        if not match:
            continue
        if headings:
            headings[-1].end_line = i - 1
        headings.append(
            _Heading(
                level=len(match.group(1)),
                text=match.group(2).strip(),
                start_line=i,
                end_line=len(lines) - 1,
            )
        )
    return headings


def _section(content: str, anchor: str) -> Optional[str]:
    lines = content.split("\n")
    for heading in _extract_headings(lines):
        if heading.text.lower() == anchor.lower():
            return " ".join(lines[heading.start_line + 1 : heading.end_line + 1])
    return None


def read_excerpt(
    root: Path,
    path: str,
    anchor: Optional[str] = None,
    max_words: int = DEFAULT_MAX_WORDS,
) -> Optional[Excerpt]:
    """
    Read up to *max_words* words from a markdown document.

    Front matter and fenced code blocks are dropped. When *anchor* matches a
    heading (case-insensitive), only that section is excerpted, and an empty
    section yields None. An unknown anchor falls back to the whole document.

    Returns:
        Excerpt with a ``path`` or ``path#anchor`` citation, or None
    """
    file_path = resolve_document(root, path)
    if file_path is None:
        return None

    try:
        post = frontmatter.load(str(file_path))
    except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as e:
        logger.debug(f"Could not read {file_path}: {e}")
        return None

    content = _CODE_FENCE.sub("", post.content)
    text = content
    if anchor:
        section = _section(content, anchor)
        if section is not None:
            text = section

    words = _EMPHASIS.sub("", text).split()
    if not words:
        return None

    citation = f"{path}#{anchor}" if anchor else path
    return Excerpt(excerpt=" ".join(words[:max_words]), citation=citation)


def read_baseline_excerpt(
    engine: SyncEngine,
    path: str,
    anchor: Optional[str] = None,
    max_words: int = DEFAULT_MAX_WORDS,
    explicit_override: Optional[str] = None,
    options: Optional[SyncOptions] = None,
) -> Optional[Excerpt]:
    """Ensure the baseline, then read an excerpt from it (None if unavailable)."""
    baseline = engine.ensure(explicit_override, options)
    if baseline.root is None:
        logger.debug(f"Baseline unavailable: {baseline.error}")
        return None
    return read_excerpt(baseline.root, path, anchor=anchor, max_words=max_words)
