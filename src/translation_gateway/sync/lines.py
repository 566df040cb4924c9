"""
Line Diff

Line-level diff between two texts as an ordered list of segments.
Concatenating the values of the unchanged and removed segments gives the
old text back; unchanged and added segments give the new text.
"""

import difflib
from typing import List, Optional

from ..models.changes import DiffSegment


def _segment(lines: List[str], added: bool = False, removed: bool = False) -> DiffSegment:
    return DiffSegment(value=''.join(lines), count=len(lines), added=added, removed=removed)


def diff_lines(old: Optional[str], new: Optional[str]) -> List[DiffSegment]:
    """
    Compute the line diff of ``old`` -> ``new``.

    Missing texts are treated as empty. A replaced block is reported as a
    removed segment followed by an added segment.
    """
    old_lines = (old or '').splitlines(keepends=True)
    new_lines = (new or '').splitlines(keepends=True)

    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    segments: List[DiffSegment] = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == 'equal':
            segments.append(_segment(old_lines[i1:i2]))
        elif tag == 'delete':
            segments.append(_segment(old_lines[i1:i2], removed=True))
        elif tag == 'insert':
            segments.append(_segment(new_lines[j1:j2], added=True))
        else:
            segments.append(_segment(old_lines[i1:i2], removed=True))
            segments.append(_segment(new_lines[j1:j2], added=True))

    return segments


def old_text(segments: List[DiffSegment]) -> str:
    return ''.join(segment.value for segment in segments if not segment.added)


def new_text(segments: List[DiffSegment]) -> str:
    return ''.join(segment.value for segment in segments if not segment.removed)
