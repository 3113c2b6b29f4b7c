#!/usr/bin/env python3
"""
Maps diff lines to the new-file line numbers GitHub accepts for inline comments.
"""

from typing import FrozenSet, Iterable, Optional, Tuple

from reviewbot.models import ChangeType, DiffChunk, DiffFile


def valid_line_numbers(chunk: DiffChunk) -> FrozenSet[int]:
    """
    Returns the new-file line numbers a comment may be attached to.

    Added and context lines qualify; removed lines have no new-file number.
    The same function is used when prompting and when validating, so both
    see the same set.

    Args:
        chunk: Hunk to inspect

    Returns:
        Frozen set of line numbers, possibly empty
    """
    return frozenset(change.new_line for change in chunk.changes if change.is_commentable)


def annotate_chunk(chunk: DiffChunk) -> str:
    """
    Renders a hunk with each line prefixed by its new-file line number.

    Args:
        chunk: Hunk to render

    Returns:
        Header followed by one numbered line per change
    """
    numbered = [change.new_line for change in chunk.changes if change.is_commentable]
    width = len(str(max(numbered))) if numbered else 1

    lines = [chunk.header]
    for change in chunk.changes:
        number = str(change.new_line) if change.is_commentable else ""
        lines.append(f"{number.rjust(width)} {change.marker}{change.content}")
    return "\n".join(lines)


def first_added_line(files: Iterable[DiffFile]) -> Optional[Tuple[str, int]]:
    """Path and line of the first added line across the diff, in file order."""
    for diff_file in files:
        if diff_file.is_deleted:
            continue
        for chunk in diff_file.chunks:
            for change in chunk.changes:
                if change.change_type is ChangeType.ADDED and change.new_line is not None:
                    return diff_file.new_path, change.new_line
    return None
