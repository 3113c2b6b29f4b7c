#!/usr/bin/env python3

import fnmatch
import logging
from typing import Iterable, List

from unidiff import PatchSet, UnidiffParseError
from unidiff.patch import Hunk, PatchedFile

from reviewbot.errors import DiffParseError
from reviewbot.models import ChangeType, DiffChunk, DiffFile, LineChange, DELETED_FILE_PATH

logger = logging.getLogger(__name__)


def _strip_prefix(name: str, prefix: str) -> str:
    return name[len(prefix):] if name.startswith(prefix) else name


class DiffParser:
    """Parser for Git diff output."""

    @staticmethod
    def parse_diff(diff_str: str) -> List[DiffFile]:
        """
        Parses the diff string and returns a structured format.

        Args:
            diff_str: Unified diff text as returned by GitHub

        Returns:
            List of DiffFile objects in diff order

        Raises:
            DiffParseError: if the text is not a valid unified diff
        """
        if not diff_str or not diff_str.strip():
            return []

        try:
            patch_set = PatchSet(diff_str)
        except UnidiffParseError as e:
            raise DiffParseError(f"Could not parse diff: {e}") from e

        files = [DiffParser._convert_file(patched_file) for patched_file in patch_set]
        logger.debug(f"Parsed {len(files)} files from diff")
        return files

    @staticmethod
    def _convert_file(patched_file: PatchedFile) -> DiffFile:
        if patched_file.is_removed_file:
            new_path = DELETED_FILE_PATH
        else:
            new_path = _strip_prefix(patched_file.target_file, "b/")

        if patched_file.is_added_file:
            old_path = DELETED_FILE_PATH
        else:
            old_path = _strip_prefix(patched_file.source_file, "a/")

        chunks = [DiffParser._convert_hunk(hunk) for hunk in patched_file]
        return DiffFile(new_path=new_path, old_path=old_path, chunks=chunks)

    @staticmethod
    def _convert_hunk(hunk: Hunk) -> DiffChunk:
        header = (
            f"@@ -{hunk.source_start},{hunk.source_length} "
            f"+{hunk.target_start},{hunk.target_length} @@"
        )
        if hunk.section_header:
            header = f"{header} {hunk.section_header}"

        changes = []
        for line in hunk:
            content = line.value.rstrip("\r\n")
            if line.is_added:
                changes.append(LineChange(ChangeType.ADDED, content, new_line=line.target_line_no))
            elif line.is_removed:
                changes.append(LineChange(ChangeType.REMOVED, content, old_line=line.source_line_no))
            elif line.is_context:
                changes.append(LineChange(
                    ChangeType.CONTEXT, content,
                    new_line=line.target_line_no, old_line=line.source_line_no,
                ))
            # "\ No newline at end of file" markers carry no line

        return DiffChunk(header=header, content=str(hunk), changes=changes)


def filter_excluded(files: Iterable[DiffFile], patterns: Iterable[str]) -> List[DiffFile]:
    """
    Drops files whose path matches any of the exclude glob patterns.

    Args:
        files: Parsed diff files
        patterns: Glob patterns such as "*.md" or "docs/*"

    Returns:
        Files that are not excluded, in their original order
    """
    patterns = [p.strip() for p in patterns if p and p.strip()]
    kept = []
    for diff_file in files:
        if any(fnmatch.fnmatch(diff_file.path, pattern) for pattern in patterns):
            logger.info(f"Excluding file: {diff_file.path}")
            continue
        kept.append(diff_file)
    return kept
