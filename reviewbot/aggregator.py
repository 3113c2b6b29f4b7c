#!/usr/bin/env python3

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from reviewbot.line_resolver import first_added_line
from reviewbot.models import Comment, DiffFile

logger = logging.getLogger(__name__)


class CommentAggregator:
    """
    Collects comments from every hunk into one ordered review batch.

    Comments are keyed by (file index, chunk index) so the batch comes out in
    diff order no matter in which order hunks finished.
    """

    def __init__(self):
        self._by_chunk: Dict[Tuple[int, int], List[Comment]] = {}
        self._summary: Optional[Comment] = None

    def add(self, file_index: int, chunk_index: int, comments: Iterable[Comment]) -> None:
        self._by_chunk.setdefault((file_index, chunk_index), []).extend(comments)

    def attach_summary(self, summary: str, files: List[DiffFile]) -> bool:
        """
        Anchor the PR summary on the first added line of the diff.

        Args:
            summary: Rendered Markdown summary, may be empty
            files: Reviewed files in diff order

        Returns:
            True if the summary will be part of the batch
        """
        if not summary:
            return False

        anchor = first_added_line(files)
        if anchor is None:
            logger.warning("No added line to anchor the summary on, dropping it")
            return False

        path, line = anchor
        self._summary = Comment(path=path, line=line, body=summary)
        logger.info(f"Summary attached to {path}:{line}")
        return True

    def comments(self) -> List[Comment]:
        ordered = [self._summary] if self._summary is not None else []
        for key in sorted(self._by_chunk):
            ordered.extend(self._by_chunk[key])
        return ordered

    def __len__(self) -> int:
        return len(self.comments())
