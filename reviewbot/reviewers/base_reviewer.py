#!/usr/bin/env python3

from abc import ABC, abstractmethod
from typing import List

from reviewbot.config import ReviewConfig
from reviewbot.models import Comment, DiffChunk, DiffFile, PRDetails


class BaseReviewer(ABC):
    """
    Base class for all code reviewers.
    Each reviewer should implement the review_chunk method.
    """

    def __init__(self, config: ReviewConfig):
        self.config = config
        self.name = self.__class__.__name__

    def can_review_file(self, diff_file: DiffFile) -> bool:
        """
        Determine if this reviewer can handle this file.
        Can be overridden by subclasses for specific file type filtering.

        Args:
            diff_file: Parsed file from the diff

        Returns:
            True if this reviewer can review the file, False otherwise
        """
        # Deleted files have no new-file lines to comment on
        return not diff_file.is_deleted and bool(diff_file.chunks)

    def review_file(self, diff_file: DiffFile, pr_details: PRDetails) -> List[Comment]:
        """
        Review every hunk of a file in order.

        Args:
            diff_file: Parsed file from the diff
            pr_details: Pull request details

        Returns:
            List of comments for the file
        """
        comments = []
        for chunk in diff_file.chunks:
            comments.extend(self.review_chunk(diff_file, chunk, pr_details))
        return comments

    @abstractmethod
    def review_chunk(self, diff_file: DiffFile, chunk: DiffChunk, pr_details: PRDetails) -> List[Comment]:
        """
        Review a single hunk and return comments.

        Args:
            diff_file: File the hunk belongs to
            chunk: Hunk from the diff
            pr_details: Pull request details

        Returns:
            List of comments anchored on the hunk's new-file lines
        """
        pass
