#!/usr/bin/env python3

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from reviewbot.aggregator import CommentAggregator
from reviewbot.config import ReviewConfig
from reviewbot.diff_parser import DiffParser, filter_excluded
from reviewbot.github_client import GitHubClient
from reviewbot.models import Comment, DiffChunk, DiffFile, PRDetails
from reviewbot.reviewers.base_reviewer import BaseReviewer
from reviewbot.summary import SummaryGenerator

logger = logging.getLogger(__name__)


class ReviewPipeline:
    """Runs the reviewer over every hunk and collects the review batch."""

    def __init__(
            self,
            config: ReviewConfig,
            reviewer: BaseReviewer,
            summary_generator: Optional[SummaryGenerator] = None,
    ):
        self.config = config
        self.reviewer = reviewer
        self.summary_generator = summary_generator

    def _review_chunk(self, diff_file: DiffFile, chunk: DiffChunk, pr_details: PRDetails) -> List[Comment]:
        # One hunk failing must never cost the findings of the others
        try:
            return self.reviewer.review_chunk(diff_file, chunk, pr_details)
        except Exception:
            logger.exception(f"Reviewing {diff_file.new_path} {chunk.header} failed, skipping hunk")
            return []

    def analyze(self, files: List[DiffFile], pr_details: PRDetails) -> List[Comment]:
        """
        Review all hunks and build the comment batch.

        Args:
            files: Parsed and filtered files of the pull request
            pr_details: Pull request details

        Returns:
            Comments in file, hunk, reply order, summary first when present
        """
        logger.info(f"Number of files to analyze: {len(files)}")
        aggregator = CommentAggregator()

        work: List[Tuple[int, int, DiffFile, DiffChunk]] = []
        for file_index, diff_file in enumerate(files):
            if not self.reviewer.can_review_file(diff_file):
                logger.info(f"Skipping file: {diff_file.path}")
                continue
            logger.info(f"Processing file: {diff_file.new_path} ({len(diff_file.chunks)} hunks)")
            for chunk_index, chunk in enumerate(diff_file.chunks):
                work.append((file_index, chunk_index, diff_file, chunk))

        if self.config.max_workers <= 1:
            for file_index, chunk_index, diff_file, chunk in work:
                aggregator.add(file_index, chunk_index, self._review_chunk(diff_file, chunk, pr_details))
        else:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                futures = [
                    (file_index, chunk_index, executor.submit(self._review_chunk, diff_file, chunk, pr_details))
                    for file_index, chunk_index, diff_file, chunk in work
                ]
                for file_index, chunk_index, future in futures:
                    aggregator.add(file_index, chunk_index, future.result())

        if self.summary_generator is not None:
            summary = self.summary_generator.generate(files, pr_details)
            aggregator.attach_summary(summary, files)

        comments = aggregator.comments()
        logger.info(f"Final comments list: {len(comments)} items")
        return comments


def run(
        config: ReviewConfig,
        github_client: GitHubClient,
        reviewer: BaseReviewer,
        summary_generator: Optional[SummaryGenerator] = None,
) -> List[Comment]:
    """
    Execute the whole review for the triggering event.

    Failures to fetch the pull request or its diff, to parse the diff, or to
    submit the review propagate to the caller. Nothing is submitted when
    there are no comments.

    Args:
        config: Run configuration
        github_client: GitHub API client
        reviewer: Reviewer applied to every hunk
        summary_generator: Optional PR summary generator

    Returns:
        The comments that were submitted
    """
    event = github_client.load_event(config.event_path)
    pr_details = github_client.get_pr_details(event)
    logger.info(f"Analyzing PR #{pr_details.pull_number} in repo {pr_details.owner}/{pr_details.repo}")

    diff = github_client.get_diff_for_event(event, pr_details)
    if diff is None:
        logger.info(f"Nothing to review for event {config.event_name or event.get('action')!r}. Exiting.")
        return []
    if not diff.strip():
        logger.info("No diff found. Exiting.")
        return []

    files = filter_excluded(DiffParser.parse_diff(diff), config.exclude_patterns)

    pipeline = ReviewPipeline(config, reviewer, summary_generator)
    comments = pipeline.analyze(files, pr_details)

    if comments:
        github_client.create_review_comment(
            pr_details.owner, pr_details.repo, pr_details.pull_number, comments
        )
    else:
        logger.info("No issues found to comment on. Great job!")

    return comments
