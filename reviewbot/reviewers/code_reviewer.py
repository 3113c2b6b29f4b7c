#!/usr/bin/env python3

import logging
from typing import List

from reviewbot.config import ReviewConfig
from reviewbot.errors import LLMClientError
from reviewbot.line_resolver import valid_line_numbers
from reviewbot.llm_client import LLMClient
from reviewbot.models import Comment, DiffChunk, DiffFile, ParsedFindings, PRDetails
from reviewbot.prompts import build_review_prompt
from reviewbot.response_validator import parse_model_reply, validate_findings
from reviewbot.reviewers.base_reviewer import BaseReviewer

logger = logging.getLogger(__name__)


class AICodeReviewer(BaseReviewer):
    """AI-powered code reviewer, one model request per hunk."""

    def __init__(self, config: ReviewConfig, llm_client: LLMClient):
        super().__init__(config)
        self.llm_client = llm_client

    def review_chunk(self, diff_file: DiffFile, chunk: DiffChunk, pr_details: PRDetails) -> List[Comment]:
        """
        Review a hunk using the model.

        A failed call or an unusable reply yields no comments for this hunk
        and never stops the review of the others.

        Args:
            diff_file: File the hunk belongs to
            chunk: Hunk from the diff
            pr_details: Pull request details

        Returns:
            List of validated comments
        """
        prompt = build_review_prompt(
            diff_file,
            chunk,
            pr_details,
            include_severity=self.config.include_severity,
            language=self.config.review_language,
        )

        try:
            reply = self.llm_client.complete(prompt)
        except LLMClientError as e:
            logger.error(f"Model call failed for {diff_file.new_path} {chunk.header}: {e}")
            return []

        result = parse_model_reply(reply)
        if isinstance(result, ParsedFindings):
            logger.info(f"Reviews received for {diff_file.new_path}: {len(result.findings)} items")

        return validate_findings(
            result,
            diff_file.new_path,
            valid_line_numbers(chunk),
            include_severity=self.config.include_severity,
        )
