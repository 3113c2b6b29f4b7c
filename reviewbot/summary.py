#!/usr/bin/env python3

import json
import logging
from typing import List, Tuple

from pydantic import ValidationError

from reviewbot.errors import LLMClientError
from reviewbot.llm_client import LLMClient
from reviewbot.models import ChangeType, DiffFile, PRDetails, PRSummary
from reviewbot.response_validator import load_json_document

logger = logging.getLogger(__name__)

MAX_SAMPLE_LINES = 10


def classify_file(diff_file: DiffFile) -> str:
    if diff_file.is_added:
        return "added"
    if diff_file.is_deleted:
        return "deleted"
    return "modified"


def sample_changed_lines(diff_file: DiffFile, limit: int = MAX_SAMPLE_LINES) -> Tuple[List[str], int]:
    """
    Picks the first added or removed lines of a file.

    Args:
        diff_file: File to sample
        limit: Maximum number of lines to return

    Returns:
        Tuple of (sampled lines with their +/- marker, number of lines left out)
    """
    changed = [
        f"{change.marker}{change.content}"
        for chunk in diff_file.chunks
        for change in chunk.changes
        if change.change_type is not ChangeType.CONTEXT
    ]
    return changed[:limit], max(0, len(changed) - limit)


def build_summary_prompt(files: List[DiffFile], pr_details: PRDetails) -> str:
    """
    Creates the prompt for the PR-level summary.

    Only a bounded sample of each file's changes is included, so the prompt
    stays small however large the diff is.

    Args:
        files: Parsed files of the pull request
        pr_details: Pull request details

    Returns:
        Prompt string for the model
    """
    sections = []
    for diff_file in files:
        sample, truncated = sample_changed_lines(diff_file)
        changed_count = diff_file.added_count + diff_file.removed_count
        lines = [
            f"File: {diff_file.path}",
            f"Change type: {classify_file(diff_file)}",
            f"Changed lines: {changed_count}",
        ]
        if sample:
            lines.append("Sample:")
            lines.extend(sample)
        if truncated:
            lines.append(f"... ({truncated} more changed lines truncated)")
        sections.append("\n".join(lines))

    changes = "\n\n".join(sections) if sections else "No file changes."

    return f"""Your task is to summarize a pull request for its reviewers. Instructions:
- Provide the response in following JSON format: {{"summary": "<technical summary>", "highlights": ["<change highlight>", ...]}}
- The summary is a short technical narrative of what the pull request changes and why.
- Each highlight is one discrete, notable change.
- Do not review the code and do not give compliments.

Pull request title: {pr_details.title}
Pull request description:

---
{pr_details.description or 'No description provided'}
---

Changed files:

{changes}
"""


def render_summary(summary: PRSummary) -> str:
    lines = ["## Pull Request Summary", "", summary.summary.strip()]
    highlights = [h.strip() for h in summary.highlights if h and h.strip()]
    if highlights:
        lines.extend(["", "### Key Changes", ""])
        lines.extend(f"- {highlight}" for highlight in highlights)
    return "\n".join(lines)


class SummaryGenerator:
    """Generates a single narrative summary of the whole pull request."""

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client

    def generate(self, files: List[DiffFile], pr_details: PRDetails) -> str:
        """
        Ask the model for a PR summary.

        Args:
            files: Parsed files of the pull request
            pr_details: Pull request details

        Returns:
            Rendered Markdown, or an empty string if anything went wrong
        """
        prompt = build_summary_prompt(files, pr_details)
        try:
            reply = self.llm_client.complete(prompt)
        except LLMClientError as e:
            logger.error(f"Summary generation failed: {e}")
            return ""

        try:
            summary = PRSummary.model_validate(load_json_document(reply, expected_key="summary"))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Could not parse summary reply: {e}")
            return ""

        if not summary.summary.strip():
            logger.warning("Summary reply is empty")
            return ""

        return render_summary(summary)
