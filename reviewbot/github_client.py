#!/usr/bin/env python3

import json
import logging
import math
from typing import Any, Dict, List, Optional

import requests
from github import Auth, Github, GithubException

from reviewbot.errors import GitHubClientError
from reviewbot.models import Comment, PRDetails

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"

# Event actions that get a review of the whole pull request diff
FULL_DIFF_ACTIONS = ("opened", "reopened")


class GitHubClient:
    """Handles all interactions with GitHub API."""

    def __init__(self, github_token: str, timeout: float = 60.0):
        """
        Initialize GitHub client with authentication token.

        Args:
            github_token: GitHub authentication token
            timeout: Timeout in seconds for every HTTP request
        """
        self.github_token = github_token
        self.timeout = timeout
        self.gh = Github(auth=Auth.Token(github_token), timeout=math.ceil(timeout))

    @staticmethod
    def load_event(event_path: str) -> Dict[str, Any]:
        """
        Reads the GitHub Actions event payload.

        Args:
            event_path: Path from GITHUB_EVENT_PATH

        Returns:
            Decoded event payload
        """
        try:
            with open(event_path, "r") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise GitHubClientError(f"Could not read event payload from {event_path!r}: {e}") from e

    @staticmethod
    def is_comment_trigger(event: Dict[str, Any]) -> bool:
        return "issue" in event and "pull_request" in event["issue"]

    def get_pr_details(self, event: Dict[str, Any]) -> PRDetails:
        """
        Retrieves details of the pull request the event refers to.

        Args:
            event: GitHub Actions event payload

        Returns:
            PRDetails object containing PR information
        """
        try:
            # Handle comment trigger differently from direct PR events
            if self.is_comment_trigger(event):
                pull_number = event["issue"]["number"]
            else:
                pull_number = event["number"]
            repo_full_name = event["repository"]["full_name"]
        except (KeyError, TypeError) as e:
            raise GitHubClientError(f"Event payload does not describe a pull request: missing {e}") from e

        owner, repo = repo_full_name.split("/", 1)

        try:
            pr = self.gh.get_repo(repo_full_name).get_pull(pull_number)
        except GithubException as e:
            raise GitHubClientError(f"Could not fetch PR #{pull_number} of {repo_full_name}: {e}") from e

        return PRDetails(owner, repo, pull_number, pr.title or "", pr.body or "")

    def _get_diff_text(self, url: str) -> str:
        headers = {
            'Authorization': f'Bearer {self.github_token}',
            'Accept': DIFF_MEDIA_TYPE,
        }
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise GitHubClientError(f"Request to {url} failed: {e}") from e

        if response.status_code != 200:
            raise GitHubClientError(
                f"Failed to get diff from {url}. Status code: {response.status_code}, "
                f"response: {response.text[:500]}"
            )

        logger.info(f"Retrieved diff length: {len(response.text)}")
        return response.text

    def get_diff(self, owner: str, repo: str, pull_number: int) -> str:
        """
        Fetches the diff of the pull request from GitHub API.

        Args:
            owner: Repository owner
            repo: Repository name
            pull_number: Pull request number

        Returns:
            String containing the diff
        """
        logger.info(f"Fetching diff for {owner}/{repo} PR#{pull_number}")
        return self._get_diff_text(f"{GITHUB_API_URL}/repos/{owner}/{repo}/pulls/{pull_number}")

    def get_commit_range_diff(self, owner: str, repo: str, base: str, head: str) -> str:
        """
        Fetches the diff between two commits, used for pushes to an open PR.

        Args:
            owner: Repository owner
            repo: Repository name
            base: Commit before the push
            head: Commit after the push

        Returns:
            String containing the diff
        """
        logger.info(f"Fetching diff for {owner}/{repo} {base[:7]}...{head[:7]}")
        return self._get_diff_text(f"{GITHUB_API_URL}/repos/{owner}/{repo}/compare/{base}...{head}")

    def get_diff_for_event(self, event: Dict[str, Any], pr_details: PRDetails) -> Optional[str]:
        """
        Fetches the diff relevant to the triggering event.

        Args:
            event: GitHub Actions event payload
            pr_details: Pull request details

        Returns:
            Diff text, or None if the event is not one the bot reacts to
        """
        action = event.get("action")
        if action in FULL_DIFF_ACTIONS or self.is_comment_trigger(event):
            return self.get_diff(pr_details.owner, pr_details.repo, pr_details.pull_number)

        if action == "synchronize":
            before, after = event.get("before"), event.get("after")
            if not before or not after:
                raise GitHubClientError("synchronize event is missing before/after commits")
            return self.get_commit_range_diff(pr_details.owner, pr_details.repo, before, after)

        logger.info(f"Unsupported event action: {action!r}")
        return None

    def create_review_comment(
            self,
            owner: str,
            repo: str,
            pull_number: int,
            comments: List[Comment],
    ) -> None:
        """
        Submits the review comments to the GitHub API.

        Args:
            owner: Repository owner
            repo: Repository name
            pull_number: Pull request number
            comments: List of comments to create
        """
        logger.info(f"Creating a review with {len(comments)} comments")
        for comment in comments:
            logger.info(f"- File: {comment.path}, line: {comment.line}")

        try:
            pr = self.gh.get_repo(f"{owner}/{repo}").get_pull(pull_number)
            review = pr.create_review(
                comments=[comment.to_dict() for comment in comments],
                event="COMMENT",
            )
        except GithubException as e:
            raise GitHubClientError(f"Error creating review: {e}") from e

        logger.info(f"Review created successfully with ID: {review.id}")
