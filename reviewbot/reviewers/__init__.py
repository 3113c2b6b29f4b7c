"""
Reviewer modules for PR code review.

This package contains the code reviewer implementations.
Available reviewers:
- AICodeReviewer: Asks an OpenAI chat model to review each hunk
"""

from reviewbot.reviewers.base_reviewer import BaseReviewer
from reviewbot.reviewers.code_reviewer import AICodeReviewer

__all__ = [
    'AICodeReviewer',
    'BaseReviewer',
]
