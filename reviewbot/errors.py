#!/usr/bin/env python3


class ReviewBotError(Exception):
    """Base exception for review bot errors."""
    pass


class ConfigError(ReviewBotError):
    """Raised when the environment does not describe a usable configuration."""
    pass


class DiffParseError(ReviewBotError):
    """Raised when the pull request diff cannot be parsed."""
    pass


class GitHubClientError(ReviewBotError):
    """Raised when a GitHub API call fails."""
    pass


class LLMClientError(ReviewBotError):
    """Raised when the language model call fails."""
    pass
