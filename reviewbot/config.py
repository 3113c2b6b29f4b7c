#!/usr/bin/env python3

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple, List

from reviewbot.errors import ConfigError

DEFAULT_MODEL = "gpt-4.1-2025-04-14"


@dataclass(frozen=True)
class ReviewConfig:
    """Immutable run configuration, assembled once at startup."""
    github_token: str
    model: str = DEFAULT_MODEL
    openai_api_key: Optional[str] = None

    # Azure OpenAI configuration
    azure_openai_endpoint: Optional[str] = None
    azure_openai_key: Optional[str] = None
    azure_openai_api_version: Optional[str] = None

    # Review behaviour
    exclude_patterns: Tuple[str, ...] = ()
    temperature: float = 0.2
    max_tokens: int = 700
    request_timeout: float = 60.0
    include_severity: bool = True
    generate_summary: bool = False
    review_language: str = "English"
    max_workers: int = 1
    log_level: str = "INFO"

    # GitHub Actions event
    event_path: str = ""
    event_name: str = ""

    @property
    def use_azure(self) -> bool:
        return bool(self.azure_openai_endpoint)


def _split_patterns(raw: str) -> Tuple[str, ...]:
    if not raw or not raw.strip():
        return ()
    return tuple(p.strip() for p in raw.split(",") if p.strip())


def _parse_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_config(environ: Optional[Mapping[str, str]] = None) -> ReviewConfig:
    """
    Loads configuration from environment variables.

    Args:
        environ: Mapping to read from, defaults to os.environ

    Returns:
        Validated ReviewConfig

    Raises:
        ConfigError: if required values are missing or malformed
    """
    env = os.environ if environ is None else environ
    problems: List[str] = []

    github_token = env.get("GITHUB_TOKEN", "")
    if not github_token:
        problems.append("GITHUB_TOKEN is required")

    azure_endpoint = env.get("AZURE_OPENAI_ENDPOINT") or None
    azure_key = env.get("AZURE_OPENAI_KEY") or None
    openai_key = env.get("OPENAI_API_KEY") or None

    if azure_endpoint:
        model = env.get("AZURE_OPENAI_DEPLOYMENT", "")
        if not azure_key:
            problems.append("AZURE_OPENAI_KEY is required when AZURE_OPENAI_ENDPOINT is set")
        if not model:
            problems.append("AZURE_OPENAI_DEPLOYMENT is required when AZURE_OPENAI_ENDPOINT is set")
    else:
        model = env.get("OPENAI_API_MODEL") or DEFAULT_MODEL
        if not openai_key:
            problems.append("OPENAI_API_KEY is required")

    def number(name: str, cast, default):
        raw = env.get(name)
        if raw is None or not raw.strip():
            return default
        try:
            return cast(raw.strip())
        except ValueError:
            problems.append(f"{name} must be a number, got {raw!r}")
            return default

    temperature = number("INPUT_TEMPERATURE", float, 0.2)
    max_tokens = number("INPUT_MAX_TOKENS", int, 700)
    request_timeout = number("INPUT_REQUEST_TIMEOUT", float, 60.0)
    max_workers = number("INPUT_MAX_WORKERS", int, 1)

    if max_tokens <= 0:
        problems.append("INPUT_MAX_TOKENS must be positive")
    if request_timeout <= 0:
        problems.append("INPUT_REQUEST_TIMEOUT must be positive")

    if problems:
        raise ConfigError("Invalid configuration: " + "; ".join(problems))

    return ReviewConfig(
        github_token=github_token,
        model=model,
        openai_api_key=openai_key,
        azure_openai_endpoint=azure_endpoint,
        azure_openai_key=azure_key,
        azure_openai_api_version=env.get("AZURE_OPENAI_API_VERSION") or None,
        exclude_patterns=_split_patterns(env.get("INPUT_EXCLUDE", "")),
        temperature=temperature,
        max_tokens=max_tokens,
        request_timeout=request_timeout,
        include_severity=_parse_bool(env.get("INPUT_SEVERITY"), True),
        generate_summary=_parse_bool(env.get("INPUT_SUMMARY"), False),
        review_language=(env.get("INPUT_LANGUAGE") or "English").strip(),
        max_workers=max(1, max_workers),
        log_level=(env.get("INPUT_LOG_LEVEL") or "INFO").strip().upper(),
        event_path=env.get("GITHUB_EVENT_PATH", ""),
        event_name=env.get("GITHUB_EVENT_NAME", ""),
    )
