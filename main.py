#!/usr/bin/env python3

import logging
import sys

from reviewbot.config import load_config
from reviewbot.errors import ConfigError, ReviewBotError
from reviewbot.github_client import GitHubClient
from reviewbot.llm_client import LLMClient
from reviewbot.pipeline import run
from reviewbot.reviewers.code_reviewer import AICodeReviewer
from reviewbot.summary import SummaryGenerator

logger = logging.getLogger("reviewbot")


def main():
    """Main function to execute the code review process."""
    try:
        config = load_config()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
        logger.error(str(e))
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting PR review bot...")

    try:
        github = GitHubClient(config.github_token, timeout=config.request_timeout)
        llm_client = LLMClient(config)
        reviewer = AICodeReviewer(config, llm_client)
        summary_generator = SummaryGenerator(llm_client) if config.generate_summary else None

        run(config, github, reviewer, summary_generator)

    except ReviewBotError as e:
        logger.error(f"Review failed: {e}")
        sys.exit(1)
    except Exception:
        logger.exception("Unexpected error in main execution")
        sys.exit(1)


if __name__ == "__main__":
    main()
