#!/usr/bin/env python3
"""
Turns raw model replies into inline comments.

The model is asked for JSON but nothing guarantees it: replies may be wrapped
in code fences, surrounded by prose, or not JSON at all. Parsing never raises;
an unusable reply becomes a ParseFailure, and the caller treats it as a hunk
without findings.
"""

import json
import logging
from typing import Any, Collection, Dict, List, Optional, Union

from pydantic import ValidationError

from reviewbot.models import Comment, ParsedFindings, ParseFailure, ReviewFinding

logger = logging.getLogger(__name__)

SEVERITY_LABELS: Dict[int, str] = {
    1: "🟢 Nit",
    2: "🔵 Minor",
    3: "🟡 Moderate",
    4: "🟠 Major",
    5: "🔴 Critical",
}


def severity_label(severity: Optional[int]) -> str:
    """Label for a severity, or an empty string outside 1-5."""
    if severity is None:
        return ""
    return SEVERITY_LABELS.get(severity, "")


def format_comment(review_comment: str, severity: Optional[int]) -> str:
    """
    Prefixes a review comment with its severity label.

    Args:
        review_comment: The comment text from the model
        severity: Severity level, may be None or out of range

    Returns:
        Comment body, unchanged when there is no label
    """
    label = severity_label(severity)
    if not label:
        return review_comment
    return f"**{label}**\n\n{review_comment}"


def load_json_document(raw: str, expected_key: Optional[str] = None) -> Any:
    """
    Decodes the JSON document embedded in a model reply.

    Models without JSON mode like to wrap the object in ```json fences or
    prose, and the prose may itself contain braces. Every "{" is tried as
    the start of an object; the first object holding expected_key wins,
    otherwise the first object found.

    Args:
        raw: Reply text from the model
        expected_key: Key the wanted object is known to contain

    Returns:
        The decoded document

    Raises:
        json.JSONDecodeError: if the reply holds no JSON document
    """
    text = raw.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        error = e

    decoder = json.JSONDecoder()
    first_object = None
    start = text.find("{")
    while start != -1:
        try:
            document, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            document = None
        if isinstance(document, dict):
            if expected_key is None or expected_key in document:
                return document
            if first_object is None:
                first_object = document
        start = text.find("{", start + 1)

    if first_object is not None:
        return first_object
    raise error


def parse_model_reply(raw: Optional[str]) -> Union[ParsedFindings, ParseFailure]:
    """
    Parses a model reply into review findings.

    Args:
        raw: Reply text from the model

    Returns:
        ParsedFindings with the well-formed findings, or ParseFailure
    """
    if raw is None or not raw.strip():
        return ParseFailure("empty reply", raw)

    try:
        document = load_json_document(raw, expected_key="reviews")
    except json.JSONDecodeError as e:
        return ParseFailure(f"reply is not valid JSON: {e}", raw)

    if not isinstance(document, dict):
        return ParseFailure("reply is not a JSON object", raw)

    reviews = document.get("reviews")
    if reviews is None:
        return ParsedFindings(findings=[])
    if not isinstance(reviews, list):
        return ParseFailure('"reviews" is not an array', raw)

    findings: List[ReviewFinding] = []
    discarded = 0
    for item in reviews:
        try:
            findings.append(ReviewFinding.model_validate(item))
        except ValidationError as e:
            discarded += 1
            logger.warning(f"Discarding malformed finding {item!r}: {e.error_count()} validation errors")
        except Exception as e:
            # One odd finding must not cost the rest of the reply
            discarded += 1
            logger.warning(f"Discarding unreadable finding {item!r}: {e}")

    return ParsedFindings(findings=findings, discarded=discarded)


def validate_findings(
        result: Union[ParsedFindings, ParseFailure],
        file_path: str,
        valid_lines: Collection[int],
        include_severity: bool = True,
) -> List[Comment]:
    """
    Creates comment objects from the parsed reply.

    Findings on lines outside valid_lines are dropped, since GitHub rejects
    comments on lines that are not part of the diff.

    Args:
        result: Outcome of parse_model_reply
        file_path: Path of the reviewed file
        valid_lines: New-file line numbers of the reviewed hunk
        include_severity: Prefix comments with their severity label

    Returns:
        List of comments in reply order
    """
    if isinstance(result, ParseFailure):
        logger.warning(f"Ignoring unusable reply for {file_path}: {result.reason}")
        logger.debug(f"Raw reply: {result.raw!r}")
        return []

    comments = []
    for finding in result.findings:
        line_number = finding.lineNumber
        if line_number not in valid_lines:
            logger.warning(f"Line {line_number} is not part of the diff for {file_path}, skipping comment")
            continue

        body = finding.reviewComment.strip()
        if not body:
            logger.debug(f"Skipping empty comment for {file_path}:{line_number}")
            continue

        if include_severity:
            body = format_comment(body, finding.severity)

        comments.append(Comment(path=file_path, line=line_number, body=body))
        logger.debug(f"Created comment for {file_path}:{line_number}")

    return comments
