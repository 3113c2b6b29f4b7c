#!/usr/bin/env python3

from typing import Optional

from reviewbot.line_resolver import annotate_chunk, valid_line_numbers
from reviewbot.models import DiffChunk, DiffFile, PRDetails

SYSTEM_PROMPT = (
    "You are a Senior Software Engineer and the assigned reviewer for this PR. "
    "Provide specific, actionable feedback that helps improve code quality."
)

SEVERITY_SCALE = """Assign every comment a severity from 1 to 5:
- 1: Ignorable style nit
- 2: Minor improvement
- 3: Moderate issue that should be fixed
- 4: Major bug, risk or integration problem
- 5: Critical issue that must be fixed before merging, including security and performance problems"""


def build_review_prompt(
        diff_file: DiffFile,
        chunk: DiffChunk,
        pr_details: PRDetails,
        include_severity: bool = True,
        language: Optional[str] = None,
) -> str:
    """
    Creates the review prompt for a single hunk.

    Args:
        diff_file: File the hunk belongs to
        chunk: Hunk to review
        pr_details: Pull request details, used as context only
        include_severity: Ask the model for a 1-5 severity per comment
        language: Language the comments should be written in

    Returns:
        Prompt string for the model
    """
    valid_lines = sorted(valid_line_numbers(chunk))
    if valid_lines:
        line_list = ", ".join(str(n) for n in valid_lines)
    else:
        line_list = "none (this hunk has no lines that can be commented on, so \"reviews\" must be an empty array)"

    if include_severity:
        response_format = '{"reviews": [{"lineNumber": <line_number>, "reviewComment": "<review comment>", "severity": <1-5>}]}'
    else:
        response_format = '{"reviews": [{"lineNumber": <line_number>, "reviewComment": "<review comment>"}]}'

    instructions = [
        f"- Provide the response in following JSON format: {response_format}",
        "- Do not give positive comments or compliments.",
        "- Provide comments and suggestions ONLY if there is something to improve, otherwise \"reviews\" should be an empty array.",
        "- Use GitHub Markdown in comments.",
        "- Use the pull request title and description only as overall context and comment only on the code.",
        "- IMPORTANT: NEVER suggest adding comments to the code.",
    ]
    if language:
        instructions.append(f"- IMPORTANT: Write all review comments in {language}.")
    instructions.append(
        "- VERY IMPORTANT: Only comment on one of the valid line numbers listed below. "
        "Commenting on any other line is an error."
    )
    instructions.append(f"- Valid line numbers: {line_list}")

    severity_block = f"\n\n{SEVERITY_SCALE}" if include_severity else ""

    return f"""Your task is to review pull requests. Instructions:
{chr(10).join(instructions)}{severity_block}

Review the following code diff in the file "{diff_file.new_path}" and take the pull request title and description into account when writing the response.

Pull request title: {pr_details.title}
Pull request description:

---
{pr_details.description or 'No description provided'}
---

Git diff to review (each line starts with its line number in the new file):

```diff
{annotate_chunk(chunk)}
```
"""
