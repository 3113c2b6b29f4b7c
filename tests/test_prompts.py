from reviewbot.diff_parser import DiffParser
from reviewbot.models import DiffChunk, DiffFile, PRDetails
from reviewbot.prompts import build_review_prompt
from tests.conftest import MULTI_FILE_DIFF, SINGLE_HUNK_DIFF


def _single_chunk():
    diff_file = DiffParser.parse_diff(SINGLE_HUNK_DIFF)[0]
    return diff_file, diff_file.chunks[0]


def test_prompt_lists_valid_line_numbers(pr_details):
    diff_file, chunk = _single_chunk()

    prompt = build_review_prompt(diff_file, chunk, pr_details)

    assert "Valid line numbers: 1, 2, 3, 4, 5, 6" in prompt


def test_prompt_states_rules_and_reply_shape(pr_details):
    diff_file, chunk = _single_chunk()

    prompt = build_review_prompt(diff_file, chunk, pr_details, include_severity=False)

    assert '{"reviews": [{"lineNumber": <line_number>, "reviewComment": "<review comment>"}]}' in prompt
    assert "Do not give positive comments or compliments." in prompt
    assert "NEVER suggest adding comments to the code" in prompt
    assert "severity" not in prompt.lower()


def test_prompt_includes_severity_scale_when_enabled(pr_details):
    diff_file, chunk = _single_chunk()

    prompt = build_review_prompt(diff_file, chunk, pr_details, include_severity=True)

    assert '"severity": <1-5>' in prompt
    assert "1: Ignorable style nit" in prompt
    assert "5: Critical issue" in prompt


def test_prompt_embeds_pr_context_and_annotated_diff(pr_details):
    diff_file, chunk = _single_chunk()

    prompt = build_review_prompt(diff_file, chunk, pr_details)

    assert 'in the file "src/app.py"' in prompt
    assert "Pull request title: Add compute" in prompt
    assert "Computes things" in prompt
    assert "@@ -1,3 +1,6 @@" in prompt
    assert "4 +    value = compute()" in prompt
    assert "1  import os" in prompt


def test_prompt_without_description():
    diff_file, chunk = _single_chunk()
    details = PRDetails("octo", "demo", 1, "Title", None)

    assert "No description provided" in build_review_prompt(diff_file, chunk, details)


def test_prompt_for_chunk_without_valid_lines(pr_details):
    diff_file = DiffFile("a.py", "a.py", [DiffChunk("@@ -1,0 +1,0 @@", "", [])])

    prompt = build_review_prompt(diff_file, diff_file.chunks[0], pr_details)

    assert "Valid line numbers: none" in prompt


def test_prompt_language(pr_details):
    diff_file, chunk = _single_chunk()

    prompt = build_review_prompt(diff_file, chunk, pr_details, language="Korean")

    assert "Write all review comments in Korean." in prompt


def test_one_prompt_per_chunk_only_contains_that_chunk(pr_details):
    diff_file = DiffParser.parse_diff(MULTI_FILE_DIFF)[0]

    first = build_review_prompt(diff_file, diff_file.chunks[0], pr_details)
    second = build_review_prompt(diff_file, diff_file.chunks[1], pr_details)

    assert "return a + b" in first and "assert a" not in first
    assert "assert a" in second and "return a + b" not in second
    assert "Valid line numbers: 10, 11, 12" in second
