import json

from reviewbot.config import ReviewConfig
from reviewbot.diff_parser import DiffParser
from reviewbot.errors import LLMClientError
from reviewbot.reviewers.code_reviewer import AICodeReviewer
from tests.conftest import DELETED_FILE_DIFF, MULTI_FILE_DIFF, SINGLE_HUNK_DIFF, FakeLLMClient, reviews_reply


def test_review_chunk_keeps_only_valid_lines(config, pr_details):
    diff_file = DiffParser.parse_diff(SINGLE_HUNK_DIFF)[0]
    llm = FakeLLMClient([reviews_reply((5, "Handle errors"), (42, "Out of diff"))])

    comments = AICodeReviewer(config, llm).review_chunk(diff_file, diff_file.chunks[0], pr_details)

    assert [(c.path, c.line, c.body) for c in comments] == [("src/app.py", 5, "Handle errors")]
    assert len(llm.prompts) == 1
    assert "Valid line numbers: 1, 2, 3, 4, 5, 6" in llm.prompts[0]


def test_review_chunk_model_failure_yields_nothing(config, pr_details):
    diff_file = DiffParser.parse_diff(SINGLE_HUNK_DIFF)[0]
    llm = FakeLLMClient([LLMClientError("timeout")])

    assert AICodeReviewer(config, llm).review_chunk(diff_file, diff_file.chunks[0], pr_details) == []


def test_review_chunk_garbage_reply_yields_nothing(config, pr_details):
    diff_file = DiffParser.parse_diff(SINGLE_HUNK_DIFF)[0]
    llm = FakeLLMClient(["I think the code looks fine!"])

    assert AICodeReviewer(config, llm).review_chunk(diff_file, diff_file.chunks[0], pr_details) == []


def test_review_file_one_request_per_chunk(config, pr_details):
    diff_file = DiffParser.parse_diff(MULTI_FILE_DIFF)[0]
    llm = FakeLLMClient([reviews_reply((2, "first")), reviews_reply((11, "second"))])

    comments = AICodeReviewer(config, llm).review_file(diff_file, pr_details)

    assert len(llm.prompts) == 2
    assert [(c.line, c.body) for c in comments] == [(2, "first"), (11, "second")]


def test_severity_label_applied(pr_details):
    config = ReviewConfig(github_token="t", openai_api_key="k", include_severity=True)
    diff_file = DiffParser.parse_diff(SINGLE_HUNK_DIFF)[0]
    reply = json.dumps({"reviews": [{"lineNumber": "4", "reviewComment": "SQL injection", "severity": 5}]})

    comments = AICodeReviewer(config, FakeLLMClient([reply])).review_chunk(
        diff_file, diff_file.chunks[0], pr_details)

    assert comments[0].body == "**🔴 Critical**\n\nSQL injection"


def test_cannot_review_deleted_files(config):
    deleted = DiffParser.parse_diff(DELETED_FILE_DIFF)[0]

    assert not AICodeReviewer(config, FakeLLMClient()).can_review_file(deleted)
