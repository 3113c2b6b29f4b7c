import json
from typing import Callable, List, Optional, Union

import pytest

from reviewbot.config import ReviewConfig
from reviewbot.models import PRDetails

# One file, one hunk: context lines 1-3, added lines 4-6
SINGLE_HUNK_DIFF = """diff --git a/src/app.py b/src/app.py
index 1111111..2222222 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,6 @@
 import os
 import sys
 def main():
+    value = compute()
+    print(value)
+    return value
"""

DELETED_FILE_DIFF = """diff --git a/old.py b/old.py
deleted file mode 100644
index 3333333..0000000
--- a/old.py
+++ /dev/null
@@ -1,2 +0,0 @@
-print("a")
-print("b")
"""

# Two files: a modified file with two hunks and a new file
MULTI_FILE_DIFF = """diff --git a/lib/util.py b/lib/util.py
index 4444444..5555555 100644
--- a/lib/util.py
+++ b/lib/util.py
@@ -1,3 +1,3 @@
 def add(a, b):
-    return a - b
+    return a + b
 # end add
@@ -10,2 +10,3 @@ def mul(a, b):
 def mul(a, b):
+    assert a
     return a * b
diff --git a/lib/new.py b/lib/new.py
new file mode 100644
index 0000000..6666666
--- /dev/null
+++ b/lib/new.py
@@ -0,0 +1,2 @@
+X = 1
+Y = 2
"""


def reviews_reply(*findings) -> str:
    return json.dumps({"reviews": [
        {"lineNumber": str(line), "reviewComment": comment} for line, comment in findings
    ]})


class FakeLLMClient:
    """Returns canned replies and records the prompts it received."""

    def __init__(self, replies: Union[List[Union[str, Exception]], Callable[[str], str], None] = None):
        self.replies = replies if replies is not None else []
        self.prompts: List[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if callable(self.replies):
            return self.replies(prompt)
        reply = self.replies.pop(0) if self.replies else '{"reviews": []}'
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeGitHubClient:
    def __init__(self, diff: Optional[str], event: Optional[dict] = None, pr_details: Optional[PRDetails] = None):
        self.diff = diff
        self.event = event if event is not None else {"action": "opened", "number": 7}
        self.pr_details = pr_details or PRDetails("octo", "demo", 7, "Add compute", "Computes things")
        self.submitted: List[list] = []

    def load_event(self, event_path):
        return self.event

    def get_pr_details(self, event):
        return self.pr_details

    def get_diff_for_event(self, event, pr_details):
        return self.diff

    def create_review_comment(self, owner, repo, pull_number, comments):
        self.submitted.append(list(comments))


@pytest.fixture
def config():
    return ReviewConfig(github_token="gh-token", openai_api_key="sk-test", include_severity=False)


@pytest.fixture
def pr_details():
    return PRDetails("octo", "demo", 7, "Add compute", "Computes things")
