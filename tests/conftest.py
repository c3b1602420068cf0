"""Shared test fixtures and configuration."""

import logging
import tempfile
from pathlib import Path

import pytest
import structlog

from gitlane.git.runner import CommandResult, GitRunner
from gitlane.logging import configure_logging
from gitlane.parsing.records import FIELD_SEPARATOR, RECORD_SEPARATOR


class FakeRunner(GitRunner):
    """GitRunner that answers from a table instead of running git.

    Responses are keyed by the argument tuple, or by a prefix of it. The
    longest matching key wins. Unknown commands fail with status 1.
    """

    def __init__(self, responses=None):
        super().__init__()
        self.responses = dict(responses or {})
        self.calls = []
        self.stdin_calls = []

    def _execute(self, args, cwd, stdin=None):
        self.calls.append(list(args))
        if stdin is not None:
            self.stdin_calls.append((list(args), stdin))

        key = tuple(args)
        for length in range(len(key), 0, -1):
            if key[:length] in self.responses:
                response = self.responses[key[:length]]
                if isinstance(response, CommandResult):
                    return response
                return CommandResult(stdout=response, stderr="", status=0)
        return CommandResult(stdout="", stderr=f"unknown command: {' '.join(args)}", status=1)


def make_record(*fields):
    """Join fields the way the --format strings do."""
    return FIELD_SEPARATOR.join(fields) + RECORD_SEPARATOR


@pytest.fixture(autouse=True)
def quiet_logging():
    """Send log events to stderr at WARNING so command output stays parseable."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    configure_logging("WARNING")
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_repo_root(temp_dir):
    """Create a mock git repository root directory."""
    git_dir = temp_dir / ".git"
    git_dir.mkdir()
    return temp_dir


@pytest.fixture
def fake_runner():
    """Empty FakeRunner; tests fill in responses."""
    return FakeRunner()


@pytest.fixture
def sample_file_diff():
    """Unstaged diff of one file with two hunks."""
    return """diff --git a/src/app.py b/src/app.py
index 1234567..abcdefg 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,4 @@ import os
 import os
+import sys
 
 def main():
@@ -10,3 +11,4 @@ def main():
     a = 1
-    b = 2
+    b = 3
+    c = 4
     return a
"""


@pytest.fixture
def sample_multi_file_diff():
    """Diff touching a renamed file, a new file and a binary file."""
    return """diff --git a/old_name.py b/new_name.py
similarity index 90%
rename from old_name.py
rename to new_name.py
index 1111111..2222222 100644
--- a/old_name.py
+++ b/new_name.py
@@ -1,2 +1,2 @@
-x = 1
+x = 2
 y = 3
diff --git a/created.txt b/created.txt
new file mode 100644
index 0000000..3333333
--- /dev/null
+++ b/created.txt
@@ -0,0 +1,2 @@
+hello
+world
diff --git a/logo.png b/logo.png
index 4444444..5555555 100644
Binary files a/logo.png and b/logo.png differ
"""


@pytest.fixture
def mock_git_commands(mocker):
    """Mock subprocess.run for git commands."""
    return mocker.patch("subprocess.run")


@pytest.fixture
def runner_factory():
    """Build a FakeRunner from a response table."""
    return FakeRunner


@pytest.fixture
def record():
    """Join fields into one separator-delimited record."""
    return make_record
