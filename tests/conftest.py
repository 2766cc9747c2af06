"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest
import yaml

from gitscribe.backend import BackendResult, TextGenerationBackend


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_repo_root(temp_dir):
    """Create a mock git repository root directory."""
    repo = temp_dir / "myrepo"
    (repo / ".git").mkdir(parents=True)
    return repo


@pytest.fixture
def write_global_config(temp_dir):
    """Write a global config.yaml and return its path."""

    def _write(data) -> Path:
        path = temp_dir / "home" / ".gitscribe" / "config.yaml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(data if isinstance(data, str) else yaml.dump(data))
        return path

    return _write


@pytest.fixture
def write_local_config(mock_repo_root):
    """Write a repository .gitscribe/config.yaml and return its path."""

    def _write(data) -> Path:
        path = mock_repo_root / ".gitscribe" / "config.yaml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(data if isinstance(data, str) else yaml.dump(data))
        return path

    return _write


@pytest.fixture
def sample_diff():
    """Staged diff touching README.md, src/main.go and dist/bundle.js."""
    return """diff --git a/README.md b/README.md
index 1234567..abcdefg 100644
--- a/README.md
+++ b/README.md
@@ -1,3 +1,4 @@
 # Project
+New line in readme

 Usage
diff --git a/src/main.go b/src/main.go
index 2345678..bcdefgh 100644
--- a/src/main.go
+++ b/src/main.go
@@ -10,7 +10,7 @@ func main() {
-	for i := 0; i <= len(items); i++ {
+	for i := 0; i < len(items); i++ {
 		fmt.Println(items[i])
 	}
 }
diff --git a/dist/bundle.js b/dist/bundle.js
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/dist/bundle.js
@@ -0,0 +1 @@
+console.log("{repo_name}");
"""


@pytest.fixture
def sample_backend_output():
    """Backend output with commentary around one fenced block."""
    return """Here is a commit message for your change:

```

fix: correct off-by-one

Loop over items with < instead of <=.

```

Let me know if you want a different style."""


class FakeBackend(TextGenerationBackend):
    """Backend that records prompts and returns a canned result."""

    def __init__(self, output: str = "", exit_code: int = 0, available: bool = True):
        self.output = output
        self.exit_code = exit_code
        self.available = available
        self.prompts: list[str] = []

    def is_available(self) -> bool:
        return self.available

    def invoke(self, prompt: str) -> BackendResult:
        self.prompts.append(prompt)
        return BackendResult(output=self.output, exit_code=self.exit_code)


@pytest.fixture
def fake_backend():
    """A FakeBackend answering with a single fenced commit message."""
    return FakeBackend(output="Sure:\n```\nfix: correct off-by-one\n```\n")


@pytest.fixture
def make_backend():
    """Factory for FakeBackend instances."""
    return FakeBackend
