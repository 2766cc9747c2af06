"""The prepare-commit-msg hook.

``HookOrchestrator`` runs a fixed sequence of states. Each state either lets
the run continue or ends it with a ``HookResult``; the state that ended the run
is recorded so callers (and tests) can tell every early exit apart.

Exit codes: 0 when the hook skipped or wrote a message, 1 on a fatal error
(missing or invalid configuration, backend failure).
"""

import os
import re
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional

from gitscribe import output
from gitscribe.backend import (
    BackendInvocationFailure,
    BackendUnavailable,
    NoCommitBlockFound,
    TextGenerationBackend,
    generate_commit_message,
    get_backend,
    head_lines,
)
from gitscribe.config import ConfigError, load_config
from gitscribe.context import collect_project_context
from gitscribe.git import (
    GitError,
    filter_diff,
    get_author_identity,
    get_repo_name,
    get_repo_root,
    get_staged_diff,
    is_rebase_in_progress,
)
from gitscribe.prompt import build_prompt_variables, render_prompt
from gitscribe.validation import HookSettings, validate_config

# prepare-commit-msg sources that still get a generated message
PROCEEDING_SOURCES = ("", "message")

# `git commit -v` puts the staged diff below this line, uncommented
SCISSORS_LINE = "------------------------ >8 ------------------------"

EXIT_OK = 0
EXIT_FATAL = 1


class HookState(str, Enum):
    """Hook states, in the order they run."""

    CHECK_INVOCATION_SOURCE = "check_invocation_source"
    CHECK_REBASE_IN_PROGRESS = "check_rebase_in_progress"
    LOAD_AND_VALIDATE_CONFIG = "load_and_validate_config"
    CHECK_GLOBAL_ENABLE = "check_global_enable"
    CHECK_REPO_EXCLUDED = "check_repo_excluded"
    CHECK_BACKEND_AVAILABLE = "check_backend_available"
    CHECK_GENERATION_ENABLED = "check_generation_enabled"
    OBTAIN_STAGED_DIFF = "obtain_staged_diff"
    FILTER_DIFF = "filter_diff"
    CHECK_EXISTING_MESSAGE_SKIP_PATTERN = "check_existing_message_skip_pattern"
    GENERATE_MESSAGE = "generate_message"


@dataclass
class HookResult:
    """Outcome of a hook run."""

    state: HookState
    exit_code: int
    reason: str = ""
    message: Optional[str] = None

    @property
    def wrote_message(self) -> bool:
        return self.message is not None


def _compile_skip_pattern(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        output.warn(f"Skip pattern {pattern!r} is not a valid regex ({e}); matching it literally")
        return re.compile(re.escape(pattern))


def find_skip_pattern(message: str, patterns: Iterable[str]) -> Optional[str]:
    """Return the first skip pattern found in ``message``, or None.

    Patterns are unanchored, case-sensitive regular expressions searched
    anywhere in the message, so a plain word acts as a substring test and
    "^Merge" only matches at the start. A pattern that is not a valid regex is
    matched as a literal substring.
    """
    for pattern in patterns:
        if _compile_skip_pattern(pattern).search(message):
            return pattern
    return None


def read_existing_message(message_file: Path) -> str:
    """Read the draft message git prepared, without comment lines.

    Everything from the scissors line on is dropped, so the verbose diff
    appended by `git commit -v` is not taken for the message.
    """
    try:
        text = Path(message_file).read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return ""
    lines = []
    for line in text.splitlines():
        if line.startswith("#"):
            if SCISSORS_LINE in line:
                break
            continue
        lines.append(line)
    return "\n".join(lines).strip()


def write_commit_message(message_file: Path, message: str) -> None:
    """Atomically replace the commit message file.

    The message is written to a temporary file next to the target and moved
    over it; the temporary file never outlives a failed write.
    """
    message_file = Path(message_file)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{message_file.name}.", suffix=".tmp", dir=message_file.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(message)
        os.replace(tmp_name, message_file)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class HookOrchestrator:
    """Decide whether to generate a commit message, and generate it.

    Args:
        message_file: Path of the commit message file git passed in.
        source: The commit message source git passed in ("", "message",
            "template", "merge", "squash", "commit"); None is treated as "".
        backend: Backend to use instead of the configured command.
        repo_root: Repository root (defaults to the current repository).
        global_config_path: Override for ~/.gitscribe/config.yaml.
    """

    def __init__(
        self,
        message_file: Path,
        source: Optional[str] = None,
        backend: Optional[TextGenerationBackend] = None,
        repo_root: Optional[Path] = None,
        global_config_path: Optional[Path] = None,
    ):
        self.message_file = Path(message_file)
        self.source = source or ""
        self.backend = backend
        self.global_config_path = global_config_path
        self._repo_root = Path(repo_root) if repo_root is not None else None
        self.settings: Optional[HookSettings] = None
        self.diff = ""
        self.state = HookState.CHECK_INVOCATION_SOURCE

    @property
    def repo_root(self) -> Path:
        if self._repo_root is None:
            self._repo_root = get_repo_root()
        return self._repo_root

    def _steps(self) -> list[tuple[HookState, Callable[[], Optional[HookResult]]]]:
        return [
            (HookState.CHECK_INVOCATION_SOURCE, self._check_invocation_source),
            (HookState.CHECK_REBASE_IN_PROGRESS, self._check_rebase_in_progress),
            (HookState.LOAD_AND_VALIDATE_CONFIG, self._load_and_validate_config),
            (HookState.CHECK_GLOBAL_ENABLE, self._check_global_enable),
            (HookState.CHECK_REPO_EXCLUDED, self._check_repo_excluded),
            (HookState.CHECK_BACKEND_AVAILABLE, self._check_backend_available),
            (HookState.CHECK_GENERATION_ENABLED, self._check_generation_enabled),
            (HookState.OBTAIN_STAGED_DIFF, self._obtain_staged_diff),
            (HookState.FILTER_DIFF, self._filter_diff),
            (HookState.CHECK_EXISTING_MESSAGE_SKIP_PATTERN, self._check_skip_patterns),
            (HookState.GENERATE_MESSAGE, self._generate_message),
        ]

    def run(self) -> HookResult:
        """Run every state in order until one ends the run."""
        for state, step in self._steps():
            self.state = state
            try:
                result = step()
            except GitError as e:
                # Never block a commit because repository introspection failed
                output.warn(str(e))
                return self._skip(f"git error: {e}")
            if result is not None:
                return result
        raise AssertionError("generate_message always ends the run")

    def _skip(self, reason: str) -> HookResult:
        return HookResult(state=self.state, exit_code=EXIT_OK, reason=reason)

    def _fail(self, reason: str) -> HookResult:
        output.error(reason)
        return HookResult(state=self.state, exit_code=EXIT_FATAL, reason=reason)

    def _check_invocation_source(self) -> Optional[HookResult]:
        if self.source not in PROCEEDING_SOURCES:
            return self._skip(f"commit source is {self.source!r}")
        return None

    def _check_rebase_in_progress(self) -> Optional[HookResult]:
        if is_rebase_in_progress(self.repo_root):
            return self._skip("rebase in progress")
        return None

    def _load_and_validate_config(self) -> Optional[HookResult]:
        try:
            config = load_config(self.repo_root, global_path=self.global_config_path)
            self.settings = validate_config(config)
        except ConfigError as e:
            return self._fail(f"Configuration error: {e}")
        return None

    def _check_global_enable(self) -> Optional[HookResult]:
        if not self.settings.enabled:
            return self._skip("hook disabled")
        return None

    def _check_repo_excluded(self) -> Optional[HookResult]:
        name = get_repo_name(self.repo_root)
        if name in self.settings.excluded_repositories:
            return self._skip(f"repository {name!r} is excluded")
        return None

    def _check_backend_available(self) -> Optional[HookResult]:
        if self.backend is None:
            self.backend = get_backend(self.settings, self.repo_root)
        if not self.backend.is_available():
            output.warn("Text-generation backend not found; leaving the commit message alone")
            return self._skip("backend unavailable")
        return None

    def _check_generation_enabled(self) -> Optional[HookResult]:
        if not self.settings.message_generation_enabled:
            return self._skip("message generation disabled")
        return None

    def _obtain_staged_diff(self) -> Optional[HookResult]:
        self.diff = get_staged_diff(self.repo_root)
        if not self.diff.strip():
            return self._skip("nothing staged")
        return None

    def _filter_diff(self) -> Optional[HookResult]:
        self.diff = filter_diff(self.diff, self.settings.file_ignore_patterns)
        if not self.diff.strip():
            return self._skip("only ignored files staged")
        return None

    def _check_skip_patterns(self) -> Optional[HookResult]:
        existing = read_existing_message(self.message_file)
        if not existing:
            return None
        pattern = find_skip_pattern(existing, self.settings.skip_patterns)
        if pattern is not None:
            return self._skip(f"existing message matches skip pattern {pattern!r}")
        return None

    def _generate_message(self) -> HookResult:
        author_name, author_email = get_author_identity(self.repo_root)
        variables = build_prompt_variables(
            repo_name=get_repo_name(self.repo_root),
            max_subject_length=self.settings.max_subject_length,
            max_body_length=self.settings.max_body_line_length,
            author_name=author_name,
            author_email=author_email,
            project_context=collect_project_context(self.repo_root),
            diff=self.diff,
        )
        prompt = render_prompt(self.settings.prompt_template, variables)

        try:
            message = generate_commit_message(self.backend, prompt)
        except BackendUnavailable as e:
            output.warn(str(e))
            return self._skip("backend unavailable")
        except NoCommitBlockFound as e:
            result = self._fail(f"Could not generate commit message: {e}")
            self._show_backend_output(e.raw)
            return result
        except BackendInvocationFailure as e:
            result = self._fail(f"Could not generate commit message: {e}")
            self._show_backend_output(e.output)
            return result

        try:
            write_commit_message(self.message_file, message)
        except OSError as e:
            return self._fail(f"Could not write {self.message_file}: {e}")

        output.info("Generated commit message")
        return HookResult(state=self.state, exit_code=EXIT_OK, reason="message written", message=message)

    @staticmethod
    def _show_backend_output(raw: str) -> None:
        if not raw.strip():
            output.detail("(no output)")
            return
        output.info("Backend output (first lines):")
        output.detail(head_lines(raw))


def run_hook(
    message_file: Path,
    source: Optional[str] = None,
    backend: Optional[TextGenerationBackend] = None,
    repo_root: Optional[Path] = None,
    global_config_path: Optional[Path] = None,
) -> int:
    """Run the hook and return its exit code."""
    orchestrator = HookOrchestrator(
        message_file,
        source,
        backend=backend,
        repo_root=repo_root,
        global_config_path=global_config_path,
    )
    return orchestrator.run().exit_code
