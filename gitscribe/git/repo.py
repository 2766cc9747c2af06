"""Repository state and metadata used by the hook.

Contains:
- is_rebase_in_progress: Check for an interactive or am-style rebase
- get_repo_name: Name of the repository (basename of its top level)
- get_author_identity: Configured user.name and user.email
- get_staged_diff: The full staged diff
"""

from pathlib import Path
from typing import Optional

from gitscribe.git.exceptions import GitError
from gitscribe.git.runner import get_git_dir, run_git_command

REBASE_MARKER_DIRS = ("rebase-merge", "rebase-apply")


def is_rebase_in_progress(repo_root: Optional[Path] = None) -> bool:
    """Check if a rebase is currently in progress.

    A rebase is in progress when .git/rebase-merge or .git/rebase-apply exists.

    Args:
        repo_root: The root directory of the git repository (optional).

    Returns:
        True if a rebase is in progress, False otherwise.
    """
    try:
        git_dir = get_git_dir(cwd=repo_root)
    except GitError:
        return False

    return any((git_dir / marker).is_dir() for marker in REBASE_MARKER_DIRS)


def get_repo_name(repo_root: Path) -> str:
    """Get the repository name used for excluded_repositories matching."""
    return Path(repo_root).resolve().name


def _get_config_value(key: str, repo_root: Optional[Path]) -> str:
    try:
        return run_git_command(["config", "--get", key], cwd=repo_root)
    except GitError:
        # `git config --get` exits 1 when the key is unset
        return ""


def get_author_identity(repo_root: Optional[Path] = None) -> tuple[str, str]:
    """Get the configured author name and email.

    Returns:
        (name, email); either is an empty string when unset.
    """
    return (
        _get_config_value("user.name", repo_root),
        _get_config_value("user.email", repo_root),
    )


def get_staged_diff(repo_root: Optional[Path] = None) -> str:
    """Get the staged diff.

    Returns:
        The unified diff of the index against HEAD, or "" if nothing is staged.

    Raises:
        GitError: If git fails.
    """
    return run_git_command(["diff", "--cached", "--no-color", "--no-ext-diff"], cwd=repo_root, strip=False)
