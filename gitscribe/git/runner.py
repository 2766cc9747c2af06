"""Git command runner.

Contains:
- run_git_command: Run a git command and return its output
- get_repo_root: Get the root directory of the current git repository
- get_git_dir: Get the .git directory of the current repository
"""

import subprocess
from pathlib import Path
from typing import Optional

from gitscribe.git.exceptions import GitError


def run_git_command(args: list[str], cwd: Optional[Path] = None, strip: bool = True) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in (defaults to the current directory).
        strip: Strip surrounding whitespace from stdout.

    Returns:
        The stdout of the git command.

    Raises:
        GitError: If the command fails.
    """
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            check=True,
            cwd=cwd,
        )
        return result.stdout.strip() if strip else result.stdout
    except subprocess.CalledProcessError as e:
        raise GitError(f"Git command failed: git {' '.join(args)}\n{(e.stderr or '').strip()}")
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Get the root directory of the current git repository.

    Raises:
        GitError: If not in a git repository.
    """
    try:
        return Path(run_git_command(["rev-parse", "--show-toplevel"], cwd=cwd))
    except GitError:
        raise GitError("Not in a git repository.")


def get_git_dir(cwd: Optional[Path] = None) -> Path:
    """Get the git directory (usually <root>/.git, elsewhere for worktrees).

    Raises:
        GitError: If not in a git repository.
    """
    git_dir = Path(run_git_command(["rev-parse", "--git-dir"], cwd=cwd))
    if not git_dir.is_absolute() and cwd is not None:
        git_dir = Path(cwd) / git_dir
    return git_dir
