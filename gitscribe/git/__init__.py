"""Git helpers for gitscribe.

This package provides:
- exceptions: GitError
- runner: run_git_command, get_repo_root, get_git_dir
- repo: is_rebase_in_progress, get_repo_name, get_author_identity, get_staged_diff
- diff: parse_unified_diff, glob_to_regex, filter_diff
"""

from gitscribe.git.exceptions import GitError

from gitscribe.git.runner import (
    run_git_command,
    get_repo_root,
    get_git_dir,
)

from gitscribe.git.repo import (
    is_rebase_in_progress,
    get_repo_name,
    get_author_identity,
    get_staged_diff,
)

from gitscribe.git.diff import (
    DiffSection,
    UnifiedDiff,
    parse_unified_diff,
    section_path,
    glob_to_regex,
    filter_sections,
    filter_diff,
)


__all__ = [
    "GitError",
    "run_git_command",
    "get_repo_root",
    "get_git_dir",
    "is_rebase_in_progress",
    "get_repo_name",
    "get_author_identity",
    "get_staged_diff",
    "DiffSection",
    "UnifiedDiff",
    "parse_unified_diff",
    "section_path",
    "glob_to_regex",
    "filter_sections",
    "filter_diff",
]
