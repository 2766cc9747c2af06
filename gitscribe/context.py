"""Project documentation excerpts included in the prompt."""

from itertools import islice
from pathlib import Path

from gitscribe import output

# (file name, header label) in the order they appear in the prompt
CONTEXT_FILES = (
    ("README.md", "Project README"),
    ("CLAUDE.md", "Project instructions"),
)
MAX_CONTEXT_LINES = 100
LINE_PREFIX = "> "


def _read_excerpt(path: Path, max_lines: int) -> list[str]:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\r\n") for line in islice(f, max_lines)]


def collect_project_context(repo_root: Path, max_lines: int = MAX_CONTEXT_LINES) -> str:
    """Collect the opening lines of the project's documentation files.

    Each file found at the repository root contributes a labeled block of its
    first ``max_lines`` lines, every line prefixed with "> ". Blocks are
    separated by a blank line. Missing files are skipped and unreadable ones
    are skipped with a warning, so this never raises.

    Args:
        repo_root: The root directory of the git repository.
        max_lines: Maximum lines taken from each file.

    Returns:
        The context text, or "" if no file contributed.
    """
    blocks = []
    for name, label in CONTEXT_FILES:
        path = Path(repo_root) / name
        if not path.is_file():
            continue
        try:
            lines = _read_excerpt(path, max_lines)
        except OSError as e:
            output.warn(f"Could not read {path}: {e}")
            continue
        block = [f"{label} ({name}):"]
        block.extend(f"{LINE_PREFIX}{line}" for line in lines)
        blocks.append("\n".join(block))

    return "\n\n".join(blocks)
