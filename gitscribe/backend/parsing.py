"""Extraction of the commit message from raw backend output.

The prompt asks the backend to put the message inside a fenced block:

    Here is your commit message:
    ```
    fix: correct off-by-one in pager
    ```

Only the first block counts; commentary around it is ignored.
"""

from gitscribe.backend.exceptions import NoCommitBlockFound

FENCE = "```"
DIAGNOSTIC_LINES = 20


def _is_fence(line: str) -> bool:
    return line.strip() == FENCE


def _trim_blank_lines(lines: list[str]) -> list[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def parse_commit_message(raw: str) -> str:
    """Extract the commit message from backend output.

    Args:
        raw: The raw backend output.

    Returns:
        The text between the first pair of fence lines, without leading or
        trailing blank lines.

    Raises:
        NoCommitBlockFound: If there is no opening fence, no closing fence, or
            the block is empty.
    """
    lines = raw.splitlines()

    start = next((i for i, line in enumerate(lines) if _is_fence(line)), None)
    if start is None:
        raise NoCommitBlockFound("No fenced commit message block found in backend output", raw=raw)

    end = next((i for i in range(start + 1, len(lines)) if _is_fence(lines[i])), None)
    if end is None:
        raise NoCommitBlockFound("Commit message block is not terminated", raw=raw)

    body = _trim_blank_lines(lines[start + 1:end])
    if not body:
        raise NoCommitBlockFound("Commit message block is empty", raw=raw)

    return "\n".join(line.rstrip() for line in body)


def head_lines(text: str, limit: int = DIAGNOSTIC_LINES) -> str:
    """Return at most the first ``limit`` lines of ``text``."""
    lines = text.splitlines()
    excerpt = "\n".join(lines[:limit])
    if len(lines) > limit:
        excerpt += f"\n... ({len(lines) - limit} more lines)"
    return excerpt
