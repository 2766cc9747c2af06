"""Prompt template rendering.

Templates reference a fixed set of placeholders:
{repo_name}, {max_subject_length}, {max_body_length}, {author_name},
{author_email}, {project_context}, {diff}.

Any other brace-delimited text is left alone, so templates may contain JSON
examples or code without escaping.
"""

import re
from typing import Any, Mapping

PLACEHOLDERS = (
    "repo_name",
    "max_subject_length",
    "max_body_length",
    "author_name",
    "author_email",
    "project_context",
    "diff",
)

_PLACEHOLDER_RE = re.compile(r"\{(" + "|".join(PLACEHOLDERS) + r")\}")


class PromptRenderError(KeyError):
    """Raised when the template uses a placeholder with no value supplied."""

    pass


def render_prompt(template: str, variables: Mapping[str, Any]) -> str:
    """Render a prompt template.

    Every recognized placeholder is replaced by its value in a single pass over
    the template; inserted values are never scanned again, so a diff that
    contains "{repo_name}" stays as written. Afterwards each literal "\\n"
    escape in the result becomes a newline.

    Args:
        template: The prompt template.
        variables: Placeholder name -> value. Values are converted with str().

    Returns:
        The rendered prompt.

    Raises:
        PromptRenderError: If the template uses a placeholder that has no value.
    """

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        if name not in variables or variables[name] is None:
            raise PromptRenderError(name)
        return str(variables[name])

    rendered = _PLACEHOLDER_RE.sub(substitute, template)
    return rendered.replace("\\n", "\n")


def build_prompt_variables(
    *,
    repo_name: str,
    max_subject_length: int,
    max_body_length: int,
    author_name: str,
    author_email: str,
    project_context: str,
    diff: str,
) -> dict[str, str]:
    """Collect the values for every recognized placeholder."""
    return {
        "repo_name": repo_name,
        "max_subject_length": str(max_subject_length),
        "max_body_length": str(max_body_length),
        "author_name": author_name,
        "author_email": author_email,
        "project_context": project_context,
        "diff": diff,
    }
