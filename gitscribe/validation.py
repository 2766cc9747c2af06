"""Validation of the effective configuration.

The effective configuration is checked once, before anything else runs, and
turned into a frozen ``HookSettings`` model that the rest of the hook reads.
"""

import shlex

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr
from pydantic import ValidationError, field_validator

from gitscribe.config import ConfigInvalid, EffectiveConfig

DEFAULT_MAX_SUBJECT_LENGTH = 50
DEFAULT_MAX_BODY_LINE_LENGTH = 72
DEFAULT_BACKEND_COMMAND = ("claude", "-p")
DEFAULT_BACKEND_TIMEOUT = 60

# Model field -> dotted configuration key
_CONFIG_KEYS = {
    "prompt_template": "prompt_template",
    "enabled": "enabled",
    "message_generation_enabled": "message_generation_enabled",
    "max_subject_length": "max_subject_length",
    "max_body_line_length": "max_body_line_length",
    "excluded_repositories": "excluded_repositories",
    "skip_patterns": "skip_patterns",
    "file_ignore_patterns": "file_ignore_patterns",
    "backend_command": "backend.command",
    "backend_timeout": "backend.timeout",
}


def check_prompt_template(template: str) -> str:
    if not template.strip():
        raise ValueError("prompt_template cannot be empty")
    if "{diff}" not in template:
        raise ValueError("prompt_template must contain the {diff} placeholder")
    return template


class HookSettings(BaseModel):
    """Typed, validated view of the effective configuration.

    Attributes:
        prompt_template: Template for the backend prompt; must contain {diff}.
        enabled: Master switch for the hook.
        message_generation_enabled: Switch for the generation step alone.
        max_subject_length: Value for the {max_subject_length} placeholder.
        max_body_line_length: Value for the {max_body_length} placeholder.
        excluded_repositories: Repository names the hook never runs in.
        skip_patterns: Regexes; a matching pre-existing message is kept.
        file_ignore_patterns: Globs for files dropped from the diff.
        backend_command: Argument vector of the generation backend.
        backend_timeout: Seconds to wait for the backend.
    """

    model_config = ConfigDict(frozen=True)

    prompt_template: StrictStr
    enabled: StrictBool = True
    message_generation_enabled: StrictBool = True
    max_subject_length: StrictInt = Field(default=DEFAULT_MAX_SUBJECT_LENGTH, gt=0)
    max_body_line_length: StrictInt = Field(default=DEFAULT_MAX_BODY_LINE_LENGTH, gt=0)
    excluded_repositories: tuple[StrictStr, ...] = ()
    skip_patterns: tuple[StrictStr, ...] = ()
    file_ignore_patterns: tuple[StrictStr, ...] = ()
    backend_command: tuple[StrictStr, ...] = DEFAULT_BACKEND_COMMAND
    backend_timeout: StrictInt = Field(default=DEFAULT_BACKEND_TIMEOUT, gt=0)

    @field_validator("prompt_template")
    @classmethod
    def template_must_reference_diff(cls, v: str) -> str:
        """Ensure the template is non-empty and has a {diff} placeholder."""
        return check_prompt_template(v)

    @field_validator("backend_command", mode="before")
    @classmethod
    def split_command_string(cls, v):
        """Accept the backend command as a shell-style string or a list."""
        if isinstance(v, str):
            v = shlex.split(v)
        if not v:
            raise ValueError("backend command cannot be empty")
        return v


def _describe(error: dict) -> str:
    field = error["loc"][0] if error["loc"] else ""
    key = _CONFIG_KEYS.get(field, str(field))
    message = error["msg"]
    # pydantic prefixes messages raised from field validators
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"'{key}': {message}"


def _read_backend_command(config: EffectiveConfig) -> list[str] | str:
    if isinstance(config.get("backend.command"), str):
        return config.get_str("backend.command", "")
    return config.get_str_list("backend.command", DEFAULT_BACKEND_COMMAND)


def validate_config(config: EffectiveConfig) -> HookSettings:
    """Validate the effective configuration.

    The prompt template is checked first (present, non-empty, contains
    ``{diff}``). Every optional key is then read through the typed accessors
    of ``EffectiveConfig``, and the model applies the remaining constraints
    (positive lengths, non-empty backend command). Only the first violation
    is reported.

    Args:
        config: The effective configuration.

    Returns:
        The validated settings.

    Raises:
        ConfigInvalid: On the first violation found.
    """
    if config.get("prompt_template") is None:
        raise ConfigInvalid("'prompt_template' is required")
    template = config.get_str("prompt_template", "")
    try:
        check_prompt_template(template)
    except ValueError as e:
        raise ConfigInvalid(f"'prompt_template': {e}")

    data = {
        "prompt_template": template,
        "enabled": config.get_bool("enabled", True),
        "message_generation_enabled": config.get_bool("message_generation_enabled", True),
        "max_subject_length": config.get_int("max_subject_length", DEFAULT_MAX_SUBJECT_LENGTH),
        "max_body_line_length": config.get_int("max_body_line_length", DEFAULT_MAX_BODY_LINE_LENGTH),
        "excluded_repositories": config.get_str_list("excluded_repositories"),
        "skip_patterns": config.get_str_list("skip_patterns"),
        "file_ignore_patterns": config.get_str_list("file_ignore_patterns"),
        "backend_command": _read_backend_command(config),
        "backend_timeout": config.get_int("backend.timeout", DEFAULT_BACKEND_TIMEOUT),
    }

    try:
        return HookSettings(**data)
    except ValidationError as e:
        raise ConfigInvalid(_describe(e.errors()[0]))
