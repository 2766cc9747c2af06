"""Tests for gitscribe.validation module."""

import pytest

from gitscribe.config import ConfigInvalid, EffectiveConfig
from gitscribe.validation import DEFAULT_BACKEND_COMMAND, HookSettings, validate_config


def _validate(data: dict) -> HookSettings:
    return validate_config(EffectiveConfig(data))


class TestPromptTemplateChecks:
    """Tests for the prompt_template checks."""

    def test_missing_template_fails(self):
        """Test that a config without a template is invalid."""
        with pytest.raises(ConfigInvalid, match="prompt_template"):
            _validate({"enabled": True})

    def test_null_template_fails(self):
        """Test that a null template counts as missing."""
        with pytest.raises(ConfigInvalid, match="prompt_template"):
            _validate({"prompt_template": None})

    def test_empty_template_fails(self):
        """Test that an empty template is invalid."""
        with pytest.raises(ConfigInvalid, match="empty"):
            _validate({"prompt_template": "   "})

    def test_template_without_diff_fails(self):
        """Test that a template lacking {diff} is invalid."""
        with pytest.raises(ConfigInvalid, match=r"\{diff\}"):
            _validate({"prompt_template": "Write a message for {repo_name}"})

    def test_non_string_template_fails(self):
        """Test that a non-string template is invalid."""
        with pytest.raises(ConfigInvalid, match="prompt_template"):
            _validate({"prompt_template": ["{diff}"]})

    def test_template_error_reported_before_other_errors(self):
        """Test that the template is checked first."""
        with pytest.raises(ConfigInvalid, match="prompt_template"):
            _validate({"prompt_template": "", "enabled": "maybe"})

    @pytest.mark.parametrize("template", ["{diff}", "Diff:\\n{diff}", "{repo_name} {diff} {unknown}"])
    def test_any_template_with_diff_passes(self, template):
        """Test that any non-empty template containing {diff} is valid."""
        assert _validate({"prompt_template": template}).prompt_template == template


class TestOptionalKeys:
    """Tests for defaults and types of optional keys."""

    def test_defaults(self):
        """Test the defaults of every optional key."""
        settings = _validate({"prompt_template": "{diff}"})
        assert settings.enabled is True
        assert settings.message_generation_enabled is True
        assert settings.max_subject_length == 50
        assert settings.max_body_line_length == 72
        assert settings.excluded_repositories == ()
        assert settings.skip_patterns == ()
        assert settings.file_ignore_patterns == ()
        assert settings.backend_command == DEFAULT_BACKEND_COMMAND
        assert settings.backend_timeout == 60

    def test_null_values_use_defaults(self):
        """Test that explicit nulls fall back to defaults."""
        settings = _validate({"prompt_template": "{diff}", "enabled": None, "skip_patterns": None})
        assert settings.enabled is True
        assert settings.skip_patterns == ()

    def test_values_are_read(self):
        """Test that configured values are used."""
        settings = _validate({
            "prompt_template": "{diff}",
            "enabled": False,
            "max_subject_length": 60,
            "excluded_repositories": ["secret"],
            "file_ignore_patterns": ["*.lock"],
            "backend": {"command": ["llm", "--model", "x"], "timeout": 15},
        })
        assert settings.enabled is False
        assert settings.max_subject_length == 60
        assert settings.excluded_repositories == ("secret",)
        assert settings.file_ignore_patterns == ("*.lock",)
        assert settings.backend_command == ("llm", "--model", "x")
        assert settings.backend_timeout == 15

    def test_backend_command_string_is_split(self):
        """Test that a string command is split shell-style."""
        settings = _validate({"prompt_template": "{diff}", "backend": {"command": "llm -m 'gpt 4'"}})
        assert settings.backend_command == ("llm", "-m", "gpt 4")

    def test_empty_backend_command_fails(self):
        """Test that an empty backend command is invalid."""
        with pytest.raises(ConfigInvalid, match="backend.command"):
            _validate({"prompt_template": "{diff}", "backend": {"command": ""}})

    @pytest.mark.parametrize(
        "key,value",
        [
            ("enabled", "yes"),
            ("message_generation_enabled", 1),
            ("max_subject_length", "50"),
            ("max_body_line_length", True),
            ("max_subject_length", 0),
            ("skip_patterns", "^WIP"),
            ("file_ignore_patterns", [1, 2]),
        ],
    )
    def test_wrong_types_fail_closed(self, key, value):
        """Test that mistyped optional keys are rejected."""
        with pytest.raises(ConfigInvalid, match=key):
            _validate({"prompt_template": "{diff}", key: value})

    def test_optional_keys_read_through_typed_accessors(self, mocker):
        """Test that optional keys are type-checked by the config accessors."""
        spy_bool = mocker.spy(EffectiveConfig, "get_bool")
        spy_int = mocker.spy(EffectiveConfig, "get_int")
        spy_list = mocker.spy(EffectiveConfig, "get_str_list")

        _validate({"prompt_template": "{diff}"})

        assert {c.args[1] for c in spy_bool.call_args_list} == {"enabled", "message_generation_enabled"}
        assert {c.args[1] for c in spy_int.call_args_list} == {
            "max_subject_length",
            "max_body_line_length",
            "backend.timeout",
        }
        assert "backend.command" in {c.args[1] for c in spy_list.call_args_list}

    def test_backend_timeout_rejects_bool(self):
        """Test that a boolean timeout is not taken for an integer."""
        with pytest.raises(ConfigInvalid, match="backend.timeout"):
            _validate({"prompt_template": "{diff}", "backend": {"timeout": True}})

    def test_settings_are_frozen(self):
        """Test that the settings cannot be modified."""
        settings = _validate({"prompt_template": "{diff}"})
        with pytest.raises(Exception):
            settings.enabled = False
