"""Configuration loading for gitscribe.

Two YAML documents are merged into one effective configuration:
- ~/.gitscribe/config.yaml: global settings (required, holds the prompt template)
- <repo>/.gitscribe/config.yaml: per-repository overrides (optional)

The local document wins key for key; nested mappings are merged recursively.
"""

import copy
from pathlib import Path
from collections.abc import Mapping
from typing import Any, Optional

import yaml

from gitscribe import output


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigMissing(ConfigError):
    """Raised when the global configuration file does not exist."""

    pass


class ConfigParseError(ConfigError):
    """Raised when a configuration document is not valid YAML mapping data."""

    pass


class ConfigInvalid(ConfigError):
    """Raised when the effective configuration violates its schema."""

    pass


_CONFIG_DIR = Path.home() / ".gitscribe"

LOCAL_CONFIG_DIR = ".gitscribe"
CONFIG_FILE_NAME = "config.yaml"

_MISSING = object()


def get_global_config_path() -> Path:
    """Get path to the global config file.

    Returns:
        Path to ~/.gitscribe/config.yaml
    """
    return _CONFIG_DIR / CONFIG_FILE_NAME


def get_local_config_path(repo_root: Path) -> Path:
    """Get path to the repository config file.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to <repo_root>/.gitscribe/config.yaml
    """
    return Path(repo_root) / LOCAL_CONFIG_DIR / CONFIG_FILE_NAME


def _parse_document(path: Path) -> dict:
    """Parse a YAML file that must hold a mapping.

    An empty file parses to an empty mapping.

    Raises:
        ConfigParseError: If the file cannot be read or is not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(f"Failed to parse {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(
            f"Failed to parse {path}: expected a mapping at the top level, "
            f"got {type(data).__name__}"
        )
    return data


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict:
    """Merge ``override`` over ``base`` without mutating either.

    Keys present in both take the override value, except that two mappings
    are merged recursively. Lists and scalars are replaced wholesale.

    Args:
        base: The lower-precedence document (global).
        override: The higher-precedence document (local).

    Returns:
        A new merged dictionary.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return _FrozenMapping({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


class _FrozenMapping(Mapping):
    """Read-only mapping used for nested configuration sections."""

    def __init__(self, data: dict):
        self._data = data

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __repr__(self):
        return f"{type(self).__name__}({self._data!r})"


class EffectiveConfig(_FrozenMapping):
    """The merged configuration for one hook run.

    Values are frozen on construction: nested mappings become read-only and
    lists become tuples.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        super().__init__({k: _freeze(v) for k, v in (data or {}).items()})

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``backend.timeout``.

        Returns ``default`` when any path segment is absent or the value is null.
        """
        node: Any = self
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return default if node is None else node

    def get_bool(self, key: str, default: bool) -> bool:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            return default
        if not isinstance(value, bool):
            raise ConfigInvalid(f"'{key}' must be true or false, got {value!r}")
        return value

    def get_int(self, key: str, default: int) -> int:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            return default
        # bool is an int subclass; `max_subject_length: yes` is a mistake
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigInvalid(f"'{key}' must be an integer, got {value!r}")
        return value

    def get_str(self, key: str, default: str) -> str:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            return default
        if not isinstance(value, str):
            raise ConfigInvalid(f"'{key}' must be a string, got {value!r}")
        return value

    def get_str_list(self, key: str, default: tuple = ()) -> list[str]:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            return list(default)
        if not isinstance(value, tuple) or not all(isinstance(v, str) for v in value):
            raise ConfigInvalid(f"'{key}' must be a list of strings, got {_thaw(value)!r}")
        return list(value)

    def to_dict(self) -> dict:
        """Return a mutable deep copy (for display and serialization)."""
        return _thaw(self)


def load_config(
    repo_root: Optional[Path] = None,
    global_path: Optional[Path] = None,
) -> EffectiveConfig:
    """Load and merge the global and repository configuration.

    Args:
        repo_root: Repository root to look for a local config in. When None,
            only the global document is used.
        global_path: Override for the global config location.

    Returns:
        The effective configuration.

    Raises:
        ConfigMissing: If the global config file does not exist.
        ConfigParseError: If the global config file cannot be parsed.
    """
    global_path = Path(global_path) if global_path else get_global_config_path()

    if not global_path.exists():
        raise ConfigMissing(f"Global configuration not found: {global_path}")

    merged = _parse_document(global_path)

    if repo_root is not None:
        local_path = get_local_config_path(repo_root)
        if local_path.exists():
            try:
                local = _parse_document(local_path)
            except ConfigParseError as e:
                output.warn(f"{e}; using global configuration only")
            else:
                merged = deep_merge(merged, local)

    return EffectiveConfig(merged)
