"""Load MirrorConfig from navmirror.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from navmirror._errors import ConfigError
from navmirror.config import MirrorConfig

_CONFIG_KEYS = frozenset({
    "base_url", "tree_endpoint", "ws_endpoint", "content_prefix", "home_document",
    "snapshot_attempts", "reconnect_initial_delay", "reconnect_max_delay",
    "request_timeout", "resync_on_reconnect", "resync_on_drift",
    "templates_dir", "output",
})

_PATH_KEYS = ("templates_dir", "output")


def load_config(root: Path, **overrides: object) -> MirrorConfig:
    """Load MirrorConfig from root, optionally merging navmirror.yaml.

    Looks for navmirror.yaml, navmirror.yml, or navmirror.toml in root. If
    found, loads and merges with overrides. Overrides whose value is ``None``
    are ignored so unset CLI flags do not mask file values.
    """
    file_config = _read_config_file(root)
    cli_config = {k: v for k, v in overrides.items() if v is not None}
    # File paths are relative to the config directory, CLI paths to the cwd
    for key in _PATH_KEYS:
        if key in file_config:
            value = Path(str(file_config[key]))
            file_config[key] = value if value.is_absolute() else root / value
        if key in cli_config:
            cli_config[key] = Path(str(cli_config[key]))
    merged = {**file_config, **cli_config}
    unknown = set(merged) - _CONFIG_KEYS
    if unknown:
        msg = f"Unknown config keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)
    return MirrorConfig(**merged)  # type: ignore[arg-type]


def _read_config_file(root: Path) -> dict[str, object]:
    """Read config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("navmirror.yaml", "navmirror.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "navmirror.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config."""
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping"
        raise ConfigError(msg)
    return _flatten_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config."""
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_section(data)


def _flatten_section(data: dict[str, object]) -> dict[str, object]:
    """Extract navmirror.* keys into top-level config."""
    result: dict[str, object] = {}
    section = data.get("navmirror")
    if isinstance(section, dict):
        result.update(section)
    for k, v in data.items():
        if k != "navmirror" and k in _CONFIG_KEYS:
            result[k] = v
    return result
