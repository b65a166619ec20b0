# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Configuration resolution for the ``paramdeck`` executable.

Precedence, highest first: CLI overrides, environment, config file, defaults.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterable, Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_PATH = Path("~/.config/paramdeck/config.toml")

DEFAULT_REGIONS: tuple[str, ...] = (
    "eu-central-1",
    "us-east-1",
    "us-west-2",
    "ap-southeast-1",
    "ap-northeast-1",
    "eu-west-1",
    "us-west-1",
    "ap-south-1",
)
DEFAULT_RECENT_CAPACITY = 5
# Recent contexts are picked with the digit keys 1 through this bound.
MAX_RECENT_CAPACITY = 5

ENV_PROFILES = "PARAMDECK_AWS_PROFILES"
ENV_AWS_PROFILE = "AWS_PROFILE"
ENV_STATE_DIR = "PARAMDECK_STATE_DIR"
ENV_XDG_CONFIG_HOME = "XDG_CONFIG_HOME"
ENV_QUOTED_STRINGS = "PARAMDECK_QUOTED_STRINGS"

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_REGIONS",
    "MAX_RECENT_CAPACITY",
    "AppConfig",
    "load_config",
    "profiles_from_env",
]


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Resolved configuration for one paramdeck session."""

    profiles: tuple[str, ...]
    state_dir: Path
    regions: tuple[str, ...] = DEFAULT_REGIONS
    recent_capacity: int = DEFAULT_RECENT_CAPACITY
    quoted_strings: bool = False
    log_level: str | None = None
    json_logs: bool = False
    log_file: Path | None = None

    @property
    def resolved_log_file(self) -> Path:
        """Log destination, defaulting to a file inside the state directory."""
        return self.log_file if self.log_file is not None else self.state_dir / "paramdeck.log"


def load_config(
    path: Path | Mapping[str, Any] | None,
    cli_overrides: object | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load and validate the paramdeck configuration.

    Parameters
    ----------
    path:
        Path to a TOML or YAML configuration file. ``None`` falls back to
        ``~/.config/paramdeck/config.toml``, which may be absent. Tests may
        pass an in-memory mapping to skip filesystem I/O.
    cli_overrides:
        Mapping or namespace whose non-``None`` values win over every other
        source. Keys mirror ``AppConfig``'s field names.
    env:
        Optional environment mapping. Defaults to :data:`os.environ`.
    """

    env_map = dict(os.environ if env is None else env)

    if isinstance(path, Mapping):
        config_data: dict[str, object] = dict(path)
    else:
        config_path = path if path is not None else DEFAULT_CONFIG_PATH.expanduser()
        config_data = _load_config_file(config_path)

    config = _apply_environment_overrides(config=config_data, env=env_map)
    config = _apply_cli_overrides(config=config, overrides=cli_overrides)
    return _build_config(config=config, env=env_map)


def profiles_from_env(env: Mapping[str, str]) -> tuple[str, ...] | None:
    """Return profiles named by ``PARAMDECK_AWS_PROFILES``, or ``None`` when unset.

    An explicitly set variable holding only separators is rejected.
    """

    raw = env.get(ENV_PROFILES, "")
    if not raw:
        return None
    profiles = _split_csv(raw)
    if not profiles:
        msg = f"no valid profiles found in {ENV_PROFILES}"
        raise ConfigError(msg)
    return profiles


def _load_config_file(path: Path) -> dict[str, object]:
    if not path.exists():
        if path == DEFAULT_CONFIG_PATH.expanduser():
            return {}
        msg = f"Configuration file not found: {path}"
        raise ConfigError(msg)

    suffix = path.suffix.lower()
    data: object
    try:
        if suffix == ".toml" or not suffix:
            with path.open("rb") as handle:
                data = tomllib.load(handle)
        elif suffix in {".yaml", ".yml"}:
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        else:
            msg = f"Unsupported configuration format: {path.suffix}"
            raise ConfigError(msg)
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        msg = f"Could not parse configuration file {path}: {exc}"
        raise ConfigError(msg) from exc

    if not isinstance(data, MutableMapping):
        msg = "Configuration file must contain a mapping at the root."
        raise ConfigError(msg)

    mapping = cast(MutableMapping[object, object], data)
    typed_data: dict[str, object] = {}
    for key, value in mapping.items():
        if not isinstance(key, str):
            msg = f"Configuration keys must be strings (got {key!r})."
            raise ConfigError(msg)
        typed_data[key] = value
    return typed_data


def _apply_environment_overrides(
    *, config: dict[str, object], env: Mapping[str, str]
) -> dict[str, object]:
    profiles = profiles_from_env(env)
    if profiles is not None:
        config["profiles"] = profiles
    if ENV_STATE_DIR in env:
        config["state_dir"] = env[ENV_STATE_DIR]
    if ENV_QUOTED_STRINGS in env:
        config["quoted_strings"] = _coerce_flag(env[ENV_QUOTED_STRINGS])
    return config


def _apply_cli_overrides(
    *, config: dict[str, object], overrides: object | None
) -> dict[str, object]:
    if overrides is None:
        return config

    materialised: dict[str, object]
    if isinstance(overrides, Mapping):
        materialised = dict(cast(Mapping[str, object], overrides))
    elif hasattr(overrides, "__dict__"):
        materialised = {key: getattr(overrides, key) for key in vars(overrides)}
    else:
        msg = "CLI overrides must be a mapping or support attribute access."
        raise TypeError(msg)

    for key, value in materialised.items():
        if value is None:
            continue
        config[key] = value

    return config


def _build_config(*, config: Mapping[str, object], env: Mapping[str, str]) -> AppConfig:
    profiles = _coerce_str_tuple(config.get("profiles"), "profiles")
    if not profiles:
        profiles = (env.get(ENV_AWS_PROFILE) or "default",)

    regions = _coerce_str_tuple(config.get("regions"), "regions") or DEFAULT_REGIONS

    state_dir = _coerce_path(config.get("state_dir"), "state_dir")
    if state_dir is None:
        state_dir = _default_state_dir(env)

    recent_capacity = _coerce_capacity(config.get("recent_capacity"))
    log_level = config.get("log_level")
    if log_level is not None and not isinstance(log_level, str):
        msg = "log_level must be a string."
        raise ConfigError(msg)

    return AppConfig(
        profiles=profiles,
        state_dir=state_dir,
        regions=regions,
        recent_capacity=recent_capacity,
        quoted_strings=_coerce_bool(config.get("quoted_strings"), "quoted_strings"),
        log_level=log_level,
        json_logs=_coerce_bool(config.get("json_logs"), "json_logs"),
        log_file=_coerce_path(config.get("log_file"), "log_file"),
    )


def _default_state_dir(env: Mapping[str, str]) -> Path:
    config_home = env.get(ENV_XDG_CONFIG_HOME)
    if config_home:
        return Path(config_home) / ".paramdeck"
    return Path.home() / ".paramdeck"


def _coerce_path(value: object, field_name: str) -> Path | None:
    if value is None:
        return None
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    msg = f"{field_name} must be a path-like value."
    raise ConfigError(msg)


def _coerce_str_tuple(value: object, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return _split_csv(value)
    if isinstance(value, Iterable):
        result: list[str] = []
        for item in cast(Iterable[object], value):
            if not isinstance(item, str):
                msg = f"{field_name} must contain only strings."
                raise ConfigError(msg)
            stripped = item.strip()
            if stripped:
                result.append(stripped)
        return tuple(result)
    msg = f"{field_name} must be a string or a sequence of strings."
    raise ConfigError(msg)


def _split_csv(value: str) -> tuple[str, ...]:
    parts = [part.strip() for part in value.split(",")]
    return tuple(part for part in parts if part)


def _coerce_capacity(value: object) -> int:
    if value is None:
        return DEFAULT_RECENT_CAPACITY
    if isinstance(value, bool) or not isinstance(value, int):
        msg = "recent_capacity must be an integer."
        raise ConfigError(msg)
    if not 1 <= value <= MAX_RECENT_CAPACITY:
        msg = f"recent_capacity must be between 1 and {MAX_RECENT_CAPACITY}: {value}"
        raise ConfigError(msg)
    return value


def _coerce_bool(value: object, field_name: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _coerce_flag(value)
    msg = f"{field_name} must be a boolean."
    raise ConfigError(msg)


def _coerce_flag(value: str) -> bool:
    return value.strip().lower() not in {"", "0", "false", "off", "no"}
