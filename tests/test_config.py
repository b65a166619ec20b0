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

"""Tests for configuration resolution."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from paramdeck.config import DEFAULT_REGIONS, load_config, profiles_from_env
from paramdeck.errors import ConfigError

pytestmark = pytest.mark.core


class TestProfilesFromEnv:
    """Tests for PARAMDECK_AWS_PROFILES parsing."""

    def test_unset_is_none(self) -> None:
        assert profiles_from_env({}) is None
        assert profiles_from_env({"PARAMDECK_AWS_PROFILES": ""}) is None

    def test_comma_separated_with_blanks(self) -> None:
        env = {"PARAMDECK_AWS_PROFILES": " dev, ,prod ,"}
        assert profiles_from_env(env) == ("dev", "prod")

    def test_only_separators_is_an_error(self) -> None:
        with pytest.raises(ConfigError, match="no valid profiles"):
            _ = profiles_from_env({"PARAMDECK_AWS_PROFILES": " , ,"})


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = load_config({}, env={"XDG_CONFIG_HOME": str(tmp_path)})
        assert config.profiles == ("default",)
        assert config.regions == DEFAULT_REGIONS
        assert config.recent_capacity == 5
        assert config.state_dir == tmp_path / ".paramdeck"
        assert config.resolved_log_file == tmp_path / ".paramdeck" / "paramdeck.log"
        assert not config.quoted_strings

    def test_aws_profile_is_the_fallback(self, tmp_path: Path) -> None:
        config = load_config({"state_dir": str(tmp_path)}, env={"AWS_PROFILE": "sso"})
        assert config.profiles == ("sso",)

    def test_environment_beats_the_file(self, tmp_path: Path) -> None:
        config = load_config(
            {"profiles": ["file"], "state_dir": "/from/file", "quoted_strings": True},
            env={
                "PARAMDECK_AWS_PROFILES": "dev,prod",
                "PARAMDECK_STATE_DIR": str(tmp_path),
                "PARAMDECK_QUOTED_STRINGS": "off",
            },
        )
        assert config.profiles == ("dev", "prod")
        assert config.state_dir == tmp_path
        assert not config.quoted_strings

    def test_cli_overrides_win_and_none_is_ignored(self, tmp_path: Path) -> None:
        overrides = SimpleNamespace(
            profiles="cli", state_dir=tmp_path, quoted_strings=None, log_level="DEBUG"
        )
        config = load_config(
            {"quoted_strings": True},
            overrides,
            env={"PARAMDECK_AWS_PROFILES": "env"},
        )
        assert config.profiles == ("cli",)
        assert config.state_dir == tmp_path
        assert config.quoted_strings
        assert config.log_level == "DEBUG"

    def test_toml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        _ = path.write_text(
            'profiles = ["dev", "prod"]\n'
            'regions = ["eu-west-1"]\n'
            "recent_capacity = 3\n"
            f'state_dir = "{tmp_path.as_posix()}"\n'
        )
        config = load_config(path, env={})
        assert config.profiles == ("dev", "prod")
        assert config.regions == ("eu-west-1",)
        assert config.recent_capacity == 3

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        _ = path.write_text(
            f"profiles: dev, stage\nstate_dir: {tmp_path.as_posix()}\njson_logs: true\n"
        )
        config = load_config(path, env={})
        assert config.profiles == ("dev", "stage")
        assert config.json_logs

    def test_empty_yaml_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        _ = path.write_text("")
        config = load_config(path, env={"PARAMDECK_STATE_DIR": str(tmp_path)})
        assert config.profiles == ("default",)

    @pytest.mark.parametrize(
        ("data", "message"),
        [
            ({"profiles": [1, 2]}, "only strings"),
            ({"profiles": 3}, "string or a sequence"),
            ({"recent_capacity": 0}, "between 1 and 5"),
            ({"recent_capacity": 6}, "between 1 and 5"),
            ({"recent_capacity": True}, "integer"),
            ({"quoted_strings": 2}, "boolean"),
            ({"state_dir": 5}, "path-like"),
            ({"log_level": 10}, "log_level"),
        ],
    )
    def test_invalid_values(self, data: dict[str, object], message: str) -> None:
        with pytest.raises(ConfigError, match=message):
            _ = load_config(data, env={"XDG_CONFIG_HOME": "/tmp/paramdeck"})

    def test_missing_explicit_file_is_an_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            _ = load_config(tmp_path / "missing.toml", env={})

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "config.ini"
        _ = path.write_text("[paramdeck]\n")
        with pytest.raises(ConfigError, match="Unsupported"):
            _ = load_config(path, env={})

    def test_unparseable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        _ = path.write_text("profiles = [\n")
        with pytest.raises(ConfigError, match="Could not parse"):
            _ = load_config(path, env={})

    def test_root_must_be_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        _ = path.write_text("- dev\n- prod\n")
        with pytest.raises(ConfigError, match="mapping"):
            _ = load_config(path, env={})

    def test_only_separators_in_env_is_an_error(self) -> None:
        with pytest.raises(ConfigError):
            _ = load_config({}, env={"PARAMDECK_AWS_PROFILES": ","})
