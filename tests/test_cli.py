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

"""Tests for the paramdeck command line entry point."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from paramdeck import cli
from paramdeck.config import AppConfig


@pytest.fixture(autouse=True)
def reset_logging_state() -> Iterator[None]:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        yield
    finally:
        for handler in root.handlers:
            if handler not in original_handlers:
                handler.close()
        root.handlers = original_handlers
        root.setLevel(original_level)


@pytest.fixture
def sessions(monkeypatch: pytest.MonkeyPatch) -> list[AppConfig]:
    """Replace the interactive session with a recorder."""
    started: list[AppConfig] = []

    def fake_run_session(config: AppConfig) -> int:
        started.append(config)
        return 0

    monkeypatch.setattr(cli, "run_session", fake_run_session)
    return started


def test_print_navigation(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--print-navigation"]) == 0
    output = capsys.readouterr().out
    assert output.startswith("stateDiagram-v2\n")
    assert "PARAM_LIST --> PARAM_DETAIL: view_parameter" in output


def test_flags_reach_the_session(
    tmp_path: Path, sessions: list[AppConfig], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("PARAMDECK_AWS_PROFILES", raising=False)
    config_file = tmp_path / "config.toml"
    _ = config_file.write_text('profiles = ["file"]\n')

    code = cli.main(
        [
            "--config",
            str(config_file),
            "--profiles",
            "dev,prod",
            "--state-dir",
            str(tmp_path / "state"),
            "--quoted-strings",
            "--log-file",
            str(tmp_path / "deck.log"),
        ]
    )

    assert code == 0
    (config,) = sessions
    assert config.profiles == ("dev", "prod")
    assert config.state_dir == tmp_path / "state"
    assert config.quoted_strings
    assert config.resolved_log_file == tmp_path / "deck.log"


def test_file_values_apply_without_flags(
    tmp_path: Path, sessions: list[AppConfig], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("PARAMDECK_AWS_PROFILES", raising=False)
    monkeypatch.delenv("PARAMDECK_QUOTED_STRINGS", raising=False)
    config_file = tmp_path / "config.yaml"
    _ = config_file.write_text(
        f"profiles: [ops]\nstate_dir: {tmp_path.as_posix()}\nquoted_strings: true\n"
    )

    assert cli.main(["--config", str(config_file)]) == 0
    (config,) = sessions
    assert config.profiles == ("ops",)
    assert config.quoted_strings


def test_unwritable_state_dir_still_starts_the_session(
    tmp_path: Path, sessions: list[AppConfig], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("PARAMDECK_AWS_PROFILES", raising=False)
    monkeypatch.setattr(logging.getLogger(), "handlers", [])
    blocker = tmp_path / "blocker"
    _ = blocker.write_text("")

    code = cli.main(["--state-dir", str(blocker / "sub")])

    assert code == 0
    (config,) = sessions
    assert config.state_dir == blocker / "sub"
    handlers = logging.getLogger().handlers
    assert [type(handler) for handler in handlers] == [logging.NullHandler]


def test_invalid_configuration_exits_with_2(
    tmp_path: Path, sessions: list[AppConfig], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("PARAMDECK_AWS_PROFILES", ",")
    code = cli.main(["--state-dir", str(tmp_path)])
    assert code == 2
    assert sessions == []


def test_unknown_flag_exits_with_2(sessions: list[AppConfig]) -> None:
    assert cli.main(["--no-such-flag"]) == 2
    assert sessions == []


def test_help_exits_cleanly(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--help"]) == 0
    assert "paramdeck" in capsys.readouterr().out
