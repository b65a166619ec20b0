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

"""Command line entry point for the ``paramdeck`` executable."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from .config import AppConfig, load_config
from .errors import ConfigError
from .gateway import GatewayFactory, connect_ssm
from .logging import configure_logging, get_logger
from .navigation import NAVIGATION
from .orchestrator import Orchestrator
from .store import FileContextStore

_OVERRIDE_KEYS = (
    "profiles",
    "state_dir",
    "quoted_strings",
    "log_level",
    "json_logs",
    "log_file",
)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the paramdeck CLI."""

    parser = _build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as exc:  # argparse exits with code 2 on errors
        code = exc.code if isinstance(exc.code, int) else 2
        return int(code)

    if args.print_navigation:
        print(NAVIGATION.to_mermaid())
        return 0

    overrides = {key: getattr(args, key) for key in _OVERRIDE_KEYS}
    try:
        config = load_config(args.config, overrides)
    except ConfigError as error:
        configure_logging(level=args.log_level, json_mode=args.json_logs)
        get_logger(__name__).error(
            "Invalid configuration",
            event="paramdeck.config_error",
            context={"config": str(args.config), "error": str(error)},
        )
        return 2

    try:
        configure_logging(
            level=config.log_level,
            json_mode=config.json_logs or None,
            log_file=config.resolved_log_file,
        )
    except (OSError, ValueError):
        # Logs never go to the terminal the UI owns.
        logging.getLogger().addHandler(logging.NullHandler())
    return run_session(config)


def run_session(
    config: AppConfig, *, gateway_factory: GatewayFactory = connect_ssm
) -> int:
    """Build the session from ``config`` and run the terminal UI until it quits."""

    from .tui import ParamdeckApp

    logger = get_logger(__name__)
    store = FileContextStore(config.state_dir, recent_capacity=config.recent_capacity)
    orchestrator = Orchestrator(
        store=store, gateway_factory=gateway_factory, config=config
    )
    logger.info(
        "Starting session.",
        event="paramdeck.start",
        context={
            "profiles": list(config.profiles),
            "state_dir": str(config.state_dir),
        },
    )
    ParamdeckApp(orchestrator, orchestrator.initial_state()).run()
    logger.info("Session ended.", event="paramdeck.stop")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paramdeck",
        description="Browse and edit AWS SSM parameters from the terminal.",
    )
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML or YAML config file (default: ~/.config/paramdeck/config.toml).",
    )
    _ = parser.add_argument(
        "--profiles",
        default=None,
        help="Comma separated AWS profiles to offer (overrides PARAMDECK_AWS_PROFILES).",
    )
    _ = parser.add_argument(
        "--state-dir",
        type=Path,
        default=None,
        help="Directory holding region defaults and recent contexts.",
    )
    _ = parser.add_argument(
        "--quoted-strings",
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Store edits typed as JSON string literals (e.g. "true") as strings.',
    )
    _ = parser.add_argument(
        "--log-level",
        choices=("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"),
        default=None,
        help="Override the log level.",
    )
    _ = parser.add_argument(
        "--json-logs",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Emit structured JSON logs (disable with --no-json-logs).",
    )
    _ = parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write logs here instead of <state dir>/paramdeck.log.",
    )
    _ = parser.add_argument(
        "--print-navigation",
        action="store_true",
        help="Print the screen navigation graph as a Mermaid diagram and exit.",
    )
    return parser


__all__ = ["main", "run_session"]
