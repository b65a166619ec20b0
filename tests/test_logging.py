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

"""Tests for structured logging helpers."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import pytest

from paramdeck.logging import (
    StructuredLogger,
    _coerce_level,
    configure_logging,
    get_logger,
)


class _CaptureHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@contextmanager
def _capture(logger: logging.Logger) -> Iterator[list[logging.LogRecord]]:
    handler = _CaptureHandler()
    logger.addHandler(handler)
    try:
        yield handler.records
    finally:
        logger.removeHandler(handler)
        handler.close()


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


def test_structured_logger_emits_structured_records() -> None:
    logger = get_logger("tests.logging", context={"component": "store"})
    base_logger = logger.logger
    base_logger.setLevel(logging.INFO)

    with _capture(base_logger) as records:
        logger.info("saved", event="store.saved", context={"path": "/tmp/x"})

    assert len(records) == 1
    record = records[0]
    assert record.event == "store.saved"
    assert record.context == {"component": "store", "path": "/tmp/x"}
    assert record.getMessage() == "saved"


def test_bind_merges_context() -> None:
    logger = get_logger("tests.logging.bind", context={"a": 1}).bind(b=2)
    assert isinstance(logger, StructuredLogger)
    assert logger.extra == {"a": 1, "b": 2}


def test_extra_fields_fold_into_context() -> None:
    logger = get_logger("tests.logging.extra")
    base_logger = logger.logger
    base_logger.setLevel(logging.INFO)

    with _capture(base_logger) as records:
        logger.info("with-extra", extra={"event": "tests.extra", "count": 2})

    assert records[0].event == "tests.extra"
    assert records[0].context == {"count": 2}


def test_missing_event_is_rejected() -> None:
    logger = get_logger("tests.logging.missing")
    logger.logger.setLevel(logging.INFO)
    with pytest.raises(TypeError, match="event"):
        logger.info("no event")


def test_context_must_be_a_mapping() -> None:
    logger = get_logger("tests.logging.context")
    logger.logger.setLevel(logging.INFO)
    with pytest.raises(TypeError, match="mapping"):
        logger.info("bad", event="tests.bad", context=["not", "a", "mapping"])


def test_configure_logging_writes_json_to_a_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "paramdeck.log"
    configure_logging(level="DEBUG", json_mode=True, log_file=log_file, force=True)

    get_logger("tests.logging.file").warning(
        "Persistence failed.", event="orchestrator.persist_failed", context={"n": 1}
    )
    for handler in logging.getLogger().handlers:
        handler.flush()

    payload = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
    assert payload["event"] == "orchestrator.persist_failed"
    assert payload["context"] == {"n": 1}
    assert payload["level"] == "WARNING"
    assert payload["message"] == "Persistence failed."


def test_text_format_tolerates_plain_records(tmp_path: Path) -> None:
    log_file = tmp_path / "paramdeck.log"
    configure_logging(level="INFO", json_mode=False, log_file=log_file, force=True)

    logging.getLogger("botocore.test").info("plain record")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "plain record" in log_file.read_text(encoding="utf-8")


def test_configure_logging_reads_environment(tmp_path: Path) -> None:
    configure_logging(
        log_file=tmp_path / "env.log",
        env={"PARAMDECK_LOG_LEVEL": "ERROR", "PARAMDECK_LOG_FORMAT": "json"},
        force=True,
    )
    assert logging.getLogger().level == logging.ERROR


def test_existing_handlers_only_update_the_level(tmp_path: Path) -> None:
    configure_logging(level="INFO", log_file=tmp_path / "a.log", force=True)
    handlers = list(logging.getLogger().handlers)
    configure_logging(level="DEBUG", log_file=tmp_path / "b.log")
    assert logging.getLogger().handlers == handlers
    assert logging.getLogger().level == logging.DEBUG


@pytest.mark.parametrize(
    ("value", "expected"),
    [(logging.DEBUG, logging.DEBUG), ("warning", logging.WARNING), (None, logging.INFO)],
)
def test_coerce_level(value: int | str | None, expected: int) -> None:
    assert _coerce_level(value) == expected


def test_coerce_level_rejects_unknown_names() -> None:
    with pytest.raises(TypeError):
        _ = _coerce_level("chatty")
