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

"""Serial message loop and the background executor for remote calls.

The :class:`Runner` is the only place where effects are interpreted. It
processes one message at a time: the orchestrator's follow-up messages are
queued behind it, commands go to an executor, and host effects are handed to
the UI host. Completions produced on worker threads come back through the
``post`` callback, which the host must make thread-safe.

Example::

    runner = Runner(
        orchestrator=orchestrator,
        state=orchestrator.initial_state(),
        executor=SystemExecutor(max_workers=4),
        post=lambda message: app.call_from_thread(runner.dispatch, message),
        on_host_effect=app.handle_effect,
    )
    runner.dispatch(KeyPressed("enter"))
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Protocol

from .logging import StructuredLogger, get_logger
from .messages import (
    COMMAND_TYPES,
    HOST_EFFECT_TYPES,
    Command,
    Effect,
    HostEffect,
    Message,
    RequestFailed,
)
from .orchestrator import Orchestrator, SessionState
from .screens import ScreenView

logger: StructuredLogger = get_logger(__name__, context={"component": "runtime"})

_OPERATIONS = {"ListParameters": "list", "FetchParameter": "get", "PutParameter": "put"}


class Executor(Protocol):
    """Submits zero-argument callables for background execution."""

    def submit(self, fn: Callable[[], object]) -> object: ...

    def shutdown(self, *, wait: bool = True) -> None: ...


@dataclass
class SystemExecutor:
    """Production executor using ThreadPoolExecutor.

    The pool is created lazily on first submit.
    """

    max_workers: int | None = None
    thread_name_prefix: str = "paramdeck-io"
    _executor: ThreadPoolExecutor | None = field(default=None, repr=False)

    def _ensure_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix=self.thread_name_prefix,
            )
        return self._executor

    def submit(self, fn: Callable[[], object]) -> Future[object]:
        return self._ensure_executor().submit(fn)

    def shutdown(self, *, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self) -> SystemExecutor:
        return self

    def __exit__(self, *args: object) -> None:
        self.shutdown(wait=True)


@dataclass
class InlineExecutor:
    """Test executor that runs tasks synchronously in the calling thread.

    Example::

        executor = InlineExecutor()
        executor.submit(lambda: 42)
        assert len(executor.submitted) == 1
    """

    submitted: list[Callable[[], object]] = field(default_factory=list)
    _shutdown: bool = field(default=False, repr=False)

    def submit(self, fn: Callable[[], object]) -> object:
        if self._shutdown:
            msg = "Executor has been shut down"
            raise RuntimeError(msg)
        self.submitted.append(fn)
        return fn()

    def shutdown(self, *, wait: bool = True) -> None:
        del wait  # unused
        self._shutdown = True


@dataclass(slots=True)
class Runner:
    """Owns the session state and drains the message queue."""

    orchestrator: Orchestrator
    state: SessionState
    executor: Executor
    post: Callable[[Message], None]
    on_host_effect: Callable[[HostEffect], None]
    _queue: deque[Message] = field(default_factory=deque, repr=False)
    _draining: bool = field(default=False, repr=False)

    def view(self) -> ScreenView:
        return self.orchestrator.view(self.state)

    def dispatch(self, message: Message) -> None:
        """Queue ``message`` and process the queue unless already processing.

        Must be called from the host thread. Re-entrant calls made while the
        queue drains only enqueue.
        """

        self._queue.append(message)
        if self._draining:
            return
        self._draining = True
        try:
            while self._queue:
                self._step(self._queue.popleft())
        finally:
            self._draining = False

    def shutdown(self) -> None:
        self.executor.shutdown(wait=False)

    def _step(self, message: Message) -> None:
        self.state, effects = self.orchestrator.update(self.state, message)
        for effect in effects:
            self._apply(effect)

    def _apply(self, effect: Effect) -> None:
        if isinstance(effect, COMMAND_TYPES):
            self._submit(effect)
        elif isinstance(effect, HOST_EFFECT_TYPES):
            self.on_host_effect(effect)
        else:
            self._queue.append(effect)

    def _submit(self, command: Command) -> None:
        logger.debug(
            "Dispatching command.",
            event="runtime.command_dispatched",
            context={
                "command": type(command).__name__,
                "request_id": command.request_id,
            },
        )
        _ = self.executor.submit(lambda: self.post(_run(command)))


def _run(command: Command) -> Message:
    """Run ``command``; unexpected failures become a ``RequestFailed`` message."""

    try:
        return command.run()
    except Exception as error:
        logger.exception(
            "Command raised unexpectedly.",
            event="runtime.command_crashed",
            context={
                "command": type(command).__name__,
                "request_id": command.request_id,
            },
        )
        return RequestFailed(
            request_id=command.request_id,
            operation=_OPERATIONS[type(command).__name__],
            message=f"unexpected error: {error}",
        )


__all__ = ["Executor", "InlineExecutor", "Runner", "SystemExecutor"]
