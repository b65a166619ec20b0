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

"""Textual host for the session runner.

The app owns no session logic. It turns Textual key, paste and resize events
into messages, performs host effects and redraws the active screen's
:class:`~paramdeck.screens.ScreenView` after every dispatch.
"""

from __future__ import annotations

from functools import partial
from typing import ClassVar, override

from rich.console import Group
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.widgets import Static

from ..logging import StructuredLogger, get_logger
from ..messages import (
    CopyFinished,
    CopyToClipboard,
    HostEffect,
    KeyPressed,
    Message,
    Pasted,
    Quit,
    Resized,
    ScheduleMessage,
)
from ..orchestrator import Orchestrator, SessionState
from ..runtime import Executor, Runner, SystemExecutor
from ..screens import ScreenView

logger: StructuredLogger = get_logger(__name__, context={"component": "tui"})

_SPINNER = "⠋"


def normalize_key(key: str, character: str | None, *, is_printable: bool) -> KeyPressed:
    """Map a Textual key event onto a :class:`KeyPressed`.

    Printable keys are named by their character (``/`` rather than
    ``slash``) so reducers can match on what the user typed.
    """

    if is_printable and character:
        return KeyPressed(key=character, character=character)
    return KeyPressed(key=key, character=None)


def render_view(view: ScreenView) -> Group:
    """Render ``view`` as Rich renderables, top to bottom."""

    parts: list[Text] = [Text(view.title, style="bold magenta"), Text("")]
    if view.loading:
        parts.append(Text(f"{_SPINNER} {view.loading}", style="magenta"))
    else:
        if view.body:
            parts.append(Text(view.body))
            parts.append(Text(""))
        for row in view.rows:
            if row.selected:
                parts.append(Text(f"▸ {row.text}", style="bold cyan"))
            else:
                parts.append(Text(f"  {row.text}"))
        if view.input_line is not None:
            parts.append(Text(""))
            parts.append(Text(view.input_line, style="bold"))
    if view.error:
        parts.append(Text(""))
        parts.append(Text(f"Error: {view.error}", style="bold red"))
    if view.help:
        parts.append(Text(""))
        parts.append(Text(view.help, style="dim"))
    parts.append(Text(view.status, style="green"))
    return Group(*parts)


class ParamdeckApp(App[None]):
    """Full-screen parameter browser."""

    TITLE = "paramdeck"
    CSS = """
    #screen {
        padding: 1 2;
    }
    """
    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("ctrl+c", "interrupt", show=False, priority=True),
    ]

    def __init__(
        self,
        orchestrator: Orchestrator,
        state: SessionState,
        *,
        executor: Executor | None = None,
    ) -> None:
        super().__init__()
        self._runner = Runner(
            orchestrator=orchestrator,
            state=state,
            executor=executor if executor is not None else SystemExecutor(max_workers=4),
            post=self._post,
            on_host_effect=self._on_host_effect,
        )

    @property
    def runner(self) -> Runner:
        return self._runner

    @override
    def compose(self) -> ComposeResult:
        yield Static("", id="screen")

    def on_mount(self) -> None:
        self._dispatch(Resized(self.size.width, self.size.height))

    def on_unmount(self) -> None:
        self._runner.shutdown()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self._dispatch(
            normalize_key(event.key, event.character, is_printable=event.is_printable)
        )

    def on_paste(self, event: events.Paste) -> None:
        event.stop()
        self._dispatch(Pasted(event.text))

    def on_resize(self, event: events.Resize) -> None:
        self._dispatch(Resized(event.size.width, event.size.height))

    def action_interrupt(self) -> None:
        self._dispatch(KeyPressed("ctrl+c"))

    def _post(self, message: Message) -> None:
        # Called from worker threads.
        self.call_from_thread(self._dispatch, message)

    def _dispatch(self, message: Message) -> None:
        self._runner.dispatch(message)
        self.query_one("#screen", Static).update(render_view(self._runner.view()))

    def _on_host_effect(self, effect: HostEffect) -> None:
        match effect:
            case Quit():
                logger.info("Quitting.", event="tui.quit")
                self.exit()
            case CopyToClipboard(text=text):
                try:
                    self.copy_to_clipboard(text)
                except (OSError, RuntimeError) as error:
                    self._runner.dispatch(CopyFinished(str(error)))
                else:
                    self._runner.dispatch(CopyFinished())
            case ScheduleMessage(delay=delay, message=message):
                _ = self.set_timer(delay, partial(self._dispatch, message))


__all__ = ["ParamdeckApp", "normalize_key", "render_view"]
