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

"""Parameter detail: metadata plus either the raw value or its flattened leaves."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from ..messages import (
    Back,
    ClearStatus,
    CopyFinished,
    CopyToClipboard,
    EditParameter,
    KeyPressed,
    Message,
    ParameterLoaded,
    Quit,
    RequestFailed,
    Resized,
    ScheduleMessage,
)
from ..models import Parameter, RecentContext
from ..structured import FlatEntry, Node, flatten, is_container, parse_document
from ._view import NO_EFFECTS, Effects, ScreenView, ViewRow, context_title
from ._widgets import BACK_KEYS, QUIT_KEYS, ListCursor, visible_window

STATUS_CLEAR_DELAY = 2.0
_EDIT_KEYS = frozenset({"e", "enter"})
_CHROME_ROWS = 12


def parse_structured(raw: str) -> Node | None:
    """Return the tree for ``raw`` when it is a JSON object or array."""

    tree = parse_document(raw)
    if tree is None or not is_container(tree):
        return None
    return tree


@dataclass(frozen=True, slots=True)
class ParameterDetailModel:
    """Detail screen state.

    ``tree`` is private to this screen and rebuilt whenever a new parameter
    value arrives. ``entries`` is ``flatten(tree)``; when it is empty the
    edit key targets the raw value.
    """

    context: RecentContext | None = None
    parameter: Parameter | None = None
    tree: Node | None = None
    entries: tuple[FlatEntry, ...] = ()
    cursor: ListCursor = field(default_factory=ListCursor)
    loading: bool = False
    pending_request: int | None = None
    error: str = ""
    status: str = ""
    status_serial: int = 0
    width: int = 80
    height: int = 24

    @property
    def is_structured(self) -> bool:
        return self.tree is not None

    @property
    def selected_entry(self) -> FlatEntry | None:
        if not self.entries:
            return None
        return self.entries[self.cursor.index]

    def begin_loading(
        self, context: RecentContext, parameter: Parameter, request_id: int
    ) -> ParameterDetailModel:
        same_target = self.parameter is not None and self.parameter.name == parameter.name
        return replace(
            self,
            context=context,
            parameter=parameter,
            tree=None,
            entries=(),
            cursor=self.cursor if same_target else ListCursor(),
            loading=True,
            pending_request=request_id,
            error="",
            status="",
        )

    def awaits(self, request_id: int) -> bool:
        return self.pending_request is not None and self.pending_request == request_id

    def abandon(self) -> ParameterDetailModel:
        return replace(self, loading=False, pending_request=None)

    def resize(self, width: int, height: int) -> ParameterDetailModel:
        return replace(self, width=width, height=height)

    def update(self, message: Message) -> tuple[ParameterDetailModel, Effects]:
        match message:
            case Resized(width=width, height=height):
                return self.resize(width, height), NO_EFFECTS
            case ParameterLoaded(request_id=request_id, parameter=parameter):
                if not self.awaits(request_id):
                    return self, NO_EFFECTS
                return self._loaded(parameter), NO_EFFECTS
            case RequestFailed(request_id=request_id, message=error):
                if not self.awaits(request_id):
                    return self, NO_EFFECTS
                return replace(
                    self, loading=False, pending_request=None, error=error
                ), NO_EFFECTS
            case CopyFinished(error=error):
                serial = self.status_serial + 1
                status = "Copied to clipboard" if error is None else f"Copy failed: {error}"
                return replace(self, status=status, status_serial=serial), (
                    ScheduleMessage(STATUS_CLEAR_DELAY, ClearStatus(serial)),
                )
            case ClearStatus(serial=serial):
                if serial != self.status_serial:
                    return self, NO_EFFECTS
                return replace(self, status=""), NO_EFFECTS
            case KeyPressed(key=key):
                return self._on_key(key)
            case _:
                return self, NO_EFFECTS

    def _loaded(self, parameter: Parameter) -> ParameterDetailModel:
        tree = parse_structured(parameter.value)
        entries = flatten(tree) if tree is not None else ()
        return replace(
            self,
            parameter=parameter,
            tree=tree,
            entries=entries,
            cursor=self.cursor.resized(len(entries)),
            loading=False,
            pending_request=None,
            error="",
        )

    def _on_key(self, key: str) -> tuple[ParameterDetailModel, Effects]:
        if key in QUIT_KEYS:
            return self, (Quit(),)
        if self.loading:
            return self, NO_EFFECTS
        if key in BACK_KEYS:
            return self, (Back(),)
        parameter = self.parameter
        if parameter is None or self.error:
            return self, NO_EFFECTS

        moved = self.cursor.handle_key(key)
        if moved is not None:
            return replace(self, cursor=moved), NO_EFFECTS
        entry = self.selected_entry
        if key in _EDIT_KEYS:
            return self, (EditParameter(parameter, entry.segments if entry else ""),)
        if key == "c":
            return self, (CopyToClipboard(entry.value if entry else parameter.value),)
        return self, NO_EFFECTS

    def view(self) -> ScreenView:
        profile = self.context.profile if self.context else ""
        region = self.context.region if self.context else ""
        name = self.parameter.name if self.parameter else ""
        title = context_title(profile, region, name)
        if self.loading:
            return ScreenView(
                title=title, loading="Loading parameter value...", help="'q' to quit"
            )
        if self.error:
            return ScreenView(
                title=title, error=self.error, help="Press 'esc' to go back"
            )
        if self.parameter is None:
            return ScreenView(title=title, body="No parameter selected")

        help_text = "Press 'e' to edit"
        if self.entries:
            help_text += " selected key • ↑/↓ to select"
        help_text += " • 'c' to copy • 'esc' to go back • 'q' to quit"

        body = _metadata(self.parameter)
        rows: tuple[ViewRow, ...] = ()
        if self.entries:
            window = visible_window(
                len(self.entries), self.cursor.index, self.height - _CHROME_ROWS
            )
            rows = tuple(
                ViewRow(
                    f"{self.entries[index].path}: {self.entries[index].value}",
                    index == self.cursor.index,
                )
                for index in window
            )
        else:
            body = f"{body}\n\n{self.parameter.value}"
        return ScreenView(
            title=title, rows=rows, body=body, help=help_text, status=self.status
        )


def _metadata(parameter: Parameter) -> str:
    lines = [f"Type: {parameter.type.value}", f"Version: {parameter.version}"]
    if parameter.last_modified is not None:
        modified = f"{parameter.last_modified:%Y-%m-%d %H:%M:%S %Z}".rstrip()
        lines.append(f"Last modified: {modified}")
    if parameter.data_type:
        lines.append(f"Data type: {parameter.data_type}")
    if parameter.arn:
        lines.append(f"ARN: {parameter.arn}")
    lines.append("Value:")
    return "\n".join(lines)


__all__ = ["STATUS_CLEAR_DELAY", "ParameterDetailModel", "parse_structured"]
