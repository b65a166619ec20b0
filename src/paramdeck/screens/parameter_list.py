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

"""Parameter listing with incremental name search and recent contexts.

Search mode captures every printable key for the query, so the normal
navigation keys (``q``, ``p``, digits) only act outside of it. Leaving search
with ``esc`` clears the filter; leaving it with ``enter`` keeps it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from ..config import MAX_RECENT_CAPACITY
from ..messages import (
    Back,
    GoToProfiles,
    KeyPressed,
    ListingOrigin,
    Message,
    ParametersLoaded,
    Pasted,
    Quit,
    RequestFailed,
    Resized,
    SwitchRecent,
    ViewParameter,
)
from ..models import Parameter, RecentContext
from ._view import NO_EFFECTS, Effects, ScreenView, ViewRow, context_title
from ._widgets import BACK_KEYS, QUIT_KEYS, ListCursor, TextBuffer, visible_window

SEARCH_LIMIT = 156
_RECENT_KEYS = {
    str(position): position for position in range(1, MAX_RECENT_CAPACITY + 1)
}
_CHROME_ROWS = 6


def filter_parameters(
    parameters: Sequence[Parameter], query: str
) -> tuple[Parameter, ...]:
    """Case-insensitive substring match on parameter names."""

    if not query:
        return tuple(parameters)
    needle = query.lower()
    return tuple(p for p in parameters if needle in p.name.lower())


@dataclass(frozen=True, slots=True)
class ParameterListModel:
    context: RecentContext | None = None
    origin: ListingOrigin = ListingOrigin.SELECTION
    parameters: tuple[Parameter, ...] = ()
    filtered: tuple[Parameter, ...] = ()
    query: TextBuffer = field(default_factory=lambda: TextBuffer(limit=SEARCH_LIMIT))
    searching: bool = False
    cursor: ListCursor = field(default_factory=ListCursor)
    recents: tuple[RecentContext, ...] = ()
    loading: bool = False
    pending_request: int | None = None
    error: str = ""
    width: int = 80
    height: int = 24

    @property
    def selected(self) -> Parameter | None:
        if not self.filtered:
            return None
        return self.filtered[self.cursor.index]

    @property
    def is_filtered(self) -> bool:
        return bool(self.query.text)

    def begin_loading(
        self, context: RecentContext, request_id: int, origin: ListingOrigin
    ) -> ParameterListModel:
        return replace(
            self,
            context=context,
            origin=origin,
            parameters=(),
            filtered=(),
            query=TextBuffer(limit=SEARCH_LIMIT),
            searching=False,
            cursor=ListCursor(),
            loading=True,
            pending_request=request_id,
            error="",
        )

    def awaits(self, request_id: int) -> bool:
        return self.pending_request is not None and self.pending_request == request_id

    def abandon(self) -> ParameterListModel:
        """Stop waiting for the in-flight listing; its result will be dropped."""
        return replace(self, loading=False, pending_request=None)

    def with_recents(self, recents: Sequence[RecentContext]) -> ParameterListModel:
        return replace(self, recents=tuple(recents))

    def with_error(self, error: str) -> ParameterListModel:
        return replace(self, error=error)

    def resize(self, width: int, height: int) -> ParameterListModel:
        return replace(self, width=width, height=height)

    def update(self, message: Message) -> tuple[ParameterListModel, Effects]:
        match message:
            case Resized(width=width, height=height):
                return self.resize(width, height), NO_EFFECTS
            case ParametersLoaded(request_id=request_id, parameters=parameters):
                if not self.awaits(request_id):
                    return self, NO_EFFECTS
                return self._loaded(parameters), NO_EFFECTS
            case RequestFailed(request_id=request_id, message=error):
                if not self.awaits(request_id):
                    return self, NO_EFFECTS
                return replace(
                    self, loading=False, pending_request=None, error=error
                ), NO_EFFECTS
            case Pasted(text=text) if self.searching and not self.loading:
                return self._set_query(self.query.insert(_single_line(text))), NO_EFFECTS
            case KeyPressed(key=key, character=character):
                if self.loading:
                    return self, (Quit(),) if key in QUIT_KEYS else NO_EFFECTS
                if self.searching:
                    return self._on_search_key(key, character), NO_EFFECTS
                return self._on_key(key)
            case _:
                return self, NO_EFFECTS

    def _loaded(self, parameters: Sequence[Parameter]) -> ParameterListModel:
        filtered = filter_parameters(parameters, self.query.text)
        return replace(
            self,
            parameters=tuple(parameters),
            filtered=filtered,
            cursor=ListCursor(count=len(filtered)),
            loading=False,
            pending_request=None,
            error="",
        )

    def _set_query(self, query: TextBuffer) -> ParameterListModel:
        filtered = filter_parameters(self.parameters, query.text)
        return replace(
            self,
            query=query,
            filtered=filtered,
            cursor=self.cursor.resized(len(filtered)).at(0),
        )

    def _on_search_key(self, key: str, character: str | None) -> ParameterListModel:
        match key:
            case "escape":
                return replace(
                    self._set_query(TextBuffer(limit=SEARCH_LIMIT)), searching=False
                )
            case "enter":
                return replace(self, searching=False)
            case _:
                edited = self.query.handle_key(key, character)
                if edited is None or edited == self.query:
                    return self
                return self._set_query(edited)

    def _on_key(self, key: str) -> tuple[ParameterListModel, Effects]:
        moved = self.cursor.handle_key(key)
        if moved is not None:
            return replace(self, cursor=moved), NO_EFFECTS
        if key in _RECENT_KEYS:
            position = _RECENT_KEYS[key]
            if position <= len(self.recents):
                return self, (SwitchRecent(position),)
            return self, NO_EFFECTS
        match key:
            case "/":
                return replace(self, searching=True), NO_EFFECTS
            case "enter":
                selected = self.selected
                if selected is None:
                    return self, NO_EFFECTS
                return self, (ViewParameter(selected),)
            case "p":
                return self, (GoToProfiles(),)
            case _ if key in BACK_KEYS:
                return self, (Back(),)
            case _ if key in QUIT_KEYS:
                return self, (Quit(),)
            case _:
                return self, NO_EFFECTS

    def view(self) -> ScreenView:
        profile = self.context.profile if self.context else ""
        region = self.context.region if self.context else ""
        if self.loading:
            return ScreenView(
                title=context_title(profile, region),
                loading="Loading parameters...",
                help="'q' to quit",
            )

        if self.is_filtered:
            title = f"Parameters ({len(self.filtered)}/{len(self.parameters)})"
        else:
            title = f"Parameters ({len(self.parameters)})"
        window = visible_window(
            len(self.filtered), self.cursor.index, self.height - _CHROME_ROWS
        )
        rows = tuple(
            ViewRow(self.filtered[index].name, index == self.cursor.index)
            for index in window
        )

        if self.searching:
            help_text = "Press 'esc' to cancel search, 'enter' to apply"
        else:
            help_text = (
                "Press 'enter' to view • '/' to search • '1'-'5' for recent"
                " • 'p' for profiles • 'esc' to go back • 'q' to quit"
            )
            if self.is_filtered:
                help_text = (
                    f"Filtered: {len(self.filtered)}/{len(self.parameters)} • {help_text}"
                )

        return ScreenView(
            title=f"{context_title(profile, region)} : {title}",
            rows=rows,
            body=self._recents_bar(),
            input_line=f"Search: {self.query.with_caret()}" if self.searching else None,
            help=help_text,
            error=self.error,
        )

    def _recents_bar(self) -> str:
        if not self.recents:
            return ""
        current = self.context
        entries = "  ".join(
            f"[{position}] {entry.label}{'*' if entry == current else ''}"
            for position, entry in enumerate(self.recents, start=1)
        )
        return f"Recent: {entries}"


def _single_line(text: str) -> str:
    return " ".join(text.splitlines())


__all__ = ["SEARCH_LIMIT", "ParameterListModel", "filter_parameters"]
