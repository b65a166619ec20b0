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

"""Profile selection, the first screen of every session."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from ..messages import KeyPressed, Message, ProfileSelected, Quit, Resized
from ._view import NO_EFFECTS, Effects, ScreenView, ViewRow
from ._widgets import QUIT_KEYS, ListCursor, visible_window

# Title and help lines.
_CHROME_ROWS = 2


@dataclass(frozen=True, slots=True)
class ProfileSelectorModel:
    profiles: tuple[str, ...] = ()
    cursor: ListCursor = field(default_factory=ListCursor)
    width: int = 80
    height: int = 24

    @classmethod
    def create(cls, profiles: Sequence[str]) -> ProfileSelectorModel:
        return cls(profiles=tuple(profiles), cursor=ListCursor(count=len(profiles)))

    @property
    def selected(self) -> str | None:
        if not self.profiles:
            return None
        return self.profiles[self.cursor.index]

    def resize(self, width: int, height: int) -> ProfileSelectorModel:
        return replace(self, width=width, height=height)

    def update(self, message: Message) -> tuple[ProfileSelectorModel, Effects]:
        match message:
            case Resized(width=width, height=height):
                return self.resize(width, height), NO_EFFECTS
            case KeyPressed(key=key):
                return self._on_key(key)
            case _:
                return self, NO_EFFECTS

    def _on_key(self, key: str) -> tuple[ProfileSelectorModel, Effects]:
        moved = self.cursor.handle_key(key)
        if moved is not None:
            return replace(self, cursor=moved), NO_EFFECTS
        if key == "enter" and self.selected is not None:
            return self, (ProfileSelected(self.selected),)
        if key in QUIT_KEYS:
            return self, (Quit(),)
        # Escape does not quit from the first screen.
        return self, NO_EFFECTS

    def view(self) -> ScreenView:
        window = visible_window(
            len(self.profiles), self.cursor.index, self.height - _CHROME_ROWS
        )
        rows = tuple(
            ViewRow(f"{index + 1}. {self.profiles[index]}", index == self.cursor.index)
            for index in window
        )
        return ScreenView(
            title="Select AWS Profile",
            rows=rows,
            help="↑/↓ to move • 'enter' to select • 'q' to quit",
        )


__all__ = ["ProfileSelectorModel"]
