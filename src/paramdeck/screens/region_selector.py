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

"""Region selection for the chosen profile."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from ..messages import Back, KeyPressed, Message, Quit, RegionSelected, Resized
from ._view import NO_EFFECTS, PLACEHOLDER, Effects, ScreenView, ViewRow
from ._widgets import BACK_KEYS, QUIT_KEYS, ListCursor, visible_window

_CHROME_ROWS = 4


@dataclass(frozen=True, slots=True)
class RegionSelectorModel:
    """Numbered region list.

    Entering the screen for a profile pre-selects that profile's persisted
    default region when it is one of the offered regions.
    """

    regions: tuple[str, ...] = ()
    profile: str = ""
    cursor: ListCursor = field(default_factory=ListCursor)
    error: str = ""
    width: int = 80
    height: int = 24

    @classmethod
    def create(cls, regions: Sequence[str]) -> RegionSelectorModel:
        return cls(regions=tuple(regions), cursor=ListCursor(count=len(regions)))

    @property
    def selected(self) -> str | None:
        if not self.regions:
            return None
        return self.regions[self.cursor.index]

    def enter(self, profile: str, default_region: str | None) -> RegionSelectorModel:
        cursor = self.cursor
        if default_region is not None and default_region in self.regions:
            cursor = cursor.at(self.regions.index(default_region))
        return replace(self, profile=profile, cursor=cursor, error="")

    def with_error(self, error: str) -> RegionSelectorModel:
        return replace(self, error=error)

    def resize(self, width: int, height: int) -> RegionSelectorModel:
        return replace(self, width=width, height=height)

    def update(self, message: Message) -> tuple[RegionSelectorModel, Effects]:
        match message:
            case Resized(width=width, height=height):
                return self.resize(width, height), NO_EFFECTS
            case KeyPressed(key=key):
                return self._on_key(key)
            case _:
                return self, NO_EFFECTS

    def _on_key(self, key: str) -> tuple[RegionSelectorModel, Effects]:
        moved = self.cursor.handle_key(key)
        if moved is not None:
            return replace(self, cursor=moved), NO_EFFECTS
        if key == "enter" and self.selected is not None:
            return replace(self, error=""), (RegionSelected(self.selected),)
        if key in BACK_KEYS:
            return replace(self, error=""), (Back(),)
        if key in QUIT_KEYS:
            return self, (Quit(),)
        return self, NO_EFFECTS

    def view(self) -> ScreenView:
        window = visible_window(
            len(self.regions), self.cursor.index, self.height - _CHROME_ROWS
        )
        rows = tuple(
            ViewRow(f"{index + 1}. {self.regions[index]}", index == self.cursor.index)
            for index in window
        )
        return ScreenView(
            title=f"Select AWS Region for {self.profile or PLACEHOLDER}",
            rows=rows,
            help="↑/↓ to move • 'enter' to select • 'esc' to go back • 'q' to quit",
            error=self.error,
        )


__all__ = ["RegionSelectorModel"]
