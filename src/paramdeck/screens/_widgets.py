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

"""Immutable building blocks shared by the screen models."""

from __future__ import annotations

from dataclasses import dataclass, replace

UP_KEYS = frozenset({"up", "k"})
DOWN_KEYS = frozenset({"down", "j"})
QUIT_KEYS = frozenset({"q", "ctrl+c"})
BACK_KEYS = frozenset({"escape", "backspace"})


@dataclass(frozen=True, slots=True)
class ListCursor:
    """Selection index over ``count`` rows; clamped, never wraps."""

    index: int = 0
    count: int = 0

    def resized(self, count: int) -> ListCursor:
        if count <= 0:
            return ListCursor(index=0, count=0)
        return ListCursor(index=min(self.index, count - 1), count=count)

    def moved(self, delta: int) -> ListCursor:
        if self.count == 0:
            return self
        return replace(self, index=max(0, min(self.count - 1, self.index + delta)))

    def at(self, index: int) -> ListCursor:
        return replace(self, index=0).moved(index)

    def handle_key(self, key: str, *, page: int = 10) -> ListCursor | None:
        """Return the moved cursor, or ``None`` when ``key`` is not a movement key."""
        if key in UP_KEYS:
            return self.moved(-1)
        if key in DOWN_KEYS:
            return self.moved(1)
        match key:
            case "home" | "g":
                return self.at(0)
            case "end" | "G":
                return self.at(self.count - 1)
            case "pageup":
                return self.moved(-page)
            case "pagedown":
                return self.moved(page)
            case _:
                return None


def visible_window(count: int, index: int, height: int) -> range:
    """Row indices to draw so that ``index`` stays on screen."""

    if height <= 0 or count <= height:
        return range(count)
    start = min(max(0, index - height // 2), count - height)
    return range(start, start + height)


@dataclass(frozen=True, slots=True)
class TextBuffer:
    """Editable text with a caret position measured in characters."""

    text: str = ""
    cursor: int = 0
    limit: int | None = None

    @classmethod
    def of(cls, text: str, *, limit: int | None = None) -> TextBuffer:
        if limit is not None:
            text = text[:limit]
        return cls(text=text, cursor=len(text), limit=limit)

    def insert(self, chunk: str) -> TextBuffer:
        if self.limit is not None:
            chunk = chunk[: max(0, self.limit - len(self.text))]
        if not chunk:
            return self
        text = self.text[: self.cursor] + chunk + self.text[self.cursor :]
        return replace(self, text=text, cursor=self.cursor + len(chunk))

    def backspace(self) -> TextBuffer:
        if self.cursor == 0:
            return self
        text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        return replace(self, text=text, cursor=self.cursor - 1)

    def delete(self) -> TextBuffer:
        if self.cursor >= len(self.text):
            return self
        return replace(self, text=self.text[: self.cursor] + self.text[self.cursor + 1 :])

    def handle_key(self, key: str, character: str | None) -> TextBuffer | None:
        """Apply an editing key; ``None`` when the key is not an editing key."""
        match key:
            case "backspace":
                return self.backspace()
            case "delete":
                return self.delete()
            case "left":
                return replace(self, cursor=max(0, self.cursor - 1))
            case "right":
                return replace(self, cursor=min(len(self.text), self.cursor + 1))
            case "home" | "ctrl+a":
                return replace(self, cursor=self.text.rfind("\n", 0, self.cursor) + 1)
            case "end" | "ctrl+e":
                end = self.text.find("\n", self.cursor)
                return replace(self, cursor=len(self.text) if end < 0 else end)
            case _:
                if character is not None and character.isprintable():
                    return self.insert(character)
                return None

    def with_caret(self, caret: str = "█") -> str:
        """Render the text with ``caret`` drawn at the cursor."""
        return self.text[: self.cursor] + caret + self.text[self.cursor :]


__all__ = [
    "BACK_KEYS",
    "DOWN_KEYS",
    "QUIT_KEYS",
    "UP_KEYS",
    "ListCursor",
    "TextBuffer",
    "visible_window",
]
