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

"""Edit buffer for a whole raw value or for one structured leaf.

Saving a leaf writes the buffer into a copy of the screen's tree and
re-serializes the copy. A path that no longer resolves aborts the save with
an error and leaves the buffer as typed.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace

from ..errors import MalformedPathError, PathResolutionError
from ..messages import (
    EditCancelled,
    KeyPressed,
    Message,
    Pasted,
    RequestFailed,
    Resized,
    SaveRequested,
)
from ..models import Parameter, RecentContext
from ..structured import (
    Node,
    PathSegments,
    dump_document,
    format_path,
    read_path,
    write_path,
)
from ._view import NO_EFFECTS, Effects, ScreenView, context_title
from ._widgets import TextBuffer
from .parameter_detail import parse_structured


@dataclass(frozen=True, slots=True)
class ParameterEditModel:
    context: RecentContext | None = None
    parameter: Parameter | None = None
    path: str | PathSegments = ""
    tree: Node | None = None
    buffer: TextBuffer = field(default_factory=TextBuffer)
    quoted_strings: bool = False
    saving: bool = False
    pending_request: int | None = None
    error: str = ""
    width: int = 80
    height: int = 24

    @property
    def edits_leaf(self) -> bool:
        return bool(self.path) and self.tree is not None

    @property
    def path_text(self) -> str:
        return self.path if isinstance(self.path, str) else format_path(self.path)

    def enter(
        self,
        context: RecentContext,
        parameter: Parameter,
        path: str | PathSegments,
        *,
        quoted_strings: bool = False,
    ) -> ParameterEditModel:
        """Seed the buffer from ``parameter``.

        A leaf edit starts from the leaf's display text, or an empty buffer
        when the path does not resolve.
        """

        tree = parse_structured(parameter.value) if path else None
        if tree is None:
            path = ""
            seed = parameter.value
        else:
            seed = read_path(tree, path)
        return replace(
            self,
            context=context,
            parameter=parameter,
            path=path,
            tree=tree,
            buffer=TextBuffer.of(seed),
            quoted_strings=quoted_strings,
            saving=False,
            pending_request=None,
            error="",
        )

    def begin_saving(self, request_id: int) -> ParameterEditModel:
        return replace(self, saving=True, pending_request=request_id, error="")

    def awaits(self, request_id: int) -> bool:
        return self.pending_request is not None and self.pending_request == request_id

    def reset(self) -> ParameterEditModel:
        """Discard the buffer and any in-flight save."""
        return replace(
            self,
            parameter=None,
            path="",
            tree=None,
            buffer=TextBuffer(),
            saving=False,
            pending_request=None,
            error="",
        )

    def resize(self, width: int, height: int) -> ParameterEditModel:
        return replace(self, width=width, height=height)

    def new_value(self) -> str:
        """Return the raw value a save would write.

        Raises:
            MalformedPathError: the path does not parse.
            PathResolutionError: the path does not resolve against the tree.
        """

        if self.tree is None or not self.path:
            return self.buffer.text
        working = copy.deepcopy(self.tree)
        _ = write_path(
            working, self.path, self.buffer.text, quoted_strings=self.quoted_strings
        )
        return dump_document(working)

    def update(self, message: Message) -> tuple[ParameterEditModel, Effects]:
        match message:
            case Resized(width=width, height=height):
                return self.resize(width, height), NO_EFFECTS
            case RequestFailed(request_id=request_id, message=error):
                if not self.awaits(request_id):
                    return self, NO_EFFECTS
                return replace(
                    self, saving=False, pending_request=None, error=error
                ), NO_EFFECTS
            case Pasted(text=text) if not self.saving:
                return replace(self, buffer=self.buffer.insert(text)), NO_EFFECTS
            case KeyPressed(key=key, character=character) if not self.saving:
                return self._on_key(key, character)
            case _:
                return self, NO_EFFECTS

    def _on_key(self, key: str, character: str | None) -> tuple[ParameterEditModel, Effects]:
        match key:
            case "ctrl+s":
                return self._save()
            case "escape":
                return self, (EditCancelled(),)
            case "enter":
                return replace(self, buffer=self.buffer.insert("\n")), NO_EFFECTS
            case _:
                edited = self.buffer.handle_key(key, character)
                if edited is None:
                    return self, NO_EFFECTS
                return replace(self, buffer=edited, error=""), NO_EFFECTS

    def _save(self) -> tuple[ParameterEditModel, Effects]:
        if self.parameter is None:
            return self, NO_EFFECTS
        try:
            value = self.new_value()
        except (MalformedPathError, PathResolutionError) as error:
            return replace(self, error=f"Cannot save: {error}"), NO_EFFECTS
        return self, (SaveRequested(self.parameter, value),)

    def view(self) -> ScreenView:
        profile = self.context.profile if self.context else ""
        region = self.context.region if self.context else ""
        name = self.parameter.name if self.parameter else ""
        title = context_title(profile, region, name)
        if self.saving:
            return ScreenView(title=title, loading="Saving parameter...")
        label = f"Editing: {self.path_text}" if self.edits_leaf else "Edit Value:"
        return ScreenView(
            title=title,
            body=f"{label}\n\n{self.buffer.with_caret()}",
            help="Press 'ctrl+s' to save • 'esc' to cancel • 'ctrl+c' to quit",
            error=self.error,
        )


__all__ = ["ParameterEditModel"]
