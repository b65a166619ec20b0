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

"""Host-independent description of what a screen shows."""

from __future__ import annotations

from dataclasses import dataclass

from ..messages import Effect

PLACEHOLDER = "-"

type Effects = tuple[Effect, ...]

NO_EFFECTS: Effects = ()


@dataclass(frozen=True, slots=True)
class ViewRow:
    text: str
    selected: bool = False


@dataclass(frozen=True, slots=True)
class ScreenView:
    """Everything a host needs to draw one screen.

    Hosts decide styling. ``rows`` are list entries, ``body`` is free text
    such as metadata or an edit buffer, ``input_line`` is an active text
    prompt and ``help`` the key legend.
    """

    title: str
    rows: tuple[ViewRow, ...] = ()
    body: str = ""
    input_line: str | None = None
    help: str = ""
    status: str = ""
    error: str = ""
    loading: str = ""


def context_title(profile: str, region: str, name: str = "") -> str:
    """``profile : region : name`` with ``-`` for anything unknown."""

    parts = [profile or PLACEHOLDER, region or PLACEHOLDER]
    if name:
        parts.append(name)
    return " : ".join(parts)


__all__ = [
    "NO_EFFECTS",
    "PLACEHOLDER",
    "Effects",
    "ScreenView",
    "ViewRow",
    "context_title",
]
