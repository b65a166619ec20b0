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

"""Screen navigation graph.

The five screens and every legal move between them are declared once in
:data:`TRANSITIONS`. The orchestrator asks :func:`next_screen` where a trigger
leads instead of branching on the active screen itself, and
:meth:`NavigationSpec.to_mermaid` renders the same table for documentation::

    print(NAVIGATION.to_mermaid())
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto

from .errors import InvalidTransitionError


class Screen(Enum):
    """The five screens of an interactive session."""

    PROFILE_SELECT = auto()
    REGION_SELECT = auto()
    PARAM_LIST = auto()
    PARAM_DETAIL = auto()
    PARAM_EDIT = auto()


class Trigger(Enum):
    """Navigation triggers understood by the orchestrator."""

    PROFILE_CHOSEN = auto()
    REGION_CHOSEN = auto()
    VIEW_PARAMETER = auto()
    EDIT_REQUESTED = auto()
    SAVE_CONFIRMED = auto()
    EDIT_CANCELLED = auto()
    SWITCH_RECENT = auto()
    GO_TO_PROFILES = auto()
    BACK = auto()


@dataclass(frozen=True, slots=True)
class TransitionSpec:
    """One edge of the navigation graph."""

    source: Screen
    trigger: Trigger
    target: Screen


INITIAL_SCREEN = Screen.PROFILE_SELECT

# Profile selection has no predecessor.
BACK_TARGETS: Mapping[Screen, Screen] = {
    Screen.REGION_SELECT: Screen.PROFILE_SELECT,
    Screen.PARAM_LIST: Screen.REGION_SELECT,
    Screen.PARAM_DETAIL: Screen.PARAM_LIST,
    Screen.PARAM_EDIT: Screen.PARAM_DETAIL,
}

TRANSITIONS: tuple[TransitionSpec, ...] = (
    TransitionSpec(Screen.PROFILE_SELECT, Trigger.PROFILE_CHOSEN, Screen.REGION_SELECT),
    TransitionSpec(Screen.REGION_SELECT, Trigger.REGION_CHOSEN, Screen.PARAM_LIST),
    TransitionSpec(Screen.PARAM_LIST, Trigger.VIEW_PARAMETER, Screen.PARAM_DETAIL),
    TransitionSpec(Screen.PARAM_DETAIL, Trigger.EDIT_REQUESTED, Screen.PARAM_EDIT),
    TransitionSpec(Screen.PARAM_EDIT, Trigger.SAVE_CONFIRMED, Screen.PARAM_DETAIL),
    TransitionSpec(Screen.PARAM_EDIT, Trigger.EDIT_CANCELLED, Screen.PARAM_DETAIL),
    TransitionSpec(Screen.PARAM_LIST, Trigger.SWITCH_RECENT, Screen.PARAM_LIST),
    TransitionSpec(Screen.PARAM_LIST, Trigger.GO_TO_PROFILES, Screen.PROFILE_SELECT),
    *(
        TransitionSpec(source, Trigger.BACK, target)
        for source, target in BACK_TARGETS.items()
    ),
)


@dataclass(frozen=True, slots=True)
class NavigationSpec:
    """Indexed view over a transition table."""

    initial: Screen
    transitions: tuple[TransitionSpec, ...]
    _index: dict[tuple[Screen, Trigger], Screen] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        index: dict[tuple[Screen, Trigger], Screen] = {}
        for spec in self.transitions:
            key = (spec.source, spec.trigger)
            if key in index:
                msg = f"Duplicate transition for {spec.source.name} on {spec.trigger.name}"
                raise ValueError(msg)
            index[key] = spec.target
        object.__setattr__(self, "_index", index)

    def allows(self, screen: Screen, trigger: Trigger) -> bool:
        return (screen, trigger) in self._index

    def target(self, screen: Screen, trigger: Trigger) -> Screen:
        try:
            return self._index[screen, trigger]
        except KeyError:
            raise InvalidTransitionError(screen, trigger) from None

    def triggers_from(self, screen: Screen) -> Iterator[Trigger]:
        return (spec.trigger for spec in self.transitions if spec.source is screen)

    def to_mermaid(self) -> str:
        """Export as Mermaid state diagram."""
        lines = ["stateDiagram-v2", f"    [*] --> {self.initial.name}"]
        lines.extend(
            f"    {t.source.name} --> {t.target.name}: {t.trigger.name.lower()}"
            for t in self.transitions
        )
        return "\n".join(lines)


NAVIGATION = NavigationSpec(initial=INITIAL_SCREEN, transitions=TRANSITIONS)


def next_screen(screen: Screen, trigger: Trigger) -> Screen:
    """Return the screen ``trigger`` leads to from ``screen``.

    Raises:
        InvalidTransitionError: the pair is not in :data:`TRANSITIONS`.
    """

    return NAVIGATION.target(screen, trigger)


def back_target(screen: Screen) -> Screen | None:
    """Return the predecessor of ``screen``, or ``None`` for the first screen."""

    return BACK_TARGETS.get(screen)


__all__ = [
    "BACK_TARGETS",
    "INITIAL_SCREEN",
    "NAVIGATION",
    "TRANSITIONS",
    "NavigationSpec",
    "Screen",
    "Trigger",
    "TransitionSpec",
    "back_target",
    "next_screen",
]
