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

"""Messages flowing into the orchestrator and effects flowing out of it.

Everything that happens in a session arrives as a :data:`Message`: raw input
from the host (:class:`KeyPressed`, :class:`Pasted`, :class:`Resized`),
intents emitted by screens (:class:`ProfileSelected`, :class:`Back`, ...) and
completions of background work (:class:`ParametersLoaded`, ...).

Reducers answer with :data:`Effect` values. A message effect is fed back into
the queue, a :data:`Command` runs on a worker thread and produces exactly one
message, and a :data:`HostEffect` is handed to the UI host.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .errors import GatewayError
from .gateway import ParameterGateway
from .logging import StructuredLogger, get_logger
from .models import Parameter, RecentContext
from .structured import PathSegments

logger: StructuredLogger = get_logger(__name__, context={"component": "commands"})


class ListingOrigin(StrEnum):
    """How the user arrived at a parameter listing."""

    SELECTION = "selection"
    RECENT = "recent"


# Host input ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class KeyPressed:
    """A key press. ``key`` is the binding name, ``character`` the printable text."""

    key: str
    character: str | None = None


@dataclass(frozen=True, slots=True)
class Pasted:
    text: str


@dataclass(frozen=True, slots=True)
class Resized:
    width: int
    height: int


# Screen intents ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProfileSelected:
    profile: str


@dataclass(frozen=True, slots=True)
class RegionSelected:
    region: str


@dataclass(frozen=True, slots=True)
class ViewParameter:
    parameter: Parameter


@dataclass(frozen=True, slots=True)
class EditParameter:
    """Open the editor on ``parameter``; ``path`` is empty for the raw value."""

    parameter: Parameter
    path: str | PathSegments = ""


@dataclass(frozen=True, slots=True)
class SaveRequested:
    """Write ``value`` back as the new raw value of ``parameter``."""

    parameter: Parameter
    value: str


@dataclass(frozen=True, slots=True)
class EditCancelled:
    pass


@dataclass(frozen=True, slots=True)
class Back:
    pass


@dataclass(frozen=True, slots=True)
class GoToProfiles:
    pass


@dataclass(frozen=True, slots=True)
class SwitchRecent:
    """Switch to the recent context at one-based ``position``."""

    position: int


# Completions -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParametersLoaded:
    request_id: int
    context: RecentContext
    origin: ListingOrigin
    parameters: tuple[Parameter, ...]


@dataclass(frozen=True, slots=True)
class ParameterLoaded:
    request_id: int
    parameter: Parameter


@dataclass(frozen=True, slots=True)
class SaveSucceeded:
    request_id: int
    parameter: Parameter


@dataclass(frozen=True, slots=True)
class RequestFailed:
    """A background request failed; ``message`` is shown to the user."""

    request_id: int
    operation: str
    message: str


@dataclass(frozen=True, slots=True)
class CopyFinished:
    error: str | None = None


@dataclass(frozen=True, slots=True)
class ClearStatus:
    serial: int


type Message = (
    KeyPressed
    | Pasted
    | Resized
    | ProfileSelected
    | RegionSelected
    | ViewParameter
    | EditParameter
    | SaveRequested
    | EditCancelled
    | Back
    | GoToProfiles
    | SwitchRecent
    | ParametersLoaded
    | ParameterLoaded
    | SaveSucceeded
    | RequestFailed
    | CopyFinished
    | ClearStatus
)


# Commands --------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ListParameters:
    request_id: int
    gateway: ParameterGateway
    context: RecentContext
    origin: ListingOrigin

    def run(self) -> ParametersLoaded | RequestFailed:
        try:
            parameters = tuple(self.gateway.list_parameters())
        except GatewayError as error:
            return _failed(self.request_id, "list", error)
        logger.debug(
            "Listed parameters.",
            event="command.listed",
            context={
                "request_id": self.request_id,
                "profile": self.context.profile,
                "region": self.context.region,
                "count": len(parameters),
            },
        )
        return ParametersLoaded(
            request_id=self.request_id,
            context=self.context,
            origin=self.origin,
            parameters=parameters,
        )


@dataclass(frozen=True, slots=True)
class FetchParameter:
    request_id: int
    gateway: ParameterGateway
    name: str

    def run(self) -> ParameterLoaded | RequestFailed:
        try:
            parameter = self.gateway.get_parameter(self.name)
        except GatewayError as error:
            return _failed(self.request_id, "get", error)
        return ParameterLoaded(request_id=self.request_id, parameter=parameter)


@dataclass(frozen=True, slots=True)
class PutParameter:
    request_id: int
    gateway: ParameterGateway
    parameter: Parameter
    value: str

    def run(self) -> SaveSucceeded | RequestFailed:
        try:
            self.gateway.put_parameter(
                self.parameter.name, self.value, self.parameter.type
            )
        except GatewayError as error:
            return _failed(self.request_id, "put", error)
        return SaveSucceeded(
            request_id=self.request_id,
            parameter=self.parameter.with_value(self.value),
        )


type Command = ListParameters | FetchParameter | PutParameter


def _failed(request_id: int, operation: str, error: GatewayError) -> RequestFailed:
    logger.warning(
        "Background request failed.",
        event="command.failed",
        context={
            "request_id": request_id,
            "operation": operation,
            "profile": error.profile,
            "region": error.region,
            "name": error.name,
            "error": str(error),
        },
    )
    return RequestFailed(request_id=request_id, operation=operation, message=str(error))


# Host effects ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Quit:
    pass


@dataclass(frozen=True, slots=True)
class CopyToClipboard:
    text: str


@dataclass(frozen=True, slots=True)
class ScheduleMessage:
    """Deliver ``message`` after ``delay`` seconds."""

    delay: float
    message: Message


type HostEffect = Quit | CopyToClipboard | ScheduleMessage

type Effect = Message | Command | HostEffect

COMMAND_TYPES = (ListParameters, FetchParameter, PutParameter)
HOST_EFFECT_TYPES = (Quit, CopyToClipboard, ScheduleMessage)


__all__ = [
    "COMMAND_TYPES",
    "HOST_EFFECT_TYPES",
    "Back",
    "ClearStatus",
    "Command",
    "CopyFinished",
    "CopyToClipboard",
    "EditCancelled",
    "EditParameter",
    "Effect",
    "FetchParameter",
    "GoToProfiles",
    "HostEffect",
    "KeyPressed",
    "ListParameters",
    "ListingOrigin",
    "Message",
    "ParameterLoaded",
    "ParametersLoaded",
    "Pasted",
    "ProfileSelected",
    "PutParameter",
    "Quit",
    "RegionSelected",
    "RequestFailed",
    "Resized",
    "SaveRequested",
    "SaveSucceeded",
    "ScheduleMessage",
    "SwitchRecent",
    "ViewParameter",
]
