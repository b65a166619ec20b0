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

"""Base exception hierarchy for :mod:`paramdeck`."""

from __future__ import annotations

from pathlib import Path


class ParamdeckError(Exception):
    """Base class for all paramdeck exceptions.

    Callers can catch every library-specific failure with a single handler
    while standard Python exceptions keep propagating normally.

    Example:
        Surface any paramdeck failure on the status line::

            try:
                write_path(tree, "server.port", "9090")
            except ParamdeckError as e:
                status = f"Error: {e}"
    """


class MalformedPathError(ParamdeckError, ValueError):
    """Raised when a structured-value path cannot be parsed.

    The grammar rejects an opening ``[`` without a matching ``]`` and a
    closing ``]`` without an opening ``[``.

    Attributes:
        path: The path string that failed to parse.
        position: Offset of the unbalanced bracket.
    """

    def __init__(self, path: str, position: int) -> None:
        super().__init__(
            f"unbalanced {path[position]!r} at offset {position} in path {path!r}"
        )
        self.path = path
        self.position = position


class PathResolutionError(ParamdeckError, LookupError):
    """Raised when a well-formed path does not resolve against a tree.

    Reads degrade to an empty display instead of raising. Writes propagate
    this error so the edit buffer stays intact for correction.

    Attributes:
        path: The full path being resolved.
        segment: Text of the segment where resolution stopped.
    """

    def __init__(self, message: str, *, path: str, segment: str) -> None:
        super().__init__(message)
        self.path = path
        self.segment = segment


class PathNotFoundError(PathResolutionError):
    """A key segment names a member that does not exist."""


class PathTypeMismatchError(PathResolutionError):
    """A segment expected an object or array but found another shape."""


class PathIndexError(PathResolutionError):
    """An index is out of range or is not a non-negative integer."""


class GatewayError(ParamdeckError, RuntimeError):
    """Raised when the remote parameter service rejects or fails a call.

    Network, credential and service errors all land here. The original
    botocore exception is chained as ``__cause__``.

    Attributes:
        operation: ``connect``, ``list``, ``get`` or ``put``.
        profile: Profile the handle was created for.
        region: Region latched into the handle.
        name: Parameter name, for ``get`` and ``put``.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        profile: str,
        region: str,
        name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.profile = profile
        self.region = region
        self.name = name


class PersistenceError(ParamdeckError, OSError):
    """Raised when region defaults or recent contexts cannot be read or written.

    Persistence is a best-effort cache: the orchestrator logs this error and
    carries on with in-memory state.
    """

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path


class ConfigError(ParamdeckError, ValueError):
    """Raised when the paramdeck configuration is invalid."""


class InvalidTransitionError(ParamdeckError, RuntimeError):
    """Raised when a trigger has no transition from the current screen."""

    def __init__(self, screen: object, trigger: object) -> None:
        super().__init__(f"no transition for {trigger!r} from {screen!r}")
        self.screen = screen
        self.trigger = trigger


__all__ = [
    "ConfigError",
    "GatewayError",
    "InvalidTransitionError",
    "MalformedPathError",
    "ParamdeckError",
    "PathIndexError",
    "PathNotFoundError",
    "PathResolutionError",
    "PathTypeMismatchError",
    "PersistenceError",
]
