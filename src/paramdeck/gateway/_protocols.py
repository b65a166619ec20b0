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

"""Protocols for the remote parameter gateway."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from ..models import Parameter, ParameterType


class ParameterGateway(Protocol):
    """Remote-access handle bound to one (profile, region) pair.

    Every method raises :class:`~paramdeck.errors.GatewayError` on failure.
    Implementations are called from background threads, one call at a time
    per request.
    """

    @property
    def profile(self) -> str: ...

    @property
    def region(self) -> str: ...

    def list_parameters(self) -> Sequence[Parameter]:
        """Return metadata for every parameter, following pagination."""
        ...

    def get_parameter(self, name: str) -> Parameter:
        """Return ``name`` with its decrypted value."""
        ...

    def put_parameter(self, name: str, value: str, type: ParameterType) -> None:
        """Overwrite ``name`` with ``value``."""
        ...


type GatewayFactory = Callable[[str, str], ParameterGateway]
"""Create a handle for ``(profile, region)``; raises ``GatewayError``."""


__all__ = ["GatewayFactory", "ParameterGateway"]
