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

"""Value objects shared by the gateway, the store and the screens."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum


class ParameterType(StrEnum):
    """Declared type of a stored parameter, spelled as the service spells it."""

    STRING = "String"
    STRING_LIST = "StringList"
    SECURE_STRING = "SecureString"


@dataclass(frozen=True, slots=True)
class Parameter:
    """A named, versioned configuration entry.

    Listings return parameters with an empty ``value``. A full fetch fills it
    with the decrypted value. Identity is the ``name``.
    """

    name: str
    type: ParameterType = ParameterType.STRING
    value: str = ""
    arn: str = ""
    version: int = 0
    last_modified: datetime | None = None
    data_type: str = ""

    def with_value(self, value: str) -> Parameter:
        """Return a copy carrying ``value``; the receiver is left untouched."""
        return replace(self, value=value)


@dataclass(frozen=True, slots=True)
class RecentContext:
    """A remembered (profile, region) pair."""

    profile: str
    region: str

    @property
    def label(self) -> str:
        return f"{self.profile}@{self.region}"


def promote_recent(
    entries: Sequence[RecentContext],
    entry: RecentContext,
    *,
    capacity: int,
) -> tuple[RecentContext, ...]:
    """Move ``entry`` to the front, dropping duplicates and overflow."""

    rest = tuple(existing for existing in entries if existing != entry)
    return (entry, *rest)[:capacity]


__all__ = [
    "Parameter",
    "ParameterType",
    "RecentContext",
    "promote_recent",
]
