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

"""On-disk persistence for region defaults and recent contexts.

Two small JSON documents live in the state directory::

    regions.json   {"profile_regions": {"staging": "eu-central-1"}}
    recents.json   [{"profile": "staging", "region": "eu-central-1"}]

A missing file reads as empty. Writes go to a temporary sibling first and are
renamed into place, so a crash never leaves a half-written document.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .config import DEFAULT_RECENT_CAPACITY
from .errors import PersistenceError
from .logging import StructuredLogger, get_logger
from .models import RecentContext

REGIONS_FILE = "regions.json"
RECENTS_FILE = "recents.json"

logger: StructuredLogger = get_logger(__name__, context={"component": "store"})


class ContextStore(Protocol):
    """Persistence collaborator used by the orchestrator."""

    def load_region_defaults(self) -> dict[str, str]: ...

    def save_region_defaults(self, defaults: Mapping[str, str]) -> None: ...

    def load_recent_contexts(self) -> tuple[RecentContext, ...]: ...

    def save_recent_contexts(self, entries: Sequence[RecentContext]) -> None: ...


@dataclass(slots=True)
class FileContextStore:
    """JSON file store rooted at ``state_dir``.

    Every method raises :class:`PersistenceError` on I/O or decode failures.
    """

    state_dir: Path
    recent_capacity: int = DEFAULT_RECENT_CAPACITY

    @property
    def regions_path(self) -> Path:
        return self.state_dir / REGIONS_FILE

    @property
    def recents_path(self) -> Path:
        return self.state_dir / RECENTS_FILE

    def load_region_defaults(self) -> dict[str, str]:
        payload = self._read(self.regions_path)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise PersistenceError(
                "region defaults must be a JSON object", path=self.regions_path
            )
        regions = payload.get("profile_regions", {})
        if not isinstance(regions, dict):
            raise PersistenceError(
                "profile_regions must be a JSON object", path=self.regions_path
            )
        return {
            str(profile): region
            for profile, region in regions.items()
            if isinstance(region, str) and region
        }

    def save_region_defaults(self, defaults: Mapping[str, str]) -> None:
        self._write(self.regions_path, {"profile_regions": dict(defaults)})

    def load_recent_contexts(self) -> tuple[RecentContext, ...]:
        payload = self._read(self.recents_path)
        if payload is None:
            return ()
        if not isinstance(payload, list):
            raise PersistenceError(
                "recent contexts must be a JSON array", path=self.recents_path
            )
        entries: list[RecentContext] = []
        for item in payload:
            match item:
                case {"profile": str(profile), "region": str(region)} if (
                    profile and region
                ):
                    entry = RecentContext(profile=profile, region=region)
                    if entry not in entries:
                        entries.append(entry)
                case _:
                    logger.debug(
                        "Skipping malformed recent context entry.",
                        event="store.recent_skipped",
                        context={"path": str(self.recents_path)},
                    )
        return tuple(entries[: self.recent_capacity])

    def save_recent_contexts(self, entries: Sequence[RecentContext]) -> None:
        payload = [
            {"profile": entry.profile, "region": entry.region}
            for entry in entries[: self.recent_capacity]
        ]
        self._write(self.recents_path, payload)

    def _read(self, path: Path) -> object | None:
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as error:
            raise PersistenceError(f"failed to read {path}: {error}", path=path) from error
        try:
            return json.loads(raw)
        except json.JSONDecodeError as error:
            raise PersistenceError(f"invalid JSON in {path}: {error}", path=path) from error

    def _write(self, path: Path, payload: object) -> None:
        tmp_path = path.with_name(f"{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            _ = tmp_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
            _ = tmp_path.replace(path)
        except OSError as error:
            raise PersistenceError(f"failed to write {path}: {error}", path=path) from error
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
        logger.debug(
            "Persisted state file.",
            event="store.saved",
            context={"path": str(path)},
        )


__all__ = [
    "RECENTS_FILE",
    "REGIONS_FILE",
    "ContextStore",
    "FileContextStore",
]
