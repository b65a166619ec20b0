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

"""Tests for the JSON file store of region defaults and recent contexts."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from paramdeck.errors import PersistenceError
from paramdeck.models import RecentContext, promote_recent
from paramdeck.store import RECENTS_FILE, REGIONS_FILE, FileContextStore

pytestmark = pytest.mark.core

DEV = RecentContext("dev", "us-east-1")
PROD = RecentContext("prod", "eu-west-1")


@pytest.fixture
def store(tmp_path: Path) -> FileContextStore:
    return FileContextStore(tmp_path / "state")


class TestRegionDefaults:
    """Tests for region default persistence."""

    def test_missing_file_reads_empty(self, store: FileContextStore) -> None:
        assert store.load_region_defaults() == {}

    def test_round_trip_and_layout(self, store: FileContextStore) -> None:
        store.save_region_defaults({"dev": "us-east-1", "prod": "eu-west-1"})
        assert store.load_region_defaults() == {"dev": "us-east-1", "prod": "eu-west-1"}
        on_disk = json.loads((store.state_dir / REGIONS_FILE).read_text())
        assert on_disk == {"profile_regions": {"dev": "us-east-1", "prod": "eu-west-1"}}

    def test_no_temporary_file_is_left_behind(self, store: FileContextStore) -> None:
        store.save_region_defaults({"dev": "us-east-1"})
        assert sorted(path.name for path in store.state_dir.iterdir()) == [REGIONS_FILE]

    def test_invalid_json_is_a_persistence_error(self, store: FileContextStore) -> None:
        store.state_dir.mkdir(parents=True)
        _ = store.regions_path.write_text("{not json")
        with pytest.raises(PersistenceError) as excinfo:
            _ = store.load_region_defaults()
        assert excinfo.value.path == store.regions_path

    def test_wrong_shape_is_a_persistence_error(self, store: FileContextStore) -> None:
        store.state_dir.mkdir(parents=True)
        _ = store.regions_path.write_text('{"profile_regions": ["dev"]}')
        with pytest.raises(PersistenceError):
            _ = store.load_region_defaults()

    def test_blank_and_non_string_regions_are_skipped(
        self, store: FileContextStore
    ) -> None:
        store.state_dir.mkdir(parents=True)
        _ = store.regions_path.write_text(
            '{"profile_regions": {"dev": "us-east-1", "prod": "", "qa": 3}}'
        )
        assert store.load_region_defaults() == {"dev": "us-east-1"}

    def test_unwritable_directory_is_a_persistence_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        _ = blocker.write_text("a file, not a directory")
        store = FileContextStore(blocker / "state")
        with pytest.raises(PersistenceError):
            store.save_region_defaults({"dev": "us-east-1"})


class TestRecentContexts:
    """Tests for recent context persistence."""

    def test_missing_file_reads_empty(self, store: FileContextStore) -> None:
        assert store.load_recent_contexts() == ()

    def test_round_trip_keeps_order(self, store: FileContextStore) -> None:
        store.save_recent_contexts((PROD, DEV))
        assert store.load_recent_contexts() == (PROD, DEV)
        on_disk = json.loads((store.state_dir / RECENTS_FILE).read_text())
        assert on_disk == [
            {"profile": "prod", "region": "eu-west-1"},
            {"profile": "dev", "region": "us-east-1"},
        ]

    def test_capacity_is_enforced_both_ways(self, tmp_path: Path) -> None:
        store = FileContextStore(tmp_path, recent_capacity=2)
        entries = tuple(RecentContext("dev", f"region-{i}") for i in range(4))
        store.save_recent_contexts(entries)
        assert store.load_recent_contexts() == entries[:2]

    def test_malformed_and_duplicate_entries_are_skipped(
        self, store: FileContextStore
    ) -> None:
        store.state_dir.mkdir(parents=True)
        _ = store.recents_path.write_text(
            json.dumps(
                [
                    {"profile": "dev", "region": "us-east-1"},
                    {"profile": "dev"},
                    "prod@eu-west-1",
                    {"profile": "", "region": "eu-west-1"},
                    {"profile": "dev", "region": "us-east-1"},
                    {"profile": "prod", "region": "eu-west-1"},
                ]
            )
        )
        assert store.load_recent_contexts() == (DEV, PROD)

    def test_non_array_is_a_persistence_error(self, store: FileContextStore) -> None:
        store.state_dir.mkdir(parents=True)
        _ = store.recents_path.write_text('{"profile": "dev"}')
        with pytest.raises(PersistenceError):
            _ = store.load_recent_contexts()


class TestPromoteRecent:
    """Tests for promote_recent."""

    def test_new_entry_goes_first(self) -> None:
        assert promote_recent((DEV,), PROD, capacity=5) == (PROD, DEV)

    def test_existing_entry_moves_without_duplicating(self) -> None:
        assert promote_recent((DEV, PROD), PROD, capacity=5) == (PROD, DEV)

    def test_overflow_drops_the_oldest(self) -> None:
        entries = tuple(RecentContext("dev", f"r{i}") for i in range(5))
        promoted = promote_recent(entries, PROD, capacity=5)
        assert promoted == (PROD, *entries[:4])
