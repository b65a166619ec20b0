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

from __future__ import annotations

from pathlib import Path

import pytest

from paramdeck.config import AppConfig
from paramdeck.messages import HostEffect
from paramdeck.orchestrator import Orchestrator
from paramdeck.runtime import InlineExecutor, Runner
from tests.helpers import (
    PROFILES,
    FakeGatewayFactory,
    Harness,
    HarnessFactory,
    ManualExecutor,
    MemoryStore,
)


@pytest.fixture
def factory() -> FakeGatewayFactory:
    return FakeGatewayFactory()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(profiles=PROFILES, state_dir=tmp_path)


@pytest.fixture
def orchestrator(
    store: MemoryStore, factory: FakeGatewayFactory, config: AppConfig
) -> Orchestrator:
    return Orchestrator(store=store, gateway_factory=factory, config=config)


@pytest.fixture
def make_harness(
    store: MemoryStore, factory: FakeGatewayFactory, config: AppConfig
) -> HarnessFactory:
    """Return a builder for a runner wired to the in-memory collaborators."""

    default_config = config

    def build(
        *,
        executor: InlineExecutor | ManualExecutor | None = None,
        config: AppConfig | None = None,
    ) -> Harness:
        orchestrator = Orchestrator(
            store=store,
            gateway_factory=factory,
            config=config if config is not None else default_config,
        )
        host_effects: list[HostEffect] = []
        runners: list[Runner] = []
        runner = Runner(
            orchestrator=orchestrator,
            state=orchestrator.initial_state(),
            executor=executor if executor is not None else InlineExecutor(),
            post=lambda message: runners[0].dispatch(message),
            on_host_effect=host_effects.append,
        )
        runners.append(runner)
        return Harness(
            orchestrator=orchestrator,
            runner=runner,
            host_effects=host_effects,
            factory=factory,
            store=store,
        )

    return build


@pytest.fixture
def harness(make_harness: HarnessFactory) -> Harness:
    return make_harness()
