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

"""Session orchestrator: the reducer at the top of the message stream.

The orchestrator owns :class:`SessionState`. Navigation intents and
completions with cross-screen consequences are handled here; everything
else goes to the active screen. Every move between screens is looked up in
:mod:`paramdeck.navigation`, so an intent that the table does not allow from
the active screen is ignored.

Example::

    orchestrator = Orchestrator(store=store, gateway_factory=connect_ssm, config=config)
    state = orchestrator.initial_state()
    state, effects = orchestrator.update(state, KeyPressed("enter"))
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import assert_never

from .config import AppConfig
from .errors import GatewayError, PersistenceError
from .gateway import GatewayFactory, ParameterGateway
from .logging import StructuredLogger, get_logger
from .messages import (
    Back,
    ClearStatus,
    CopyFinished,
    EditCancelled,
    EditParameter,
    FetchParameter,
    GoToProfiles,
    KeyPressed,
    ListingOrigin,
    ListParameters,
    Message,
    ParameterLoaded,
    ParametersLoaded,
    ProfileSelected,
    PutParameter,
    Quit,
    RegionSelected,
    RequestFailed,
    Resized,
    SaveRequested,
    SaveSucceeded,
    SwitchRecent,
    ViewParameter,
)
from .models import RecentContext, promote_recent
from .navigation import INITIAL_SCREEN, NAVIGATION, Screen, Trigger, back_target
from .screens import (
    NO_EFFECTS,
    Effects,
    ParameterDetailModel,
    ParameterEditModel,
    ParameterListModel,
    ProfileSelectorModel,
    RegionSelectorModel,
    ScreenView,
)
from .store import ContextStore

logger: StructuredLogger = get_logger(__name__, context={"component": "orchestrator"})


@dataclass(frozen=True, slots=True)
class SessionState:
    """Everything the session knows, replaced wholesale on every message."""

    screen: Screen = INITIAL_SCREEN
    profile: str = ""
    region: str = ""
    handles: Mapping[str, ParameterGateway] = field(default_factory=dict)
    region_defaults: Mapping[str, str] = field(default_factory=dict)
    recents: tuple[RecentContext, ...] = ()
    next_request_id: int = 1
    width: int = 80
    height: int = 24
    profile_select: ProfileSelectorModel = field(default_factory=ProfileSelectorModel)
    region_select: RegionSelectorModel = field(default_factory=RegionSelectorModel)
    param_list: ParameterListModel = field(default_factory=ParameterListModel)
    param_detail: ParameterDetailModel = field(default_factory=ParameterDetailModel)
    param_edit: ParameterEditModel = field(default_factory=ParameterEditModel)

    @property
    def context(self) -> RecentContext | None:
        if not self.profile or not self.region:
            return None
        return RecentContext(profile=self.profile, region=self.region)

    @property
    def handle(self) -> ParameterGateway | None:
        return self.handles.get(self.profile)

    def allocate_request(self) -> tuple[SessionState, int]:
        request_id = self.next_request_id
        return replace(self, next_request_id=request_id + 1), request_id


@dataclass(slots=True)
class Orchestrator:
    """Pure transition function over :class:`SessionState`.

    ``update`` performs no I/O except best-effort persistence through
    ``store`` and handle creation through ``gateway_factory``; remote calls
    are returned as commands.
    """

    store: ContextStore
    gateway_factory: GatewayFactory
    config: AppConfig

    def initial_state(self) -> SessionState:
        region_defaults = self._load(
            "region_defaults", self.store.load_region_defaults, {}
        )
        loaded = self._load("recent_contexts", self.store.load_recent_contexts, ())
        recents = tuple(loaded[: self.config.recent_capacity])
        return SessionState(
            region_defaults=region_defaults,
            recents=recents,
            profile_select=ProfileSelectorModel.create(self.config.profiles),
            region_select=RegionSelectorModel.create(self.config.regions),
            param_list=ParameterListModel().with_recents(recents),
        )

    def view(self, state: SessionState) -> ScreenView:
        match state.screen:
            case Screen.PROFILE_SELECT:
                return state.profile_select.view()
            case Screen.REGION_SELECT:
                return state.region_select.view()
            case Screen.PARAM_LIST:
                return state.param_list.view()
            case Screen.PARAM_DETAIL:
                return state.param_detail.view()
            case Screen.PARAM_EDIT:
                return state.param_edit.view()
            case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
                assert_never(unreachable)

    def update(  # noqa: C901, PLR0911
        self, state: SessionState, message: Message
    ) -> tuple[SessionState, Effects]:
        match message:
            case KeyPressed(key="ctrl+c"):
                return state, (Quit(),)
            case Resized(width=width, height=height):
                return self._resize(state, width, height), NO_EFFECTS
            case ProfileSelected(profile=profile):
                return self._profile_selected(state, profile), NO_EFFECTS
            case RegionSelected(region=region):
                return self._region_selected(state, region)
            case ViewParameter():
                return self._view_parameter(state, message)
            case EditParameter():
                return self._edit_parameter(state, message), NO_EFFECTS
            case SaveRequested():
                return self._save_requested(state, message)
            case SaveSucceeded():
                return self._save_succeeded(state, message)
            case EditCancelled():
                return self._edit_cancelled(state), NO_EFFECTS
            case Back():
                return self._back(state), NO_EFFECTS
            case GoToProfiles():
                return self._go_to_profiles(state), NO_EFFECTS
            case SwitchRecent(position=position):
                return self._switch_recent(state, position)
            case ParametersLoaded():
                return self._parameters_loaded(state, message)
            case ParameterLoaded(request_id=request_id):
                if not state.param_detail.awaits(request_id):
                    return self._stale(state, message, request_id)
                detail, effects = state.param_detail.update(message)
                return replace(state, param_detail=detail), effects
            case RequestFailed():
                return self._request_failed(state, message)
            case CopyFinished() | ClearStatus():
                detail, effects = state.param_detail.update(message)
                return replace(state, param_detail=detail), effects
            case _:
                return self._forward(state, message)

    # Navigation -------------------------------------------------------------

    def _permits(self, state: SessionState, trigger: Trigger) -> bool:
        if NAVIGATION.allows(state.screen, trigger):
            return True
        logger.debug(
            "Ignoring trigger not allowed from the active screen.",
            event="navigation.ignored",
            context={"screen": state.screen.name, "trigger": trigger.name},
        )
        return False

    def _transition(
        self, state: SessionState, trigger: Trigger, **changes: object
    ) -> SessionState:
        target = NAVIGATION.target(state.screen, trigger)
        logger.info(
            "Screen transition.",
            event="navigation.transition",
            context={
                "from": state.screen.name,
                "to": target.name,
                "trigger": trigger.name,
            },
        )
        return replace(state, screen=target, **changes)  # pyright: ignore[reportArgumentType]

    def _profile_selected(self, state: SessionState, profile: str) -> SessionState:
        if not self._permits(state, Trigger.PROFILE_CHOSEN):
            return state
        region_select = state.region_select.enter(
            profile, state.region_defaults.get(profile)
        )
        return self._transition(
            state,
            Trigger.PROFILE_CHOSEN,
            profile=profile,
            region="",
            region_select=region_select,
        )

    def _region_selected(
        self, state: SessionState, region: str
    ) -> tuple[SessionState, Effects]:
        if not self._permits(state, Trigger.REGION_CHOSEN):
            return state, NO_EFFECTS
        context = RecentContext(profile=state.profile, region=region)
        try:
            handle = self._connect(context)
        except GatewayError as error:
            # The region screen stays active with the cause shown.
            return replace(
                state, region_select=state.region_select.with_error(str(error))
            ), NO_EFFECTS

        defaults = {**state.region_defaults, context.profile: region}
        self._persist(
            "region_defaults", lambda: self.store.save_region_defaults(defaults)
        )
        state, request_id = state.allocate_request()
        param_list = state.param_list.with_recents(state.recents).begin_loading(
            context, request_id, ListingOrigin.SELECTION
        )
        state = self._transition(
            state,
            Trigger.REGION_CHOSEN,
            region=region,
            region_defaults=defaults,
            handles={**state.handles, context.profile: handle},
            param_list=param_list,
        )
        return state, (
            ListParameters(
                request_id=request_id,
                gateway=handle,
                context=context,
                origin=ListingOrigin.SELECTION,
            ),
        )

    def _view_parameter(
        self, state: SessionState, message: ViewParameter
    ) -> tuple[SessionState, Effects]:
        if not self._permits(state, Trigger.VIEW_PARAMETER):
            return state, NO_EFFECTS
        handle, context = state.handle, state.context
        if handle is None or context is None:
            logger.error(
                "No remote handle for the current profile.",
                event="orchestrator.missing_handle",
                context={"profile": state.profile, "region": state.region},
            )
            return state, NO_EFFECTS
        state, request_id = state.allocate_request()
        detail = state.param_detail.begin_loading(context, message.parameter, request_id)
        state = self._transition(state, Trigger.VIEW_PARAMETER, param_detail=detail)
        return state, (
            FetchParameter(
                request_id=request_id, gateway=handle, name=message.parameter.name
            ),
        )

    def _edit_parameter(
        self, state: SessionState, message: EditParameter
    ) -> SessionState:
        context = state.context
        if context is None or not self._permits(state, Trigger.EDIT_REQUESTED):
            return state
        edit = state.param_edit.enter(
            context,
            message.parameter,
            message.path,
            quoted_strings=self.config.quoted_strings,
        )
        return self._transition(state, Trigger.EDIT_REQUESTED, param_edit=edit)

    def _save_requested(
        self, state: SessionState, message: SaveRequested
    ) -> tuple[SessionState, Effects]:
        handle = state.handle
        if state.screen is not Screen.PARAM_EDIT or handle is None:
            return state, NO_EFFECTS
        state, request_id = state.allocate_request()
        logger.info(
            "Saving parameter.",
            event="orchestrator.save_dispatched",
            context={"request_id": request_id, "name": message.parameter.name},
        )
        return replace(state, param_edit=state.param_edit.begin_saving(request_id)), (
            PutParameter(
                request_id=request_id,
                gateway=handle,
                parameter=message.parameter,
                value=message.value,
            ),
        )

    def _save_succeeded(
        self, state: SessionState, message: SaveSucceeded
    ) -> tuple[SessionState, Effects]:
        handle, context = state.handle, state.context
        if not state.param_edit.awaits(message.request_id):
            return self._stale(state, message, message.request_id)
        if (
            handle is None
            or context is None
            or not self._permits(state, Trigger.SAVE_CONFIRMED)
        ):
            return replace(state, param_edit=state.param_edit.reset()), NO_EFFECTS
        state, request_id = state.allocate_request()
        detail = state.param_detail.begin_loading(context, message.parameter, request_id)
        state = self._transition(
            state,
            Trigger.SAVE_CONFIRMED,
            param_detail=detail,
            param_edit=state.param_edit.reset(),
        )
        return state, (
            FetchParameter(
                request_id=request_id, gateway=handle, name=message.parameter.name
            ),
        )

    def _edit_cancelled(self, state: SessionState) -> SessionState:
        if not self._permits(state, Trigger.EDIT_CANCELLED):
            return state
        return self._transition(
            state, Trigger.EDIT_CANCELLED, param_edit=state.param_edit.reset()
        )

    def _back(self, state: SessionState) -> SessionState:
        if back_target(state.screen) is None:
            return state
        return self._transition(state, Trigger.BACK, **self._leaving(state))

    def _go_to_profiles(self, state: SessionState) -> SessionState:
        if not self._permits(state, Trigger.GO_TO_PROFILES):
            return state
        return self._transition(state, Trigger.GO_TO_PROFILES, **self._leaving(state))

    def _leaving(self, state: SessionState) -> dict[str, object]:
        """Stop the screen being left from applying its in-flight result."""
        match state.screen:
            case Screen.PARAM_LIST:
                return {"param_list": state.param_list.abandon()}
            case Screen.PARAM_DETAIL:
                return {"param_detail": state.param_detail.abandon()}
            case Screen.PARAM_EDIT:
                return {"param_edit": state.param_edit.reset()}
            case Screen.PROFILE_SELECT | Screen.REGION_SELECT:
                return {}
            case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
                assert_never(unreachable)

    def _switch_recent(
        self, state: SessionState, position: int
    ) -> tuple[SessionState, Effects]:
        if not self._permits(state, Trigger.SWITCH_RECENT):
            return state, NO_EFFECTS
        if not 1 <= position <= len(state.recents):
            return state, NO_EFFECTS
        entry = state.recents[position - 1]
        if entry == state.context:
            logger.debug(
                "Recent context is already active.",
                event="orchestrator.recent_noop",
                context={"profile": entry.profile, "region": entry.region},
            )
            return state, NO_EFFECTS
        try:
            handle = self._connect(entry)
        except GatewayError as error:
            return replace(
                state, param_list=state.param_list.with_error(str(error))
            ), NO_EFFECTS

        defaults = {**state.region_defaults, entry.profile: entry.region}
        self._persist(
            "region_defaults", lambda: self.store.save_region_defaults(defaults)
        )
        state, request_id = state.allocate_request()
        param_list = state.param_list.begin_loading(
            entry, request_id, ListingOrigin.RECENT
        )
        state = self._transition(
            state,
            Trigger.SWITCH_RECENT,
            profile=entry.profile,
            region=entry.region,
            region_defaults=defaults,
            handles={**state.handles, entry.profile: handle},
            param_list=param_list,
        )
        return state, (
            ListParameters(
                request_id=request_id,
                gateway=handle,
                context=entry,
                origin=ListingOrigin.RECENT,
            ),
        )

    # Completions ------------------------------------------------------------

    def _parameters_loaded(
        self, state: SessionState, message: ParametersLoaded
    ) -> tuple[SessionState, Effects]:
        if not state.param_list.awaits(message.request_id):
            return self._stale(state, message, message.request_id)
        logger.info(
            "Parameters loaded.",
            event="orchestrator.parameters_loaded",
            context={
                "request_id": message.request_id,
                "profile": message.context.profile,
                "region": message.context.region,
                "origin": message.origin.value,
                "count": len(message.parameters),
            },
        )
        param_list = state.param_list
        if message.origin is ListingOrigin.SELECTION and message.parameters:
            recents = promote_recent(
                state.recents, message.context, capacity=self.config.recent_capacity
            )
            self._persist(
                "recent_contexts", lambda: self.store.save_recent_contexts(recents)
            )
            state = replace(state, recents=recents)
            param_list = param_list.with_recents(recents)
        param_list, effects = param_list.update(message)
        return replace(state, param_list=param_list), effects

    def _request_failed(
        self, state: SessionState, message: RequestFailed
    ) -> tuple[SessionState, Effects]:
        request_id = message.request_id
        if state.param_list.awaits(request_id):
            param_list, effects = state.param_list.update(message)
            return replace(state, param_list=param_list), effects
        if state.param_detail.awaits(request_id):
            detail, effects = state.param_detail.update(message)
            return replace(state, param_detail=detail), effects
        if state.param_edit.awaits(request_id):
            edit, effects = state.param_edit.update(message)
            return replace(state, param_edit=edit), effects
        return self._stale(state, message, request_id)

    def _stale(
        self, state: SessionState, message: Message, request_id: int
    ) -> tuple[SessionState, Effects]:
        logger.info(
            "Discarding result for a request nobody waits for.",
            event="orchestrator.stale_result",
            context={"request_id": request_id, "message": type(message).__name__},
        )
        return state, NO_EFFECTS

    # Plumbing ---------------------------------------------------------------

    def _resize(self, state: SessionState, width: int, height: int) -> SessionState:
        return replace(
            state,
            width=width,
            height=height,
            profile_select=state.profile_select.resize(width, height),
            region_select=state.region_select.resize(width, height),
            param_list=state.param_list.resize(width, height),
            param_detail=state.param_detail.resize(width, height),
            param_edit=state.param_edit.resize(width, height),
        )

    def _forward(
        self, state: SessionState, message: Message
    ) -> tuple[SessionState, Effects]:
        match state.screen:
            case Screen.PROFILE_SELECT:
                profile_select, effects = state.profile_select.update(message)
                return replace(state, profile_select=profile_select), effects
            case Screen.REGION_SELECT:
                region_select, effects = state.region_select.update(message)
                return replace(state, region_select=region_select), effects
            case Screen.PARAM_LIST:
                param_list, effects = state.param_list.update(message)
                return replace(state, param_list=param_list), effects
            case Screen.PARAM_DETAIL:
                detail, effects = state.param_detail.update(message)
                return replace(state, param_detail=detail), effects
            case Screen.PARAM_EDIT:
                edit, effects = state.param_edit.update(message)
                return replace(state, param_edit=edit), effects
            case _ as unreachable:  # pragma: no cover - exhaustiveness sentinel
                assert_never(unreachable)

    def _connect(self, context: RecentContext) -> ParameterGateway:
        try:
            return self.gateway_factory(context.profile, context.region)
        except GatewayError as error:
            logger.warning(
                "Failed to create remote handle.",
                event="orchestrator.connect_failed",
                context={
                    "profile": context.profile,
                    "region": context.region,
                    "error": str(error),
                },
            )
            raise

    def _persist(self, what: str, save: Callable[[], None]) -> None:
        try:
            save()
        except PersistenceError as error:
            logger.warning(
                "Persistence failed; continuing without it.",
                event="orchestrator.persist_failed",
                context={"what": what, "path": str(error.path), "error": str(error)},
            )

    def _load[T](self, what: str, load: Callable[[], T], fallback: T) -> T:
        try:
            return load()
        except PersistenceError as error:
            logger.warning(
                "Could not load persisted state; starting empty.",
                event="orchestrator.load_failed",
                context={"what": what, "path": str(error.path), "error": str(error)},
            )
            return fallback


__all__ = ["Orchestrator", "SessionState"]
