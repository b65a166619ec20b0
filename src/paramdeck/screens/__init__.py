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

"""Screen models.

Each model is a frozen dataclass with an ``update(message)`` reducer that
returns the next model and the effects to run. Screens never talk to each
other; cross-screen changes go through intents handled by the orchestrator.
"""

from __future__ import annotations

from ._view import NO_EFFECTS, Effects, ScreenView, ViewRow, context_title
from ._widgets import ListCursor, TextBuffer, visible_window
from .parameter_detail import STATUS_CLEAR_DELAY, ParameterDetailModel, parse_structured
from .parameter_edit import ParameterEditModel
from .parameter_list import SEARCH_LIMIT, ParameterListModel, filter_parameters
from .profile_selector import ProfileSelectorModel
from .region_selector import RegionSelectorModel

__all__ = [
    "NO_EFFECTS",
    "SEARCH_LIMIT",
    "STATUS_CLEAR_DELAY",
    "Effects",
    "ListCursor",
    "ParameterDetailModel",
    "ParameterEditModel",
    "ParameterListModel",
    "ProfileSelectorModel",
    "RegionSelectorModel",
    "ScreenView",
    "TextBuffer",
    "ViewRow",
    "context_title",
    "filter_parameters",
    "parse_structured",
    "visible_window",
]
