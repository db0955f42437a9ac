# Copyright 2025 Google LLC
#
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
# ==============================================================================

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class TranslatableRecord:
    """A content record whose named fields hold source-language text.

    Field values are either strings or nested mappings (e.g. a headline
    object with `headline` and `subheadline` keys).
    """

    record_id: str
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get(self, name: str) -> Any:
        return self.fields.get(name)


@dataclass
class TranslationResult:
    """Translated field values for one record in one language."""

    record_id: str
    language: str
    fields: Dict[str, Any]
    success: bool = True

    def get(self, name: str) -> Any:
        return self.fields.get(name)


@dataclass(frozen=True)
class NotificationTarget:
    """A push delivery token and the platform it was registered from."""

    token: Optional[str]
    platform: Optional[str] = None


@dataclass
class DeliveryOutcome:
    """Result of a single push send."""

    article_id: str
    token: str
    message_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None
