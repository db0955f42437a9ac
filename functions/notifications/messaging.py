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

import json
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Set

import firebase_admin
from firebase_admin import credentials, messaging

from backend.db import NewsArticleRecord

DEFAULT_BODY = "New news update"
BODY_MAX_CHARS = 100
ELLIPSIS = "..."
FIREBASE_APP_NAME = "news-notifications"


class PushDeliveryError(Exception):
    pass


@dataclass(frozen=True)
class PushMessage:
    """A single push notification addressed to one device token."""

    token: str
    title: Optional[str]
    body: str
    data: Dict[str, str] = field(default_factory=dict)
    android_priority: str = "high"
    sound: str = "default"
    badge: int = 1
    apns_priority: str = "10"


def truncate_body(text: Optional[str], max_chars: int = BODY_MAX_CHARS) -> str:
    return (text or DEFAULT_BODY)[:max_chars] + ELLIPSIS


def build_article_message(
    article: NewsArticleRecord, token: str, body_max_chars: int = BODY_MAX_CHARS
) -> PushMessage:
    return PushMessage(
        token=token,
        title=article.title,
        body=truncate_body(article.summary, body_max_chars),
        data={
            "article_id": str(article.id),
            "type": "new_news",
            "click_action": "FLUTTER_NOTIFICATION_CLICK",
        },
    )


def to_firebase_message(message: PushMessage) -> messaging.Message:
    return messaging.Message(
        token=message.token,
        notification=messaging.Notification(title=message.title, body=message.body),
        data=message.data,
        android=messaging.AndroidConfig(priority=message.android_priority),
        apns=messaging.APNSConfig(
            headers={"apns-priority": message.apns_priority},
            payload=messaging.APNSPayload(
                aps=messaging.Aps(
                    sound=message.sound,
                    badge=message.badge,
                    alert=messaging.ApsAlert(title=message.title, body=message.body),
                )
            ),
        ),
    )


class PushClient(Protocol):
    """Sends one push message and returns the provider's message id."""

    def send(self, message: PushMessage) -> str:
        ...


class FirebasePushClient:
    """
    Push client backed by Firebase Cloud Messaging.
    """

    def __init__(self, service_account_json: str, app_name: str = FIREBASE_APP_NAME):
        if not service_account_json:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT is required for FirebasePushClient")
        try:
            self._app = firebase_admin.get_app(app_name)
        except ValueError:
            cred = credentials.Certificate(json.loads(service_account_json))
            self._app = firebase_admin.initialize_app(cred, name=app_name)

    def send(self, message: PushMessage) -> str:
        return messaging.send(to_firebase_message(message), app=self._app)


class InMemoryPushClient:
    """Test double for push delivery."""

    def __init__(self, failing_tokens: Optional[Set[str]] = None):
        self.failing_tokens: Set[str] = set(failing_tokens or ())
        self.sent: List[PushMessage] = []
        self.attempts: List[PushMessage] = []

    def send(self, message: PushMessage) -> str:
        self.attempts.append(message)
        if message.token in self.failing_tokens:
            raise PushDeliveryError(f"Delivery to {message.token} failed")
        self.sent.append(message)
        return f"projects/test/messages/{uuid.uuid4().hex}"
