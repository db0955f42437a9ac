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

import logging
from dataclasses import dataclass, field
from typing import List

from backend.db import DbClient
from notifications.messaging import BODY_MAX_CHARS, PushClient, build_article_message
from shared.types import DeliveryOutcome, NotificationTarget

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5


@dataclass
class DispatchSummary:
    message: str
    article_ids: List[str] = field(default_factory=list)
    target_count: int = 0
    success_count: int = 0
    error_count: int = 0
    skipped_count: int = 0
    outcomes: List[DeliveryOutcome] = field(default_factory=list)


def _mask(token: str, length: int = 15) -> str:
    return f"{token[:length]}..."


class NotificationDispatcher:
    """
    Sends one push per (unnotified article, device token) pair, then marks
    the whole batch notified.
    """

    def __init__(
        self,
        db: DbClient,
        push_client: PushClient,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        body_max_chars: int = BODY_MAX_CHARS,
    ):
        self._db = db
        self._push = push_client
        self.batch_size = batch_size
        self.body_max_chars = body_max_chars

    def run(self) -> DispatchSummary:
        articles = self._db.fetch_unnotified_articles(limit=self.batch_size)
        logger.info("Found %d new articles", len(articles))
        if not articles:
            return DispatchSummary(message="No new articles")

        targets = [
            NotificationTarget(token=row.fcm_token, platform=row.platform)
            for row in self._db.list_device_tokens()
        ]
        logger.info("Found %d user tokens", len(targets))
        if not targets:
            return DispatchSummary(message="No user tokens found")

        summary = DispatchSummary(message="", target_count=len(targets))
        for article in articles:
            summary.article_ids.append(article.id)
            for target in targets:
                if not target.token:
                    logger.warning("Skipping empty token for article %s", article.id)
                    summary.skipped_count += 1
                    continue
                outcome = self._send(article, target)
                summary.outcomes.append(outcome)
                if outcome.success:
                    summary.success_count += 1
                else:
                    summary.error_count += 1

        # Every fetched article is marked, including ones whose sends all failed.
        updated = self._db.mark_articles_notified(summary.article_ids)
        logger.info("Marked %d articles as notified", updated)

        summary.message = (
            f"Notifications sent for {len(articles)} articles - "
            f"{summary.success_count} successful, {summary.error_count} failed"
        )
        logger.info(summary.message)
        return summary

    def _send(self, article, target: NotificationTarget) -> DeliveryOutcome:
        message = build_article_message(article, target.token, self.body_max_chars)
        try:
            message_id = self._push.send(message)
        except Exception as e:
            logger.warning(
                "Failed to notify %s device %s: %s",
                target.platform,
                _mask(target.token),
                e,
            )
            return DeliveryOutcome(
                article_id=article.id, token=target.token, error=str(e) or repr(e)
            )
        logger.info(
            "Notification sent to %s device %s (%s)",
            target.platform,
            _mask(target.token),
            message_id,
        )
        return DeliveryOutcome(
            article_id=article.id, token=target.token, message_id=message_id
        )
