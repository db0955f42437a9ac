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
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, List

from backend.db import DbClient, NewsArticleRecord

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 7
DEFAULT_PROCEDURE = "delete_old_news"


class RetentionStrategy(str, Enum):
    """Where the age comparison runs."""

    FILTER = "filter"
    PROCEDURE = "procedure"


@dataclass
class RetentionResult:
    deleted_count: int
    cutoff: datetime
    strategy: RetentionStrategy
    deleted_articles: List[NewsArticleRecord] = field(default_factory=list)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RetentionSweeper:
    """
    Deletes news articles published more than `retention_days` ago.

    FILTER deletes rows from the client with a `published_at < cutoff`
    filter; PROCEDURE hands the cutoff to a stored procedure that does the
    same on the server and returns the number of deleted rows.
    """

    def __init__(
        self,
        db: DbClient,
        *,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        strategy: RetentionStrategy = RetentionStrategy.FILTER,
        procedure_name: str = DEFAULT_PROCEDURE,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._db = db
        self.retention_days = retention_days
        self.strategy = RetentionStrategy(strategy)
        self.procedure_name = procedure_name
        self._clock = clock

    def cutoff(self) -> datetime:
        return self._clock() - timedelta(days=self.retention_days)

    def sweep(self) -> RetentionResult:
        cutoff = self.cutoff()
        logger.info("Deleting news articles older than: %s", cutoff.isoformat())

        if self.strategy is RetentionStrategy.PROCEDURE:
            count = self._db.call_procedure(
                self.procedure_name, cutoff=cutoff.timestamp()
            )
            result = RetentionResult(
                deleted_count=int(count or 0), cutoff=cutoff, strategy=self.strategy
            )
        else:
            deleted = self._db.delete_articles_before(cutoff.timestamp())
            result = RetentionResult(
                deleted_count=len(deleted),
                cutoff=cutoff,
                strategy=self.strategy,
                deleted_articles=deleted,
            )

        logger.info("Successfully deleted %d old news articles", result.deleted_count)
        return result
