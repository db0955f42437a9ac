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
import time
from dataclasses import dataclass, field
from typing import Callable, List

from backend.db import DbClient, VideoTranslationRecord
from shared.types import TranslatableRecord, TranslationResult
from translation.fanout import translated_flags

logger = logging.getLogger(__name__)

VIDEO_FIELDS = ("title", "source_name", "platform_name")


@dataclass
class LanguageOutcome:
    language: str
    success: bool
    title_translated: bool = False
    source_name_translated: bool = False
    platform_name_translated: bool = False


@dataclass
class SinkSummary:
    record_id: str
    translations_created: int
    total_languages: int
    stored_translations: int
    results: List[LanguageOutcome] = field(default_factory=list)


class TranslationSink:
    """
    Persists per-language video translations with an upsert keyed on
    (video_article_id, language_code).
    """

    def __init__(self, db: DbClient, clock: Callable[[], float] = time.time):
        self._db = db
        self._clock = clock

    def persist(
        self, record: TranslatableRecord, results: list[TranslationResult]
    ) -> SinkSummary:
        outcomes: list[LanguageOutcome] = []
        created = 0
        for result in results:
            row = self._to_row(record.record_id, result.language, result.fields)
            try:
                self._db.upsert_video_translation(row)
                saved = True
                created += 1
                logger.info("[%s] Saved %s translation", record.record_id, result.language)
            except Exception:
                saved = False
                logger.exception(
                    "[%s] Database error for %s", record.record_id, result.language
                )
                self._write_fallback(record, result.language)

            flags = translated_flags(record, result, VIDEO_FIELDS)
            outcomes.append(
                LanguageOutcome(
                    language=result.language,
                    success=saved,
                    title_translated=flags["title"],
                    source_name_translated=flags["source_name"],
                    platform_name_translated=flags["platform_name"],
                )
            )

        stored = len(self._db.list_video_translations(record.record_id))
        logger.info(
            "[%s] %d/%d languages saved, %d rows stored",
            record.record_id,
            created,
            len(results),
            stored,
        )
        return SinkSummary(
            record_id=record.record_id,
            translations_created=created,
            total_languages=len(results),
            stored_translations=stored,
            results=outcomes,
        )

    def _write_fallback(self, record: TranslatableRecord, language: str) -> None:
        row = self._to_row(record.record_id, language, record.fields)
        try:
            self._db.upsert_video_translation(row)
            logger.info("[%s] Created fallback entry for %s", record.record_id, language)
        except Exception:
            logger.exception(
                "[%s] Failed to create fallback for %s", record.record_id, language
            )

    def _to_row(self, record_id: str, language: str, fields) -> VideoTranslationRecord:
        return VideoTranslationRecord(
            video_article_id=record_id,
            language_code=language,
            translated_title=fields.get("title"),
            translated_source_name=fields.get("source_name"),
            translated_platform_name=fields.get("platform_name"),
            updated_at=self._clock(),
        )
