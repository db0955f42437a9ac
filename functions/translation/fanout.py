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
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from shared.types import TranslatableRecord, TranslationResult
from translation.google_translate import TranslateClient

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.5
DEFAULT_NESTED_KEYS = ("headline", "subheadline")
DEFAULT_STRUCTURED_FIELDS = ("headline",)


class Throttle:
    """
    Fixed pause between consecutive steps of a sequential loop.

    The first call to `wait` returns immediately; every later call sleeps
    for `delay_seconds`, so steps never overlap and are spaced evenly.
    """

    def __init__(
        self,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.delay_seconds = max(0.0, delay_seconds)
        self._sleep = sleep
        self._started = False

    def wait(self) -> None:
        if self._started and self.delay_seconds > 0:
            self._sleep(self.delay_seconds)
        self._started = True


class FanOutTranslator:
    """
    Translates every field of a record into each configured language.

    Languages are processed one after another with a throttle pause between
    them. A failure in one language never stops the others.
    """

    def __init__(
        self,
        client: TranslateClient,
        languages: Sequence[str],
        *,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        nested_keys: Iterable[str] = DEFAULT_NESTED_KEYS,
        structured_fields: Iterable[str] = DEFAULT_STRUCTURED_FIELDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not languages:
            raise ValueError("At least one target language is required")
        self.client = client
        self.languages = list(languages)
        self.delay_seconds = delay_seconds
        self.nested_keys = tuple(nested_keys)
        self.structured_fields = frozenset(structured_fields)
        self._sleep = sleep

    def translate_record(self, record: TranslatableRecord) -> list[TranslationResult]:
        """
        Returns one TranslationResult per configured language, in order.

        A language whose translation raises gets the original field values
        and success=False.
        """
        throttle = Throttle(self.delay_seconds, sleep=self._sleep)
        results: list[TranslationResult] = []
        for language in self.languages:
            throttle.wait()
            try:
                fields = {
                    name: self._translate_field(name, value, language)
                    for name, value in record.fields.items()
                }
                results.append(
                    TranslationResult(
                        record_id=record.record_id,
                        language=language,
                        fields=fields,
                    )
                )
                logger.info("[%s] Completed translation for %s", record.record_id, language)
            except Exception:
                logger.exception(
                    "[%s] Translation failed for %s", record.record_id, language
                )
                results.append(
                    TranslationResult(
                        record_id=record.record_id,
                        language=language,
                        fields=_copy_fields(record.fields),
                        success=False,
                    )
                )
        return results

    def _translate_field(self, name: str, value: Any, language: str) -> Any:
        # Structured fields are only translated in their mapping form.
        if isinstance(value, str) and name not in self.structured_fields:
            return self._translate_text(value, language)
        if isinstance(value, Mapping):
            translated = dict(value)
            for key in self.nested_keys:
                nested = value.get(key)
                if isinstance(nested, str):
                    translated[key] = self._translate_text(nested, language)
            return translated
        return value

    def _translate_text(self, text: str, language: str) -> str:
        if not text.strip():
            return text
        return self.client.translate(text, language)


def _copy_fields(fields: Mapping[str, Any]) -> dict:
    return {
        name: dict(value) if isinstance(value, Mapping) else value
        for name, value in fields.items()
    }


def translated_flags(
    original: TranslatableRecord, result: TranslationResult, names: Optional[Iterable[str]] = None
) -> dict[str, bool]:
    """Maps each field name to whether its value changed in translation."""
    names = list(names) if names is not None else list(original.fields)
    return {name: original.get(name) != result.get(name) for name in names}
