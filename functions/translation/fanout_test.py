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

import unittest
from unittest.mock import MagicMock

from shared.types import TranslatableRecord
from translation.fanout import FanOutTranslator, Throttle, translated_flags

LANGUAGES = ["hi", "es", "ur", "zh", "fr", "ja"]


class TaggingClient:
    def __init__(self, failing_languages=()):
        self.failing_languages = set(failing_languages)
        self.calls = []

    def translate(self, text, target_language, source_language="auto"):
        self.calls.append((text, target_language))
        if target_language in self.failing_languages:
            raise RuntimeError(f"{target_language} unavailable")
        return f"{text} ({target_language})"


def _record():
    return TranslatableRecord(
        record_id="a1",
        fields={
            "title": "Storm warning",
            "summary": None,
            "headline": {"headline": "Storm", "subheadline": "", "color": "red"},
        },
    )


class ThrottleTest(unittest.TestCase):

    def test_first_wait_does_not_sleep(self):
        sleep = MagicMock()
        throttle = Throttle(0.5, sleep=sleep)
        throttle.wait()
        sleep.assert_not_called()
        throttle.wait()
        throttle.wait()
        self.assertEqual(sleep.call_count, 2)
        sleep.assert_called_with(0.5)

    def test_zero_delay_never_sleeps(self):
        sleep = MagicMock()
        throttle = Throttle(0, sleep=sleep)
        for _ in range(3):
            throttle.wait()
        sleep.assert_not_called()


class FanOutTranslatorTest(unittest.TestCase):

    def test_one_result_per_language_in_order(self):
        translator = FanOutTranslator(TaggingClient(), LANGUAGES, delay_seconds=0)
        results = translator.translate_record(_record())

        self.assertEqual([r.language for r in results], LANGUAGES)
        self.assertTrue(all(r.success for r in results))
        self.assertTrue(all(r.record_id == "a1" for r in results))

    def test_fields_are_translated_and_empty_fields_pass_through(self):
        translator = FanOutTranslator(TaggingClient(), ["es"], delay_seconds=0)
        result = translator.translate_record(_record())[0]

        self.assertEqual(result.get("title"), "Storm warning (es)")
        self.assertIsNone(result.get("summary"))
        self.assertEqual(
            result.get("headline"),
            {"headline": "Storm (es)", "subheadline": "", "color": "red"},
        )

    def test_plain_string_headline_passes_through(self):
        client = TaggingClient()
        translator = FanOutTranslator(client, ["es"], delay_seconds=0)
        record = TranslatableRecord(
            record_id="a2", fields={"title": "Flood", "headline": "Flood alert"}
        )

        result = translator.translate_record(record)[0]

        self.assertEqual(result.get("title"), "Flood (es)")
        self.assertEqual(result.get("headline"), "Flood alert")
        self.assertEqual(client.calls, [("Flood", "es")])

    def test_every_language_failing_still_yields_all_results(self):
        client = TaggingClient(failing_languages=LANGUAGES)
        translator = FanOutTranslator(client, LANGUAGES, delay_seconds=0)
        record = _record()

        results = translator.translate_record(record)

        self.assertEqual(len(results), len(LANGUAGES))
        for result in results:
            self.assertFalse(result.success)
            self.assertEqual(result.fields, dict(record.fields))

    def test_failure_in_one_language_does_not_stop_others(self):
        client = TaggingClient(failing_languages={"ur"})
        translator = FanOutTranslator(client, LANGUAGES, delay_seconds=0)

        results = {r.language: r for r in translator.translate_record(_record())}

        self.assertFalse(results["ur"].success)
        self.assertEqual(results["ur"].get("title"), "Storm warning")
        self.assertTrue(results["ja"].success)
        self.assertEqual(results["ja"].get("title"), "Storm warning (ja)")

    def test_pauses_between_languages_only(self):
        sleep = MagicMock()
        translator = FanOutTranslator(
            TaggingClient(), LANGUAGES, delay_seconds=0.5, sleep=sleep
        )
        translator.translate_record(_record())
        self.assertEqual(sleep.call_count, len(LANGUAGES) - 1)

    def test_fallback_copies_do_not_share_nested_objects(self):
        record = _record()
        translator = FanOutTranslator(
            TaggingClient(failing_languages={"es"}), ["es"], delay_seconds=0
        )
        result = translator.translate_record(record)[0]
        result.fields["headline"]["headline"] = "changed"
        self.assertEqual(record.get("headline")["headline"], "Storm")

    def test_requires_languages(self):
        with self.assertRaises(ValueError):
            FanOutTranslator(TaggingClient(), [])

    def test_translated_flags(self):
        translator = FanOutTranslator(TaggingClient(), ["fr"], delay_seconds=0)
        record = _record()
        result = translator.translate_record(record)[0]
        self.assertEqual(
            translated_flags(record, result, ["title", "summary"]),
            {"title": True, "summary": False},
        )


if __name__ == "__main__":
    unittest.main()
