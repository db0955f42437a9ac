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

import requests

from translation import google_translate


def _session_returning(payload=None, ok=True, status_code=200, json_error=None):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    if json_error:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    session = MagicMock()
    session.get.return_value = response
    return session


class JoinSegmentsTest(unittest.TestCase):

    def test_joins_first_element_of_each_segment(self):
        payload = [[["Hola. ", "Hello. ", None, None, 1], ["Adiós", "Bye", None, None, 1]], None, "en"]
        self.assertEqual(google_translate.join_segments(payload), "Hola. Adiós")

    def test_skips_empty_segments(self):
        payload = [[[None, "x"], [], ["Hola", "Hello"]]]
        self.assertEqual(google_translate.join_segments(payload), "Hola")

    def test_malformed_payloads(self):
        for payload in (None, {}, [], [None], ["text"], "Hola"):
            with self.subTest(payload=payload):
                self.assertEqual(google_translate.join_segments(payload), "")


class GoogleTranslateClientTest(unittest.TestCase):

    def test_translate_calls_endpoint_with_expected_params(self):
        session = _session_returning([[["Hola", "Hello", None, None, 1]]])
        client = google_translate.GoogleTranslateClient(
            endpoint="https://translate.test/single", timeout=5, session=session
        )

        self.assertEqual(client.translate("Hello", "es"), "Hola")
        session.get.assert_called_once_with(
            "https://translate.test/single",
            params={"client": "gtx", "sl": "auto", "tl": "es", "dt": "t", "q": "Hello"},
            timeout=5,
        )

    def test_blank_text_is_not_sent(self):
        session = _session_returning([])
        client = google_translate.GoogleTranslateClient(session=session)

        self.assertEqual(client.translate("", "es"), "")
        self.assertEqual(client.translate("   ", "es"), "   ")
        self.assertIsNone(client.translate(None, "es"))
        session.get.assert_not_called()

    def test_non_success_status_returns_original(self):
        session = _session_returning(None, ok=False, status_code=429)
        client = google_translate.GoogleTranslateClient(session=session)
        self.assertEqual(client.translate("Hello", "es"), "Hello")

    def test_network_error_returns_original(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("unreachable")
        client = google_translate.GoogleTranslateClient(session=session)
        self.assertEqual(client.translate("Hello", "es"), "Hello")

    def test_non_json_body_returns_original(self):
        session = _session_returning(json_error=ValueError("not json"))
        client = google_translate.GoogleTranslateClient(session=session)
        self.assertEqual(client.translate("Hello", "es"), "Hello")

    def test_empty_segments_return_original(self):
        session = _session_returning([[]])
        client = google_translate.GoogleTranslateClient(session=session)
        self.assertEqual(client.translate("Hello", "es"), "Hello")


if __name__ == "__main__":
    unittest.main()
