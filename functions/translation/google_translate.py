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
from typing import Any, Optional, Protocol

import requests

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://translate.googleapis.com/translate_a/single"
REQUEST_TIMEOUT = 30  # seconds


class TranslateClient(Protocol):
    def translate(
        self, text: str, target_language: str, source_language: str = "auto"
    ) -> str:
        ...


def join_segments(payload: Any) -> str:
    """
    Concatenates the translated segments of a translate_a/single response.

    The payload looks like [[["Hola", "Hello", None, None, 1], ...], ...];
    the first element of each segment in payload[0] is translated text.

    Returns:
        str: The joined translation, or "" if the payload is malformed.
    """
    if not isinstance(payload, list) or not payload:
        return ""
    segments = payload[0]
    if not isinstance(segments, list):
        return ""
    parts = []
    for segment in segments:
        if isinstance(segment, list) and segment and isinstance(segment[0], str):
            parts.append(segment[0])
    return "".join(parts)


class GoogleTranslateClient:
    """
    Client for the public Google translate endpoint.

    Translation failures never raise: the original text is returned instead.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()

    def translate(
        self, text: str, target_language: str, source_language: str = "auto"
    ) -> str:
        """
        Translates text into the target language.

        Args:
            text (str): Source text. Empty or blank text is returned as-is.
            target_language (str): Target language code, e.g. "es".
            source_language (str): Source language code, "auto" to detect.

        Returns:
            str: The translated text, or the original text on any failure.
        """
        if not text or not text.strip():
            return text

        params = {
            "client": "gtx",
            "sl": source_language,
            "tl": target_language,
            "dt": "t",
            "q": text,
        }
        try:
            response = self._session.get(
                self.endpoint, params=params, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning("Translation request to %s failed: %s", target_language, e)
            return text

        if not response.ok:
            logger.warning(
                "Translation to %s returned HTTP %s", target_language, response.status_code
            )
            return text

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Translation to %s returned a non-JSON body", target_language)
            return text

        translated = join_segments(payload)
        if not translated:
            logger.warning("Translation to %s returned no segments", target_language)
            return text
        return translated
