"""
Validation of inbound translation requests and webhook events.

Every function here either returns domain objects ready for the pipeline or
raises an IntakeError before any external call is made.
"""

from __future__ import annotations

from typing import Container

from backend.schemas import (
    AutoTranslateNewsRequest,
    TranslateContentRequest,
    VideoWebhookPayload,
)
from shared.types import TranslatableRecord


class IntakeError(ValueError):
    """Client input error, surfaced as a 400 response."""


class MissingIdentifier(IntakeError):
    pass


class MissingText(IntakeError):
    pass


class UnsupportedLanguage(IntakeError):
    pass


def parse_article_request(payload: AutoTranslateNewsRequest) -> TranslatableRecord:
    if not payload.article_id:
        raise MissingIdentifier("Article ID is required")
    return TranslatableRecord(
        record_id=str(payload.article_id),
        fields={
            "title": payload.title,
            "summary": payload.summary,
            "headline": payload.headline,
        },
    )


def parse_video_event(payload: VideoWebhookPayload) -> TranslatableRecord:
    record = payload.record
    if not record:
        raise MissingIdentifier("No record data received")
    video_id = record.get("id")
    if not video_id:
        raise MissingIdentifier("Video ID is required")
    return TranslatableRecord(
        record_id=str(video_id),
        fields={
            "title": record.get("title"),
            "source_name": record.get("source_name"),
            "platform_name": record.get("platform_name"),
        },
    )


def parse_content_request(
    payload: TranslateContentRequest, supported_languages: Container[str]
) -> tuple[str, str]:
    if not payload.text or not payload.target_language:
        raise MissingText("Text and target_language are required")
    if payload.target_language not in supported_languages:
        raise UnsupportedLanguage("Unsupported language")
    return payload.text, payload.target_language
