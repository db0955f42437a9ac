"""
Pydantic schemas for the news functions API.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict


class IncomingPayload(BaseModel):
    """Request bodies ignore fields they do not know about."""

    model_config = ConfigDict(extra="ignore")


class TranslateContentRequest(IncomingPayload):
    text: Optional[str] = None
    target_language: Optional[str] = None


class TranslateContentResponse(BaseModel):
    translated_text: str
    original_text: str
    target_language: str
    error: Optional[str] = None


class AutoTranslateNewsRequest(IncomingPayload):
    article_id: Optional[Union[str, int]] = None
    title: Optional[str] = None
    summary: Optional[str] = None
    headline: Any = None


class NewsTranslation(BaseModel):
    language: str
    translated_title: Optional[str] = None
    translated_summary: Optional[str] = None
    translated_headline: Any = None


class AutoTranslateNewsResponse(BaseModel):
    success: bool
    article_id: Union[str, int]
    translations: list[NewsTranslation]


class VideoWebhookPayload(IncomingPayload):
    type: Optional[str] = None
    table: Optional[str] = None
    record: Optional[dict] = None
    old_record: Optional[dict] = None


class VideoTranslationResult(BaseModel):
    language: str
    success: bool
    title_translated: bool
    source_name_translated: bool
    platform_name_translated: bool


class AutoTranslateVideoResponse(BaseModel):
    success: bool
    video_id: Union[str, int]
    translations_created: int
    total_languages: int
    stored_translations: int
    results: list[VideoTranslationResult]


class NotificationResponse(BaseModel):
    success: bool = True
    message: str
    articles_processed: int = 0
    success_count: int = 0
    error_count: int = 0
    skipped_count: int = 0


class RetentionResponse(BaseModel):
    success: bool = True
    message: str
    deleted_count: int
    cutoff_date: str
    strategy: str
    deleted_articles: list[dict]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[str] = None
