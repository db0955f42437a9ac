"""
HTTP routes for the news functions API.

Each route replaces one of the former webhook handlers. Client input errors
raise IntakeError (mapped to 400 in app.py); anything else that escapes the
per-item boundaries is reported as a 500 with the error message.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from backend.config import Settings, get_settings
from backend.db import DbClient
from backend.dependencies import (
    get_db_client,
    get_fanout_translator,
    get_notification_dispatcher,
    get_retention_sweeper,
    get_translate_client,
)
from backend.intake import (
    parse_article_request,
    parse_content_request,
    parse_video_event,
)
from backend.schemas import (
    AutoTranslateNewsRequest,
    AutoTranslateNewsResponse,
    AutoTranslateVideoResponse,
    ErrorResponse,
    NewsTranslation,
    NotificationResponse,
    RetentionResponse,
    TranslateContentRequest,
    TranslateContentResponse,
    VideoTranslationResult,
    VideoWebhookPayload,
)
from maintenance.retention import RetentionSweeper
from notifications.dispatch import NotificationDispatcher
from translation.fanout import FanOutTranslator
from translation.google_translate import TranslateClient
from translation.sink import TranslationSink

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _failure(error: str, exc: Exception) -> JSONResponse:
    body = ErrorResponse(error=error, details=str(exc) or repr(exc))
    return JSONResponse(status_code=500, content=body.model_dump())


@router.post(
    "/translate-content",
    response_model=TranslateContentResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
def translate_content(
    payload: TranslateContentRequest,
    settings: Settings = Depends(get_settings),
    client: TranslateClient = Depends(get_translate_client),
):
    """
    Translate a single text into one supported language.
    """
    text, target_language = parse_content_request(payload, settings.content_languages)

    if target_language == settings.source_language:
        return TranslateContentResponse(
            translated_text=text, original_text=text, target_language=target_language
        )

    try:
        translated = client.translate(text, target_language)
    except Exception as e:
        logger.exception("Translation error: %s", e)
        return TranslateContentResponse(
            translated_text=text,
            original_text=text,
            target_language=target_language,
            error="Translation failed",
        )
    return TranslateContentResponse(
        translated_text=translated or text,
        original_text=text,
        target_language=target_language,
    )


@router.post(
    "/auto-translate-news",
    response_model=AutoTranslateNewsResponse,
    responses=ERROR_RESPONSES,
)
def auto_translate_news(
    payload: AutoTranslateNewsRequest,
    translator: FanOutTranslator = Depends(get_fanout_translator),
):
    """
    Translate an article's title, summary and headline into every target language.
    """
    record = parse_article_request(payload)
    try:
        results = translator.translate_record(record)
    except Exception as e:
        logger.exception("Auto translation error")
        return _failure("Auto translation failed", e)

    translations = [
        NewsTranslation(
            language=result.language,
            translated_title=result.get("title"),
            translated_summary=result.get("summary"),
            translated_headline=result.get("headline"),
        )
        for result in results
    ]
    return AutoTranslateNewsResponse(
        success=True, article_id=payload.article_id, translations=translations
    )


@router.post(
    "/auto-translate-video",
    response_model=AutoTranslateVideoResponse,
    responses=ERROR_RESPONSES,
)
def auto_translate_video(
    payload: VideoWebhookPayload,
    translator: FanOutTranslator = Depends(get_fanout_translator),
    db: DbClient = Depends(get_db_client),
):
    """
    Database webhook: translate a newly inserted video article and store one
    row per language.
    """
    record = parse_video_event(payload)
    logger.info("Webhook %s on %s for video %s", payload.type, payload.table, record.record_id)
    try:
        results = translator.translate_record(record)
        summary = TranslationSink(db).persist(record, results)
    except Exception as e:
        logger.exception("Video webhook processing error")
        return _failure("Video webhook processing failed", e)

    return AutoTranslateVideoResponse(
        success=True,
        video_id=payload.record["id"],
        translations_created=summary.translations_created,
        total_languages=summary.total_languages,
        stored_translations=summary.stored_translations,
        results=[
            VideoTranslationResult(
                language=outcome.language,
                success=outcome.success,
                title_translated=outcome.title_translated,
                source_name_translated=outcome.source_name_translated,
                platform_name_translated=outcome.platform_name_translated,
            )
            for outcome in summary.results
        ],
    )


@router.post(
    "/send-news-notifications",
    response_model=NotificationResponse,
    responses=ERROR_RESPONSES,
)
def send_news_notifications(
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
):
    """
    Push the latest unnotified articles to every registered device.
    """
    try:
        summary = dispatcher.run()
    except Exception as e:
        logger.exception("Notification dispatch failed")
        return _failure("Notification dispatch failed", e)

    return NotificationResponse(
        message=summary.message,
        articles_processed=len(summary.article_ids),
        success_count=summary.success_count,
        error_count=summary.error_count,
        skipped_count=summary.skipped_count,
    )


@router.post("/delete", response_model=RetentionResponse, responses=ERROR_RESPONSES)
def delete_old_news(sweeper: RetentionSweeper = Depends(get_retention_sweeper)):
    """
    Remove news articles older than the retention window.
    """
    try:
        result = sweeper.sweep()
    except Exception as e:
        logger.exception("Error in delete-old-news function")
        return _failure("Retention sweep failed", e)

    return RetentionResponse(
        message=(
            f"Deleted {result.deleted_count} news articles older than "
            f"{sweeper.retention_days} days"
        ),
        deleted_count=result.deleted_count,
        cutoff_date=result.cutoff.isoformat(),
        strategy=result.strategy.value,
        deleted_articles=[article.as_dict() for article in result.deleted_articles],
    )
