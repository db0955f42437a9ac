"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from backend.config import get_settings
from backend.db import DbClient, InMemoryDbClient, PostgresDbClient
from maintenance.retention import RetentionStrategy, RetentionSweeper
from notifications.dispatch import NotificationDispatcher
from notifications.messaging import FirebasePushClient, InMemoryPushClient, PushClient
from translation.fanout import FanOutTranslator
from translation.google_translate import GoogleTranslateClient, TranslateClient

_db_client: DbClient | None = None
_push_client: PushClient | None = None
_translate_client: TranslateClient | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client shared by every request.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _db_client = InMemoryDbClient()
    else:
        _db_client = PostgresDbClient(settings.database_url or "")
    return _db_client


def get_push_client() -> PushClient:
    global _push_client
    if _push_client:
        return _push_client

    settings = get_settings()
    if settings.use_in_memory_backends and not settings.firebase_service_account:
        _push_client = InMemoryPushClient()
    else:
        _push_client = FirebasePushClient(settings.firebase_service_account or "")
    return _push_client


def get_translate_client() -> TranslateClient:
    global _translate_client
    if _translate_client:
        return _translate_client

    settings = get_settings()
    _translate_client = GoogleTranslateClient(
        endpoint=settings.translate_endpoint,
        timeout=settings.translate_timeout_seconds,
    )
    return _translate_client


def get_fanout_translator() -> FanOutTranslator:
    settings = get_settings()
    return FanOutTranslator(
        get_translate_client(),
        settings.target_languages,
        delay_seconds=settings.translation_delay_seconds,
    )


def get_notification_dispatcher() -> NotificationDispatcher:
    settings = get_settings()
    return NotificationDispatcher(
        get_db_client(),
        get_push_client(),
        batch_size=settings.notification_batch_size,
        body_max_chars=settings.notification_body_max_chars,
    )


def get_retention_sweeper() -> RetentionSweeper:
    settings = get_settings()
    return RetentionSweeper(
        get_db_client(),
        retention_days=settings.retention_days,
        strategy=RetentionStrategy(settings.retention_strategy),
        procedure_name=settings.retention_procedure,
    )
