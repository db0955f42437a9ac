"""
Database abstraction for Postgres and an in-memory test implementation.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from importlib import resources
from typing import Any, Callable, Dict, Optional, Protocol

from sqlalchemy import (
    Boolean,
    Column,
    Float,
    Integer,
    String,
    create_engine,
    delete,
    select,
    text,
    update,
)
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, declarative_base, sessionmaker

PROCEDURE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
PROCEDURE_SCRIPTS = ("delete_old_news.sql",)
VIDEO_TRANSLATION_KEY = ("video_article_id", "language_code")


class DbClient(Protocol):
    """Interface for database access."""

    def save_article(self, article: "NewsArticleRecord") -> None:
        ...

    def get_article(self, article_id: str) -> Optional["NewsArticleRecord"]:
        ...

    def fetch_unnotified_articles(self, limit: int = 5) -> list["NewsArticleRecord"]:
        ...

    def mark_articles_notified(self, article_ids: list[str]) -> int:
        ...

    def save_device_token(self, token: "DeviceTokenRecord") -> None:
        ...

    def list_device_tokens(self) -> list["DeviceTokenRecord"]:
        ...

    def upsert_video_translation(self, row: "VideoTranslationRecord") -> None:
        ...

    def list_video_translations(
        self, video_article_id: str
    ) -> list["VideoTranslationRecord"]:
        ...

    def delete_articles_before(self, cutoff: float) -> list["NewsArticleRecord"]:
        ...

    def call_procedure(self, name: str, **params: Any) -> Any:
        ...


@dataclass
class NewsArticleRecord:
    id: str
    title: Optional[str]
    summary: Optional[str] = None
    published_at: float = field(default_factory=lambda: time.time())
    notified: bool = False

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "published_at": self.published_at,
            "notified": self.notified,
        }


@dataclass
class DeviceTokenRecord:
    fcm_token: Optional[str]
    platform: Optional[str] = None


@dataclass
class VideoTranslationRecord:
    video_article_id: str
    language_code: str
    translated_title: Optional[str] = None
    translated_source_name: Optional[str] = None
    translated_platform_name: Optional[str] = None
    updated_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "video_article_id": self.video_article_id,
            "language_code": self.language_code,
            "translated_title": self.translated_title,
            "translated_source_name": self.translated_source_name,
            "translated_platform_name": self.translated_platform_name,
            "updated_at": self.updated_at,
        }


def validate_procedure_name(name: str) -> str:
    if not PROCEDURE_NAME_PATTERN.match(name or ""):
        raise ValueError(f"Invalid procedure name: {name!r}")
    return name


def load_procedure_sql(filename: str) -> str:
    return (
        resources.files("backend")
        .joinpath("sql", filename)
        .read_text(encoding="utf-8")
    )


def video_translation_upsert(row: VideoTranslationRecord, dialect_name: str):
    """
    INSERT ... ON CONFLICT (video_article_id, language_code) DO UPDATE for the
    given dialect.
    """
    if dialect_name == "postgresql":
        insert = postgresql.insert
    elif dialect_name == "sqlite":
        insert = sqlite.insert
    else:
        raise NotImplementedError(f"Upsert is not supported on {dialect_name}")
    stmt = insert(VideoTranslationRow).values(**row.as_dict())
    return stmt.on_conflict_do_update(
        index_elements=list(VIDEO_TRANSLATION_KEY),
        set_={
            column: stmt.excluded[column]
            for column in row.as_dict()
            if column not in VIDEO_TRANSLATION_KEY
        },
    )


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.articles: Dict[str, NewsArticleRecord] = {}
        self.tokens: list[DeviceTokenRecord] = []
        self.video_translations: Dict[tuple[str, str], VideoTranslationRecord] = {}
        self.procedures: Dict[str, Callable[..., Any]] = {
            "delete_old_news": self._delete_old_news,
        }

    def save_article(self, article: NewsArticleRecord) -> None:
        self.articles[article.id] = article

    def get_article(self, article_id: str) -> Optional[NewsArticleRecord]:
        return self.articles.get(article_id)

    def fetch_unnotified_articles(self, limit: int = 5) -> list[NewsArticleRecord]:
        pending = [a for a in self.articles.values() if not a.notified]
        pending.sort(key=lambda a: a.published_at, reverse=True)
        return pending[:limit]

    def mark_articles_notified(self, article_ids: list[str]) -> int:
        updated = 0
        for article_id in article_ids:
            article = self.articles.get(article_id)
            if article:
                article.notified = True
                updated += 1
        return updated

    def save_device_token(self, token: DeviceTokenRecord) -> None:
        self.tokens.append(token)

    def list_device_tokens(self) -> list[DeviceTokenRecord]:
        return list(self.tokens)

    def upsert_video_translation(self, row: VideoTranslationRecord) -> None:
        self.video_translations[(row.video_article_id, row.language_code)] = row

    def list_video_translations(
        self, video_article_id: str
    ) -> list[VideoTranslationRecord]:
        return [
            row
            for (video_id, _), row in self.video_translations.items()
            if video_id == video_article_id
        ]

    def delete_articles_before(self, cutoff: float) -> list[NewsArticleRecord]:
        expired = [a for a in self.articles.values() if a.published_at < cutoff]
        for article in expired:
            del self.articles[article.id]
        return expired

    def call_procedure(self, name: str, **params: Any) -> Any:
        procedure = self.procedures.get(validate_procedure_name(name))
        if procedure is None:
            raise LookupError(f"Procedure {name} does not exist")
        return procedure(**params)

    def _delete_old_news(self, cutoff: float) -> int:
        return len(self.delete_articles_before(cutoff))


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)
        if self.engine.dialect.name == "postgresql":
            self.install_procedures()

    def install_procedures(self) -> None:
        """Create or replace the server-side functions shipped in backend/sql."""
        with self.engine.begin() as conn:
            for filename in PROCEDURE_SCRIPTS:
                conn.exec_driver_sql(load_procedure_sql(filename))

    def _to_article_record(self, row: "NewsArticleRow") -> NewsArticleRecord:
        return NewsArticleRecord(
            id=row.id,
            title=row.title,
            summary=row.summary,
            published_at=row.published_at,
            notified=row.notified,
        )

    def _to_translation_record(
        self, row: "VideoTranslationRow"
    ) -> VideoTranslationRecord:
        return VideoTranslationRecord(
            video_article_id=row.video_article_id,
            language_code=row.language_code,
            translated_title=row.translated_title,
            translated_source_name=row.translated_source_name,
            translated_platform_name=row.translated_platform_name,
            updated_at=row.updated_at,
        )

    def save_article(self, article: NewsArticleRecord) -> None:
        with self.Session() as session:
            row = session.get(NewsArticleRow, article.id)
            if row:
                row.title = article.title
                row.summary = article.summary
                row.published_at = article.published_at
                row.notified = article.notified
            else:
                session.add(
                    NewsArticleRow(
                        id=article.id,
                        title=article.title,
                        summary=article.summary,
                        published_at=article.published_at,
                        notified=article.notified,
                    )
                )
            session.commit()

    def get_article(self, article_id: str) -> Optional[NewsArticleRecord]:
        with self.Session() as session:
            row = session.get(NewsArticleRow, article_id)
            return self._to_article_record(row) if row else None

    def fetch_unnotified_articles(self, limit: int = 5) -> list[NewsArticleRecord]:
        with self.Session() as session:
            stmt = (
                select(NewsArticleRow)
                .where(NewsArticleRow.notified.is_(False))
                .order_by(NewsArticleRow.published_at.desc())
                .limit(limit)
            )
            rows = session.execute(stmt).scalars().all()
            return [self._to_article_record(row) for row in rows]

    def mark_articles_notified(self, article_ids: list[str]) -> int:
        if not article_ids:
            return 0
        with self.Session() as session:
            result = session.execute(
                update(NewsArticleRow)
                .where(NewsArticleRow.id.in_(article_ids))
                .values(notified=True)
            )
            session.commit()
            return result.rowcount or 0

    def save_device_token(self, token: DeviceTokenRecord) -> None:
        with self.Session() as session:
            session.add(
                DeviceTokenRow(fcm_token=token.fcm_token, platform=token.platform)
            )
            session.commit()

    def list_device_tokens(self) -> list[DeviceTokenRecord]:
        with self.Session() as session:
            rows = (
                session.execute(select(DeviceTokenRow).order_by(DeviceTokenRow.id))
                .scalars()
                .all()
            )
            return [
                DeviceTokenRecord(fcm_token=row.fcm_token, platform=row.platform)
                for row in rows
            ]

    def upsert_video_translation(self, row: VideoTranslationRecord) -> None:
        stmt = video_translation_upsert(row, self.engine.dialect.name)
        with self.Session() as session:
            session.execute(stmt)
            session.commit()

    def list_video_translations(
        self, video_article_id: str
    ) -> list[VideoTranslationRecord]:
        with self.Session() as session:
            rows = (
                session.execute(
                    select(VideoTranslationRow).where(
                        VideoTranslationRow.video_article_id == video_article_id
                    )
                )
                .scalars()
                .all()
            )
            return [self._to_translation_record(row) for row in rows]

    def delete_articles_before(self, cutoff: float) -> list[NewsArticleRecord]:
        with self.Session() as session:
            rows = (
                session.execute(
                    select(NewsArticleRow).where(NewsArticleRow.published_at < cutoff)
                )
                .scalars()
                .all()
            )
            deleted = [self._to_article_record(row) for row in rows]
            if deleted:
                session.execute(
                    delete(NewsArticleRow).where(
                        NewsArticleRow.id.in_([a.id for a in deleted])
                    )
                )
            session.commit()
            return deleted

    def call_procedure(self, name: str, **params: Any) -> Any:
        """
        Invoke a server-side function by name and return its scalar result.
        """
        validate_procedure_name(name)
        placeholders = ", ".join(f":{key}" for key in params)
        with self.Session() as session:
            result = session.execute(
                text(f"SELECT {name}({placeholders})"), params
            ).scalar()
            session.commit()
            return result


Base = declarative_base()


class NewsArticleRow(Base):
    __tablename__ = "news_articles"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=True)
    summary = Column(String, nullable=True)
    published_at = Column(Float, nullable=False, index=True)
    notified = Column(Boolean, nullable=False, default=False, index=True)


class DeviceTokenRow(Base):
    __tablename__ = "users_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    fcm_token = Column(String, nullable=True)
    platform = Column(String, nullable=True)


class VideoTranslationRow(Base):
    __tablename__ = "video_translations"

    video_article_id = Column(String, primary_key=True)
    language_code = Column(String, primary_key=True)
    translated_title = Column(String, nullable=True)
    translated_source_name = Column(String, nullable=True)
    translated_platform_name = Column(String, nullable=True)
    updated_at = Column(Float, nullable=False)
