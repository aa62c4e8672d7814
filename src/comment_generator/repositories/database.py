"""Database engine management and ORM models."""

from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, create_engine, func
from sqlalchemy.engine.base import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from comment_generator.log import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):  # pylint: disable=too-few-public-methods
    """Base class for all SQLAlchemy ORM models."""


class CategoryRow(Base):  # pylint: disable=too-few-public-methods
    """Model for review categories."""

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(64), unique=True)
    keyword: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("category.id"), nullable=True, default=None
    )
    icon: Mapped[str | None] = mapped_column(String(255), nullable=True)
    active_icon: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Number of successful generations in this category
    use_count: Mapped[int] = mapped_column(Integer, default=0)


class GeneratedCommentRow(Base):  # pylint: disable=too-few-public-methods
    """Model for generated reviews."""

    __tablename__ = "generated_comment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("category.id"))
    category_name: Mapped[str] = mapped_column(String(64))
    content: Mapped[str] = mapped_column(Text)
    target_words: Mapped[int] = mapped_column(Integer)
    is_template: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),  # pylint: disable=not-callable
    )


def create_database_engine(database_url: str, **kwargs: Any) -> Engine:
    """Create the database engine.

    In-memory SQLite shares one connection across threads so that every
    session sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs.setdefault("poolclass", StaticPool)
    else:
        kwargs.setdefault("pool_pre_ping", True)

    try:
        return create_engine(database_url, **kwargs)
    except Exception as e:
        logger.exception("Failed to create database engine")
        raise RuntimeError(f"Database engine creation failed: {e}") from e


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to engine."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def create_tables(engine: Engine) -> None:
    """Create tables."""
    Base.metadata.create_all(engine)
