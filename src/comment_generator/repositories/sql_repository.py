"""SQLAlchemy implementation of CommentStore.

Comment creation and the category usage increment share one session and
one transaction, so they are committed or rolled back together.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import or_, select, text, update
from sqlalchemy.engine.base import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from comment_generator.config import settings
from comment_generator.entities import CategoryEntity, GeneratedCommentEntity
from comment_generator.errors import PersistenceError
from comment_generator.log import get_logger

from .database import (
    CategoryRow,
    GeneratedCommentRow,
    create_database_engine,
    create_session_factory,
    create_tables,
)

logger = get_logger(__name__)


def _category(row: CategoryRow) -> CategoryEntity:
    return CategoryEntity(
        id=row.id,
        name=row.name,
        keyword=row.keyword,
        parent_id=row.parent_id,
        icon=row.icon,
        active_icon=row.active_icon,
        use_count=row.use_count,
    )


def _comment(row: GeneratedCommentRow) -> GeneratedCommentEntity:
    return GeneratedCommentEntity(
        id=row.id,
        user_id=row.user_id,
        category_id=row.category_id,
        category_name=row.category_name,
        content=row.content,
        target_words=row.target_words,
        is_template=row.is_template,
        created_at=row.created_at,
    )


class SqlUnitOfWork:
    """Writes bound to one open transaction.

    This class satisfies the CommentUnitOfWork protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create_comment(
        self,
        user_id: str,
        category_id: int,
        category_name: str,
        content: str,
        target_words: int,
    ) -> GeneratedCommentEntity:
        row = GeneratedCommentRow(
            user_id=user_id,
            category_id=category_id,
            category_name=category_name,
            content=content,
            target_words=target_words,
            is_template=False,
        )
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return _comment(row)

    def increment_category_usage(self, category_id: int) -> None:
        result = self._session.execute(
            update(CategoryRow)
            .where(CategoryRow.id == category_id)
            .values(use_count=CategoryRow.use_count + 1)
        )
        if result.rowcount != 1:
            raise PersistenceError(f"Category {category_id} does not exist")


class SqlCommentRepository:
    """SQLAlchemy implementation of the CommentStore protocol.

    This class satisfies the CommentStore protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        repository = SqlCommentRepository.create("sqlite:///./comments.db")
        with repository.transaction() as uow:
            comment = uow.create_comment("u1", 1, "美食", "...", 120)
            uow.increment_category_usage(1)
        ```
    """

    def __init__(self, engine: Engine, session_factory: sessionmaker | None = None) -> None:
        """Initialize the repository.

        Args:
            engine: SQLAlchemy engine.
            session_factory: Session factory. If None, one is bound to engine.
        """
        self._engine = engine
        self._session_factory = session_factory or create_session_factory(engine)

    @classmethod
    def create(cls, database_url: str | None = None) -> "SqlCommentRepository":
        """Factory method creating the engine and the tables.

        Args:
            database_url: SQLAlchemy URL. If None, uses settings.

        Returns:
            Configured SqlCommentRepository
        """
        engine = create_database_engine(database_url or settings.database_url)
        create_tables(engine)
        return cls(engine=engine)

    @contextmanager
    def transaction(self) -> Iterator[SqlUnitOfWork]:
        """Open an atomic unit of work; any failure rolls everything back."""
        session = self._session_factory()
        try:
            with session.begin():
                yield SqlUnitOfWork(session)
        except PersistenceError:
            logger.error("Transaction rolled back")
            raise
        except Exception as e:
            logger.exception("Transaction rolled back")
            raise PersistenceError(f"Failed to persist comment: {e}") from e
        finally:
            session.close()

    def find_category(
        self,
        category_id: int | None = None,
        name: str | None = None,
        keyword: str | None = None,
    ) -> CategoryEntity | None:
        """Find a category by id, or by name or keyword."""
        if category_id is not None:
            stmt = select(CategoryRow).where(CategoryRow.id == category_id)
        else:
            conditions = []
            if name:
                conditions.append(CategoryRow.name == name)
            if keyword:
                conditions.append(CategoryRow.keyword == keyword)
            if not conditions:
                return None
            stmt = select(CategoryRow).where(or_(*conditions)).order_by(CategoryRow.id)

        with self._session_factory() as session:
            row = session.scalars(stmt).first()
            return _category(row) if row is not None else None

    def list_comments(
        self, user_id: str, templates_only: bool = False
    ) -> list[GeneratedCommentEntity]:
        stmt = select(GeneratedCommentRow).where(GeneratedCommentRow.user_id == user_id)
        if templates_only:
            stmt = stmt.where(GeneratedCommentRow.is_template.is_(True))
        stmt = stmt.order_by(GeneratedCommentRow.created_at.desc(), GeneratedCommentRow.id.desc())

        with self._session_factory() as session:
            return [_comment(row) for row in session.scalars(stmt)]

    def toggle_template(self, comment_id: int, user_id: str) -> GeneratedCommentEntity | None:
        with self._session_factory() as session, session.begin():
            row = session.scalars(
                select(GeneratedCommentRow).where(
                    GeneratedCommentRow.id == comment_id,
                    GeneratedCommentRow.user_id == user_id,
                )
            ).first()
            if row is None:
                return None
            row.is_template = not row.is_template
            session.flush()
            return _comment(row)

    def delete_comment(self, comment_id: int, user_id: str) -> bool:
        with self._session_factory() as session, session.begin():
            row = session.scalars(
                select(GeneratedCommentRow).where(
                    GeneratedCommentRow.id == comment_id,
                    GeneratedCommentRow.user_id == user_id,
                )
            ).first()
            if row is None:
                return False
            session.delete(row)
            return True

    def upsert_category(
        self,
        name: str,
        keyword: str | None = None,
        parent_id: int | None = None,
        icon: str | None = None,
        active_icon: str | None = None,
    ) -> CategoryEntity:
        """Create or update a category by its unique name.

        Fields passed as None are left unchanged on an existing row.
        """
        with self._session_factory() as session, session.begin():
            row = session.scalars(select(CategoryRow).where(CategoryRow.name == name)).first()
            if row is None:
                row = CategoryRow(name=name, use_count=0)
                session.add(row)
            supplied = {
                "keyword": keyword,
                "parent_id": parent_id,
                "icon": icon,
                "active_icon": active_icon,
            }
            for field, value in supplied.items():
                if value is not None:
                    setattr(row, field, value)
            session.flush()
            return _category(row)

    def health_check(self) -> bool:
        """Check if the database is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    @property
    def engine(self) -> Engine:
        """Get the underlying engine (for testing)."""
        return self._engine
