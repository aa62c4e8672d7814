"""Comment storage protocol.

Defines the persistence contract of the generation pipeline. The one hard
requirement is that comment creation and the category usage increment can
be committed as a single atomic unit.
"""

from contextlib import AbstractContextManager
from typing import Protocol, runtime_checkable

from comment_generator.entities import CategoryEntity, GeneratedCommentEntity


@runtime_checkable
class CommentUnitOfWork(Protocol):
    """Writes that commit or roll back together."""

    def create_comment(
        self,
        user_id: str,
        category_id: int,
        category_name: str,
        content: str,
        target_words: int,
    ) -> GeneratedCommentEntity:
        """Insert a generated comment.

        Returns:
            The created comment with its assigned id
        """
        ...

    def increment_category_usage(self, category_id: int) -> None:
        """Increment the category usage counter by one.

        Raises:
            PersistenceError: If the category does not exist
        """
        ...


@runtime_checkable
class CommentStore(Protocol):
    """Protocol for comment and category storage backends."""

    def find_category(
        self,
        category_id: int | None = None,
        name: str | None = None,
        keyword: str | None = None,
    ) -> CategoryEntity | None:
        """Find a category by id, or by name or keyword.

        Returns:
            The matching category or None
        """
        ...

    def transaction(self) -> AbstractContextManager[CommentUnitOfWork]:
        """Open an atomic unit of work.

        Committed when the block exits normally, rolled back on any
        exception, which is re-raised as PersistenceError.
        """
        ...

    def list_comments(
        self, user_id: str, templates_only: bool = False
    ) -> list[GeneratedCommentEntity]:
        """List a user's comments, newest first."""
        ...

    def toggle_template(self, comment_id: int, user_id: str) -> GeneratedCommentEntity | None:
        """Flip the template flag of a comment owned by user_id.

        Returns:
            The updated comment, or None if no such comment is owned by user_id
        """
        ...

    def delete_comment(self, comment_id: int, user_id: str) -> bool:
        """Delete a comment owned by user_id.

        Returns:
            True if deleted, False otherwise
        """
        ...

    def upsert_category(
        self,
        name: str,
        keyword: str | None = None,
        parent_id: int | None = None,
        icon: str | None = None,
        active_icon: str | None = None,
    ) -> CategoryEntity:
        """Create or update a category identified by its unique name."""
        ...

    def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...
