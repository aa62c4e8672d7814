"""Category tree seeding from JSON files."""

import json
from pathlib import Path
from typing import Any

from comment_generator.config import settings
from comment_generator.entities import CategoryEntity
from comment_generator.errors import InvalidRequest
from comment_generator.log import get_logger
from comment_generator.protocols import CommentStore

logger = get_logger(__name__)


class CategorySeeder:
    """Loads a category tree and upserts it by unique name.

    Seeding is idempotent: running it twice updates rows in place.
    """

    def __init__(self, store: CommentStore, seed_dir: str | Path | None = None) -> None:
        """Initialize the seeder.

        Args:
            store: Category storage (required).
            seed_dir: Directory relative file names resolve against. Defaults to settings.
        """
        self._store = store
        self._seed_dir = Path(seed_dir or settings.seed_dir)

    def resolve_path(self, file_name: str) -> Path:
        """Resolve file_name to an existing file.

        Raises:
            InvalidRequest: If no such file exists
        """
        path = Path(file_name)
        if not path.is_absolute():
            path = self._seed_dir / path
        if not path.is_file():
            raise InvalidRequest(f"Category file not found: {file_name}")
        return path

    @staticmethod
    def parse(raw: Any) -> list[dict[str, Any]]:
        """Extract the category list from a JSON document.

        Accepts a bare array or an object holding an ``items`` or
        ``categories`` array.
        """
        if isinstance(raw, list):
            return raw
        if isinstance(raw, dict):
            for field in ("items", "categories"):
                if isinstance(raw.get(field), list):
                    return raw[field]
        raise InvalidRequest(
            "Malformed category JSON: expected an array or an object with items/categories"
        )

    def seed_from_file(self, file_name: str) -> list[CategoryEntity]:
        """Seed categories from a JSON file.

        Args:
            file_name: Absolute path, or a name relative to the seed directory

        Returns:
            Every seeded category, parents before their children
        """
        path = self.resolve_path(file_name)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidRequest(f"Cannot read category file {file_name}: {e}") from e

        seeded = self.seed(self.parse(raw))
        logger.info("Seeded %d categories from %s", len(seeded), path)
        return seeded

    def seed(
        self, nodes: list[dict[str, Any]], parent_id: int | None = None
    ) -> list[CategoryEntity]:
        """Upsert nodes and their children recursively."""
        results: list[CategoryEntity] = []
        for node in nodes:
            if not isinstance(node, dict) or not node.get("name"):
                raise InvalidRequest(f"Category node without a name: {node!r}")

            keyword = node.get("keyword") or node.get("id")
            category = self._store.upsert_category(
                name=str(node["name"]),
                keyword=str(keyword) if keyword is not None else None,
                parent_id=parent_id,
                icon=node.get("icon"),
                active_icon=node.get("active_icon"),
            )
            results.append(category)

            children = node.get("children") or []
            if children:
                results.extend(self.seed(children, parent_id=category.id))
        return results
