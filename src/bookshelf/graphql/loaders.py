from uuid import UUID

from strawberry.dataloader import DataLoader

from ..database.connection import Database
from ..database.repository import count_books_by_author


class Loaders:
    """Per-request batch loaders. A new instance is built for every request."""

    def __init__(self, db: Database):
        self.db = db
        self.book_count_loader = DataLoader(load_fn=self.load_book_counts)

    async def load_book_counts(self, keys: list[UUID]) -> list[int]:
        """Batch count books for every requested author in one query."""
        async with self.db.session() as session:
            counts = await count_books_by_author(session, keys)
        return [counts.get(key, 0) for key in keys]
