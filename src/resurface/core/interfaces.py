"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional

from resurface.core.entities import BookCover, BookMatch, Highlight, ReviewDigest


class _CacheMiss:
    """Sentinel returned by caches for absent keys."""

    def __repr__(self) -> str:
        return "CACHE_MISS"

    def __bool__(self) -> bool:
        return False


CACHE_MISS: Any = _CacheMiss()


class HighlightStore(ABC):
    """Persistence for the highlight collection, keyed by highlight id."""

    @abstractmethod
    def load_all(self) -> list[Highlight]:
        """Load the collection in its stored order."""
        pass

    @abstractmethod
    def get(self, highlight_id: str) -> Optional[Highlight]:
        """Load one highlight."""
        pass

    @abstractmethod
    def save(self, highlight: Highlight) -> None:
        """Insert or replace one highlight by id."""
        pass

    @abstractmethod
    def save_many(self, highlights: list[Highlight]) -> None:
        """Insert or replace several highlights, appending new ids in order."""
        pass

    @abstractmethod
    def delete(self, highlight_id: str) -> bool:
        """Remove one highlight; returns whether it existed."""
        pass

    @abstractmethod
    def clear(self) -> int:
        """Remove every highlight; returns how many were removed."""
        pass


class KeyValueCache(ABC):
    """Cache for lookups; ``get`` returns ``CACHE_MISS`` for absent keys."""

    @abstractmethod
    def get(self, key: str) -> Any:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass


class CoverProvider(ABC):
    """Interface for book cover and book metadata lookups."""

    @abstractmethod
    async def get_book_cover(self, title: str, author: str) -> BookCover:
        """Find cover art for a book."""
        pass

    @abstractmethod
    async def search_books(self, query: str, limit: int = 5) -> list[BookMatch]:
        """Search books by title and/or author."""
        pass


class AuthorPhotoProvider(ABC):
    """Interface for author portrait lookups."""

    @abstractmethod
    async def get_author_photo(self, author: str) -> Optional[str]:
        """Return a thumbnail URL for an author, if any."""
        pass


class DigestGenerator(ABC):
    """Interface for rendering resurfacing digests."""

    @abstractmethod
    def generate(self, digest: ReviewDigest, digest_date: date) -> str:
        """Render a digest."""
        pass
