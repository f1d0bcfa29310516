"""Open Library book cover and search adapter."""

import asyncio
from typing import Optional

import httpx

from resurface.core import (
    CACHE_MISS,
    BookCover,
    BookMatch,
    CoverProvider,
    Highlight,
    KeyValueCache,
)


# Dark fallback palettes, picked deterministically by title
COLOR_PALETTES = [
    {"r": 15, "g": 15, "b": 25},
    {"r": 25, "g": 18, "b": 35},
    {"r": 12, "g": 20, "b": 28},
    {"r": 28, "g": 18, "b": 18},
    {"r": 18, "g": 25, "b": 22},
    {"r": 22, "g": 22, "b": 30},
    {"r": 30, "g": 20, "b": 15},
    {"r": 15, "g": 22, "b": 30},
    {"r": 25, "g": 15, "b": 25},
    {"r": 20, "g": 20, "b": 20},
]


def title_hash(title: str) -> int:
    """32-bit signed string hash (``h * 31 + c``)."""
    value = 0
    for char in title:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def color_for_title(title: str) -> dict[str, int]:
    return COLOR_PALETTES[abs(title_hash(title)) % len(COLOR_PALETTES)]


def cover_url(cover_id: Optional[int], size: str = "L") -> Optional[str]:
    """Cover image URL for an Open Library cover id (size S, M or L)."""
    if not cover_id:
        return None
    return f"https://covers.openlibrary.org/b/id/{cover_id}-{size}.jpg"


class OpenLibraryClient(CoverProvider):
    """Look up covers and books on Open Library."""

    emoji = "📚"
    name = "Open Library"

    def __init__(
        self,
        cache: KeyValueCache,
        timeout: float = 10.0,
        user_agent: str = "resurface",
    ) -> None:
        self.cache = cache
        self.timeout = timeout
        self.user_agent = user_agent
        self.base_url = "https://openlibrary.org"

    async def get_book_cover(self, title: str, author: str) -> BookCover:
        """Cover image for a book, or a palette colour if none is found."""
        cache_key = f"{title}|{author}"
        cached = self.cache.get(cache_key)
        if cached is not CACHE_MISS:
            return cached

        cover = None
        async with httpx.AsyncClient(timeout=self.timeout, headers=self._headers()) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/search.json",
                    params={
                        "q": f"{title} {author}".strip(),
                        "limit": 1,
                        "fields": "key,cover_i",
                    },
                )
                response.raise_for_status()
                docs = response.json().get("docs") or []
                if docs and docs[0].get("cover_i"):
                    cover = BookCover(kind="image", value=cover_url(docs[0]["cover_i"]))
            except (httpx.HTTPError, ValueError) as e:
                print(f"⚠️  {self.name}: could not fetch cover for {title}: {e}")

        if cover is None:
            cover = BookCover(kind="color", value=color_for_title(title))
        self.cache.set(cache_key, cover)
        return cover

    def get_cached_cover(self, title: str, author: str) -> BookCover:
        """Cached cover without network access; falls back to the palette colour."""
        cached = self.cache.get(f"{title}|{author}")
        if cached is not CACHE_MISS:
            return cached
        return BookCover(kind="color", value=color_for_title(title))

    async def preload_covers(self, highlights: list[Highlight], batch_size: int = 5) -> int:
        """Fetch covers for every distinct book, ``batch_size`` at a time.

        Returns:
            Number of distinct books looked up
        """
        books = list(dict.fromkeys((h.title, h.author) for h in highlights))
        for start in range(0, len(books), batch_size):
            batch = books[start:start + batch_size]
            await asyncio.gather(*(self.get_book_cover(title, author) for title, author in batch))
        return len(books)

    async def search_books(self, query: str, limit: int = 5) -> list[BookMatch]:
        """Search for books; returns an empty list on short queries or errors."""
        if not query or len(query.strip()) < 2:
            return []

        async with httpx.AsyncClient(timeout=self.timeout, headers=self._headers()) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/search.json",
                    params={
                        "q": query.strip(),
                        "limit": limit,
                        "fields": "key,title,author_name,cover_i,first_publish_year",
                    },
                )
                response.raise_for_status()
                docs = response.json().get("docs") or []
            except (httpx.HTTPError, ValueError) as e:
                print(f"⚠️  {self.name}: book search failed: {e}")
                return []

        return [
            BookMatch(
                id=doc.get("key", ""),
                title=doc.get("title", ""),
                author=(doc.get("author_name") or ["Unknown"])[0],
                cover_url=cover_url(doc.get("cover_i"), "M"),
                year=doc.get("first_publish_year"),
            )
            for doc in docs
        ]

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent}
