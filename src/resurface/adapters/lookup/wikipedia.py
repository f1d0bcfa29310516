"""Wikipedia author photo adapter."""

from typing import Optional
from urllib.parse import quote

import httpx

from resurface.core import CACHE_MISS, AuthorPhotoProvider, KeyValueCache
from resurface.core.entities import is_placeholder


def goodreads_url(title: str, author: str) -> str:
    return f"https://www.goodreads.com/search?q={quote(f'{title} {author}'.strip())}"


def open_library_url(title: str, author: str) -> str:
    return f"https://openlibrary.org/search?q={quote(f'{title} {author}'.strip())}"


class WikipediaAuthorPhotos(AuthorPhotoProvider):
    """Find author portraits through the Wikipedia search and pageimages APIs."""

    emoji = "🖼️"
    name = "Wikipedia"

    def __init__(
        self,
        cache: KeyValueCache,
        timeout: float = 10.0,
        user_agent: str = "resurface",
    ) -> None:
        self.cache = cache
        self.timeout = timeout
        self.user_agent = user_agent
        self.api_url = "https://en.wikipedia.org/w/api.php"

    async def get_author_photo(self, author: str) -> Optional[str]:
        """Thumbnail URL of the best matching page, or None."""
        if is_placeholder(author):
            return None

        cache_key = author.strip().lower()
        cached = self.cache.get(cache_key)
        if cached is not CACHE_MISS:
            return cached

        thumbnail = None
        async with httpx.AsyncClient(
            timeout=self.timeout, headers={"User-Agent": self.user_agent}
        ) as client:
            try:
                response = await client.get(
                    self.api_url,
                    params={
                        "action": "query",
                        "list": "search",
                        "srsearch": author,
                        "format": "json",
                    },
                )
                response.raise_for_status()
                results = response.json().get("query", {}).get("search") or []

                if results:
                    response = await client.get(
                        self.api_url,
                        params={
                            "action": "query",
                            "titles": results[0]["title"],
                            "prop": "pageimages",
                            "pithumbsize": 200,
                            "format": "json",
                        },
                    )
                    response.raise_for_status()
                    pages = response.json().get("query", {}).get("pages") or {}
                    page = next(iter(pages.values()), {})
                    thumbnail = (page.get("thumbnail") or {}).get("source")
            except (httpx.HTTPError, ValueError, KeyError) as e:
                print(f"⚠️  {self.name}: could not fetch author photo for {author}: {e}")

        self.cache.set(cache_key, thumbnail)
        return thumbnail
