"""Network lookups for covers, books and authors."""

from resurface.adapters.lookup.open_library import OpenLibraryClient
from resurface.adapters.lookup.wikipedia import WikipediaAuthorPhotos

__all__ = ["OpenLibraryClient", "WikipediaAuthorPhotos"]
