"""Tests for the Wikipedia author photo adapter."""

from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from resurface.adapters.lookup import WikipediaAuthorPhotos
from resurface.adapters.lookup.wikipedia import goodreads_url, open_library_url
from resurface.adapters.storage import MemoryCache


def _response(payload) -> Mock:
    response = Mock()
    response.raise_for_status = Mock()
    response.json = Mock(return_value=payload)
    return response


@pytest.fixture
def photos():
    """Create author photo lookup with an empty cache."""
    return WikipediaAuthorPhotos(MemoryCache())


@pytest.mark.asyncio
async def test_get_author_photo(photos) -> None:
    """Test search then pageimages lookup returns the thumbnail."""
    search = _response({"query": {"search": [{"title": "Seneca the Younger"}]}})
    pages = _response({"query": {"pages": {"123": {"thumbnail": {"source": "https://upload/seneca.jpg"}}}}})

    with patch("httpx.AsyncClient") as mock_client:
        mock_get = AsyncMock(side_effect=[search, pages])
        mock_client.return_value.__aenter__.return_value.get = mock_get

        photo = await photos.get_author_photo("Seneca")

        assert photo == "https://upload/seneca.jpg"
        assert mock_get.call_args.kwargs["params"]["titles"] == "Seneca the Younger"
        assert mock_get.call_args.kwargs["params"]["pithumbsize"] == 200


@pytest.mark.asyncio
async def test_get_author_photo_caches_misses(photos) -> None:
    """Test authors without a page are cached as None."""
    with patch("httpx.AsyncClient") as mock_client:
        mock_get = AsyncMock(return_value=_response({"query": {"search": []}}))
        mock_client.return_value.__aenter__.return_value.get = mock_get

        assert await photos.get_author_photo("Nobody Special") is None
        assert await photos.get_author_photo("nobody special") is None
        assert mock_get.call_count == 1


@pytest.mark.asyncio
async def test_get_author_photo_placeholder_and_errors(photos, capsys) -> None:
    """Test placeholder authors skip the lookup and errors give None."""
    with patch("httpx.AsyncClient") as mock_client:
        failing = _response({})
        failing.raise_for_status = Mock(side_effect=httpx.HTTPError("API Error"))
        mock_get = AsyncMock(return_value=failing)
        mock_client.return_value.__aenter__.return_value.get = mock_get

        assert await photos.get_author_photo("Unknown Author") is None
        assert mock_get.call_count == 0
        assert await photos.get_author_photo("Seneca") is None
        assert "Wikipedia: could not fetch author photo for Seneca" in capsys.readouterr().out


def test_external_links() -> None:
    """Test Goodreads and Open Library search links are URL-encoded."""
    assert goodreads_url("Walden", "Thoreau") == "https://www.goodreads.com/search?q=Walden%20Thoreau"
    assert open_library_url("Dune", "") == "https://openlibrary.org/search?q=Dune"
