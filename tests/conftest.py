"""Shared fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from resurface.core import Highlight, HighlightSource


NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def make_highlight(
    highlight_id: str,
    score: float = 0.0,
    days_ago: Optional[float] = None,
    views: Optional[int] = None,
    **kwargs,
) -> Highlight:
    """Highlight last viewed ``days_ago`` days before NOW (never viewed if None)."""
    last_viewed = None
    if days_ago is not None:
        last_viewed = (NOW - timedelta(days=days_ago)).isoformat()
    if views is None:
        views = 0 if days_ago is None else 1
    kwargs.setdefault("text", f"Highlight text {highlight_id}")
    kwargs.setdefault("source", HighlightSource.KINDLE)
    return Highlight(
        id=highlight_id,
        integration_score=score,
        view_count=views,
        last_viewed_at=last_viewed,
        **kwargs,
    )


@pytest.fixture
def now() -> datetime:
    return NOW
