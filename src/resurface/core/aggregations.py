"""Collection-wide queries built on the score model."""

from collections import Counter
from datetime import datetime
from typing import Optional

from resurface.core.entities import (
    BookCount,
    Highlight,
    HighlightSource,
    LibraryStats,
    OnThisDayEntry,
    RecallStats,
    ReviewQueueStats,
    ScoredHighlight,
    TagCount,
    is_placeholder,
)
from resurface.core.scoring import (
    FADING_THRESHOLD,
    FOCUS_REVIEW_THRESHOLD,
    as_utc,
    decayed_score,
    parse_timestamp,
    utc_now,
    was_viewed,
)


HIGH_INTEGRATION = 60
MEDIUM_INTEGRATION = 30
BOOK_TAG_MAX_LENGTH = 50


def auto_tags(highlight: Highlight) -> list[str]:
    """Tags derived from provenance: source, author and book."""
    tags = [highlight.source.value]
    if not is_placeholder(highlight.author):
        tags.append(f"author:{highlight.author.strip().lower()}")
    if not is_placeholder(highlight.title):
        tags.append(f"book:{highlight.title.strip().lower()[:BOOK_TAG_MAX_LENGTH]}")
    return tags


def all_tags(highlight: Highlight) -> list[str]:
    """User tags followed by auto tags, without duplicates."""
    return list(dict.fromkeys([*highlight.tags, *auto_tags(highlight)]))


def extract_tags(highlights: list[Highlight]) -> list[TagCount]:
    """Count every user and auto tag, most frequent first."""
    counts: Counter[str] = Counter()
    for highlight in highlights:
        counts.update(all_tags(highlight))
    return [
        TagCount(tag=tag, count=count)
        for tag, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


def filter_pool(
    highlights: list[Highlight],
    source: Optional[HighlightSource | str] = None,
    tag: Optional[str] = None,
) -> list[Highlight]:
    """Restrict a collection by source and/or tag before selection."""
    pool = highlights
    if source:
        source = HighlightSource(source)
        pool = [h for h in pool if h.source == source]
    if tag:
        wanted = tag.strip().lower()
        pool = [h for h in pool if wanted in all_tags(h)]
    return list(pool)


def review_queue_stats(
    highlights: list[Highlight], now: Optional[datetime] = None
) -> ReviewQueueStats:
    """Fading / focus / never-viewed counts."""
    now = as_utc(now) if now else utc_now()
    fading = focus = unseen = 0
    for highlight in highlights:
        if not was_viewed(highlight):
            unseen += 1
            continue
        score = decayed_score(highlight, now)
        if score < FADING_THRESHOLD:
            fading += 1
        if score < FOCUS_REVIEW_THRESHOLD:
            focus += 1
    return ReviewQueueStats(fading=fading, focus=focus, unseen=unseen, total=len(highlights))


def focus_review_list(
    highlights: list[Highlight],
    now: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> list[ScoredHighlight]:
    """Previously viewed highlights below the focus threshold, weakest first."""
    now = as_utc(now) if now else utc_now()
    scored = [
        ScoredHighlight(h, decayed_score(h, now))
        for h in highlights
        if was_viewed(h)
    ]
    queue = sorted(
        (s for s in scored if s.score < FOCUS_REVIEW_THRESHOLD),
        key=lambda s: s.score,
    )
    return queue[:limit] if limit else queue


def recall_stats(highlights: list[Highlight], now: Optional[datetime] = None) -> RecallStats:
    """Integration buckets (60/30) and recall totals for the whole collection."""
    now = as_utc(now) if now else utc_now()
    high = medium = low = 0
    for highlight in highlights:
        score = decayed_score(highlight, now)
        if score >= HIGH_INTEGRATION:
            high += 1
        elif score >= MEDIUM_INTEGRATION:
            medium += 1
        else:
            low += 1
    return RecallStats(
        high=high,
        medium=medium,
        low=low,
        total_attempts=sum(h.recall_attempts for h in highlights),
        total_successes=sum(h.recall_successes for h in highlights),
    )


def on_this_day(
    highlights: list[Highlight], now: Optional[datetime] = None
) -> list[OnThisDayEntry]:
    """Highlights captured on today's month/day in an earlier year."""
    today = (as_utc(now) if now else utc_now()).date()
    entries = []
    for highlight in highlights:
        captured = parse_timestamp(highlight.captured_at)
        if captured is None:
            continue
        captured_date = captured.date()
        if (
            captured_date.month == today.month
            and captured_date.day == today.day
            and captured_date.year < today.year
        ):
            entries.append(OnThisDayEntry(highlight, today.year - captured_date.year))
    entries.sort(key=lambda entry: entry.years_ago)
    return entries


def library_stats(highlights: list[Highlight]) -> LibraryStats:
    """Highlights per book."""
    books = Counter(h.title for h in highlights)
    return LibraryStats(
        total_highlights=len(highlights),
        total_books=len(books),
        book_counts=[
            BookCount(title=title, count=count)
            for title, count in sorted(books.items(), key=lambda item: (-item[1], item[0]))
        ],
    )
