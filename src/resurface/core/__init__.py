"""Core domain layer."""

from resurface.core.entities import (
    BookCount,
    BookCover,
    BookMatch,
    Highlight,
    HighlightSource,
    LibraryStats,
    OnThisDayEntry,
    RecallResult,
    RecallStats,
    RecallVerdict,
    ReviewDigest,
    ReviewQueueStats,
    ScoredHighlight,
    TagCount,
)
from resurface.core.interfaces import (
    CACHE_MISS,
    AuthorPhotoProvider,
    CoverProvider,
    DigestGenerator,
    HighlightStore,
    KeyValueCache,
)
from resurface.core.scoring import (
    DECAY_RATE_PER_DAY,
    FADING_THRESHOLD,
    FOCUS_REVIEW_THRESHOLD,
    InteractionEvent,
    apply_event,
    decayed_score,
)
from resurface.core.selector import select_next

__all__ = [
    "Highlight",
    "HighlightSource",
    "ScoredHighlight",
    "TagCount",
    "ReviewQueueStats",
    "RecallStats",
    "OnThisDayEntry",
    "BookCount",
    "LibraryStats",
    "RecallResult",
    "RecallVerdict",
    "BookCover",
    "BookMatch",
    "ReviewDigest",
    "HighlightStore",
    "KeyValueCache",
    "CoverProvider",
    "AuthorPhotoProvider",
    "DigestGenerator",
    "CACHE_MISS",
    "DECAY_RATE_PER_DAY",
    "FADING_THRESHOLD",
    "FOCUS_REVIEW_THRESHOLD",
    "InteractionEvent",
    "apply_event",
    "decayed_score",
    "select_next",
]
