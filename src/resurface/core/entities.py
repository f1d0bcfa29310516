"""Core domain entities."""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


PLACEHOLDER_VALUES = frozenset({
    "",
    "unknown",
    "unknown author",
    "unknown title",
    "personal thoughts",
})


def is_placeholder(value: Optional[str]) -> bool:
    """Check if a title/author is a placeholder rather than real provenance."""
    return (value or "").strip().lower() in PLACEHOLDER_VALUES


def generate_id(title: str, text: str) -> str:
    """Stable id for a highlight: same book and text, same id."""
    return hashlib.md5(f"{title}|{text}".encode("utf-8")).hexdigest()[:12]


class HighlightSource(str, Enum):
    """Where a highlight came from."""

    KINDLE = "kindle"
    JOURNAL = "journal"
    VOICE = "voice"
    THOUGHT = "thought"
    QUOTE = "quote"
    TWEET = "tweet"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass
class Highlight:
    """A captured passage plus its memory state."""

    id: str
    text: str
    title: str = "Unknown Title"
    author: str = "Unknown Author"
    source: HighlightSource = HighlightSource.QUOTE
    captured_at: str = ""
    tags: list[str] = field(default_factory=list)
    comment: Optional[str] = None

    # Memory state, only changed through core.scoring
    integration_score: float = 0.0
    view_count: int = 0
    recall_attempts: int = 0
    recall_successes: int = 0
    last_viewed_at: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Highlight id cannot be empty")
        if not self.text or not self.text.strip():
            raise ValueError("Highlight text cannot be empty")
        if not isinstance(self.source, HighlightSource):
            try:
                self.source = HighlightSource(self.source)
            except ValueError:
                raise ValueError(f"Unknown highlight source: {self.source!r}") from None

    def to_dict(self) -> dict[str, Any]:
        """Serialise using the persisted field names."""
        return {
            "id": self.id,
            "text": self.text,
            "title": self.title,
            "author": self.author,
            "source": self.source.value,
            "capturedAt": self.captured_at,
            "tags": list(self.tags),
            "comment": self.comment,
            "integrationScore": self.integration_score,
            "viewCount": self.view_count,
            "recallAttempts": self.recall_attempts,
            "recallSuccesses": self.recall_successes,
            "lastViewedAt": self.last_viewed_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Highlight":
        """Build a highlight from its persisted form.

        Missing optional fields fall back to their defaults and out-of-range
        memory fields are clamped back into their invariants.
        """
        score = float(data.get("integrationScore") or 0)
        view_count = max(0, int(data.get("viewCount") or 0))
        attempts = max(0, int(data.get("recallAttempts") or 0))
        successes = max(0, int(data.get("recallSuccesses") or 0))

        tags = data.get("tags") or []
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]

        return cls(
            id=str(data.get("id") or ""),
            text=data.get("text") or "",
            title=data.get("title") or "Unknown Title",
            author=data.get("author") or "Unknown Author",
            source=data.get("source") or HighlightSource.QUOTE,
            captured_at=data.get("capturedAt") or "",
            tags=list(tags),
            comment=data.get("comment"),
            integration_score=min(100.0, max(0.0, score)),
            view_count=view_count,
            recall_attempts=attempts,
            recall_successes=min(successes, attempts),
            last_viewed_at=data.get("lastViewedAt") if view_count else None,
        )


@dataclass
class ScoredHighlight:
    """Highlight annotated with its decayed score at a given instant."""

    highlight: Highlight
    score: float


@dataclass
class TagCount:
    tag: str
    count: int


@dataclass
class ReviewQueueStats:
    """Counts that drive the review badges."""

    fading: int
    focus: int
    unseen: int
    total: int


@dataclass
class RecallStats:
    """Integration buckets and recall totals across a collection."""

    high: int
    medium: int
    low: int
    total_attempts: int
    total_successes: int

    @property
    def success_rate(self) -> float:
        if not self.total_attempts:
            return 0.0
        return self.total_successes / self.total_attempts


@dataclass
class OnThisDayEntry:
    highlight: Highlight
    years_ago: int


@dataclass
class BookCount:
    title: str
    count: int


@dataclass
class LibraryStats:
    """Per-book totals for the library panel."""

    total_highlights: int
    total_books: int
    book_counts: list[BookCount]


class RecallResult(str, Enum):
    """Outcome of judging a recall attempt."""

    SUCCESS = "success"
    PARTIAL = "partial"
    MISS = "miss"


@dataclass
class RecallVerdict:
    result: RecallResult
    explanation: str
    match_ratio: float

    @property
    def succeeded(self) -> bool:
        return self.result == RecallResult.SUCCESS


@dataclass
class BookCover:
    """Cover art for a book: an image URL or a fallback colour."""

    kind: str
    value: Any

    @property
    def is_image(self) -> bool:
        return self.kind == "image"


@dataclass
class BookMatch:
    """A book search hit."""

    id: str
    title: str
    author: str
    cover_url: Optional[str]
    year: Optional[int]


@dataclass
class ReviewDigest:
    """Everything the daily resurfacing digest shows."""

    queue: ReviewQueueStats
    recall: RecallStats
    on_this_day: list[OnThisDayEntry]
    focus: list[ScoredHighlight]
    picks: list[ScoredHighlight]
