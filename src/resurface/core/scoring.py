"""Integration score model.

Each highlight stores a base ``integration_score`` together with the time of
its last interaction (``last_viewed_at``). The score the user actually "has"
at any instant is that base minus a linear decay per day since the last
interaction:

    decayed = max(0, base - days_since_view * DECAY_RATE_PER_DAY)

Decay is never stored. Every read recomputes it from the stored fields and
``now``, and every interaction first decays the base to ``now`` and only then
adds its increment. Highlights that were never viewed do not decay.

All functions here are pure: they take a highlight and an instant and return
numbers or new ``Highlight`` values without touching the input.
"""

import math
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from resurface.core.entities import Highlight


DECAY_RATE_PER_DAY = 0.7  # ~5 points per week of neglect

MIN_SCORE = 0.0
MAX_SCORE = 100.0

FADING_THRESHOLD = 30
FOCUS_REVIEW_THRESHOLD = 40

SECONDS_PER_DAY = 86400.0


class InteractionEvent(str, Enum):
    """Score-increasing interactions."""

    VIEW = "view"
    COMMENT = "comment"
    RECALL_FAILED = "recall_failed"
    RECALL_SUCCEEDED = "recall_succeeded"

    @property
    def increment(self) -> float:
        return EVENT_INCREMENTS[self]


EVENT_INCREMENTS = {
    InteractionEvent.VIEW: 1.0,
    InteractionEvent.COMMENT: 3.0,
    InteractionEvent.RECALL_FAILED: 5.0,
    InteractionEvent.RECALL_SUCCEEDED: 10.0,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO timestamp, returning None when it is missing or malformed."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def was_viewed(highlight: Highlight) -> bool:
    """True once the highlight has been viewed and has a usable view timestamp."""
    return highlight.view_count > 0 and parse_timestamp(highlight.last_viewed_at) is not None


def days_since_view(highlight: Highlight, now: Optional[datetime] = None) -> Optional[float]:
    """Fractional days since the last interaction, or None if never viewed."""
    if not was_viewed(highlight):
        return None
    last_viewed = parse_timestamp(highlight.last_viewed_at)
    now = as_utc(now) if now else utc_now()
    return (now - last_viewed).total_seconds() / SECONDS_PER_DAY


def decayed_score(highlight: Highlight, now: Optional[datetime] = None) -> float:
    """Current integration score of a highlight at ``now``."""
    days = days_since_view(highlight, now)
    if days is None:
        return highlight.integration_score
    # Clock skew can put last_viewed_at slightly in the future
    days = max(0.0, days)
    return max(MIN_SCORE, highlight.integration_score - days * DECAY_RATE_PER_DAY)


def apply_event(
    highlight: Highlight,
    event: InteractionEvent,
    now: Optional[datetime] = None,
) -> Highlight:
    """Decay to ``now``, credit the event, and return the updated highlight."""
    now = as_utc(now) if now else utc_now()
    new_score = min(MAX_SCORE, decayed_score(highlight, now) + event.increment)

    view_count = highlight.view_count
    attempts = highlight.recall_attempts
    successes = highlight.recall_successes
    if event == InteractionEvent.VIEW:
        view_count += 1
    elif event == InteractionEvent.RECALL_FAILED:
        attempts += 1
    elif event == InteractionEvent.RECALL_SUCCEEDED:
        attempts += 1
        successes += 1

    # lastViewedAt stays null until the first view
    last_viewed_at = now.isoformat() if view_count else None

    return replace(
        highlight,
        integration_score=new_score,
        last_viewed_at=last_viewed_at,
        view_count=view_count,
        recall_attempts=attempts,
        recall_successes=successes,
    )


def record_view(highlight: Highlight, now: Optional[datetime] = None) -> Highlight:
    return apply_event(highlight, InteractionEvent.VIEW, now)


def record_comment(highlight: Highlight, now: Optional[datetime] = None) -> Highlight:
    return apply_event(highlight, InteractionEvent.COMMENT, now)


def record_recall(
    highlight: Highlight, succeeded: bool, now: Optional[datetime] = None
) -> Highlight:
    event = InteractionEvent.RECALL_SUCCEEDED if succeeded else InteractionEvent.RECALL_FAILED
    return apply_event(highlight, event, now)


def is_fading(highlight: Highlight, now: Optional[datetime] = None) -> bool:
    """Previously viewed and decayed below the fading threshold."""
    return was_viewed(highlight) and decayed_score(highlight, now) < FADING_THRESHOLD


def needs_focus_review(highlight: Highlight, now: Optional[datetime] = None) -> bool:
    """Previously viewed and decayed below the focus-review threshold."""
    return was_viewed(highlight) and decayed_score(highlight, now) < FOCUS_REVIEW_THRESHOLD


def display_score(score: float) -> int:
    """Whole-percent score as shown to the user (halves round up)."""
    return math.floor(score + 0.5)


def score_message(score: float) -> str:
    """Short status line for a decayed score, judged on its displayed value."""
    score = display_score(score)
    if score <= 0:
        return "New — not yet reviewed"
    if score < 20:
        return "This one's fading. Worth a challenge?"
    if score < 40:
        return "Weakening — review soon"
    if score < 60:
        return "Building — keep going"
    if score < 80:
        return "Strong — well integrated"
    return "Solid — deeply embedded"


def time_since_viewed(highlight: Highlight, now: Optional[datetime] = None) -> str:
    """Human readable age of the last interaction."""
    days = days_since_view(highlight, now)
    if days is None:
        return "Never viewed"
    whole_days = int(max(0.0, days))
    if whole_days == 0:
        return "Today"
    if whole_days == 1:
        return "Yesterday"
    if whole_days < 7:
        return f"{whole_days} days ago"
    if whole_days < 30:
        weeks = whole_days // 7
        return f"{weeks} week{'s' if weeks > 1 else ''} ago"
    if whole_days < 365:
        months = whole_days // 30
        return f"{months} month{'s' if months > 1 else ''} ago"
    years = whole_days // 365
    return f"{years} year{'s' if years > 1 else ''} ago"
