"""Weighted resurfacing selector.

Picks the next highlight to show. The pool is split into four categories
and one random draw chooses between them:

    r < 0.40  due for review   (seen, decayed < 50, weakest first)      top 3
    r < 0.70  unseen           (never viewed, collection order)          first 5
    r < 0.90  decay rescue     (base > 50 and lost > 10 points)          top 3
    else      high score       (decayed > 60, strongest first)           top 5

Within a category the pick is uniform over its top entries. An empty
category falls through to the following ones, and when every category is
empty the pick is uniform over the whole pool.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Protocol, Sequence

from resurface.core.entities import Highlight, ScoredHighlight
from resurface.core.scoring import as_utc, decayed_score, utc_now, was_viewed


DUE_SCORE_CEILING = 50
RESCUE_BASE_FLOOR = 50
RESCUE_MIN_DECAY = 10
HIGH_SCORE_FLOOR = 60


class RandomSource(Protocol):
    """The slice of ``random.Random`` the selector needs."""

    def random(self) -> float:
        ...

    def choice(self, seq: Sequence):
        ...


@dataclass
class Category:
    """One weighted selection bucket."""

    name: str
    upper_bound: float
    top_n: int
    entries: list[Highlight] = field(default_factory=list)


@dataclass
class PoolPartition:
    """Sub-pools of a candidate pool at one instant."""

    unseen: list[Highlight]
    due_for_review: list[ScoredHighlight]
    decay_rescue: list[ScoredHighlight]
    high_score: list[ScoredHighlight]


def partition_pool(pool: list[Highlight], now: Optional[datetime] = None) -> PoolPartition:
    """Split a pool into the selector's sub-pools, each in priority order."""
    now = as_utc(now) if now else utc_now()

    unseen = [h for h in pool if not was_viewed(h)]
    seen = [ScoredHighlight(h, decayed_score(h, now)) for h in pool if was_viewed(h)]

    due = sorted(
        (s for s in seen if s.score < DUE_SCORE_CEILING),
        key=lambda s: s.score,
    )
    rescue = sorted(
        (
            s for s in seen
            if s.highlight.integration_score > RESCUE_BASE_FLOOR
            and s.highlight.integration_score - s.score > RESCUE_MIN_DECAY
        ),
        key=lambda s: s.highlight.integration_score - s.score,
        reverse=True,
    )
    high = sorted(
        (s for s in seen if s.score > HIGH_SCORE_FLOOR),
        key=lambda s: s.score,
        reverse=True,
    )

    return PoolPartition(
        unseen=unseen,
        due_for_review=due,
        decay_rescue=rescue,
        high_score=high,
    )


def _categories(partition: PoolPartition) -> list[Category]:
    return [
        Category("due_for_review", 0.40, 3, [s.highlight for s in partition.due_for_review]),
        Category("unseen", 0.70, 5, list(partition.unseen)),
        Category("decay_rescue", 0.90, 3, [s.highlight for s in partition.decay_rescue]),
        Category("high_score", 1.0, 5, [s.highlight for s in partition.high_score]),
    ]


def select_next(
    candidates: list[Highlight],
    current_id: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    rng: Optional[RandomSource] = None,
) -> Optional[Highlight]:
    """Pick the next highlight to display.

    Args:
        candidates: Pre-filtered highlights to choose from
        current_id: Id of the highlight on screen, excluded when possible
        now: Instant used for decay (defaults to the current time)
        rng: Random source; pass a seeded ``random.Random`` for reproducibility

    Returns:
        One member of ``candidates``, or None if ``candidates`` is empty
    """
    if not isinstance(candidates, list):
        raise TypeError("candidates must be a list of highlights")

    pool = [h for h in candidates if h.id != current_id] if current_id else list(candidates)
    if not pool:
        pool = list(candidates)
    if not pool:
        return None

    rng = rng or random.Random()
    categories = _categories(partition_pool(pool, now))

    r = rng.random()
    start = next(
        (i for i, category in enumerate(categories) if r < category.upper_bound),
        len(categories) - 1,
    )

    for offset in range(len(categories)):
        category = categories[(start + offset) % len(categories)]
        if category.entries:
            return rng.choice(category.entries[:category.top_n])

    return rng.choice(pool)
