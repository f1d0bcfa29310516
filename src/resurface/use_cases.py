"""Business logic use cases."""

import random
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Optional

from resurface.core import (
    DigestGenerator,
    Highlight,
    HighlightSource,
    HighlightStore,
    InteractionEvent,
    RecallVerdict,
    ReviewDigest,
    ScoredHighlight,
    decayed_score,
    select_next,
)
from resurface.core import aggregations, collection
from resurface.core.entities import generate_id
from resurface.core.recall import judge_recall
from resurface.core.scoring import as_utc, utc_now


class ResurfacingService:
    """Apply interactions to the stored collection and pick what to show next."""

    def __init__(
        self,
        store: HighlightStore,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store
        self.rng = rng or random.Random()

    def load(self) -> list[Highlight]:
        return self.store.load_all()

    def _apply(
        self,
        highlight_id: str,
        change: Callable[[list[Highlight]], list[Highlight]],
    ) -> Optional[Highlight]:
        """Run a collection operation and persist the one highlight it touched."""
        updated = collection.find_highlight(change(self.load()), highlight_id)
        if updated is not None:
            self.store.save(updated)
        return updated

    def import_highlights(self, incoming: list[Highlight]) -> int:
        """Merge imported highlights; returns how many were new."""
        existing = self.load()
        merged = collection.merge_highlights(existing, incoming)
        added = merged[len(existing):]
        self.store.save_many(added)
        return len(added)

    def add_highlight(
        self,
        text: str,
        title: str = "Personal Thoughts",
        author: str = "Unknown Author",
        source: HighlightSource = HighlightSource.QUOTE,
        tags: Optional[list[str]] = None,
        now: Optional[datetime] = None,
    ) -> Highlight:
        """Manual entry of a single highlight."""
        now = as_utc(now) if now else utc_now()
        text = text.strip()
        highlight = Highlight(
            id=generate_id(title, text),
            text=text,
            title=title,
            author=author,
            source=source,
            captured_at=now.isoformat(),
            tags=list(dict.fromkeys(collection.normalize_tag(t) for t in tags or [] if t.strip())),
        )
        existing = self.store.get(highlight.id)
        if existing is not None:
            return existing
        self.store.save(highlight)
        return highlight

    def next_highlight(
        self,
        current_id: Optional[str] = None,
        source: Optional[HighlightSource] = None,
        tag: Optional[str] = None,
        now: Optional[datetime] = None,
        record_view: bool = True,
    ) -> Optional[Highlight]:
        """Select the next highlight and, by default, count it as viewed."""
        pool = aggregations.filter_pool(self.load(), source=source, tag=tag)
        if not pool:
            return None

        chosen = select_next(pool, current_id, now=now, rng=self.rng)
        if chosen is None or not record_view:
            return chosen
        return self.record_view(chosen.id, now)

    def record_view(self, highlight_id: str, now: Optional[datetime] = None) -> Optional[Highlight]:
        return self._apply(
            highlight_id,
            lambda hs: collection.apply_event_by_id(hs, highlight_id, InteractionEvent.VIEW, now),
        )

    def record_recall(
        self, highlight_id: str, succeeded: bool, now: Optional[datetime] = None
    ) -> Optional[Highlight]:
        event = InteractionEvent.RECALL_SUCCEEDED if succeeded else InteractionEvent.RECALL_FAILED
        return self._apply(
            highlight_id,
            lambda hs: collection.apply_event_by_id(hs, highlight_id, event, now),
        )

    def challenge(
        self, highlight_id: str, response: str, now: Optional[datetime] = None
    ) -> Optional[tuple[RecallVerdict, Highlight]]:
        """Judge a free-text recall attempt and credit it."""
        highlight = self.store.get(highlight_id)
        if highlight is None:
            return None
        verdict = judge_recall(highlight.text, response)
        updated = self.record_recall(highlight_id, verdict.succeeded, now)
        if updated is None:
            return None
        return verdict, updated

    def set_comment(
        self, highlight_id: str, comment: Optional[str], now: Optional[datetime] = None
    ) -> Optional[Highlight]:
        return self._apply(
            highlight_id,
            lambda hs: collection.set_comment(hs, highlight_id, comment, now),
        )

    def add_tag(self, highlight_id: str, tag: str) -> Optional[Highlight]:
        return self._apply(highlight_id, lambda hs: collection.add_tag(hs, highlight_id, tag))

    def remove_tag(self, highlight_id: str, tag: str) -> Optional[Highlight]:
        return self._apply(highlight_id, lambda hs: collection.remove_tag(hs, highlight_id, tag))

    def edit_text(self, highlight_id: str, text: str) -> Optional[Highlight]:
        return self._apply(highlight_id, lambda hs: collection.edit_text(hs, highlight_id, text))

    def delete(self, highlight_id: str) -> bool:
        return self.store.delete(highlight_id)

    def clear(self) -> int:
        return self.store.clear()


class DigestService:
    """Service for building and rendering the daily resurfacing digest."""

    def __init__(
        self,
        digest_generator: DigestGenerator,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.digest_generator = digest_generator
        self.rng = rng or random.Random()

    def build_digest(
        self,
        highlights: list[Highlight],
        now: Optional[datetime] = None,
        focus_limit: int = 10,
        picks: int = 3,
    ) -> ReviewDigest:
        """Collect stats, on-this-day, focus queue and a few selector picks."""
        now = as_utc(now) if now else utc_now()

        chosen: list[ScoredHighlight] = []
        pool = list(highlights)
        while pool and len(chosen) < picks:
            pick = select_next(pool, now=now, rng=self.rng)
            if pick is None:
                break
            chosen.append(ScoredHighlight(pick, decayed_score(pick, now)))
            pool = [h for h in pool if h.id != pick.id]

        return ReviewDigest(
            queue=aggregations.review_queue_stats(highlights, now),
            recall=aggregations.recall_stats(highlights, now),
            on_this_day=aggregations.on_this_day(highlights, now),
            focus=aggregations.focus_review_list(highlights, now, limit=focus_limit),
            picks=chosen,
        )

    def generate_digest(self, digest: ReviewDigest, digest_date: date) -> str:
        return self.digest_generator.generate(digest, digest_date)

    def save_digest(self, digest: str, output_path: Path) -> None:
        """Save digest to file."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(digest, encoding="utf-8")
        print(f"Digest saved to {output_path}")
