"""Operations over a list of highlights, addressed by id.

Every function returns a new list. An id that is not in the collection is a
no-op: the UI may still deliver an event for a highlight it just deleted.
"""

from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from resurface.core.entities import Highlight
from resurface.core.scoring import InteractionEvent, apply_event, record_comment


def find_highlight(highlights: list[Highlight], highlight_id: str) -> Optional[Highlight]:
    return next((h for h in highlights if h.id == highlight_id), None)


def _update(
    highlights: list[Highlight],
    highlight_id: str,
    change: Callable[[Highlight], Highlight],
) -> list[Highlight]:
    return [change(h) if h.id == highlight_id else h for h in highlights]


def apply_event_by_id(
    highlights: list[Highlight],
    highlight_id: str,
    event: InteractionEvent,
    now: Optional[datetime] = None,
) -> list[Highlight]:
    """Apply a score event to one highlight of the collection."""
    return _update(highlights, highlight_id, lambda h: apply_event(h, event, now))


def merge_highlights(existing: list[Highlight], incoming: list[Highlight]) -> list[Highlight]:
    """Append incoming highlights whose ids are not already present."""
    known = {h.id for h in existing}
    merged = list(existing)
    for highlight in incoming:
        if highlight.id not in known:
            known.add(highlight.id)
            merged.append(highlight)
    return merged


def normalize_tag(tag: str) -> str:
    return tag.strip().lower()


def add_tag(highlights: list[Highlight], highlight_id: str, tag: str) -> list[Highlight]:
    tag = normalize_tag(tag)
    if not tag:
        return list(highlights)

    def change(h: Highlight) -> Highlight:
        if tag in h.tags:
            return h
        return replace(h, tags=[*h.tags, tag])

    return _update(highlights, highlight_id, change)


def remove_tag(highlights: list[Highlight], highlight_id: str, tag: str) -> list[Highlight]:
    tag = normalize_tag(tag)
    return _update(
        highlights,
        highlight_id,
        lambda h: replace(h, tags=[t for t in h.tags if t != tag]),
    )


def edit_text(highlights: list[Highlight], highlight_id: str, text: str) -> list[Highlight]:
    """Replace a highlight's text; memory state is left alone."""
    text = text.strip()
    if not text:
        raise ValueError("Highlight text cannot be empty")
    return _update(highlights, highlight_id, lambda h: replace(h, text=text))


def set_comment(
    highlights: list[Highlight],
    highlight_id: str,
    comment: Optional[str],
    now: Optional[datetime] = None,
) -> list[Highlight]:
    """Set or clear the comment.

    Only the first non-empty comment counts as a "comment added" event;
    editing or clearing an existing comment is a plain content edit.
    """
    comment = (comment or "").strip() or None

    def change(h: Highlight) -> Highlight:
        updated = replace(h, comment=comment)
        if comment and not h.comment:
            updated = record_comment(updated, now)
        return updated

    return _update(highlights, highlight_id, change)


def delete_highlight(highlights: list[Highlight], highlight_id: str) -> list[Highlight]:
    return [h for h in highlights if h.id != highlight_id]
