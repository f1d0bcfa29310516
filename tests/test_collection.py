"""Tests for collection operations."""

import pytest

from resurface.core import InteractionEvent
from resurface.core.collection import (
    add_tag,
    apply_event_by_id,
    delete_highlight,
    edit_text,
    find_highlight,
    merge_highlights,
    remove_tag,
    set_comment,
)

from conftest import NOW, make_highlight


@pytest.fixture
def highlights():
    return [
        make_highlight("h1", score=20, days_ago=7),
        make_highlight("h2"),
    ]


def test_apply_event_by_id(highlights) -> None:
    """Test only the addressed highlight changes."""
    updated = apply_event_by_id(highlights, "h1", InteractionEvent.RECALL_SUCCEEDED, NOW)

    assert find_highlight(updated, "h1").integration_score == pytest.approx(25.1)
    assert find_highlight(updated, "h2") == highlights[1]


def test_unknown_id_is_noop(highlights) -> None:
    """Test events for a missing highlight leave the collection alone."""
    assert apply_event_by_id(highlights, "gone", InteractionEvent.VIEW, NOW) == highlights
    assert set_comment(highlights, "gone", "note", NOW) == highlights
    assert delete_highlight(highlights, "gone") == highlights


def test_merge_skips_known_ids(highlights) -> None:
    """Test merging keeps existing memory state and appends new ids."""
    incoming = [make_highlight("h1"), make_highlight("h3"), make_highlight("h3")]

    merged = merge_highlights(highlights, incoming)

    assert [h.id for h in merged] == ["h1", "h2", "h3"]
    assert merged[0].integration_score == 20


def test_first_comment_counts_as_event(highlights) -> None:
    """Test adding a comment credits +3 once."""
    commented = set_comment(highlights, "h2", "  my take ", NOW)
    edited = set_comment(commented, "h2", "a better take", NOW)

    assert find_highlight(commented, "h2").comment == "my take"
    assert find_highlight(commented, "h2").integration_score == 3
    assert find_highlight(edited, "h2").comment == "a better take"
    assert find_highlight(edited, "h2").integration_score == 3


def test_clearing_comment(highlights) -> None:
    """Test a blank comment clears it without scoring."""
    commented = set_comment(highlights, "h2", "note", NOW)
    cleared = set_comment(commented, "h2", "", NOW)

    assert find_highlight(cleared, "h2").comment is None
    assert find_highlight(cleared, "h2").integration_score == 3


def test_tags_are_normalized(highlights) -> None:
    """Test tags are lowercased, trimmed and not duplicated."""
    tagged = add_tag(highlights, "h1", " Stoicism ")
    tagged = add_tag(tagged, "h1", "stoicism")
    tagged = add_tag(tagged, "h1", "  ")

    assert find_highlight(tagged, "h1").tags == ["stoicism"]
    assert find_highlight(remove_tag(tagged, "h1", "STOICISM"), "h1").tags == []


def test_edit_text_keeps_memory_state(highlights) -> None:
    """Test editing text leaves the score untouched."""
    edited = edit_text(highlights, "h1", " New wording ")

    assert find_highlight(edited, "h1").text == "New wording"
    assert find_highlight(edited, "h1").integration_score == 20

    with pytest.raises(ValueError):
        edit_text(highlights, "h1", " ")


def test_delete(highlights) -> None:
    """Test deletion removes by id."""
    assert [h.id for h in delete_highlight(highlights, "h1")] == ["h2"]
