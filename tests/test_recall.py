"""Tests for the recall judge."""

import pytest

from resurface.core import RecallResult
from resurface.core.recall import judge_recall, key_words, match_ratio


TEXT = (
    "The only way to deal with an unfree world is to become so absolutely free "
    "that your very existence is an act of rebellion."
)


def test_key_words_skip_short_words() -> None:
    """Test only words of four or more letters count."""
    assert key_words("To be or not to be, that is it") == ["that"]


def test_miss() -> None:
    """Test an unrelated short answer is a miss."""
    verdict = judge_recall(TEXT, "hmm")

    assert verdict.result == RecallResult.MISS
    assert not verdict.succeeded
    assert verdict.match_ratio == 0.0


def test_partial() -> None:
    """Test a few echoed key words give partial credit."""
    verdict = judge_recall(TEXT, "free world")

    assert verdict.result == RecallResult.PARTIAL
    assert verdict.match_ratio == pytest.approx(0.3)
    assert not verdict.succeeded


def test_success_by_key_words() -> None:
    """Test echoing half the key words is a success."""
    verdict = judge_recall(
        "Courage is grace under pressure and patience",
        "courage grace pressure",
    )

    assert verdict.result == RecallResult.SUCCESS
    assert verdict.succeeded


def test_success_by_length() -> None:
    """Test a long attempt counts as success."""
    verdict = judge_recall(TEXT, "something about being totally rebellious in life")

    assert verdict.result == RecallResult.SUCCESS


def test_long_answer_without_matches_is_partial() -> None:
    """Test answers of 50+ characters get partial credit on a long passage."""
    long_text = " ".join(["lorem"] * 60)
    verdict = judge_recall(long_text, "x" * 55)

    assert verdict.result == RecallResult.PARTIAL


def test_empty_response_is_rejected() -> None:
    """Test a blank response cannot be judged."""
    with pytest.raises(ValueError):
        judge_recall(TEXT, "   ")


def test_text_without_key_words() -> None:
    """Test a passage of short words has a zero match ratio."""
    assert match_ratio("To be or not", "be") == 0.0
