"""Heuristic judge for free-text recall attempts."""

from resurface.core.entities import RecallResult, RecallVerdict


MIN_KEY_WORD_LENGTH = 4
MAX_KEY_WORDS = 10
SUCCESS_RATIO = 0.5
PARTIAL_RATIO = 0.2
SUCCESS_LENGTH_SHARE = 0.3
PARTIAL_MIN_LENGTH = 50

EXPLANATIONS = {
    RecallResult.SUCCESS: "Your response captures the essence of this highlight.",
    RecallResult.PARTIAL: "You remembered some key elements, but missed others.",
    RecallResult.MISS: "This highlight might need more reinforcement.",
}


def key_words(text: str) -> list[str]:
    return [w for w in text.lower().split() if len(w) >= MIN_KEY_WORD_LENGTH]


def match_ratio(text: str, response: str) -> float:
    """Share of the highlight's key words echoed in the response.

    A key word matches a response word when either contains the other. The
    denominator is capped at ``MAX_KEY_WORDS`` so long passages are not
    impossible to recall.
    """
    keys = key_words(text)
    if not keys:
        return 0.0
    answer = response.lower().split()
    matched = [k for k in keys if any(w in k or k in w for w in answer)]
    return len(matched) / min(len(keys), MAX_KEY_WORDS)


def judge_recall(text: str, response: str) -> RecallVerdict:
    """Grade a recall attempt against the original highlight text."""
    response = (response or "").strip()
    if not response:
        raise ValueError("Recall response cannot be empty")

    ratio = match_ratio(text, response)
    if ratio >= SUCCESS_RATIO or len(response) >= len(text) * SUCCESS_LENGTH_SHARE:
        result = RecallResult.SUCCESS
    elif ratio >= PARTIAL_RATIO or len(response) >= PARTIAL_MIN_LENGTH:
        result = RecallResult.PARTIAL
    else:
        result = RecallResult.MISS

    return RecallVerdict(result=result, explanation=EXPLANATIONS[result], match_ratio=ratio)
