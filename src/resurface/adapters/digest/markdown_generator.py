"""Markdown digest generator."""

from datetime import date

from resurface.core import DigestGenerator, Highlight, ReviewDigest, ScoredHighlight
from resurface.core.entities import is_placeholder
from resurface.core.scoring import display_score, score_message


SOURCE_EMOJI = {
    "kindle": "📖",
    "journal": "✍️",
    "voice": "🎙️",
    "thought": "💭",
    "quote": "💬",
    "tweet": "𝕏",
}


class MarkdownDigestGenerator(DigestGenerator):
    """Generate a markdown resurfacing digest."""

    def generate(self, digest: ReviewDigest, digest_date: date) -> str:
        """Generate markdown digest."""
        queue = digest.queue
        recall = digest.recall

        lines = [
            f"# 🧠 Daily Resurface — {digest_date.isoformat()}",
            "",
            f"Highlights: {queue.total} · unseen: {queue.unseen} · "
            f"fading: {queue.fading} · focus queue: {queue.focus}",
            "",
            f"Integration: high {recall.high} · medium {recall.medium} · low {recall.low}",
            "",
            f"Recall: {recall.total_successes}/{recall.total_attempts} "
            f"({recall.success_rate:.0%})",
            "",
        ]

        lines.extend(["## 📅 On This Day", ""])
        if not digest.on_this_day:
            lines.extend(["- None", ""])
        for entry in digest.on_this_day:
            years = f"{entry.years_ago} year{'s' if entry.years_ago > 1 else ''} ago"
            lines.extend(self._format_highlight(entry.highlight, years))

        lines.extend(["## 🎯 Focus Review", ""])
        if not digest.focus:
            lines.extend(["- Nothing is fading. Nice.", ""])
        for scored in digest.focus:
            lines.extend(self._format_scored(scored))

        lines.extend(["## 🔀 Resurfaced", ""])
        if not digest.picks:
            lines.extend(["- None", ""])
        for scored in digest.picks:
            lines.extend(self._format_scored(scored))

        return "\n".join(lines)

    def _format_scored(self, scored: ScoredHighlight) -> list[str]:
        return self._format_highlight(
            scored.highlight,
            f"{display_score(scored.score)}% — {score_message(scored.score)}",
        )

    def _format_highlight(self, highlight: Highlight, note: str) -> list[str]:
        """Format single highlight as a quote block."""
        emoji = SOURCE_EMOJI.get(highlight.source.value, "📚")
        quoted = [f"> {line}" if line else ">" for line in highlight.text.splitlines()]

        provenance = [
            part for part in (highlight.title, highlight.author)
            if not is_placeholder(part)
        ]
        meta = " — ".join(provenance) or highlight.source.label

        lines = [
            *quoted,
            "",
            f"{emoji} *{meta}* · `{highlight.id}` · {note}",
            "",
        ]

        if highlight.comment:
            lines.extend([f"💬 {highlight.comment}", ""])

        if highlight.tags:
            lines.extend([" ".join(f"#{tag}" for tag in highlight.tags), ""])

        lines.append("---")
        lines.append("")

        return lines
