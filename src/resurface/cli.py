"""CLI entry point for resurface."""

import asyncio
import random
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer

from resurface.adapters.digest import MarkdownDigestGenerator
from resurface.adapters.importers import load_records, records_to_highlights
from resurface.adapters.lookup import OpenLibraryClient, WikipediaAuthorPhotos
from resurface.adapters.lookup.wikipedia import goodreads_url, open_library_url
from resurface.adapters.storage import MemoryCache, YamlHighlightStore
from resurface.config import Settings, get_settings
from resurface.core import Highlight, HighlightSource, decayed_score
from resurface.core import aggregations
from resurface.core.entities import is_placeholder
from resurface.core.scoring import display_score, score_message, time_since_viewed
from resurface.use_cases import DigestService, ResurfacingService


app = typer.Typer(help="Resurface your highlights before you forget them.", no_args_is_help=True)

ConfigOption = typer.Option(Path("config.yaml"), "--config", help="YAML config file")


def _service(settings: Settings) -> ResurfacingService:
    store = YamlHighlightStore(settings.store_dir)
    return ResurfacingService(store, rng=random.Random(settings.seed))


def _print_highlight(highlight: Highlight) -> None:
    score = display_score(decayed_score(highlight))
    provenance = " — ".join(
        part for part in (highlight.title, highlight.author) if not is_placeholder(part)
    )
    print(f"\n[{highlight.id}] {highlight.source.label}" + (f" · {provenance}" if provenance else ""))
    print(highlight.text)
    if highlight.comment:
        print(f"💬 {highlight.comment}")
    tags = aggregations.all_tags(highlight)
    if tags:
        print(" ".join(f"#{t}" for t in tags))
    print(
        f"🧠 {score}% — {score_message(score)} "
        f"(views: {highlight.view_count}, recall: {highlight.recall_successes}/"
        f"{highlight.recall_attempts}, last seen: {time_since_viewed(highlight)})"
    )


def _not_found(highlight_id: str) -> None:
    print(f"❌ Highlight not found: {highlight_id}")
    raise typer.Exit(code=1)


@app.command()
def add(
    text: str = typer.Argument(..., help="Highlight content"),
    title: str = typer.Option("Personal Thoughts", help="Book/article title"),
    author: str = typer.Option("Unknown Author", help="Author"),
    source: HighlightSource = typer.Option(HighlightSource.QUOTE, help="Source type"),
    tag: Optional[list[str]] = typer.Option(None, "--tag", help="Tag (repeatable)"),
    config: Path = ConfigOption,
) -> None:
    """Add one highlight by hand."""
    if not text.strip():
        print("❌ Highlight text cannot be empty")
        raise typer.Exit(code=1)
    service = _service(get_settings(config))
    highlight = service.add_highlight(text, title=title, author=author, source=source, tags=tag)
    print(f"✓ Added highlight {highlight.id}")


@app.command("import")
def import_file(
    file: Path = typer.Argument(..., help="json/jsonl/yaml/csv file"),
    source: HighlightSource = typer.Option(
        HighlightSource.QUOTE, help="Source for rows that do not name one"
    ),
    config: Path = ConfigOption,
) -> None:
    """Import highlight records from a file."""
    try:
        highlights = records_to_highlights(load_records(file), default_source=source)
    except (OSError, ValueError) as e:
        print(f"❌ Import failed: {e}")
        raise typer.Exit(code=1)

    if not highlights:
        print("No valid highlights found.")
        return

    service = _service(get_settings(config))
    added = service.import_highlights(highlights)
    print(f"✓ Imported {added} new highlight(s), {len(highlights) - added} already known.")


@app.command("next")
def next_card(
    current: Optional[str] = typer.Option(None, help="Id of the highlight just shown"),
    source: Optional[HighlightSource] = typer.Option(None, help="Only this source"),
    tag: Optional[str] = typer.Option(None, help="Only highlights with this tag"),
    no_view: bool = typer.Option(False, "--no-view", help="Do not count this as a view"),
    config: Path = ConfigOption,
) -> None:
    """Pick the next highlight to resurface."""
    service = _service(get_settings(config))
    highlight = service.next_highlight(
        current_id=current, source=source, tag=tag, record_view=not no_view
    )
    if highlight is None:
        print("No highlights yet. Add or import some first.")
        raise typer.Exit(code=1)
    _print_highlight(highlight)


@app.command()
def view(highlight_id: str, config: Path = ConfigOption) -> None:
    """Show a highlight and count it as viewed."""
    highlight = _service(get_settings(config)).record_view(highlight_id)
    if highlight is None:
        _not_found(highlight_id)
    _print_highlight(highlight)


@app.command()
def comment(
    highlight_id: str,
    text: str = typer.Argument("", help="Comment; empty clears it"),
    config: Path = ConfigOption,
) -> None:
    """Add, edit or clear the comment on a highlight."""
    highlight = _service(get_settings(config)).set_comment(highlight_id, text)
    if highlight is None:
        _not_found(highlight_id)
    print(f"✓ Comment {'saved' if highlight.comment else 'cleared'} for {highlight_id}")


@app.command()
def recall(
    highlight_id: str,
    response: Optional[str] = typer.Option(None, help="Your recall attempt, judged automatically"),
    success: Optional[bool] = typer.Option(
        None, "--success/--failed", help="Record the outcome directly"
    ),
    config: Path = ConfigOption,
) -> None:
    """Record a recall attempt."""
    service = _service(get_settings(config))

    if response is not None:
        try:
            result = service.challenge(highlight_id, response)
        except ValueError as e:
            print(f"❌ {e}")
            raise typer.Exit(code=1)
        if result is None:
            _not_found(highlight_id)
        verdict, highlight = result
        print(f"\n{verdict.result.value.upper()}: {verdict.explanation}")
        print(f"Original: {highlight.text}")
    elif success is not None:
        highlight = service.record_recall(highlight_id, success)
        if highlight is None:
            _not_found(highlight_id)
    else:
        print("❌ Pass --response or --success/--failed")
        raise typer.Exit(code=1)

    print(f"🧠 Score now {highlight.integration_score:.0f}%")


@app.command()
def tag(highlight_id: str, name: str, config: Path = ConfigOption) -> None:
    """Add a tag to a highlight."""
    highlight = _service(get_settings(config)).add_tag(highlight_id, name)
    if highlight is None:
        _not_found(highlight_id)
    print(f"✓ Tags: {', '.join(highlight.tags) or '-'}")


@app.command()
def untag(highlight_id: str, name: str, config: Path = ConfigOption) -> None:
    """Remove a tag from a highlight."""
    highlight = _service(get_settings(config)).remove_tag(highlight_id, name)
    if highlight is None:
        _not_found(highlight_id)
    print(f"✓ Tags: {', '.join(highlight.tags) or '-'}")


@app.command()
def edit(highlight_id: str, text: str, config: Path = ConfigOption) -> None:
    """Replace the text of a highlight."""
    try:
        highlight = _service(get_settings(config)).edit_text(highlight_id, text)
    except ValueError as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)
    if highlight is None:
        _not_found(highlight_id)
    print(f"✓ Updated {highlight_id}")


@app.command()
def delete(highlight_id: str, config: Path = ConfigOption) -> None:
    """Delete a highlight."""
    if not _service(get_settings(config)).delete(highlight_id):
        _not_found(highlight_id)
    print(f"✓ Deleted {highlight_id}")


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt"),
    config: Path = ConfigOption,
) -> None:
    """Remove every stored highlight."""
    if not yes and not typer.confirm("Delete all highlights?"):
        raise typer.Abort()
    removed = _service(get_settings(config)).clear()
    print(f"✓ Removed {removed} highlight(s)")


@app.command()
def stats(config: Path = ConfigOption) -> None:
    """Show review queue, integration and library statistics."""
    highlights = _service(get_settings(config)).load()
    queue = aggregations.review_queue_stats(highlights)
    recall_summary = aggregations.recall_stats(highlights)
    library = aggregations.library_stats(highlights)

    print(f"\n📚 Library: {library.total_highlights} highlights from {library.total_books} books")
    for book in library.book_counts[:10]:
        print(f"  • {book.title}: {book.count}")

    print("\n🧠 Review queue:")
    print(f"  • Unseen: {queue.unseen}")
    print(f"  • Fading: {queue.fading}")
    print(f"  • Focus review: {queue.focus}")

    print("\n📊 Integration:")
    print(f"  • High: {recall_summary.high}")
    print(f"  • Medium: {recall_summary.medium}")
    print(f"  • Low: {recall_summary.low}")
    print(
        f"  • Recall: {recall_summary.total_successes}/{recall_summary.total_attempts} "
        f"({recall_summary.success_rate:.0%})"
    )


@app.command()
def focus(
    limit: Optional[int] = typer.Option(None, help="Max items"),
    config: Path = ConfigOption,
) -> None:
    """List the focus-review queue, weakest first."""
    settings = get_settings(config)
    queue = aggregations.focus_review_list(
        _service(settings).load(), limit=limit or settings.focus_limit
    )
    if not queue:
        print("Nothing to review. Nice.")
        return
    for scored in queue:
        print(f"[{scored.highlight.id}] {scored.score:5.1f}%  {scored.highlight.text[:70]}")


@app.command()
def tags(config: Path = ConfigOption) -> None:
    """List tags with counts."""
    for tag_count in aggregations.extract_tags(_service(get_settings(config)).load()):
        print(f"{tag_count.count:4d}  {tag_count.tag}")


@app.command("on-this-day")
def on_this_day(config: Path = ConfigOption) -> None:
    """Show highlights captured on this day in earlier years."""
    entries = aggregations.on_this_day(_service(get_settings(config)).load())
    if not entries:
        print("Nothing from this day in earlier years.")
        return
    for entry in entries:
        print(f"\n📅 {entry.years_ago} year{'s' if entry.years_ago > 1 else ''} ago")
        _print_highlight(entry.highlight)


@app.command()
def digest(
    output: Optional[Path] = typer.Option(None, help="Output markdown file"),
    config: Path = ConfigOption,
) -> None:
    """Write today's resurfacing digest in Markdown."""
    settings = get_settings(config)
    highlights = _service(settings).load()

    digest_service = DigestService(MarkdownDigestGenerator(), rng=random.Random(settings.seed))
    review_digest = digest_service.build_digest(
        highlights,
        focus_limit=settings.review.digest_focus_limit,
        picks=settings.review.digest_picks,
    )
    content = digest_service.generate_digest(review_digest, date.today())

    if output is None:
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        output = settings.digests_dir / f"{timestamp}_resurface.md"
    digest_service.save_digest(content, output)


@app.command()
def cover(highlight_id: str, config: Path = ConfigOption) -> None:
    """Look up the book cover and author photo for a highlight."""
    settings = get_settings(config)
    highlight = _service(settings).store.get(highlight_id)
    if highlight is None:
        _not_found(highlight_id)
    asyncio.run(async_cover(highlight, settings))


async def async_cover(highlight: Highlight, settings: Settings) -> None:
    """Async implementation of the cover command."""
    covers = OpenLibraryClient(
        MemoryCache(), timeout=settings.lookup_timeout, user_agent=settings.lookup.user_agent
    )
    photos = WikipediaAuthorPhotos(
        MemoryCache(), timeout=settings.lookup_timeout, user_agent=settings.lookup.user_agent
    )

    book_cover, photo = await asyncio.gather(
        covers.get_book_cover(highlight.title, highlight.author),
        photos.get_author_photo(highlight.author),
    )

    print(f"\n{covers.emoji} {highlight.title} — {highlight.author}")
    if book_cover.is_image:
        print(f"  • Cover: {book_cover.value}")
    else:
        rgb = book_cover.value
        print(f"  • Cover colour: rgb({rgb['r']}, {rgb['g']}, {rgb['b']})")
    print(f"  {photos.emoji} Author photo: {photo or '-'}")
    print(f"  • Goodreads: {goodreads_url(highlight.title, highlight.author)}")
    print(f"  • Open Library: {open_library_url(highlight.title, highlight.author)}")


@app.command()
def covers(config: Path = ConfigOption) -> None:
    """Preload covers for every book in the library."""
    settings = get_settings(config)
    highlights = _service(settings).load()
    client = OpenLibraryClient(
        MemoryCache(), timeout=settings.lookup_timeout, user_agent=settings.lookup.user_agent
    )
    count = asyncio.run(client.preload_covers(highlights, batch_size=settings.lookup.cover_batch_size))
    found = sum(
        1 for title, author in dict.fromkeys((h.title, h.author) for h in highlights)
        if client.get_cached_cover(title, author).is_image
    )
    print(f"✓ Looked up {count} book(s), {found} with cover art")


@app.command()
def search(
    query: str,
    limit: int = typer.Option(5, help="Max results"),
    config: Path = ConfigOption,
) -> None:
    """Search Open Library for a book."""
    settings = get_settings(config)
    client = OpenLibraryClient(
        MemoryCache(), timeout=settings.lookup_timeout, user_agent=settings.lookup.user_agent
    )
    matches = asyncio.run(client.search_books(query, limit=limit))
    if not matches:
        print("No books found.")
        return
    for match in matches:
        year = f" ({match.year})" if match.year else ""
        print(f"📖 {match.title}{year} — {match.author}")


if __name__ == "__main__":
    app()
