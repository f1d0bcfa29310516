"""Tests for the YAML highlight store."""

from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from resurface.adapters.storage import MemoryCache, YamlHighlightStore
from resurface.core import CACHE_MISS, HighlightSource
from resurface.core.scoring import record_view
from resurface.use_cases import ResurfacingService

from conftest import NOW, make_highlight


def test_store_save_and_load() -> None:
    """Test artifacts are written per source and reload in order."""
    with TemporaryDirectory() as tmpdir:
        storage_dir = Path(tmpdir)
        store = YamlHighlightStore(storage_dir)

        store.save(make_highlight("b"))
        store.save(make_highlight("a", source=HighlightSource.JOURNAL))

        assert len(list(storage_dir.glob("kindle/*.yaml"))) == 1
        assert len(list(storage_dir.glob("journal/*.yaml"))) == 1

        # Load from new store instance
        store2 = YamlHighlightStore(storage_dir)
        assert [h.id for h in store2.load_all()] == ["b", "a"]


def test_store_replaces_by_id() -> None:
    """Test saving an existing id keeps its position and latest state."""
    with TemporaryDirectory() as tmpdir:
        store = YamlHighlightStore(Path(tmpdir))
        first = make_highlight("h1", score=20, days_ago=7)
        store.save(first)
        store.save(make_highlight("h2"))

        store.save(record_view(first, NOW))

        loaded = store.load_all()
        assert [h.id for h in loaded] == ["h1", "h2"]
        assert loaded[0].view_count == 2
        assert store.get("h1").last_viewed_at == NOW.isoformat()


def test_store_preserves_memory_state() -> None:
    """Test all memory fields survive a save/load cycle."""
    with TemporaryDirectory() as tmpdir:
        store = YamlHighlightStore(Path(tmpdir))
        highlight = make_highlight(
            "h1",
            score=42.5,
            days_ago=3,
            views=4,
            recall_attempts=3,
            recall_successes=2,
            tags=["focus"],
            comment="Ünïcode note",
        )
        store.save(highlight)

        assert store.get("h1") == highlight


def test_store_source_change_moves_artifact() -> None:
    """Test a highlight saved under a new source leaves no stale copy."""
    with TemporaryDirectory() as tmpdir:
        storage_dir = Path(tmpdir)
        store = YamlHighlightStore(storage_dir)
        store.save(make_highlight("h1"))
        store.save(make_highlight("h1", source=HighlightSource.TWEET))

        assert len(store.load_all()) == 1
        assert len(list(storage_dir.glob("tweet/*.yaml"))) == 1
        assert list(storage_dir.glob("kindle/*.yaml")) == []


def test_store_save_many_and_delete() -> None:
    """Test batch save appends new ids in order and replaces known ones in place."""
    with TemporaryDirectory() as tmpdir:
        store = YamlHighlightStore(Path(tmpdir))
        store.save_many([make_highlight("a"), make_highlight("b")])
        store.save_many([make_highlight("c"), make_highlight("a", score=50, days_ago=0)])

        assert [h.id for h in store.load_all()] == ["a", "b", "c"]
        assert store.get("a").integration_score == 50

        assert store.delete("b")
        assert store.delete("a")
        assert not store.delete("a")
        assert store.get("a") is None
        assert store.clear() == 1
        assert store.load_all() == []


def test_store_skips_unreadable_artifacts() -> None:
    """Test a corrupt artifact is skipped instead of failing the load."""
    with TemporaryDirectory() as tmpdir:
        storage_dir = Path(tmpdir)
        store = YamlHighlightStore(storage_dir)
        store.save(make_highlight("good"))
        (storage_dir / "kindle" / "broken.yaml").write_text("highlight: [unclosed", encoding="utf-8")
        (storage_dir / "kindle" / "empty.yaml").write_text("position: 3\n", encoding="utf-8")

        assert [h.id for h in store.load_all()] == ["good"]


def test_memory_cache_distinguishes_none() -> None:
    """Test a cached None is a hit, not a miss."""
    cache = MemoryCache()

    assert cache.get("seneca") is CACHE_MISS
    cache.set("seneca", None)
    assert cache.get("seneca") is None
    assert "seneca" in cache
    assert len(cache) == 1


def test_large_import_scans_store_once() -> None:
    """Test importing hundreds of records reads existing artifacts once per pass."""
    with TemporaryDirectory() as tmpdir:
        store = YamlHighlightStore(Path(tmpdir))
        store.save_many([make_highlight(f"old{i}") for i in range(20)])
        service = ResurfacingService(store)
        incoming = [make_highlight(f"new{i}") for i in range(300)]

        with patch.object(store, "_read_artifact", wraps=store._read_artifact) as reads:
            added = service.import_highlights(incoming)

        assert added == 300
        # one pass to load the collection, one to place the batch
        assert reads.call_count == 40
        loaded = store.load_all()
        assert len(loaded) == 320
        assert [h.id for h in loaded[20:23]] == ["new0", "new1", "new2"]
        assert loaded[-1].id == "new299"
