"""Tests for the command line interface."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from typer.testing import CliRunner

from resurface.cli import app


runner = CliRunner()


@pytest.fixture
def workspace():
    """Temporary store plus a config path that does not exist."""
    with TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        env = {"RESURFACE_STORE_DIR": str(root / "store"), "RESURFACE_SEED": "1"}
        yield root, env


def _invoke(workspace, *args):
    root, env = workspace
    return runner.invoke(app, [*args, "--config", str(root / "config.yaml")], env=env)


def test_add_and_next(workspace) -> None:
    """Test a manually added highlight is resurfaced and viewed."""
    result = _invoke(workspace, "add", "Stay hungry", "--title", "Commencement", "--tag", "Focus")
    assert result.exit_code == 0
    assert "Added highlight" in result.output

    result = _invoke(workspace, "next")
    assert result.exit_code == 0
    assert "Stay hungry" in result.output
    assert "views: 1" in result.output
    assert "#focus" in result.output


def test_next_with_empty_store(workspace) -> None:
    """Test an empty library exits with an error."""
    result = _invoke(workspace, "next")

    assert result.exit_code == 1
    assert "No highlights yet" in result.output


def test_import_and_stats(workspace) -> None:
    """Test importing a file and listing statistics."""
    root, _ = workspace
    records = root / "highlights.json"
    records.write_text(
        json.dumps([
            {"text": "One", "title": "Walden", "author": "Thoreau"},
            {"text": "Two", "title": "Walden", "author": "Thoreau"},
        ]),
        encoding="utf-8",
    )

    result = _invoke(workspace, "import", str(records), "--source", "kindle")
    assert result.exit_code == 0
    assert "Imported 2 new highlight(s), 0 already known." in result.output

    result = _invoke(workspace, "import", str(records))
    assert "Imported 0 new highlight(s), 2 already known." in result.output

    result = _invoke(workspace, "stats")
    assert "2 highlights from 1 books" in result.output
    assert "Unseen: 2" in result.output

    result = _invoke(workspace, "tags")
    assert "author:thoreau" in result.output


def test_import_missing_file(workspace) -> None:
    """Test a missing import file is reported."""
    root, _ = workspace
    result = _invoke(workspace, "import", str(root / "missing.csv"))

    assert result.exit_code == 1
    assert "Import failed" in result.output


def test_recall_comment_and_delete(workspace) -> None:
    """Test recall, comment and delete on a stored highlight."""
    _invoke(workspace, "add", "Memento mori")
    highlight_id = _invoke(workspace, "next", "--no-view").output.split("[", 1)[1].split("]", 1)[0]

    result = _invoke(workspace, "recall", highlight_id, "--success")
    assert result.exit_code == 0
    assert "Score now 10%" in result.output

    result = _invoke(workspace, "recall", highlight_id, "--response", "memento mori")
    assert "SUCCESS" in result.output

    result = _invoke(workspace, "comment", highlight_id, "Remember death")
    assert "Comment saved" in result.output

    result = _invoke(workspace, "delete", highlight_id)
    assert result.exit_code == 0
    assert _invoke(workspace, "view", highlight_id).exit_code == 1


def test_unknown_highlight(workspace) -> None:
    """Test commands on a missing id fail cleanly."""
    result = _invoke(workspace, "view", "nope")

    assert result.exit_code == 1
    assert "Highlight not found: nope" in result.output


def test_digest_written(workspace) -> None:
    """Test the digest command writes markdown to the given path."""
    root, _ = workspace
    _invoke(workspace, "add", "Less but better")
    output = root / "digest.md"

    result = _invoke(workspace, "digest", "--output", str(output))

    assert result.exit_code == 0
    content = output.read_text(encoding="utf-8")
    assert content.startswith("# 🧠 Daily Resurface")
    assert "Less but better" in content


def test_import_with_bad_rows(workspace) -> None:
    """Test malformed rows are skipped and the rest is imported."""
    root, _ = workspace
    records = root / "mixed.json"
    records.write_text(
        json.dumps(["quote", {"text": "Good", "source": "fax"}, {"text": "Kept"}]),
        encoding="utf-8",
    )

    result = _invoke(workspace, "import", str(records))

    assert result.exit_code == 0
    assert "Warning: Skipping record 1" in result.output
    assert "Imported 1 new highlight(s)" in result.output


def test_clear(workspace) -> None:
    """Test clearing the library, with and without confirmation."""
    _invoke(workspace, "add", "One")
    _invoke(workspace, "add", "Two")

    root, env = workspace
    aborted = runner.invoke(app, ["clear", "--config", str(root / "config.yaml")], env=env, input="n\n")
    assert aborted.exit_code == 1

    result = _invoke(workspace, "clear", "--yes")
    assert result.exit_code == 0
    assert "Removed 2 highlight(s)" in result.output
    assert _invoke(workspace, "next").exit_code == 1
