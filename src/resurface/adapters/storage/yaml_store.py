"""YAML-per-highlight local store."""

import hashlib
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import yaml

from resurface.core import Highlight, HighlightSource, HighlightStore


class YamlHighlightStore(HighlightStore):
    """Store each highlight as an individual YAML artifact.

    Artifacts live under ``<storage_dir>/<source>/`` and carry the highlight
    in its persisted form plus a ``position`` that preserves collection
    order. Saving an id that already exists replaces it (last writer wins).
    """

    def __init__(self, storage_dir: Path) -> None:
        self.storage_dir = storage_dir
        self._ensure_structure()

    def _ensure_structure(self) -> None:
        """Create directory structure for artifacts."""
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        for source in HighlightSource:
            (self.storage_dir / source.value).mkdir(exist_ok=True)

    def load_all(self) -> list[Highlight]:
        """Load every readable artifact in position order."""
        loaded: list[tuple[int, Highlight]] = []
        for artifact_path in self._artifact_paths():
            artifact = self._read_artifact(artifact_path)
            if artifact is None:
                continue
            position, highlight = artifact
            loaded.append((position, highlight))

        loaded.sort(key=lambda item: item[0])
        return [highlight for _, highlight in loaded]

    def get(self, highlight_id: str) -> Optional[Highlight]:
        artifact_path = self._find_artifact(highlight_id)
        if artifact_path is None:
            return None
        artifact = self._read_artifact(artifact_path)
        return artifact[1] if artifact else None

    def save(self, highlight: Highlight) -> None:
        """Insert or replace a highlight, keeping its position if it exists."""
        self.save_many([highlight])

    def save_many(self, highlights: list[Highlight]) -> None:
        """Insert or replace a batch of highlights.

        The store is scanned once per batch: known ids keep their position and
        new ids are appended after the current last position.
        """
        existing: dict[str, tuple[Path, int]] = {}
        next_position = 0
        for artifact_path in self._artifact_paths():
            artifact = self._read_artifact(artifact_path)
            if artifact is None:
                continue
            position, stored = artifact
            existing[stored.id] = (artifact_path, position)
            next_position = max(next_position, position + 1)

        for highlight in highlights:
            artifact_path = self._get_artifact_path(highlight)
            if highlight.id in existing:
                previous, position = existing[highlight.id]
                if previous != artifact_path:
                    previous.unlink()
            else:
                position = next_position
                next_position += 1
            self._write_artifact(artifact_path, highlight, position)
            existing[highlight.id] = (artifact_path, position)

    def delete(self, highlight_id: str) -> bool:
        artifact_path = self._find_artifact(highlight_id)
        if artifact_path is None:
            return False
        artifact_path.unlink()
        return True

    def clear(self) -> int:
        removed = 0
        for artifact_path in self._artifact_paths():
            artifact_path.unlink()
            removed += 1
        return removed

    def _artifact_paths(self) -> list[Path]:
        return sorted(self.storage_dir.glob("*/*.yaml"))

    def _find_artifact(self, highlight_id: str) -> Optional[Path]:
        filename = self._artifact_filename(highlight_id)
        matches = list(self.storage_dir.glob(f"*/{filename}"))
        return matches[0] if matches else None

    def _read_artifact(self, artifact_path: Path) -> Optional[tuple[int, Highlight]]:
        try:
            with open(artifact_path, "r", encoding="utf-8") as f:
                data: dict[str, Any] = yaml.safe_load(f) or {}
            highlight = Highlight.from_dict(data["highlight"])
            return int(data.get("position", 0)), highlight
        except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError) as e:
            print(f"⚠️  Warning: Could not read artifact {artifact_path.name}: {e}")
            return None

    def _write_artifact(self, artifact_path: Path, highlight: Highlight, position: int) -> None:
        artifact_path.parent.mkdir(parents=True, exist_ok=True)
        artifact = {
            "position": position,
            "saved_at": datetime.now(timezone.utc).isoformat(),
            "highlight": highlight.to_dict(),
        }
        with open(artifact_path, "w", encoding="utf-8") as f:
            yaml.dump(artifact, f, allow_unicode=True, default_flow_style=False, sort_keys=False)

    def _get_artifact_path(self, highlight: Highlight) -> Path:
        return self.storage_dir / highlight.source.value / self._artifact_filename(highlight.id)

    @staticmethod
    def _artifact_filename(highlight_id: str) -> str:
        """Create a safe filename from the id plus a hash for uniqueness."""
        safe_id = re.sub(r"[^\w-]", "", highlight_id)[:50]
        id_hash = hashlib.md5(highlight_id.encode()).hexdigest()[:8]
        return f"{safe_id}_{id_hash}.yaml"
