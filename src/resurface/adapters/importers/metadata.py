"""Clean up messy book titles and author names from exports."""

import re
from typing import Optional


_FILE_EXTENSION = re.compile(r"\.(mobi|epub|azw3?|pdf|txt)$", re.IGNORECASE)
_SITE_PREFIX = re.compile(
    r"^_?(OceanofPDF\.com|Z-Library|LibGen|PDFDrive|epubBooks|ManyBooks)[_\s.-]*",
    re.IGNORECASE,
)
_COPY_SUFFIX = re.compile(r"\s*\(\d+\)\s*$")


def clean_title(title: Optional[str]) -> str:
    """Strip file extensions, download-site prefixes and copy suffixes."""
    if not title:
        return "Unknown Title"

    cleaned = _FILE_EXTENSION.sub("", title.strip())
    cleaned = _SITE_PREFIX.sub("", cleaned)
    cleaned = _COPY_SUFFIX.sub("", cleaned)
    cleaned = cleaned.replace("_-_", " - ").replace("_", " ")
    cleaned = re.sub(r"\s+", " ", cleaned).strip()

    return cleaned or "Unknown Title"


def clean_author(author: Optional[str]) -> str:
    """Normalise spacing and flip ``Last, First`` into ``First Last``."""
    if not author:
        return "Unknown Author"

    cleaned = re.sub(r"\s+", " ", author.replace("_", " ")).strip()

    if "," in cleaned and " and " not in cleaned:
        parts = [p.strip() for p in cleaned.split(",")]
        if len(parts) == 2 and " " not in parts[1]:
            return f"{parts[1]} {parts[0]}"

    return cleaned or "Unknown Author"

