"""Record importers."""

from resurface.adapters.importers.metadata import clean_author, clean_title
from resurface.adapters.importers.records import load_records, records_to_highlights

__all__ = [
    "clean_author",
    "clean_title",
    "load_records",
    "records_to_highlights",
]
