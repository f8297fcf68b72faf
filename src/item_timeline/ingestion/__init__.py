"""Readers for upstream popularity, timing and item constant documents."""

from item_timeline.ingestion.errors import IngestionError, PopularityFormatError
from item_timeline.ingestion.popularity import (
    item_names_from_constants,
    load_item_constants,
    load_popularity,
    missing_phases,
    name_popularity,
    prettify_slug,
)
from item_timeline.ingestion.timings import load_timings

__all__ = [
    "IngestionError",
    "PopularityFormatError",
    "prettify_slug",
    "item_names_from_constants",
    "name_popularity",
    "missing_phases",
    "load_item_constants",
    "load_popularity",
    "load_timings",
]
