"""Analysis pipelines composed from the core transformations."""

from item_timeline.analysis.timeline import TimelineOptions, TimelineView, compose_timeline

__all__ = ["TimelineOptions", "TimelineView", "compose_timeline"]
