"""Plain-text rendering of a lane-packed timeline."""

from __future__ import annotations

from collections.abc import Mapping as ABCMapping
from dataclasses import fields
from typing import Any, List, Mapping

from item_timeline.core.badges import BADGE_LABELS
from item_timeline.core.layout import LayoutSettings, PlacedCard, TimelineLayout

__all__ = ["DEFAULT_CHART_COLUMNS", "layout_from_payload", "render_lane_chart"]

DEFAULT_CHART_COLUMNS = 120

_CARD_FIELDS = tuple(entry.name for entry in fields(PlacedCard))


def layout_from_payload(payload: Mapping[str, Any]) -> TimelineLayout:
    """Rebuild a :class:`TimelineLayout` from its exported ``layout`` mapping."""

    if not isinstance(payload, ABCMapping):
        raise TypeError("Layout payload must be a mapping")
    cards = tuple(
        PlacedCard(**{name: card[name] for name in _CARD_FIELDS if name in card})
        for card in payload.get("cards", ())
    )
    return TimelineLayout(
        cards=cards,
        lane_count=int(payload.get("lane_count", 0)),
        canvas_height=float(payload.get("canvas_height", 0.0)),
        natural_width=float(payload.get("natural_width", 0.0)),
        max_minute=float(payload.get("max_minute", 0.0)),
        ticks=tuple(float(tick) for tick in payload.get("ticks", ())),
        settings=LayoutSettings.from_config(payload.get("settings")),
    )


def _card_label(card: PlacedCard, width: int) -> str:
    marker = "*" if card.is_global_top else ""
    badge = BADGE_LABELS.get(card.phase_rank)
    text = f"{marker}{card.name}"
    if badge:
        text = f"{text} {badge}"
    if card.faded_by_phase:
        text = text.lower()
    inner = max(1, width - 2)
    if len(text) > inner:
        text = text[: max(1, inner - 1)] + "…"
    return f"[{text.ljust(inner)}]"


def _paint(row: List[str], start: int, text: str) -> None:
    for offset, char in enumerate(text):
        if 0 <= start + offset < len(row):
            row[start + offset] = char


def render_lane_chart(
    layout: TimelineLayout | Mapping[str, Any], *, columns: int = DEFAULT_CHART_COLUMNS
) -> str:
    """Draw every lane of ``layout`` as one fixed-width text row.

    The first row is the minute axis. Global top items are prefixed with
    ``*``, phase podium items carry their badge label and cards outside the
    highlighted phases are lower-cased.
    """

    if not isinstance(layout, TimelineLayout):
        layout = layout_from_payload(layout)
    if columns <= 0 or layout.natural_width <= 0:
        return ""
    scale = columns / layout.natural_width
    card_columns = max(3, int(layout.settings.occupied_width * scale))

    axis = [" "] * columns
    for tick in layout.ticks:
        _paint(axis, int(layout.tick_position(tick) * scale), f"{tick:g}m")
    lines: List[str] = ["".join(axis).rstrip()]

    for lane in layout.lanes():
        row = [" "] * columns
        for card in lane:
            _paint(row, int(card.left_px * scale), _card_label(card, card_columns))
        lines.append("".join(row).rstrip())
    if not layout.cards:
        lines.append("(no items)")
    return "\n".join(lines)
