"""Sparkline rendering for item usage strips."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from item_timeline.core.aggregation import RankedEntry

DEFAULT_SPARKLINE_BLOCKS: Sequence[str] = "▁▂▃▄▅▆▇█"

__all__ = ["DEFAULT_SPARKLINE_BLOCKS", "render_sparkline", "usage_sparkline"]


def render_sparkline(
    values: Iterable[float],
    *,
    width: int | None = None,
    blocks: Sequence[str] = DEFAULT_SPARKLINE_BLOCKS,
) -> str:
    """Render ``values`` as a Unicode block-character sparkline.

    When ``width`` is given only the first ``width`` samples are drawn, which
    for ranked usage strips keeps the most popular items.
    """

    data = [float(value) for value in values]
    if width is not None:
        if width <= 0:
            return ""
        data = data[:width]
    palette = tuple(blocks)
    if not data or not palette:
        return ""

    minimum = min(data)
    maximum = max(data)
    if math.isclose(maximum, minimum):
        return palette[-1] * len(data) if maximum > 0 else palette[0] * len(data)

    buckets = len(palette) - 1
    span = maximum - minimum
    rendered: list[str] = []
    for value in data:
        index = int(round((value - minimum) / span * buckets))
        rendered.append(palette[max(0, min(buckets, index))])
    return "".join(rendered)


def usage_sparkline(entries: Sequence[RankedEntry], *, width: int | None = None) -> str:
    """Sparkline of the usage counts of a ranked phase."""

    return render_sparkline((entry.count for entry in entries), width=width)
