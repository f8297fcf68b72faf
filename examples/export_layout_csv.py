"""Example that lays out a hero's item timeline and exports the cards to CSV."""

from __future__ import annotations

from item_timeline.analysis import compose_timeline
from item_timeline.exporters import csv_exporter
from item_timeline.visualization import render_lane_chart

POPULARITY = {
    "start_game_items": {"Tango": 930, "Iron Branch": 870, "Faerie Fire": 410},
    "early_game_items": {"Magic Wand": 640, "Power Treads": 580, "Bracer": 220},
    "mid_game_items": {"Black King Bar": 512, "Blink Dagger": 498, "Desolator": 130},
    "late_game_items": {"Satanic": 201, "Butterfly": 188, "Daedalus": 97},
}


def main() -> None:
    view = compose_timeline(POPULARITY)
    print(render_lane_chart(view.layout, columns=100))
    print()
    print(csv_exporter(view.as_payload()))


if __name__ == "__main__":
    main()
