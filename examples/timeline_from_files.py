"""Example showing how to load popularity and explorer timings from disk."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from tempfile import TemporaryDirectory

from item_timeline.analysis import TimelineOptions, compose_timeline
from item_timeline.configuration import load_config
from item_timeline.exporters import markdown_exporter
from item_timeline.ingestion import load_popularity, load_timings


def write_samples(directory: Path) -> tuple[Path, Path]:
    """Write a sample popularity document and explorer payload to ``directory``."""

    popularity = directory / "popularity.json"
    popularity.write_text(
        json.dumps(
            {
                "start_game_items": {"Tango": 12, "Quelling Blade": 9},
                "early_game_items": {"Phase Boots": 7, "Magic Wand": 5},
                "mid_game_items": {"Battle Fury": 6, "Manta Style": 4},
                "late_game_items": {"Butterfly": 3, "Abyssal Blade": 2},
            }
        ),
        encoding="utf-8",
    )
    timings = directory / "explorer.json"
    timings.write_text(
        json.dumps(
            {
                "rows": [
                    {"item_key": "Phase Boots", "median_min": 6.5, "uses": 7},
                    {"item_key": "Battle Fury", "median_min": 15.2, "uses": 6},
                    {"item_key": "Manta Style", "median_min": 22.8, "uses": 4},
                    {"item_key": "Butterfly", "median_min": 33.0, "uses": 3},
                ]
            }
        ),
        encoding="utf-8",
    )
    return popularity, timings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(__doc__)
    parser.add_argument("--config", type=Path, default=None, help="pyproject.toml with overrides.")
    return parser


def main(args: argparse.Namespace | None = None) -> None:
    if args is None:
        args = _build_parser().parse_args()
    options = TimelineOptions.from_config(load_config(args.config))
    with TemporaryDirectory() as tmp:
        popularity_path, timings_path = write_samples(Path(tmp))
        view = compose_timeline(
            load_popularity(popularity_path),
            load_timings(timings_path),
            options,
        )
    print(markdown_exporter(view.as_payload()))


if __name__ == "__main__":
    main()
