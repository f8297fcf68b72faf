from __future__ import annotations

import json
from pathlib import Path

import pytest

from item_timeline.cli.errors import CliError, build_error_payload

from tests.conftest import write_pyproject
from tests.helpers import SAMPLE_POPULARITY, build_popularity, run_cli_in_tmp, write_json


@pytest.fixture
def popularity_file(tmp_path: Path) -> Path:
    return write_json(tmp_path / "popularity.json", SAMPLE_POPULARITY)


def test_chains_command_renders_text(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], popularity_file: Path
) -> None:
    result = run_cli_in_tmp(
        ["chains", str(popularity_file), "--top-k", "2"], tmp_path=tmp_path, monkeypatch=monkeypatch
    )

    assert result.splitlines() == [
        "Chains:",
        "  1. Tango → Magic Wand → Black King Bar → Satanic",
        "  2. Iron Branch → Power Treads → Blink Dagger → Butterfly",
    ]
    assert capsys.readouterr().out.strip() == result


def test_chains_command_json_variants(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, popularity_file: Path
) -> None:
    result = run_cli_in_tmp(
        ["chains", str(popularity_file), "--variants", "1", "--export", "json"],
        tmp_path=tmp_path,
        monkeypatch=monkeypatch,
    )

    payload = json.loads(result)
    assert set(payload) == {"phases", "chains", "variants"}
    assert len(payload["chains"]) == 4
    assert len(payload["variants"]) == 1


def test_timings_command_prefers_real_timings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, popularity_file: Path
) -> None:
    explorer = write_json(
        tmp_path / "explorer.json",
        {"rows": [{"item_key": "Blink Dagger", "median_min": 13.0, "uses": 42}]},
    )

    result = run_cli_in_tmp(
        ["timings", str(popularity_file), "--timings", str(explorer), "--icons", "--export", "json"],
        tmp_path=tmp_path,
        monkeypatch=monkeypatch,
    )

    payload = json.loads(result)
    assert payload["timing_source"] == "explorer"
    assert payload["timings"] == {"Blink Dagger": {"minute": 13.0, "uses": 42}}
    assert payload["icons"]["Blink Dagger"].endswith("blink_lg.png")


def test_timings_command_synthetic_text(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, popularity_file: Path
) -> None:
    result = run_cli_in_tmp(
        ["timings", str(popularity_file), "--top-per-phase", "1"],
        tmp_path=tmp_path,
        monkeypatch=monkeypatch,
    )

    lines = result.splitlines()
    assert lines[0] == "Timings [synthetic]:"
    assert len(lines) == 5
    assert lines[1].strip() == "2.0m  Tango (930)"


def test_layout_command_applies_overrides(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, popularity_file: Path
) -> None:
    result = run_cli_in_tmp(
        [
            "layout",
            str(popularity_file),
            "--min-gap",
            "0",
            "--card-width",
            "100",
            "--px-per-minute",
            "10",
            "--highlight-phase",
            "mid_game_items",
            "--width",
            "200",
            "--export",
            "json",
        ],
        tmp_path=tmp_path,
        monkeypatch=monkeypatch,
    )

    layout = json.loads(result)["layout"]
    assert layout["settings"]["minimum_gap_px"] == 0.0
    assert layout["settings"]["card_width"] == 100.0
    assert layout["settings"]["highlight_phases"] == ["mid"]
    assert layout["fit"]["scale"] == pytest.approx(200 / layout["natural_width"])
    faded = {card["name"] for card in layout["cards"] if card["faded_by_phase"]}
    assert "Tango" in faded and "Blink Dagger" not in faded


def test_layout_command_text_chart(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, popularity_file: Path
) -> None:
    result = run_cli_in_tmp(
        ["layout", str(popularity_file), "--columns", "80"],
        tmp_path=tmp_path,
        monkeypatch=monkeypatch,
    )

    assert result.startswith("Lanes: ")
    assert all(len(line) <= 80 for line in result.splitlines()[1:])


def test_report_command_combines_exporters(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, popularity_file: Path
) -> None:
    result = run_cli_in_tmp(
        ["report", str(popularity_file), "--export", "markdown", "--export", "csv"],
        tmp_path=tmp_path,
        monkeypatch=monkeypatch,
    )

    assert "## Chains" in result
    assert "name,minute,uses,phase,lane" in result


def test_report_resolves_item_ids(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    popularity = write_json(tmp_path / "ids.json", build_popularity(start={"1": 3, "2": 1}))
    items = write_json(tmp_path / "items.json", {"blink": {"id": 1, "dname": "Blink Dagger"}})

    result = run_cli_in_tmp(
        ["report", str(popularity), "--items", str(items), "--export", "json"],
        tmp_path=tmp_path,
        monkeypatch=monkeypatch,
    )

    payload = json.loads(result)
    assert [entry["name"] for entry in payload["phases"]["start"]] == ["Blink Dagger", "item#2"]


def test_configuration_supplies_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, popularity_file: Path
) -> None:
    write_pyproject(
        tmp_path,
        """
        [tool.item_timeline.chains]
        top_k = 1
        export = "json"

        [tool.item_timeline.logging]
        level = "warning"
        """,
    )

    payload = json.loads(
        run_cli_in_tmp(["chains", str(popularity_file)], tmp_path=tmp_path, monkeypatch=monkeypatch)
    )

    assert len(payload["chains"]) == 1


def test_explicit_config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, popularity_file: Path) -> None:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    write_pyproject(config_dir, "[tool.item_timeline.timings]\ntop_per_phase = 1\nexport = 'json'\n")

    payload = json.loads(
        run_cli_in_tmp(
            ["--config", str(config_dir / "pyproject.toml"), "timings", str(popularity_file)],
            tmp_path=tmp_path,
            monkeypatch=monkeypatch,
        )
    )

    assert len(payload["timings"]) == 4


def test_missing_popularity_exits_not_found(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run_cli_in_tmp(["chains", "absent.json"], tmp_path=tmp_path, monkeypatch=monkeypatch)

    assert excinfo.value.code == 4
    assert "does not exist" in capsys.readouterr().out


def test_incomplete_popularity_exits_io(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    partial = write_json(tmp_path / "partial.json", {"start_game_items": {"Tango": 1}})

    with pytest.raises(SystemExit) as excinfo:
        run_cli_in_tmp(["chains", str(partial)], tmp_path=tmp_path, monkeypatch=monkeypatch)
    assert excinfo.value.code == 3

    result = run_cli_in_tmp(
        ["chains", str(partial), "--lenient"], tmp_path=tmp_path, monkeypatch=monkeypatch
    )
    assert "1. Tango" in result


def test_invalid_json_exits_io(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf8")

    with pytest.raises(SystemExit) as excinfo:
        run_cli_in_tmp(["timings", str(broken)], tmp_path=tmp_path, monkeypatch=monkeypatch)

    assert excinfo.value.code == 3


@pytest.mark.parametrize(
    "arguments",
    [
        ["chains", "popularity.json", "--top-k", "0"],
        ["layout", "popularity.json", "--highlight-phase", "overtime"],
        ["layout", "popularity.json", "--min-gap", "-1"],
        ["timings", "popularity.json", "--export", "pdf"],
        ["timings", "popularity.json", "--top-per-phase", "21"],
    ],
)
def test_invalid_arguments_exit_with_usage_status(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, popularity_file: Path, arguments: list[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run_cli_in_tmp(arguments, tmp_path=tmp_path, monkeypatch=monkeypatch)

    assert excinfo.value.code == 2


def test_csv_of_chains_command_is_supported(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, popularity_file: Path
) -> None:
    result = run_cli_in_tmp(
        ["chains", str(popularity_file), "--export", "csv"], tmp_path=tmp_path, monkeypatch=monkeypatch
    )

    assert result.splitlines()[0] == "chain,step_index,phase,name,count,rank"


def test_cli_errors_map_categories_to_status_codes() -> None:
    assert build_error_payload("x", category="usage").status_code == 2
    assert build_error_payload("x", category="io").status_code == 3
    assert build_error_payload("x", category="mystery").status_code == 1
    error = CliError("gone", category="not_found", context={"path": Path("a")})
    assert error.status_code == 4
    assert error.context == {"path": "a"}
    assert error.payload.as_dict()["category"] == "not_found"


def test_failures_are_logged_once_with_structured_context(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level("ERROR", logger="item_timeline.cli"):
        with pytest.raises(SystemExit) as excinfo:
            run_cli_in_tmp(["chains", "absent.json"], tmp_path=tmp_path, monkeypatch=monkeypatch)

    assert excinfo.value.code == 4
    records = [record for record in caplog.records if getattr(record, "event", None) == "cli.error"]
    assert len(records) == 1
    assert records[0].category == "not_found"
    assert records[0].status_code == 4
    assert records[0].context["kind"] == "popularity"
