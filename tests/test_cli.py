from __future__ import annotations

import csv
from pathlib import Path

import pytest

from gnss_pvt.config import SimConfig
from sim.cli import main
from sim.run_static_demo import FIX_CSV_COLUMNS, run_static_demo


def test_static_demo_writes_fixes_and_plots(tmp_path: Path) -> None:
    fixes_path = run_static_demo(SimConfig(num_epochs=5), tmp_path / "run", save_figs=True)

    with fixes_path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        assert reader.fieldnames == FIX_CSV_COLUMNS
        rows = list(reader)
    assert len(rows) == 5
    assert all(row["fix_valid"] == "1" for row in rows)
    assert float(rows[0]["height_m"]) == pytest.approx(80.0, abs=30.0)
    assert {"horizontal_fixes.png", "dops.png"}.issubset({path.name for path in fixes_path.parent.iterdir()})


def test_static_demo_averaging_warms_up(tmp_path: Path) -> None:
    fixes_path = run_static_demo(SimConfig(num_epochs=4), tmp_path, averaging_depth=3, save_figs=False)

    with fixes_path.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert [row["fix_valid"] for row in rows] == ["0", "0", "1", "1"]


def test_cli_static_then_dump(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(
        [
            "static",
            "--epochs",
            "3",
            "--out-dir",
            str(tmp_path),
            "--run-name",
            "cli",
            "--rng-seed",
            "9",
            "--dump",
            "--no-plots",
        ]
    )
    run_dir = tmp_path / "cli"
    assert (run_dir / "fixes.csv").exists()
    assert (run_dir / "pvt.dat").stat().st_size == 3 * 64
    capsys.readouterr()

    main(["dump", str(run_dir / "pvt.dat"), "--limit", "2"])
    lines = capsys.readouterr().out.strip().splitlines()

    assert lines[0].split(",")[0] == "epoch_time_s"
    assert len(lines) == 3
    assert len(lines[1].split(",")) == 8


def test_cli_dump_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["dump", str(tmp_path / "absent.dat")])
