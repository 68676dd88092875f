"""Run a static-receiver least-squares PVT demo."""

from __future__ import annotations

import argparse
import csv
import logging
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from gnss_pvt.config import PvtConfig, SimConfig
from gnss_pvt.meas.pseudorange import SyntheticObservationSource
from gnss_pvt.receiver.ls_pvt import LsPvt
from gnss_pvt.sat.simple_gps import SimpleGpsConfig, SimpleGpsConstellation
from gnss_pvt.utils.logging import get_logger
from gnss_pvt.utils.wgs84 import enu_from_ecef_delta, lla_to_ecef

FIX_CSV_COLUMNS = [
    "t_s",
    "fix_valid",
    "valid_obs",
    "utc",
    "ecef_x_m",
    "ecef_y_m",
    "ecef_z_m",
    "clk_bias_m",
    "lat_deg",
    "lon_deg",
    "height_m",
    "avg_lat_deg",
    "avg_lon_deg",
    "avg_height_m",
    "gdop",
    "pdop",
    "hdop",
    "vdop",
    "tdop",
]


def run_static_demo(
    cfg: SimConfig,
    run_dir: Path,
    averaging_depth: int = 0,
    dump: bool = False,
    save_figs: bool = True,
) -> Path:
    """Solve ``cfg.num_epochs`` epochs of a static receiver and write ``fixes.csv``."""

    run_dir.mkdir(parents=True, exist_ok=True)
    rng = np.random.default_rng(cfg.rng_seed)
    constellation = SimpleGpsConstellation(SimpleGpsConfig(seed=cfg.rng_seed))
    truth = lla_to_ecef(cfg.rx_lat_deg, cfg.rx_lon_deg, cfg.rx_alt_m)
    source = SyntheticObservationSource(
        ephemerides=constellation.ephemerides,
        receiver_ecef_m=truth,
        receiver_clk_bias_m=cfg.rx_clk_bias_m,
        elevation_mask_deg=cfg.elev_mask_deg,
        sigma_pr_m=cfg.sigma_pr_m,
        rng=rng,
    )
    ephemerides = constellation.ephemeris_map()
    averaging = averaging_depth > 0
    pvt_config = PvtConfig(averaging_depth=averaging_depth) if averaging else PvtConfig()

    rows: list[dict[str, object]] = []
    enu_errors: list[np.ndarray] = []
    with LsPvt(
        cfg.n_channels,
        dump_filename=run_dir / "pvt.dat",
        dump_enabled=dump,
        config=pvt_config,
    ) as pvt:
        for k in range(cfg.num_epochs):
            t_s = cfg.t0_s + k * cfg.dt
            observations = source.get_observations(t_s)
            valid = pvt.attempt_fix(observations, ephemerides, t_s, averaging_enabled=averaging)
            if valid:
                enu_errors.append(enu_from_ecef_delta(pvt.pos_ecef_m - truth, cfg.rx_lat_deg, cfg.rx_lon_deg))
            rows.append(
                {
                    "t_s": t_s,
                    "fix_valid": int(valid),
                    "valid_obs": pvt.valid_observations,
                    "utc": pvt.utc_time.isoformat() if pvt.utc_time is not None else "",
                    "ecef_x_m": pvt.position[0],
                    "ecef_y_m": pvt.position[1],
                    "ecef_z_m": pvt.position[2],
                    "clk_bias_m": pvt.position[3],
                    "lat_deg": pvt.geodetic.lat_deg,
                    "lon_deg": pvt.geodetic.lon_deg,
                    "height_m": pvt.geodetic.height_m,
                    "avg_lat_deg": pvt.averaged.lat_deg,
                    "avg_lon_deg": pvt.averaged.lon_deg,
                    "avg_height_m": pvt.averaged.height_m,
                    "gdop": pvt.dop.gdop,
                    "pdop": pvt.dop.pdop,
                    "hdop": pvt.dop.hdop,
                    "vdop": pvt.dop.vdop,
                    "tdop": pvt.dop.tdop,
                }
            )

    fixes_path = run_dir / "fixes.csv"
    with fixes_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=FIX_CSV_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)

    if save_figs and enu_errors:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from gnss_pvt.utils.plotting import plot_dops, plot_horizontal_scatter

        errors = np.array(enu_errors)
        plot_horizontal_scatter(errors[:, 0], errors[:, 1])
        plt.savefig(run_dir / "horizontal_fixes.png", dpi=120)
        plt.close()
        times = np.array([row["t_s"] for row in rows], dtype=float)
        dops = np.array([[row["pdop"], row["hdop"], row["vdop"], row["tdop"]] for row in rows], dtype=float)
        plot_dops(times, dops)
        plt.savefig(run_dir / "dops.png", dpi=120)
        plt.close()
    return fixes_path


def build_arg_parser(parser: argparse.ArgumentParser | None = None) -> argparse.ArgumentParser:
    parser = parser or argparse.ArgumentParser(description="Run the static least-squares PVT demo.")
    parser.add_argument("--epochs", type=int, default=SimConfig.num_epochs, help="Number of epochs.")
    parser.add_argument("--out-dir", type=str, default="out", help="Output directory root.")
    parser.add_argument("--run-name", type=str, default=None, help="Run name for outputs.")
    parser.add_argument("--rng-seed", type=int, default=None, help="Random seed for simulation.")
    parser.add_argument("--sigma-pr-m", type=float, default=SimConfig.sigma_pr_m, help="Pseudorange noise sigma.")
    parser.add_argument("--averaging-depth", type=int, default=0, help="Moving-average depth (0 disables).")
    parser.add_argument("--dump", action="store_true", help="Write the binary pvt.dat dump.")
    parser.add_argument("--no-plots", action="store_true", help="Disable saving run plots.")
    parser.add_argument("--verbose", action="store_true", help="Log debug info.")
    return parser


def run_from_args(args: argparse.Namespace) -> Path:
    get_logger(level=logging.DEBUG if args.verbose else logging.INFO)
    cfg = SimConfig()
    cfg = replace(
        cfg,
        num_epochs=args.epochs,
        sigma_pr_m=args.sigma_pr_m,
        rng_seed=args.rng_seed if args.rng_seed is not None else cfg.rng_seed,
    )
    run_name = args.run_name or datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    run_dir = Path(args.out_dir) / run_name
    fixes_path = run_static_demo(
        cfg,
        run_dir,
        averaging_depth=args.averaging_depth,
        dump=args.dump,
        save_figs=not args.no_plots,
    )
    print(f"Saved outputs to {fixes_path.parent}")
    return fixes_path


def main() -> None:
    run_from_args(build_arg_parser().parse_args())


if __name__ == "__main__":
    main()
