"""Unified CLI entrypoint.

Two run modes:
  1) static: solve a synthetic static receiver (CSV, optional dump and plots)
  2) dump: print the records of a binary PVT dump file
"""

from __future__ import annotations

import argparse
from pathlib import Path


def _cmd_static(args: argparse.Namespace) -> None:
    from sim.run_static_demo import run_from_args

    run_from_args(args)


def _cmd_dump(args: argparse.Namespace) -> None:
    from gnss_pvt.logger import load_dump

    path = Path(args.path)
    if not path.exists():
        raise SystemExit(f"No dump file at {path}")
    records = load_dump(path)
    print(",".join(records.dtype.names))
    for record in records[: args.limit] if args.limit else records:
        print(",".join(f"{value:.9f}" for value in record.tolist()))


def build_parser() -> argparse.ArgumentParser:
    from sim.run_static_demo import build_arg_parser

    parser = argparse.ArgumentParser(prog="gnss-pvt", description="Least-squares PVT runner")
    sub = parser.add_subparsers(dest="cmd", required=True)

    static = sub.add_parser("static", help="Run the static-receiver demo")
    build_arg_parser(static)
    static.set_defaults(func=_cmd_static)

    dump = sub.add_parser("dump", help="Print a binary PVT dump file as CSV")
    dump.add_argument("path", type=str, help="Path to the pvt.dat dump")
    dump.add_argument("--limit", type=int, default=0, help="Print at most this many records")
    dump.set_defaults(func=_cmd_dump)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
