#!/usr/bin/env python3
# =============================================================================
# trk_inspect.py — .trk Log Inspector
# =============================================================================
#
# Decodes a Trick binary log and reports what is in it.  Give it a run the
# same way the plotter is launched (log name + run directory) or point it
# straight at a .trk file.
#
# Usage:
#   python -m TLDE.TVM.trk_inspect log_cannon RUN_test
#   python -m TLDE.TVM.trk_inspect --file RUN_test/log_cannon.trk
#   python -m TLDE.TVM.trk_inspect log_cannon RUN_test --x sys.exec.out.time --y dyn.cannon.pos[1]
#   python -m TLDE.TVM.trk_inspect --demo /tmp/log_cannon.trk
#
# Output sections:
#   [1] File info          — path, size, companion header file name
#   [2] Header             — format tag, variable count, row size
#   [3] Variables          — name, unit, type, declared vs intrinsic width
#   [4] Column statistics  — rows, min / max / first / last per variable
#   [5] Series             — first N (x, y) points when --x/--y are given
#   [6] VERDICT            — PASS / FAIL with reason
#
# =============================================================================

from __future__ import annotations
import sys, os, argparse, logging

import numpy as np

from TLDE.TMM.constants import data_root
from TLDE.TDM.errors import DecodeError
from TLDE.TDM.source import LogFileInfo, TrickRun
from TLDE.TGM.trk_writer import CANNON_SPECS, cannon_rows, write_trk
from TLDE.TViz.plot_bridge import plot_points

DIVIDER = "=" * 68


def _resolve(args) -> LogFileInfo:
    if args.file:
        return LogFileInfo.from_trk_path(args.file)
    return LogFileInfo.from_args(args.name, args.path or data_root())


def run_inspect(info: LogFileInfo, x_name: str | None, y_name: str | None, max_points: int) -> bool:
    """
    Decode one log and print the report.
    Returns True if the file decoded cleanly, False otherwise.
    """
    # -----------------------------------------------------------------------
    # [1] File info
    # -----------------------------------------------------------------------
    print(f"\n{DIVIDER}")
    print(f"  Trick Log Inspector")
    print(DIVIDER)

    if not os.path.exists(info.full_path):
        print(f"  [!!] File not found: {info.full_path}")
        return False

    print(f"  File     : {info.full_path}")
    print(f"  Size     : {os.path.getsize(info.full_path):,} bytes")
    print(f"  Header   : {info.header_file_name}  (not parsed)")

    try:
        dataset = TrickRun(info).read()
    except DecodeError as e:
        print(f"\n{DIVIDER}")
        print(f"  [!!] {e.kind} at byte {e.offset}: {e.message}")
        print(f"  VERDICT: FAIL — file could not be decoded")
        print(f"{DIVIDER}\n")
        return False

    # -----------------------------------------------------------------------
    # [2] Header
    # -----------------------------------------------------------------------
    print(f"\n  -- Header --")
    print(f"  Format tag        : {dataset.version.text!r}")
    print(f"  Variables         : {len(dataset.descriptors)}")
    print(f"  Row size          : {sum(d.width for d in dataset.descriptors)} bytes")

    # -----------------------------------------------------------------------
    # [3] Variables
    # -----------------------------------------------------------------------
    print(f"\n  -- Variables --")
    print(f"  {'#':>3}  {'Name':<36} {'Unit':<8} {'Type':<20} {'Decl':>4} {'Used':>4}")
    print(f"  {'-'*3}  {'-'*36} {'-'*8} {'-'*20} {'-'*4} {'-'*4}")
    mismatches = 0
    for i, d in enumerate(dataset.descriptors):
        flag = "  *" if d.width_mismatch else ""
        mismatches += d.width_mismatch
        print(
            f"  {i:>3}  {d.name:<36} {d.unit:<8} "
            f"{d.type_tag.c_name + ' (' + str(d.type_id) + ')':<20} "
            f"{d.declared_width:>4} {d.width:>4}{flag}"
        )
    if mismatches:
        print(f"  [INFO] {mismatches} declared size(s) differ from the type width (*); "
              f"rows were decoded with the type width")

    # -----------------------------------------------------------------------
    # [4] Column statistics
    # -----------------------------------------------------------------------
    print(f"\n  -- Column Statistics ({dataset.row_count:,} rows) --")
    if dataset.row_count:
        print(f"  {'Name':<36} {'Min':>12} {'Max':>12} {'First':>12} {'Last':>12}")
        for d, col in zip(dataset.descriptors, dataset.columns):
            print(
                f"  {d.name:<36} {np.min(col):>12.6g} {np.max(col):>12.6g} "
                f"{col[0]:>12.6g} {col[-1]:>12.6g}"
            )
    else:
        print(f"  (header only — no rows logged)")

    # -----------------------------------------------------------------------
    # [5] Series
    # -----------------------------------------------------------------------
    if x_name and y_name:
        print(f"\n  -- Series: {y_name} vs {x_name} --")
        try:
            points = plot_points(dataset, x_name, y_name)
        except KeyError as e:
            print(f"  [!!] {e.args[0]}")
            print(f"  Known variables: {dataset.names()}")
            return False
        for px, py in points[:max_points]:
            print(f"  {px:>14.6g}  {py:>14.6g}")
        if len(points) > max_points:
            print(f"  ... {len(points) - max_points:,} more")

    # -----------------------------------------------------------------------
    # [6] Verdict
    # -----------------------------------------------------------------------
    print(f"\n{DIVIDER}")
    print(f"  VERDICT: PASS — {len(dataset.descriptors)} variables x {dataset.row_count:,} rows")
    print(f"{DIVIDER}\n")
    return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Trick .trk binary log inspector",
    )
    parser.add_argument("name", nargs="?", help="Log name (without .trk), e.g. log_cannon")
    parser.add_argument("path", nargs="?", help="Run directory (default: $TRK_DATA_ROOT or cwd)")
    parser.add_argument("--file", help="Path to a .trk file (instead of name + path)")
    parser.add_argument("--x", dest="x_name", help="Variable for the x axis")
    parser.add_argument("--y", dest="y_name", help="Variable for the y axis")
    parser.add_argument(
        "--points", type=int, default=10,
        help="How many (x, y) points to print, default 10",
    )
    parser.add_argument(
        "--demo", metavar="OUT",
        help="Write a demo cannon-ball .trk to OUT and inspect it",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log decoder progress")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.demo:
        n = write_trk(args.demo, CANNON_SPECS, cannon_rows())
        print(f"  [INFO] wrote {n:,} bytes to {args.demo}")
        args.file = args.demo
    elif not args.file and not args.name:
        parser.error("give a log name (and run directory), --file or --demo")

    ok = run_inspect(
        _resolve(args),
        x_name=args.x_name,
        y_name=args.y_name,
        max_points=args.points,
    )
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
