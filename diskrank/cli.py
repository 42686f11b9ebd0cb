from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import Dict, List, Optional, Tuple

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.markup import escape
from rich.prompt import Prompt

from . import __version__
from .console import render_drives, render_report
from .drives import list_drives, parse_selection
from .errors import InvalidConfiguration
from .export import export_csv, export_json
from .models import DEFAULT_TOP_N
from .orchestrator import ScanConfig, run_scan
from .utils import display_path

logger = logging.getLogger("diskrank")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="diskrank",
        description="Find the largest files (and optionally folders) on one or more volumes.",
    )
    p.add_argument("paths", nargs="*", help="Roots to scan. Without paths, pick volumes interactively.")
    p.add_argument("-n", "--top", type=int, default=DEFAULT_TOP_N,
                   help=f"How many entries to rank per root (default: {DEFAULT_TOP_N}).")
    p.add_argument("--folders", action="store_true", help="Also rank immediate subfolders by cumulative size.")
    p.add_argument("--deep", action="store_true", help="With --folders, rank folders at every depth.")
    p.add_argument("--follow-symlinks", action="store_true", help="Follow symbolic links and junctions.")
    p.add_argument("-x", "--one-file-system", action="store_true",
                   help="Stay on the filesystem of each root (always on for volumes picked from the drive list).")
    p.add_argument("-j", "--workers", type=int, default=1, help="Threads for folder aggregation (default: 1).")
    p.add_argument("--export", metavar="DIR", help="Write CSV results into DIR.")
    p.add_argument("--json", metavar="FILE", help="Write all results as one JSON report.")
    p.add_argument("--all-drives", action="store_true", help="Scan every mounted volume.")
    p.add_argument("--list-drives", action="store_true", help="Show volumes with capacity and exit.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug).")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level)


def choose_roots(args: argparse.Namespace, console: Console) -> Tuple[List[str], bool]:
    """Roots to scan, and whether they came from the volume list."""
    if args.paths:
        return list(args.paths), False
    drives = list_drives()
    if args.all_drives:
        return [str(d["mountpoint"]) for d in drives], True
    render_drives(drives, console)
    answer = Prompt.ask("Volumes to scan (e.g. 1,3 or 2-4, 'all', or a path)", console=console)
    return parse_selection(answer, drives), True


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    console = Console()

    if args.list_drives:
        render_drives(list_drives(), console)
        return 0

    config = ScanConfig(
        top_n=args.top,
        include_folders=args.folders or args.deep,
        deep_folders=args.deep,
        follow_symlinks=args.follow_symlinks,
        one_file_system=args.one_file_system,
        workers=args.workers,
    )
    try:
        config.validate()
        roots, volumes = choose_roots(args, console)
    except InvalidConfiguration as e:
        console.print(f"[bold red]error:[/] {e}")
        return 2
    if volumes:
        # том сканируем в пределах его файловой системы
        config.one_file_system = True

    reports = []
    failed = 0
    with Progress(TextColumn("[bold]{task.description}"), BarColumn(), MofNCompleteColumn(),
                  TimeElapsedColumn(), console=console, transient=True) as bar:
        tasks: Dict[str, int] = {}

        def tick(root: str, completed: int, total: int):
            if root not in tasks:
                tasks[root] = bar.add_task(f"folders in {escape(display_path(root))}", total=total)
            bar.update(tasks[root], completed=completed, total=total)

        for report in run_scan(roots, config, progress=tick):
            if report.root in tasks:
                bar.remove_task(tasks.pop(report.root))
            render_report(report, console)
            reports.append(report)
            if not report.ok:
                failed += 1
                continue
            if args.export:
                for path in export_csv(report, args.export):
                    console.print(f"saved {display_path(path)}", markup=False)

    if args.json:
        export_json(reports, args.json)
        console.print(f"saved {display_path(os.path.abspath(args.json))}", markup=False)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
