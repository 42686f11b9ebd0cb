from __future__ import annotations
from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .export import to_rows
from .models import RankedResult, RootReport
from .utils import display_path, format_bytes


def _result_table(title: str, result: RankedResult, with_parent: bool) -> Table:
    t = Table(title=title, box=box.SIMPLE_HEAVY, title_justify="left")
    t.add_column("#", justify="right", style="dim")
    t.add_column("Size", justify="right", style="bold cyan")
    t.add_column("Path", overflow="fold")
    if with_parent:
        t.add_column("Parent", overflow="fold", style="dim")
    t.add_column("Modified", style="dim")
    for row in to_rows(result):
        cells = [str(row["rank"]), row["size_human"], escape(row["path"])]
        if with_parent:
            cells.append(escape(row["parent"]))
        cells.append(row["last_modified"])
        t.add_row(*cells)
    return t


def render_report(report: RootReport, console: Optional[Console] = None) -> None:
    console = console or Console()
    if report.error:
        console.print(f"[bold red]✗[/] {escape(display_path(report.root))}: {escape(display_path(report.error))}")
        return

    head = f"[bold]{escape(display_path(report.root))}[/]  •  {report.scanned_at:%Y-%m-%d %H:%M:%S}  •  {report.elapsed_sec:.1f}s"
    if report.cancelled:
        head += "  [yellow](cancelled, partial)[/]"
    console.print(head)

    if report.files is not None:
        f = report.files
        title = (f"Largest files: {len(f)} of {f.entries_seen} "
                 f"({format_bytes(f.bytes_seen)} scanned)")
        if len(f):
            console.print(_result_table(title, f, with_parent=True))
        else:
            console.print(f"{title}: none")
    if report.folders is not None:
        title = f"Largest folders: {len(report.folders)} of {report.folders.entries_seen}"
        if len(report.folders):
            console.print(_result_table(title, report.folders, with_parent=False))
        else:
            console.print(f"{title}: none")


def render_drives(drives: List[Dict[str, object]], console: Optional[Console] = None) -> None:
    console = console or Console()
    t = Table(title="Volumes", box=box.SIMPLE_HEAVY, title_justify="left")
    for col, justify in (("#", "right"), ("Mount", "left"), ("FS", "left"),
                         ("Total", "right"), ("Used", "right"), ("Free", "right"), ("%", "right")):
        t.add_column(col, justify=justify)
    for i, d in enumerate(drives, 1):
        t.add_row(str(i), str(d["mountpoint"]), str(d["fstype"]),
                  format_bytes(int(d["total"])), format_bytes(int(d["used"])),
                  format_bytes(int(d["free"])), f"{float(d['percent']):.1f}")
    console.print(t)
