# Rich console output: findings grouped by file, checklist overview, summary footer.

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from coderev.findings.models import Finding
from coderev.rules.models import Rule

# Severity -> Rich style
SEVERITY_STYLE = {
    "blocking": "bold white on red",
    "error": "bold red",
    "major": "bold magenta",
    "warning": "bold yellow",
    "info": "bold blue",
}

DEFAULT_SEVERITY_STYLE = "bold white"

SEVERITY_ORDER = ("blocking", "error", "major", "warning", "info")


def _severity_style(severity: Optional[str]) -> str:
    if not severity:
        return DEFAULT_SEVERITY_STYLE
    return SEVERITY_STYLE.get(severity.lower(), DEFAULT_SEVERITY_STYLE)


def _shorten_path(path: str | Path, root: Optional[Path] = None) -> str:
    """Return the path relative to root when possible."""
    if root is not None:
        try:
            return Path(path).resolve().relative_to(root.resolve()).as_posix()
        except ValueError:
            pass
    return str(path).replace("\\", "/")


def print_findings(
    findings: Sequence[Finding],
    scanned: Sequence[Path] | None = None,
    rules: Sequence[Rule] | None = None,
    root: Optional[Path] = None,
    verbose: bool = False,
    console: Optional[Console] = None,
) -> None:
    """
    Print findings grouped by file, one table per file, in scan order.

    With verbose and rules given, auto-fix templates are listed under each
    file for the rules that have one. With scanned given, a per-file status
    table is added.
    """
    console = console or Console()

    if not findings:
        console.print(
            Panel(
                "[green]No issues found.[/green]",
                title="Code Review",
                border_style="green",
                box=box.ROUNDED,
            )
        )
        if scanned:
            _print_file_summary_table([], scanned, console, root)
        return

    # Group by file, keeping first-seen order
    by_file: dict[str, list[Finding]] = {}
    for f in findings:
        by_file.setdefault(str(f.file), []).append(f)

    templates: dict[str, str] = {}
    for rule in rules or ():
        if rule.can_fix:
            templates.setdefault(rule.identity, rule.auto_fix.replace_template)

    for path, file_findings in by_file.items():
        console.print()
        console.print(
            Panel(
                f"[bold cyan]{escape(_shorten_path(path, root))}[/bold cyan]",
                box=box.SIMPLE_HEAD,
                border_style="blue",
                padding=(0, 1),
            )
        )

        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE,
            padding=(0, 1),
            expand=False,
        )
        table.add_column("Line", justify="right", style="dim", width=5)
        table.add_column("Severity", width=9)
        table.add_column("Rule", width=14)
        table.add_column("Description", style="white")
        table.add_column("Snippet", style="dim")

        for f in file_findings:
            rule_label = f"[{f.rule_id}]" + (" *" if f.auto_fixable else "")
            table.add_row(
                str(f.line),
                Text(f.severity.upper(), style=_severity_style(f.severity)),
                Text(rule_label, style="dim"),
                Text(f.description),
                Text(f.snippet),
            )

        console.print(table)

        if verbose:
            seen: set[str] = set()
            for f in file_findings:
                if f.rule_id in seen or f.rule_id not in templates:
                    continue
                seen.add(f.rule_id)
                label = escape(f"[{f.rule_id}]")
                console.print(f"  [dim]\\[Fix][/dim] {label} -> {escape(templates[f.rule_id])}")
            if seen:
                console.print()

    if scanned:
        _print_file_summary_table(findings, scanned, console, root)

    _print_summary(findings, console)


def print_checklist(
    rules: Sequence[Rule],
    findings: Sequence[Finding] = (),
    console: Optional[Console] = None,
) -> None:
    """Print one row per rule with its kind, severity and finding count."""
    console = console or Console()

    if not rules:
        console.print("[yellow]No checklist items found.[/yellow]")
        return

    counts: dict[str, int] = {}
    for f in findings:
        counts[f.rule_id] = counts.get(f.rule_id, 0) + 1

    table = Table(
        title="Checklist",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("Rule", style="white")
    table.add_column("Kind", style="dim")
    table.add_column("Severity", width=9)
    table.add_column("Auto-fix", justify="center", width=8)
    table.add_column("Findings", justify="right", width=8)
    table.add_column("Description")

    for rule in rules:
        severity = rule.severity.value if rule.severity else ""
        table.add_row(
            Text(rule.identity),
            rule.kind.value,
            Text(severity.upper(), style=_severity_style(severity)),
            "yes" if rule.can_fix else "",
            str(counts.get(rule.identity, 0)),
            Text(rule.title or rule.description or ""),
        )

    console.print(table)


def _print_file_summary_table(
    findings: Sequence[Finding],
    scanned: Sequence[Path],
    console: Console,
    root: Optional[Path],
) -> None:
    """Print a table of clean vs flagged files."""
    by_path: dict[str, int] = {}
    for f in findings:
        key = str(f.file)
        by_path[key] = by_path.get(key, 0) + 1

    table = Table(
        title="Files Summary",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("File", style="white")
    table.add_column("Status", width=8)
    table.add_column("Findings", justify="right", width=8)

    for p in sorted(scanned, key=lambda p: (str(p) not in by_path, str(p))):
        count = by_path.get(str(p), 0)
        table.add_row(
            Text(_shorten_path(p, root)),
            Text("ISSUES", style="bold red") if count else Text("OK", style="bold green"),
            str(count),
        )

    console.print()
    console.print(Panel(table, border_style="cyan", box=box.ROUNDED))


def _print_summary(findings: Sequence[Finding], console: Console) -> None:
    """Print a compact summary of findings."""
    by_severity: dict[str, int] = {}
    for f in findings:
        s = f.severity.lower()
        by_severity[s] = by_severity.get(s, 0) + 1

    total = len(findings)
    summary_parts = [f"[bold]{total} issue{'s' if total != 1 else ''}[/bold]"]
    for sev in SEVERITY_ORDER:
        if sev in by_severity:
            summary_parts.append(f"[{_severity_style(sev)}]{by_severity[sev]} {sev}[/]")

    console.print()
    console.print(
        Panel(
            " | ".join(summary_parts),
            title="Summary",
            border_style="yellow" if total > 0 else "green",
            box=box.ROUNDED,
        )
    )
