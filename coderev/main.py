"""
Typer CLI entry point and orchestration of the review pipeline.

Commands:
- review: run the checklist over one file or a whole workspace, print the
  findings and write review-artifact.json
- rules: show the checklist, optionally with finding counts from an artifact
- fix: apply the auto-fix of one finding from an artifact to its file
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError

from coderev.config import get_default_config, get_enabled_rules
from coderev.context import read_source
from coderev.engine import review as run_review
from coderev.findings.models import Finding
from coderev.fixes import FixUnavailableError, apply_fix, find_rule
from coderev.reporting.artifact import (
    ARTIFACT_FILENAME,
    SCOPE_SINGLE_FILE,
    SCOPE_WORKSPACE,
    ReviewArtifact,
    build_artifact,
    read_artifact,
    write_artifact,
)
from coderev.reporting.console import print_checklist, print_findings
from coderev.traversal import find_review_files

logger = logging.getLogger(__name__)

app = typer.Typer(help="coderev - checklist-driven code review for source files.")


@app.callback()
def _configure(
    debug: bool = typer.Option(False, "--debug", help="Show debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _collect_files(target: Path) -> tuple[Path, List[Path], str]:
    """
    Resolve a target into (workspace root, files to review, scope).

    - file: reviewed alone; its directory is the workspace root
    - directory: every reviewable file under it (traversal.find_review_files)
    """
    if target.is_file():
        return target.parent, [target], SCOPE_SINGLE_FILE

    if target.is_dir():
        files = find_review_files(target)
        if not files:
            logger.warning("No reviewable files found under %s", target)
        return target, files, SCOPE_WORKSPACE

    raise typer.BadParameter(f"Target path is neither a file nor a directory: {target}")


def _printable(line: str) -> str:
    """Undecodable bytes kept as surrogate escapes, shown as U+FFFD."""
    return line.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace").strip()


def _load_artifact(path: Path) -> ReviewArtifact:
    try:
        return read_artifact(path)
    except (OSError, UnicodeDecodeError, ValidationError) as e:
        raise typer.BadParameter(f"Cannot read review artifact {path}: {e}")


@app.command()
def review(
    target: Path = typer.Argument(
        Path("."),
        exists=True,
        readable=True,
        resolve_path=True,
        help="File or workspace directory to review.",
    ),
    checklist: Optional[Path] = typer.Option(
        None,
        "--checklist",
        "-c",
        help="Checklist JSON (default: checklist.json in the workspace root).",
    ),
    artifact: bool = typer.Option(
        True,
        "--artifact/--no-artifact",
        help="Write review-artifact.json into the workspace root.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show auto-fix templates."),
) -> None:
    """Review a single file or every reviewable file under a directory."""
    root, files, scope = _collect_files(target)
    config = get_default_config(root, checklist)
    rules = list(get_enabled_rules(config))

    if not rules:
        typer.echo(f"No checklist items found in {config.checklist_path}")
        raise typer.Exit(code=1)

    if not files:
        typer.echo("No files found to review.")
        return

    report = run_review(rules, files)
    print_findings(report.findings, scanned=report.scanned, rules=rules, root=root, verbose=verbose)

    if report.skipped:
        typer.echo(f"Skipped {len(report.skipped)} unreadable file(s).", err=True)

    if artifact:
        path = write_artifact(root / ARTIFACT_FILENAME, build_artifact(report.findings, scope))
        typer.echo(f"Artifact written to {path}")

    typer.echo(f"Review complete ({scope}): {len(report.findings)} issue(s).")


@app.command()
def rules(
    root: Path = typer.Argument(
        Path("."),
        exists=True,
        file_okay=False,
        resolve_path=True,
        help="Workspace directory holding checklist.json.",
    ),
    checklist: Optional[Path] = typer.Option(None, "--checklist", "-c", help="Checklist JSON to show."),
    artifact: Optional[Path] = typer.Option(
        None,
        "--artifact",
        "-a",
        exists=True,
        dir_okay=False,
        help="Review artifact to count findings from.",
    ),
) -> None:
    """Show the checklist rules."""
    config = get_default_config(root, checklist)
    findings: List[Finding] = _load_artifact(artifact).findings if artifact else []
    print_checklist(list(get_enabled_rules(config)), findings)


@app.command()
def fix(
    artifact: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        resolve_path=True,
        help="Review artifact produced by `review`.",
    ),
    index: int = typer.Argument(..., min=0, help="0-based position of the finding in the artifact."),
    checklist: Optional[Path] = typer.Option(
        None,
        "--checklist",
        "-c",
        help="Checklist JSON (default: checklist.json next to the artifact).",
    ),
) -> None:
    """Apply the auto-fix for one finding and save the file."""
    findings = _load_artifact(artifact).findings
    if index >= len(findings):
        raise typer.BadParameter(f"Artifact has {len(findings)} finding(s); no index {index}")
    finding = findings[index]

    config = get_default_config(artifact.parent, checklist)
    rule = find_rule(get_enabled_rules(config), finding.rule_id)

    # surrogateescape keeps bytes that are not UTF-8 intact on the other lines
    text = read_source(finding.file, errors="surrogateescape")
    if text is None:
        typer.echo(f"Cannot read {finding.file}", err=True)
        raise typer.Exit(code=1)

    try:
        result = apply_fix(finding, rule, text)
    except FixUnavailableError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    # Bytes, so line endings are written back untouched
    try:
        finding.file.write_bytes(result.text.encode("utf-8", errors="surrogateescape"))
    except OSError as e:
        typer.echo(f"Cannot write {finding.file}: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Applied auto-fix for {finding.rule_id} at {finding.file}:{result.edit.line}")
    typer.echo(f"  - {_printable(result.edit.original)}")
    typer.echo(f"  + {_printable(result.edit.replacement)}")


def main() -> None:
    """Entry point for the `coderev` script and `python -m coderev.main`."""
    app()


if __name__ == "__main__":
    main()
