"""
Rule engine: evaluate every rule against every file and collect findings.

Files are processed in the order given and rules in checklist order, so the
result list is file-major, rule-minor. Each file is read once into a
ScanContext; nothing is kept between calls.

Failures stay local:
- an unreadable file is logged and reported in ReviewReport.skipped
- an evaluator crash is logged and only loses that rule for that file
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from pydantic import BaseModel, Field

from coderev.context import ScanContext, create_context
from coderev.findings.models import Finding
from coderev.rules.base import Evaluator
from coderev.rules.metrics import FileMetricEvaluator, LineMetricEvaluator
from coderev.rules.models import Rule, RuleKind
from coderev.rules.null_checks import NullChecksEvaluator
from coderev.rules.pattern import PatternEvaluator

logger = logging.getLogger(__name__)

# A file to review: a path to read, or a (path, text) pair already in memory.
# Pairs may be any two-item sequence, e.g. a list decoded from JSON.
SourceInput = Union[str, Path, tuple[Union[str, Path], str], Sequence[Union[str, Path]]]

EVALUATORS: dict[RuleKind, Evaluator] = {
    evaluator.kind: evaluator
    for evaluator in (
        FileMetricEvaluator(),
        LineMetricEvaluator(),
        NullChecksEvaluator(),
        PatternEvaluator(),
    )
}


class ReviewReport(BaseModel):
    """Outcome of one review run."""

    findings: list[Finding] = Field(default_factory=list)
    scanned: list[Path] = Field(default_factory=list)
    skipped: list[Path] = Field(default_factory=list)


def _load(entry: SourceInput) -> tuple[Path, Optional[ScanContext]]:
    if isinstance(entry, (str, Path)):
        return Path(entry), create_context(entry)
    try:
        path, text = entry
    except (TypeError, ValueError):
        raise TypeError(f"Expected a path or a (path, text) pair, got {entry!r}") from None
    return Path(path), create_context(path, text)


def evaluate(context: ScanContext, rules: Sequence[Rule]) -> list[Finding]:
    """Run each rule against one file, in order, through its kind's evaluator."""
    findings: list[Finding] = []
    for rule in rules:
        evaluator = EVALUATORS[rule.kind]
        try:
            findings.extend(evaluator.run(context, rule))
        except Exception:
            logger.exception("Rule %s failed on %s", rule.identity, context.path)
    return findings


def review(rules: Sequence[Rule], files: Iterable[SourceInput]) -> ReviewReport:
    """
    Evaluate rules against files and return findings plus scanned/skipped paths.
    """
    report = ReviewReport()
    for entry in files:
        path, context = _load(entry)
        if context is None:
            # File could not be read; error already logged in create_context
            report.skipped.append(path)
            continue
        report.scanned.append(path)
        report.findings.extend(evaluate(context, rules))

    logger.info(
        "Review complete: %d finding(s) in %d file(s), %d skipped",
        len(report.findings),
        len(report.scanned),
        len(report.skipped),
    )
    return report


def scan(rules: Sequence[Rule], files: Iterable[SourceInput]) -> list[Finding]:
    """Evaluate rules against files and return the findings only."""
    return review(rules, files).findings
