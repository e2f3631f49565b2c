# File and line metric rules: maximum line count per file, maximum length per line.

from __future__ import annotations

import logging

from coderev.context import ScanContext
from coderev.findings.models import Finding, Severity
from coderev.rules.base import Evaluator
from coderev.rules.models import FileRule, LineRule, RuleKind

logger = logging.getLogger(__name__)


class FileMetricEvaluator(Evaluator):
    """At most one finding per file, anchored at line 1."""

    kind = RuleKind.FILE
    default_severity = Severity.INFO

    def run(self, context: ScanContext, rule: FileRule) -> list[Finding]:
        if not rule.max_lines:
            logger.debug("Rule %s has no maxLines; skipped", rule.identity)
            return []
        if not rule.applies_to(context.language):
            return []

        count = len(context.lines)
        if count <= rule.max_lines:
            return []
        return [
            Finding(
                rule_id=rule.identity,
                description=rule.description or "File exceeds maximum line count",
                severity=self.severity_for(rule),
                auto_fixable=False,
                file=context.path,
                line=1,
                snippet=f"File has {count} lines",
                language=context.language,
            )
        ]


class LineMetricEvaluator(Evaluator):
    """One finding for every line longer than max_length."""

    kind = RuleKind.LINE

    def run(self, context: ScanContext, rule: LineRule) -> list[Finding]:
        if not rule.max_length:
            logger.debug("Rule %s has no maxLength; skipped", rule.identity)
            return []
        if not rule.applies_to(context.language):
            return []

        findings: list[Finding] = []
        for number, text in enumerate(context.lines, start=1):
            if len(text) <= rule.max_length:
                continue
            findings.append(
                Finding(
                    rule_id=rule.identity,
                    description=rule.description or "Line too long",
                    severity=self.severity_for(rule),
                    auto_fixable=False,
                    file=context.path,
                    line=number,
                    snippet=text.strip(),
                    language=context.language,
                )
            )
        return findings
