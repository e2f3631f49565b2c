# Template-based auto-fixes: rewrite the single line a finding points at.

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from coderev.findings.models import Finding
from coderev.rules.models import MATCH_PLACEHOLDER, Rule

logger = logging.getLogger(__name__)

# Same boundaries as context.LINE_BREAK, captured so they survive a re-join.
_LINE_BREAK_KEEP = re.compile(r"(\r\n|\r|\n)")


class FixUnavailableError(Exception):
    """No fix can be applied for a finding; nothing was changed."""

    def __init__(self, rule_id: str, reason: str) -> None:
        self.rule_id = rule_id
        self.reason = reason
        super().__init__(f"No auto-fix available for {rule_id}: {reason}")


class TextEdit(BaseModel):
    """Replacement of one whole line."""

    line: int = Field(..., ge=1, description="1-based line number")
    original: str
    replacement: str


class FixResult(BaseModel):
    edit: TextEdit
    text: str


def find_rule(rules: Iterable[Rule], rule_id: str) -> Optional[Rule]:
    """Return the first rule whose identity is rule_id."""
    for rule in rules:
        if rule.identity == rule_id:
            return rule
    return None


def render_template(template: str, match: str) -> str:
    """Substitute every $MATCH; the match text is inserted literally."""
    return template.replace(MATCH_PLACEHOLDER, match)


def fix_line(line: str, match: str, template: str) -> str:
    """Replace the first occurrence of match in line with the rendered template."""
    return line.replace(match, render_template(template, match), 1)


def apply_fix(finding: Finding, rule: Optional[Rule], text: str) -> FixResult:
    """
    Compute the fixed text for one finding.

    Only the finding's line changes, and only the first occurrence of its
    recorded match on that line. Line endings elsewhere are preserved.

    Raises:
        FixUnavailableError: no fix-capable rule, or the line no longer
            exists or no longer contains the match.
    """
    if rule is None:
        raise FixUnavailableError(finding.rule_id, "rule not found in checklist")
    if not rule.can_fix:
        raise FixUnavailableError(finding.rule_id, "rule is not auto-fixable")

    parts = _LINE_BREAK_KEEP.split(text)
    index = finding.line - 1
    # Lines sit at even positions, separators at odd ones.
    if not 0 <= 2 * index < len(parts):
        raise FixUnavailableError(finding.rule_id, f"line {finding.line} does not exist")

    original = parts[2 * index]
    match = finding.match or ""
    if match not in original:
        raise FixUnavailableError(
            finding.rule_id, f"line {finding.line} no longer contains {match!r}"
        )

    replacement = fix_line(original, match, rule.auto_fix.replace_template)
    parts[2 * index] = replacement
    logger.info("Fixed %s:%d for %s", finding.file, finding.line, finding.rule_id)
    return FixResult(
        edit=TextEdit(line=finding.line, original=original, replacement=replacement),
        text="".join(parts),
    )
