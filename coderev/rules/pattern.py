# Pattern rules: regular-expression scanning over a file's full text.

from __future__ import annotations

import logging
import re
from typing import Iterator, Optional

from coderev.context import ScanContext
from coderev.findings.models import Finding
from coderev.rules.base import Evaluator
from coderev.rules.models import PatternRule, RuleKind

logger = logging.getLogger(__name__)


def compile_pattern(source: str) -> Optional[re.Pattern[str]]:
    """Compile a checklist regex, or return None (logged) if it is malformed."""
    try:
        return re.compile(source)
    except re.error as e:
        logger.warning("Invalid pattern %r: %s", source, e)
        return None


def iter_matches(regex: re.Pattern[str], text: str) -> Iterator[re.Match[str]]:
    """
    Yield non-overlapping matches left to right.

    The search cursor moves to the end of each match; an empty match moves
    it one character further so scanning always terminates.
    """
    cursor = 0
    end = len(text)
    while cursor <= end:
        m = regex.search(text, cursor)
        if m is None:
            return
        yield m
        cursor = m.end()
        if m.end() == m.start():
            cursor += 1


class PatternEvaluator(Evaluator):
    """One finding per regex match; `match` is the matched text."""

    kind = RuleKind.PATTERN

    def run(self, context: ScanContext, rule: PatternRule) -> list[Finding]:
        if not rule.applies_to(context.language):
            return []
        regex = compile_pattern(rule.pattern)
        if regex is None:
            return []

        findings: list[Finding] = []
        for m in iter_matches(regex, context.text):
            line, snippet = context.locate(m.start())
            findings.append(
                Finding(
                    rule_id=rule.identity,
                    description=rule.description or rule.pattern,
                    severity=self.severity_for(rule),
                    auto_fixable=rule.auto_fixable,
                    file=context.path,
                    line=line,
                    snippet=snippet,
                    match=m.group(0),
                    language=context.language,
                )
            )
        return findings
