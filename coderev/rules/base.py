# Evaluator interface (abstract base class): defines the contract every rule evaluator implements.
# Concrete evaluators (pattern, null_checks, metrics) subclass Evaluator and implement run().

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from coderev.context import ScanContext
from coderev.findings.models import Finding, Severity
from coderev.rules.models import BaseRule, RuleKind


class Evaluator(ABC):
    """
    Abstract base class for rule evaluators, one per RuleKind.

    Subclasses must define:
    - kind: RuleKind handled by this evaluator
    - default_severity: severity used when the rule declares none
    - run(context, rule) -> list[Finding]: evaluate one rule against one file

    The engine calls run() once per (file, rule) pair. Evaluators are
    stateless; an invalid rule yields [] rather than an exception.
    """

    kind: RuleKind
    default_severity: Severity = Severity.WARNING

    @abstractmethod
    def run(self, context: ScanContext, rule: Any) -> list[Finding]:
        """
        Evaluate one rule against one file and return any findings.

        Args:
            context: Per-file state (path, text, lines, language).
            rule: The rule model whose kind matches self.kind.

        Returns:
            Findings in the order they occur in the file; [] if none.
        """
        ...

    def severity_for(self, rule: BaseRule) -> Severity:
        return rule.severity or self.default_severity
