# Pydantic models for checklist rules: one model per rule kind.
# A checklist item is turned into exactly one of these by config.parse_rule().

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from coderev.findings.models import Severity

MATCH_PLACEHOLDER = "$MATCH"

# The only AST sub-rule the engine knows how to evaluate.
ENSURE_NULL_CHECK = "ensure_null_check"


class RuleKind(str, Enum):
    """Which evaluator handles a rule."""

    PATTERN = "pattern"
    AST = "ast_rule"
    FILE = "file_rule"
    LINE = "line_rule"


class AutoFix(BaseModel):
    """Fix descriptor: a replacement template containing $MATCH."""

    replace_template: str = Field(MATCH_PLACEHOLDER, alias="replaceTemplate")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class BaseRule(BaseModel):
    """
    Fields shared by every rule kind.

    Subclasses set `kind` and `default_id`; `identity` is what findings store
    in Finding.rule_id and what fixes use to find the rule again.
    """

    kind: ClassVar[RuleKind]
    default_id: ClassVar[str]

    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    severity: Optional[Severity] = None
    languages: Optional[tuple[str, ...]] = None
    auto_fixable: bool = Field(False, alias="autoFixable")
    auto_fix: Optional[AutoFix] = Field(None, alias="autoFix")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @property
    def identity(self) -> str:
        return self.id or self.description or self.default_id

    def applies_to(self, language: str) -> bool:
        """True if no language filter is declared or `language` is listed."""
        return self.languages is None or language in self.languages

    @property
    def can_fix(self) -> bool:
        return self.auto_fixable and self.auto_fix is not None


class PatternRule(BaseRule):
    kind: ClassVar[RuleKind] = RuleKind.PATTERN
    default_id: ClassVar[str] = "pattern_rule"

    pattern: str


class AstRule(BaseRule):
    kind: ClassVar[RuleKind] = RuleKind.AST
    default_id: ClassVar[str] = "ast_rule"

    rule: Optional[str] = None


class FileRule(BaseRule):
    """Flags files with more than max_lines lines."""

    kind: ClassVar[RuleKind] = RuleKind.FILE
    default_id: ClassVar[str] = "file_rule"

    max_lines: Optional[int] = Field(None, alias="maxLines")


class LineRule(BaseRule):
    """Flags every line longer than max_length characters."""

    kind: ClassVar[RuleKind] = RuleKind.LINE
    default_id: ClassVar[str] = "line_rule"

    max_length: Optional[int] = Field(None, alias="maxLength")


Rule = Union[PatternRule, AstRule, FileRule, LineRule]

RULE_MODELS: dict[RuleKind, type[BaseRule]] = {
    model.kind: model for model in (PatternRule, AstRule, FileRule, LineRule)
}
