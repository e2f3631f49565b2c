# Pydantic data models for review findings: Finding and Severity.

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Severity levels a checklist item may declare."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    MAJOR = "major"
    BLOCKING = "blocking"


class Finding(BaseModel):
    """
    A single rule violation reported for one line of one file.

    Findings carry copies of the rule fields needed to display and fix them
    (rule_id is the rule's identity string), never the rule itself.
    """

    rule_id: str = Field(..., alias="ruleId")
    description: str
    severity: Severity = Severity.WARNING
    auto_fixable: bool = Field(default=False, alias="autoFixable")
    file: Path
    line: int = Field(..., ge=1, description="1-based line number")
    snippet: str = ""
    match: Optional[str] = None
    language: Optional[str] = None

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )

    def to_json_dict(self) -> dict:
        """Serialize with camelCase keys, dropping absent optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
