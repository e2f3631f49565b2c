# Review artifact: the JSON record of one review run (review-artifact.json).

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from coderev.findings.models import Finding

logger = logging.getLogger(__name__)

ARTIFACT_FILENAME = "review-artifact.json"

SCOPE_SINGLE_FILE = "Single File"
SCOPE_WORKSPACE = "Entire Workspace"

Scope = Literal["Single File", "Entire Workspace"]


class ReviewArtifact(BaseModel):
    generated_at: datetime = Field(..., alias="generatedAt")
    scope: Scope
    findings: list[Finding] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


def build_artifact(
    findings: Sequence[Finding],
    scope: Scope,
    generated_at: Optional[datetime] = None,
) -> ReviewArtifact:
    """Wrap findings with the scope and a generation timestamp (UTC now by default)."""
    return ReviewArtifact(
        generated_at=generated_at or datetime.now(timezone.utc),
        scope=scope,
        findings=list(findings),
    )


def write_artifact(path: Path, artifact: ReviewArtifact) -> Path:
    """Write the artifact as indented JSON with camelCase keys."""
    path.write_text(
        artifact.model_dump_json(by_alias=True, exclude_none=True, indent=2),
        encoding="utf-8",
    )
    logger.info("Wrote %d finding(s) to %s", len(artifact.findings), path)
    return path


def read_artifact(path: Path) -> ReviewArtifact:
    """
    Load a previously written artifact.

    Raises:
        OSError: if the file cannot be read.
        pydantic.ValidationError: if the content is not a review artifact.
    """
    return ReviewArtifact.model_validate_json(path.read_text(encoding="utf-8"))
