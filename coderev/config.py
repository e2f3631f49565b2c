"""
Review configuration: loading checklist.json and turning its items into rules.

A checklist is a JSON document of the form {"items": [...]}. Each item is
resolved to exactly one rule kind:

- "type": "file_rule" | "line_rule" | "ast_rule" selects that kind
- otherwise a non-empty "pattern" field makes it a pattern rule
- anything else is inert and dropped

Invalid items (bad severity, wrong field types) are logged and dropped so one
bad item never prevents the rest of the checklist from running.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from coderev.rules.models import RULE_MODELS, PatternRule, Rule, RuleKind

logger = logging.getLogger(__name__)

CHECKLIST_FILENAME = "checklist.json"

_TYPED_KINDS = {RuleKind.FILE.value, RuleKind.LINE.value, RuleKind.AST.value}


@dataclass
class Config:
    """
    Review configuration.

    Carries the parsed rules and the checklist they came from (None when the
    rules were supplied directly).
    """

    rules: Sequence[Rule] = field(default_factory=list)
    checklist_path: Optional[Path] = None


def parse_rule(item: Any) -> Optional[Rule]:
    """
    Resolve one checklist item to a typed rule, or None if it is inert/invalid.
    """
    if not isinstance(item, Mapping):
        logger.warning("Ignoring checklist item that is not an object: %r", item)
        return None

    kind_name = item.get("type")
    if kind_name in _TYPED_KINDS:
        model = RULE_MODELS[RuleKind(kind_name)]
    elif item.get("pattern"):
        model = PatternRule
    else:
        logger.debug(
            "Ignoring checklist item %r: unknown type %r and no pattern",
            item.get("id") or item.get("description"),
            kind_name,
        )
        return None

    try:
        return model.model_validate(item)
    except ValidationError as e:
        logger.warning(
            "Ignoring invalid checklist item %r: %s",
            item.get("id") or item.get("description"),
            e,
        )
        return None


def parse_rules(items: Iterable[Any]) -> List[Rule]:
    """Parse checklist items in order, dropping inert and invalid ones."""
    rules: List[Rule] = []
    for item in items:
        rule = parse_rule(item)
        if rule is not None:
            rules.append(rule)
    return rules


def load_checklist(path: Path) -> List[Rule]:
    """
    Read a checklist.json file and return its rules.

    An unreadable or malformed file yields [] and an error log, the same as a
    checklist with no items.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        logger.error("Failed to read checklist %s: %s", path, e)
        return []
    except json.JSONDecodeError as e:
        logger.error("Checklist %s is not valid JSON: %s", path, e)
        return []

    items = data.get("items") if isinstance(data, dict) else None
    if not isinstance(items, list):
        logger.error("Checklist %s has no \"items\" list", path)
        return []

    rules = parse_rules(items)
    logger.info("Loaded %d rule(s) from %d checklist item(s) in %s", len(rules), len(items), path)
    return rules


def get_default_config(root: Path, checklist: Optional[Path] = None) -> Config:
    """
    Return the configuration for a workspace root.

    Uses `checklist` when given, else root/checklist.json.
    """
    path = checklist if checklist is not None else root / CHECKLIST_FILENAME
    return Config(rules=load_checklist(path), checklist_path=path)


def get_enabled_rules(config: Config) -> Sequence[Rule]:
    """
    Return the rules of a config in checklist order.

    Single place to add filtering (e.g. by severity or language) later.
    """
    return config.rules
