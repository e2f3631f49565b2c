"""Tests for checklist loading and rule-kind resolution."""

import json
import logging

import pytest

from coderev.config import (
    CHECKLIST_FILENAME,
    get_default_config,
    get_enabled_rules,
    load_checklist,
    parse_rule,
    parse_rules,
)
from coderev.rules.models import AstRule, FileRule, LineRule, PatternRule, RuleKind


@pytest.mark.parametrize(
    "item, model",
    [
        ({"type": "file_rule", "maxLines": 300}, FileRule),
        ({"type": "line_rule", "maxLength": 120}, LineRule),
        ({"type": "ast_rule", "rule": "ensure_null_check"}, AstRule),
        ({"pattern": "console\\.log"}, PatternRule),
        ({"type": "pattern", "pattern": "eval\\("}, PatternRule),
        ({"type": "regex", "pattern": "x"}, PatternRule),
    ],
)
def test_parse_rule_kinds(item, model):
    rule = parse_rule(item)
    assert isinstance(rule, model)
    assert rule.kind == model.kind


def test_typed_kind_wins_over_pattern():
    """A line rule that also carries a pattern is only a line rule."""
    rule = parse_rule({"id": "X", "type": "line_rule", "maxLength": 80, "pattern": "foo"})
    assert isinstance(rule, LineRule)
    assert rule.kind is RuleKind.LINE


@pytest.mark.parametrize(
    "item",
    [
        {"id": "A", "type": "mystery"},
        {"id": "B"},
        {"id": "C", "pattern": ""},
    ],
)
def test_inert_items(item):
    assert parse_rule(item) is None


def test_invalid_item_skipped(caplog):
    with caplog.at_level(logging.WARNING):
        assert parse_rule({"id": "S", "pattern": "x", "severity": "catastrophic"}) is None
        assert parse_rule("not an object") is None
    assert "Ignoring invalid checklist item 'S'" in caplog.text


def test_camel_case_fields():
    rule = parse_rule(
        {
            "id": "P1",
            "title": "No var",
            "description": "Use let/const",
            "pattern": "var ",
            "severity": "error",
            "languages": ["typescript", "javascript"],
            "autoFixable": True,
            "autoFix": {"replaceTemplate": "let "},
        }
    )
    assert rule.auto_fixable is True
    assert rule.auto_fix.replace_template == "let "
    assert rule.can_fix
    assert rule.languages == ("typescript", "javascript")
    assert rule.applies_to("javascript")
    assert not rule.applies_to("python")
    assert parse_rule({"type": "file_rule", "maxLines": 5}).max_lines == 5
    assert parse_rule({"type": "line_rule", "maxLength": 9}).max_length == 9


def test_auto_fix_template_defaults_to_match():
    rule = parse_rule({"id": "P", "pattern": "x", "autoFixable": True, "autoFix": {}})
    assert rule.auto_fix.replace_template == "$MATCH"


def test_auto_fixable_without_descriptor_cannot_fix():
    assert not parse_rule({"id": "P", "pattern": "x", "autoFixable": True}).can_fix
    assert not parse_rule({"id": "P", "pattern": "x", "autoFix": {"replaceTemplate": "y"}}).can_fix


def test_identity_fallbacks():
    assert parse_rule({"id": "R1", "description": "d", "pattern": "x"}).identity == "R1"
    assert parse_rule({"description": "Avoid x", "pattern": "x"}).identity == "Avoid x"
    assert parse_rule({"pattern": "x"}).identity == "pattern_rule"
    assert parse_rule({"type": "line_rule", "maxLength": 1}).identity == "line_rule"


def test_parse_rules_keeps_order_and_drops_inert():
    rules = parse_rules(
        [
            {"id": "A", "pattern": "a"},
            {"id": "junk"},
            {"id": "B", "type": "file_rule", "maxLines": 10},
            {"id": "C", "type": "line_rule", "maxLength": 10},
        ]
    )
    assert [r.identity for r in rules] == ["A", "B", "C"]


def test_load_checklist(tmp_path):
    path = tmp_path / CHECKLIST_FILENAME
    path.write_text(
        json.dumps({"items": [{"id": "A", "pattern": "a"}, {"id": "B", "type": "ast_rule", "rule": "ensure_null_check"}]}),
        encoding="utf-8",
    )
    rules = load_checklist(path)
    assert [r.identity for r in rules] == ["A", "B"]


def test_load_checklist_missing_file(tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        assert load_checklist(tmp_path / "nope.json") == []
    assert "Failed to read checklist" in caplog.text


def test_load_checklist_invalid_json(tmp_path, caplog):
    path = tmp_path / CHECKLIST_FILENAME
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.ERROR):
        assert load_checklist(path) == []
    assert "not valid JSON" in caplog.text


def test_load_checklist_without_items(tmp_path):
    path = tmp_path / CHECKLIST_FILENAME
    path.write_text(json.dumps({"rules": []}), encoding="utf-8")
    assert load_checklist(path) == []


def test_get_default_config_uses_workspace_checklist(tmp_path):
    (tmp_path / CHECKLIST_FILENAME).write_text(json.dumps({"items": [{"id": "A", "pattern": "a"}]}), encoding="utf-8")
    config = get_default_config(tmp_path)
    assert config.checklist_path == tmp_path / CHECKLIST_FILENAME
    assert [r.identity for r in get_enabled_rules(config)] == ["A"]


def test_get_default_config_explicit_checklist(tmp_path):
    other = tmp_path / "other.json"
    other.write_text(json.dumps({"items": [{"id": "Z", "pattern": "z"}]}), encoding="utf-8")
    config = get_default_config(tmp_path, other)
    assert [r.identity for r in config.rules] == ["Z"]
