"""End-to-end tests for the Typer CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from coderev.main import app

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path):
    """A workspace with a checklist and two source files."""
    checklist = {
        "items": [
            {
                "id": "NO_VAR",
                "description": "Use let instead of var",
                "pattern": "var ",
                "severity": "error",
                "autoFixable": True,
                "autoFix": {"replaceTemplate": "let "},
            },
            {"id": "C2", "type": "ast_rule", "rule": "ensure_null_check"},
            {"id": "LEN", "type": "line_rule", "maxLength": 200},
        ]
    }
    (tmp_path / "checklist.json").write_text(json.dumps(checklist), encoding="utf-8")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.ts").write_text("var a = 1;\nvar b = 2;\n", encoding="utf-8")
    (tmp_path / "src" / "util.js").write_text("function f(x) { return x; }\n", encoding="utf-8")
    return tmp_path


def _artifact(root):
    return json.loads((root / "review-artifact.json").read_text(encoding="utf-8"))


def test_review_workspace_writes_artifact(workspace):
    result = runner.invoke(app, ["review", str(workspace)])
    assert result.exit_code == 0, result.output
    assert "Review complete (Entire Workspace): 3 issue(s)." in result.output

    data = _artifact(workspace)
    assert data["scope"] == "Entire Workspace"
    assert [(f["ruleId"], f["line"]) for f in data["findings"]] == [
        ("NO_VAR", 1),
        ("NO_VAR", 2),
        ("C2", 1),
    ]


def test_review_single_file(workspace):
    result = runner.invoke(app, ["review", str(workspace / "src" / "util.js"), "--checklist", str(workspace / "checklist.json")])
    assert result.exit_code == 0, result.output
    assert "Review complete (Single File): 1 issue(s)." in result.output
    data = _artifact(workspace / "src")
    assert data["scope"] == "Single File"
    assert data["findings"][0]["match"] == "x"


def test_review_without_artifact(workspace):
    result = runner.invoke(app, ["review", str(workspace), "--no-artifact"])
    assert result.exit_code == 0, result.output
    assert not (workspace / "review-artifact.json").exists()


def test_review_without_checklist_fails(tmp_path):
    (tmp_path / "a.ts").write_text("let a = 1;", encoding="utf-8")
    result = runner.invoke(app, ["review", str(tmp_path)])
    assert result.exit_code == 1
    assert "No checklist items found" in result.output


def test_rules_lists_checklist(workspace):
    runner.invoke(app, ["review", str(workspace)])
    result = runner.invoke(
        app,
        ["rules", str(workspace), "--artifact", str(workspace / "review-artifact.json")],
        env={"COLUMNS": "200"},
    )
    assert result.exit_code == 0, result.output
    assert "NO_VAR" in result.output
    assert "ast_rule" in result.output


def test_fix_applies_template(workspace):
    runner.invoke(app, ["review", str(workspace)])
    result = runner.invoke(app, ["fix", str(workspace / "review-artifact.json"), "1"])
    assert result.exit_code == 0, result.output
    assert "Applied auto-fix for NO_VAR" in result.output
    assert (workspace / "src" / "app.ts").read_text(encoding="utf-8") == "var a = 1;\nlet b = 2;\n"


def test_fix_unavailable(workspace):
    runner.invoke(app, ["review", str(workspace)])
    # Finding 2 is the C2 finding; the C2 rule has no autoFix
    result = runner.invoke(app, ["fix", str(workspace / "review-artifact.json"), "2"])
    assert result.exit_code == 1
    assert "No auto-fix available for C2" in result.output


def test_fix_index_out_of_range(workspace):
    runner.invoke(app, ["review", str(workspace)])
    result = runner.invoke(app, ["fix", str(workspace / "review-artifact.json"), "9"])
    assert result.exit_code != 0


def test_fix_keeps_bytes_that_are_not_utf8(tmp_path):
    """Only the fixed line changes; latin-1 bytes on other lines survive."""
    checklist = {
        "items": [
            {"id": "FOO", "pattern": "foo", "autoFixable": True, "autoFix": {"replaceTemplate": "bar"}},
        ]
    }
    (tmp_path / "checklist.json").write_text(json.dumps(checklist), encoding="utf-8")
    legacy = tmp_path / "legacy.py"
    legacy.write_bytes(b"# caf\xe9 latin-1 comment\r\nfoo = 1\r\n")

    assert runner.invoke(app, ["review", str(tmp_path)]).exit_code == 0
    result = runner.invoke(app, ["fix", str(tmp_path / "review-artifact.json"), "0"])
    assert result.exit_code == 0, result.output
    assert legacy.read_bytes() == b"# caf\xe9 latin-1 comment\r\nbar = 1\r\n"


def test_fix_reports_unwritable_file(workspace, monkeypatch):
    runner.invoke(app, ["review", str(workspace)])
    target = workspace / "src" / "app.ts"
    before = target.read_bytes()

    def refuse(self, data):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "write_bytes", refuse)
    result = runner.invoke(app, ["fix", str(workspace / "review-artifact.json"), "0"])
    assert result.exit_code == 1
    assert "Cannot write" in result.output
    assert not isinstance(result.exception, OSError)
    assert target.read_bytes() == before


def test_fix_rejects_undecodable_artifact(tmp_path):
    artifact = tmp_path / "review-artifact.json"
    artifact.write_bytes(b"\xff\xfe\x00{")
    result = runner.invoke(app, ["fix", str(artifact), "0"])
    assert result.exit_code == 2
    assert "Cannot read review artifact" in result.output
