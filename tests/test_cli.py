"""Integration tests for CLI commands."""

import json
from pathlib import Path

from typer.testing import CliRunner

from oasjunit.cli import app
from oasjunit.exporters.junit import parse_junit_report

runner = CliRunner()


def _write_report(tmp_path: Path) -> Path:
    results = [
        {
            "message": "Operation must have an id",
            "path": "$.paths['/pets'].get",
            "ruleId": "operation-operationId",
            "range": {"start": {"line": 12}},
            "rule": {
                "id": "operation-operationId",
                "severity": "error",
                "category": {"id": "operations", "name": "Operations"},
            },
        },
        {
            "message": "Tag has no description",
            "path": "$.tags[0]",
            "ruleId": "tag-description",
            "rule": {
                "id": "tag-description",
                "severity": "info",
                "category": {"id": "tags", "name": "Tags"},
            },
        },
    ]
    path = tmp_path / "lint.json"
    path.write_text(json.dumps({"resultSet": {"results": results}}))
    return path


class TestConvert:
    def test_convert_to_file(self, tmp_path: Path) -> None:
        report = _write_report(tmp_path)
        out = tmp_path / "out" / "junit.xml"
        result = runner.invoke(app, ["convert", str(report), "-o", str(out), "--dir", str(tmp_path)])
        assert result.exit_code == 0
        parsed = parse_junit_report(out.read_bytes())
        assert parsed.tests == 2
        assert parsed.failures == 1
        assert [s.name for s in parsed.testsuites] == ["OAS Linting - Operations", "OAS Linting - Tags"]

    def test_fallback_file_is_report_path(self, tmp_path: Path) -> None:
        report = _write_report(tmp_path)
        out = tmp_path / "junit.xml"
        runner.invoke(app, ["convert", str(report), "-o", str(out), "--dir", str(tmp_path)])
        tc = parse_junit_report(out.read_bytes()).testsuites[0].testcases[0]
        assert tc.property_map["file"] == str(report)

    def test_file_option(self, tmp_path: Path) -> None:
        report = _write_report(tmp_path)
        out = tmp_path / "junit.xml"
        runner.invoke(
            app,
            ["convert", str(report), "-o", str(out), "-f", "openapi.yaml", "--dir", str(tmp_path)],
        )
        tc = parse_junit_report(out.read_bytes()).testsuites[0].testcases[0]
        assert tc.property_map["file"] == "openapi.yaml"

    def test_convert_to_stdout(self, tmp_path: Path) -> None:
        report = _write_report(tmp_path)
        result = runner.invoke(app, ["convert", str(report), "--dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "<testsuites" in result.output

    def test_config_categories_respected(self, tmp_path: Path) -> None:
        cfg = tmp_path / ".oasjunit" / "config.json"
        cfg.parent.mkdir()
        cfg.write_text(json.dumps({
            "suite_prefix": "API",
            "categories": [{"id": "tags", "name": "Tagging"}, {"id": "operations", "name": "Ops"}],
        }))
        report = _write_report(tmp_path)
        out = tmp_path / "junit.xml"
        result = runner.invoke(app, ["convert", str(report), "-o", str(out), "--dir", str(tmp_path)])
        assert result.exit_code == 0
        parsed = parse_junit_report(out.read_bytes())
        assert [s.name for s in parsed.testsuites] == ["API - Tagging", "API - Ops"]

    def test_missing_report(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["convert", str(tmp_path / "none.json"), "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "Could not load" in result.output

    def test_unencodable_report_fails(self, tmp_path: Path) -> None:
        path = tmp_path / "lint.json"
        path.write_text(json.dumps([{
            "message": "bad \u0001 char",
            "path": "$",
            "ruleId": "x",
            "rule": {"id": "x", "severity": "error", "category": {"id": "schemas", "name": "Schemas"}},
        }]))
        out = tmp_path / "junit.xml"
        result = runner.invoke(app, ["convert", str(path), "-o", str(out), "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert not out.exists()

    def test_invalid_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / ".oasjunit" / "config.json"
        cfg.parent.mkdir()
        cfg.write_text(json.dumps({"categories": "nope"}))
        report = _write_report(tmp_path)
        result = runner.invoke(app, ["convert", str(report), "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "Config error" in result.output


class TestSummary:
    def test_summary(self, tmp_path: Path) -> None:
        report = _write_report(tmp_path)
        result = runner.invoke(app, ["summary", str(report), "--dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "OAS Linting - Operations" in result.output
        assert "2 tests" in result.output


class TestCategories:
    def test_lists_default_order(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["categories", "--dir", str(tmp_path)])
        assert result.exit_code == 0
        assert result.output.index("operations") < result.output.index("examples")


class TestInit:
    def test_init_creates_config(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init", "--dir", str(tmp_path)])
        assert result.exit_code == 0
        assert (tmp_path / ".oasjunit" / "config.json").exists()

    def test_init_merges_existing(self, tmp_path: Path) -> None:
        cfg = tmp_path / ".oasjunit" / "config.json"
        cfg.parent.mkdir()
        cfg.write_text(json.dumps({"suite_prefix": "Mine"}))
        result = runner.invoke(app, ["init", "--dir", str(tmp_path)])
        assert result.exit_code == 0
        assert "Merged" in result.output
        assert json.loads(cfg.read_text())["suite_prefix"] == "Mine"


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "oas-junit" in result.output
