"""Load linter result sets from JSON or YAML report files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from oasjunit.resultset import RuleResultSet
from oasjunit.rules import Rule, RuleCategory, RuleResult

logger = logging.getLogger(__name__)


class ResultSetError(ValueError):
    """Raised when a lint report cannot be read or has an unknown shape."""


def _parse_text(text: str, suffix: str) -> object:
    if suffix == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ResultSetError(f"Invalid JSON: {exc}") from exc
    # YAML is a superset of JSON, so anything else goes through PyYAML.
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ResultSetError(f"Invalid YAML: {exc}") from exc


def _extract_results(data: object) -> list:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if isinstance(data.get("resultSet"), dict):
            data = data["resultSet"]
        results = data.get("results")
        if isinstance(results, list):
            return results
        if results is None and "results" in data:
            return []
    raise ResultSetError(
        "Unrecognised report shape: expected a list of results, "
        "'results', or 'resultSet.results'"
    )


def _line_of(data: dict) -> int | None:
    rng = data.get("range")
    if isinstance(rng, dict) and isinstance(rng.get("start"), dict):
        line = rng["start"].get("line")
    else:
        line = data.get("line")
    if isinstance(line, bool):
        return None
    try:
        return int(line) if line is not None else None
    except (TypeError, ValueError):
        return None


def _origin_of(data: dict) -> str | None:
    origin = data.get("origin")
    if isinstance(origin, dict):
        origin = origin.get("absoluteLocation")
    return str(origin) if origin else None


def result_from_dict(data: dict) -> RuleResult:
    """Build a RuleResult from one serialized linter result."""
    rule_data = data.get("rule") if isinstance(data.get("rule"), dict) else {}
    rule_id = str(data.get("ruleId") or rule_data.get("id") or "")
    severity = str(rule_data.get("severity") or data.get("ruleSeverity") or "")

    category = None
    cat_data = rule_data.get("category")
    if isinstance(cat_data, dict) and cat_data.get("id"):
        category = RuleCategory(str(cat_data["id"]), str(cat_data.get("name") or cat_data["id"]))

    rule = None
    if rule_id:
        rule = Rule(
            id=str(rule_data.get("id") or rule_id),
            severity=severity,
            category=category,
            description=str(rule_data.get("description") or ""),
        )

    return RuleResult(
        message=str(data.get("message") or ""),
        path=str(data.get("path") or ""),
        rule_id=rule_id,
        rule=rule,
        line=_line_of(data),
        origin=_origin_of(data),
    )


def load_result_set(path: Path) -> RuleResultSet:
    """Read a lint report (JSON or YAML) into a RuleResultSet."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ResultSetError(f"Report not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ResultSetError(f"Could not read report {path}: {exc}") from exc

    raw_results = _extract_results(_parse_text(text, path.suffix.lower()))

    results: list[RuleResult] = []
    for idx, item in enumerate(raw_results):
        if not isinstance(item, dict):
            logger.warning("Result %d is not an object, skipping.", idx)
            continue
        results.append(result_from_dict(item))

    uncategorised = sum(1 for r in results if r.category_id is None)
    if uncategorised:
        logger.warning("%d result(s) have no rule category and will not be reported.", uncategorised)
    logger.debug("Loaded %d results from %s", len(results), path)
    return RuleResultSet(results)
