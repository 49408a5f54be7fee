"""Rule, category, and finding definitions of the linting engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


FAILING_SEVERITIES: frozenset[str] = frozenset({Severity.ERROR.value, Severity.WARN.value})


def is_failing(severity: str | None) -> bool:
    """Return True for severities that fail a test case (error, warn)."""
    if isinstance(severity, Severity):
        severity = severity.value
    return severity in FAILING_SEVERITIES


@dataclass(frozen=True)
class RuleCategory:
    id: str
    name: str


@dataclass
class Rule:
    id: str
    severity: str
    category: RuleCategory | None = None
    description: str = ""


@dataclass
class RuleResult:
    message: str
    path: str
    rule_id: str
    rule: Rule | None = None
    line: int | None = None
    origin: str | None = None

    @property
    def severity(self) -> str:
        if self.rule is None:
            return ""
        sev = self.rule.severity
        return sev.value if isinstance(sev, Severity) else str(sev)

    @property
    def category_id(self) -> str | None:
        if self.rule is None or self.rule.category is None:
            return None
        return self.rule.category.id


CATEGORY_INFO = RuleCategory("information", "Contract Information")
CATEGORY_OPERATIONS = RuleCategory("operations", "Operations")
CATEGORY_TAGS = RuleCategory("tags", "Tags")
CATEGORY_SCHEMAS = RuleCategory("schemas", "Schemas")
CATEGORY_VALIDATION = RuleCategory("validation", "Validation")
CATEGORY_DESCRIPTIONS = RuleCategory("descriptions", "Descriptions")
CATEGORY_SECURITY = RuleCategory("security", "Security")
CATEGORY_EXAMPLES = RuleCategory("examples", "Examples")
CATEGORY_OWASP = RuleCategory("owasp", "OWASP")

RULE_CATEGORIES_ORDERED: tuple[RuleCategory, ...] = (
    CATEGORY_INFO,
    CATEGORY_OPERATIONS,
    CATEGORY_TAGS,
    CATEGORY_SCHEMAS,
    CATEGORY_VALIDATION,
    CATEGORY_DESCRIPTIONS,
    CATEGORY_SECURITY,
    CATEGORY_EXAMPLES,
    CATEGORY_OWASP,
)


def categories_from_config(config: dict) -> list[RuleCategory]:
    """Build the ordered category list from a config dict.

    Falls back to RULE_CATEGORIES_ORDERED when the config names none.
    Entries without an id are ignored; a missing name reuses the id.
    """
    raw = config.get("categories")
    if not raw:
        return list(RULE_CATEGORIES_ORDERED)
    categories: list[RuleCategory] = []
    seen: set[str] = set()
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("id"):
            continue
        cat_id = str(entry["id"])
        if cat_id in seen:
            continue
        seen.add(cat_id)
        categories.append(RuleCategory(cat_id, str(entry.get("name") or cat_id)))
    return categories
