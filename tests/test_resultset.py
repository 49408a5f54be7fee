"""RuleResultSet grouping tests."""

from oasjunit.resultset import RuleResultSet
from oasjunit.rules import CATEGORY_EXAMPLES, CATEGORY_SCHEMAS, Rule, RuleResult


def _r(rule_id: str, category=CATEGORY_EXAMPLES) -> RuleResult:
    return RuleResult("msg", "$", rule_id, Rule(rule_id, "error", category))


class TestRuleResultSet:
    def test_group_by_category(self) -> None:
        rs = RuleResultSet([_r("a"), _r("b", CATEGORY_SCHEMAS), _r("c")])
        assert [r.rule_id for r in rs.get_results_by_category("examples")] == ["a", "c"]
        assert [r.rule_id for r in rs.get_results_by_category("schemas")] == ["b"]

    def test_unknown_category_empty(self) -> None:
        rs = RuleResultSet([_r("a")])
        assert rs.get_results_by_category("owasp") == []

    def test_uncategorised_kept_but_not_grouped(self) -> None:
        rs = RuleResultSet([_r("a", None), RuleResult("m", "$", "x")])
        assert len(rs) == 2
        assert rs.categories_present() == []

    def test_returned_list_is_copy(self) -> None:
        rs = RuleResultSet([_r("a")])
        rs.get_results_by_category("examples").clear()
        assert len(rs.get_results_by_category("examples")) == 1

    def test_iter_in_arrival_order(self) -> None:
        rs = RuleResultSet([_r("b"), _r("a")])
        assert [r.rule_id for r in rs] == ["b", "a"]
        assert rs.categories_present() == ["examples"]
