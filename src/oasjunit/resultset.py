"""Read-only collection of lint findings, indexable by rule category."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from oasjunit.rules import RuleResult


class RuleResultSet:
    """Findings in arrival order, grouped lazily by category id."""

    def __init__(self, results: Iterable[RuleResult] = ()) -> None:
        self._results: tuple[RuleResult, ...] = tuple(results)
        self._by_category: dict[str, list[RuleResult]] = {}
        for r in self._results:
            cat_id = r.category_id
            if cat_id is None:
                continue
            self._by_category.setdefault(cat_id, []).append(r)

    @property
    def results(self) -> tuple[RuleResult, ...]:
        return self._results

    def get_results_by_category(self, category_id: str) -> list[RuleResult]:
        """Return findings for a category, in arrival order (copy)."""
        return list(self._by_category.get(category_id, ()))

    def categories_present(self) -> list[str]:
        return list(self._by_category)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[RuleResult]:
        return iter(self._results)
