"""
Score Table Coverage Validation.

Validates that a score table maps every combination of its index values to
exactly one case:
- Index validity: every index names an objective of the mission
- Index uniqueness: no objective is indexed twice in one table
- Case shape: every case has one value per index, each in range
- Coverage: no combination is missing and none is matched twice

Each pass reports independently; only the coverage pass is skipped when
the index list itself is broken.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..models import AnyObjective, ScoreTable
from .consistency import StringConsistencyValidator
from .diagnostics import DiagnosticCollector
from .domains import Combination, all_values, cross_product, format_combination

LOGGER = logging.getLogger(__name__)


@dataclass
class CoverageReport:
    """Match counts per generated combination of one score table."""

    indexes: List[str]
    counts: Dict[Combination, int] = field(default_factory=dict)

    @property
    def missing(self) -> List[Combination]:
        return [combo for combo, count in self.counts.items() if count == 0]

    @property
    def ambiguous(self) -> List[Combination]:
        return [combo for combo, count in self.counts.items() if count > 1]

    @property
    def complete(self) -> bool:
        """True iff every combination is matched by exactly one case."""
        return all(count == 1 for count in self.counts.values())


class ScoreCoverageValidator:
    """Verifies score tables against the objectives of their mission."""

    def __init__(
        self,
        collector: DiagnosticCollector,
        strings: StringConsistencyValidator
    ):
        self.collector = collector
        self.strings = strings

    def verify_score(
        self,
        objectives: Dict[str, AnyObjective],
        score: ScoreTable,
        location: Optional[str] = None
    ) -> Optional[CoverageReport]:
        """
        Verify one score table.

        Args:
            objectives: The mission's objectives by id.
            score: The score table to check.
            location: Label used in diagnostics.

        Returns:
            The coverage report, or None if the indexes were too broken
            to enumerate combinations.
        """
        indexes_ok = self._check_indexes(objectives, score, location)
        self._check_duplicate_indexes(score, location)
        self._check_cases(objectives, score, location)

        report = None
        if indexes_ok:
            report = self._check_coverage(objectives, score, location)
        else:
            LOGGER.debug("Skipping coverage for %s: invalid indexes", location)

        for case in score.cases:
            if case.error is not None:
                self.strings.check_string(case, "error", location)

        return report

    def _check_indexes(
        self,
        objectives: Dict[str, AnyObjective],
        score: ScoreTable,
        location: Optional[str]
    ) -> bool:
        """Check that every index is a known objective and mark it used."""
        ok = True
        for index in score.indexes:
            objective = objectives.get(index)
            if objective is None:
                self.collector.add_error(
                    "UNKNOWN_INDEX",
                    f"Index '{index}' not found in objectives",
                    location
                )
                ok = False
            else:
                objective.used = True
                if not all_values(objective):
                    # Reported by the objective check; nothing to enumerate
                    ok = False
        return ok

    def _check_duplicate_indexes(self, score: ScoreTable, location: Optional[str]) -> None:
        counts = Counter(score.indexes)
        for index, count in counts.items():
            if count > 1:
                self.collector.add_error(
                    "DUPLICATE_INDEX",
                    f"Objective '{index}' used more than once in same score",
                    location
                )

    def _check_cases(
        self,
        objectives: Dict[str, AnyObjective],
        score: ScoreTable,
        location: Optional[str]
    ) -> None:
        """Check case tuple length and per-position value membership."""
        for case in score.cases:
            if not case.has_outcome:
                self.collector.add_warning(
                    "MISSING_OUTCOME",
                    f"Case {case.index_refs} has no points, percentage or error",
                    location
                )

            if len(case.index_refs) != len(score.indexes):
                self.collector.add_error(
                    "INDEX_REF_COUNT",
                    f"Index-ref count does not match index count "
                    f"({len(case.index_refs)} != {len(score.indexes)})",
                    location
                )
                continue

            for index, value in zip(score.indexes, case.index_refs):
                objective = objectives.get(index)
                if objective is None:
                    continue
                if value not in all_values(objective):
                    self.collector.add_error(
                        "VALUE_OUT_OF_RANGE",
                        f"Value '{value}' is out of range for objective '{index}'",
                        location
                    )

    def _check_coverage(
        self,
        objectives: Dict[str, AnyObjective],
        score: ScoreTable,
        location: Optional[str]
    ) -> CoverageReport:
        """Match every generated combination against the declared cases."""
        domains = [all_values(objectives[index]) for index in score.indexes]
        case_counts = Counter(tuple(case.index_refs) for case in score.cases)

        report = CoverageReport(indexes=list(score.indexes))
        for combination in cross_product(domains):
            report.counts[combination] = case_counts.get(combination, 0)

        LOGGER.debug(
            "%s: %d combinations, %d cases",
            location, len(report.counts), len(score.cases)
        )

        for combination in report.missing:
            display = format_combination(score.indexes, combination)
            self.collector.add_error("NO_CASE", f"No case found for: {display}", location)

        for combination in report.ambiguous:
            display = format_combination(score.indexes, combination)
            count = report.counts[combination]
            self.collector.add_error(
                "MULTIPLE_CASES", f"{count} cases found for: {display}", location
            )

        return report
