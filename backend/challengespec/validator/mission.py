"""
Mission Validation.

Checks one mission: its strings, its objectives (ranges, defaults and
enum options) and its score tables, then reports objectives that no
score table indexes.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional

from ..models import AnyObjective, EnumObjective, Mission, NumberObjective
from .consistency import StringConsistencyValidator
from .coverage import CoverageReport, ScoreCoverageValidator
from .diagnostics import DiagnosticCollector
from .domains import all_values

LOGGER = logging.getLogger(__name__)


class MissionValidator:
    """Verifies missions against the shared string tables."""

    def __init__(
        self,
        collector: DiagnosticCollector,
        strings: StringConsistencyValidator
    ):
        self.collector = collector
        self.strings = strings
        self.coverage = ScoreCoverageValidator(collector, strings)

    def verify_mission(self, mission: Mission) -> List[Optional[CoverageReport]]:
        """
        Verify a mission.

        Args:
            mission: Freshly built mission model; its objective usage flags
                are only meaningful once this call returns.

        Returns:
            One coverage report per score table, None where the table's
            indexes could not be enumerated.
        """
        LOGGER.info("Verifying mission %s...", mission.name)
        location = f"mission {mission.name}"

        self.strings.check_string(mission, "name", location)
        self.strings.check_string(mission, "description", location)

        self._check_duplicate_objectives(mission, location)
        for objective in mission.objectives:
            self.verify_objective(objective, location)

        objectives = mission.objectives_by_id()
        reports = []
        for number, score in enumerate(mission.scores, start=1):
            reports.append(self.coverage.verify_score(
                objectives, score, f"{location}, score {number}"
            ))

        for objective_id, objective in objectives.items():
            if not objective.used:
                self.collector.add_error(
                    "UNUSED_OBJECTIVE",
                    f"Objective '{objective_id}' not used in any score",
                    location
                )

        return reports

    def verify_objective(self, objective: AnyObjective, location: Optional[str] = None) -> None:
        """Check an objective's strings, range and default value."""
        self.strings.check_string(objective, "description", location)

        inverted = isinstance(objective, NumberObjective) and objective.min > objective.max
        if inverted:
            self.collector.add_error(
                "INVALID_RANGE",
                f"Objective '{objective.id}' has min {objective.min} "
                f"greater than max {objective.max}",
                location
            )

        if (
            objective.default is not None
            and not inverted
            and objective.default not in all_values(objective)
        ):
            self.collector.add_error(
                "DEFAULT_OUT_OF_RANGE",
                f"Default value '{objective.default}' for objective "
                f"'{objective.id}' out of range",
                location
            )

        if isinstance(objective, EnumObjective):
            counts = Counter(option.name for option in objective.options)
            for name, count in counts.items():
                if count > 1:
                    self.collector.add_error(
                        "DUPLICATE_OPTION",
                        f"Option '{name}' of objective '{objective.id}' "
                        f"is defined more than once",
                        location
                    )
            for option in objective.options:
                self.strings.check_string(option, "description", location)

    def _check_duplicate_objectives(self, mission: Mission, location: str) -> None:
        counts = Counter(objective.id for objective in mission.objectives)
        for objective_id, count in counts.items():
            if count > 1:
                self.collector.add_error(
                    "DUPLICATE_OBJECTIVE",
                    f"Objective '{objective_id}' is defined more than once",
                    location
                )
