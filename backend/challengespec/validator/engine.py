"""
Validation Engine.

Builds the challenge models, verifies every mission, then runs the
document-level checks once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..loader import ChallengeLoadError, load_challenge
from ..models import build_mission, build_string_tables, mission_string_ids
from .consistency import STATIC_STRINGS, StringConsistencyValidator, check_percentage_missions
from .diagnostics import DiagnosticCollector
from .mission import MissionValidator

LOGGER = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """
    Result of validating one challenge document.

    The verdict is valid iff no errors were collected (or, in strict mode,
    no warnings either).
    """

    valid: bool
    collector: DiagnosticCollector = field(default_factory=DiagnosticCollector)
    missions_checked: int = 0
    percentage_missions: List[str] = field(default_factory=list)
    orphans: List[str] = field(default_factory=list)

    @property
    def total_errors(self) -> int:
        return self.collector.error_count

    @property
    def total_warnings(self) -> int:
        return self.collector.warning_count

    @property
    def messages(self) -> List[str]:
        return self.collector.messages()

    def summary(self) -> str:
        """Generate a summary of validation results."""
        lines = []
        status = "PASSED" if self.valid else "FAILED"
        lines.append(f"Validation {status}")
        lines.append(f"  Missions: {self.missions_checked}")
        lines.append(f"  Errors: {self.total_errors}")
        lines.append(f"  Warnings: {self.total_warnings}")
        if self.percentage_missions:
            lines.append(f"  Percentage Missions: {', '.join(self.percentage_missions)}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "valid": self.valid,
            "total_errors": self.total_errors,
            "total_warnings": self.total_warnings,
            "missions_checked": self.missions_checked,
            "percentage_missions": self.percentage_missions,
            "orphans": self.orphans,
            "diagnostics": [d.to_dict() for d in self.collector.diagnostics],
        }


class ValidationEngine:
    """
    Challenge validation engine.

    Each call to validate() builds fresh models and a fresh collector, so
    repeated runs over the same document give identical results.
    """

    def __init__(
        self,
        static_strings: Iterable[str] = STATIC_STRINGS,
        max_percentage_missions: int = 1,
        schema_path: Optional[Path] = None
    ):
        """
        Initialize the validation engine.

        Args:
            static_strings: String ids required in every language.
            max_percentage_missions: How many missions may use percentage scoring.
            schema_path: Local XSD used when validating XML files.
        """
        self.static_strings = tuple(static_strings)
        self.max_percentage_missions = max_percentage_missions
        self.schema_path = schema_path

    def validate(
        self,
        document: Dict[str, Any],
        strict: bool = False
    ) -> ValidationResult:
        """
        Validate a decoded challenge document.

        Args:
            document: The decoded document.
            strict: If True, warnings also fail the verdict.

        Returns:
            ValidationResult with all diagnostics.
        """
        result = ValidationResult(valid=True)
        collector = result.collector

        LOGGER.info("Reading strings...")
        try:
            tables = build_string_tables(document)
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            collector.add_error("MALFORMED_DOCUMENT", f"Can not read string tables: {e}")
            result.valid = False
            return result
        for table in tables:
            LOGGER.info("%d strings found for language %s", len(table.entries), table.language)

        missions = document.get("missions") or []
        if not missions:
            collector.add_error("MALFORMED_DOCUMENT", "Challenge declares no missions")
            result.valid = False
            return result

        strings = StringConsistencyValidator(tables, collector, self.static_strings)
        mission_validator = MissionValidator(collector, strings)

        LOGGER.info("Verifying missions...")
        for number, block in enumerate(missions, start=1):
            try:
                mission = build_mission(block)
            except ValidationError as e:
                collector.add_error(
                    "MALFORMED_MISSION",
                    f"Mission {number} is malformed: {e.error_count()} problem(s), "
                    + "; ".join(_describe_error(err) for err in e.errors()),
                    f"mission {number}"
                )
                strings.mark_referenced(mission_string_ids(block))
                continue

            mission_validator.verify_mission(mission)
            result.missions_checked += 1
            if mission.has_percentage:
                result.percentage_missions.append(mission.name)

        strings.validate_tables()
        check_percentage_missions(
            result.percentage_missions, collector, self.max_percentage_missions
        )
        result.orphans = strings.unused_strings()

        result.valid = collector.valid
        if strict and result.total_warnings > 0:
            result.valid = False

        if result.valid:
            LOGGER.info("Challenge file ok")
        else:
            LOGGER.info("Total of %d errors found in challenge", result.total_errors)

        return result

    def validate_file(
        self,
        path: Path,
        strict: bool = False
    ) -> ValidationResult:
        """
        Validate a challenge file.

        Args:
            path: Path to a YAML, JSON or XML challenge file.
            strict: If True, fail on warnings.

        Returns:
            ValidationResult; load failures are reported as LOAD_ERROR.
        """
        try:
            document = load_challenge(Path(path), self.schema_path)
        except ChallengeLoadError as e:
            result = ValidationResult(valid=False)
            result.collector.add_error("LOAD_ERROR", str(e))
            return result

        return self.validate(document, strict=strict)


def _describe_error(error: Dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg')}" if location else str(error.get("msg"))


def validate_challenge(
    path: Path,
    strict: bool = False,
    schema_path: Optional[Path] = None,
    max_percentage_missions: int = 1
) -> ValidationResult:
    """
    Convenience function to validate a challenge file.

    Args:
        path: Path to the challenge file.
        strict: If True, fail on warnings.
        schema_path: Optional local XSD for XML files.
        max_percentage_missions: How many missions may use percentage scoring.

    Returns:
        ValidationResult with all diagnostics.
    """
    engine = ValidationEngine(
        schema_path=schema_path,
        max_percentage_missions=max_percentage_missions,
    )
    return engine.validate_file(path, strict=strict)
