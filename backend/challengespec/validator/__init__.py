"""
Challenge Validation Engine.

This package checks a challenge document in layers:
- Value domains: legal values per objective and their cross-product
- Coverage: every score table maps each combination to exactly one case
- Missions: objective ranges, defaults, options and usage
- String consistency: references, duplicates, unused and static strings
"""

from .diagnostics import Diagnostic, DiagnosticCollector
from .domains import all_values, merge_values, cross_product, format_combination
from .coverage import ScoreCoverageValidator, CoverageReport
from .consistency import (
    STATIC_STRINGS,
    StringConsistencyValidator,
    check_percentage_missions,
)
from .mission import MissionValidator
from .engine import ValidationEngine, ValidationResult, validate_challenge

__all__ = [
    # Diagnostics
    "Diagnostic",
    "DiagnosticCollector",
    # Value domains
    "all_values",
    "merge_values",
    "cross_product",
    "format_combination",
    # Coverage
    "ScoreCoverageValidator",
    "CoverageReport",
    # String consistency
    "STATIC_STRINGS",
    "StringConsistencyValidator",
    "check_percentage_missions",
    # Missions
    "MissionValidator",
    # Engine
    "ValidationEngine",
    "ValidationResult",
    "validate_challenge",
]
