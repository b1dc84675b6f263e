"""
Challenge-Spec: validation of competition scoring definitions.

This package loads challenge documents (missions, objectives, score tables
and per-language strings) and checks that every score table is complete
and unambiguous and that every display string is defined and used.
"""

from .models import (
    Mission,
    ObjectiveType,
    NumberObjective,
    YesNoObjective,
    EnumObjective,
    EnumOption,
    ScoreTable,
    ScoreCase,
    StringTable,
    StringEntry,
    build_mission,
    build_string_tables,
    mission_string_ids,
)

__version__ = "1.0.0"
__all__ = [
    "Mission",
    "ObjectiveType",
    "NumberObjective",
    "YesNoObjective",
    "EnumObjective",
    "EnumOption",
    "ScoreTable",
    "ScoreCase",
    "StringTable",
    "StringEntry",
    "build_mission",
    "build_string_tables",
    "mission_string_ids",
]
