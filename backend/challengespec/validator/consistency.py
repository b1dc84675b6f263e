"""
String Consistency Validation.

Validates that the display strings of a challenge are consistent across
all declared languages:
- Every referenced string id exists in every language
- No language is declared twice
- No string id is declared twice within one language
- Every declared string is referenced somewhere
- The static strings are present in every language
- At most one mission uses percentage scoring
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, List, Optional, Sequence

from ..models import StringTable
from .diagnostics import DiagnosticCollector

LOGGER = logging.getLogger(__name__)

STATIC_STRINGS = ("yes", "no")


class StringConsistencyValidator:
    """
    Cross-checks string references against the per-language string tables.

    Usage flags on the tables are set by check_string() while missions are
    verified; validate_tables() reads them and must only run after every
    mission has been processed.
    """

    def __init__(
        self,
        tables: Sequence[StringTable],
        collector: DiagnosticCollector,
        static_strings: Iterable[str] = STATIC_STRINGS
    ):
        """
        Initialize the string validator.

        Args:
            tables: String tables in declaration order.
            collector: Collector receiving the diagnostics.
            static_strings: Ids that must exist in every language but may
                go unreferenced.
        """
        self.tables = list(tables)
        self.collector = collector
        self.static_strings = tuple(static_strings)

    def check_string(self, owner: Any, field: str, location: Optional[str] = None) -> None:
        """
        Check the string id stored in ``owner.<field>`` against every language.

        Marks the id used in each table that defines it and reports each
        table that does not.
        """
        key = getattr(owner, field)
        for table in self.tables:
            if not table.has(key):
                self.collector.add_error(
                    "UNKNOWN_STRING",
                    f"Field '{field}' contains unknown string {key} "
                    f"for language {table.language}",
                    location
                )
            else:
                table.mark_used(key)

    def mark_referenced(self, string_ids: Iterable[str]) -> None:
        """Mark ids used wherever they are defined, without reporting anything."""
        for string_id in string_ids:
            for table in self.tables:
                if table.has(string_id):
                    table.mark_used(string_id)

    def validate_tables(self) -> None:
        """Run the document-level string checks."""
        self._check_double_languages()
        self._check_double_strings()
        self._check_unused_strings()
        self._check_static_strings()

    def _check_double_languages(self) -> None:
        counts = Counter(table.language for table in self.tables)
        for language, count in counts.items():
            if count > 1:
                self.collector.add_error(
                    "DUPLICATE_LANGUAGE",
                    f"Language {language} is defined more than once"
                )

    def _check_double_strings(self) -> None:
        for table in self.tables:
            for string_id, entry in table.entries.items():
                if entry.definition_count > 1:
                    self.collector.add_error(
                        "DUPLICATE_STRING",
                        f"String '{string_id}' in language {table.language} "
                        f"is defined more than once"
                    )

    def _check_unused_strings(self) -> None:
        for table in self.tables:
            for string_id, entry in table.entries.items():
                if string_id in self.static_strings:
                    continue
                if not entry.used:
                    self.collector.add_error(
                        "UNUSED_STRING",
                        f"String '{string_id}' in language {table.language} "
                        f"not used anywhere"
                    )

    def _check_static_strings(self) -> None:
        for table in self.tables:
            for string_id in self.static_strings:
                if not table.has(string_id):
                    self.collector.add_error(
                        "MISSING_STATIC_STRING",
                        f"Static string '{string_id}' is not defined "
                        f"for language {table.language}"
                    )

    def unused_strings(self) -> List[str]:
        """Ids that are not referenced in any language, static ids excluded."""
        unused = []
        for table in self.tables:
            for string_id, entry in table.entries.items():
                if not entry.used and string_id not in self.static_strings:
                    unused.append(f"{table.language}:{string_id}")
        return unused


def check_percentage_missions(
    percentage_missions: Sequence[str],
    collector: DiagnosticCollector,
    limit: int = 1
) -> None:
    """Report when more missions than allowed use percentage scoring."""
    LOGGER.debug("Percentage missions: %s", ", ".join(percentage_missions) or "none")
    if len(percentage_missions) > limit:
        if limit == 1:
            message = "There can be at most one mission with percentage scoring"
        else:
            message = f"There can be at most {limit} missions with percentage scoring"
        collector.add_error(
            "MULTIPLE_PERCENTAGE_MISSIONS",
            message,
            ", ".join(percentage_missions)
        )
