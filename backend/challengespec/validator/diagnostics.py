"""
Diagnostic collection.

Every check in the validator writes into a DiagnosticCollector that is
created empty for one validation run and read once at the end.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Diagnostic:
    """A single violated rule found in a challenge document."""

    category: str
    message: str
    location: Optional[str] = None
    severity: str = "error"

    def __str__(self) -> str:
        prefix = f"[{self.severity.upper()}]"
        if self.location:
            return f"{prefix} {self.location}: {self.message}"
        return f"{prefix} {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "category": self.category,
            "message": self.message,
            "location": self.location,
            "severity": self.severity,
        }


@dataclass
class DiagnosticCollector:
    """Accumulates diagnostics in emission order."""

    diagnostics: List[Diagnostic] = field(default_factory=list)

    def add(
        self,
        category: str,
        message: str,
        location: Optional[str] = None,
        severity: str = "error"
    ) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(Diagnostic(
            category=category,
            message=message,
            location=location,
            severity=severity
        ))

    def add_error(self, category: str, message: str, location: Optional[str] = None) -> None:
        self.add(category, message, location, severity="error")

    def add_warning(self, category: str, message: str, location: Optional[str] = None) -> None:
        self.add(category, message, location, severity="warning")

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "error"]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "warning"]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def valid(self) -> bool:
        """True iff no errors were collected."""
        return self.error_count == 0

    def messages(self, category: Optional[str] = None) -> List[str]:
        """Plain messages, optionally filtered by category."""
        return [
            d.message for d in self.diagnostics
            if category is None or d.category == category
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "valid": self.valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
