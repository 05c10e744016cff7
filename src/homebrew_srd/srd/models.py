"""
Compliance issue and report models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class IssueSeverity(str, Enum):
    """Severity level for compliance issues."""
    ERROR = "error"      # Content references protected material
    WARNING = "warning"  # Possibly problematic, still shareable
    INFO = "info"        # Informational note


class ComplianceStatus(str, Enum):
    """Overall verdict shown for a set of issues."""
    COMPLIANT = "compliant"
    WARNING = "warning"
    NON_COMPLIANT = "non-compliant"


@dataclass(frozen=True)
class ComplianceIssue:
    """A single SRD compliance finding."""
    severity: IssueSeverity
    message: str
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the plain ``{severity, message, field?}`` shape."""
        data: dict[str, Any] = {"severity": self.severity.value, "message": self.message}
        if self.field is not None:
            data["field"] = self.field
        return data


@dataclass
class ComplianceReport:
    """
    All compliance issues found for one record, grouped by severity.

    A record is compliant if it has no ERROR-level issues. Warnings and info
    notes are surfaced but don't block sharing.
    """
    content_type: str
    issues: list[ComplianceIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ComplianceIssue]:
        """Return all ERROR-level issues."""
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> list[ComplianceIssue]:
        """Return all WARNING-level issues."""
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]

    @property
    def info(self) -> list[ComplianceIssue]:
        """Return all INFO-level issues."""
        return [i for i in self.issues if i.severity == IssueSeverity.INFO]

    @property
    def compliant(self) -> bool:
        return not self.errors

    @property
    def status(self) -> ComplianceStatus:
        if self.errors:
            return ComplianceStatus.NON_COMPLIANT
        if self.warnings:
            return ComplianceStatus.WARNING
        return ComplianceStatus.COMPLIANT

    def to_dict(self) -> dict[str, Any]:
        return {
            "content_type": self.content_type,
            "status": self.status.value,
            "compliant": self.compliant,
            "issues": [i.to_dict() for i in self.issues],
        }

    def __str__(self) -> str:
        """Return a formatted summary of the report."""
        titles = {
            ComplianceStatus.COMPLIANT: "✓ SRD Compliant",
            ComplianceStatus.WARNING: "⚠ Potential SRD Issues",
            ComplianceStatus.NON_COMPLIANT: "✗ Not SRD Compliant",
        }
        lines = [f"SRD Compliance ({self.content_type}): {titles[self.status]}"]
        lines.append(
            f"Issues: {len(self.errors)} errors, {len(self.warnings)} warnings, {len(self.info)} info"
        )

        for heading, group in (
            ("Critical Issues", self.errors),
            ("Warnings", self.warnings),
            ("Information", self.info),
        ):
            if group:
                lines.append(f"\n{heading} ({len(group)}):")
                for issue in group:
                    prefix = f"{issue.field}: " if issue.field else ""
                    lines.append(f"  - {prefix}{issue.message}")

        if not self.issues:
            lines.append("No issues detected.")

        return "\n".join(lines)
