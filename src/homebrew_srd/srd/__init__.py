"""
SRD compliance validation for homebrew D&D content.

Flags references to protected, non-SRD material by matching record fields
against a curated term table.
"""

from .models import ComplianceIssue, ComplianceReport, ComplianceStatus, IssueSeverity
from .terms import ALTERNATIVES, CATEGORY_ORDER, PROTECTED_TERMS
from .validator import (
    build_compliance_report,
    check_for_protected_terms,
    find_protected_terms,
    is_srd_compliant,
    suggest_alternatives,
    validate_srd_compliance,
)

__all__ = [
    "ALTERNATIVES",
    "CATEGORY_ORDER",
    "PROTECTED_TERMS",
    "ComplianceIssue",
    "ComplianceReport",
    "ComplianceStatus",
    "IssueSeverity",
    "build_compliance_report",
    "check_for_protected_terms",
    "find_protected_terms",
    "is_srd_compliant",
    "suggest_alternatives",
    "validate_srd_compliance",
]
