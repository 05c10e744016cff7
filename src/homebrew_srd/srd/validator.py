"""
SRD compliance validation for homebrew content.

Matches the free-text fields of a content record against the protected term
table and reports structured issues. Every function here is pure: no I/O, no
shared mutable state, and no exceptions for missing or malformed fields.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from .models import ComplianceIssue, ComplianceReport, IssueSeverity
from .terms import ALTERNATIVES, CATEGORY_ORDER, PROTECTED_TERMS, SUGGESTION_CATEGORY_ORDER

CATEGORY_SUGGESTIONS: dict[str, str] = {
    "settings": "Create your own setting with similar themes",
    "locations": "Rename this location for your own setting",
    "characters": "Create an original character with similar traits",
    "spells": "Rename this spell and change its flavor slightly",
    "items": "Create a similar item with a unique name",
}

DEFAULT_SUGGESTIONS: tuple[str, ...] = ("Create an original alternative", "Rename this element")


def _as_mapping(record: Any) -> Mapping[str, Any]:
    """Return a read-only view of a record's fields, whatever shape it came in."""
    if isinstance(record, BaseModel):
        return record.model_dump(by_alias=True)
    if isinstance(record, Mapping):
        return record
    return {}


def _text(value: Any) -> str | None:
    """Return value if it is a non-empty string, else None."""
    if isinstance(value, str) and value:
        return value
    return None


def check_for_protected_terms(text: Any, term_list: Iterable[str]) -> str | None:
    """Return the first term from term_list found in text.

    Matching is a case-insensitive substring search and terms are tried in
    list order.

    Args:
        text: Text to scan; empty, missing or non-string text never matches
        term_list: Candidate protected terms

    Returns:
        The matching term as written in term_list, or None

    Example:
        >>> check_for_protected_terms("The WATERDEEP docks", ["Neverwinter", "Waterdeep"])
        'Waterdeep'
    """
    text = _text(text)
    if text is None:
        return None
    text_lower = text.lower()

    for term in term_list:
        if term and term.lower() in text_lower:
            return term

    return None


def _scan_categories(text: str | None) -> str | None:
    """Return the first protected term in text, trying categories in canonical order."""
    if text is None:
        return None
    for category in CATEGORY_ORDER:
        found = check_for_protected_terms(text, PROTECTED_TERMS[category])
        if found:
            return found
    return None


def find_protected_terms(text: Any) -> list[tuple[str, str]]:
    """Find every protected term present in text.

    Returns:
        List of (category, term) pairs in category order, then term list order
    """
    text = _text(text)
    if text is None:
        return []
    text_lower = text.lower()
    return [
        (category, term)
        for category in CATEGORY_ORDER
        for term in PROTECTED_TERMS[category]
        if term.lower() in text_lower
    ]


def _error(message: str, field: str) -> ComplianceIssue:
    return ComplianceIssue(severity=IssueSeverity.ERROR, message=message, field=field)


def _check_character(content: Mapping[str, Any]) -> list[ComplianceIssue]:
    issues: list[ComplianceIssue] = []

    if check_for_protected_terms(content.get("class"), PROTECTED_TERMS["subclasses"]):
        issues.append(_error("Character's class or subclass is not in the SRD.", "class"))

    # There is no curated race list; the monster list stands in for non-SRD races.
    if check_for_protected_terms(content.get("race"), PROTECTED_TERMS["monsters"]):
        issues.append(_error("Character's race is not in the SRD.", "race"))

    return issues


def _check_world(content: Mapping[str, Any]) -> list[ComplianceIssue]:
    issues: list[ComplianceIssue] = []

    genre = _text(content.get("genre"))
    if genre and genre.lower() == "forgotten realms":
        issues.append(_error('"Forgotten Realms" is a protected setting not in the SRD.', "genre"))

    regions = content.get("regions")
    if isinstance(regions, Sequence) and not isinstance(regions, str):
        for region in regions:
            region_name = _as_mapping(region).get("name")
            if check_for_protected_terms(region_name, PROTECTED_TERMS["locations"]):
                issues.append(_error(
                    f'Region "{region_name}" contains protected content not in the SRD.',
                    "regions",
                ))
                break

    return issues


def _name_check(category: str, message: str):
    def check(content: Mapping[str, Any]) -> list[ComplianceIssue]:
        if check_for_protected_terms(content.get("name"), PROTECTED_TERMS[category]):
            return [_error(message, "name")]
        return []
    return check


TYPE_CHECKS = {
    "character": _check_character,
    "world": _check_world,
    "spell": _name_check("spells", "Spell name is a protected spell not in the SRD."),
    "item": _name_check("items", "Item name is a protected magic item not in the SRD."),
    "monster": _name_check("monsters", "Monster name is a protected creature not in the SRD."),
}


def validate_srd_compliance(record: Any, content_type: str) -> list[ComplianceIssue]:
    """Validate a content record against SRD guidelines.

    Issues are returned in a fixed order: name scan, description scan,
    checks specific to content_type, then generic warnings.

    Args:
        record: Mapping of field name to value, or a pydantic model
        content_type: Content type tag (character, world, spell, item,
            monster). Other tags only get the generic checks.

    Returns:
        List of ComplianceIssue, possibly empty
    """
    content = _as_mapping(record)
    issues: list[ComplianceIssue] = []

    name = _text(content.get("name"))
    found = _scan_categories(name)
    if found:
        issues.append(_error(
            f'Name contains "{found}", which is protected content not in the SRD.',
            "name",
        ))

    description = _text(content.get("description"))
    found = _scan_categories(description)
    if found:
        issues.append(_error(
            f'Description contains "{found}", which is protected content not in the SRD.',
            "description",
        ))

    type_check = TYPE_CHECKS.get(content_type) if isinstance(content_type, str) else None
    if type_check is not None:
        issues.extend(type_check(content))

    # Only the lowercase spelling is flagged.
    if description and "copyright" in description:
        issues.append(ComplianceIssue(
            severity=IssueSeverity.WARNING,
            message='Description contains the word "copyright", which might indicate copyrighted material.',
            field="description",
        ))

    return issues


def is_srd_compliant(record: Any, content_type: str) -> bool:
    """Return True if the record has no ERROR-level compliance issues."""
    issues = validate_srd_compliance(record, content_type)
    return not any(issue.severity == IssueSeverity.ERROR for issue in issues)


def build_compliance_report(record: Any, content_type: str) -> ComplianceReport:
    """Validate a record and wrap the issues in a ComplianceReport."""
    return ComplianceReport(
        content_type=str(content_type),
        issues=validate_srd_compliance(record, content_type),
    )


def suggest_alternatives(term: Any) -> list[str]:
    """Suggest SRD-compliant replacement phrasing for a protected term.

    Curated suggestions win. Otherwise the term's category decides a generic
    suggestion, and unknown terms get a generic default pair.

    Example:
        >>> suggest_alternatives("Waterdeep")
        ['Great City', 'Metropolis', 'Capital City']
        >>> suggest_alternatives("Sharn")
        ['Rename this location for your own setting']
    """
    if isinstance(term, str):
        curated = ALTERNATIVES.get(term)
        if curated:
            return list(curated)

        for category in SUGGESTION_CATEGORY_ORDER:
            if term in PROTECTED_TERMS[category]:
                return [CATEGORY_SUGGESTIONS[category]]

    return list(DEFAULT_SUGGESTIONS)
