"""
Protected term table for SRD compliance checks.

The table is shipped as a YAML data file next to this module and loaded once
at import. It is exposed as read-only mappings of tuples so that no caller can
mutate the shared data.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import yaml

TERMS_FILE = Path(__file__).parent / "data" / "protected_terms.yaml"

# Scan order for name/description checks. A YAML mapping keeps file order,
# but the order is part of the validator's contract so it is pinned here.
CATEGORY_ORDER: tuple[str, ...] = (
    "settings",
    "locations",
    "characters",
    "subclasses",
    "factions",
    "monsters",
    "items",
    "spells",
)

# Membership order used when falling back to a category-level suggestion.
SUGGESTION_CATEGORY_ORDER: tuple[str, ...] = (
    "settings",
    "locations",
    "characters",
    "spells",
    "items",
)


def load_term_tables(path: Path = TERMS_FILE) -> tuple[
    Mapping[str, tuple[str, ...]], Mapping[str, tuple[str, ...]]
]:
    """Load the protected term table and curated alternatives from YAML.

    Args:
        path: Path to the YAML data file

    Returns:
        Tuple of (categories, alternatives), both read-only mappings

    Raises:
        FileNotFoundError: If the data file doesn't exist
        ValueError: If a category from CATEGORY_ORDER is missing
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    raw_categories = data.get("categories") or {}
    missing = [c for c in CATEGORY_ORDER if c not in raw_categories]
    if missing:
        raise ValueError(f"Protected term file is missing categories: {', '.join(missing)}")

    categories = {
        category: tuple(str(term) for term in raw_categories[category] or ())
        for category in CATEGORY_ORDER
    }
    alternatives = {
        str(term): tuple(str(s) for s in suggestions or ())
        for term, suggestions in (data.get("alternatives") or {}).items()
    }
    return MappingProxyType(categories), MappingProxyType(alternatives)


PROTECTED_TERMS, ALTERNATIVES = load_term_tables()
