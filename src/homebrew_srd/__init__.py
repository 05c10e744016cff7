"""
Homebrew SRD - D&D 5e homebrew authoring with SRD compliance checks, built with FastMCP.
"""

from .models import ContentType, HomebrewRecord
from .srd import is_srd_compliant, suggest_alternatives, validate_srd_compliance
from .storage import HomebrewStorage

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("homebrew-srd")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable
__all__ = [
    "ContentType",
    "HomebrewRecord",
    "HomebrewStorage",
    "is_srd_compliant",
    "suggest_alternatives",
    "validate_srd_compliance",
]
