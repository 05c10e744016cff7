"""
Data models for homebrew content records.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from shortuuid import random


def to_iso(moment: datetime) -> str:
    """UTC ISO-8601 string with millisecond precision and a Z suffix, e.g. 2024-05-01T12:00:00.000Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    """Current time as an ISO-8601 string with millisecond precision."""
    return to_iso(datetime.now(timezone.utc))


class ContentType(str, Enum):
    """Homebrew content collections and the validator tag each one uses."""
    CHARACTERS = "characters"
    CLASSES = "classes"
    SUBCLASSES = "subclasses"
    RACES = "races"
    BACKGROUNDS = "backgrounds"
    FEATS = "feats"
    MONSTERS = "monsters"
    ITEMS = "items"
    SPELLS = "spells"
    WORLDS = "worlds"
    REGIONS = "regions"
    LOCATIONS = "locations"
    FACTIONS = "factions"
    NPCS = "npcs"
    DEITIES = "deities"

    @property
    def tag(self) -> str:
        """Singular content-type tag passed to the SRD validator."""
        return _TAGS[self]


_TAGS = {
    ContentType.CHARACTERS: "character",
    ContentType.CLASSES: "class",
    ContentType.SUBCLASSES: "subclass",
    ContentType.RACES: "race",
    ContentType.BACKGROUNDS: "background",
    ContentType.FEATS: "feat",
    ContentType.MONSTERS: "monster",
    ContentType.ITEMS: "item",
    ContentType.SPELLS: "spell",
    ContentType.WORLDS: "world",
    ContentType.REGIONS: "region",
    ContentType.LOCATIONS: "location",
    ContentType.FACTIONS: "faction",
    ContentType.NPCS: "npc",
    ContentType.DEITIES: "deity",
}


class HomebrewRecord(BaseModel):
    """A piece of homebrew content.

    Only the fields every editor shares are declared. Type-specific fields
    (``class``, ``race``, ``genre``, ``regions``, ``level``, ...) are kept as
    extra attributes and round-trip unchanged.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(default_factory=lambda: random(length=8))
    name: str = ""
    description: str | None = ""
    created_at: str = Field(default_factory=utc_now_iso, alias="createdAt")
    updated_at: str = Field(default_factory=utc_now_iso, alias="updatedAt")
    is_srd_compliant: bool = Field(default=True, alias="isSrdCompliant")

    def to_record(self) -> dict[str, Any]:
        """Dump to the camelCase JSON shape stored on disk."""
        return self.model_dump(by_alias=True, mode="json")
