"""
Export homebrew content to JSON or a standalone HTML page.
"""

import html
import json
from datetime import date, datetime
from enum import Enum
from typing import Any

from .dice import calculate_ability_modifier, format_ability_modifier
from .models import ContentType, to_iso, utc_now_iso

RecordsByCollection = dict[str, list[dict[str, Any]]]

ABILITIES = ("strength", "dexterity", "constitution", "intelligence", "wisdom", "charisma")

HTML_STYLE = """
    body { font-family: Georgia, serif; max-width: 900px; margin: 0 auto; padding: 2rem; color: #222; }
    h1 { border-bottom: 2px solid #7a200d; color: #7a200d; }
    h2 { color: #7a200d; margin-top: 2rem; }
    .item { border: 1px solid #ddd; border-radius: 6px; padding: 1rem; margin-bottom: 1rem; }
    .item-header { display: flex; justify-content: space-between; align-items: baseline; }
    .item-name { font-size: 1.2rem; font-weight: bold; }
    .item-type { font-style: italic; color: #555; }
    .property { margin: 0.25rem 0; }
    .abilities { display: flex; gap: 1rem; margin: 0.5rem 0; }
    .ability { text-align: center; }
    .badge { background: #fde2e2; color: #b91c1c; border-radius: 4px; padding: 0 0.4rem; font-size: 0.8rem; }
    .footer { margin-top: 3rem; font-size: 0.8rem; color: #777; text-align: center; }
"""

# Record fields shown as "Label: value" lines, per collection.
PROPERTY_FIELDS: dict[str, tuple[tuple[str, str], ...]] = {
    "characters": (("race", "Race"), ("class", "Class"), ("level", "Level")),
    "classes": (("hitDie", "Hit Die"), ("primaryAbility", "Primary Ability")),
    "subclasses": (("parentClass", "Class"),),
    "races": (("size", "Size"), ("speed", "Speed")),
    "backgrounds": (("skillProficiencies", "Skill Proficiencies"), ("toolProficiencies", "Tool Proficiencies"),
                    ("languages", "Languages")),
    "feats": (("prerequisites", "Prerequisites"),),
    "monsters": (("armorClass", "Armor Class"), ("hitPoints", "Hit Points"), ("challengeRating", "Challenge")),
    "items": (("type", "Type"), ("rarity", "Rarity"), ("requiresAttunement", "Requires Attunement")),
    "spells": (("level", "Level"), ("school", "School"), ("castingTime", "Casting Time"),
               ("range", "Range"), ("duration", "Duration")),
    "worlds": (("genre", "Genre"),),
}


class ExportFormat(str, Enum):
    """Supported export formats."""
    JSON = "json"
    HTML = "html"

    @property
    def extension(self) -> str:
        return self.value


def select_records(records: RecordsByCollection, srd_only: bool = False) -> RecordsByCollection:
    """Copy the collections to export, dropping non-compliant records when srd_only is set.

    Collections left empty are omitted.
    """
    selected: RecordsByCollection = {}
    for collection, items in records.items():
        kept = [r for r in items if not srd_only or r.get("isSrdCompliant", True)]
        if kept:
            selected[collection] = kept
    return selected


def export_to_json(records: RecordsByCollection, now: datetime | None = None) -> str:
    """Serialise collections as a pretty-printed JSON document with an export timestamp."""
    payload: dict[str, Any] = {"exportedAt": to_iso(now) if now else utc_now_iso()}
    payload.update(records)
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _esc(value: Any) -> str:
    return html.escape(str(value))


def _singular(collection: str) -> str:
    try:
        tag = ContentType(collection).tag
    except ValueError:
        return collection.capitalize()
    return "NPC" if tag == "npc" else tag.capitalize()


def _format_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def _render_abilities(abilities: dict[str, Any]) -> str:
    cells = []
    for ability in ABILITIES:
        score = abilities.get(ability)
        if not isinstance(score, int):
            score = 10
        modifier = format_ability_modifier(calculate_ability_modifier(score))
        cells.append(
            f'<div class="ability"><div class="ability-name">{ability[:3].upper()}</div>'
            f"<div>{score} ({modifier})</div></div>"
        )
    return f'<div class="abilities">{"".join(cells)}</div>'


def _render_record(collection: str, record: dict[str, Any]) -> str:
    kind = _singular(collection)
    name = record.get("name") or f"Unnamed {kind}"

    parts = [
        '<div class="item">',
        '<div class="item-header">',
        f'<div class="item-name">{_esc(name)}</div>',
        f'<div class="item-type">{_esc(kind)}</div>',
        "</div>",
    ]
    if not record.get("isSrdCompliant", True):
        parts.append('<span class="badge">Not SRD compliant</span>')

    for key, label in PROPERTY_FIELDS.get(collection, ()):
        value = record.get(key)
        if value not in (None, "", []):
            parts.append(f'<div class="property"><strong>{_esc(label)}:</strong> {_esc(_format_value(value))}</div>')

    abilities = record.get("abilities")
    if collection in ("characters", "monsters") and isinstance(abilities, dict):
        parts.append(_render_abilities(abilities))

    if record.get("description"):
        parts.append(f'<div class="item-description">{_esc(record["description"])}</div>')

    parts.append("</div>")
    return "\n".join(parts)


def export_to_html(records: RecordsByCollection, title: str = "D&D Homebrew Content") -> str:
    """Render collections as a standalone HTML page, one section per collection."""
    sections = []
    for collection, items in records.items():
        cards = "\n".join(_render_record(collection, r) for r in items)
        sections.append(
            f'<div class="section">\n<h2>{_esc(collection.capitalize())}</h2>\n{cards}\n</div>'
        )

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n<meta charset="utf-8">\n'
        f"<title>{_esc(title)}</title>\n<style>{HTML_STYLE}</style>\n</head>\n<body>\n"
        f'<div class="container">\n<h1>{_esc(title)}</h1>\n'
        + "\n".join(sections)
        + '\n<div class="footer">Created with homebrew-srd</div>\n</div>\n</body>\n</html>\n'
    )


def export_filename(fmt: ExportFormat, today: date | None = None) -> str:
    """File name for an export, e.g. dnd-homebrew-export-2024-05-01.json."""
    today = today or date.today()
    return f"dnd-homebrew-export-{today.isoformat()}.{fmt.extension}"


def export_records(records: RecordsByCollection, fmt: ExportFormat, srd_only: bool = False) -> str:
    """Select records and render them in the requested format."""
    selected = select_records(records, srd_only=srd_only)
    if fmt == ExportFormat.HTML:
        return export_to_html(selected)
    return export_to_json(selected)
