"""
Homebrew SRD MCP Server
Authoring, SRD compliance checking and export of D&D 5e homebrew content,
built with the FastMCP framework.
"""

import json
import logging
import os
from pathlib import Path
from typing import Annotated, Any, Literal

from dotenv import load_dotenv
from fastmcp import FastMCP
from pydantic import Field

from .dice import (
    DiceNotationError,
    calculate_ability_modifier,
    format_ability_modifier,
    generate_ability_scores as roll_ability_scores,
    roll_dice_notation,
)
from .export import ExportFormat, export_filename, export_records
from .models import ContentType
from .srd import ComplianceReport, build_compliance_report, find_protected_terms, suggest_alternatives
from .storage import HomebrewStorage, HomebrewStorageError, format_storage_size, resolve_collection

logger = logging.getLogger("homebrew-srd")

logging.basicConfig(
    level=logging.DEBUG,
    )

if not load_dotenv():
    logger.warning("❌ .env file invalid or not found! Using default storage directory.")

data_path = Path(os.getenv("HOMEBREW_STORAGE_DIR", "homebrew_data")).resolve()
logger.debug(f"📂 Data path: {data_path}")

storage = HomebrewStorage(data_dir=data_path)
logger.debug("✅ Storage layer initialized")

mcp = FastMCP(
    name="homebrew-srd"
)

logger.debug("✅ Server initialized, registering tools")


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------

def _parse_json_object(value: str) -> dict[str, Any]:
    """Parse a JSON object string, raising ValueError for anything else."""
    try:
        parsed = json.loads(value) if value else {}
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e.msg}") from e
    if not isinstance(parsed, dict):
        raise ValueError("Expected a JSON object")
    return parsed


def _parse_json_records(value: str) -> list[dict[str, Any]]:
    """Parse a JSON list of objects."""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e.msg}") from e
    if not isinstance(parsed, list) or not all(isinstance(r, dict) for r in parsed):
        raise ValueError("Expected a JSON list of objects")
    return parsed


def _suggestions_for(record: dict[str, Any]) -> dict[str, list[str]]:
    """Replacement suggestions for every protected term in a record's name and description."""
    suggestions: dict[str, list[str]] = {}
    for field_name in ("name", "description"):
        for _, term in find_protected_terms(record.get(field_name)):
            suggestions.setdefault(term, suggest_alternatives(term))
    return suggestions


def _format_report(report: ComplianceReport, record: dict[str, Any]) -> str:
    lines = [str(report)]
    suggestions = _suggestions_for(record) if report.issues else {}
    if suggestions:
        lines.append("\nSuggested alternatives:")
        for term, options in suggestions.items():
            lines.append(f"  - {term}: {', '.join(options)}")
    return "\n".join(lines)


def _compliance_badge(record: dict[str, Any]) -> str:
    return "✓ SRD" if record.get("isSrdCompliant", True) else "✗ not SRD"


def _filter_by_compliance(records: list[dict[str, Any]], srd_filter: str) -> list[dict[str, Any]]:
    if srd_filter == "srd":
        return [r for r in records if r.get("isSrdCompliant", True)]
    if srd_filter == "non-srd":
        return [r for r in records if not r.get("isSrdCompliant", True)]
    return records


def _validate_record_logic(record: dict[str, Any], content_type: str) -> str:
    report = build_compliance_report(record, content_type)
    return _format_report(report, record)


# ----------------------------------------------------------------------
# Tools
# ----------------------------------------------------------------------

# SRD compliance tools
@mcp.tool
def validate_content(
    content_type: Annotated[str, Field(description="Content type: character, world, spell, item, monster (others get generic checks)")],
    record: Annotated[str, Field(description="JSON object with the content fields, e.g. {\"name\": \"...\", \"description\": \"...\"}")],
) -> str:
    """Check a piece of homebrew content for references to non-SRD material."""
    try:
        data = _parse_json_object(record)
    except ValueError as e:
        return f"Error: {e}"
    return _validate_record_logic(data, content_type)


@mcp.tool
def suggest_srd_alternatives(
    term: Annotated[str, Field(description="Protected term to replace (e.g. 'Waterdeep')")],
) -> str:
    """Suggest SRD-compliant replacements for a protected term."""
    options = suggest_alternatives(term)
    return f"Alternatives for '{term}':\n" + "\n".join(f"  - {o}" for o in options)


# Content management tools
@mcp.tool
def create_content(
    collection: Annotated[str, Field(description=f"Collection: {', '.join(c.value for c in ContentType)}")],
    record: Annotated[str, Field(description="JSON object with the content fields")],
) -> str:
    """Create a homebrew record and check it for SRD compliance."""
    try:
        content_type = resolve_collection(collection)
        created = storage.add(content_type, _parse_json_object(record))
    except (HomebrewStorageError, ValueError) as e:
        return f"Error: {e}"

    summary = f"🌟 Created {content_type.tag} '{created['name']}' (id: {created['id']})"
    return summary + "\n" + _validate_record_logic(created, content_type.tag)


@mcp.tool
def update_content(
    collection: Annotated[str, Field(description="Collection the record belongs to")],
    record_id: Annotated[str, Field(description="Record id")],
    changes: Annotated[str, Field(description="JSON object with the fields to change")],
) -> str:
    """Update a homebrew record and re-check its SRD compliance."""
    try:
        content_type = resolve_collection(collection)
        updated = storage.update(content_type, record_id, _parse_json_object(changes))
    except (HomebrewStorageError, ValueError) as e:
        return f"Error: {e}"

    summary = f"📝 Updated {content_type.tag} '{updated['name']}'"
    return summary + "\n" + _validate_record_logic(updated, content_type.tag)


@mcp.tool
def get_content(
    collection: Annotated[str, Field(description="Collection the record belongs to")],
    record_id: Annotated[str, Field(description="Record id")],
) -> str:
    """Get a homebrew record as JSON."""
    try:
        record = storage.get(collection, record_id)
    except HomebrewStorageError as e:
        return f"Error: {e}"
    return json.dumps(record, indent=2, ensure_ascii=False)


@mcp.tool
def list_content(
    collection: Annotated[str, Field(description="Collection to list")],
    srd_filter: Annotated[
        Literal["all", "srd", "non-srd"],
        Field(description="Which records to list: all, only SRD-compliant (srd) or only non-compliant (non-srd)"),
    ] = "all",
) -> str:
    """List the records in a homebrew collection."""
    try:
        records = storage.list(collection)
    except HomebrewStorageError as e:
        return f"Error: {e}"

    records = _filter_by_compliance(records, srd_filter)
    if not records:
        return f"No {collection} found."

    lines = [f"**{collection.capitalize()}** ({len(records)}):"]
    for r in records:
        lines.append(f"  - {r.get('name') or '(unnamed)'} [{r.get('id')}] {_compliance_badge(r)}")
    return "\n".join(lines)


@mcp.tool
def delete_content(
    collection: Annotated[str, Field(description="Collection the record belongs to")],
    record_id: Annotated[str, Field(description="Record id")],
) -> str:
    """Delete a homebrew record."""
    try:
        removed = storage.delete(collection, record_id)
    except HomebrewStorageError as e:
        return f"Error: {e}"
    return f"🗑️ Deleted '{removed.get('name') or record_id}'"


@mcp.tool
def import_content(
    collection: Annotated[str, Field(description="Collection to replace")],
    records: Annotated[str, Field(description="JSON list of records, e.g. a collection from a JSON export")],
) -> str:
    """Replace a collection with imported records, re-checking each for SRD compliance."""
    try:
        count = storage.import_records(collection, _parse_json_records(records))
    except (HomebrewStorageError, ValueError) as e:
        return f"Error: {e}"
    return f"📥 Imported {count} records into {collection}"


# Export tools
@mcp.tool
def export_content(
    export_format: Annotated[str, Field(description="Export format: json or html")] = "json",
    collections: Annotated[list[str] | None, Field(description="Collections to export (default: all)")] = None,
    srd_only: Annotated[bool, Field(description="Skip records that aren't SRD compliant")] = False,
) -> str:
    """Export homebrew content to a JSON or HTML file in the data directory."""
    try:
        fmt = ExportFormat(export_format.lower().strip())
        selected = [resolve_collection(c).value for c in collections] if collections else None
    except (HomebrewStorageError, ValueError) as e:
        return f"Error: {e}"

    records = storage.all_records()
    if selected is not None:
        records = {k: v for k, v in records.items() if k in selected}

    output = export_records(records, fmt, srd_only=srd_only)
    export_dir = storage.data_dir / "exports"
    path = export_dir / export_filename(fmt)
    try:
        export_dir.mkdir(exist_ok=True)
        path.write_text(output, encoding="utf-8")
    except OSError as e:
        logger.error(f"❌ Error writing export {path}: {e}")
        return f"Error: could not write export: {e}"

    total = sum(len(v) for v in records.values())
    logger.debug(f"📤 Exported {total} records to {path}")
    return f"📤 Exported content to {path}"


@mcp.tool
def storage_info() -> str:
    """Show how much content is stored and how much space it uses."""
    records = storage.all_records()
    lines = [f"📂 Data directory: {storage.data_dir}"]
    lines.append(f"💾 Storage used: {format_storage_size(storage.storage_size_kb())}")
    for collection, items in records.items():
        compliant = sum(1 for r in items if r.get("isSrdCompliant", True))
        lines.append(f"  - {collection}: {len(items)} ({compliant} SRD compliant)")
    return "\n".join(lines)


# Dice tools
@mcp.tool
def roll_dice(
    dice_notation: Annotated[str, Field(description="Dice notation (e.g., '1d20', '3d6+2')")],
    label: Annotated[str, Field(description="Context label for the roll")] = "",
) -> str:
    """Roll dice with D&D notation."""
    try:
        result = roll_dice_notation(dice_notation)
    except DiceNotationError as e:
        return str(e)

    label_prefix = f"{label} — " if label else ""
    rolls_text = ", ".join(map(str, result.rolls))
    modifier_text = f" {result.modifier:+d}" if result.modifier != 0 else ""
    return f"🎲 {label_prefix}**{dice_notation.strip()}** [{rolls_text}]{modifier_text} = **{result.total}**"


@mcp.tool
def generate_ability_scores() -> str:
    """Roll six ability scores with 4d6, dropping the lowest die."""
    scores = roll_ability_scores()
    lines = ["🎲 Ability scores (4d6 drop lowest):"]
    for score in scores:
        lines.append(f"  - {score} ({format_ability_modifier(calculate_ability_modifier(score))})")
    return "\n".join(lines)


logger.debug("✅ All tools successfully registered. Homebrew SRD server running! 🎲")

def main() -> None:
    """Main entry point for the Homebrew SRD MCP Server."""
    mcp.run()

if __name__ == "__main__":
    main()
