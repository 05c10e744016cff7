"""
Dice rolling and ability score helpers.
"""

import random
import re
from dataclasses import dataclass, field

DICE_PATTERN = re.compile(r"^(\d+)d(\d+)(?:([+-])(\d+))?$", re.IGNORECASE)

ABILITY_SCORE_COUNT = 6


class DiceNotationError(ValueError):
    """Raised for dice notation that doesn't match ``XdY[+-Z]``."""


@dataclass(frozen=True)
class DiceNotation:
    """Parsed ``XdY+Z`` notation."""
    count: int
    sides: int
    modifier: int = 0


@dataclass
class DiceRoll:
    """Outcome of rolling a dice notation."""
    total: int
    rolls: list[int] = field(default_factory=list)
    modifier: int = 0
    notation: str = ""


def roll_die(sides: int, rng: random.Random | None = None) -> int:
    """Roll a single die with the given number of sides."""
    return (rng or random).randint(1, sides)


def roll_dice(count: int, sides: int, rng: random.Random | None = None) -> list[int]:
    """Roll count dice and return the individual results."""
    return [roll_die(sides, rng) for _ in range(count)]


def roll_dice_sum(count: int, sides: int, rng: random.Random | None = None) -> tuple[int, list[int]]:
    """Roll count dice and return (sum, individual rolls)."""
    rolls = roll_dice(count, sides, rng)
    return sum(rolls), rolls


def parse_dice_notation(notation: str) -> DiceNotation:
    """Parse dice notation such as "2d6+3" or "1d20".

    Raises:
        DiceNotationError: If the notation is malformed or a die has no sides
    """
    match = DICE_PATTERN.match(notation.strip()) if isinstance(notation, str) else None
    if not match:
        raise DiceNotationError(f"Invalid dice notation: {notation}")

    count = int(match.group(1))
    sides = int(match.group(2))
    if sides < 1:
        raise DiceNotationError(f"Invalid dice notation: {notation}")

    modifier = 0
    if match.group(3) and match.group(4):
        modifier = int(match.group(4))
        if match.group(3) == "-":
            modifier = -modifier

    return DiceNotation(count=count, sides=sides, modifier=modifier)


def roll_dice_notation(notation: str, rng: random.Random | None = None) -> DiceRoll:
    """Roll dice described by standard notation."""
    parsed = parse_dice_notation(notation)
    roll_sum, rolls = roll_dice_sum(parsed.count, parsed.sides, rng)
    return DiceRoll(
        total=roll_sum + parsed.modifier,
        rolls=rolls,
        modifier=parsed.modifier,
        notation=notation,
    )


def calculate_dice_average(notation: str) -> float:
    """Average result of a dice notation, e.g. 2d6+3 -> 10.0."""
    parsed = parse_dice_notation(notation)
    return parsed.count * (parsed.sides + 1) / 2 + parsed.modifier


def generate_ability_scores(rng: random.Random | None = None) -> list[int]:
    """Generate six ability scores with 4d6, dropping the lowest die each time."""
    scores = []
    for _ in range(ABILITY_SCORE_COUNT):
        rolls = sorted(roll_dice(4, 6, rng))
        scores.append(sum(rolls[1:]))
    return scores


def calculate_ability_modifier(score: int) -> int:
    """D&D ability modifier: floor((score - 10) / 2)."""
    return (score - 10) // 2


def format_ability_modifier(modifier: int) -> str:
    return f"+{modifier}" if modifier >= 0 else str(modifier)
