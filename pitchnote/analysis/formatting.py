"""Display formatting helpers."""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from ..models.player import PositionType


def format_rating(rating: Optional[float]) -> str:
    """
    Format a rating with exactly one decimal place.

    Halves round up on the decimal value, so 7.55 becomes "7.6".

    Args:
        rating: Rating value, or None when unrated.

    Returns:
        The formatted rating, or "-" for None.
    """
    if rating is None:
        return "-"
    value = Decimal(str(rating)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{value:.1f}"


def format_date(value: Union[str, date]) -> str:
    """
    Format a calendar date in the Korean long form, e.g. "2024년 6월 15일".

    Args:
        value: ISO date or timestamp string, or a date object.
    """
    if isinstance(value, datetime):
        day = value.date()
    elif isinstance(value, date):
        day = value
    else:
        day = date.fromisoformat(value[:10])
    return f"{day.year}년 {day.month}월 {day.day}일"


def format_score(home_score: int, away_score: int) -> str:
    return f"{home_score} : {away_score}"


def position_label(position: PositionType) -> str:
    """Position label with its code, e.g. "수비수 (DF)"."""
    return f"{position.label} ({position.value})"


ClassInput = Union[str, None, bool, list, tuple, dict]


def _class_tokens(inputs: tuple[ClassInput, ...]) -> list[str]:
    tokens: list[str] = []
    for item in inputs:
        if not item or item is True:
            continue
        if isinstance(item, str):
            tokens.extend(item.split())
        elif isinstance(item, dict):
            tokens.extend(t for name, on in item.items() if on for t in name.split())
        else:
            tokens.extend(_class_tokens(tuple(item)))
    return tokens


# Utilities whose value may be a colour, e.g. bg-white or text-red-500.
COLOR_UTILITIES = frozenset({"bg", "text", "border", "ring", "outline", "fill", "stroke"})
COLOR_NAMES = frozenset({
    "inherit", "current", "transparent", "black", "white",
    "slate", "gray", "zinc", "neutral", "stone",
    "red", "orange", "amber", "yellow", "lime", "green", "emerald", "teal",
    "cyan", "sky", "blue", "indigo", "violet", "purple", "fuchsia", "pink", "rose",
})


def _class_group(token: str) -> str:
    """Conflict group of a utility class."""
    parts = token.split("-")
    if len(parts) > 1 and parts[0] in COLOR_UTILITIES and parts[1] in COLOR_NAMES:
        return f"{parts[0]}-color"
    return token.rsplit("-", 1)[0] if "-" in token else token


def class_names(*inputs: ClassInput) -> str:
    """
    Merge CSS class names.

    Falsy inputs are dropped; dicts contribute the keys whose value is truthy.
    Conflicting utilities keep only the later one, at the later position.
    Two utilities conflict when they share the prefix before their last
    dash (px-2 and px-4), or when both set the colour of the same property
    (bg-white and bg-red-500). Sizes and colours of one property do not
    conflict (text-sm and text-red-500).

    Returns:
        Space separated class string.
    """
    merged: dict[str, str] = {}
    for token in _class_tokens(inputs):
        group = _class_group(token)
        merged.pop(group, None)
        merged[group] = token
    return " ".join(merged.values())
