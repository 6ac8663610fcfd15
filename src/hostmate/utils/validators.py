from __future__ import annotations

from typing import Any, List, Optional

from hostmate.models.allergies import ALLERGIES
from hostmate.models.dishes import DISH_CATEGORIES

MIN_RANK = 1
MAX_RANK = 3


def clean_text(value: Any) -> Optional[str]:
    """Strip strings; None and blank strings both become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_allergies(value: Any) -> List[str]:
    """
    Normalize a submitted allergy list.

    Non-string entries are dropped, strings are trimmed, empties removed and
    duplicates collapsed (first occurrence wins). Any remaining value outside
    the closed vocabulary rejects the whole list.
    """
    if not isinstance(value, list):
        raise ValueError("allergies must be an array")

    allergies: List[str] = []
    for item in value:
        if not isinstance(item, str):
            continue
        label = item.strip()
        if not label:
            continue
        if label not in ALLERGIES:
            raise ValueError(f"Invalid allergy: {label}")
        if label not in allergies:
            allergies.append(label)
    return allergies


def parse_rank(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise ValueError("rank must be a number")
    if isinstance(value, int):
        number = value
    else:
        if isinstance(value, str):
            value = value.strip()
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError):
            raise ValueError("rank must be a number")
        if not number.is_integer():
            raise ValueError(f"rank must be between {MIN_RANK} and {MAX_RANK}")
    if not MIN_RANK <= number <= MAX_RANK:
        raise ValueError(f"rank must be between {MIN_RANK} and {MAX_RANK}")
    return int(number)


def parse_category(value: Any) -> str:
    category = clean_text(value)
    if category is None:
        raise ValueError("Missing dish information.")
    if category not in DISH_CATEGORIES:
        raise ValueError(f"Invalid category: {category}")
    return category


def parse_count(name: str, value: Optional[str]) -> Optional[int]:
    """Query-string count: absent stays None, otherwise a non-negative integer."""
    if value is None:
        return None
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"{name} must be a non-negative integer")
    return int(text)


def parse_flag(value: Optional[str]) -> bool:
    return value == "true"


def parse_id_list(value: Optional[str]) -> List[str]:
    """Comma separated ids, blanks and duplicates removed, order kept."""
    if not value:
        return []
    ids: List[str] = []
    for part in value.split(","):
        item = part.strip()
        if item and item not in ids:
            ids.append(item)
    return ids
