from __future__ import annotations

from collections.abc import Mapping, Sequence

from cost_api.schemas.reports import CategoryEntry

MANDATORY_CATEGORIES: tuple[str, ...] = ("food", "education", "health", "housing")


def merge_categories(
    grouped: Mapping[str, Sequence[CategoryEntry]],
    mandatory: Sequence[str] = MANDATORY_CATEGORIES,
) -> list[dict[str, list[CategoryEntry]]]:
    """Mandatory categories first in fixed order, then the rest sorted by name."""
    extra = sorted(name for name in grouped if name not in mandatory)
    return [{name: list(grouped.get(name, ()))} for name in (*mandatory, *extra)]
