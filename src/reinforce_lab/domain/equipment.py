"""Equipment item helpers."""
from __future__ import annotations

import re
from typing import Iterable, Sequence

from reinforce_lab.domain.state import EquipmentItem

ITEM_ID_PREFIX = "i-"
_ID_SUFFIX = re.compile(r"-(\d+)$")


def make_item_id(number: int) -> str:
    return f"{ITEM_ID_PREFIX}{number}"


def item_id_number(item_id: str) -> int | None:
    """Return the numeric suffix of an item id, or None when it has none."""
    match = _ID_SUFFIX.search(item_id)
    if match is None:
        return None
    return int(match.group(1))


def max_item_number(items: Iterable[EquipmentItem]) -> int:
    numbers = [item_id_number(item.id) for item in items]
    return max((number for number in numbers if number is not None), default=0)


def find_item(items: Sequence[EquipmentItem], item_id: str | None) -> EquipmentItem | None:
    if not item_id:
        return None
    for item in items:
        if item.id == item_id:
            return item
    return None


def find_equipped(
    items: Sequence[EquipmentItem], item_id: str | None, kind: str
) -> EquipmentItem | None:
    """Return the item only when it exists and is of the expected kind."""
    item = find_item(items, item_id)
    if item is None or item.kind != kind:
        return None
    return item


def can_equip_to_slot(item: EquipmentItem | None, slot: str) -> bool:
    return item is not None and item.kind == slot
