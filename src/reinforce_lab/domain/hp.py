"""Hit point helpers derived from equipped armor."""
from __future__ import annotations

from typing import Sequence

from reinforce_lab.domain.equipment import find_equipped
from reinforce_lab.domain.state import INITIAL_HP, EquipmentItem


def get_armor_bonus(equipped_armor_item_id: str | None, items: Sequence[EquipmentItem]) -> int:
    armor = find_equipped(items, equipped_armor_item_id, "armor")
    return armor.plus if armor else 0


def get_max_hp(equipped_armor_item_id: str | None, items: Sequence[EquipmentItem]) -> int:
    return INITIAL_HP + get_armor_bonus(equipped_armor_item_id, items)


def clamp_hp_to_max(hp: int, max_hp: int) -> int:
    return max(0, min(hp, max_hp))
