"""Pure stat lookups derived from equipment."""
from __future__ import annotations

from typing import Iterable, Sequence

from reinforce_lab.domain.equipment import find_equipped
from reinforce_lab.domain.hp import get_max_hp
from reinforce_lab.domain.state import EquipmentItem, GameState

BASE_ATTACK = 1


def calc_best_plus(items: Iterable[EquipmentItem]) -> int:
    return max((item.plus for item in items), default=0)


def calc_attack_from_equipped(
    equipped_weapon_item_id: str | None, items: Sequence[EquipmentItem]
) -> int:
    weapon = find_equipped(items, equipped_weapon_item_id, "weapon")
    return BASE_ATTACK + (weapon.plus if weapon else 0)


def calc_max_hp_from_equipped_armor(
    equipped_armor_item_id: str | None, items: Sequence[EquipmentItem]
) -> int:
    return get_max_hp(equipped_armor_item_id, items)


def player_attack(state: GameState) -> int:
    return calc_attack_from_equipped(state.equipped_weapon_item_id, state.equipment_items)


def player_max_hp(state: GameState) -> int:
    return calc_max_hp_from_equipped_armor(state.equipped_armor_item_id, state.equipment_items)
