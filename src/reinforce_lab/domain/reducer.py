"""Pure state transitions for every player action.

``reduce`` is total: inapplicable or malformed actions return the very same
state object, so callers can detect "nothing happened" with an identity check.
"""
from __future__ import annotations

import logging
import math
from dataclasses import replace

from reinforce_lab.core.types import EQUIPMENT_KINDS, EquipmentKind
from reinforce_lab.domain.actions import (
    EXPLORATION_SAFE_ACTIONS,
    ApplyExploreResult,
    CraftArmor,
    CraftWeapon,
    Equip,
    ForgeEnhance,
    Rest,
    Reset,
    SetFloor,
    StartExplore,
    Unequip,
    UpgradeForge,
)
from reinforce_lab.domain.equipment import can_equip_to_slot, find_item, make_item_id
from reinforce_lab.domain.explore import normalize_floor
from reinforce_lab.domain.forge import validate_forge
from reinforce_lab.domain.forge_economy import (
    can_upgrade_forge,
    get_craft_cost,
    get_enhance_material_cost,
    get_next_forge_upgrade_cost,
)
from reinforce_lab.domain.hp import clamp_hp_to_max, get_max_hp
from reinforce_lab.domain.selectors import calc_best_plus, player_attack, player_max_hp
from reinforce_lab.domain.state import (
    EquipmentItem,
    GameState,
    MaterialStock,
    create_initial_game_state,
)

logger = logging.getLogger(__name__)


def reduce(state: GameState, action: object) -> GameState:
    """Return the state that follows ``action``."""
    if state.is_exploring and not isinstance(action, EXPLORATION_SAFE_ACTIONS):
        return state

    if isinstance(action, SetFloor):
        return _set_floor(state, action.floor)
    if isinstance(action, StartExplore):
        return _start_explore(state)
    if isinstance(action, ApplyExploreResult):
        return _apply_explore_result(state, action)
    if isinstance(action, CraftWeapon):
        return _craft_item(state, "weapon")
    if isinstance(action, CraftArmor):
        return _craft_item(state, "armor")
    if isinstance(action, ForgeEnhance):
        return _forge_enhance(state, action.target_item_id, action.material_item_id)
    if isinstance(action, UpgradeForge):
        return _upgrade_forge(state)
    if isinstance(action, Equip):
        return _equip_item(state, action.item_id, action.slot)
    if isinstance(action, Unequip):
        return _unequip_item(state, action.slot)
    if isinstance(action, Rest):
        return _rest(state)
    if isinstance(action, Reset):
        return create_initial_game_state(state.seed)

    logger.debug("Ignoring unhandled action %r", action)
    return state


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite_number(value: object) -> bool:
    return _is_number(value) and math.isfinite(value)


def _set_floor(state: GameState, floor: object) -> GameState:
    if not _is_number(floor):
        return state
    next_floor = normalize_floor(floor)
    if next_floor == state.current_floor:
        return state
    return replace(state, current_floor=next_floor)


def _start_explore(state: GameState) -> GameState:
    if state.is_exploring or state.hp <= 0:
        return state
    if player_attack(state) <= 0:
        return state
    return replace(
        state,
        is_exploring=True,
        current_stage=1,
        explore_count=state.explore_count + 1,
    )


def _apply_explore_result(state: GameState, action: ApplyExploreResult) -> GameState:
    if not state.is_exploring:
        return state
    reward = action.reward
    if not _is_finite_number(action.final_hp) or not isinstance(reward, MaterialStock):
        return state
    amounts = (reward.iron_ore, reward.steel_ore, reward.mithril)
    if not all(_is_finite_number(amount) for amount in amounts):
        return state
    gained = MaterialStock(
        iron_ore=max(0, int(reward.iron_ore)),
        steel_ore=max(0, int(reward.steel_ore)),
        mithril=max(0, int(reward.mithril)),
    )
    return replace(
        state,
        materials=state.materials.add(gained),
        hp=clamp_hp_to_max(int(action.final_hp), player_max_hp(state)),
        current_stage=0,
        is_exploring=False,
    )


def _with_items(state: GameState, items: tuple[EquipmentItem, ...], **changes: object) -> GameState:
    return replace(state, equipment_items=items, best_plus=calc_best_plus(items), **changes)


def _craft_item(state: GameState, kind: EquipmentKind) -> GameState:
    craft_cost = get_craft_cost(state.forge_level)
    if state.materials.iron_ore < craft_cost:
        return state
    crafted = EquipmentItem(id=make_item_id(state.next_item_id), kind=kind, plus=0)
    return _with_items(
        state,
        state.equipment_items + (crafted,),
        materials=state.materials.subtract(MaterialStock(iron_ore=craft_cost)),
        next_item_id=state.next_item_id + 1,
    )


def _forge_enhance(state: GameState, target_item_id: object, material_item_id: object) -> GameState:
    if not isinstance(target_item_id, str) or not isinstance(material_item_id, str):
        return state
    validation = validate_forge(state, target_item_id, material_item_id)
    if not validation.ok or validation.target is None or validation.material is None:
        return state

    target = validation.target
    consumed_ids = {target.id, validation.material.id}
    remaining = tuple(item for item in state.equipment_items if item.id not in consumed_ids)
    enhanced = EquipmentItem(id=make_item_id(state.next_item_id), kind=target.kind, plus=target.plus + 1)
    return _with_items(
        state,
        remaining + (enhanced,),
        materials=state.materials.subtract(get_enhance_material_cost(target.plus)),
        next_item_id=state.next_item_id + 1,
    )


def _upgrade_forge(state: GameState) -> GameState:
    if not can_upgrade_forge(state.forge_level):
        return state
    if state.materials.iron_ore < state.forge_upgrade_cost:
        return state

    next_level = state.forge_level + 1
    # At the cap the cost is frozen; it is never paid again.
    next_cost = (
        get_next_forge_upgrade_cost(state.forge_upgrade_cost)
        if can_upgrade_forge(next_level)
        else state.forge_upgrade_cost
    )
    return replace(
        state,
        materials=state.materials.subtract(MaterialStock(iron_ore=state.forge_upgrade_cost)),
        forge_level=next_level,
        forge_upgrade_cost=next_cost,
    )


def _equip_item(state: GameState, item_id: object, slot: object) -> GameState:
    if slot not in EQUIPMENT_KINDS or not isinstance(item_id, str):
        return state
    item = find_item(state.equipment_items, item_id)
    if not can_equip_to_slot(item, slot):
        return state

    if slot == "weapon":
        if state.equipped_weapon_item_id == item_id:
            return state
        return replace(state, equipped_weapon_item_id=item_id)

    if state.equipped_armor_item_id == item_id:
        return state
    # Equipping armor only caps hp; it never heals.
    max_hp = get_max_hp(item_id, state.equipment_items)
    return replace(state, equipped_armor_item_id=item_id, hp=clamp_hp_to_max(state.hp, max_hp))


def _unequip_item(state: GameState, slot: object) -> GameState:
    if slot == "weapon":
        if state.equipped_weapon_item_id is None:
            return state
        return replace(state, equipped_weapon_item_id=None)

    if slot == "armor":
        if state.equipped_armor_item_id is None:
            return state
        max_hp = get_max_hp(None, state.equipment_items)
        return replace(state, equipped_armor_item_id=None, hp=clamp_hp_to_max(state.hp, max_hp))

    return state


def _rest(state: GameState) -> GameState:
    max_hp = player_max_hp(state)
    if state.hp == max_hp:
        return state
    return replace(state, hp=max_hp, rest_count=state.rest_count + 1)
