"""Validation of two-item forge enhancements."""
from __future__ import annotations

from dataclasses import dataclass

from reinforce_lab.core.types import ForgeFailureReason
from reinforce_lab.domain.equipment import find_item
from reinforce_lab.domain.forge_economy import (
    MITHRIL_TIER_FORGE_LEVEL,
    STEEL_TIER_FORGE_LEVEL,
    get_enhance_material_cost,
    get_required_forge_level_for_enhance,
)
from reinforce_lab.domain.state import EquipmentItem, GameState


@dataclass(frozen=True, slots=True)
class ForgeValidationResult:
    """Outcome of a forge check; failures carry only the reason code."""

    ok: bool
    reason: ForgeFailureReason | None = None
    target: EquipmentItem | None = None
    material: EquipmentItem | None = None


def _fail(reason: ForgeFailureReason) -> ForgeValidationResult:
    return ForgeValidationResult(ok=False, reason=reason)


def validate_forge(
    state: GameState,
    target_item_id: str | None,
    material_item_id: str | None,
) -> ForgeValidationResult:
    """Run the ordered forge checks; the first failing check decides the reason."""
    if not target_item_id or not material_item_id:
        return _fail("MISSING_SELECTION")

    if target_item_id == material_item_id:
        return _fail("SAME_ITEM")

    target = find_item(state.equipment_items, target_item_id)
    material = find_item(state.equipment_items, material_item_id)
    if target is None or material is None:
        return _fail("ITEM_NOT_FOUND")

    equipped_ids = {state.equipped_weapon_item_id, state.equipped_armor_item_id}
    if target.id in equipped_ids or material.id in equipped_ids:
        return _fail("EQUIPPED_ITEM")

    if target.kind != material.kind:
        return _fail("KIND_MISMATCH")

    if target.plus != material.plus:
        return _fail("PLUS_MISMATCH")

    required_level = get_required_forge_level_for_enhance(target.plus)
    if state.forge_level < required_level:
        if required_level == MITHRIL_TIER_FORGE_LEVEL:
            return _fail("FORGE_LEVEL_TOO_LOW_FOR_MITHRIL")
        if required_level == STEEL_TIER_FORGE_LEVEL:
            return _fail("FORGE_LEVEL_TOO_LOW_FOR_STEEL")

    cost = get_enhance_material_cost(target.plus)
    if state.materials.iron_ore < cost.iron_ore:
        return _fail("INSUFFICIENT_IRON_ORE")
    if state.materials.steel_ore < cost.steel_ore:
        return _fail("INSUFFICIENT_STEEL_ORE")
    if state.materials.mithril < cost.mithril:
        return _fail("INSUFFICIENT_MITHRIL")

    return ForgeValidationResult(ok=True, target=target, material=material)
