"""Deterministic blacksmith economy formulas."""
from __future__ import annotations

import math

from reinforce_lab.domain.state import MaterialStock

# Craft cost drops by one at every odd forge level and bottoms out at 5.
# Enhancement cost scales linearly with plus; the material mix is tiered:
# - +0..+5 iron only
# - +6..+9 iron and steel, requires forge level 3
# - +10 and beyond iron and mithril, requires forge level 5
MAX_FORGE_LEVEL = 10
MIN_CRAFT_COST = 5
BASE_CRAFT_COST = 10
FORGE_UPGRADE_COST_GROWTH = 1.5

STEEL_TIER_MIN_PLUS = 6
MITHRIL_TIER_MIN_PLUS = 10
STEEL_TIER_FORGE_LEVEL = 3
MITHRIL_TIER_FORGE_LEVEL = 5


def get_craft_cost(forge_level: int) -> int:
    effective_level = max(0, min(MAX_FORGE_LEVEL, math.floor(forge_level)))
    return max(MIN_CRAFT_COST, BASE_CRAFT_COST - (effective_level + 1) // 2)


def get_next_forge_upgrade_cost(current_cost: int) -> int:
    return math.ceil(current_cost * FORGE_UPGRADE_COST_GROWTH)


def can_upgrade_forge(forge_level: int) -> bool:
    return forge_level < MAX_FORGE_LEVEL


def get_enhance_ore_cost(plus: float) -> int:
    """Iron cost of enhancing an item at the given plus."""
    return max(0, math.floor(plus))


def get_enhance_material_cost(plus: float) -> MaterialStock:
    """Full material cost of enhancing an item at the given plus."""
    amount = get_enhance_ore_cost(plus)
    if amount >= MITHRIL_TIER_MIN_PLUS:
        return MaterialStock(iron_ore=amount, mithril=amount)
    if amount >= STEEL_TIER_MIN_PLUS:
        return MaterialStock(iron_ore=amount, steel_ore=amount)
    return MaterialStock(iron_ore=amount)


def get_required_forge_level_for_enhance(plus: int) -> int:
    if plus >= MITHRIL_TIER_MIN_PLUS:
        return MITHRIL_TIER_FORGE_LEVEL
    if plus >= STEEL_TIER_MIN_PLUS:
        return STEEL_TIER_FORGE_LEVEL
    return 0
