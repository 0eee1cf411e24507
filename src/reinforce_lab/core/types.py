"""Shared type aliases for the core and domain layers."""
from typing import Literal

EquipmentKind = Literal["weapon", "armor"]
Floor = Literal[1, 2, 3]
ExploreEndReason = Literal["DEFEATED", "FLOOR_CLEARED"]
ForgeFailureReason = Literal[
    "MISSING_SELECTION",
    "SAME_ITEM",
    "ITEM_NOT_FOUND",
    "EQUIPPED_ITEM",
    "KIND_MISMATCH",
    "PLUS_MISMATCH",
    "FORGE_LEVEL_TOO_LOW_FOR_STEEL",
    "FORGE_LEVEL_TOO_LOW_FOR_MITHRIL",
    "INSUFFICIENT_IRON_ORE",
    "INSUFFICIENT_STEEL_ORE",
    "INSUFFICIENT_MITHRIL",
]

EQUIPMENT_KINDS: tuple[EquipmentKind, ...] = ("weapon", "armor")
FLOORS: tuple[Floor, ...] = (1, 2, 3)

__all__ = [
    "EQUIPMENT_KINDS",
    "FLOORS",
    "EquipmentKind",
    "ExploreEndReason",
    "Floor",
    "ForgeFailureReason",
]
