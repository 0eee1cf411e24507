"""The closed set of actions the reducer understands."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from reinforce_lab.core.types import EquipmentKind, Floor
from reinforce_lab.domain.explore import ExploreResult
from reinforce_lab.domain.state import MaterialStock


@dataclass(frozen=True, slots=True)
class SetFloor:
    floor: Floor


@dataclass(frozen=True, slots=True)
class StartExplore:
    pass


@dataclass(frozen=True, slots=True)
class ApplyExploreResult:
    """Commits a finished exploration session back into the state."""

    final_hp: int
    cleared_stage: int
    reward: MaterialStock = field(default_factory=MaterialStock)

    @classmethod
    def from_result(cls, result: ExploreResult) -> ApplyExploreResult:
        return cls(
            final_hp=result.final_hp,
            cleared_stage=result.cleared_stage,
            reward=result.total_reward,
        )


@dataclass(frozen=True, slots=True)
class CraftWeapon:
    pass


@dataclass(frozen=True, slots=True)
class CraftArmor:
    pass


@dataclass(frozen=True, slots=True)
class ForgeEnhance:
    target_item_id: str
    material_item_id: str


@dataclass(frozen=True, slots=True)
class UpgradeForge:
    pass


@dataclass(frozen=True, slots=True)
class Equip:
    item_id: str
    slot: EquipmentKind


@dataclass(frozen=True, slots=True)
class Unequip:
    slot: EquipmentKind


@dataclass(frozen=True, slots=True)
class Rest:
    pass


@dataclass(frozen=True, slots=True)
class Reset:
    pass


Action = Union[
    SetFloor,
    StartExplore,
    ApplyExploreResult,
    CraftWeapon,
    CraftArmor,
    ForgeEnhance,
    UpgradeForge,
    Equip,
    Unequip,
    Rest,
    Reset,
]

# Actions still accepted while an exploration session is in progress.
EXPLORATION_SAFE_ACTIONS: tuple[type, ...] = (ApplyExploreResult, Reset)

__all__ = [
    "Action",
    "ApplyExploreResult",
    "CraftArmor",
    "CraftWeapon",
    "EXPLORATION_SAFE_ACTIONS",
    "Equip",
    "ForgeEnhance",
    "Rest",
    "Reset",
    "SetFloor",
    "StartExplore",
    "Unequip",
    "UpgradeForge",
]
