"""Domain-level state tracking."""
from __future__ import annotations

from dataclasses import dataclass, field

from reinforce_lab.core.types import EquipmentKind, Floor

INITIAL_SEED = 123456789
INITIAL_HP = 10
BASE_FORGE_UPGRADE_COST = 100
EXPLORE_STAGE_COUNT = 10


@dataclass(frozen=True, slots=True)
class MaterialStock:
    """Fungible crafting currency held by the player."""

    iron_ore: int = 0
    steel_ore: int = 0
    mithril: int = 0

    def add(self, other: MaterialStock) -> MaterialStock:
        return MaterialStock(
            iron_ore=self.iron_ore + other.iron_ore,
            steel_ore=self.steel_ore + other.steel_ore,
            mithril=self.mithril + other.mithril,
        )

    def subtract(self, other: MaterialStock) -> MaterialStock:
        return MaterialStock(
            iron_ore=self.iron_ore - other.iron_ore,
            steel_ore=self.steel_ore - other.steel_ore,
            mithril=self.mithril - other.mithril,
        )

    def covers(self, other: MaterialStock) -> bool:
        """Return True when every counter is at least the other's."""
        return (
            self.iron_ore >= other.iron_ore
            and self.steel_ore >= other.steel_ore
            and self.mithril >= other.mithril
        )


@dataclass(frozen=True, slots=True)
class EquipmentItem:
    """A crafted weapon or armor piece. Forging replaces it, never mutates it."""

    id: str
    kind: EquipmentKind
    plus: int = 0


@dataclass(frozen=True, slots=True)
class GameState:
    """Root aggregate persisted as a whole and transitioned only by the reducer."""

    materials: MaterialStock = field(default_factory=MaterialStock)
    explore_count: int = 0
    rest_count: int = 0
    equipment_items: tuple[EquipmentItem, ...] = ()
    best_plus: int = 0
    seed: int = INITIAL_SEED
    hp: int = INITIAL_HP
    equipped_weapon_item_id: str | None = None
    equipped_armor_item_id: str | None = None
    next_item_id: int = 1
    forge_level: int = 0
    forge_upgrade_cost: int = BASE_FORGE_UPGRADE_COST
    current_floor: Floor = 1
    current_stage: int = 0
    is_exploring: bool = False


def create_initial_game_state(seed: int = INITIAL_SEED) -> GameState:
    """Return the state a brand new save starts from."""
    return GameState(
        materials=MaterialStock(),
        equipment_items=(EquipmentItem(id="i-1", kind="weapon", plus=0),),
        best_plus=0,
        seed=seed,
        hp=INITIAL_HP,
        next_item_id=2,
        forge_level=0,
        forge_upgrade_cost=BASE_FORGE_UPGRADE_COST,
        current_floor=1,
        current_stage=0,
        is_exploring=False,
    )
