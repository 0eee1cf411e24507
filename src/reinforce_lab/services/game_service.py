"""Session orchestration on top of the pure reducer."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from reinforce_lab.domain.actions import (
    Action,
    ApplyExploreResult,
    ForgeEnhance,
    StartExplore,
)
from reinforce_lab.domain.equipment import find_equipped
from reinforce_lab.domain.explore import FLOOR_HINTS, ExploreResult, simulate_explore
from reinforce_lab.domain.forge import ForgeValidationResult, validate_forge
from reinforce_lab.domain.forge_economy import can_upgrade_forge, get_craft_cost
from reinforce_lab.domain.reducer import reduce
from reinforce_lab.domain.selectors import player_attack, player_max_hp
from reinforce_lab.domain.state import EquipmentItem, GameState, create_initial_game_state
from reinforce_lab.services.save_service import SaveService
from reinforce_lab.services.storage import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GameView:
    """Read-only snapshot with the derived numbers a front end needs."""

    state: GameState
    max_hp: int
    attack: int
    craft_cost: int
    can_craft: bool
    can_upgrade_forge: bool
    can_rest: bool
    can_explore: bool
    equipped_weapon: EquipmentItem | None
    equipped_armor: EquipmentItem | None
    floor_hint: str


class GameService:
    """Owns the current state, feeds actions to the reducer and autosaves."""

    def __init__(
        self,
        *,
        store: KeyValueStore | None = None,
        state: GameState | None = None,
        save_service: SaveService | None = None,
    ) -> None:
        self._store = store
        self._save_service = save_service or SaveService()
        self._state = state if state is not None else create_initial_game_state()

    @property
    def state(self) -> GameState:
        return self._state

    def load_or_create(self, seed: int | None = None) -> GameState:
        """Load the saved game, or start fresh when there is none."""
        loaded = self._save_service.load(self._store) if self._store is not None else None
        if loaded is None:
            logger.info("Starting a new game.")
            loaded = create_initial_game_state() if seed is None else create_initial_game_state(seed)
        self._state = loaded
        return loaded

    def dispatch(self, action: Action) -> bool:
        """Apply an action; return True when the state actually changed."""
        next_state = reduce(self._state, action)
        if next_state is self._state:
            logger.debug("Action %s had no effect.", type(action).__name__)
            return False
        logger.debug("Applied %s.", type(action).__name__)
        self._state = next_state
        self._autosave()
        return True

    def begin_exploration(self) -> ExploreResult | None:
        """Lock the session and compute its outcome; None when exploring is not possible."""
        if not self.dispatch(StartExplore()):
            return None
        state = self._state
        return simulate_explore(state.current_floor, state.hp, player_attack(state))

    def finish_exploration(self, result: ExploreResult) -> bool:
        return self.dispatch(ApplyExploreResult.from_result(result))

    def explore(self) -> ExploreResult | None:
        result = self.begin_exploration()
        if result is not None:
            self.finish_exploration(result)
        return result

    def forge(self, target_item_id: str | None, material_item_id: str | None) -> ForgeValidationResult:
        """Validate first so callers learn why a forge was refused."""
        validation = validate_forge(self._state, target_item_id, material_item_id)
        if validation.ok and target_item_id and material_item_id and not self._state.is_exploring:
            self.dispatch(ForgeEnhance(target_item_id=target_item_id, material_item_id=material_item_id))
        return validation

    def clear_save(self) -> None:
        if self._store is not None:
            self._save_service.clear(self._store)

    def view(self) -> GameView:
        state = self._state
        max_hp = player_max_hp(state)
        attack = player_attack(state)
        craft_cost = get_craft_cost(state.forge_level)
        town_open = not state.is_exploring
        return GameView(
            state=state,
            max_hp=max_hp,
            attack=attack,
            craft_cost=craft_cost,
            can_craft=town_open and state.materials.iron_ore >= craft_cost,
            can_upgrade_forge=(
                town_open
                and can_upgrade_forge(state.forge_level)
                and state.materials.iron_ore >= state.forge_upgrade_cost
            ),
            can_rest=town_open and state.hp < max_hp,
            can_explore=town_open and state.hp > 0 and attack > 0,
            equipped_weapon=find_equipped(state.equipment_items, state.equipped_weapon_item_id, "weapon"),
            equipped_armor=find_equipped(state.equipment_items, state.equipped_armor_item_id, "armor"),
            floor_hint=FLOOR_HINTS[state.current_floor],
        )

    def _autosave(self) -> None:
        # Sessions in progress are not persisted.
        if self._store is None or self._state.is_exploring:
            return
        self._save_service.save(self._store, self._state)
