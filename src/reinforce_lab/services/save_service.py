"""Serialization, validation and legacy migration for the single save slot."""
from __future__ import annotations

import json
import logging
import math
from typing import Any, Callable, Dict, List, Mapping

from reinforce_lab.core.types import EQUIPMENT_KINDS
from reinforce_lab.domain.equipment import max_item_number
from reinforce_lab.domain.explore import normalize_floor
from reinforce_lab.domain.forge_economy import MAX_FORGE_LEVEL
from reinforce_lab.domain.hp import clamp_hp_to_max, get_max_hp
from reinforce_lab.domain.selectors import calc_best_plus
from reinforce_lab.domain.state import (
    BASE_FORGE_UPGRADE_COST,
    EXPLORE_STAGE_COUNT,
    EquipmentItem,
    GameState,
    MaterialStock,
)
from reinforce_lab.services.errors import SaveLoadError
from reinforce_lab.services.storage import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "reinforce-lab-state"

SavePayload = Dict[str, Any]
MigrationStep = Callable[[Dict[str, Any]], Dict[str, Any]]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_non_negative_int(value: Any) -> bool:
    return _is_int(value) and value >= 0


def _is_equipment_entry(value: Any) -> bool:
    return (
        isinstance(value, Mapping)
        and isinstance(value.get("id"), str)
        and value.get("kind") in EQUIPMENT_KINDS
        and _is_number(value.get("plus"))
    )


def _is_equipment_list(value: Any) -> bool:
    return isinstance(value, list) and all(_is_equipment_entry(entry) for entry in value)


def _is_sword_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(entry, Mapping) and isinstance(entry.get("id"), str) and _is_number(entry.get("plus"))
        for entry in value
    )


# ------------------------------------------------------------ Version steps
# Each step upgrades one schema version. A step only touches the legacy shape
# it knows about, so running it on an already-upgraded dict is harmless.


def _expand_sword_counts(data: Dict[str, Any]) -> Dict[str, Any]:
    """v1 -> v2: a {plus: count} sword map becomes a list of individual swords."""
    swords = data.pop("swords", None)
    equipped_plus = data.pop("equippedPlus", None)
    if _is_equipment_list(data.get("equipmentItems")) or _is_sword_list(data.get("swordItems")):
        return data
    if not isinstance(swords, Mapping):
        return data

    entries: List[tuple[int, int]] = []
    for plus_text, count in swords.items():
        try:
            plus = int(str(plus_text).strip())
        except ValueError:
            continue
        if plus < 0 or not _is_number(count) or math.floor(count) <= 0:
            continue
        entries.append((plus, math.floor(count)))

    sword_items: List[Dict[str, Any]] = []
    for plus, count in sorted(entries):
        for _ in range(count):
            sword_items.append({"id": f"i-{len(sword_items) + 1}", "plus": plus})
    data["swordItems"] = sword_items

    if not isinstance(data.get("equippedItemId"), str) and _is_number(equipped_plus):
        data["equippedItemId"] = next(
            (item["id"] for item in sword_items if item["plus"] == equipped_plus), None
        )
    return data


def _fill_vitals(data: Dict[str, Any]) -> Dict[str, Any]:
    """v2 -> v3: rest tracking arrived; hp is derived later when absent."""
    if not _is_number(data.get("restCount")):
        data["restCount"] = 0
    return data


def _swords_to_equipment(data: Dict[str, Any]) -> Dict[str, Any]:
    """v3 -> v4: swords become weapon-kind equipment and armor gets a slot."""
    sword_items = data.pop("swordItems", None)
    legacy_equipped = data.pop("equippedItemId", None)
    if not _is_equipment_list(data.get("equipmentItems")) and _is_sword_list(sword_items):
        data["equipmentItems"] = [
            {"id": item["id"], "kind": "weapon", "plus": item["plus"]} for item in sword_items
        ]
    if not isinstance(data.get("equippedWeaponItemId"), str) and isinstance(legacy_equipped, str):
        data["equippedWeaponItemId"] = legacy_equipped
    data.setdefault("equippedArmorItemId", None)
    return data


def _add_forge_track(data: Dict[str, Any]) -> Dict[str, Any]:
    """v4 -> v5: the blacksmith upgrade track."""
    if not _is_number(data.get("forgeLevel")):
        data["forgeLevel"] = 0
    if not _is_number(data.get("forgeUpgradeCost")):
        data["forgeUpgradeCost"] = BASE_FORGE_UPGRADE_COST
    return data


def _nest_materials(data: Dict[str, Any]) -> Dict[str, Any]:
    """v5 -> v6: flat iron ore moves into the three-material stock."""
    iron_ore = data.pop("ironOre", None)
    if isinstance(data.get("materials"), Mapping):
        return data
    if iron_ore is not None:
        data["materials"] = {"ironOre": iron_ore, "steelOre": 0, "mithril": 0}
    return data


def _add_exploration_session(data: Dict[str, Any]) -> Dict[str, Any]:
    """v6 -> v7: floors and staged exploration."""
    data.setdefault("currentFloor", 1)
    data.setdefault("currentStage", 0)
    data.setdefault("isExploring", False)
    return data


_MIGRATIONS: Dict[int, MigrationStep] = {
    1: _expand_sword_counts,
    2: _fill_vitals,
    3: _swords_to_equipment,
    4: _add_forge_track,
    5: _nest_materials,
    6: _add_exploration_session,
}


class SaveService:
    """Converts runtime state to/from a validated, versioned payload."""

    STATE_VERSION = 7
    OLDEST_VERSION = 1

    def __init__(self, storage_key: str = STORAGE_KEY) -> None:
        self._storage_key = storage_key

    # --------------------------------------------------------------- Storage
    def load(self, store: KeyValueStore) -> GameState | None:
        """Return the saved state, or None when the slot is empty or unusable."""
        raw = store.get(self._storage_key)
        if not raw:
            return None
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding save: slot does not contain valid JSON.")
            return None
        return self.deserialize(payload)

    def save(self, store: KeyValueStore, state: GameState) -> None:
        store.set(self._storage_key, json.dumps(self.serialize(state), sort_keys=True))

    def clear(self, store: KeyValueStore) -> None:
        store.remove(self._storage_key)

    # --------------------------------------------------------- Serialization
    def serialize(self, state: GameState) -> SavePayload:
        """Return a JSON-serializable payload for persistence."""
        return {
            "stateVersion": self.STATE_VERSION,
            "gameState": self._serialize_state(state),
        }

    def deserialize(self, payload: Any) -> GameState | None:
        """Rebuild a state from a persisted payload of any recognized version."""
        if not isinstance(payload, Mapping):
            logger.warning("Discarding save: payload must be an object.")
            return None
        version = payload.get("stateVersion")
        if not _is_int(version) or not self.OLDEST_VERSION <= version <= self.STATE_VERSION:
            logger.info("Ignoring save with unrecognized version %r.", version)
            return None

        game_state = payload.get("gameState")
        if self.validate(game_state):
            return self._build_state(game_state)
        return self.migrate(game_state, from_version=version)

    @staticmethod
    def _serialize_state(state: GameState) -> Dict[str, Any]:
        return {
            "materials": {
                "ironOre": state.materials.iron_ore,
                "steelOre": state.materials.steel_ore,
                "mithril": state.materials.mithril,
            },
            "exploreCount": state.explore_count,
            "restCount": state.rest_count,
            "equipmentItems": [
                {"id": item.id, "kind": item.kind, "plus": item.plus} for item in state.equipment_items
            ],
            "bestPlus": state.best_plus,
            "seed": state.seed,
            "hp": state.hp,
            "equippedWeaponItemId": state.equipped_weapon_item_id,
            "equippedArmorItemId": state.equipped_armor_item_id,
            "nextItemId": state.next_item_id,
            "forgeLevel": state.forge_level,
            "forgeUpgradeCost": state.forge_upgrade_cost,
            "currentFloor": state.current_floor,
            "currentStage": state.current_stage,
            "isExploring": state.is_exploring,
        }

    # ------------------------------------------------------------ Validation
    def validate(self, value: Any) -> bool:
        """Strict check that ``value`` is a consistent current-schema game state."""
        if not isinstance(value, Mapping):
            return False

        materials = value.get("materials")
        if not isinstance(materials, Mapping):
            return False
        if not all(_is_non_negative_int(materials.get(key)) for key in ("ironOre", "steelOre", "mithril")):
            return False

        for key in ("exploreCount", "restCount", "bestPlus", "hp"):
            if not _is_non_negative_int(value.get(key)):
                return False
        if not _is_int(value.get("seed")) or not _is_int(value.get("nextItemId")):
            return False

        raw_items = value.get("equipmentItems")
        if not _is_equipment_list(raw_items):
            return False
        if not all(_is_non_negative_int(entry["plus"]) for entry in raw_items):
            return False
        items = self._build_items(raw_items)
        if len({item.id for item in items}) != len(items):
            return False

        weapon_id = value.get("equippedWeaponItemId")
        armor_id = value.get("equippedArmorItemId")
        if not self._is_valid_reference(weapon_id, items, "weapon"):
            return False
        if not self._is_valid_reference(armor_id, items, "armor"):
            return False

        forge_level = value.get("forgeLevel")
        if not _is_int(forge_level) or not 0 <= forge_level <= MAX_FORGE_LEVEL:
            return False
        forge_upgrade_cost = value.get("forgeUpgradeCost")
        if not _is_int(forge_upgrade_cost) or forge_upgrade_cost <= 0:
            return False
        current_floor = value.get("currentFloor")
        if not _is_int(current_floor) or current_floor not in (1, 2, 3):
            return False
        current_stage = value.get("currentStage")
        if not _is_int(current_stage) or not 0 <= current_stage <= EXPLORE_STAGE_COUNT:
            return False
        if not isinstance(value.get("isExploring"), bool):
            return False

        if value["bestPlus"] != calc_best_plus(items):
            return False
        if value["hp"] > get_max_hp(armor_id, items):
            return False
        if value["nextItemId"] <= max_item_number(items):
            return False
        return True

    @staticmethod
    def _is_valid_reference(item_id: Any, items: List[EquipmentItem], kind: str) -> bool:
        if item_id is None:
            return True
        if not isinstance(item_id, str):
            return False
        return any(item.id == item_id and item.kind == kind for item in items)

    @staticmethod
    def _build_items(raw_items: List[Mapping[str, Any]]) -> List[EquipmentItem]:
        return [
            EquipmentItem(id=entry["id"], kind=entry["kind"], plus=max(0, math.floor(entry["plus"])))
            for entry in raw_items
        ]

    def _build_state(self, value: Mapping[str, Any]) -> GameState:
        """Rebuild an already validated state; sessions never survive a reload."""
        materials = value["materials"]
        items = tuple(self._build_items(value["equipmentItems"]))
        return GameState(
            materials=MaterialStock(
                iron_ore=materials["ironOre"],
                steel_ore=materials["steelOre"],
                mithril=materials["mithril"],
            ),
            explore_count=value["exploreCount"],
            rest_count=value["restCount"],
            equipment_items=items,
            best_plus=calc_best_plus(items),
            seed=value["seed"],
            hp=value["hp"],
            equipped_weapon_item_id=value["equippedWeaponItemId"],
            equipped_armor_item_id=value["equippedArmorItemId"],
            next_item_id=value["nextItemId"],
            forge_level=value["forgeLevel"],
            forge_upgrade_cost=value["forgeUpgradeCost"],
            current_floor=value["currentFloor"],
            current_stage=0,
            is_exploring=False,
        )

    # ------------------------------------------------------------- Migration
    def migrate(self, value: Any, *, from_version: int = OLDEST_VERSION) -> GameState | None:
        """Best-effort upgrade of a legacy game state; None when it is unrecognizable.

        Every step runs; each one only acts on the shape it recognizes.
        ``from_version`` is only reported.
        """
        try:
            if not isinstance(value, Mapping):
                raise SaveLoadError("gameState must be an object.")
            data = dict(value)
            for version in range(self.OLDEST_VERSION, self.STATE_VERSION):
                data = _MIGRATIONS[version](data)
            state = self._finalize(data)
        except SaveLoadError as exc:
            logger.warning("Discarding save that could not be migrated: %s", exc)
            return None
        if from_version == self.STATE_VERSION:
            logger.info("Repaired inconsistent version %s save.", from_version)
        else:
            logger.info("Migrated save from version %s to %s.", from_version, self.STATE_VERSION)
        return state

    def _finalize(self, data: Mapping[str, Any]) -> GameState:
        """Coerce an upgraded dict into a state, repairing every derived field."""
        materials = data.get("materials")
        if not isinstance(materials, Mapping) or not _is_number(materials.get("ironOre")):
            raise SaveLoadError("materials.ironOre must be a number.")
        explore_count = self._require_number(data.get("exploreCount"), "exploreCount")
        seed = self._require_number(data.get("seed"), "seed")

        raw_items = data.get("equipmentItems")
        if not _is_equipment_list(raw_items):
            raise SaveLoadError("No recognizable equipment list.")
        items = self._dedupe_items(self._build_items(raw_items))

        weapon_id = data.get("equippedWeaponItemId")
        if not self._is_valid_reference(weapon_id, items, "weapon"):
            weapon_id = None
        armor_id = data.get("equippedArmorItemId")
        if not self._is_valid_reference(armor_id, items, "armor"):
            armor_id = None

        derived_next_id = max_item_number(items) + 1
        stored_next_id = data.get("nextItemId")
        next_item_id = (
            stored_next_id
            if _is_int(stored_next_id) and stored_next_id >= derived_next_id
            else derived_next_id
        )

        max_hp = get_max_hp(armor_id, items)
        raw_hp = data.get("hp")
        hp = clamp_hp_to_max(math.floor(raw_hp), max_hp) if _is_number(raw_hp) else max_hp

        raw_level = data.get("forgeLevel")
        forge_level = (
            max(0, min(MAX_FORGE_LEVEL, math.floor(raw_level))) if _is_number(raw_level) else 0
        )
        raw_cost = data.get("forgeUpgradeCost")
        forge_upgrade_cost = (
            math.ceil(raw_cost) if _is_number(raw_cost) and raw_cost > 0 else BASE_FORGE_UPGRADE_COST
        )
        raw_floor = data.get("currentFloor")
        current_floor = normalize_floor(raw_floor) if _is_number(raw_floor) else 1

        return GameState(
            materials=MaterialStock(
                iron_ore=self._count(materials.get("ironOre")),
                steel_ore=self._count(materials.get("steelOre")),
                mithril=self._count(materials.get("mithril")),
            ),
            explore_count=max(0, math.floor(explore_count)),
            rest_count=self._count(data.get("restCount")),
            equipment_items=tuple(items),
            best_plus=calc_best_plus(items),
            seed=math.trunc(seed),
            hp=hp,
            equipped_weapon_item_id=weapon_id,
            equipped_armor_item_id=armor_id,
            next_item_id=next_item_id,
            forge_level=forge_level,
            forge_upgrade_cost=forge_upgrade_cost,
            current_floor=current_floor,
            current_stage=0,
            is_exploring=False,
        )

    @staticmethod
    def _require_number(value: Any, context: str) -> float:
        if not _is_number(value):
            raise SaveLoadError(f"{context} must be a number.")
        return value

    @staticmethod
    def _count(value: Any) -> int:
        return max(0, math.floor(value)) if _is_number(value) else 0

    @staticmethod
    def _dedupe_items(items: List[EquipmentItem]) -> List[EquipmentItem]:
        seen: set[str] = set()
        unique: List[EquipmentItem] = []
        for item in items:
            if item.id in seen:
                logger.warning("Dropping duplicate item id %s from save.", item.id)
                continue
            seen.add(item.id)
            unique.append(item)
        return unique
