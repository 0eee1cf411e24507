from __future__ import annotations

import json
from dataclasses import replace

import pytest

from reinforce_lab.domain.actions import CraftWeapon, Rest, SetFloor
from reinforce_lab.domain.state import EquipmentItem, MaterialStock, create_initial_game_state
from reinforce_lab.services.errors import StorageError
from reinforce_lab.services.game_service import GameService
from reinforce_lab.services.save_service import STORAGE_KEY
from reinforce_lab.services.storage import InMemoryKeyValueStore


def _make_service(store: InMemoryKeyValueStore | None = None, **changes: object) -> GameService:
    return GameService(store=store, state=replace(create_initial_game_state(), **changes))


def test_load_or_create_starts_fresh_without_save() -> None:
    service = GameService(store=InMemoryKeyValueStore())
    state = service.load_or_create(seed=77)
    assert state == create_initial_game_state(77)
    assert service.state is state


def test_load_or_create_reads_existing_save() -> None:
    store = InMemoryKeyValueStore()
    first = _make_service(store, materials=MaterialStock(iron_ore=15))
    assert first.dispatch(CraftWeapon())

    second = GameService(store=store)
    loaded = second.load_or_create()
    assert loaded == first.state


def test_dispatch_reports_change_and_autosaves() -> None:
    store = InMemoryKeyValueStore()
    service = _make_service(store)
    assert not service.dispatch(Rest())
    assert store.get(STORAGE_KEY) is None

    assert service.dispatch(SetFloor(floor=2))
    saved = json.loads(store.get(STORAGE_KEY))
    assert saved["gameState"]["currentFloor"] == 2


def test_begin_and_finish_exploration() -> None:
    service = _make_service()
    result = service.begin_exploration()
    assert result is not None
    assert service.state.is_exploring
    assert not service.view().can_rest
    assert not service.view().can_explore

    assert service.finish_exploration(result)
    assert not service.state.is_exploring
    assert service.state.hp == result.final_hp
    assert service.state.materials == result.total_reward
    assert service.state.explore_count == 1


def test_explore_refused_at_zero_hp() -> None:
    service = _make_service(hp=0)
    assert service.explore() is None
    assert service.state.explore_count == 0


def test_forge_returns_reason_and_only_dispatches_when_valid() -> None:
    service = _make_service(
        equipment_items=(
            EquipmentItem(id="i-1", kind="weapon", plus=0),
            EquipmentItem(id="i-2", kind="weapon", plus=0),
        ),
        next_item_id=3,
        equipped_weapon_item_id="i-1",
    )
    refused = service.forge("i-1", "i-2")
    assert refused.reason == "EQUIPPED_ITEM"
    assert len(service.state.equipment_items) == 2

    service = _make_service(
        equipment_items=(
            EquipmentItem(id="i-1", kind="weapon", plus=0),
            EquipmentItem(id="i-2", kind="weapon", plus=0),
        ),
        next_item_id=3,
    )
    accepted = service.forge("i-1", "i-2")
    assert accepted.ok
    assert service.state.equipment_items == (EquipmentItem(id="i-3", kind="weapon", plus=1),)


def test_view_derives_numbers() -> None:
    service = _make_service(
        materials=MaterialStock(iron_ore=120),
        hp=5,
        equipment_items=(
            EquipmentItem(id="i-1", kind="weapon", plus=2),
            EquipmentItem(id="i-2", kind="armor", plus=4),
        ),
        equipped_weapon_item_id="i-1",
        equipped_armor_item_id="i-2",
        next_item_id=3,
        current_floor=3,
    )
    view = service.view()
    assert view.max_hp == 14
    assert view.attack == 3
    assert view.craft_cost == 10
    assert view.can_craft
    assert view.can_upgrade_forge
    assert view.can_rest
    assert view.can_explore
    assert view.equipped_weapon is not None and view.equipped_weapon.id == "i-1"
    assert view.equipped_armor is not None and view.equipped_armor.plus == 4
    assert "mithril" in view.floor_hint


def test_clear_save_removes_slot() -> None:
    store = InMemoryKeyValueStore()
    service = _make_service(store)
    service.dispatch(SetFloor(floor=3))
    service.clear_save()
    assert store.get(STORAGE_KEY) is None


class _FailingStore(InMemoryKeyValueStore):
    def set(self, key: str, value: str) -> None:
        raise StorageError("disk full")


def test_failing_store_never_strands_an_exploration() -> None:
    service = GameService(store=_FailingStore())
    result = service.begin_exploration()
    assert result is not None
    assert service.state.is_exploring

    with pytest.raises(StorageError):
        service.finish_exploration(result)
    assert not service.state.is_exploring
    assert service.state.materials == result.total_reward


def test_exploring_state_is_not_written() -> None:
    store = InMemoryKeyValueStore()
    service = GameService(store=store)
    service.begin_exploration()
    assert store.get(STORAGE_KEY) is None
