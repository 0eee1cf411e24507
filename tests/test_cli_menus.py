from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from reinforce_lab.domain.state import MaterialStock, create_initial_game_state
from reinforce_lab.presentation.cli import app
from reinforce_lab.presentation.cli.rest import RestCountdown
from reinforce_lab.services.game_service import GameService
from reinforce_lab.services.save_service import STORAGE_KEY
from reinforce_lab.services.storage import InMemoryKeyValueStore


def _feed_inputs(monkeypatch, values: Iterable[str]) -> None:
    answers = iter(values)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(answers))


def _make_service(**changes: object) -> GameService:
    return GameService(store=InMemoryKeyValueStore(), state=replace(create_initial_game_state(), **changes))


def _labels(service: GameService) -> list[str]:
    return [label for label, _ in app._build_town_menu_entries(service, RestCountdown(0))]


def test_town_menu_lists_every_action() -> None:
    labels = _labels(_make_service())
    assert labels[0] == "Inventory"
    assert labels[1] == "Craft Sword (10 iron)"
    assert labels[-1] == "Quit"
    assert "Rest at the Inn" in labels
    assert "Explore" in labels


def test_craft_then_quit(monkeypatch, capsys) -> None:
    service = _make_service(materials=MaterialStock(iron_ore=10))
    _feed_inputs(monkeypatch, ["2", "13"])
    app._run_town_loop(service, rest_delay_seconds=0)
    assert len(service.state.equipment_items) == 2
    assert "Craft Sword (10 iron)" in capsys.readouterr().out


def test_invalid_menu_input_reprompts(monkeypatch, capsys) -> None:
    service = _make_service()
    _feed_inputs(monkeypatch, ["abc", "99", "13"])
    app._run_town_loop(service, rest_delay_seconds=0)
    out = capsys.readouterr().out
    assert "Please enter a number." in out
    assert "Please enter a value between 1 and 13." in out


def test_refused_craft_prints_reason(monkeypatch, capsys) -> None:
    _feed_inputs(monkeypatch, ["2", "13"])
    app._run_town_loop(_make_service(), rest_delay_seconds=0)
    assert "Not enough iron ore to craft." in capsys.readouterr().out


def test_explore_prints_log_and_commits(monkeypatch, capsys) -> None:
    service = _make_service()
    _feed_inputs(monkeypatch, ["9", "13"])
    app._run_town_loop(service, rest_delay_seconds=0)
    out = capsys.readouterr().out
    assert "=== Exploration ===" in out
    assert "Defeated at stage 3." in out
    assert not service.state.is_exploring
    assert service.state.materials.iron_ore == 3


def test_explore_then_rest(monkeypatch, capsys) -> None:
    service = _make_service()
    _feed_inputs(monkeypatch, ["9", "9", "10", "13"])
    app._run_town_loop(service, rest_delay_seconds=0)
    out = capsys.readouterr().out
    assert "You cannot explore right now. Rest first." in out
    assert service.state.hp == 10
    assert service.state.rest_count == 1


def test_forge_menu_reports_guidance(monkeypatch, capsys) -> None:
    service = _make_service(materials=MaterialStock(iron_ore=10))
    service.dispatch(app.CraftWeapon())
    service.dispatch(app.Equip(item_id="i-1", slot="weapon"))
    _feed_inputs(monkeypatch, ["4", "1", "2", "13"])
    app._run_town_loop(service, rest_delay_seconds=0)
    assert "Unequip the item before using it at the forge." in capsys.readouterr().out


def test_forge_menu_success(monkeypatch, capsys) -> None:
    service = _make_service(materials=MaterialStock(iron_ore=10))
    service.dispatch(app.CraftWeapon())
    _feed_inputs(monkeypatch, ["4", "1", "2", "13"])
    app._run_town_loop(service, rest_delay_seconds=0)
    assert "Forged Sword +1 (i-3)." in capsys.readouterr().out


def test_choose_floor_and_equip(monkeypatch) -> None:
    service = _make_service()
    _feed_inputs(monkeypatch, ["8", "2", "6", "1", "13"])
    app._run_town_loop(service, rest_delay_seconds=0)
    assert service.state.current_floor == 2
    assert service.state.equipped_weapon_item_id == "i-1"


def test_reset_requires_confirmation(monkeypatch) -> None:
    service = _make_service(materials=MaterialStock(iron_ore=40))
    _feed_inputs(monkeypatch, ["11", "n", "13"])
    app._run_town_loop(service, rest_delay_seconds=0)
    assert service.state.materials.iron_ore == 40

    _feed_inputs(monkeypatch, ["11", "y", "13"])
    app._run_town_loop(service, rest_delay_seconds=0)
    assert service.state == create_initial_game_state()


def test_delete_save_and_quit(monkeypatch) -> None:
    store = InMemoryKeyValueStore()
    service = GameService(store=store)
    service.dispatch(app.SetFloor(floor=2))
    assert store.get(STORAGE_KEY) is not None
    _feed_inputs(monkeypatch, ["12", "y"])
    app._run_town_loop(service, rest_delay_seconds=0)
    assert store.get(STORAGE_KEY) is None


def test_main_uses_data_dir(monkeypatch, tmp_path, capsys) -> None:
    monkeypatch.setenv("REINFORCE_LAB_HOME", str(tmp_path))
    monkeypatch.setattr(app.config, "configure_logging", lambda _settings: None)
    _feed_inputs(monkeypatch, ["8", "3", "13"])
    app.main()
    out = capsys.readouterr().out
    assert "=== Reinforce Lab ===" in out
    assert "Goodbye!" in out
    assert (tmp_path / "saves" / f"{STORAGE_KEY}.json").exists()
