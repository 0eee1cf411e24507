from __future__ import annotations

from dataclasses import replace

from reinforce_lab.domain.explore import simulate_explore
from reinforce_lab.domain.forge import ForgeValidationResult
from reinforce_lab.domain.state import EquipmentItem, MaterialStock, create_initial_game_state
from reinforce_lab.presentation.cli import render
from reinforce_lab.services.game_service import GameService


def test_render_menu_numbers_options(capsys) -> None:
    render.render_menu("Town", ["Inventory", "Quit"])
    out = capsys.readouterr().out
    assert "=== Town ===" in out
    assert "1. Inventory" in out
    assert "2. Quit" in out


def test_item_label_and_materials() -> None:
    assert render.item_label(EquipmentItem(id="i-7", kind="weapon", plus=3)) == "Sword +3 (i-7)"
    assert render.item_label(EquipmentItem(id="i-2", kind="armor", plus=1)) == "Armor +1 (i-2)"
    assert render.format_materials(MaterialStock(iron_ore=4, steel_ore=1)) == "iron 4, steel 1, mithril 0"


def test_forge_guide_for_every_failure_reason() -> None:
    for reason, text in render.FORGE_GUIDANCE.items():
        assert render.forge_guide(ForgeValidationResult(ok=False, reason=reason)) == text


def test_forge_guide_ready_line() -> None:
    target = EquipmentItem(id="i-1", kind="weapon", plus=6)
    line = render.forge_guide(ForgeValidationResult(ok=True, target=target, material=target))
    assert line == "Ready: forges +7 for iron 6, steel 6, mithril 0."


def test_status_lines_for_new_game() -> None:
    lines = render.build_status_lines(GameService().view())
    assert lines[0] == "HP 10/10  ATK 1"
    assert "Weapon: none" in lines
    assert "Floor 1 (in town)" in lines
    assert "Forge level 0/10, next upgrade 100 iron" in lines


def test_status_lines_show_equipped_items() -> None:
    state = replace(create_initial_game_state(), equipped_weapon_item_id="i-1")
    lines = render.build_status_lines(GameService(state=state).view())
    assert "Weapon: Sword +0 (i-1)" in lines


def test_render_inventory_marks_equipped(capsys) -> None:
    items = (
        EquipmentItem(id="i-1", kind="weapon", plus=0),
        EquipmentItem(id="i-2", kind="armor", plus=2),
    )
    render.render_inventory(items, ("i-2", None))
    out = capsys.readouterr().out
    assert "1. Sword +0 (i-1)\n" in out
    assert "2. Armor +2 (i-2) [E]" in out


def test_render_explore_result(capsys) -> None:
    render.render_explore_result(simulate_explore(1, 10, 1))
    out = capsys.readouterr().out
    assert "- Stage 1: monster HP 5 ATK 1, took 4 damage, HP 6" in out
    assert "Defeated at stage 3." in out
    assert "Brought back iron 3, steel 0, mithril 0." in out
