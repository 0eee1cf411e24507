"""Console-driven UI loop for Reinforce Lab."""
from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from reinforce_lab.core.types import EquipmentKind
from reinforce_lab.domain.actions import (
    CraftArmor,
    CraftWeapon,
    Equip,
    Reset,
    SetFloor,
    Unequip,
    UpgradeForge,
)
from reinforce_lab.domain.state import EquipmentItem
from reinforce_lab.presentation.cli import config, render
from reinforce_lab.presentation.cli.rest import RestCountdown
from reinforce_lab.presentation.cli.save_store import FileKeyValueStore
from reinforce_lab.services.errors import StorageError
from reinforce_lab.services.game_service import GameService

logger = logging.getLogger(__name__)

MenuHandler = Callable[[GameService], bool]


def main() -> None:
    """Start the interactive CLI session."""
    settings = config.load_config()
    config.configure_logging(settings)
    service = GameService(store=FileKeyValueStore())
    try:
        service.load_or_create()
    except StorageError as exc:
        logger.warning("Could not read the save slot: %s", exc)
        print("Save slot unreadable; starting a new game.")
    print("=== Reinforce Lab ===")
    _run_town_loop(service, rest_delay_seconds=settings["rest_delay_seconds"])
    print("Goodbye!")


def _run_town_loop(service: GameService, *, rest_delay_seconds: int) -> None:
    countdown = RestCountdown(rest_delay_seconds, on_tick=lambda left: print(f"Resting... {left}"))
    while True:
        render.render_status(service.view())
        entries = _build_town_menu_entries(service, countdown)
        render.render_menu("Town", [label for label, _ in entries])
        index = _prompt_index("Select an option: ", len(entries))
        _, handler = entries[index]
        try:
            keep_going = handler(service)
        except StorageError as exc:
            logger.error("Autosave failed: %s", exc)
            print("Warning: progress could not be saved.")
            keep_going = True
        if not keep_going:
            return


def _build_town_menu_entries(
    service: GameService, countdown: RestCountdown
) -> List[tuple[str, MenuHandler]]:
    view = service.view()
    return [
        ("Inventory", _show_inventory),
        (f"Craft Sword ({view.craft_cost} iron)", _simple(CraftWeapon(), "Not enough iron ore to craft.")),
        (f"Craft Armor ({view.craft_cost} iron)", _simple(CraftArmor(), "Not enough iron ore to craft.")),
        ("Forge Enhance", _forge),
        ("Upgrade Forge", _simple(UpgradeForge(), "The forge cannot be upgraded right now.")),
        ("Equip", _equip),
        ("Unequip", _unequip),
        ("Choose Floor", _choose_floor),
        ("Explore", _explore),
        ("Rest at the Inn", lambda svc: _rest(svc, countdown)),
        ("Reset Progress", _reset),
        ("Delete Save and Quit", _delete_and_quit),
        ("Quit", lambda _svc: False),
    ]


def _simple(action: object, refusal: str) -> MenuHandler:
    def handler(service: GameService) -> bool:
        if not service.dispatch(action):
            print(refusal)
        return True

    return handler


def _show_inventory(service: GameService) -> bool:
    state = service.state
    render.render_inventory(
        state.equipment_items, (state.equipped_weapon_item_id, state.equipped_armor_item_id)
    )
    return True


def _forge(service: GameService) -> bool:
    items = service.state.equipment_items
    if len(items) < 2:
        print("You need at least two items to forge.")
        return True
    _show_inventory(service)
    target = _prompt_item(items, "Target item #: ")
    material = _prompt_item(items, "Material item #: ")
    validation = service.forge(target.id, material.id)
    if validation.ok:
        print(f"Forged {render.item_label(service.state.equipment_items[-1])}.")
    else:
        print(render.forge_guide(validation))
    return True


def _equip(service: GameService) -> bool:
    items = service.state.equipment_items
    if not items:
        print("Nothing to equip.")
        return True
    _show_inventory(service)
    item = _prompt_item(items, "Item #: ")
    if service.dispatch(Equip(item_id=item.id, slot=item.kind)):
        print(f"Equipped {render.item_label(item)}.")
    else:
        print("Nothing changed.")
    return True


def _unequip(service: GameService) -> bool:
    slots: Sequence[EquipmentKind] = ("weapon", "armor")
    render.render_menu("Unequip", ["Weapon", "Armor"])
    slot = slots[_prompt_index("Slot: ", len(slots))]
    if not service.dispatch(Unequip(slot=slot)):
        print("That slot is already empty.")
    return True


def _choose_floor(service: GameService) -> bool:
    render.render_menu("Floors", ["Floor 1", "Floor 2", "Floor 3"])
    floor = _prompt_index("Floor: ", 3) + 1
    service.dispatch(SetFloor(floor=floor))
    return True


def _explore(service: GameService) -> bool:
    result = service.begin_exploration()
    if result is None:
        print("You cannot explore right now. Rest first.")
        return True
    render.render_explore_result(result)
    service.finish_exploration(result)
    return True


def _rest(service: GameService, countdown: RestCountdown) -> bool:
    if not countdown.run(service):
        print("You are already fully rested.")
    return True


def _reset(service: GameService) -> bool:
    if _confirm("Reset all progress? (y/N): "):
        service.dispatch(Reset())
        print("Progress reset.")
    return True


def _delete_and_quit(service: GameService) -> bool:
    if not _confirm("Delete the save file? (y/N): "):
        return True
    service.clear_save()
    print("Save deleted.")
    return False


def _prompt_item(items: Sequence[EquipmentItem], prompt: str) -> EquipmentItem:
    return items[_prompt_index(prompt, len(items))]


def _prompt_index(prompt: str, count: int) -> int:
    while True:
        raw = input(prompt).strip()
        try:
            index = int(raw) - 1
        except ValueError:
            print("Please enter a number.")
            continue
        if 0 <= index < count:
            return index
        print(f"Please enter a value between 1 and {count}.")


def _confirm(prompt: str) -> bool:
    return input(prompt).strip().lower() in ("y", "yes")
