"""Shared CLI rendering helpers."""
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from reinforce_lab.core.types import ForgeFailureReason
from reinforce_lab.domain.explore import ExploreLog, ExploreResult
from reinforce_lab.domain.forge import ForgeValidationResult
from reinforce_lab.domain.forge_economy import MAX_FORGE_LEVEL, get_enhance_material_cost
from reinforce_lab.domain.state import EquipmentItem, MaterialStock
from reinforce_lab.services.game_service import GameView

FORGE_GUIDANCE: Dict[ForgeFailureReason, str] = {
    "MISSING_SELECTION": "Pick both a target item and a material item.",
    "SAME_ITEM": "The target and the material must be two different items.",
    "ITEM_NOT_FOUND": "One of the selected items no longer exists.",
    "EQUIPPED_ITEM": "Unequip the item before using it at the forge.",
    "KIND_MISMATCH": "Only items of the same kind can be combined.",
    "PLUS_MISMATCH": "Only items with the same plus can be combined.",
    "FORGE_LEVEL_TOO_LOW_FOR_STEEL": "Upgrade the forge to level 3 to work steel (+6 and above).",
    "FORGE_LEVEL_TOO_LOW_FOR_MITHRIL": "Upgrade the forge to level 5 to work mithril (+10 and above).",
    "INSUFFICIENT_IRON_ORE": "Not enough iron ore.",
    "INSUFFICIENT_STEEL_ORE": "Not enough steel ore. Explore floor 2 or deeper.",
    "INSUFFICIENT_MITHRIL": "Not enough mithril. Explore floor 3.",
}

_KIND_LABELS = {"weapon": "Sword", "armor": "Armor"}


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")


def item_label(item: EquipmentItem) -> str:
    return f"{_KIND_LABELS.get(item.kind, item.kind)} +{item.plus} ({item.id})"


def format_materials(materials: MaterialStock) -> str:
    return f"iron {materials.iron_ore}, steel {materials.steel_ore}, mithril {materials.mithril}"


def forge_guide(validation: ForgeValidationResult) -> str:
    """Turn a forge check into one line of player guidance."""
    if validation.ok and validation.target is not None:
        plus = validation.target.plus
        return f"Ready: forges +{plus + 1} for {format_materials(get_enhance_material_cost(plus))}."
    if validation.reason is None:
        return "Forge unavailable."
    return FORGE_GUIDANCE[validation.reason]


def build_status_lines(view: GameView) -> List[str]:
    state = view.state
    location = (
        f"Floor {state.current_floor} stage {state.current_stage}"
        if state.current_stage > 0
        else f"Floor {state.current_floor} (in town)"
    )
    forge_line = f"Forge level {state.forge_level}/{MAX_FORGE_LEVEL}"
    if state.forge_level < MAX_FORGE_LEVEL:
        forge_line += f", next upgrade {state.forge_upgrade_cost} iron"
    return [
        f"HP {state.hp}/{view.max_hp}  ATK {view.attack}",
        f"Weapon: {item_label(view.equipped_weapon) if view.equipped_weapon else 'none'}",
        f"Armor: {item_label(view.equipped_armor) if view.equipped_armor else 'none'}",
        f"Materials: {format_materials(state.materials)}",
        forge_line,
        f"Craft cost: {view.craft_cost} iron",
        f"Best plus: +{state.best_plus}",
        location,
        view.floor_hint,
        f"Explores {state.explore_count}, rests {state.rest_count}",
    ]


def render_status(view: GameView) -> None:
    render_heading("Status")
    for line in build_status_lines(view):
        print(line)


def render_inventory(items: Sequence[EquipmentItem], equipped_ids: Iterable[str | None]) -> None:
    render_heading("Inventory")
    if not items:
        print("(empty)")
        return
    equipped = set(equipped_ids)
    for idx, item in enumerate(items, start=1):
        marker = " [E]" if item.id in equipped else ""
        print(f"{idx}. {item_label(item)}{marker}")


def format_explore_log(entry: ExploreLog) -> str:
    return (
        f"Stage {entry.stage}: monster HP {entry.monster_hp} ATK {entry.monster_attack}, "
        f"took {entry.damage_taken} damage, HP {entry.hp_after}, "
        f"found {format_materials(entry.reward)}"
    )


def render_explore_result(result: ExploreResult) -> None:
    render_heading("Exploration")
    render_bullet_lines(format_explore_log(entry) for entry in result.logs)
    if result.end_reason == "FLOOR_CLEARED":
        print(f"Floor cleared with {result.final_hp} HP left.")
    else:
        print(f"Defeated at stage {result.cleared_stage}.")
    print(f"Brought back {format_materials(result.total_reward)}.")
