from dataclasses import replace

from reinforce_lab.domain.forge import validate_forge
from reinforce_lab.domain.state import EquipmentItem, GameState, MaterialStock


def _make_state(*items: EquipmentItem, **changes: object) -> GameState:
    base = GameState(
        materials=MaterialStock(iron_ore=100, steel_ore=100, mithril=100),
        equipment_items=items,
        next_item_id=len(items) + 1,
        forge_level=10,
    )
    return replace(base, **changes)


def _pair(plus: int, kind: str = "weapon") -> tuple[EquipmentItem, EquipmentItem]:
    return (
        EquipmentItem(id="i-1", kind=kind, plus=plus),
        EquipmentItem(id="i-2", kind=kind, plus=plus),
    )


def test_valid_pair_returns_both_items() -> None:
    state = _make_state(*_pair(2))
    result = validate_forge(state, "i-1", "i-2")
    assert result.ok
    assert result.reason is None
    assert result.target is not None and result.target.id == "i-1"
    assert result.material is not None and result.material.id == "i-2"


def test_missing_selection() -> None:
    state = _make_state(*_pair(0))
    assert validate_forge(state, None, "i-2").reason == "MISSING_SELECTION"
    assert validate_forge(state, "i-1", "").reason == "MISSING_SELECTION"


def test_same_item() -> None:
    state = _make_state(*_pair(0))
    assert validate_forge(state, "i-1", "i-1").reason == "SAME_ITEM"


def test_item_not_found() -> None:
    state = _make_state(*_pair(0))
    assert validate_forge(state, "i-1", "i-9").reason == "ITEM_NOT_FOUND"


def test_equipped_item_is_rejected() -> None:
    state = _make_state(*_pair(0), equipped_weapon_item_id="i-2")
    result = validate_forge(state, "i-1", "i-2")
    assert not result.ok
    assert result.reason == "EQUIPPED_ITEM"
    assert result.target is None


def test_kind_mismatch() -> None:
    state = _make_state(
        EquipmentItem(id="i-1", kind="weapon", plus=0),
        EquipmentItem(id="i-2", kind="armor", plus=0),
    )
    assert validate_forge(state, "i-1", "i-2").reason == "KIND_MISMATCH"


def test_plus_mismatch() -> None:
    state = _make_state(
        EquipmentItem(id="i-1", kind="weapon", plus=1),
        EquipmentItem(id="i-2", kind="weapon", plus=2),
    )
    assert validate_forge(state, "i-1", "i-2").reason == "PLUS_MISMATCH"


def test_forge_level_gates_by_tier() -> None:
    assert validate_forge(_make_state(*_pair(6), forge_level=2), "i-1", "i-2").reason == (
        "FORGE_LEVEL_TOO_LOW_FOR_STEEL"
    )
    assert validate_forge(_make_state(*_pair(10), forge_level=4), "i-1", "i-2").reason == (
        "FORGE_LEVEL_TOO_LOW_FOR_MITHRIL"
    )
    assert validate_forge(_make_state(*_pair(6), forge_level=3), "i-1", "i-2").ok
    assert validate_forge(_make_state(*_pair(10), forge_level=5), "i-1", "i-2").ok


def test_insufficient_materials_in_order() -> None:
    assert validate_forge(
        _make_state(*_pair(5), materials=MaterialStock(iron_ore=4)), "i-1", "i-2"
    ).reason == "INSUFFICIENT_IRON_ORE"
    assert validate_forge(
        _make_state(*_pair(6), materials=MaterialStock(iron_ore=6, steel_ore=5)), "i-1", "i-2"
    ).reason == "INSUFFICIENT_STEEL_ORE"
    assert validate_forge(
        _make_state(*_pair(10), materials=MaterialStock(iron_ore=10, mithril=9)), "i-1", "i-2"
    ).reason == "INSUFFICIENT_MITHRIL"


def test_plus_zero_pair_is_free() -> None:
    state = _make_state(*_pair(0), materials=MaterialStock(), forge_level=0)
    assert validate_forge(state, "i-1", "i-2").ok


def test_first_failing_check_wins() -> None:
    # Both equipped and of different kinds: the equipped check comes first.
    state = _make_state(
        EquipmentItem(id="i-1", kind="weapon", plus=0),
        EquipmentItem(id="i-2", kind="armor", plus=3),
        equipped_armor_item_id="i-2",
    )
    assert validate_forge(state, "i-1", "i-2").reason == "EQUIPPED_ITEM"
