from __future__ import annotations

from dataclasses import replace

from reinforce_lab.domain.state import create_initial_game_state
from reinforce_lab.presentation.cli.rest import RestCountdown, format_as_mm_ss
from reinforce_lab.services.game_service import GameService


def test_format_as_mm_ss() -> None:
    assert format_as_mm_ss(0) == "00:00"
    assert format_as_mm_ss(75) == "01:15"
    assert format_as_mm_ss(-4) == "00:00"


def test_countdown_ticks_then_rests() -> None:
    service = GameService(state=replace(create_initial_game_state(), hp=3))
    sleeps: list[float] = []
    ticks: list[str] = []
    countdown = RestCountdown(3, sleep=sleeps.append, on_tick=ticks.append)

    assert countdown.run(service)
    assert ticks == ["00:03", "00:02", "00:01"]
    assert sleeps == [1, 1, 1]
    assert service.state.hp == 10
    assert service.state.rest_count == 1


def test_countdown_skipped_at_full_hp() -> None:
    service = GameService(state=create_initial_game_state())
    sleeps: list[float] = []
    countdown = RestCountdown(5, sleep=sleeps.append)

    assert not countdown.run(service)
    assert sleeps == []
    assert service.state.rest_count == 0
