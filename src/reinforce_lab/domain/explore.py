"""Deterministic ten-stage floor exploration."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List

from reinforce_lab.core.types import ExploreEndReason, Floor
from reinforce_lab.domain.state import EXPLORE_STAGE_COUNT, MaterialStock

# Stages 1-3 are tier 1, 4-6 tier 2, 7-9 tier 3 and stage 10 is the boss.
# Each floor gets strictly tougher and richer per tier. Floor 1 pays iron only,
# floor 2 adds steel and floor 3 is the only source of mithril.
BOSS_TIER = 4


@dataclass(frozen=True, slots=True)
class MonsterStats:
    hp: int
    attack: int


@dataclass(frozen=True, slots=True)
class ExploreLog:
    """One resolved stage, kept for stage-by-stage presentation."""

    stage: int
    monster_hp: int
    monster_attack: int
    damage_taken: int
    hp_after: int
    reward: MaterialStock


@dataclass(frozen=True, slots=True)
class ExploreResult:
    logs: tuple[ExploreLog, ...]
    total_reward: MaterialStock
    final_hp: int
    cleared_stage: int
    end_reason: ExploreEndReason


MONSTER_TABLE: Dict[Floor, Dict[int, MonsterStats]] = {
    1: {
        1: MonsterStats(hp=5, attack=1),
        2: MonsterStats(hp=7, attack=2),
        3: MonsterStats(hp=9, attack=3),
        4: MonsterStats(hp=20, attack=5),
    },
    2: {
        1: MonsterStats(hp=9, attack=2),
        2: MonsterStats(hp=11, attack=3),
        3: MonsterStats(hp=13, attack=4),
        4: MonsterStats(hp=26, attack=6),
    },
    3: {
        1: MonsterStats(hp=13, attack=3),
        2: MonsterStats(hp=15, attack=4),
        3: MonsterStats(hp=17, attack=5),
        4: MonsterStats(hp=32, attack=8),
    },
}

REWARD_TABLE: Dict[Floor, Dict[int, MaterialStock]] = {
    1: {
        1: MaterialStock(iron_ore=1),
        2: MaterialStock(iron_ore=2),
        3: MaterialStock(iron_ore=3),
        4: MaterialStock(iron_ore=5),
    },
    2: {
        1: MaterialStock(iron_ore=2, steel_ore=1),
        2: MaterialStock(iron_ore=3, steel_ore=1),
        3: MaterialStock(iron_ore=4, steel_ore=2),
        4: MaterialStock(iron_ore=6, steel_ore=3),
    },
    3: {
        1: MaterialStock(iron_ore=3, steel_ore=2, mithril=1),
        2: MaterialStock(iron_ore=4, steel_ore=3, mithril=1),
        3: MaterialStock(iron_ore=5, steel_ore=4, mithril=2),
        4: MaterialStock(iron_ore=8, steel_ore=5, mithril=3),
    },
}

FLOOR_HINTS: Dict[Floor, str] = {
    1: "Floor 1: mostly iron ore.",
    2: "Floor 2: iron ore and steel ore.",
    3: "Floor 3: iron ore, steel ore and mithril.",
}


def normalize_floor(value: float) -> Floor:
    if value <= 1:
        return 1
    if value >= 3:
        return 3
    return 2


def get_stage_tier(stage: int) -> int:
    if stage <= 3:
        return 1
    if stage <= 6:
        return 2
    if stage <= 9:
        return 3
    return BOSS_TIER


def get_monster_stats(floor: Floor, stage: int) -> MonsterStats:
    return MONSTER_TABLE[normalize_floor(floor)][get_stage_tier(stage)]


def get_stage_reward(floor: Floor, stage: int) -> MaterialStock:
    return REWARD_TABLE[normalize_floor(floor)][get_stage_tier(stage)]


def resolve_combat_damage(monster: MonsterStats, attack: int) -> int:
    """Damage the player takes to kill the monster; the killing blow draws no retaliation."""
    hits_needed = math.ceil(monster.hp / attack)
    return max(0, hits_needed - 1) * monster.attack


def simulate_explore(floor: Floor, hp: int, attack: int) -> ExploreResult:
    """Replay a full floor run; identical inputs always give identical results."""
    floor = normalize_floor(floor)
    current_hp = max(0, hp)
    current_attack = max(1, attack)

    logs: List[ExploreLog] = []
    total_reward = MaterialStock()

    for stage in range(1, EXPLORE_STAGE_COUNT + 1):
        monster = get_monster_stats(floor, stage)
        reward = get_stage_reward(floor, stage)

        damage_taken = resolve_combat_damage(monster, current_attack)
        current_hp = max(0, current_hp - damage_taken)
        # The monster still falls on the defeating exchange, so its reward counts.
        total_reward = total_reward.add(reward)

        logs.append(
            ExploreLog(
                stage=stage,
                monster_hp=monster.hp,
                monster_attack=monster.attack,
                damage_taken=damage_taken,
                hp_after=current_hp,
                reward=reward,
            )
        )

        if current_hp <= 0:
            return ExploreResult(
                logs=tuple(logs),
                total_reward=total_reward,
                final_hp=0,
                cleared_stage=stage,
                end_reason="DEFEATED",
            )

    return ExploreResult(
        logs=tuple(logs),
        total_reward=total_reward,
        final_hp=current_hp,
        cleared_stage=EXPLORE_STAGE_COUNT,
        end_reason="FLOOR_CLEARED",
    )
