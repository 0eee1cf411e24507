"""Monte Carlo estimate of the legacy seeded economy.

Before combat existed, each explore paid 1-3 iron ore drawn from the seeded LCG
and cost one hit point. Every 10 iron crafted a +0 sword and any pair of equal
swords fused into the next plus. This tool replays that loop many times to
measure how many explores and rests it takes to reach a target plus.
"""
from __future__ import annotations

import argparse
import json
import statistics
from dataclasses import asdict, dataclass
from typing import Dict, List, Sequence

from reinforce_lab.core.rng import normalize_seed, random_int
from reinforce_lab.domain.state import INITIAL_HP, INITIAL_SEED

LEGACY_CRAFT_COST = 10
LEGACY_MIN_DROP = 1
LEGACY_MAX_DROP = 3
RUN_SEED_STRIDE = 9973


@dataclass(frozen=True, slots=True)
class RunResult:
    explore_count: int
    rest_count: int


@dataclass(frozen=True, slots=True)
class SimulationSummary:
    runs: int
    target_plus: int
    avg_explore_count: float
    avg_rest_count: float
    std_explore_count: float
    std_rest_count: float
    min_explore_count: int
    max_explore_count: int
    min_rest_count: int
    max_rest_count: int
    explore_to_rest_ratio: float


def best_plus(swords: Dict[int, int]) -> int:
    return max((plus for plus, count in swords.items() if count > 0), default=0)


def fuse_all(swords: Dict[int, int]) -> None:
    """Fuse every pair of equal swords upward until no pair remains."""
    changed = True
    while changed:
        changed = False
        for plus in sorted(swords):
            count = swords.get(plus, 0)
            if count < 2:
                continue
            pairs = count // 2
            swords[plus] = count - pairs * 2
            if swords[plus] <= 0:
                del swords[plus]
            swords[plus + 1] = swords.get(plus + 1, 0) + pairs
            changed = True


def run_single_simulation(target_plus: int, start_seed: int) -> RunResult:
    seed = normalize_seed(start_seed)
    hp = INITIAL_HP
    iron_ore = 0
    explore_count = 0
    rest_count = 0
    swords: Dict[int, int] = {0: 1}

    while best_plus(swords) < target_plus:
        if hp <= 0:
            hp = INITIAL_HP
            rest_count += 1
            continue

        roll = random_int(seed, LEGACY_MIN_DROP, LEGACY_MAX_DROP)
        seed = roll.next_seed
        iron_ore += int(roll.value)
        hp -= 1
        explore_count += 1

        while iron_ore >= LEGACY_CRAFT_COST:
            iron_ore -= LEGACY_CRAFT_COST
            swords[0] = swords.get(0, 0) + 1
            fuse_all(swords)

    return RunResult(explore_count=explore_count, rest_count=rest_count)


def simulate(runs: int, target_plus: int, initial_seed: int = INITIAL_SEED) -> SimulationSummary:
    explores: List[int] = []
    rests: List[int] = []
    for index in range(runs):
        run_seed = normalize_seed(initial_seed + index * RUN_SEED_STRIDE)
        result = run_single_simulation(target_plus, run_seed)
        explores.append(result.explore_count)
        rests.append(result.rest_count)

    avg_explores = statistics.fmean(explores)
    avg_rests = statistics.fmean(rests)
    return SimulationSummary(
        runs=runs,
        target_plus=target_plus,
        avg_explore_count=avg_explores,
        avg_rest_count=avg_rests,
        std_explore_count=statistics.pstdev(explores),
        std_rest_count=statistics.pstdev(rests),
        min_explore_count=min(explores),
        max_explore_count=max(explores),
        min_rest_count=min(rests),
        max_rest_count=max(rests),
        explore_to_rest_ratio=avg_rests / avg_explores if avg_explores else 0.0,
    )


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a positive integer") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return value


def _non_negative_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer >= 0") from exc
    if value < 0:
        raise argparse.ArgumentTypeError("must be an integer >= 0")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reinforce-lab-simulate",
        description="Estimate explores and rests needed to reach a target plus in the legacy economy.",
    )
    parser.add_argument("--runs", type=_positive_int, default=100000)
    parser.add_argument("--target-plus", type=_non_negative_int, default=10)
    parser.add_argument("--initial-seed", type=int, default=INITIAL_SEED)
    parser.add_argument("--json", action="store_true", help="print the summary as JSON")
    return parser


def format_table(summary: SimulationSummary) -> str:
    rows = asdict(summary)
    width = max(len(key) for key in rows)
    lines = []
    for key, value in rows.items():
        shown = f"{value:.4f}" if isinstance(value, float) else str(value)
        lines.append(f"{key.ljust(width)}  {shown}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    summary = simulate(args.runs, args.target_plus, args.initial_seed)
    if args.json:
        print(json.dumps(asdict(summary), indent=2))
        return
    print(format_table(summary))


if __name__ == "__main__":
    main()
