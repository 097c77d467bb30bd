#!/usr/bin/env python3
"""
Audit simulation: headless seeded spins summarized into one CSV row.

Usage:
    python -m scripts.audit_sim --rounds 100000 --seed AUDIT_2025 --out out/audit.csv
    python -m scripts.audit_sim --rounds 20000 --seed AUDIT_2025 --bet 10 --out out/audit_10.csv
"""
import argparse
import csv
import hashlib
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from reelstack.config import game_config
from reelstack.config_hash import get_config_hash
from reelstack.logic.engine import GameEngine
from reelstack.logic.game_config import GameConfig
from reelstack.logic.rng import SeededRNG


logger = logging.getLogger(__name__)


@dataclass
class SimulationStats:
    """Statistics accumulated during simulation."""
    total_wagered: Decimal = Decimal("0")
    total_won: Decimal = Decimal("0")
    rounds: int = 0
    wins: int = 0
    bonus_triggers: int = 0
    win_lines: int = 0
    win_x_values: list[float] = field(default_factory=list)
    max_win_x_observed: Decimal = Decimal("0")

    @property
    def rtp(self) -> float:
        if self.total_wagered <= 0:
            return 0.0
        return float(self.total_won / self.total_wagered * 100)

    @property
    def hit_freq(self) -> float:
        return (self.wins / self.rounds * 100) if self.rounds > 0 else 0.0

    @property
    def bonus_trigger_rate(self) -> float:
        return (self.bonus_triggers / self.rounds * 100) if self.rounds > 0 else 0.0


def get_timestamp_iso() -> str:
    """Get ISO 8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def seed_to_int(seed_str: str) -> int:
    """Convert string seed to integer deterministically."""
    return int(hashlib.sha256(seed_str.encode()).hexdigest(), 16) % (2**31)


def run_simulation(
    rounds: int,
    seed_str: str,
    bet_amount: Decimal = Decimal("1"),
    config: GameConfig | None = None,
    verbose: bool = False,
) -> SimulationStats:
    """
    Run headless simulation.

    Args:
        rounds: Number of spins to simulate
        seed_str: Seed string for reproducibility
        bet_amount: Bet per spin
        config: Game definition (defaults to the server's)
        verbose: Print progress

    Returns:
        SimulationStats with aggregated results
    """
    engine = GameEngine(config or game_config, rng=SeededRNG(seed=seed_to_int(seed_str)))
    stats = SimulationStats()
    progress_interval = max(1, rounds // 100)

    for round_count in range(rounds):
        if verbose and round_count % progress_interval == 0:
            pct = (round_count / rounds) * 100
            print(f"\rProgress: {pct:.1f}%", end="", flush=True)

        result = engine.spin(bet_amount)

        stats.rounds += 1
        stats.total_wagered += bet_amount
        stats.total_won += result.total_win
        stats.win_lines += len(result.win_lines)
        if result.total_win > 0:
            stats.wins += 1
        if result.bonus_triggered:
            stats.bonus_triggers += 1

        stats.win_x_values.append(float(result.total_win_x))
        if result.total_win_x > stats.max_win_x_observed:
            stats.max_win_x_observed = result.total_win_x

    if verbose:
        print("\rProgress: 100.0%")

    return stats


def calculate_percentile(values: list[float], percentile: float) -> float:
    """Calculate percentile from sorted list."""
    if not values:
        return 0.0
    sorted_vals = sorted(values)
    idx = int(len(sorted_vals) * percentile / 100)
    idx = min(idx, len(sorted_vals) - 1)
    return sorted_vals[idx]


def build_csv_row(
    rounds: int,
    seed_str: str,
    bet_amount: Decimal,
    stats: SimulationStats,
    config_hash: str,
) -> dict[str, str | int]:
    """CSV columns; timestamp and config_hash first."""
    return {
        "timestamp": get_timestamp_iso(),
        "config_hash": config_hash,
        "rounds": rounds,
        "seed": seed_str,
        "bet_amount": str(bet_amount),
        "total_wagered": f"{stats.total_wagered:.2f}",
        "total_won": f"{stats.total_won:.2f}",
        "rtp": f"{stats.rtp:.4f}",
        "hit_freq": f"{stats.hit_freq:.4f}",
        "bonus_trigger_rate": f"{stats.bonus_trigger_rate:.4f}",
        "avg_win_lines": f"{(stats.win_lines / stats.rounds) if stats.rounds else 0:.4f}",
        "p95_win_x": f"{calculate_percentile(stats.win_x_values, 95):.2f}",
        "p99_win_x": f"{calculate_percentile(stats.win_x_values, 99):.2f}",
        "max_win_x": f"{stats.max_win_x_observed:.2f}",
    }


def generate_csv(row: dict[str, str | int], output_path: str) -> None:
    """Write the single-row audit CSV."""
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=row.keys())
        writer.writeheader()
        writer.writerow(row)

    logger.info("Audit CSV written to %s", output_path)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seeded payline audit simulation")
    parser.add_argument("--rounds", type=int, required=True, help="Number of spins to simulate")
    parser.add_argument("--seed", type=str, required=True, help="Seed string for reproducibility")
    parser.add_argument("--bet", type=Decimal, default=Decimal("1"), help="Bet per spin")
    parser.add_argument("--out", type=str, required=True, help="Output CSV path")
    parser.add_argument("--verbose", action="store_true", help="Show progress")

    args = parser.parse_args(argv)
    if args.rounds <= 0:
        parser.error("--rounds must be positive")

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    config_hash = get_config_hash()
    print(f"Running simulation: rounds={args.rounds}, seed={args.seed}, bet={args.bet}")
    print(f"Config hash: {config_hash}")

    stats = run_simulation(
        rounds=args.rounds,
        seed_str=args.seed,
        bet_amount=args.bet,
        verbose=args.verbose,
    )
    generate_csv(build_csv_row(args.rounds, args.seed, args.bet, stats, config_hash), args.out)

    print("\nSummary:")
    print(f"  Rounds: {stats.rounds}")
    print(f"  Total wagered: {stats.total_wagered:.2f}")
    print(f"  Total won: {stats.total_won:.2f}")
    print(f"  RTP: {stats.rtp:.4f}%")
    print(f"  Hit frequency: {stats.hit_freq:.4f}%")
    print(f"  Bonus triggers: {stats.bonus_triggers} ({stats.bonus_trigger_rate:.4f}%)")
    print(f"  Max win_x observed: {stats.max_win_x_observed:.2f}x")

    return 0


if __name__ == "__main__":
    sys.exit(main())
