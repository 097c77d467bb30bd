"""Config hash shared by telemetry and the audit simulation.

The hash MUST be computed identically in both places so audit CSV rows
can be matched with spin_processed events.
"""
import hashlib
import json

from reelstack.config import game_config, settings
from reelstack.logic.game_config import GameConfig


def get_config_hash(config: GameConfig | None = None) -> str:
    """
    Hash the game definition and allowed bets.

    Returns 16-char hex hash of the config snapshot.
    """
    config = config or game_config
    config_snapshot = {
        "game": config.to_snapshot(),
        "allowed_bets": [str(bet) for bet in settings.allowed_bets],
    }
    canonical = json.dumps(config_snapshot, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]
