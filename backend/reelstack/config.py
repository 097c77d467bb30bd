"""Application configuration from environment."""
from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict

from reelstack.logic.game_config import GameConfig, load_game_config


class Settings(BaseSettings):
    """Server settings; every field can be overridden with REELSTACK_<NAME>."""

    model_config = SettingsConfigDict(env_prefix="REELSTACK_")

    # Server
    debug: bool = False
    redis_url: str = "redis://localhost:6379/0"

    # Protocol
    protocol_version: str = "1.0"
    currency: str = "USD"

    # Wallet
    allowed_bets: list[Decimal] = [
        Decimal("0.10"),
        Decimal("0.20"),
        Decimal("0.50"),
        Decimal("1.00"),
        Decimal("2.00"),
        Decimal("5.00"),
        Decimal("10.00"),
    ]
    starting_balance: Decimal = Decimal("200100")

    # Game definition (JSON file); built-in default game when unset
    game_config_path: str | None = None

    # State persistence (Redis TTLs)
    player_state_ttl_seconds: int = 86400  # 24 hours for session continuation

    # Lock TTL for per-player spin lock (ROUND_IN_PROGRESS recovery)
    lock_ttl_seconds: int = 30  # Auto-expire lock after 30s if process crashes


settings = Settings()

# Validated once at import; a broken game file fails startup, not a spin.
game_config: GameConfig = load_game_config(settings.game_config_path)
