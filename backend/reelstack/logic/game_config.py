"""Static game configuration: symbol classes, paylines and payout table.

Loaded once at startup and read-only afterwards. Every structural problem
(malformed payline, missing wildcard payout, empty symbol class) is rejected
here so the matcher and payout code can assume well-formed input.
"""
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator


logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when the game configuration is structurally invalid."""


# Payline masks are written the way they are drawn on screen: rows x columns.
DEFAULT_PAYLINES: list[list[list[int]]] = [
    [[1, 1, 1, 1, 1], [0, 0, 0, 0, 0], [0, 0, 0, 0, 0]],
    [[0, 0, 0, 0, 0], [1, 1, 1, 1, 1], [0, 0, 0, 0, 0]],
    [[0, 0, 0, 0, 0], [0, 0, 0, 0, 0], [1, 1, 1, 1, 1]],
    [[0, 1, 1, 1, 0], [1, 0, 0, 0, 1], [0, 0, 0, 0, 0]],
    [[0, 0, 0, 0, 0], [1, 0, 0, 0, 1], [0, 1, 1, 1, 0]],
    [[0, 0, 1, 0, 0], [1, 1, 0, 1, 1], [0, 0, 0, 0, 0]],
    [[0, 0, 0, 0, 0], [1, 1, 0, 1, 1], [0, 0, 1, 0, 0]],
    [[1, 1, 0, 1, 1], [0, 0, 0, 0, 0], [0, 0, 1, 0, 0]],
    [[0, 0, 1, 0, 0], [0, 0, 0, 0, 0], [1, 1, 0, 1, 1]],
    [[1, 0, 0, 0, 1], [0, 1, 0, 1, 0], [0, 0, 1, 0, 0]],
    [[0, 0, 1, 0, 0], [0, 1, 0, 1, 0], [1, 0, 0, 0, 1]],
    [[0, 0, 0, 1, 1], [0, 0, 1, 0, 0], [1, 1, 0, 0, 0]],
    [[1, 1, 0, 0, 0], [0, 0, 1, 0, 0], [0, 0, 0, 1, 1]],
    [[0, 0, 0, 1, 0], [1, 0, 1, 0, 1], [0, 1, 0, 0, 0]],
    [[1, 0, 0, 0, 1], [0, 0, 0, 0, 0], [0, 1, 1, 1, 0]],
    [[0, 1, 0, 0, 0], [1, 0, 1, 0, 1], [0, 0, 0, 1, 0]],
    [[1, 0, 0, 0, 1], [0, 1, 1, 1, 0], [0, 0, 0, 0, 0]],
    [[0, 0, 0, 0, 0], [0, 1, 1, 1, 0], [1, 0, 0, 0, 1]],
    [[1, 0, 1, 0, 1], [0, 1, 0, 1, 0], [0, 0, 0, 0, 0]],
    [[0, 0, 0, 0, 0], [0, 1, 0, 1, 0], [1, 0, 1, 0, 1]],
]

# Multipliers by (run length - min_run_length). Wildcards carry one factor.
DEFAULT_PAYOUT_TABLE: dict[int, list[str]] = {
    1: ["2.5", "7.5", "37.5"],
    2: ["1.75", "5", "25"],
    3: ["1", "2", "10"],
    4: ["1", "2", "10"],
    5: ["0.6", "1.25", "7.5"],
    6: ["0.4", "1", "5"],
    7: ["0.25", "0.5", "2.5"],
    8: ["0.25", "0.5", "2.5"],
    9: ["0.1", "0.25", "1.25"],
    10: ["0.1", "0.25", "1.25"],
    11: ["0.1", "0.25", "1.25"],
    12: ["2"],
    13: ["3"],
    14: ["4"],
}


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so 0.1 stays 0.1 instead of its binary expansion
    return Decimal(str(value))


class GameConfig(BaseModel):
    """
    Static configuration for one payline game.

    Grid is reel-major (grid[column][row]). Scatter and wildcard eligibility
    lists hold reel (column) indices.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    columns: int = 5
    rows: int = 3

    scatter_symbols: list[int] = [0]
    normal_symbols: list[int] = list(range(1, 12))
    wildcard_symbols: list[int] = [12, 13, 14]

    scatter_reels: list[int] = [0, 2, 4]
    wildcard_reels: list[int] = [1, 2, 3]

    paylines: list[list[list[int]]] = DEFAULT_PAYLINES
    payout_table: dict[int, list[Decimal]] = DEFAULT_PAYOUT_TABLE

    min_run_length: int = 3
    scatter_trigger_count: int = 3

    @field_validator("payout_table", mode="before")
    @classmethod
    def _coerce_multipliers(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            int(symbol): [_to_decimal(m) for m in multipliers]
            for symbol, multipliers in value.items()
        }

    @model_validator(mode="after")
    def _check_structure(self) -> "GameConfig":
        if self.columns <= 0 or self.rows <= 0:
            raise ValueError(f"grid must be non-empty, got {self.columns}x{self.rows}")

        if not self.normal_symbols:
            raise ValueError("normal_symbols must not be empty")

        for name in ("scatter_symbols", "normal_symbols", "wildcard_symbols"):
            symbols = getattr(self, name)
            if len(set(symbols)) != len(symbols):
                raise ValueError(f"{name} contains duplicate symbol IDs")

        classes = [set(self.scatter_symbols), set(self.normal_symbols), set(self.wildcard_symbols)]
        if sum(len(c) for c in classes) != len(set().union(*classes)):
            raise ValueError("scatter, normal and wildcard symbols must be disjoint")

        for name in ("scatter_reels", "wildcard_reels"):
            for reel in getattr(self, name):
                if not 0 <= reel < self.columns:
                    raise ValueError(f"{name} index {reel} outside 0..{self.columns - 1}")

        for index, mask in enumerate(self.paylines):
            self._check_payline(index, mask)

        for symbol in self.wildcard_symbols:
            if not self.payout_table.get(symbol):
                raise ValueError(f"wildcard {symbol} has no payout multiplier")

        if not 1 <= self.min_run_length <= self.columns:
            raise ValueError(f"min_run_length must be within 1..{self.columns}")

        if self.scatter_trigger_count < 1:
            raise ValueError("scatter_trigger_count must be positive")

        return self

    def _check_payline(self, index: int, mask: list[list[int]]) -> None:
        if len(mask) != self.rows or any(len(row) != self.columns for row in mask):
            raise ValueError(f"payline {index} must be {self.rows}x{self.columns}")
        for column in range(self.columns):
            active = sum(1 for row in range(self.rows) if mask[row][column] == 1)
            if active != 1:
                raise ValueError(
                    f"payline {index} column {column} has {active} active rows, expected 1"
                )

    def is_scatter(self, symbol: int) -> bool:
        return symbol in self.scatter_symbols

    def is_wildcard(self, symbol: int) -> bool:
        return symbol in self.wildcard_symbols

    def to_snapshot(self) -> dict[str, Any]:
        """JSON-safe view, used for hashing and the /init payload."""
        return self.model_dump(mode="json")


def load_game_config(path: str | Path | None = None) -> GameConfig:
    """
    Load and validate the game configuration.

    Without a path the built-in default game is returned. Any structural
    problem raises ConfigurationError.
    """
    try:
        if path is None:
            config = GameConfig()
        else:
            raw = json.loads(Path(path).read_text())
            config = GameConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid game configuration: {e}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read game configuration {path}: {e}") from e

    logger.info(
        "Loaded game config: %dx%d grid, %d paylines, source=%s",
        config.columns,
        config.rows,
        len(config.paylines),
        path or "default",
    )
    return config
