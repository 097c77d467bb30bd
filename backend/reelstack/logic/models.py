"""Value types produced by the spin pipeline."""
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


Grid = list[list[int]]


def grid_from_rows(rows: list[list[int]]) -> Grid:
    """
    Build a reel-major grid from rows as they appear on screen.

    grid_from_rows([[1, 2, 3], [4, 5, 6]]) == [[1, 4], [2, 5], [3, 6]]
    """
    return [list(reel) for reel in zip(*rows)]


def grid_to_rows(grid: Grid) -> list[list[int]]:
    """Inverse of grid_from_rows."""
    return [list(row) for row in zip(*grid)]


class Cell(BaseModel):
    """One grid position and the symbol on it."""

    model_config = ConfigDict(frozen=True)

    column: int
    row: int
    symbol: int


class Multiplier(BaseModel):
    """Base symbol of a winning payline and its final multiplier."""

    model_config = ConfigDict(frozen=True)

    symbol: int
    value: Decimal


class WinLine(BaseModel):
    """A paid payline."""

    model_config = ConfigDict(frozen=True)

    payline: int
    symbol: int
    multiplier: Decimal
    amount: Decimal
    cells: list[Cell]


class SpinResult(BaseModel):
    """
    Result of one spin.

    wins holds only runs that reached min_run_length, keyed by payline
    index. Scatter cells are reported separately from payline wins.
    Read-only once built.
    """

    model_config = ConfigDict(frozen=True)

    grid: Grid = Field(default_factory=list)
    bet_amount: Decimal = Decimal("0")
    wins: dict[int, list[Cell]] = Field(default_factory=dict)
    win_lines: list[WinLine] = Field(default_factory=list)
    scatter_cells: list[Cell] = Field(default_factory=list)
    bonus_triggered: bool = False
    total_win: Decimal = Decimal("0")
    total_win_x: Decimal = Decimal("0")
