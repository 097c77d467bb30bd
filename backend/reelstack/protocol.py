"""Protocol models for the HTTP boundary."""
from decimal import Decimal

from pydantic import BaseModel, Field

from reelstack.config import game_config, settings
from reelstack.logic.models import Cell, SpinResult, grid_to_rows


# === Request Models ===


class SpinRequest(BaseModel):
    """POST /spin request body."""

    clientRequestId: str = Field(..., description="UUIDv4 idempotency key")
    betAmount: Decimal = Field(..., description="Must be in allowedBets")


# === Response Models ===


class Position(BaseModel):
    """Grid position in screen terms."""

    column: int
    row: int
    symbol: int

    @classmethod
    def from_cell(cls, cell: Cell) -> "Position":
        return cls(column=cell.column, row=cell.row, symbol=cell.symbol)


class Configuration(BaseModel):
    """Configuration object in /init response."""

    currency: str = settings.currency
    allowedBets: list[float] = [float(bet) for bet in settings.allowed_bets]
    columns: int = game_config.columns
    rows: int = game_config.rows
    scatterSymbols: list[int] = game_config.scatter_symbols
    normalSymbols: list[int] = game_config.normal_symbols
    wildcardSymbols: list[int] = game_config.wildcard_symbols
    paylines: list[list[list[int]]] = game_config.paylines
    payoutTable: dict[str, list[float]] = {
        str(symbol): [float(m) for m in multipliers]
        for symbol, multipliers in game_config.payout_table.items()
    }
    minRunLength: int = game_config.min_run_length
    scatterTriggerCount: int = game_config.scatter_trigger_count


class InitResponse(BaseModel):
    """GET /init response."""

    protocolVersion: str = settings.protocol_version
    configuration: Configuration = Field(default_factory=Configuration)
    balance: float


class WinLineOut(BaseModel):
    """One paying payline in the spin response."""

    payline: int
    symbol: int
    multiplier: float
    amount: float
    positions: list[Position]


class ScatterOut(BaseModel):
    positions: list[Position] = Field(default_factory=list)
    bonusTriggered: bool = False


class Outcome(BaseModel):
    totalWin: float
    totalWinX: float


class SpinResponse(BaseModel):
    """POST /spin response."""

    protocolVersion: str = settings.protocol_version
    roundId: str
    currency: str = settings.currency
    betAmount: float
    grid: list[list[int]]
    winLines: list[WinLineOut] = Field(default_factory=list)
    scatter: ScatterOut = Field(default_factory=ScatterOut)
    outcome: Outcome
    balance: float

    @classmethod
    def from_result(cls, round_id: str, result: SpinResult, balance: Decimal) -> "SpinResponse":
        """Build the wire response; grid is sent row by row as drawn."""
        return cls(
            roundId=round_id,
            betAmount=float(result.bet_amount),
            grid=grid_to_rows(result.grid),
            winLines=[
                WinLineOut(
                    payline=line.payline,
                    symbol=line.symbol,
                    multiplier=float(line.multiplier),
                    amount=float(line.amount),
                    positions=[Position.from_cell(c) for c in line.cells],
                )
                for line in result.win_lines
            ],
            scatter=ScatterOut(
                positions=[Position.from_cell(c) for c in result.scatter_cells],
                bonusTriggered=result.bonus_triggered,
            ),
            outcome=Outcome(
                totalWin=float(result.total_win),
                totalWinX=float(result.total_win_x),
            ),
            balance=float(balance),
        )
