"""Spin pipeline: generator -> matcher -> payout calculator."""
import logging
from decimal import Decimal

from reelstack.logic.game_config import GameConfig
from reelstack.logic.generator import SymbolGenerator
from reelstack.logic.matcher import PaylineMatcher
from reelstack.logic.models import Grid, SpinResult, WinLine
from reelstack.logic.payout import PayoutCalculator
from reelstack.logic.rng import ProductionRNG, RNGBase


logger = logging.getLogger(__name__)


class GameEngine:
    """
    Payline game engine.

    Implements:
    - Grid generation with per-reel scatter/wildcard rules
    - Payline matching with wildcard substitution
    - Payout with stacked wildcard multipliers
    - Scatter bonus signal

    Holds no money state: the caller debits the bet and credits total_win.
    """

    def __init__(self, config: GameConfig, rng: RNGBase | None = None):
        self.config = config
        self.rng = rng or ProductionRNG()
        self.generator = SymbolGenerator(config, self.rng)
        self.matcher = PaylineMatcher(config)
        self.calculator = PayoutCalculator(config)

    def spin(self, bet_amount: Decimal) -> SpinResult:
        """Generate a grid and evaluate it at the given bet."""
        grid = self.generator.generate()
        return self.evaluate(grid, bet_amount)

    def evaluate(self, grid: Grid, bet_amount: Decimal) -> SpinResult:
        """
        Evaluate an existing grid.

        Used by spin() and directly by tests and replays with fixed grids.
        """
        bet_amount = Decimal(str(bet_amount))
        wins = self.matcher.get_wins(grid)

        # Calculator input: wins and bet only
        paid = SpinResult(grid=grid, bet_amount=bet_amount, wins=wins)
        matrix = self.calculator.multiplier_matrix(paid)
        total_win = self.calculator.calc(paid)

        scatter_cells = self.matcher.get_scatter_cells(grid)
        result = SpinResult(
            grid=grid,
            bet_amount=bet_amount,
            wins=wins,
            win_lines=[
                WinLine(
                    payline=payline,
                    symbol=multiplier.symbol,
                    multiplier=multiplier.value,
                    amount=multiplier.value * bet_amount,
                    cells=wins[payline],
                )
                for payline, multiplier in sorted(matrix.items())
            ],
            scatter_cells=scatter_cells,
            bonus_triggered=self.matcher.is_bonus_triggered(scatter_cells),
            total_win=total_win,
            total_win_x=total_win / bet_amount if bet_amount > 0 else Decimal("0"),
        )

        logger.debug(
            "Spin evaluated: bet=%s lines=%d total_win=%s scatters=%d bonus=%s",
            bet_amount,
            len(result.win_lines),
            result.total_win,
            len(result.scatter_cells),
            result.bonus_triggered,
        )
        return result
