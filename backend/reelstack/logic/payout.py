"""Payout calculation from matched runs."""
from decimal import Decimal

from reelstack.logic.game_config import GameConfig
from reelstack.logic.models import Cell, Multiplier, SpinResult


ZERO = Decimal("0")


class PayoutCalculator:
    """
    Convert winning runs into multipliers and money.

    The base multiplier comes from the payout table entry of the run's first
    cell, indexed by run length. Every wildcard in the run then multiplies it
    by the wildcard's own factor, so two x2 wildcards give x4.
    """

    def __init__(self, config: GameConfig):
        self.config = config

    def multiplier_for(self, run: list[Cell]) -> Decimal:
        if not run:
            return ZERO

        multipliers = self.config.payout_table.get(run[0].symbol)
        index = len(run) - self.config.min_run_length
        if not multipliers or not 0 <= index < len(multipliers):
            return ZERO

        multiplier = multipliers[index]
        for cell in run:
            if self.config.is_wildcard(cell.symbol):
                multiplier *= self.config.payout_table[cell.symbol][0]
        return multiplier

    def calc(self, result: SpinResult) -> Decimal:
        """Total payout for the result's winning runs at its bet."""
        total = ZERO
        for run in result.wins.values():
            multiplier = self.multiplier_for(run)
            if multiplier > 0:
                total += multiplier * result.bet_amount
        return total

    def multiplier_matrix(self, result: SpinResult) -> dict[int, Multiplier]:
        """Payline index -> (base symbol, multiplier) for every paying line."""
        matrix: dict[int, Multiplier] = {}
        for payline, run in result.wins.items():
            multiplier = self.multiplier_for(run)
            if multiplier > 0:
                matrix[payline] = Multiplier(symbol=run[0].symbol, value=multiplier)
        return matrix
