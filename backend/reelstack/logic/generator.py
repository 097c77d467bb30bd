"""Symbol grid generation with per-reel placement rules."""
from reelstack.logic.game_config import GameConfig
from reelstack.logic.models import Grid
from reelstack.logic.rng import RNGBase


class SymbolGenerator:
    """
    Fill a fresh grid every spin.

    Each cell draws uniformly from a pool of symbol IDs. Scatters join the
    pool only on scatter reels, wildcards only on wildcard reels; normal
    symbols are always present. A class with more IDs is proportionally
    more likely, since the draw is flat per ID.
    """

    def __init__(self, config: GameConfig, rng: RNGBase):
        self.config = config
        self.rng = rng

    def generate(self) -> Grid:
        grid: Grid = [
            [self._get_value(column, []) for _ in range(self.config.rows)]
            for column in range(self.config.columns)
        ]
        self._remove_scatter_duplicates(grid)
        return grid

    def _get_value(self, column: int, exclude: list[int]) -> int:
        """Draw one symbol for a cell on the given reel."""
        pool: list[int] = []

        if column in self.config.scatter_reels and not self._has_match(
            self.config.scatter_symbols, exclude
        ):
            pool.extend(self.config.scatter_symbols)

        pool.extend(self.config.normal_symbols)

        if column in self.config.wildcard_reels:
            pool.extend(self.config.wildcard_symbols)

        return self.rng.choice(pool)

    @staticmethod
    def _has_match(values: list[int], exclude: list[int]) -> bool:
        return any(symbol in values for symbol in exclude)

    def _remove_scatter_duplicates(self, grid: Grid) -> None:
        """
        Keep at most one scatter per reel.

        Single pass: every scatter after the first on a reel is redrawn with
        the scatter class excluded, so the replacement is never a scatter.
        Only the first scatter ID is tracked.
        """
        if not self.config.scatter_symbols:
            return
        scatter = self.config.scatter_symbols[0]

        for column, reel in enumerate(grid):
            seen = 0
            for row, symbol in enumerate(reel):
                if symbol != scatter:
                    continue
                seen += 1
                if seen > 1:
                    reel[row] = self._get_value(column, self.config.scatter_symbols)
