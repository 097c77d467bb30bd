"""Payline evaluation: cell selection and left-anchored run extraction."""
from reelstack.logic.game_config import GameConfig
from reelstack.logic.models import Cell, Grid


class PaylineMatcher:
    """
    Evaluate a grid against the payline library.

    All methods are pure: the same (mask, grid) always yields the same run.
    """

    def __init__(self, config: GameConfig):
        self.config = config

    def select_cells(self, mask: list[list[int]], grid: Grid) -> list[Cell]:
        """Cells a payline passes through, one per column, left to right."""
        cells: list[Cell] = []
        for column in range(len(mask[0])):
            for row in range(len(mask)):
                if mask[row][column] != 1:
                    continue
                cells.append(Cell(column=column, row=row, symbol=grid[column][row]))
        return cells

    def match_run(self, cells: list[Cell]) -> list[Cell]:
        """
        Longest run from column 0 of one symbol, with wildcards substituting.

        The target symbol is set by the first non-wildcard cell, so a run may
        open with wildcards. Wildcard cells keep their own symbol in the
        result. Runs shorter than min_run_length are returned as-is; callers
        decide whether they pay.
        """
        run: list[Cell] = []
        established: int | None = None

        for cell in cells:
            if self.config.is_wildcard(cell.symbol):
                run.append(cell)
                continue

            if established is None:
                established = cell.symbol
            elif cell.symbol != established:
                break

            run.append(cell)

        return run

    def get_wins(self, grid: Grid) -> dict[int, list[Cell]]:
        """Winning runs keyed by payline index."""
        wins: dict[int, list[Cell]] = {}
        for index, mask in enumerate(self.config.paylines):
            run = self.match_run(self.select_cells(mask, grid))
            if len(run) >= self.config.min_run_length:
                wins[index] = run
        return wins

    def get_scatter_cells(self, grid: Grid) -> list[Cell]:
        """Every scatter on the grid, regardless of paylines."""
        return [
            Cell(column=column, row=row, symbol=symbol)
            for column, reel in enumerate(grid)
            for row, symbol in enumerate(reel)
            if self.config.is_scatter(symbol)
        ]

    def is_bonus_triggered(self, scatter_cells: list[Cell]) -> bool:
        return len(scatter_cells) >= self.config.scatter_trigger_count
