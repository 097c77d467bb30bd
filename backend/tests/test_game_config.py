"""Game configuration loading and validation tests."""
import json
from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

from reelstack.logic.game_config import (
    DEFAULT_PAYLINES,
    ConfigurationError,
    GameConfig,
    load_game_config,
)


def write_config(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "game.json"
    path.write_text(json.dumps(data))
    return path


class TestDefaultConfig:

    def test_default_game(self):
        config = load_game_config()
        assert (config.columns, config.rows) == (5, 3)
        assert len(config.paylines) == 20
        assert config.scatter_symbols == [0]
        assert config.wildcard_symbols == [12, 13, 14]

    def test_payout_table_is_decimal(self):
        config = GameConfig()
        assert config.payout_table[9] == [Decimal("0.1"), Decimal("0.25"), Decimal("1.25")]
        assert config.payout_table[12] == [Decimal("2")]

    def test_config_is_read_only(self):
        config = GameConfig()
        with pytest.raises(ValidationError):
            config.columns = 6


class TestLoadFromFile:

    def test_float_multipliers_keep_decimal_value(self, tmp_path: Path):
        path = write_config(tmp_path, {
            "payout_table": {
                "1": [0.1, 0.2, 0.3],
                "12": [2],
                "13": [3],
                "14": [4],
            },
        })

        config = load_game_config(path)

        assert config.payout_table[1] == [Decimal("0.1"), Decimal("0.2"), Decimal("0.3")]

    def test_custom_grid(self, tmp_path: Path):
        path = write_config(tmp_path, {
            "columns": 3,
            "rows": 2,
            "scatter_reels": [0, 2],
            "wildcard_reels": [1],
            "paylines": [
                [[1, 1, 1], [0, 0, 0]],
                [[0, 0, 0], [1, 1, 1]],
                [[1, 0, 1], [0, 1, 0]],
            ],
        })

        config = load_game_config(path)

        assert (config.columns, config.rows) == (3, 2)
        assert len(config.paylines) == 3

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigurationError):
            load_game_config(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path: Path):
        path = tmp_path / "game.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_game_config(path)


class TestValidation:
    """Structural problems fail at load time, never during a spin."""

    def _assert_rejected(self, tmp_path: Path, data: dict, fragment: str) -> None:
        with pytest.raises(ConfigurationError, match=fragment):
            load_game_config(write_config(tmp_path, data))

    def test_payline_with_two_active_rows(self, tmp_path: Path):
        bad = [[1, 1, 1, 1, 1], [1, 0, 0, 0, 0], [0, 0, 0, 0, 0]]
        self._assert_rejected(
            tmp_path, {"paylines": DEFAULT_PAYLINES[:3] + [bad]}, "column 0 has 2 active rows"
        )

    def test_payline_with_empty_column(self, tmp_path: Path):
        bad = [[1, 1, 0, 1, 1], [0, 0, 0, 0, 0], [0, 0, 0, 0, 0]]
        self._assert_rejected(tmp_path, {"paylines": [bad]}, "column 2 has 0 active rows")

    def test_payline_with_wrong_shape(self, tmp_path: Path):
        bad = [[1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]]
        self._assert_rejected(tmp_path, {"paylines": [bad]}, "payline 0 must be 3x5")

    def test_wildcard_without_payout(self, tmp_path: Path):
        self._assert_rejected(
            tmp_path,
            {"payout_table": {"1": [1, 2, 3], "12": [2], "13": [3]}},
            "wildcard 14 has no payout multiplier",
        )

    def test_overlapping_symbol_classes(self, tmp_path: Path):
        self._assert_rejected(
            tmp_path, {"scatter_symbols": [0, 1]}, "must be disjoint"
        )

    @pytest.mark.parametrize(
        "field, symbols",
        [
            ("normal_symbols", [1, 1, 2]),
            ("scatter_symbols", [0, 0]),
            ("wildcard_symbols", [12, 13, 13]),
        ],
    )
    def test_duplicate_symbol_ids(self, tmp_path: Path, field, symbols):
        """A repeated ID would double its draw weight."""
        self._assert_rejected(tmp_path, {field: symbols}, f"{field} contains duplicate")

    def test_empty_normal_symbols(self, tmp_path: Path):
        self._assert_rejected(tmp_path, {"normal_symbols": []}, "must not be empty")

    def test_reel_index_out_of_range(self, tmp_path: Path):
        self._assert_rejected(tmp_path, {"wildcard_reels": [1, 5]}, "wildcard_reels index 5")

    def test_min_run_length_longer_than_grid(self, tmp_path: Path):
        self._assert_rejected(tmp_path, {"min_run_length": 6}, "min_run_length")

    def test_empty_grid(self, tmp_path: Path):
        self._assert_rejected(tmp_path, {"rows": 0}, "grid must be non-empty")
