"""
Tests for high score storage.
"""

import json

from deploy_snacks.snack_core.highscore import (
    DEFAULT_KEY,
    JsonHighScoreStore,
    MemoryHighScoreStore,
)


class TestMemoryStore:

    def test_round_trip(self):
        store = MemoryHighScoreStore(10)
        assert store.load() == 10
        store.save(30)
        assert store.load() == 30
        assert store.saves == 1


class TestJsonStore:
    """Test the JSON file store."""

    def test_missing_file_loads_zero(self, tmp_path):
        assert JsonHighScoreStore(tmp_path / "none.json").load() == 0

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "scores" / "highscore.json"
        store = JsonHighScoreStore(path)

        store.save(120)

        assert JsonHighScoreStore(path).load() == 120

    def test_file_format(self, tmp_path):
        path = tmp_path / "highscore.json"
        JsonHighScoreStore(path).save(80)

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        assert data[DEFAULT_KEY] == 80
        assert "saved_at" in data

    def test_malformed_file_loads_zero(self, tmp_path):
        path = tmp_path / "highscore.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonHighScoreStore(path).load() == 0

    def test_wrong_shape_loads_zero(self, tmp_path):
        path = tmp_path / "highscore.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonHighScoreStore(path).load() == 0

    def test_custom_key(self, tmp_path):
        path = tmp_path / "highscore.json"
        JsonHighScoreStore(path, key="other").save(5)
        assert JsonHighScoreStore(path).load() == 0
        assert JsonHighScoreStore(path, key="other").load() == 5

    def test_save_failure_is_swallowed(self, tmp_path):
        # A directory where the file should be makes open() fail
        path = tmp_path / "highscore.json"
        path.mkdir()
        JsonHighScoreStore(path).save(10)
        assert JsonHighScoreStore(path).load() == 0
