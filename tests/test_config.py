import pytest

from minefield.config import DIFFICULTY_PRESETS, default_config, get_preset
from minefield.session import GameSession
from minefield.types import GameConfig


@pytest.mark.parametrize("name, expected", [
    ("easy", GameConfig(rows=9, columns=9, mine_count=5)),
    ("medium", GameConfig(rows=16, columns=16, mine_count=40)),
    ("hard", GameConfig(rows=16, columns=30, mine_count=99)),
    ("HARD", GameConfig(rows=16, columns=30, mine_count=99)),
])
def test_presets(name, expected):
    assert get_preset(name) == expected


def test_preset_is_a_copy():
    preset = get_preset("easy")
    preset.mine_count = 80
    assert DIFFICULTY_PRESETS["easy"].mine_count == 5


def test_unknown_preset():
    with pytest.raises(ValueError):
        get_preset("nightmare")


def test_every_preset_builds_a_session():
    for config in DIFFICULTY_PRESETS.values():
        session = GameSession(config.rows, config.columns, config.mine_count)
        assert sum(cell.has_mine for cell in session.board.cells()) == config.mine_count


def test_default_config_is_a_preset():
    assert default_config() in DIFFICULTY_PRESETS.values()
