"""Tests for the level catalog and LevelDefinition validation."""

import dataclasses

import pytest

from level_snake.errors import InvalidLevel, OutOfRange
from level_snake.levels import LEVELS, LevelDefinition, get_level, list_level_indices
from level_snake.snake import Direction


class TestLevelDefinitionDefaults:
    def test_defaults(self):
        level = LevelDefinition()
        assert level.rows == 10
        assert level.cols == 10
        assert level.snake is None
        assert level.food is None
        assert level.obstacles == ()
        assert level.direction == Direction.UP
        assert level.speed == 500
        assert level.speed_step == 20
        assert level.goal is None
        assert level.respawn_food is True
        assert level.block_size == 35

    def test_is_immutable(self):
        level = LevelDefinition()
        with pytest.raises(dataclasses.FrozenInstanceError):
            level.rows = 5  # type: ignore[misc]


class TestLevelDefinitionValidation:
    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"rows": 0}, "rows and cols"),
            ({"cols": 0}, "rows and cols"),
            ({"speed": 0}, "speed must be positive"),
            ({"speed_step": -1}, "speed_step"),
            ({"goal": 0}, "goal"),
            ({"block_size": 0}, "block_size"),
            ({"snake": ()}, "at least one cell"),
            ({"snake": (5, 100)}, "outside"),
            ({"food": (-1,)}, "outside"),
            ({"obstacles": (3, 3)}, "twice"),
            ({"snake": (5, 4, 5)}, "twice"),
            ({"snake": (5, 4), "food": (4,)}, "both snake and food"),
            ({"snake": (5, 4), "obstacles": (5,)}, "both snake and obstacles"),
            ({"food": (7,), "obstacles": (7,)}, "both food and obstacles"),
        ],
    )
    def test_invalid_levels(self, kwargs, message):
        with pytest.raises(InvalidLevel, match=message):
            LevelDefinition(**kwargs)

    def test_invalid_level_is_value_error(self):
        with pytest.raises(ValueError):
            LevelDefinition(rows=-3)

    def test_explicit_empty_food_is_valid(self):
        level = LevelDefinition(snake=(1, 2, 3), food=())
        assert level.food == ()


class TestCatalog:
    def test_three_levels(self):
        assert len(LEVELS) == 3
        assert list_level_indices() == [0, 1, 2]

    def test_first_level(self):
        level = get_level(0)
        assert (level.rows, level.cols) == (10, 10)
        assert tuple(level.snake) == (55, 54, 53)
        assert tuple(level.food) == (15,)
        assert level.direction == Direction.RIGHT
        assert level.speed == 150
        assert level.goal is None

    def test_walled_level_borders(self):
        level = get_level(1)
        obstacles = set(level.obstacles)
        assert len(obstacles) == 36
        for i in range(10):
            assert i in obstacles
            assert 90 + i in obstacles
            assert i * 10 in obstacles
            assert i * 10 + 9 in obstacles

    def test_goal_level(self):
        level = get_level(2)
        assert (level.rows, level.cols) == (12, 12)
        assert level.goal == 4
        assert level.respawn_food is False
        assert len(level.food) == level.goal

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_out_of_range(self, index):
        with pytest.raises(OutOfRange, match="out of range"):
            get_level(index)

    @pytest.mark.parametrize("index", ["0", 1.0, True, None])
    def test_non_integer_index(self, index):
        with pytest.raises(OutOfRange, match="integer"):
            get_level(index)

    def test_out_of_range_is_index_error(self):
        with pytest.raises(IndexError):
            get_level(len(LEVELS))


class TestLevelDefinitionNormalization:
    def test_lists_become_tuples(self):
        level = LevelDefinition(snake=[5, 4, 3], food=[15], obstacles=[0, 1])
        assert level.snake == (5, 4, 3)
        assert level.food == (15,)
        assert level.obstacles == (0, 1)
        assert isinstance(hash(level), int)

    def test_numpy_arrays_accepted(self):
        import numpy as np

        level = LevelDefinition(snake=np.array([5, 4, 3]), food=np.array([15]))
        assert level.snake == (5, 4, 3)
        assert all(type(cell) is int for cell in level.snake)
        assert level.food == (15,)

    def test_random_fields_stay_none(self):
        level = LevelDefinition()
        assert level.snake is None
        assert level.food is None
