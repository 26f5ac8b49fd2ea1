"""Tests for the level-snake CLI."""

import json

import pytest

from level_snake.cli import _build_parser, main
from level_snake.config import EngineConfig


def _last_json(out: str) -> dict:
    return json.loads(out.strip().splitlines()[-1])


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_run_defaults(self):
        args = _build_parser().parse_args(["run"])
        assert args.command == "run"
        assert args.level == 0
        assert args.random is False
        assert args.moves == ""
        assert args.max_ticks is None
        assert args.config is None

    def test_run_with_flags(self):
        args = _build_parser().parse_args([
            "run", "--level", "2", "--moves", "RRU.", "--max-ticks", "9",
            "--seed", "4",
        ])
        assert args.level == 2
        assert args.moves == "rru."
        assert args.max_ticks == 9
        assert args.seed == 4

    def test_level_and_random_are_exclusive(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["run", "--level", "1", "--random"])

    def test_unknown_move_rejected(self):
        with pytest.raises(SystemExit, match="2"):
            main(["run", "--moves", "rx"])


class TestCLILevels:
    def test_lists_catalog(self, capsys):
        assert main(["levels"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 3
        assert lines[0].startswith("0: 10x10")
        assert "goal=4" in lines[2]
        assert "respawn=no" in lines[2]


class TestCLIRun:
    def test_run_straight(self, capsys):
        assert main(["run", "--moves", "....."]) == 0
        state = _last_json(capsys.readouterr().out)
        assert state["tick"] == 5
        assert state["snake"]["body"] == [50, 59, 58]
        assert state["lifecycle"] == "running"

    def test_run_eats_food(self, capsys):
        # From 55 heading right: up four rows lands on 15.
        assert main(["run", "--moves", "uuuu"]) == 0
        state = _last_json(capsys.readouterr().out)
        assert state["score"] == 1
        assert len(state["snake"]["body"]) == 4

    def test_run_stops_at_gameover(self, capsys):
        assert main(["run", "--level", "1", "--max-ticks", "20"]) == 0
        state = _last_json(capsys.readouterr().out)
        assert state["lifecycle"] == "gameover"
        assert state["tick"] == 4

    def test_run_random_level(self, capsys):
        assert main(["run", "--random", "--seed", "3"]) == 0
        state = _last_json(capsys.readouterr().out)
        assert state["grid"]["rows"] == 10
        assert len(state["snake"]["body"]) == 3

    def test_run_unknown_level(self):
        assert main(["run", "--level", "9"]) == 2

    def test_run_with_config_file(self, tmp_path, capsys):
        path = tmp_path / "engine.json"
        EngineConfig(block_margin=0).save(path)
        assert main(["run", "--config", str(path)]) == 0
        state = _last_json(capsys.readouterr().out)
        assert state["display"]["width"] == 350

    def test_run_saves_effective_config(self, tmp_path, capsys):
        path = tmp_path / "out" / "engine.json"
        assert main(["run", "--seed", "5", "--save-config", str(path)]) == 0
        assert EngineConfig.load(path) == EngineConfig(seed=5)
