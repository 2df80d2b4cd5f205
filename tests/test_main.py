"""Tests del driver: corrida completa, CSV de conteos y cuadros."""

import csv

import pytest

from main import CSV_FIELDS, build_grid, config_from_args, main, parse_args, run_simulation
from services.population_grid import StateCounts
from utils.config import SimulationConfig


def small_config(tmp_path, **kwargs):
    values = dict(grid_size=12, max_steps=15, seed=21, seed_start=3, seed_end=9,
                  counts_csv=str(tmp_path / "state_counts.csv"),
                  frames_dir=str(tmp_path / "frames"), log_interval=5)
    values.update(kwargs)
    return SimulationConfig(**values)


def read_rows(path):
    with open(path, newline='') as f:
        return list(csv.reader(f))


class TestRunSimulation:
    def test_build_grid_seeds_block(self, tmp_path):
        grid = build_grid(small_config(tmp_path, seed_probability=1.0))
        assert grid.count_states() == StateCounts(144 - 36, 36, 0, 0)

    def test_rows_and_csv(self, tmp_path):
        config = small_config(tmp_path)
        rows = run_simulation(config)
        assert [step for step, _ in rows] == list(range(16))
        assert all(counts.total == 144 for _, counts in rows)

        table = read_rows(config.counts_csv)
        assert table[0] == CSV_FIELDS
        assert len(table) == 17
        for (step, counts), line in zip(rows, table[1:]):
            assert [int(v) for v in line] == [step, *counts]

    def test_tick_zero_is_post_seeding(self, tmp_path):
        config = small_config(tmp_path, seed_probability=1.0)
        rows = run_simulation(config)
        assert rows[0] == (0, StateCounts(108, 36, 0, 0))

    def test_reproducible_with_seed(self, tmp_path):
        first = run_simulation(small_config(tmp_path))
        second = run_simulation(small_config(tmp_path))
        assert first == second

    def test_without_csv(self, tmp_path):
        rows = run_simulation(small_config(tmp_path, counts_csv=None, max_steps=3))
        assert len(rows) == 4
        assert not (tmp_path / "state_counts.csv").exists()

    def test_frames_written(self, tmp_path):
        config = small_config(tmp_path, max_steps=4, frame_interval=2)
        run_simulation(config)
        names = sorted(p.name for p in (tmp_path / "frames").iterdir())
        assert names == ["frame_0000.png", "frame_0002.png", "frame_0004.png"]


class TestCli:
    def test_parse_args(self):
        args = parse_args(["--steps", "5", "--size", "10", "--seed", "1"])
        assert (args.steps, args.size, args.seed) == (5, 10, 1)
        assert not args.plot

    def test_small_grid_recenters_seed_block(self):
        config = config_from_args(parse_args(["--size", "20"]))
        assert config.grid_size == 20
        assert (config.seed_start, config.seed_end) == (5, 15)

    def test_main_end_to_end(self, tmp_path):
        out = tmp_path / "counts.csv"
        rows = main(["--size", "10", "--steps", "3", "--seed", "4",
                     "--counts-csv", str(out)])
        assert len(rows) == 4
        assert len(read_rows(out)) == 5

    def test_main_with_yaml(self, tmp_path):
        cfg = tmp_path / "run.yaml"
        cfg.write_text("grid_size: 8\nseed_start: 2\nseed_end: 6\nmax_steps: 50\n")
        rows = main(["--config", str(cfg), "--steps", "2",
                     "--counts-csv", str(tmp_path / "c.csv")])
        assert len(rows) == 3
        assert rows[0][1].total == 64
