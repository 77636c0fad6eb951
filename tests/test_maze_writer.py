from pathlib import Path

import pytest

from mazegen import CellState, Grid, generate_solvable_maze
from maze_writer import MazeWriteError, render_text, write_maze


def test_render_maps_each_state() -> None:
    grid = Grid(5, 5)
    grid.set(1, 1, CellState.START)
    grid.set(1, 2, CellState.PATH)
    grid.set(3, 3, CellState.END)
    assert render_text(grid) == (
        "#####\n"
        "#S ##\n"
        "#####\n"
        "###E#\n"
        "#####\n"
    )


@pytest.mark.parametrize("height, width", [(5, 5), (20, 31), (99, 99)])
def test_written_file_is_well_formed(
    tmp_path: Path, height: int, width: int
) -> None:
    grid = generate_solvable_maze(height, width, seed=11).grid
    out = write_maze(grid, tmp_path / "maze.txt")

    lines = out.read_text(encoding="utf-8").split("\n")
    assert lines[-1] == ""
    rows = lines[:-1]
    assert len(rows) == grid.height
    assert all(len(row) == grid.width for row in rows)
    assert set("".join(rows)) <= {"#", " ", "S", "E"}
    assert "".join(rows).count("S") == 1
    assert "".join(rows).count("E") == 1
    assert rows[1][1] == "S"
    assert rows[grid.height - 2][grid.width - 2] == "E"
    assert rows[0] == "#" * grid.width
    assert rows[-1] == "#" * grid.width
    assert all(row[0] == "#" and row[-1] == "#" for row in rows)


def test_same_seed_writes_identical_bytes(tmp_path: Path) -> None:
    first = write_maze(
        generate_solvable_maze(25, 25, seed=42).grid, tmp_path / "a.txt"
    )
    second = write_maze(
        generate_solvable_maze(25, 25, seed=42).grid, tmp_path / "b.txt"
    )
    assert first.read_bytes() == second.read_bytes()


def test_creates_missing_directories(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dir" / "maze.txt"
    write_maze(generate_solvable_maze(5, 5, seed=0).grid, target)
    assert target.is_file()


def test_write_failure_keeps_grid(tmp_path: Path) -> None:
    grid = generate_solvable_maze(9, 9, seed=8).grid
    before = grid.snapshot()
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(MazeWriteError) as excinfo:
        write_maze(grid, blocker / "maze.txt")
    assert excinfo.value.path == blocker / "maze.txt"
    assert grid.snapshot() == before

    # Retrying at another path succeeds with the same grid.
    out = write_maze(grid, tmp_path / "maze.txt")
    assert out.read_text(encoding="utf-8") == render_text(grid)


def test_directory_destination_fails(tmp_path: Path) -> None:
    grid = generate_solvable_maze(5, 5, seed=0).grid
    with pytest.raises(MazeWriteError):
        write_maze(grid, tmp_path)
