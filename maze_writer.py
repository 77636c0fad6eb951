"""Text writer for maze grids.

Converts a Grid of CellState values into the plain-text maze format and
writes it to an output file.
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Union

from mazegen import CellState, MazeError

if TYPE_CHECKING:
    from mazegen import Grid


CELL_CHARS: Mapping[CellState, str] = {
    CellState.WALL: "#",
    CellState.PATH: " ",
    CellState.START: "S",
    CellState.END: "E",
}


class MazeWriteError(MazeError):
    """The maze file could not be written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not write maze to {path}: {reason}")
        self.path = path


def render_text(grid: Grid) -> str:
    """Render a grid as text.

    Each cell becomes one character:
        WALL='#', PATH=' ', START='S', END='E'
    Every row, including the last, ends with a newline.
    """
    return "".join(
        "".join(CELL_CHARS[state] for state in row) + "\n"
        for row in grid.rows()
    )


def write_maze(grid: Grid, output_file: Union[str, Path]) -> Path:
    """Render a grid and save it to a file.

    Args:
        grid: Grid to serialize. It is not modified.
        output_file: Path to the file where the maze will be saved.

    Returns:
        The path written to.

    Raises:
        MazeWriteError: if the destination cannot be opened or written.
    """
    path = Path(output_file).expanduser()
    text = render_text(grid)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="\n") as file:
            file.write(text)
    except OSError as error:
        raise MazeWriteError(path, error.strerror or str(error)) from error
    return path
