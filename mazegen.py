"""Reusable solvable-maze generator module.

Basic usage:

    from mazegen import generate_solvable_maze
    from maze_writer import write_maze

    result = generate_solvable_maze(height=21, width=21, seed=42)
    write_maze(result.grid, "maze.txt")

The maze is stored as a `Grid` of `CellState` values (`grid.get(row, col)`).
Carving walks a lattice of odd-coordinate cells two units apart, so the cells
in between can stay walls or be opened as passages.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
import logging
import random
from typing import (
    Deque,
    Dict,
    Iterator,
    List,
    MutableSequence,
    Optional,
    Protocol,
    Tuple,
)


Coord = Tuple[int, int]  # (row, col)


MIN_DIM = 5
MAX_DIM = 100
DEFAULT_MAX_ATTEMPTS = 1000

logger = logging.getLogger(__name__)


class CellState(Enum):
    """State of a single grid cell."""

    WALL = 0
    PATH = 1
    START = 2
    END = 3


class MazeError(Exception):
    """Base class for maze generation errors."""

    pass


class InvalidDimensions(MazeError, ValueError):
    """Height or width outside the supported range."""

    pass


class AllocationFailure(MazeError, MemoryError):
    """The grid could not be allocated."""

    pass


class GenerationExhausted(MazeError, RuntimeError):
    """No solvable maze was produced within the attempt budget."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            f"No solvable maze after {attempts} attempt(s)"
        )
        self.attempts = attempts


class RandomSource(Protocol):
    """Structural type for the PRNG used while carving."""

    def randrange(self, stop: int) -> int:
        ...

    def shuffle(self, x: MutableSequence[Coord]) -> None:
        ...


def _check_range(name: str, value: int) -> None:
    if not MIN_DIM <= value <= MAX_DIM:
        raise InvalidDimensions(
            f"{name} must be between {MIN_DIM} and {MAX_DIM}, got {value}"
        )


def round_up_to_odd(value: int) -> int:
    """Return `value` if odd, else the next odd integer."""

    return value if value % 2 == 1 else value + 1


class Grid:
    """Rectangular array of cell states, initially all walls."""

    height: int
    width: int
    _cells: List[List[CellState]]

    def __init__(self, height: int, width: int) -> None:
        _check_range("height", height)
        _check_range("width", width)
        self.height = height
        self.width = width
        self._cells = [
            [CellState.WALL for _ in range(width)] for _ in range(height)
        ]

    @classmethod
    def create(cls, height: int, width: int) -> "Grid":
        """Validate dimensions, round them up to odd, and allocate a grid.

        Raises InvalidDimensions before or after rounding (an even 100 would
        become 101) and AllocationFailure if memory runs out.
        """

        _check_range("height", height)
        _check_range("width", width)
        height = round_up_to_odd(height)
        width = round_up_to_odd(width)
        try:
            return cls(height, width)
        except MemoryError as exc:
            raise AllocationFailure(
                f"Could not allocate a {height}x{width} grid"
            ) from exc

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(
                f"({row}, {col}) is outside a "
                f"{self.height}x{self.width} grid"
            )

    def get(self, row: int, col: int) -> CellState:
        self._check_bounds(row, col)
        return self._cells[row][col]

    def set(self, row: int, col: int, state: CellState) -> None:
        self._check_bounds(row, col)
        self._cells[row][col] = state

    def reset_to_walls(self) -> None:
        """Set every cell back to WALL."""

        for row in self._cells:
            for c in range(self.width):
                row[c] = CellState.WALL

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def rows(self) -> Iterator[Tuple[CellState, ...]]:
        for row in self._cells:
            yield tuple(row)

    def snapshot(self) -> Tuple[Tuple[CellState, ...], ...]:
        """Return an immutable copy of the cells for comparisons."""

        return tuple(self.rows())

    def find(self, state: CellState) -> List[Coord]:
        """Return every coordinate holding `state`, in row-major order."""

        return [
            (r, c)
            for r in range(self.height)
            for c in range(self.width)
            if self._cells[r][c] is state
        ]

    @property
    def start(self) -> Coord:
        return (1, 1)

    @property
    def end(self) -> Coord:
        return (self.height - 2, self.width - 2)


def carve_maze(grid: Grid, rng: RandomSource) -> None:
    """Carve a maze into `grid` with a randomized iterative DFS.

    The grid is reset to walls first. Carving starts from a random odd cell,
    not from START, so START/END are only connected because the odd lattice
    is fully walked; callers still verify with `is_solvable`.
    """

    if grid.height % 2 == 0 or grid.width % 2 == 0:
        raise InvalidDimensions(
            f"Carving needs odd dimensions, got {grid.height}x{grid.width}"
        )

    grid.reset_to_walls()

    # up, right, down, left
    deltas: List[Coord] = [(-1, 0), (0, 1), (1, 0), (0, -1)]

    origin = (
        1 + 2 * rng.randrange((grid.height - 1) // 2),
        1 + 2 * rng.randrange((grid.width - 1) // 2),
    )
    grid.set(origin[0], origin[1], CellState.PATH)
    stack: List[Coord] = [origin]

    while stack:
        r, c = stack[-1]
        directions = list(deltas)
        rng.shuffle(directions)

        nxt: Optional[Coord] = None
        for dr, dc in directions:
            nr, nc = r + 2 * dr, c + 2 * dc
            if not (0 < nr < grid.height - 1 and 0 < nc < grid.width - 1):
                continue
            if grid.get(nr, nc) is CellState.WALL:
                grid.set(r + dr, c + dc, CellState.PATH)
                grid.set(nr, nc, CellState.PATH)
                nxt = (nr, nc)
                break

        if nxt is None:
            stack.pop()
        else:
            stack.append(nxt)

    grid.set(grid.start[0], grid.start[1], CellState.START)
    grid.set(grid.end[0], grid.end[1], CellState.END)


def _open_neighbors(grid: Grid, r: int, c: int) -> Iterator[Coord]:
    for dr, dc in ((-1, 0), (0, 1), (1, 0), (0, -1)):
        nr, nc = r + dr, c + dc
        if grid.in_bounds(nr, nc) and grid.get(nr, nc) in (
            CellState.PATH,
            CellState.END,
        ):
            yield (nr, nc)


def is_solvable(grid: Grid) -> bool:
    """Return True if END is reachable from START through PATH cells.

    Breadth-first; the grid is never modified.
    """

    start = grid.start
    q: Deque[Coord] = deque([start])
    visited = {start}

    while q:
        r, c = q.popleft()
        if grid.get(r, c) is CellState.END:
            return True
        for nxt in _open_neighbors(grid, r, c):
            if nxt in visited:
                continue
            visited.add(nxt)
            q.append(nxt)

    return False


def shortest_path(grid: Grid) -> Optional[List[Coord]]:
    """Return the shortest START to END path using BFS.

    Returns a list of coordinates including both endpoints, or None if END
    cannot be reached.
    """

    start = grid.start
    q: Deque[Coord] = deque([start])
    prev: Dict[Coord, Optional[Coord]] = {start: None}
    goal: Optional[Coord] = None

    while q:
        r, c = q.popleft()
        if grid.get(r, c) is CellState.END:
            goal = (r, c)
            break
        for nxt in _open_neighbors(grid, r, c):
            if nxt in prev:
                continue
            prev[nxt] = (r, c)
            q.append(nxt)

    if goal is None:
        return None

    out: List[Coord] = []
    cur: Optional[Coord] = goal
    while cur is not None:
        out.append(cur)
        cur = prev[cur]
    out.reverse()
    return out


@dataclass(frozen=True)
class GenerationResult:
    """A verified maze and the number of attempts it took."""

    grid: Grid
    attempts: int


def generate_solvable_maze(
    height: int,
    width: int,
    *,
    seed: Optional[int] = None,
    rng: Optional[RandomSource] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> GenerationResult:
    """Carve and verify until a solvable maze is produced.

    Even dimensions are rounded up to odd. `rng` takes precedence over
    `seed`; the same generator is used across attempts so each retry sees a
    different carving. Raises GenerationExhausted after `max_attempts`
    unsolvable carvings.
    """

    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    grid = Grid.create(height, width)
    source: RandomSource = rng if rng is not None else random.Random(seed)

    for attempt in range(1, max_attempts + 1):
        carve_maze(grid, source)
        if is_solvable(grid):
            logger.info(
                "Generated %dx%d maze in %d attempt(s)",
                grid.height,
                grid.width,
                attempt,
            )
            return GenerationResult(grid=grid, attempts=attempt)
        logger.debug("Attempt %d produced an unsolvable maze", attempt)

    raise GenerationExhausted(max_attempts)
