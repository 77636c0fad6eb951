import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence

from mazegen import (
    DEFAULT_MAX_ATTEMPTS,
    GenerationResult,
    MazeError,
    generate_solvable_maze,
)
from maze_writer import MazeWriteError, write_maze


DEFAULT_HEIGHT = 20
DEFAULT_WIDTH = 20
DEFAULT_OUTPUT_FILE = "maze.txt"

KNOWN_KEYS = {
    "HEIGHT",
    "WIDTH",
    "OUTPUT_FILE",
    "SEED",
    "MAX_ATTEMPTS",
    "VERBOSE",
}


@dataclass(frozen=True)
class Config:
    """Parsed configuration for maze generation."""

    height: int = DEFAULT_HEIGHT
    width: int = DEFAULT_WIDTH
    output_file: Path = Path(DEFAULT_OUTPUT_FILE)
    seed: Optional[int] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    verbose: bool = False


class ConfigError(ValueError):
    """Configuration and validation error."""

    pass


def parse_bool(value: str) -> bool:
    """Parse a boolean from a config value."""

    v = value.strip().lower()
    if v in {"true", "1", "yes", "y", "on"}:
        return True
    if v in {"false", "0", "no", "n", "off"}:
        return False
    raise ConfigError(f"Invalid boolean: {value!r}")


def parse_int(value: str, *, key: str) -> int:
    """Parse an integer from a config value."""

    try:
        return int(value.strip())
    except ValueError as exc:
        msg = f"Invalid integer for {key}: {value!r}"
        raise ConfigError(msg) from exc


def read_config(path: Path) -> Config:
    """Read and validate the configuration file.

    Every key is optional; missing keys fall back to the defaults.
    Dimension ranges are checked later by the generator.
    """

    raw: Dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                stripped = line.strip()
                if not stripped or stripped.startswith("#"):
                    continue
                if "=" not in stripped:
                    raise ConfigError(
                        f"Bad syntax at\n"
                        f"line {line_no}: {line!r} (expected KEY=VALUE)"
                    )
                k, v = stripped.split("=", 1)
                key = k.strip().upper()
                if key not in KNOWN_KEYS:
                    raise ConfigError(
                        f"Unknown config key at line {line_no}: {key!r}"
                    )
                raw[key] = v.strip()
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read"
                          f" config file: {path}: {exc}") from exc

    height = parse_int(raw.get("HEIGHT", str(DEFAULT_HEIGHT)), key="HEIGHT")
    width = parse_int(raw.get("WIDTH", str(DEFAULT_WIDTH)), key="WIDTH")
    output_name = raw.get("OUTPUT_FILE", DEFAULT_OUTPUT_FILE)
    if not output_name:
        raise ConfigError("OUTPUT_FILE must not be empty")
    output_file = Path(output_name).expanduser()

    seed: Optional[int] = None
    if "SEED" in raw:
        seed = parse_int(raw["SEED"], key="SEED")

    max_attempts = parse_int(
        raw.get("MAX_ATTEMPTS", str(DEFAULT_MAX_ATTEMPTS)),
        key="MAX_ATTEMPTS",
    )
    if max_attempts < 1:
        raise ConfigError("MAX_ATTEMPTS must be >= 1")

    verbose = parse_bool(raw.get("VERBOSE", "false"))

    return Config(
        height=height,
        width=width,
        output_file=output_file,
        seed=seed,
        max_attempts=max_attempts,
        verbose=verbose,
    )


def configure_logging(verbose: bool) -> None:
    """Show library log records down to DEBUG when verbose, else WARNING."""

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(level)


def run(config: Config) -> int:
    """Generate a solvable maze and write the output file."""

    result: GenerationResult = generate_solvable_maze(
        config.height,
        config.width,
        seed=config.seed,
        max_attempts=config.max_attempts,
    )

    try:
        path = write_maze(result.grid, config.output_file)
    except MazeWriteError as exc:
        # The maze itself is fine; only the destination failed.
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Maze saved to {path}")
    return 0


def main(argv: Sequence[str]) -> int:
    """CLI entrypoint."""

    if len(argv) > 2:
        print("Usage: python3 carve_maze.py [config.txt]", file=sys.stderr)
        return 2

    try:
        config = read_config(Path(argv[1])) if len(argv) == 2 else Config()
        configure_logging(config.verbose)
        return run(config)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except (ConfigError, MazeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def console_main() -> int:
    return main(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
