"""Configuration loading from pyproject.toml."""

import tomllib
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from topograph._graph import DuplicatePolicy, SeedOrder

DEFAULT_INPUT_DIR = Path("input")


class ConfigError(Exception):
    """Error in topograph configuration."""


class LabelType(StrEnum):
    """How vertex label tokens are converted."""

    STR = "str"
    INT = "int"

    @property
    def parser(self) -> Callable[[str], Hashable]:
        return int if self is LabelType.INT else str


@dataclass(slots=True, frozen=True)
class TopographConfig:
    """Configuration loaded from pyproject.toml.

    A configured ``input-dir`` is resolved from the project root (directory
    containing pyproject.toml). The default ``input`` is relative to the
    working directory.
    """

    input_dir: Path = DEFAULT_INPUT_DIR
    display_threshold: int = 20
    order_threshold: int = 1000
    duplicates: DuplicatePolicy = DuplicatePolicy.KEEP_FIRST
    seed_order: SeedOrder = SeedOrder.INSERTION
    label_type: LabelType = LabelType.STR
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _parse_threshold(section: dict[str, object], key: str, default: int) -> int:
    if key not in section:
        return default
    value = section[key]
    # bool is a subclass of int
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        msg = f"Invalid [tool.topograph].{key}: expected non-negative integer"
        raise ConfigError(msg)
    return value


def _parse_choice[E: StrEnum](section: dict[str, object], key: str, enum: type[E], default: E) -> E:
    if key not in section:
        return default
    value = section[key]
    try:
        return enum(value)
    except ValueError:
        choices = ", ".join(f"'{member.value}'" for member in enum)
        msg = f"Invalid [tool.topograph].{key} {value!r}: expected one of {choices}"
        raise ConfigError(msg) from None


def load_config(pyproject_path: Path) -> TopographConfig:
    """Load and validate [tool.topograph] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed TopographConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("topograph", {})
    if not section:
        return TopographConfig(project_root=project_root)

    input_dir = DEFAULT_INPUT_DIR
    if "input-dir" in section:
        input_value = section["input-dir"]
        if not isinstance(input_value, str):
            msg = "Invalid [tool.topograph].input-dir: expected string path"
            raise ConfigError(msg)
        input_dir = Path(input_value)
        if not input_dir.is_absolute():
            input_dir = project_root / input_dir

    return TopographConfig(
        input_dir=input_dir,
        display_threshold=_parse_threshold(section, "display-threshold", 20),
        order_threshold=_parse_threshold(section, "order-threshold", 1000),
        duplicates=_parse_choice(section, "duplicates", DuplicatePolicy, DuplicatePolicy.KEEP_FIRST),
        seed_order=_parse_choice(section, "seed-order", SeedOrder, SeedOrder.INSERTION),
        label_type=_parse_choice(section, "label-type", LabelType, LabelType.STR),
        project_root=project_root,
    )


def get_config() -> TopographConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        TopographConfig (defaults if no pyproject.toml or no [tool.topograph] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return TopographConfig()
    return load_config(pyproject_path)
