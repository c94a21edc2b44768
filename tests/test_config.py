"""Tests for the configuration module."""

from pathlib import Path

import pytest

from topograph._cli.config import (
    ConfigError,
    LabelType,
    TopographConfig,
    find_pyproject_toml,
    load_config,
)
from topograph._graph import DuplicatePolicy, SeedOrder


def _write(tmp_path: Path, content: str) -> Path:
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in current directory."""
        pyproject = _write(tmp_path, "[project]\nname = 'test'\n")

        assert find_pyproject_toml(tmp_path) == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in parent directory."""
        pyproject = _write(tmp_path, "[project]\nname = 'test'\n")
        subdir = tmp_path / "data" / "graphs"
        subdir.mkdir(parents=True)

        assert find_pyproject_toml(subdir) == pyproject


class TestLoadConfig:
    """Tests for reading [tool.topograph]."""

    def test_no_section_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, "[project]\nname = 'test'\n"))

        assert config == TopographConfig(project_root=tmp_path)
        assert config.display_threshold == 20
        assert config.order_threshold == 1000

    def test_all_keys(self, tmp_path: Path) -> None:
        pyproject = _write(
            tmp_path,
            """
[tool.topograph]
input-dir = "graphs"
display-threshold = 5
order-threshold = 50
duplicates = "merge"
seed-order = "sorted"
label-type = "int"
""",
        )

        config = load_config(pyproject)

        assert config.input_dir == tmp_path / "graphs"
        assert config.display_threshold == 5
        assert config.order_threshold == 50
        assert config.duplicates is DuplicatePolicy.MERGE
        assert config.seed_order is SeedOrder.SORTED
        assert config.label_type is LabelType.INT
        assert config.label_type.parser("7") == 7

    def test_default_input_dir_same_with_or_without_section(self, tmp_path: Path) -> None:
        """Unrelated keys must not move the default input directory."""
        without_section = load_config(_write(tmp_path, "[project]\nname = 'test'\n"))
        with_section = load_config(_write(tmp_path, "[tool.topograph]\nseed-order = 'sorted'\n"))

        assert without_section.input_dir == with_section.input_dir == Path("input")

    def test_relative_input_dir_resolved_from_project_root(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, "[tool.topograph]\ninput-dir = 'input'\n"))

        assert config.input_dir == tmp_path / "input"

    def test_absolute_input_dir(self, tmp_path: Path) -> None:
        absolute = tmp_path / "elsewhere"
        config = load_config(_write(tmp_path, f"[tool.topograph]\ninput-dir = '{absolute.as_posix()}'\n"))

        assert config.input_dir == absolute

    def test_invalid_toml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(_write(tmp_path, "[tool.topograph\n"))

    def test_input_dir_must_be_string(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="input-dir"):
            load_config(_write(tmp_path, "[tool.topograph]\ninput-dir = 3\n"))

    @pytest.mark.parametrize("value", ["-1", "'ten'", "true"])
    def test_invalid_threshold(self, tmp_path: Path, value: str) -> None:
        with pytest.raises(ConfigError, match="display-threshold"):
            load_config(_write(tmp_path, f"[tool.topograph]\ndisplay-threshold = {value}\n"))

    def test_invalid_duplicate_policy(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="'keep-first', 'reject', 'overwrite', 'merge'"):
            load_config(_write(tmp_path, "[tool.topograph]\nduplicates = 'ignore'\n"))

    def test_invalid_seed_order(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="seed-order"):
            load_config(_write(tmp_path, "[tool.topograph]\nseed-order = 'random'\n"))

    def test_invalid_label_type(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="label-type"):
            load_config(_write(tmp_path, "[tool.topograph]\nlabel-type = 'float'\n"))
