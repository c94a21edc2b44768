"""Tests for sort report building and export."""

import json
import tomllib
from pathlib import Path

import pytest

from topograph import GraphStore, SortReport, TopoSortEngine, build_sort_report, export_report


def _report(*lines: str) -> SortReport:
    graph = GraphStore.from_lines(lines)
    return build_sort_report(graph, TopoSortEngine(graph).run(), source="deps.txt")


class TestBuildSortReport:
    def test_acyclic(self) -> None:
        report = _report("A B C", "B C", "C")
        assert report.source == "deps.txt"
        assert report.vertex_count == 3
        assert report.edge_count == 3
        assert not report.has_cycle
        assert report.order == ["A", "B", "C"]
        assert report.unresolved == []

    def test_cycle(self) -> None:
        report = _report("A B", "B A", "C")
        assert report.has_cycle
        assert report.order is None
        assert report.unresolved == ["A", "B"]

    def test_integer_labels_are_stringified(self) -> None:
        graph = GraphStore.from_lines(["1 2", "2"], parse_label=int)
        report = build_sort_report(graph, TopoSortEngine(graph).run(), source="ints.txt")
        assert report.order == ["1", "2"]


class TestExportReport:
    def test_json(self, tmp_path: Path) -> None:
        output = tmp_path / "out" / "report.json"
        export_report(_report("A B", "B"), output)

        data = json.loads(output.read_text())
        assert data["order"] == ["A", "B"]
        assert data["has_cycle"] is False

    def test_toml_omits_missing_order(self, tmp_path: Path) -> None:
        output = tmp_path / "report.toml"
        export_report(_report("A A"), output)

        with output.open("rb") as f:
            data = tomllib.load(f)
        assert data["has_cycle"] is True
        assert "order" not in data
        assert data["unresolved"] == ["A"]

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unsupported report format"):
            export_report(_report("A"), tmp_path / "report.yaml")
