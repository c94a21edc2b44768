"""Serializable summary of a sort run."""

import json
import logging
from pathlib import Path

import tomli_w
from pydantic import BaseModel

from ._graph import CycleDetected, GraphStore, SortResult

logger = logging.getLogger(__name__)


class SortReport(BaseModel):
    """Outcome of sorting one input file."""

    source: str
    vertex_count: int
    edge_count: int
    has_cycle: bool
    order: list[str] | None = None
    unresolved: list[str] = []


def build_sort_report(graph: GraphStore, result: SortResult, source: str) -> SortReport:
    """Summarize ``result`` for ``graph``. Labels are stringified."""
    if isinstance(result, CycleDetected):
        return SortReport(
            source=source,
            vertex_count=graph.size(),
            edge_count=graph.edge_count(),
            has_cycle=True,
            unresolved=[str(label) for label in result.unresolved],
        )
    return SortReport(
        source=source,
        vertex_count=graph.size(),
        edge_count=graph.edge_count(),
        has_cycle=False,
        order=[str(label) for label in result],
    )


def export_report(report: SortReport, output_path: Path) -> None:
    """Write ``report`` as JSON or TOML, chosen by the file suffix.

    TOML has no null, so ``None`` fields are left out of TOML output.

    Raises:
        ValueError: If the suffix is neither ``.json`` nor ``.toml``.

    """
    suffix = output_path.suffix.lower()
    if suffix not in {".json", ".toml"}:
        msg = f"Unsupported report format '{output_path.suffix}'. Use .json or .toml"
        raise ValueError(msg)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".json":
        with output_path.open("w") as f:
            json.dump(report.model_dump(mode="json"), f, indent=2)
            f.write("\n")
    else:
        with output_path.open("wb") as f:
            tomli_w.dump(report.model_dump(mode="python", exclude_none=True), f)

    logger.debug(f"Exported report to {output_path}")
