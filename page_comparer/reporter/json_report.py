"""JSON run report output."""

from __future__ import annotations

import json
from pathlib import Path

from page_comparer.models.run_result import RunResult


def generate_json_report(run_result: RunResult, output_path: Path) -> None:
    """Write a machine-readable summary of the run, replacing any previous one."""
    report = run_result.model_dump(mode="json")
    report["completed_routes"] = run_result.completed_routes
    report["max_difference"] = max(
        (d.difference_percentage for r in run_result.route_results for d in r.devices),
        default=0.0,
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2, default=str)
