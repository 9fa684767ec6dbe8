import json
import math
from typing import Any, Dict, List, Optional, Sequence

from sensortiming.models import SensorMode, SensorParams, SensorTiming, ValidationIssue
from sensortiming.pipeline import pipeline_stages


def _finite(value: Any) -> Any:
    """JSON has no inf/nan; write them as null."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_finite(v) for v in value]
    return value


class JSONReporter:
    """Writes timing results, modes and audit findings to a JSON file."""

    def build(
        self,
        *,
        params: Optional[SensorParams] = None,
        timing: Optional[SensorTiming] = None,
        modes: Sequence[SensorMode] = (),
        issues: Sequence[ValidationIssue] = (),
    ) -> Dict[str, Any]:
        report: Dict[str, Any] = {}
        if params is not None:
            report["params"] = params.to_dict()
        if timing is not None:
            report["timing"] = timing.to_dict()
            report["pipeline"] = [
                {"name": s.name, "latency_s": s.latency, "throughput_mbps": s.throughput_mbps,
                 "bottlenecked": s.bottlenecked}
                for s in pipeline_stages(timing)
            ]
        if modes:
            report["modes"] = [m.to_dict() for m in modes]

        issue_list: List[ValidationIssue] = list(issues)
        report["total_issues"] = len(issue_list)
        report["errors"] = len([i for i in issue_list if i.severity == "error"])
        report["warnings"] = len([i for i in issue_list if i.severity == "warning"])
        report["issues"] = [i.to_dict() for i in issue_list]
        return _finite(report)

    def generate(self, output_path: str, **kwargs) -> Dict[str, Any]:
        report = self.build(**kwargs)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)
        return report
