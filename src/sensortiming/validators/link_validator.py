from typing import List

from sensortiming.models import SensorTiming, ValidationIssue


class LinkValidator:
    """Flags CSI-2 link saturation and receiver/link frame rate caps."""

    def validate(self, timing: SensorTiming, mode_id: str) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []

        if timing.link_bottlenecked:
            issues.append(
                ValidationIssue(
                    severity="warning",
                    issue_type="link_bottleneck",
                    message=f"Link load {timing.link_bandwidth_mbps:.1f} Mbps is above 95% of the "
                    f"{timing.link_capacity_mbps:.1f} Mbps lane capacity.",
                    mode_id=mode_id,
                )
            )

        if timing.effective_fps < timing.sensor_fps:
            issues.append(
                ValidationIssue(
                    severity="info",
                    issue_type="fps_capped",
                    message=f"Effective rate {timing.effective_fps:.2f} fps is below the sensor rate "
                    f"{timing.sensor_fps:.2f} fps (link or receiver limited).",
                    mode_id=mode_id,
                )
            )

        return issues
