from typing import List

from sensortiming.models import SensorParams, SensorTiming, ValidationIssue


class ExposureValidator:
    """Compares the requested exposure with what the frame period allows."""

    def validate(self, params: SensorParams, timing: SensorTiming, mode_id: str) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []

        if timing.max_exposure_time <= 0:
            issues.append(
                ValidationIssue(
                    severity="warning",
                    issue_type="negative_exposure_margin",
                    message=f"No exposure headroom: max exposure is {timing.max_exposure_time * 1000:.3f} ms "
                    f"(FLL {params.frame_length_lines}, margin {params.exposure_margin_lines} lines).",
                    mode_id=mode_id,
                )
            )
            return issues

        if params.exposure_time is not None and params.exposure_time > timing.max_exposure_time:
            issues.append(
                ValidationIssue(
                    severity="warning",
                    issue_type="exposure_exceeds_max",
                    message=f"Exposure {params.exposure_time * 1000:.2f} ms exceeds the "
                    f"{timing.max_exposure_time * 1000:.2f} ms limit; the sensor would stretch FLL "
                    "or clamp the exposure.",
                    mode_id=mode_id,
                )
            )

        return issues
