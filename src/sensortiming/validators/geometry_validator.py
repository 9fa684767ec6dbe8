from typing import List

from sensortiming.models import SensorParams, ValidationIssue


class GeometryValidator:
    """Checks that blanking and clock settings describe a physical mode."""

    def validate(self, params: SensorParams, mode_id: str) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []

        if params.frame_length_lines < params.height:
            issues.append(
                ValidationIssue(
                    severity="error",
                    issue_type="fll_below_height",
                    message=f"Frame length {params.frame_length_lines} lines is shorter than the "
                    f"{params.height} active lines; vertical blanking would be negative.",
                    mode_id=mode_id,
                )
            )

        if params.line_length_pck < params.width:
            issues.append(
                ValidationIssue(
                    severity="error",
                    issue_type="line_length_below_width",
                    message=f"Line length {params.line_length_pck} PCK is shorter than the "
                    f"{params.width} active pixels; horizontal blanking would be negative.",
                    mode_id=mode_id,
                )
            )

        if not params.pixel_clock_mhz > 0:
            issues.append(
                ValidationIssue(
                    severity="error",
                    issue_type="non_positive_clock",
                    message=f"Pixel clock must be positive, got {params.pixel_clock_mhz} MHz. "
                    "Timing values will be inf/nan.",
                    mode_id=mode_id,
                )
            )

        if params.lanes < 1:
            issues.append(
                ValidationIssue(
                    severity="error",
                    issue_type="zero_lanes",
                    message=f"At least one CSI-2 lane is required, got {params.lanes}.",
                    mode_id=mode_id,
                )
            )

        return issues
