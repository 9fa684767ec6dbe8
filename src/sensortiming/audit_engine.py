import logging
from typing import Iterable, List

from sensortiming.models import SensorMode, SensorParams, ValidationIssue
from sensortiming.timing import calculate_timing
from sensortiming.validators import ExposureValidator, GeometryValidator, LinkValidator

logger = logging.getLogger(__name__)


class ModeAuditEngine:
    """Runs every validator over a set of sensor modes."""

    def __init__(self):
        self.geometry_validator = GeometryValidator()
        self.exposure_validator = ExposureValidator()
        self.link_validator = LinkValidator()

    def audit_params(self, params: SensorParams, mode_id: str = "custom") -> List[ValidationIssue]:
        timing = calculate_timing(params)

        issues: List[ValidationIssue] = []
        issues.extend(self.geometry_validator.validate(params, mode_id))
        issues.extend(self.exposure_validator.validate(params, timing, mode_id))
        issues.extend(self.link_validator.validate(timing, mode_id))
        return issues

    def audit_modes(self, modes: Iterable[SensorMode]) -> List[ValidationIssue]:
        all_issues: List[ValidationIssue] = []
        for mode in modes:
            all_issues.extend(self.audit_params(mode.to_params(), mode.id))
        logger.info("Audited modes: %d issue(s)", len(all_issues))
        return all_issues
