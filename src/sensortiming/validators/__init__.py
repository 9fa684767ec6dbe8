from .exposure_validator import ExposureValidator
from .geometry_validator import GeometryValidator
from .link_validator import LinkValidator

__all__ = [
    "ExposureValidator",
    "GeometryValidator",
    "LinkValidator",
]
