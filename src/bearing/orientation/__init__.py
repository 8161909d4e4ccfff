"""Heading estimation from device orientation samples."""

from .angles import (cardinal_direction, normalize_degrees,
                     shortest_angular_difference, smooth_angle)
from .converter import (HeadingConverter, HeadingSource, NativeCompassSource,
                        RawAlphaSource, TiltCompensatedAlphaSource)
from .estimator import HeadingEstimator, HeadingEstimatorState
from .samples import OrientationSample, SourceLock, SourceType

__all__ = [
    "HeadingConverter",
    "HeadingEstimator",
    "HeadingEstimatorState",
    "HeadingSource",
    "NativeCompassSource",
    "OrientationSample",
    "RawAlphaSource",
    "SourceLock",
    "SourceType",
    "TiltCompensatedAlphaSource",
    "cardinal_direction",
    "normalize_degrees",
    "shortest_angular_difference",
    "smooth_angle",
]
