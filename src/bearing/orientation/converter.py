"""Convert raw orientation samples into compass headings.

Platforms disagree on how orientation angles map to a heading. iOS reports a
ready-made compass heading, while Android reports ``alpha`` whose direction of
increase varies between devices. Each convention lives in its own source
strategy so a device profile can be swapped without touching the estimator.
"""

from __future__ import annotations

import math
from typing import Protocol, Sequence

from bearing.orientation.angles import FULL_TURN, normalize_degrees
from bearing.orientation.samples import OrientationSample, SourceType
from bearing.utilities.env import AlphaConvention, Configuration
from bearing.utilities.logging import get_logger

logger = get_logger(__name__)


class HeadingSource(Protocol):
    """Strategy that derives a heading from one shape of sample."""

    screen_compensated: bool

    def supports(self, sample: OrientationSample) -> bool:
        ...

    def heading(self, sample: OrientationSample) -> float | None:
        ...


class NativeCompassSource:
    """Use the platform's own compass heading.

    The platform already adjusts this value for the screen, so the converter
    must not subtract the screen rotation again.
    """

    screen_compensated = True

    def supports(self, sample: OrientationSample) -> bool:
        return sample.compass_heading is not None

    def heading(self, sample: OrientationSample) -> float | None:
        if sample.compass_heading is None:
            return None
        return normalize_degrees(sample.compass_heading)


class RawAlphaSource:
    """Treat ``alpha`` as the heading, optionally mirrored."""

    screen_compensated = False

    def __init__(self, convention: AlphaConvention = AlphaConvention.DIRECT) -> None:
        self._convention = AlphaConvention(convention)

    @property
    def convention(self) -> AlphaConvention:
        return self._convention

    def supports(self, sample: OrientationSample) -> bool:
        return sample.alpha is not None

    def heading(self, sample: OrientationSample) -> float | None:
        if sample.alpha is None:
            return None
        if self._convention is AlphaConvention.INVERTED:
            return normalize_degrees(FULL_TURN - sample.alpha)
        return normalize_degrees(sample.alpha)


class TiltCompensatedAlphaSource(RawAlphaSource):
    """Project the device frame onto the horizon when the device is tilted.

    Below ``tilt_threshold`` on both ``beta`` and ``gamma`` the plain alpha
    convention is used. Absolute samples are already north-referenced and are
    never projected.

    The projection grows counter-clockwise with ``alpha``, the same direction
    as the inverted convention, so it is mirrored for direct devices.
    """

    def __init__(
        self,
        convention: AlphaConvention = AlphaConvention.DIRECT,
        *,
        tilt_threshold: float = 45.0,
    ) -> None:
        if not 0.0 <= tilt_threshold <= 90.0:
            raise ValueError("tilt_threshold must be in the range [0.0, 90.0]")
        super().__init__(convention)
        self._tilt_threshold = tilt_threshold

    def heading(self, sample: OrientationSample) -> float | None:
        if sample.alpha is None:
            return None
        if sample.source_type is SourceType.ABSOLUTE:
            return super().heading(sample)
        beta = sample.beta or 0.0
        gamma = sample.gamma or 0.0
        if abs(beta) <= self._tilt_threshold and abs(gamma) <= self._tilt_threshold:
            return super().heading(sample)

        alpha_rad = math.radians(sample.alpha)
        beta_rad = math.radians(beta)
        gamma_rad = math.radians(gamma)
        cos_a, sin_a = math.cos(alpha_rad), math.sin(alpha_rad)
        sin_b = math.sin(beta_rad)
        cos_g, sin_g = math.cos(gamma_rad), math.sin(gamma_rad)

        vx = -cos_a * sin_g - sin_a * sin_b * cos_g
        vy = -sin_a * sin_g + cos_a * sin_b * cos_g
        if math.isclose(vx, 0.0, abs_tol=1e-9) and math.isclose(vy, 0.0, abs_tol=1e-9):
            return super().heading(sample)
        projected = math.degrees(math.atan2(vx, vy))
        if self.convention is AlphaConvention.INVERTED:
            return normalize_degrees(projected)
        return normalize_degrees(FULL_TURN - projected)


class HeadingConverter:
    """Pick the first source that understands a sample and convert it."""

    def __init__(self, sources: Sequence[HeadingSource] | None = None) -> None:
        self._sources: tuple[HeadingSource, ...] = tuple(
            sources
            if sources is not None
            else (NativeCompassSource(), RawAlphaSource())
        )
        if not self._sources:
            raise ValueError("sources must not be empty")

    @classmethod
    def from_configuration(cls) -> "HeadingConverter":
        convention = Configuration.heading_alpha_convention()
        alpha_source: HeadingSource
        if Configuration.heading_tilt_compensation():
            alpha_source = TiltCompensatedAlphaSource(
                convention,
                tilt_threshold=Configuration.heading_tilt_threshold_deg(),
            )
        else:
            alpha_source = RawAlphaSource(convention)
        return cls((NativeCompassSource(), alpha_source))

    @property
    def sources(self) -> tuple[HeadingSource, ...]:
        return self._sources

    def convert(
        self, sample: OrientationSample, screen_rotation: float | None = 0.0
    ) -> float | None:
        """Return the heading in ``[0, 360)`` or ``None`` when unavailable."""

        for source in self._sources:
            if not source.supports(sample):
                continue
            heading = source.heading(sample)
            if heading is None or not math.isfinite(heading):
                logger.debug("Orientation sample produced no heading: %s", sample)
                return None
            if source.screen_compensated:
                return heading
            return normalize_degrees(heading - _screen_angle(screen_rotation))

        logger.debug("Orientation sample carries no usable heading: %s", sample)
        return None


def _screen_angle(screen_rotation: float | None) -> float:
    if screen_rotation is None:
        return 0.0
    try:
        angle = float(screen_rotation)
    except (TypeError, ValueError):
        logger.debug("Ignoring unusable screen rotation: %r", screen_rotation)
        return 0.0
    if not math.isfinite(angle):
        return 0.0
    return angle
