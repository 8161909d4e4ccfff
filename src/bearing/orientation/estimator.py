"""Stateful heading estimation: source locking, throttling, smoothing and calibration."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from bearing.orientation.angles import (FULL_TURN, cardinal_direction,
                                        normalize_degrees, smooth_angle)
from bearing.orientation.converter import HeadingConverter
from bearing.orientation.samples import (OrientationSample, SourceLock,
                                         SourceType)
from bearing.utilities.env import Configuration
from bearing.utilities.logging import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class HeadingEstimatorState:
    """Mutable estimator state, written only by its owning estimator."""

    smoothed_heading: float = 0.0
    locked_source: SourceLock = SourceLock.UNSET
    calibration_offset: float = 0.0
    last_update_timestamp: float | None = None
    is_active: bool = False


class HeadingEstimator:
    """Turn a stream of orientation samples into one stable heading.

    Browsers may deliver both an absolute and a relative event for the same
    physical movement. The first accepted sample locks the estimator to its
    source type; an absolute sample upgrades a relative lock, and once locked
    to absolute every relative sample is rejected.
    """

    def __init__(
        self,
        converter: HeadingConverter | None = None,
        *,
        smoothing_factor: float | None = None,
        update_interval_ms: float | None = None,
        calibration_offset: float | None = None,
    ) -> None:
        resolved_factor = (
            smoothing_factor
            if smoothing_factor is not None
            else Configuration.heading_smoothing_factor()
        )
        if not 0.0 < resolved_factor <= 1.0:
            raise ValueError("smoothing_factor must be in the range (0.0, 1.0]")
        resolved_interval = (
            update_interval_ms
            if update_interval_ms is not None
            else Configuration.heading_update_interval_ms()
        )
        if resolved_interval < 0:
            raise ValueError("update_interval_ms must be non-negative")
        resolved_offset = (
            calibration_offset
            if calibration_offset is not None
            else Configuration.heading_calibration_offset()
        )
        if not math.isfinite(resolved_offset):
            raise ValueError("calibration_offset must be a finite number")

        self._converter = converter or HeadingConverter.from_configuration()
        self._smoothing_factor = resolved_factor
        self._update_interval_s = resolved_interval / 1000.0
        self._state = HeadingEstimatorState(
            calibration_offset=normalize_degrees(resolved_offset)
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        self._state.locked_source = SourceLock.UNSET
        self._state.last_update_timestamp = None
        self._state.is_active = True
        logger.debug("Heading estimator started")

    def stop(self) -> None:
        if self._state.is_active:
            logger.debug("Heading estimator stopped")
        self._state.is_active = False
        self._state.locked_source = SourceLock.UNSET

    def is_active(self) -> bool:
        return self._state.is_active

    # ------------------------------------------------------------------
    # Sample handling
    # ------------------------------------------------------------------
    def on_sample(
        self,
        sample: OrientationSample,
        screen_rotation: float | None,
        now: float,
    ) -> float | None:
        """Feed one sample taken at monotonic time ``now`` (seconds).

        Returns the updated heading, or ``None`` when the sample was rejected,
        throttled or carried no usable data.
        """

        state = self._state
        if not state.is_active:
            return None
        if not self._accept_source(sample.source_type):
            logger.debug(
                "Rejected %s sample while locked to %s",
                sample.source_type,
                state.locked_source,
            )
            return None
        if not math.isfinite(now):
            logger.debug("Ignoring sample with non-finite timestamp %r", now)
            return None
        if (
            state.last_update_timestamp is not None
            and now - state.last_update_timestamp < self._update_interval_s
        ):
            return None

        converted = self._converter.convert(sample, screen_rotation)
        if converted is None:
            return None

        calibrated = normalize_degrees(converted + state.calibration_offset)
        state.smoothed_heading = smooth_angle(
            state.smoothed_heading, calibrated, self._smoothing_factor
        )
        state.last_update_timestamp = now
        logger.debug(
            "Heading converted=%.1f calibrated=%.1f smoothed=%.1f lock=%s",
            converted,
            calibrated,
            state.smoothed_heading,
            state.locked_source,
        )
        return state.smoothed_heading

    def _accept_source(self, source: SourceType) -> bool:
        state = self._state
        if state.locked_source is SourceLock.UNSET:
            state.locked_source = SourceLock.for_source(source)
            logger.debug("Locked heading source to %s", source)
            return True
        if state.locked_source is SourceLock.ABSOLUTE:
            return source is SourceType.ABSOLUTE
        if source is SourceType.ABSOLUTE:
            state.locked_source = SourceLock.ABSOLUTE
            logger.debug("Upgraded heading source lock to absolute")
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_heading(self) -> float:
        return self._state.smoothed_heading

    def get_cardinal_direction(self) -> str:
        return cardinal_direction(self._state.smoothed_heading)

    def get_source_lock(self) -> SourceLock:
        return self._state.locked_source

    @property
    def calibration_offset(self) -> float:
        return self._state.calibration_offset

    @property
    def smoothing_factor(self) -> float:
        return self._smoothing_factor

    @property
    def state(self) -> HeadingEstimatorState:
        """Return a copy of the current state for inspection."""

        return replace(self._state)

    # ------------------------------------------------------------------
    # Calibration
    # ------------------------------------------------------------------
    def set_calibration_offset(self, degrees: float) -> float:
        if not _is_finite_number(degrees):
            logger.debug("Ignoring unusable calibration offset %r", degrees)
            return self._state.calibration_offset
        self._state.calibration_offset = normalize_degrees(degrees)
        logger.info("Calibration offset set to %.1f°", self._state.calibration_offset)
        return self._state.calibration_offset

    def adjust_calibration(self, delta_degrees: float) -> float:
        if not _is_finite_number(delta_degrees):
            logger.debug("Ignoring unusable calibration delta %r", delta_degrees)
            return self._state.calibration_offset
        return self.set_calibration_offset(
            self._state.calibration_offset + delta_degrees
        )

    def calibrate_to_current_as_north(self) -> float:
        """Choose the offset that makes the current raw heading read as 0°.

        The raw heading is recovered by removing the old offset first, so the
        old offset is not applied twice.
        """

        state = self._state
        raw_current = normalize_degrees(state.smoothed_heading - state.calibration_offset)
        state.calibration_offset = normalize_degrees(FULL_TURN - raw_current)
        logger.info("Calibrated to north. Offset: %.1f°", state.calibration_offset)
        return state.calibration_offset


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
