"""Drive map and needle rotation from the heading estimator.

Rotation modes:

* track-up: the map rotates so the direction of travel is always up.
* the needle always points at north on screen, i.e. it is rotated by the
  negative heading.
"""

from __future__ import annotations

import time
from typing import Callable, Protocol

from reactivex import abc

from bearing.orientation.estimator import HeadingEstimator
from bearing.orientation.samples import OrientationSample
from bearing.peripheral.orientation import OrientationFeed, PermissionState
from bearing.utilities.logging import get_logger

logger = get_logger(__name__)


class MapRenderer(Protocol):
    def set_rotation(self, degrees: float) -> None:
        ...

    def reset_rotation(self) -> None:
        ...


class NeedleRenderer(Protocol):
    def set_rotation(self, degrees: float) -> None:
        ...


class NotificationSink(Protocol):
    def show(self, message: str, level: str = "info") -> None:
        ...


class ScreenRotationQuery(Protocol):
    def screen_rotation(self) -> float:
        ...


class MonotonicClock(Protocol):
    def monotonic(self) -> float:
        ...


class SystemClock:
    def monotonic(self) -> float:
        return time.monotonic()


class FixedScreenRotation:
    """Screen rotation query for displays that never rotate."""

    def __init__(self, degrees: float = 0.0) -> None:
        self.degrees = degrees

    def screen_rotation(self) -> float:
        return self.degrees


class LoggingNotificationSink:
    """Send status messages to the log instead of a UI."""

    def show(self, message: str, level: str = "info") -> None:
        if level == "warning":
            logger.warning(message)
        else:
            logger.info(message)


class RotationController:
    def __init__(
        self,
        estimator: HeadingEstimator,
        feed: OrientationFeed,
        *,
        map_renderer: MapRenderer | None = None,
        needle_renderer: NeedleRenderer | None = None,
        notifications: NotificationSink | None = None,
        screen: ScreenRotationQuery | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._estimator = estimator
        self._feed = feed
        self._map = map_renderer
        self._needle = needle_renderer
        self._notifications = notifications or LoggingNotificationSink()
        self._screen = screen or FixedScreenRotation()
        self._monotonic = monotonic
        self._subscription: abc.DisposableBase | None = None

    @property
    def estimator(self) -> HeadingEstimator:
        return self._estimator

    def is_rotation_active(self) -> bool:
        return self._estimator.is_active()

    def get_current_heading(self) -> float:
        return self._estimator.get_heading()

    def get_cardinal_direction(self) -> str:
        return self._estimator.get_cardinal_direction()

    # ------------------------------------------------------------------
    # Enable / disable
    # ------------------------------------------------------------------
    async def check_device_support(self) -> bool:
        if not self._feed.is_supported():
            logger.warning("Device orientation not supported")
            return False
        return await self._feed.request_permission() is PermissionState.GRANTED

    async def toggle(self) -> bool:
        """Flip rotation mode; returns whether rotation is active afterwards."""

        if not await self.check_device_support():
            self._notify(
                "Compass rotation requires device orientation access. "
                "Please enable it in browser settings.",
                "warning",
            )
            return self.is_rotation_active()
        if self.is_rotation_active():
            self.disable()
        else:
            self.enable()
        return self.is_rotation_active()

    def enable(self) -> None:
        if self.is_rotation_active():
            return
        self._estimator.start()
        self._subscription = self._feed.observe.subscribe(
            on_next=self.handle_sample,
            on_error=lambda exc: logger.error("Orientation feed failed: %s", exc),
        )
        self._notify("Compass rotation enabled", "success")
        logger.info("Compass rotation enabled")

    def disable(self) -> None:
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None
        if not self.is_rotation_active():
            return
        self._estimator.stop()
        self._reset_map_rotation()
        self._set_needle_rotation(0.0)
        self._notify("Compass rotation disabled")
        logger.info("Compass rotation disabled")

    def cleanup(self) -> None:
        self.disable()

    # ------------------------------------------------------------------
    # Sample handling
    # ------------------------------------------------------------------
    def handle_sample(self, sample: OrientationSample) -> None:
        heading = self._estimator.on_sample(
            sample, self._read_screen_rotation(), self._monotonic()
        )
        if heading is None:
            return
        self._update_map_rotation(heading)
        # Needle counter-rotates so it keeps pointing at north on screen.
        self._set_needle_rotation(-heading)

    def _read_screen_rotation(self) -> float:
        try:
            return self._screen.screen_rotation()
        except Exception:
            logger.exception("Failed to read screen rotation")
            return 0.0

    def _update_map_rotation(self, heading: float) -> None:
        if self._map is None:
            return
        try:
            self._map.set_rotation(heading)
        except Exception:
            logger.exception("Failed to update map rotation")

    def _reset_map_rotation(self) -> None:
        if self._map is None:
            return
        try:
            self._map.reset_rotation()
        except Exception:
            logger.exception("Failed to reset map rotation")

    def _set_needle_rotation(self, degrees: float) -> None:
        if self._needle is None:
            return
        try:
            self._needle.set_rotation(degrees)
        except Exception:
            logger.exception("Failed to update needle rotation")

    # ------------------------------------------------------------------
    # Calibration
    # ------------------------------------------------------------------
    def set_calibration_offset(self, degrees: float) -> float:
        offset = self._estimator.set_calibration_offset(degrees)
        self._notify(f"Compass calibrated: {offset:g}° offset")
        return offset

    def adjust_calibration(self, delta_degrees: float) -> float:
        offset = self._estimator.adjust_calibration(delta_degrees)
        self._notify(f"Compass calibrated: {offset:g}° offset")
        return offset

    def calibrate_to_north(self) -> float:
        offset = self._estimator.calibrate_to_current_as_north()
        self._notify("Compass calibrated! Current direction set as North.", "success")
        return offset

    def _notify(self, message: str, level: str = "info") -> None:
        try:
            self._notifications.show(message, level)
        except Exception:
            logger.exception("Failed to deliver notification %r", message)
