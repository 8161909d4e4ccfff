from __future__ import annotations

from typing import Any, Callable, Mapping

from lagom import Container, Singleton

from bearing.navigation.rotation import (FixedScreenRotation,
                                         LoggingNotificationSink, MapRenderer,
                                         MonotonicClock, NeedleRenderer,
                                         NotificationSink, RotationController,
                                         ScreenRotationQuery, SystemClock)
from bearing.orientation.converter import HeadingConverter
from bearing.orientation.estimator import HeadingEstimator
from bearing.peripheral.orientation import OrientationFeed
from bearing.utilities.logging import get_logger

logger = get_logger(__name__)

HeadingContainer = Container
Overrides = Mapping[type[Any], object]


def _build_heading_converter() -> HeadingConverter:
    return HeadingConverter.from_configuration()


def _build_orientation_feed() -> OrientationFeed:
    return OrientationFeed()


def _build_heading_estimator(resolver: HeadingContainer) -> HeadingEstimator:
    return HeadingEstimator(resolver[HeadingConverter])


def _build_screen_rotation() -> ScreenRotationQuery:
    return FixedScreenRotation()


def _build_notification_sink() -> NotificationSink:
    return LoggingNotificationSink()


def _build_clock() -> MonotonicClock:
    return SystemClock()


def _rotation_controller_builder(
    overrides: Overrides | None,
) -> Callable[[HeadingContainer], RotationController]:
    # Renderers have no headless default; they are only wired when supplied.
    renderers = dict(overrides or {})

    def build(resolver: HeadingContainer) -> RotationController:
        return RotationController(
            resolver[HeadingEstimator],
            resolver[OrientationFeed],
            map_renderer=renderers.get(MapRenderer),  # type: ignore[arg-type]
            needle_renderer=renderers.get(NeedleRenderer),  # type: ignore[arg-type]
            notifications=resolver[NotificationSink],
            screen=resolver[ScreenRotationQuery],
            monotonic=resolver[MonotonicClock].monotonic,
        )

    return build


def build_heading_container(overrides: Overrides | None = None) -> HeadingContainer:
    """Return a new container; each call owns independent estimator state.

    ``overrides`` maps a binding key to a ready instance. Collaborators are
    keyed by protocol (``ScreenRotationQuery``, ``NotificationSink``,
    ``MonotonicClock``, ``MapRenderer``, ``NeedleRenderer``), so any object
    implementing one can be injected.
    """

    container = HeadingContainer()
    logger.debug(
        "Configuring Lagom heading container with overrides=%s.",
        set(overrides.keys()) if overrides else set(),
    )
    _bind(container, overrides, HeadingConverter, Singleton(_build_heading_converter))
    _bind(container, overrides, HeadingEstimator, Singleton(_build_heading_estimator))
    _bind(container, overrides, OrientationFeed, Singleton(_build_orientation_feed))
    _bind(container, overrides, ScreenRotationQuery, Singleton(_build_screen_rotation))
    _bind(container, overrides, NotificationSink, Singleton(_build_notification_sink))
    _bind(container, overrides, MonotonicClock, Singleton(_build_clock))
    _bind(
        container,
        overrides,
        RotationController,
        Singleton(_rotation_controller_builder(overrides)),
    )
    return container


def _bind(
    container: HeadingContainer,
    overrides: Overrides | None,
    key: type[Any],
    value: object,
) -> None:
    if overrides and key in overrides:
        container[key] = overrides[key]
        logger.debug("Applied Lagom override for %s.", key)
        return
    container[key] = value
    logger.debug("Registered Lagom provider for %s.", key)
