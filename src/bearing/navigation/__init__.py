from bearing.navigation.rotation import (FixedScreenRotation,
                                         LoggingNotificationSink, MapRenderer,
                                         MonotonicClock, NeedleRenderer,
                                         NotificationSink, RotationController,
                                         ScreenRotationQuery, SystemClock)

__all__ = [
    "FixedScreenRotation",
    "LoggingNotificationSink",
    "MapRenderer",
    "MonotonicClock",
    "NeedleRenderer",
    "NotificationSink",
    "RotationController",
    "ScreenRotationQuery",
    "SystemClock",
]
