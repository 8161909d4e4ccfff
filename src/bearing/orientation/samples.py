"""Orientation sample payloads and source classification."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, ClassVar, Mapping

from bearing.peripheral.core import Input
from bearing.utilities.logging import get_logger

logger = get_logger(__name__)


class SourceType(StrEnum):
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class SourceLock(StrEnum):
    UNSET = "unset"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"

    @classmethod
    def for_source(cls, source: SourceType) -> "SourceLock":
        return cls(source.value)


def _normalize_timestamp(timestamp: datetime | None) -> datetime:
    if timestamp is None:
        return datetime.now(timezone.utc)
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def _optional_angle(payload: Mapping[str, Any], *keys: str) -> float | None:
    """Return the first finite angle found under ``keys`` or ``None``."""

    for key in keys:
        raw = payload.get(key)
        if raw is None or isinstance(raw, bool):
            continue
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.debug("Ignoring non-numeric %s in orientation payload: %r", key, raw)
            continue
        if not math.isfinite(value):
            logger.debug("Ignoring non-finite %s in orientation payload: %r", key, raw)
            continue
        return value
    return None


@dataclass(frozen=True, slots=True)
class OrientationSample:
    """One raw device orientation reading.

    ``compass_heading`` is a platform-native absolute heading (iOS
    ``webkitCompassHeading``) already clockwise from north. ``alpha``, ``beta``
    and ``gamma`` are the device rotation angles in degrees. Any of them may be
    missing.
    """

    compass_heading: float | None = None
    alpha: float | None = None
    beta: float | None = None
    gamma: float | None = None
    is_absolute: bool = False
    event_type: str = "deviceorientation"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    ABSOLUTE_EVENT_TYPE: ClassVar[str] = "deviceorientationabsolute"
    RELATIVE_EVENT_TYPE: ClassVar[str] = "deviceorientation"
    EVENT_TYPES: ClassVar[tuple[str, ...]] = (
        "deviceorientationabsolute",
        "deviceorientation",
    )

    @property
    def source_type(self) -> SourceType:
        """Classify the sample as north-referenced or device-referenced."""

        if (
            self.is_absolute
            or self.event_type == self.ABSOLUTE_EVENT_TYPE
            or self.compass_heading is not None
        ):
            return SourceType.ABSOLUTE
        return SourceType.RELATIVE

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        *,
        event_type: str | None = None,
        timestamp: datetime | None = None,
    ) -> "OrientationSample":
        """Build a sample from an untrusted mapping.

        Unusable fields degrade to ``None`` instead of raising.
        """

        resolved_type = event_type or str(payload.get("type") or cls.RELATIVE_EVENT_TYPE)
        return cls(
            compass_heading=_optional_angle(
                payload, "compass_heading", "webkitCompassHeading"
            ),
            alpha=_optional_angle(payload, "alpha"),
            beta=_optional_angle(payload, "beta"),
            gamma=_optional_angle(payload, "gamma"),
            is_absolute=payload.get("absolute", payload.get("is_absolute")) is True,
            event_type=resolved_type,
            timestamp=_normalize_timestamp(timestamp),
        )

    @classmethod
    def from_input(cls, event: Input) -> "OrientationSample | None":
        if not isinstance(event.data, Mapping):
            logger.debug("Ignoring non-mapping orientation payload: %s", event.data)
            return None
        return cls.from_payload(
            event.data, event_type=event.event_type, timestamp=event.timestamp
        )

    def to_input(self, *, timestamp: datetime | None = None) -> Input:
        data: dict[str, Any] = {"absolute": self.is_absolute}
        for key in ("compass_heading", "alpha", "beta", "gamma"):
            value = getattr(self, key)
            if value is not None:
                data[key] = float(value)
        return Input(
            event_type=self.event_type,
            data=data,
            timestamp=_normalize_timestamp(timestamp or self.timestamp),
        )
