"""Device orientation feed that publishes samples pushed from a sensor bridge."""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any, Awaitable, Callable

import reactivex
from reactivex.subject import Subject

from bearing.orientation.samples import OrientationSample
from bearing.peripheral.core import Input, Peripheral
from bearing.utilities.logging import get_logger

logger = get_logger(__name__)

PermissionRequest = Callable[[], Awaitable[bool | str]]


class PermissionState(StrEnum):
    GRANTED = "granted"
    DENIED = "denied"


class OrientationFeed(Peripheral[OrientationSample]):
    """Publish orientation samples as they are pushed in.

    Both ``deviceorientationabsolute`` and ``deviceorientation`` events are
    forwarded; choosing between them is the estimator's job.
    """

    def __init__(
        self,
        *,
        supported: bool = True,
        permission_request: PermissionRequest | None = None,
    ) -> None:
        super().__init__()
        self._supported = supported
        self._permission_request = permission_request
        self._subject: Subject[OrientationSample] = Subject()
        self._closed = False

    def _event_stream(self) -> reactivex.Observable[OrientationSample]:
        return self._subject

    # ------------------------------------------------------------------
    # Capability and permission
    # ------------------------------------------------------------------
    def is_supported(self) -> bool:
        return self._supported

    async def request_permission(self) -> PermissionState:
        """Ask for sensor access; failures resolve to ``DENIED``."""

        if not self._supported:
            return PermissionState.DENIED
        if self._permission_request is None:
            return PermissionState.GRANTED
        try:
            outcome = await self._permission_request()
        except Exception:
            logger.exception("Orientation permission request failed")
            return PermissionState.DENIED
        if outcome is True or outcome == PermissionState.GRANTED:
            return PermissionState.GRANTED
        return PermissionState.DENIED

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------
    def handle_input(self, input: Input) -> None:
        if input.event_type not in OrientationSample.EVENT_TYPES:
            logger.debug("Ignoring non-orientation event: %s", input.event_type)
            return
        sample = OrientationSample.from_input(input)
        if sample is not None:
            self.publish(sample)

    def publish(self, sample: OrientationSample) -> None:
        if self._closed:
            logger.debug("Dropping orientation sample after feed closed")
            return
        self._subject.on_next(sample)

    def process_line(self, line: bytes | str) -> None:
        """Ingest one JSON-encoded ``{"event_type": ..., "data": ...}`` line."""

        text = line.decode("utf-8") if isinstance(line, bytes) else line
        text = text.strip()
        if not text or not text.startswith("{"):
            logger.debug("Ignoring non-JSON orientation payload: %r", text)
            return
        try:
            parsed: dict[str, Any] = json.loads(text)
        except json.JSONDecodeError:
            logger.debug("Failed to decode JSON: %s", text)
            return
        self.update_due_to_data(
            {key: parsed[key] for key in ("event_type", "data") if key in parsed}
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._subject.on_completed()
