"""Tests for the push-based orientation feed."""

from __future__ import annotations

import asyncio

import pytest

from bearing.orientation.samples import OrientationSample, SourceType
from bearing.peripheral.core import Input
from bearing.peripheral.orientation import OrientationFeed, PermissionState


def _collect(feed: OrientationFeed) -> list[OrientationSample]:
    received: list[OrientationSample] = []
    feed.observe.subscribe(received.append)
    return received


class TestOrientationFeedIngestion:
    """Validate the feed forwards both event kinds so the estimator can arbitrate."""

    @pytest.mark.parametrize(
        ("event_type", "expected"),
        [
            ("deviceorientationabsolute", SourceType.ABSOLUTE),
            ("deviceorientation", SourceType.RELATIVE),
        ],
    )
    def test_publishes_samples(self, event_type: str, expected: SourceType) -> None:
        feed = OrientationFeed()
        received = _collect(feed)

        feed.update_due_to_data({"event_type": event_type, "data": {"alpha": 42.0}})

        assert len(received) == 1
        assert received[0].alpha == pytest.approx(42.0)
        assert received[0].source_type is expected

    def test_ignores_unrelated_events(self) -> None:
        feed = OrientationFeed()
        received = _collect(feed)

        feed.handle_input(Input(event_type="peripheral.magnetometer.vector", data={"x": 1}))

        assert received == []

    def test_ignores_malformed_payloads(self) -> None:
        """Confirm payloads missing required keys are dropped without raising."""

        feed = OrientationFeed()
        received = _collect(feed)

        feed.update_due_to_data({"event_type": "deviceorientation"})
        feed.update_due_to_data({"event_type": "deviceorientation", "data": "alpha=1"})

        assert received == []

    def test_process_line_decodes_json(self) -> None:
        feed = OrientationFeed()
        received = _collect(feed)

        feed.process_line(
            b'{"event_type": "deviceorientation", "data": {"alpha": 10, "beta": 2}}\n'
        )
        feed.process_line("not json")
        feed.process_line("{broken")

        assert len(received) == 1
        assert received[0].beta == pytest.approx(2.0)

    def test_close_completes_stream(self) -> None:
        """Ensure samples after close are dropped so teardown is final."""

        feed = OrientationFeed()
        completed: list[bool] = []
        received: list[OrientationSample] = []
        feed.observe.subscribe(received.append, on_completed=lambda: completed.append(True))

        feed.close()
        feed.close()
        feed.publish(OrientationSample(alpha=1.0))

        assert completed == [True]
        assert received == []


class TestOrientationFeedPermissions:
    """Capability and permission failures surface as values, never exceptions."""

    def test_supported_without_permission_prompt(self) -> None:
        feed = OrientationFeed()

        assert feed.is_supported() is True
        assert asyncio.run(feed.request_permission()) is PermissionState.GRANTED

    def test_unsupported_denies(self) -> None:
        feed = OrientationFeed(supported=False)

        assert feed.is_supported() is False
        assert asyncio.run(feed.request_permission()) is PermissionState.DENIED

    @pytest.mark.parametrize(
        ("answer", "expected"),
        [
            (True, PermissionState.GRANTED),
            ("granted", PermissionState.GRANTED),
            (False, PermissionState.DENIED),
            ("denied", PermissionState.DENIED),
        ],
    )
    def test_permission_callback_outcome(self, answer: object, expected: PermissionState) -> None:
        async def _ask() -> object:
            return answer

        feed = OrientationFeed(permission_request=_ask)  # type: ignore[arg-type]

        assert asyncio.run(feed.request_permission()) is expected

    def test_failing_permission_callback_denies(self) -> None:
        """Verify a crashing permission prompt resolves to denied instead of propagating."""

        async def _ask() -> bool:
            raise RuntimeError("user agent refused")

        feed = OrientationFeed(permission_request=_ask)

        assert asyncio.run(feed.request_permission()) is PermissionState.DENIED
