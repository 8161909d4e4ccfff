import json
from pathlib import Path
from typing import Optional

import typer

from bearing.navigation.rotation import (FixedScreenRotation, MapRenderer,
                                         MonotonicClock, RotationController,
                                         ScreenRotationQuery)
from bearing.orientation.converter import HeadingConverter
from bearing.orientation.estimator import HeadingEstimator
from bearing.peripheral.orientation import OrientationFeed
from bearing.runtime.container import build_heading_container
from bearing.utilities.logging import get_logger

logger = get_logger(__name__)


class _ReplayClock:
    """Clock that reports the timestamp recorded with the current line."""

    def __init__(self) -> None:
        self.now = 0.0

    def monotonic(self) -> float:
        return self.now


class _EchoMap:
    """Map renderer that prints each applied heading."""

    def __init__(self, clock: _ReplayClock, estimator: HeadingEstimator) -> None:
        self._clock = clock
        self._estimator = estimator

    def set_rotation(self, degrees: float) -> None:
        typer.echo(
            f"{self._clock.now:.3f}\t{degrees:.1f}\t"
            f"{self._estimator.get_cardinal_direction()}\t"
            f"{self._estimator.get_source_lock()}"
        )

    def reset_rotation(self) -> None:
        pass


def replay_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON-lines sample capture."),
    screen_rotation: float = typer.Option(0.0, help="Screen rotation in degrees."),
    offset: Optional[float] = typer.Option(None, help="Calibration offset in degrees."),
    smoothing: Optional[float] = typer.Option(
        None, min=0.0, max=1.0, help="Smoothing factor in (0, 1]."
    ),
    interval_ms: Optional[int] = typer.Option(
        None, min=0, help="Minimum milliseconds between applied samples."
    ),
) -> None:
    """Replay captured orientation samples and print the estimated heading."""

    clock = _ReplayClock()
    try:
        estimator = HeadingEstimator(
            HeadingConverter.from_configuration(),
            smoothing_factor=smoothing,
            update_interval_ms=interval_ms,
            calibration_offset=offset,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    container = build_heading_container(
        overrides={
            HeadingEstimator: estimator,
            ScreenRotationQuery: FixedScreenRotation(screen_rotation),
            MonotonicClock: clock,
            MapRenderer: _EchoMap(clock, estimator),
        }
    )
    feed = container[OrientationFeed]
    controller = container[RotationController]

    controller.enable()
    try:
        with path.open("r", encoding="utf-8") as handle:
            for line_number, line in enumerate(handle, start=1):
                if not line.strip():
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning("Skipping malformed line %d in %s", line_number, path)
                    continue
                if not isinstance(record, dict):
                    logger.warning("Skipping non-object line %d in %s", line_number, path)
                    continue
                try:
                    clock.now = float(record.get("t", clock.now))
                except (TypeError, ValueError):
                    logger.warning("Skipping line %d with bad timestamp", line_number)
                    continue
                feed.update_due_to_data(
                    {key: record[key] for key in ("event_type", "data") if key in record}
                )
    finally:
        controller.disable()
        feed.close()
