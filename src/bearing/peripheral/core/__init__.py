from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import cached_property
from typing import Any, Generic, Mapping, TypeVar

import reactivex
from reactivex import operators as ops

from bearing.utilities.logging import get_logger


@dataclass(slots=True)
class Input:
    """Normalized structure for messages emitted by sensor sources."""

    event_type: str
    data: Any
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


A = TypeVar("A")


class Peripheral(Generic[A]):
    """Base class for push-based sensor sources."""

    _logger = get_logger(__name__)

    def _event_stream(self) -> reactivex.Observable[A]:
        return reactivex.empty()

    @cached_property
    def observe(self) -> reactivex.Observable[A]:
        return self._event_stream().pipe(ops.share())

    def handle_input(self, input: Input) -> None:
        """Process a single input event.

        Subclasses override this to turn raw events into typed values. The base
        implementation is a no-op.
        """

    def update_due_to_data(self, data: Mapping[str, Any]) -> None:
        """Convert a raw payload into an :class:`Input` instance.

        Parameters
        ----------
        data:
            Mapping produced by external sources. The mapping must contain at
            least the keys ``event_type`` and ``data``. Additional keys are
            passed through to :class:`Input`.
        """

        try:
            self.handle_input(Input(**data))
        except TypeError:
            self._logger.debug(
                "Ignoring malformed peripheral payload: %s", data, exc_info=True
            )
