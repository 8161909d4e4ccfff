import os

import pytest
from hypothesis import HealthCheck, settings

# Module loggers are created at import time; keep them off the home directory.
os.environ.setdefault("BEARING_LOG_TO_FILE", "false")

settings.register_profile(
    "default",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")

_HEADING_ENV_VARS = (
    "BEARING_SMOOTHING_FACTOR",
    "BEARING_UPDATE_INTERVAL_MS",
    "BEARING_CALIBRATION_OFFSET",
    "BEARING_ALPHA_CONVENTION",
    "BEARING_TILT_COMPENSATION",
    "BEARING_TILT_THRESHOLD_DEG",
)


@pytest.fixture(autouse=True)
def default_heading_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear heading overrides so every test starts from documented defaults."""

    for name in _HEADING_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


class StubClock:
    """Monotonic clock stub that advances in milliseconds."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def advance_ms(self, delta_ms: float) -> None:
        self._now += delta_ms / 1000.0

    def monotonic(self) -> float:
        return self._now


@pytest.fixture()
def clock() -> StubClock:
    return StubClock(start=100.0)
