import os

from bearing.utilities.env.enums import AlphaConvention
from bearing.utilities.env.parsing import _env_flag, _env_float, _env_int


class HeadingConfiguration:
    @classmethod
    def heading_smoothing_factor(cls) -> float:
        factor = _env_float("BEARING_SMOOTHING_FACTOR", default=0.15, maximum=1.0)
        if factor <= 0.0:
            raise ValueError("BEARING_SMOOTHING_FACTOR must be greater than 0")
        return factor

    @classmethod
    def heading_update_interval_ms(cls) -> int:
        return _env_int("BEARING_UPDATE_INTERVAL_MS", default=50, minimum=0)

    @classmethod
    def heading_calibration_offset(cls) -> float:
        return _env_float("BEARING_CALIBRATION_OFFSET", default=0.0)

    @classmethod
    def heading_alpha_convention(cls) -> AlphaConvention:
        convention = os.environ.get(
            "BEARING_ALPHA_CONVENTION", "direct"
        ).strip().lower()
        try:
            return AlphaConvention(convention)
        except ValueError as exc:
            raise ValueError(
                "BEARING_ALPHA_CONVENTION must be 'direct' or 'inverted'"
            ) from exc

    @classmethod
    def heading_tilt_compensation(cls) -> bool:
        return _env_flag("BEARING_TILT_COMPENSATION")

    @classmethod
    def heading_tilt_threshold_deg(cls) -> float:
        return _env_float(
            "BEARING_TILT_THRESHOLD_DEG", default=45.0, minimum=0.0, maximum=90.0
        )
