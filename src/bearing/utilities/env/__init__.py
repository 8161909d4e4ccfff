"""Environment configuration helpers."""

from bearing.utilities.env.enums import AlphaConvention as AlphaConvention
from bearing.utilities.env.heading import HeadingConfiguration


class Configuration(
    HeadingConfiguration,
):
    """Aggregate environment configuration helpers."""
