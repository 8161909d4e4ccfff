from enum import StrEnum


class AlphaConvention(StrEnum):
    DIRECT = "direct"
    INVERTED = "inverted"
