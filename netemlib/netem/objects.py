from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import List, Union

from netemlib.errors import ParseError

Percentage = float
Millisecond = Union[int, float]


def format_percentage(p: Percentage) -> str:
    """Render a percentage with two decimals (e.g. 25.00%)."""
    return f"{p:.2f}%"


def format_milliseconds(m: Millisecond) -> str:
    """Render a duration in ms using the default number rendering.

    Integral floats lose their trailing ``.0`` (100.0 -> 100ms) the same
    way tc prints them. Tiny values are written in positional notation
    (0.00001ms rather than 1e-05ms) so that they can be read back.
    """
    if isinstance(m, float) and m.is_integer():
        return f"{int(m)}ms"
    text = str(m)
    if "e" in text:
        text = format(Decimal(text), "f")
    return f"{text}ms"


class Control(ABC):
    """Something that can be turned into tc arguments."""

    @abstractmethod
    def to_args(self) -> List[str]:
        ...


class Distribution(Enum):
    """Delay distribution tables shipped with iproute2."""

    UNIFORM = "uniform"
    NORMAL = "normal"
    PARETO = "pareto"
    PARETONORMAL = "paretonormal"

    def format(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "Distribution":
        """Exact (case sensitive) lookup of a distribution by its name.

        Raises:
            ParseError: if the name isn't one of the four known names
        """
        for distribution in cls:
            if distribution.value == name:
                return distribution
        raise ParseError("no distribution")
