"""Codecs for the netem controls.

Each control knows how to render itself as ``tc`` arguments and how to be
rebuilt from the text ``tc qdisc show`` prints::

    LIMIT := limit PACKETS
    DELAY := delay TIME [ JITTER [ CORRELATION ]]
             [ distribution { uniform | normal | pareto | paretonormal } ]

Parsing is a search over the whole text: unrelated text around a clause is
tolerated and only the first occurrence of a clause is considered.
"""
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from netemlib.constants import NETEM_QDISC_PREFIX
from netemlib.errors import ParseError

from .objects import (
    Control,
    Distribution,
    Millisecond,
    Percentage,
    format_milliseconds,
    format_percentage,
)

logger = logging.getLogger(__name__)

# tc stores the limit in a signed 32 bits integer
LIMIT_MIN, LIMIT_MAX = -(2**31), 2**31 - 1

LIMIT_REGEX = re.compile(r"limit\s+(?P<packets>-?[0-9]+)")

# tc separates the time and the jitter with two spaces,
# a single one is also accepted (space joined arguments)
DELAY_REGEX = re.compile(
    r"delay\s+(?P<time>[0-9.]+)ms"
    r"(?:\s+(?P<jitter>[0-9.]+)ms(?:\s+(?P<correlation>[0-9.]+)%)?)?"
)


def _to_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


@dataclass(eq=True, frozen=True)
class Limit(Control):
    """Limit the queue of the qdisc.

    Args:
        packets: maximum number of packets the qdisc may hold
    """

    packets: int

    def to_args(self) -> List[str]:
        return ["limit", str(self.packets)]

    @classmethod
    def from_string(cls, s: str) -> "Limit":
        m = LIMIT_REGEX.search(s)
        if m is None:
            raise ParseError("no limit")
        packets: Optional[int]
        try:
            packets = int(m.group("packets"))
        except ValueError:
            packets = None
        if packets is None or not LIMIT_MIN <= packets <= LIMIT_MAX:
            raise ParseError(f"Failed to get limit packets from '{s[:80]}'")
        return cls(packets=packets)

    @classmethod
    def from_dictionary(cls, dictionary: Mapping) -> "Limit":
        return cls(packets=int(dictionary["packets"]))

    def to_dict(self) -> Dict:
        return dict(packets=self.packets)


@dataclass(eq=True, frozen=True)
class Delay(Control):
    """Delay the packets leaving the qdisc.

    Args:
        time: the delay (ms)
        jitter: random variation added to the delay (ms)
        correlation: correlation (%) between two consecutive random values.
            Ignored when there's no jitter.
        distribution: how the random variation is distributed
    """

    time: Millisecond
    jitter: Optional[Millisecond] = None
    correlation: Optional[Percentage] = None
    distribution: Optional[Distribution] = None

    def to_args(self) -> List[str]:
        args = ["delay", format_milliseconds(self.time)]
        if self.jitter is not None:
            args.append(format_milliseconds(self.jitter))
            if self.correlation is not None:
                args.append(format_percentage(self.correlation))
        if self.distribution is not None:
            args.extend(["distribution", self.distribution.format()])
        return args

    @classmethod
    def from_string(cls, s: str) -> "Delay":
        """Rebuild a delay from a tc text.

        A malformed jitter or correlation is dropped, only a missing (or
        malformed) time is an error. The distribution isn't part of what tc
        prints back and is never set.

        Raises:
            ParseError: if there's no usable ``delay <time>ms`` in the text
        """
        m = DELAY_REGEX.search(s)
        if m is None:
            raise ParseError("no delay")
        try:
            time = float(m.group("time"))
        except ValueError:
            raise ParseError(f"Failed to get delay time from '{s}'")

        jitter = _to_float(m.group("jitter"))
        correlation = None
        if jitter is not None:
            correlation = _to_float(m.group("correlation"))
        return cls(time=time, jitter=jitter, correlation=correlation)

    @classmethod
    def from_dictionary(cls, dictionary: Mapping) -> "Delay":
        distribution = dictionary.get("distribution")
        if distribution is not None:
            distribution = Distribution.parse(distribution)
        return cls(
            time=dictionary["time"],
            jitter=dictionary.get("jitter"),
            correlation=dictionary.get("correlation"),
            distribution=distribution,
        )

    def to_dict(self) -> Dict:
        d: Dict = dict(time=self.time)
        if self.jitter is not None:
            d.update(jitter=self.jitter)
        if self.correlation is not None:
            d.update(correlation=self.correlation)
        if self.distribution is not None:
            d.update(distribution=self.distribution.value)
        return d


@dataclass(eq=True, frozen=True)
class Controls(Control):
    """The set of netem controls applied on a device.

    The limit is always rendered before the delay.
    """

    limit: Optional[Limit] = None
    delay: Optional[Delay] = None

    def to_args(self) -> List[str]:
        args: List[str] = []
        if self.limit is not None:
            args.extend(self.limit.to_args())
        if self.delay is not None:
            args.extend(self.delay.to_args())
        return args

    @classmethod
    def from_string(cls, s: str, gated: bool = True) -> "Controls":
        """Extract the controls from a tc text.

        This never fails: a clause that can't be found is left unset.

        Args:
            s: the text to parse (typically a ``tc qdisc show`` line)
            gated: when True, a text that doesn't start with ``qdisc netem``
                gives empty controls without looking further
        """
        if gated and not s.startswith(NETEM_QDISC_PREFIX):
            return cls()

        try:
            limit: Optional[Limit] = Limit.from_string(s)
        except ParseError as e:
            logger.debug("%s in %r", e.msg, s)
            limit = None
        try:
            delay: Optional[Delay] = Delay.from_string(s)
        except ParseError as e:
            logger.debug("%s in %r", e.msg, s)
            delay = None
        return cls(limit=limit, delay=delay)

    @classmethod
    def from_dictionary(cls, dictionary: Mapping) -> "Controls":
        limit = dictionary.get("limit")
        delay = dictionary.get("delay")
        return cls(
            limit=Limit.from_dictionary(limit) if limit is not None else None,
            delay=Delay.from_dictionary(delay) if delay is not None else None,
        )

    def to_dict(self) -> Dict:
        d = {}
        if self.limit is not None:
            d.update(limit=self.limit.to_dict())
        if self.delay is not None:
            d.update(delay=self.delay.to_dict())
        return d
