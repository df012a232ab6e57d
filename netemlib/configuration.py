"""Configuration of a single netem setup read from the environment.

Recognized variables:

- ``INTERFACE`` (required): the device to constrain
- ``NETWORK_LATENCY`` (required): the delay in ms. When the latency is
  looked up from the node name, the variable named after the uppercased
  value of ``NODE_NAME`` is read instead.
- ``LIMIT``: the queue size in packets
- ``JITTER``: the jitter in ms
- ``CORRELATION``: the jitter correlation (percentage)
- ``DISTRIBUTION``: one of uniform, normal, pareto, paretonormal
"""
import json
import logging
import os
from typing import Callable, Dict, Mapping, Optional, TypeVar

from netemlib.constants import (
    ENV_CORRELATION,
    ENV_DISTRIBUTION,
    ENV_INTERFACE,
    ENV_JITTER,
    ENV_LIMIT,
    ENV_NETWORK_LATENCY,
    ENV_NODE_NAME,
)
from netemlib.errors import ConfigurationEnvError, ConfigurationParseError, ParseError
from netemlib.netem.command import NetemSet
from netemlib.netem.controls import Controls, Delay, Limit
from netemlib.netem.objects import Distribution
from netemlib.schema import ConfigurationValidator

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _required(environ: Mapping[str, str], key: str) -> str:
    try:
        return environ[key]
    except KeyError:
        raise ConfigurationEnvError(key)


def _convert(value: str, convert: Callable[[str], T]) -> T:
    try:
        return convert(value)
    except ValueError as err:
        raise ConfigurationParseError(str(err))


def _optional(
    environ: Mapping[str, str], key: str, convert: Callable[[str], T]
) -> Optional[T]:
    value = environ.get(key)
    if value is None:
        return None
    return _convert(value, convert)


def _distribution(value: str) -> Distribution:
    try:
        return Distribution.parse(value)
    except ParseError:
        raise ConfigurationParseError("invalid distribution value")


class NetemConfiguration:
    """Netem settings for one device.

    Build it programmatically with :py:meth:`from_settings`, from a
    dictionary with :py:meth:`from_dictionary` or from the process
    environment with :py:meth:`from_environment`.
    """

    def __init__(
        self,
        *,
        interface: Optional[str] = None,
        network_latency: Optional[float] = None,
        limit: Optional[int] = None,
        jitter: Optional[float] = None,
        correlation: Optional[float] = None,
        distribution: Optional[Distribution] = None,
    ):
        self.interface = interface
        self.network_latency = network_latency
        self.limit = limit
        self.jitter = jitter
        self.correlation = correlation
        self.distribution = distribution

    @classmethod
    def from_settings(cls, **kwargs):
        """Alternative constructor. Build the configuration from
        the kwargs."""
        self = cls()
        self.set(**kwargs)
        return self

    @classmethod
    def from_dictionary(cls, dictionary: Mapping, validate: bool = True):
        """Alternative constructor. Build the configuration from a
        dictionary."""
        if validate:
            cls.validate(dictionary)
        distribution = dictionary.get("distribution")
        self = cls(
            interface=dictionary["interface"],
            network_latency=dictionary["network_latency"],
            limit=dictionary.get("limit"),
            jitter=dictionary.get("jitter"),
            correlation=dictionary.get("correlation"),
            distribution=_distribution(distribution) if distribution else None,
        )
        return self.finalize()

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        latency_from_node_name: bool = False,
    ):
        """Alternative constructor. Build the configuration from environment
        variables.

        Args:
            environ: the variables to read (default to ``os.environ``)
            latency_from_node_name: read the latency from the variable named
                after the uppercased value of ``NODE_NAME`` instead of
                ``NETWORK_LATENCY``

        Raises:
            ConfigurationEnvError: if a required variable is missing
            ConfigurationParseError: if a value can't be parsed
        """
        if environ is None:
            environ = os.environ

        latency_key = ENV_NETWORK_LATENCY
        if latency_from_node_name:
            latency_key = _required(environ, ENV_NODE_NAME).upper()

        limit = _optional(environ, ENV_LIMIT, int)
        interface = _required(environ, ENV_INTERFACE)
        network_latency = _convert(_required(environ, latency_key), float)
        self = cls(
            interface=interface,
            network_latency=network_latency,
            limit=limit,
            jitter=_optional(environ, ENV_JITTER, float),
            correlation=_optional(environ, ENV_CORRELATION, float),
            distribution=_optional(environ, ENV_DISTRIBUTION, _distribution),
        )
        return self.finalize()

    @classmethod
    def validate(cls, dictionary: Mapping):
        ConfigurationValidator.validate(dictionary)

    def set(self, **kwargs):
        for k, v in kwargs.items():
            setattr(self, k, v)
        return self

    def to_dict(self) -> Dict:
        d: Dict = {}
        if self.interface is not None:
            d.update(interface=self.interface)
        if self.network_latency is not None:
            d.update(network_latency=self.network_latency)
        if self.limit is not None:
            d.update(limit=self.limit)
        if self.jitter is not None:
            d.update(jitter=self.jitter)
        if self.correlation is not None:
            d.update(correlation=self.correlation)
        if self.distribution is not None:
            d.update(distribution=self.distribution.value)
        return d

    def finalize(self):
        d = self.to_dict()
        logger.debug(json.dumps(d, indent=4))
        self.validate(d)
        return self

    def to_controls(self) -> Controls:
        limit = Limit(packets=self.limit) if self.limit is not None else None
        delay = Delay(
            time=self.network_latency,
            jitter=self.jitter,
            correlation=self.correlation,
            distribution=self.distribution,
        )
        return Controls(limit=limit, delay=delay)

    def to_netem(self) -> NetemSet:
        return NetemSet(interface=self.interface, controls=self.to_controls())

    def __repr__(self) -> str:
        r = f"Conf@{hex(id(self))}\n"
        r += json.dumps(self.to_dict(), indent=4)
        return r
