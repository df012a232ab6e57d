# flake8: noqa
from netemlib.config import config_context, get_config, set_config
from netemlib.configuration import NetemConfiguration
from netemlib.errors import (
    ConfigurationEnvError,
    ConfigurationError,
    ConfigurationParseError,
    NetemError,
    NetemExecutionError,
    ParseError,
)
from netemlib.netem.command import (
    Netem,
    NetemReset,
    NetemSet,
    Output,
    OutputError,
    OutputOk,
    execute,
    netem_from_dictionary,
    show,
)
from netemlib.netem.controls import Controls, Delay, Limit
from netemlib.netem.objects import (
    Distribution,
    format_milliseconds,
    format_percentage,
)
from netemlib.version import __version__
