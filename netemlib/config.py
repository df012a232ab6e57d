"""
Manage the process wide settings of netemlib.
"""
import copy
import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_config = dict(
    tc_binary="tc",
    api_host="0.0.0.0",
    api_port=3000,
)


def get_config() -> Dict:
    """Get (a copy of) the current config."""
    return copy.deepcopy(_config)


def _set(key: str, value: Optional[Any]):
    if value is not None:
        _config[key] = value


def set_config(
    tc_binary: Optional[str] = None,
    api_host: Optional[str] = None,
    api_port: Optional[int] = None,
):
    """Set a specific config value.

    Args:
        tc_binary: name or path of the traffic control executable
        api_host: address the HTTP api binds to
        api_port: port the HTTP api listens on
    """
    _set("tc_binary", tc_binary)
    _set("api_host", api_host)
    _set("api_port", api_port)

    logger.debug("config = %s", get_config())


@contextmanager
def config_context(**new_config):
    """A context manager to manage a config specific to a portion of code.

    The original config is restored when exiting the context manager.

    Args:
        new_config: any keyword argument supported by
            :py:func:`~netemlib.config.set_config`

    Examples:

        .. code-block:: python

            from netemlib.config import config_context

            ...
            with config_context(tc_binary="/usr/sbin/tc"):
                # tc is resolved from an absolute path here
                ...

            # the config goes back to its previous state here
    """
    old_config = get_config()
    set_config(**new_config)
    try:
        yield
    finally:
        set_config(**old_config)
