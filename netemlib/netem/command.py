"""Turn netem operations into ``tc`` invocations.

Two operations are supported on the root qdisc of a device:

- :py:class:`NetemSet` replaces the root qdisc by a netem qdisc with the
  given controls (``tc qdisc replace dev <if> root netem ...``)
- :py:class:`NetemReset` deletes it (``tc qdisc del dev <if> root netem``)

A :py:class:`NetemSet` without any control still uses the replace form: it
clears the netem parameters but keeps a netem qdisc in place.

:py:func:`execute` never raises: every attempt gives back an
:py:class:`Output`.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Tuple, Union

from netemlib import log
from netemlib.config import get_config
from netemlib.constants import NETEM_QDISC_PREFIX
from netemlib.errors import NetemExecutionError
from netemlib.schema import RequestValidator

from .controls import Controls
from .objects import Control

logger = logging.getLogger(__name__)

SIGNAL_DESCRIPTION = "Process killed by signal"


def _root_netem(action: str, interface: str) -> List[str]:
    return ["qdisc", action, "dev", interface, "root", "netem"]


@dataclass(eq=True, frozen=True)
class NetemSet(Control):
    """Apply some controls on a device.

    Args:
        interface: the device name (e.g. eth0)
        controls: the controls to apply
    """

    interface: str
    controls: Controls = field(default_factory=Controls)

    def to_args(self) -> List[str]:
        return _root_netem("replace", self.interface) + self.controls.to_args()

    def to_dict(self) -> Dict:
        return dict(
            type="set", interface=self.interface, controls=self.controls.to_dict()
        )


@dataclass(eq=True, frozen=True)
class NetemReset(Control):
    """Remove the netem qdisc from a device."""

    interface: str

    def to_args(self) -> List[str]:
        return _root_netem("del", self.interface)

    def to_dict(self) -> Dict:
        return dict(type="reset", interface=self.interface)


Netem = Union[NetemSet, NetemReset]


def netem_from_dictionary(dictionary: Mapping, validate: bool = True) -> Netem:
    """Build an operation from a request body.

    Args:
        dictionary: a body tagged by its ``type`` (``set`` or ``reset``)
        validate: validate the body against the request schema first

    Raises:
        jsonschema.exceptions.ValidationError: if the body is invalid
    """
    if validate:
        RequestValidator.validate(dictionary)
    if dictionary["type"] == "reset":
        return NetemReset(interface=dictionary["interface"])
    return NetemSet(
        interface=dictionary["interface"],
        controls=Controls.from_dictionary(dictionary["controls"]),
    )


class Output(ABC):
    """Result of an execution attempt."""

    @abstractmethod
    def to_dict(self) -> Dict:
        ...

    def is_ok(self) -> bool:
        return False


@dataclass(eq=True, frozen=True)
class OutputOk(Output):
    def to_dict(self) -> Dict:
        return dict(status="ok")

    def is_ok(self) -> bool:
        return True


@dataclass(eq=True, frozen=True)
class OutputError(Output):
    description: str

    def to_dict(self) -> Dict:
        return dict(status="error", description=self.description)


def _to_output(returncode: int, stderr: bytes) -> Output:
    """Map the status of a finished tc process to an Output."""
    # asyncio reports the termination by signal N as -N
    if returncode < 0:
        return OutputError(SIGNAL_DESCRIPTION)
    if returncode == 0:
        return OutputOk()
    try:
        err = stderr.decode("utf-8")
    except UnicodeDecodeError:
        return OutputError(f"Exit with status code: {returncode}")
    return OutputError(f"Exit with status code: {returncode}, stderr: {err}")


async def _tc(args: List[str]) -> Tuple[int, bytes, bytes]:
    process = await asyncio.create_subprocess_exec(
        get_config()["tc_binary"],
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()
    return process.returncode, stdout, stderr


async def execute(netem: Netem) -> Output:
    """Run tc with the arguments of the operation.

    There's no timeout and no retry: a hung tc hangs the caller.

    Args:
        netem: the operation to enforce

    Returns:
        :py:class:`OutputOk` on a zero exit code, an :py:class:`OutputError`
        describing the failure otherwise (non zero exit code, termination
        by a signal, tc that can't be launched)
    """
    _logger = log.getLogger(__name__, tags=[netem.interface])
    args = netem.to_args()
    _logger.info("Executing => tc %s", " ".join(args))
    try:
        returncode, _, stderr = await _tc(args)
    except (OSError, ValueError) as err:
        output: Output = OutputError(f"Command Error: {err}")
    else:
        output = _to_output(returncode, stderr)
    if not output.is_ok():
        _logger.error("tc failed: %s", output.to_dict()["description"])
    return output


async def show(interface: str) -> Controls:
    """Read back the netem controls currently enforced on a device.

    Runs ``tc qdisc show dev <interface>`` and parses the first netem line.
    Empty controls are returned if there's no netem qdisc on the device.

    Raises:
        NetemExecutionError: if tc can't be run or fails
    """
    args = ["qdisc", "show", "dev", interface]
    logger.debug("Executing => tc %s", " ".join(args))
    try:
        returncode, stdout, stderr = await _tc(args)
    except (OSError, ValueError) as err:
        raise NetemExecutionError(f"Command Error: {err}") from err
    output = _to_output(returncode, stderr)
    if isinstance(output, OutputError):
        raise NetemExecutionError(output.description)

    for line in stdout.decode("utf-8", errors="replace").splitlines():
        if line.startswith(NETEM_QDISC_PREFIX):
            return Controls.from_string(line)
    return Controls()
