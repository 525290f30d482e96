"""Signal generator ASCII command set and status parsing.

The transport that carries these bytes lives outside this package; this module
only names the commands and reads the free-text replies.
"""

from dataclasses import dataclass
from enum import Enum
import re
from typing import Protocol


RPM_STEP = 100
RPM_MIN = 100
RPM_MAX = 5000


class DeviceCommand(Enum):
    RUN = "r"
    STOP = "s"
    RPM_UP = "+"
    RPM_DOWN = "-"
    STATUS = "?"
    SAVE = "w"
    RESET_DEFAULTS = "d"


ALIASES = {
    "R": DeviceCommand.RUN,
    "S": DeviceCommand.STOP,
    "=": DeviceCommand.RPM_UP,
    "_": DeviceCommand.RPM_DOWN,
    "W": DeviceCommand.SAVE,
    "D": DeviceCommand.RESET_DEFAULTS,
}


class Transport(Protocol):
    def send(self, payload: str) -> str: ...


@dataclass
class DeviceStatus:
    running: bool
    rpm: int
    raw_response: str


def parse_command(char):
    if char in ALIASES:
        return ALIASES[char]
    try:
        return DeviceCommand(char)
    except ValueError:
        raise ValueError(f"unknown device command: {char!r}") from None


def step_rpm(rpm, command):
    """RPM the firmware will settle on after an up/down command."""
    if command is DeviceCommand.RPM_UP:
        return min(rpm + RPM_STEP, RPM_MAX)
    if command is DeviceCommand.RPM_DOWN:
        return max(rpm - RPM_STEP, RPM_MIN)
    return rpm


_RPM_RE = re.compile(r"RPM\s*:\s*(\d+)")
_STOP_RE = re.compile(r"\b(STOP|Stopped)\b")
_RUN_RE = re.compile(r"\b(RUN|Running)\b")


def parse_status(response):
    rpm = 0
    match = _RPM_RE.search(response)
    if match:
        rpm = int(match.group(1))

    running = bool(_RUN_RE.search(response)) and not _STOP_RE.search(response)
    return DeviceStatus(running=running, rpm=rpm, raw_response=response)


def send_command(transport: Transport, command):
    """Send one command (enum member or alias character) and read the reply."""
    if not isinstance(command, DeviceCommand):
        command = parse_command(command)
    return parse_status(transport.send(command.value))
