"""Shared CLI and firmware constants."""

from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    USAGE = 2
    RUNTIME_ERROR = 10


APP_NAME = "gearsig"

WHEEL_IDS = ("ckp", "cmp1", "cmp2")

# Must match the signal generator firmware
MAX_CKP_EDGES = 700
MAX_CMP_EDGES = 50
MAX_PAYLOAD_BYTES = 3900

# One byte per count in the wheel export format
MAX_WHEEL_TEETH = 255

CYCLE_DEGREES = 720
CYCLE_TENTHS = 7200
REVOLUTION_TENTHS = 3600

SIG1_TAG = "SIG1"
WHEEL_FORMAT_VERSION = 1
