"""Shared command helpers."""

from pathlib import Path
import sys

from gearsig.constants import MAX_WHEEL_TEETH, WHEEL_IDS


def require_yes(args, action_text):
    if getattr(args, "yes", False):
        return True
    try:
        reply = input(f"{action_text} [y/N]: ").strip().lower()
    except EOFError:
        return False
    return reply in ("y", "yes")


def ensure_existing_file(path_text):
    if not path_text:
        return None
    p = Path(path_text).expanduser()
    if not p.exists() or not p.is_file():
        return None
    return p


def read_input_text(path_text):
    """Read a file argument, with ``-`` meaning stdin. None if missing."""
    if path_text == "-":
        return sys.stdin.read()
    path = ensure_existing_file(path_text)
    if path is None:
        return None
    return path.read_text()


def check_wheel_id(wheel_id):
    wheel_id = (wheel_id or "").lower()
    return wheel_id if wheel_id in WHEEL_IDS else None


def describe_wheel(wheel):
    return {
        "name": wheel.name,
        "total_teeth": wheel.total_teeth,
        "enabled_teeth": len(wheel.enabled_teeth),
        "missing_teeth": list(wheel.missing_teeth),
    }


def tooth_count_error(count, option="--teeth"):
    if not count or count < 1 or count > MAX_WHEEL_TEETH:
        return f"{option} must be between 1 and {MAX_WHEEL_TEETH}"
    return None
