"""Persistent workspace state."""

import json
import logging
from datetime import datetime, UTC

from gearsig.constants import WHEEL_IDS
from gearsig.core.models import Wheel, WheelSet
from gearsig.core.wheel import default_wheels
from gearsig.core.workspace import SignalWorkspace
from gearsig.state.paths import ensure_dirs, state_file


logger = logging.getLogger(__name__)

STATE_VERSION = 2


def _now_iso():
    return datetime.now(UTC).isoformat()


def _wheels_to_dict(wheels):
    return {wheel.id: wheel.to_dict() for wheel in wheels.wheels()}


def default_state():
    return {
        "version": STATE_VERSION,
        "ckp_mode": "preset",
        "wheels": _wheels_to_dict(default_wheels()),
        "updated_at": _now_iso(),
    }


def load_state():
    ensure_dirs()
    sf = state_file()
    if not sf.exists():
        return default_state()
    try:
        with sf.open("r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("ignoring unreadable state file %s: %s", sf, exc)
        return default_state()
    if not isinstance(data, dict):
        logger.warning("ignoring state file %s: top level is not an object", sf)
        return default_state()
    base = default_state()
    base.update(data)
    return base


def _atomic_write_json(path, payload):
    tmp = path.with_suffix(".tmp")
    with tmp.open("w") as f:
        json.dump(payload, f, indent=2)
    tmp.replace(path)


def save_state(state):
    ensure_dirs()
    state = dict(state)
    state["updated_at"] = _now_iso()
    _atomic_write_json(state_file(), state)
    return state


def _wheels_from_state(state):
    stored = state["wheels"]
    wheels = {}
    for wheel_id in WHEEL_IDS:
        wheel = Wheel.from_dict(stored[wheel_id])
        if wheel.id != wheel_id:
            raise ValueError(f"wheel stored under {wheel_id} has id {wheel.id}")
        wheels[wheel_id] = wheel
    mode = state.get("ckp_mode")
    return WheelSet(ckp_mode=mode if mode in ("preset", "custom") else "preset", **wheels)


def load_workspace(state=None):
    state = state or load_state()
    try:
        wheels = _wheels_from_state(state)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("stored wheels are unusable, starting from defaults: %s", exc)
        return SignalWorkspace()
    return SignalWorkspace(wheels)


def save_workspace(workspace, state=None):
    state = dict(state or load_state())
    state["version"] = STATE_VERSION
    state["wheels"] = _wheels_to_dict(workspace.snapshot())
    state["ckp_mode"] = workspace.ckp_mode
    return save_state(state)
