"""Managed path layout."""

from pathlib import Path


def config_dir():
    return Path.home() / ".config" / "gearsig"


def data_dir():
    return Path.home() / ".local" / "share" / "gearsig"


def state_dir():
    return Path.home() / ".local" / "state" / "gearsig"


def signals_dir():
    return data_dir() / "signals"


def exports_dir():
    return data_dir() / "exports"


def state_file():
    return state_dir() / "state.json"


def lock_file(name="state"):
    return state_dir() / f"{name}.lock"


def ensure_dirs():
    for p in [config_dir(), data_dir(), state_dir(), signals_dir(), exports_dir()]:
        p.mkdir(parents=True, exist_ok=True)
