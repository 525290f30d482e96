"""Named device-config storage."""

from dataclasses import dataclass
import json
import logging
import re

from gearsig.constants import SIG1_TAG
from gearsig.core.errors import FormatError, SignalNotFound
from gearsig.core.models import DeviceSignalConfig
from gearsig.state.paths import signals_dir


logger = logging.getLogger(__name__)


@dataclass
class SignalInfo:
    name: str
    filename: str
    has_ckp: bool
    has_cmp1: bool
    has_cmp2: bool


def safe_filename(name):
    return re.sub(r"[^\w-]", "_", name).lower()


def validate_signal(config):
    if not config.name:
        raise FormatError("signal name cannot be empty")
    if not config.ckp.startswith(SIG1_TAG):
        raise FormatError(f"CKP must start with {SIG1_TAG}")
    for label, blob in (("CMP1", config.cmp1), ("CMP2", config.cmp2)):
        if blob is not None and not blob.startswith(SIG1_TAG):
            raise FormatError(f"{label} must start with {SIG1_TAG}")


def signal_path(filename):
    if not filename.endswith(".json"):
        filename = f"{safe_filename(filename)}.json"
    path = signals_dir() / filename
    if path.parent != signals_dir():
        raise SignalNotFound(f"signal '{filename}' not found")
    return path


def save_signal(config):
    validate_signal(config)
    root = signals_dir()
    root.mkdir(parents=True, exist_ok=True)
    filename = f"{safe_filename(config.name)}.json"
    with (root / filename).open("w") as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.info("saved signal %r as %s", config.name, filename)
    return filename


def _read(path):
    with path.open("r") as f:
        return DeviceSignalConfig.from_dict(json.load(f))


def list_signals():
    root = signals_dir()
    if not root.exists():
        return []
    result = []
    for path in root.glob("*.json"):
        try:
            config = _read(path)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.debug("skipping %s: %s", path.name, exc)
            continue
        result.append(
            SignalInfo(
                name=config.name,
                filename=path.name,
                has_ckp=bool(config.ckp),
                has_cmp1=config.cmp1 is not None,
                has_cmp2=config.cmp2 is not None,
            )
        )
    result.sort(key=lambda s: s.name.lower())
    return result


def load_signal(filename):
    path = signal_path(filename)
    if not path.exists():
        raise SignalNotFound(f"signal '{filename}' not found")
    try:
        return _read(path)
    except (ValueError, KeyError, TypeError) as exc:
        raise FormatError(f"signal '{filename}' is not a device config: {exc}") from exc


def delete_signal(filename):
    path = signal_path(filename)
    if not path.exists():
        raise SignalNotFound(f"signal '{filename}' not found")
    path.unlink()
