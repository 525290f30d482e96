"""Upload preparation: format detection, legacy conversion and firmware limits."""

from dataclasses import dataclass, field
from enum import Enum
import json
import logging
import math

from gearsig.codec.frame_codec import decode_edge_count, encode_signal_blob
from gearsig.constants import (
    CYCLE_DEGREES,
    CYCLE_TENTHS,
    MAX_CKP_EDGES,
    MAX_CMP_EDGES,
    MAX_PAYLOAD_BYTES,
    SIG1_TAG,
)
from gearsig.core.edges import to_tenths
from gearsig.core.errors import FormatError, LimitExceeded
from gearsig.core.models import DeviceSignalConfig, Edge
from gearsig.device.protocol import Transport, parse_status


logger = logging.getLogger(__name__)

CHANNEL_LIMITS = {"CKP": MAX_CKP_EDGES, "CMP1": MAX_CMP_EDGES, "CMP2": MAX_CMP_EDGES}


class ConfigKind(Enum):
    PROTECTED = "protected"
    DEVICE = "device"
    LEGACY = "legacy"


@dataclass
class PreparedUpload:
    kind: ConfigKind
    device: DeviceSignalConfig
    payload: str
    edge_counts: dict[str, int] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_sig1(value):
    return isinstance(value, str) and value.startswith(SIG1_TAG)


def _is_protected(obj):
    return (
        _is_number(obj.get("version"))
        and isinstance(obj.get("checksum"), str)
        and all(isinstance(obj.get(k), str) for k in ("CKP", "CMP1", "CMP2"))
        and not obj["CKP"].startswith(SIG1_TAG)
    )


def _is_device(obj):
    return (
        isinstance(obj.get("name"), str)
        and _is_sig1(obj.get("CKP"))
        and all(obj.get(k) is None or _is_sig1(obj.get(k)) for k in ("CMP1", "CMP2"))
    )


def _is_legacy(obj):
    for key in ("rpm", "cycle"):
        if not _is_number(obj.get(key)) or not math.isfinite(obj[key]):
            return False
    signals = obj.get("signals")
    if not isinstance(signals, dict):
        return False
    return all(
        isinstance(signals.get(ch), dict) and isinstance(signals[ch].get("edges"), list)
        for ch in ("ckp", "cmp1", "cmp2")
    )


def detect_config_kind(obj):
    if not isinstance(obj, dict):
        raise FormatError("config must be a JSON object")
    if _is_protected(obj):
        return ConfigKind.PROTECTED
    if _is_device(obj):
        return ConfigKind.DEVICE
    if _is_legacy(obj):
        return ConfigKind.LEGACY
    raise FormatError(
        "unsupported config format; expected device JSON {name, CKP, CMP1, CMP2} with "
        f"{SIG1_TAG} blobs, or legacy edge JSON {{rpm, cycle, signals:{{...edges}}}}"
    )


def angle_to_tenths(angle, warnings=None):
    """Map a legacy edge angle onto tenths of a degree.

    Values up to 720 are read as degrees, values up to 7200 as tenths already,
    anything else is clamped into [0, 7200].
    """
    if not _is_number(angle) or not math.isfinite(angle):
        return 0
    if abs(angle) <= CYCLE_DEGREES:
        tenths = to_tenths(angle)
    elif abs(angle) <= CYCLE_TENTHS:
        tenths = int(math.floor(angle + 0.5))
    else:
        tenths = int(math.floor(max(0, min(angle, CYCLE_TENTHS)) + 0.5))
        _warn(warnings, f"angle {angle} is outside the 720 deg cycle; clamped to {tenths / 10} deg")
    if tenths < 0:
        _warn(warnings, f"negative angle {angle} clamped to 0")
        tenths = 0
    return tenths


def _warn(warnings, message):
    logger.warning(message)
    if warnings is not None:
        warnings.append(message)


def edges_from_legacy(edges, channel="", warnings=None):
    usable = [
        e for e in edges if isinstance(e, dict) and _is_number(e.get("angle")) and _is_number(e.get("level"))
    ]
    angles = [abs(e["angle"]) for e in usable]
    if any(a <= CYCLE_DEGREES for a in angles) and any(CYCLE_DEGREES < a <= CYCLE_TENTHS for a in angles):
        _warn(
            warnings,
            f"{channel or 'legacy'} edges mix values at or below 720 with larger ones; "
            "the smaller ones are read as degrees, the larger as tenths",
        )

    mapped = [Edge(angle_to_tenths(e["angle"], warnings), 1 if e["level"] else 0) for e in usable]
    mapped.sort(key=lambda e: e.angle_tenths)
    return mapped


def legacy_to_device_config(legacy, warnings=None):
    signals = legacy["signals"]
    ckp = edges_from_legacy(signals["ckp"]["edges"], "ckp", warnings)
    cmp1 = edges_from_legacy(signals["cmp1"]["edges"], "cmp1", warnings)
    cmp2 = edges_from_legacy(signals["cmp2"]["edges"], "cmp2", warnings)
    return DeviceSignalConfig(
        name=f"Imported {int(math.floor(legacy['rpm'] + 0.5))}RPM",
        ckp=encode_signal_blob(ckp),
        cmp1=encode_signal_blob(cmp1) if cmp1 else None,
        cmp2=encode_signal_blob(cmp2) if cmp2 else None,
    )


def serialize_device_config(device):
    return json.dumps(device.to_dict(), separators=(",", ":"))


def check_edge_limits(device):
    """Return per-channel edge counts, raising on the first channel over its limit."""
    if not _is_sig1(device.ckp) or device.ckp == SIG1_TAG:
        raise FormatError(f"invalid CKP: must be a non-empty {SIG1_TAG} blob")

    counts = {}
    for channel, blob in device.blobs().items():
        if not blob:
            continue
        count = decode_edge_count(blob)
        limit = CHANNEL_LIMITS[channel]
        if count > limit:
            raise LimitExceeded(count, limit, f"{channel} edge count")
        counts[channel] = count
    return counts


def prepare_upload(raw_text):
    """Turn arbitrary input text into a payload ready for the transport."""
    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise FormatError(f"invalid JSON: {exc}") from exc

    kind = detect_config_kind(parsed)
    warnings = []
    if kind is ConfigKind.PROTECTED:
        raise FormatError(
            "this is the protected wheel export (version/checksum); use the device export "
            f"JSON instead, it must contain {SIG1_TAG} blobs"
        )
    if kind is ConfigKind.DEVICE:
        device = DeviceSignalConfig.from_dict(parsed)
    else:
        device = legacy_to_device_config(parsed, warnings)

    counts = check_edge_limits(device)
    payload = serialize_device_config(device)
    if len(payload) > MAX_PAYLOAD_BYTES:
        raise LimitExceeded(len(payload), MAX_PAYLOAD_BYTES, "payload size in bytes")

    logger.debug("prepared %s upload: %d bytes, edges %s", kind.value, len(payload), counts)
    return PreparedUpload(kind=kind, device=device, payload=payload, edge_counts=counts, warnings=warnings)


def send_upload(transport: Transport, raw_text):
    """Prepare ``raw_text`` and hand it to ``transport.send`` once.

    Returns the prepared upload and the device reply read as a
    ``DeviceStatus`` (the reply text stays in ``raw_response``). Nothing is
    sent when preparation fails, and failures are never retried here.
    """
    prepared = prepare_upload(raw_text)
    response = transport.send(prepared.payload)
    logger.info("uploaded %d bytes, device replied %r", len(prepared.payload), response[:80])
    return prepared, parse_status(response)
