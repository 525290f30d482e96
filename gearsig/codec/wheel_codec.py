"""Protected local export of full wheel geometry.

Per-wheel layout before masking:

  [version:1][total_teeth:1][missing_count:1][reserved:1]
  [missing index:1] x missing_count
  [start*10:2 LE][end*10:2 LE][enabled:1] x teeth

The buffer is XOR-masked with a repeating 4-byte key and base64-encoded. The
three wheel blobs are joined with ``|`` and protected by a CRC-32 checksum.
"""

import base64
import binascii
from datetime import date
import re
import struct
import zlib

from gearsig.constants import MAX_WHEEL_TEETH, WHEEL_FORMAT_VERSION
from gearsig.core.edges import to_tenths
from gearsig.core.errors import DecodeError, FormatError, IntegrityError, VersionError
from gearsig.core.models import ExportedWheelConfig, Tooth, Wheel, WheelSet


MASK_KEY = bytes([0x5A, 0xA5, 0x3C, 0xC3])
HEADER_SIZE = 4
TOOTH_RECORD_SIZE = 5
TOOTH_RECORD = struct.Struct("<HHB")


def _mask(buf):
    return bytes(b ^ MASK_KEY[i % len(MASK_KEY)] for i, b in enumerate(buf))


def checksum(payload):
    """CRC-32 (IEEE, reflected) of the joined blob text as 8 lower-hex digits."""
    return f"{zlib.crc32(payload.encode('latin-1')) & 0xFFFFFFFF:08x}"


def encode_wheel(wheel):
    if wheel.total_teeth > MAX_WHEEL_TEETH or len(wheel.missing_teeth) > MAX_WHEEL_TEETH:
        raise FormatError(f"{wheel.id}: at most {MAX_WHEEL_TEETH} teeth fit the export format")

    buf = bytearray(
        [WHEEL_FORMAT_VERSION, wheel.total_teeth & 0xFF, len(wheel.missing_teeth), 0]
    )
    buf += bytes(m & 0xFF for m in wheel.missing_teeth)
    for tooth in wheel.teeth:
        buf += TOOTH_RECORD.pack(
            to_tenths(tooth.start_angle),
            to_tenths(tooth.end_angle),
            1 if tooth.enabled else 0,
        )
    return base64.b64encode(_mask(buf)).decode("ascii")


def decode_wheel(encoded, wheel_id):
    try:
        buf = _mask(base64.b64decode(encoded, validate=True))
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"{wheel_id}: invalid base64: {exc}") from exc

    if len(buf) < HEADER_SIZE:
        raise DecodeError(f"{wheel_id}: wheel record too short ({len(buf)} bytes)")

    version, total_teeth, missing_count, _reserved = buf[:HEADER_SIZE]
    if version != WHEEL_FORMAT_VERSION:
        raise VersionError(version)

    teeth_start = HEADER_SIZE + missing_count
    if teeth_start > len(buf):
        raise DecodeError(f"{wheel_id}: missing-tooth list runs past the end of the record")
    if (len(buf) - teeth_start) % TOOTH_RECORD_SIZE:
        raise DecodeError(f"{wheel_id}: trailing partial tooth record")

    missing_teeth = list(buf[HEADER_SIZE:teeth_start])
    teeth = []
    for tooth_id, (start, end, flags) in enumerate(
        TOOTH_RECORD.iter_unpack(buf[teeth_start:]), start=1
    ):
        teeth.append(Tooth(id=tooth_id, start_angle=start / 10, end_angle=end / 10, enabled=flags == 1))

    if missing_teeth:
        name = f"{total_teeth}-{len(missing_teeth)}"
    else:
        name = f"{len(teeth)}"
    return Wheel(
        id=wheel_id,
        name=name,
        total_teeth=total_teeth,
        missing_teeth=missing_teeth,
        teeth=teeth,
        inner_radius=60.0 if wheel_id == "ckp" else 50.0,
        outer_radius=80.0,
    )


def encode_config(ckp, cmp1, cmp2):
    blobs = [encode_wheel(ckp), encode_wheel(cmp1), encode_wheel(cmp2)]
    return ExportedWheelConfig(
        version=WHEEL_FORMAT_VERSION,
        ckp=blobs[0],
        cmp1=blobs[1],
        cmp2=blobs[2],
        checksum=checksum("|".join(blobs)),
    )


def validate_exported_config(obj):
    if not isinstance(obj, dict):
        return False
    return (
        isinstance(obj.get("version"), int)
        and not isinstance(obj.get("version"), bool)
        and all(isinstance(obj.get(k), str) for k in ("CKP", "CMP1", "CMP2", "checksum"))
    )


def decode_config(config):
    """Decode an ExportedWheelConfig (or its JSON dict) into a WheelSet."""
    if isinstance(config, dict):
        if not validate_exported_config(config):
            raise FormatError("not a protected wheel export (version/CKP/CMP1/CMP2/checksum)")
        config = ExportedWheelConfig.from_dict(config)

    if config.version != WHEEL_FORMAT_VERSION:
        raise VersionError(config.version)

    expected = checksum(f"{config.ckp}|{config.cmp1}|{config.cmp2}")
    if config.checksum != expected:
        raise IntegrityError("invalid configuration: checksum mismatch")

    return WheelSet(
        ckp=decode_wheel(config.ckp, "ckp"),
        cmp1=decode_wheel(config.cmp1, "cmp1"),
        cmp2=decode_wheel(config.cmp2, "cmp2"),
        ckp_mode="custom",
    )


def generate_filename(ckp, today=None):
    today = today or date.today()
    pattern = re.sub(r"[^a-zA-Z0-9-]", "_", ckp.name)
    return f"signal_config_{pattern}_{today.isoformat()}.json"
