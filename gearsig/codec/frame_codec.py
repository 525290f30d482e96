"""SIG1 device blob codec.

Binary layout before base64 (little-endian):

  [seed:4][count:2][angle_tenths:2, level:2] x count[crc16:2]

The seed is stored in clear and seeds a 16-byte LCG keystream. Every byte
after the seed is obfuscated as ``((plain + rot) & 0xFF) ^ key[idx]`` with
``idx = (offset - 4) % 16`` and ``rot = (offset - 4) & 0x0F``. The CRC-16/MODBUS
covers the plaintext count and edge bytes. The text form is ``"SIG1"`` followed
by the base64 of the buffer.
"""

import base64
import binascii
from dataclasses import dataclass
import logging
import random
import struct

from gearsig.constants import SIG1_TAG
from gearsig.core.errors import DecodeError, FormatError, IntegrityError
from gearsig.core.models import Edge


logger = logging.getLogger(__name__)

SEED_XOR = 0xDEADBEEF
LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
KEY_LENGTH = 16

SEED_SIZE = 4
COUNT_SIZE = 2
EDGE_SIZE = 4
CRC_SIZE = 2
MIN_FRAME_SIZE = SEED_SIZE + COUNT_SIZE + CRC_SIZE


@dataclass
class BlobInfo:
    seed: int
    edge_count: int
    stored_crc: int
    calculated_crc: int
    edges: list[Edge]
    raw_bytes: bytes

    @property
    def crc_match(self):
        return self.stored_crc == self.calculated_crc

    def summary(self):
        first = ", ".join(f"{e.angle_tenths / 10}deg:{e.level}" for e in self.edges[:5])
        if self.edge_count > 5:
            first += "..."
        return {
            "seed": f"0x{self.seed:08X}",
            "edge_count": self.edge_count,
            "stored_crc": f"0x{self.stored_crc:04X}",
            "calculated_crc": f"0x{self.calculated_crc:04X}",
            "crc_match": self.crc_match,
            "first_edges": first,
            "raw_bytes": " ".join(f"{b:02X}" for b in self.raw_bytes[:50]),
        }


def crc16(data):
    """CRC-16/MODBUS: reflected poly 0xA001, init 0xFFFF."""
    crc = 0xFFFF
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ 0xA001
            else:
                crc >>= 1
    return crc


def derive_key(seed):
    key = bytearray(KEY_LENGTH)
    state = (seed ^ SEED_XOR) & 0xFFFFFFFF
    for i in range(KEY_LENGTH):
        state = (state * LCG_MULTIPLIER + LCG_INCREMENT) & 0xFFFFFFFF
        key[i] = (state >> 16) & 0xFF
    return bytes(key)


def _obfuscate(buf, key):
    for offset in range(SEED_SIZE, len(buf)):
        pos = offset - SEED_SIZE
        buf[offset] = ((buf[offset] + (pos & 0x0F)) & 0xFF) ^ key[pos % KEY_LENGTH]


def _deobfuscate(buf, key):
    for offset in range(SEED_SIZE, len(buf)):
        pos = offset - SEED_SIZE
        buf[offset] = ((buf[offset] ^ key[pos % KEY_LENGTH]) - (pos & 0x0F)) & 0xFF


def encode_signal_blob(edges, seed=None):
    """Encode edges to a ``SIG1`` blob; an empty edge list encodes to ``""``."""
    if not edges:
        return ""
    if seed is None:
        seed = random.getrandbits(32)

    try:
        buf = bytearray(struct.pack("<IH", seed & 0xFFFFFFFF, len(edges)))
        for edge in edges:
            buf += struct.pack("<HH", edge.angle_tenths, edge.level)
    except struct.error as exc:
        raise FormatError(f"edge out of range for SIG1 frame: {exc}") from exc
    buf += struct.pack("<H", crc16(buf[SEED_SIZE:]))

    _obfuscate(buf, derive_key(seed))
    return SIG1_TAG + base64.b64encode(bytes(buf)).decode("ascii")


def _blob_bytes(blob):
    if not isinstance(blob, str) or not blob.startswith(SIG1_TAG):
        raise FormatError(f"blob must start with {SIG1_TAG}")
    try:
        return bytearray(base64.b64decode(blob[len(SIG1_TAG):], validate=True))
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"invalid base64 in {SIG1_TAG} blob: {exc}") from exc


def _open_frame(blob):
    """Return (seed, plaintext buffer, stored crc, calculated crc)."""
    buf = _blob_bytes(blob)
    if len(buf) < MIN_FRAME_SIZE:
        raise DecodeError(f"{SIG1_TAG} payload too short ({len(buf)} bytes)")
    seed = struct.unpack_from("<I", buf, 0)[0]
    _deobfuscate(buf, derive_key(seed))
    stored = struct.unpack_from("<H", buf, len(buf) - CRC_SIZE)[0]
    calculated = crc16(buf[SEED_SIZE : len(buf) - CRC_SIZE])
    return seed, buf, stored, calculated


def _checked_frame(blob):
    seed, buf, stored, calculated = _open_frame(blob)
    if stored != calculated:
        raise IntegrityError(
            f"{SIG1_TAG} CRC mismatch (stored 0x{stored:04X}, calculated 0x{calculated:04X})"
        )
    count = struct.unpack_from("<H", buf, SEED_SIZE)[0]
    expected = MIN_FRAME_SIZE + count * EDGE_SIZE
    if len(buf) != expected:
        raise DecodeError(f"{SIG1_TAG} frame declares {count} edges but holds {len(buf)} bytes")
    return seed, buf, count


def _is_empty(blob):
    return blob == "" or blob == SIG1_TAG


def decode_edge_count(blob):
    """Validate the CRC and return the edge count without building edges."""
    if _is_empty(blob):
        return 0
    _, _, count = _checked_frame(blob)
    return count


def decode_signal_blob(blob):
    if _is_empty(blob):
        return []
    _, buf, count = _checked_frame(blob)
    start = SEED_SIZE + COUNT_SIZE
    return [
        Edge(angle, level)
        for angle, level in struct.iter_unpack("<HH", bytes(buf[start : start + count * EDGE_SIZE]))
    ]


def inspect_signal_blob(blob):
    """Debug view of a blob; does not fail on CRC mismatch.

    Returns None for anything that is not a decodable SIG1 frame.
    """
    if not blob or _is_empty(blob):
        return None
    try:
        raw = bytes(_blob_bytes(blob))
        seed, buf, stored, calculated = _open_frame(blob)
    except (FormatError, DecodeError) as exc:
        logger.debug("cannot inspect blob: %s", exc)
        return None

    logger.debug("seed 0x%08X key %s", seed, derive_key(seed).hex(" ").upper())
    count = struct.unpack_from("<H", buf, SEED_SIZE)[0]
    edges = []
    offset = SEED_SIZE + COUNT_SIZE
    for _ in range(count):
        if offset + EDGE_SIZE > len(buf) - CRC_SIZE:
            break
        angle, level = struct.unpack_from("<HH", buf, offset)
        edges.append(Edge(angle, level))
        offset += EDGE_SIZE

    return BlobInfo(
        seed=seed,
        edge_count=count,
        stored_crc=stored,
        calculated_crc=calculated,
        edges=edges,
        raw_bytes=raw,
    )
