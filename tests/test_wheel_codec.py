import base64
from datetime import date
import unittest

from gearsig.codec.wheel_codec import (
    _mask,
    checksum,
    decode_config,
    decode_wheel,
    encode_config,
    encode_wheel,
    generate_filename,
    validate_exported_config,
)
from gearsig.core.edges import to_tenths
from gearsig.core.errors import DecodeError, FormatError, IntegrityError, VersionError
from gearsig.core.wheel import ckp_custom, ckp_preset, cmp_preset, default_wheels


def masked(raw):
    return base64.b64encode(_mask(bytes(raw))).decode("ascii")


class ChecksumTests(unittest.TestCase):
    def test_crc32_hex(self):
        self.assertEqual(checksum(""), "00000000")
        self.assertEqual(checksum("123456789"), "cbf43926")


class WheelCodecTests(unittest.TestCase):
    def assertSameGeometry(self, decoded, expected):
        self.assertEqual(decoded.total_teeth, expected.total_teeth)
        self.assertEqual(decoded.missing_teeth, expected.missing_teeth)
        self.assertEqual(
            [(to_tenths(t.start_angle), to_tenths(t.end_angle), t.enabled) for t in decoded.teeth],
            [(to_tenths(t.start_angle), to_tenths(t.end_angle), t.enabled) for t in expected.teeth],
        )

    def test_default_config_round_trip(self):
        wheels = default_wheels()
        decoded = decode_config(encode_config(wheels.ckp, wheels.cmp1, wheels.cmp2))
        self.assertEqual(decoded.ckp_mode, "custom")
        self.assertEqual(decoded.ckp.name, "60-2")
        self.assertEqual(len(decoded.ckp.enabled_teeth), 58)
        for got, want in zip(decoded.wheels(), wheels.wheels()):
            self.assertSameGeometry(got, want)

    def test_zero_missing(self):
        for teeth in range(1, 121):
            with self.subTest(teeth=teeth):
                ckp = ckp_preset(teeth)
                decoded = decode_wheel(encode_wheel(ckp), "ckp")
                self.assertSameGeometry(decoded, ckp)
                self.assertEqual(decoded.name, str(teeth))

    def test_all_missing(self):
        for teeth in range(1, 121):
            with self.subTest(teeth=teeth):
                ckp = ckp_preset(teeth, range(1, teeth + 1))
                decoded = decode_wheel(encode_wheel(ckp), "ckp")
                self.assertSameGeometry(decoded, ckp)
                self.assertEqual(decoded.enabled_teeth, [])
                self.assertEqual(decoded.name, f"{teeth}-{teeth}")

    def test_custom_wheel_round_trip(self):
        ckp = ckp_custom(7, 0.3)
        self.assertSameGeometry(decode_wheel(encode_wheel(ckp), "ckp"), ckp)

    def test_decoded_cam_radii(self):
        decoded = decode_wheel(encode_wheel(cmp_preset("cmp1", 3)), "cmp1")
        self.assertEqual((decoded.inner_radius, decoded.outer_radius), (50.0, 80.0))
        self.assertEqual([t.id for t in decoded.teeth], [1, 2, 3])

    def test_wrong_wheel_version(self):
        with self.assertRaises(VersionError) as ctx:
            decode_wheel(masked([2, 1, 0, 0]), "ckp")
        self.assertEqual(ctx.exception.version, 2)

    def test_partial_tooth_record(self):
        with self.assertRaises(DecodeError):
            decode_wheel(masked([1, 1, 0, 0, 10, 0, 20]), "ckp")

    def test_missing_list_past_end(self):
        with self.assertRaises(DecodeError):
            decode_wheel(masked([1, 4, 3, 0, 1]), "ckp")

    def test_short_header_and_bad_base64(self):
        with self.assertRaises(DecodeError):
            decode_wheel(masked([1, 1]), "ckp")
        with self.assertRaises(DecodeError):
            decode_wheel("***", "ckp")

    def test_too_many_teeth(self):
        with self.assertRaises(FormatError):
            encode_wheel(ckp_preset(256))


class ExportedConfigTests(unittest.TestCase):
    def setUp(self):
        wheels = default_wheels()
        self.config = encode_config(wheels.ckp, wheels.cmp1, wheels.cmp2)

    def test_checksum_covers_joined_blobs(self):
        joined = f"{self.config.ckp}|{self.config.cmp1}|{self.config.cmp2}"
        self.assertEqual(self.config.checksum, checksum(joined))
        self.assertEqual(self.config.version, 1)

    def test_checksum_mismatch(self):
        data = self.config.to_dict()
        data["checksum"] = "00000000"
        with self.assertRaises(IntegrityError):
            decode_config(data)

    def test_unsupported_version(self):
        data = self.config.to_dict()
        data["version"] = 2
        with self.assertRaises(VersionError):
            decode_config(data)

    def test_dict_shape_is_validated(self):
        self.assertTrue(validate_exported_config(self.config.to_dict()))
        self.assertFalse(validate_exported_config({"version": True, "CKP": "", "CMP1": "", "CMP2": "", "checksum": ""}))
        self.assertFalse(validate_exported_config([]))
        with self.assertRaises(FormatError):
            decode_config({"version": 1})

    def test_filename(self):
        ckp = default_wheels().ckp
        self.assertEqual(
            generate_filename(ckp, date(2024, 1, 2)),
            "signal_config_60-2_2024-01-02.json",
        )
        self.assertEqual(
            generate_filename(ckp_preset(12, name="My wheel"), date(2024, 1, 2)),
            "signal_config_My_wheel_2024-01-02.json",
        )


if __name__ == "__main__":
    unittest.main()
