import contextlib
import io
import json
import os
from pathlib import Path
import tempfile
import unittest
from unittest import mock

from gearsig.cli import build_parser, main
from gearsig.constants import ExitCode


def run_cli(*argv):
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        code = main(list(argv))
    return code, out.getvalue()


class CliParserTests(unittest.TestCase):
    def test_subcommands_parse(self):
        parser = build_parser()
        args = parser.parse_args(["preset", "ckp", "--teeth", "36", "--missing", "35", "36"])
        self.assertEqual((args.command, args.wheel, args.teeth, args.missing), ("preset", "ckp", 36, [35, 36]))
        args = parser.parse_args(["tooth", "update", "cmp1", "--id", "2", "--start", "10", "--end", "30"])
        self.assertEqual((args.tooth_id, args.start, args.end), (2, 10.0, 30.0))

    def test_no_command_prints_help(self):
        code, out = run_cli()
        self.assertEqual(code, ExitCode.USAGE)
        self.assertIn("usage:", out)


class CliFlowTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.home = Path(self._tmp.name)
        self._env = mock.patch.dict(os.environ, {"HOME": self._tmp.name})
        self._env.start()

    def tearDown(self):
        self._env.stop()
        self._tmp.cleanup()

    def test_preset_then_show(self):
        code, _ = run_cli("preset", "ckp", "--teeth", "36", "--missing", "36")
        self.assertEqual(code, ExitCode.OK)
        code, out = run_cli("show", "--json")
        self.assertEqual(code, ExitCode.OK)
        payload = json.loads(out)
        self.assertEqual(payload["wheels"]["ckp"]["name"], "36-1")
        self.assertEqual(payload["wheels"]["ckp"]["cycle_edges"], 140)

    def test_bad_arguments(self):
        self.assertEqual(run_cli("preset", "crank", "--teeth", "4")[0], ExitCode.USAGE)
        self.assertEqual(run_cli("preset", "ckp", "--teeth", "4", "--missing", "5")[0], ExitCode.USAGE)
        self.assertEqual(run_cli("tooth", "toggle", "ckp")[0], ExitCode.USAGE)
        self.assertEqual(run_cli("inspect")[0], ExitCode.USAGE)

    def test_tooth_counts_over_export_limit(self):
        code, out = run_cli("custom", "--teeth", "300")
        self.assertEqual(code, ExitCode.USAGE)
        self.assertIn("error: --teeth must be between 1 and 255", out)
        code, out = run_cli("preset", "ckp", "--teeth", "256")
        self.assertEqual(code, ExitCode.USAGE)
        self.assertIn("error:", out)
        code, out = run_cli("preset", "cmp1", "--segments", "300")
        self.assertEqual(code, ExitCode.USAGE)
        self.assertIn("error: --segments must be between 1 and 255", out)
        self.assertEqual(run_cli("custom", "--teeth", "0")[0], ExitCode.USAGE)
        self.assertEqual(run_cli("preset", "cmp2", "--segments", "255")[0], ExitCode.OK)

    def test_full_wheel_refuses_another_tooth(self):
        self.assertEqual(run_cli("preset", "ckp", "--teeth", "255")[0], ExitCode.OK)
        code, out = run_cli("tooth", "add", "ckp")
        self.assertEqual(code, ExitCode.USAGE)
        self.assertIn("error:", out)

    def test_removed_tooth_keeps_other_ids(self):
        run_cli("preset", "ckp", "--teeth", "12")
        self.assertEqual(run_cli("tooth", "remove", "ckp", "--id", "3")[0], ExitCode.OK)
        self.assertEqual(run_cli("tooth", "toggle", "ckp", "--id", "3")[0], ExitCode.USAGE)
        self.assertEqual(run_cli("tooth", "toggle", "ckp", "--id", "12")[0], ExitCode.OK)

    def test_tooth_edit_marks_custom(self):
        self.assertEqual(run_cli("tooth", "add", "ckp")[0], ExitCode.OK)
        payload = json.loads(run_cli("show", "--json")[1])
        self.assertEqual(payload["ckp_mode"], "custom")
        self.assertEqual(payload["wheels"]["ckp"]["total_teeth"], 61)

    def test_export_and_import(self):
        run_cli("custom", "--teeth", "12", "--gap-ratio", "0.25")
        code, _ = run_cli("export", "--outdir", str(self.home / "out"))
        self.assertEqual(code, ExitCode.OK)
        exported = list((self.home / "out").glob("signal_config_Custom_*.json"))
        self.assertEqual(len(exported), 1)

        run_cli("preset", "ckp", "--teeth", "60", "--missing", "59", "60")
        code, out = run_cli("import", str(exported[0]))
        self.assertEqual(code, ExitCode.OK)
        self.assertIn("12 teeth", out)

    def test_import_rejects_tampered_file(self):
        code, out = run_cli("export", "--stdout")
        data = json.loads(out)
        data["checksum"] = "00000000"
        path = self.home / "tampered.json"
        path.write_text(json.dumps(data))
        code, out = run_cli("import", str(path))
        self.assertEqual(code, ExitCode.RUNTIME_ERROR)
        self.assertIn("error:", out)

    def test_device_prepare_and_inspect(self):
        device_path = self.home / "device.json"
        self.assertEqual(run_cli("device", "--name", "Bench", "--out", str(device_path))[0], ExitCode.OK)

        payload_path = self.home / "payload.json"
        code, out = run_cli("prepare", str(device_path), "--out", str(payload_path))
        self.assertEqual(code, ExitCode.OK)
        self.assertIn("CKP=232", out)
        self.assertEqual(json.loads(payload_path.read_text())["name"], "Bench")

        code, out = run_cli("inspect", "--file", str(device_path), "--json")
        self.assertEqual(code, ExitCode.OK)
        report = json.loads(out)
        self.assertEqual(report["CKP"]["edge_count"], 232)

    def test_prepare_rejects_protected_export(self):
        path = self.home / "export.json"
        path.write_text(run_cli("export", "--stdout")[1])
        code, out = run_cli("prepare", str(path))
        self.assertEqual(code, ExitCode.RUNTIME_ERROR)
        self.assertIn("SIG1", out)

    def test_scope_writes_csv(self):
        outpath = self.home / "scope.csv"
        code, _ = run_cli("scope", "--out", str(outpath), "--resolution", "72", "--inductive")
        self.assertEqual(code, ExitCode.OK)
        lines = outpath.read_text().splitlines()
        self.assertEqual(lines[0], "angle_deg,ckp,cmp1,cmp2,ckp_inductive")
        self.assertEqual(len(lines), 74)

    def test_library_flow(self):
        self.assertEqual(run_cli("library", "save", "--name", "Bench 60-2")[0], ExitCode.OK)
        code, out = run_cli("library", "list", "--json")
        self.assertEqual(json.loads(out)[0]["filename"], "bench_60-2.json")
        self.assertEqual(run_cli("library", "show", "bench_60-2.json")[0], ExitCode.OK)
        self.assertEqual(run_cli("library", "delete", "bench_60-2.json", "--yes")[0], ExitCode.OK)
        self.assertEqual(run_cli("library", "show", "bench_60-2.json")[0], ExitCode.RUNTIME_ERROR)


if __name__ == "__main__":
    unittest.main()
