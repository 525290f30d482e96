import os
import tempfile
import unittest
from unittest import mock

from gearsig.core.errors import FormatError, SignalNotFound
from gearsig.core.models import DeviceSignalConfig
from gearsig.core.workspace import SignalWorkspace
from gearsig.library.manager import (
    delete_signal,
    list_signals,
    load_signal,
    safe_filename,
    save_signal,
    signal_path,
)
from gearsig.state.paths import signals_dir


class SignalLibraryTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self._env = mock.patch.dict(os.environ, {"HOME": self._tmp.name})
        self._env.start()
        self.device = SignalWorkspace().device_config()

    def tearDown(self):
        self._env.stop()
        self._tmp.cleanup()

    def test_safe_filename(self):
        self.assertEqual(safe_filename("My Signal 60-2"), "my_signal_60-2")

    def test_save_load_delete(self):
        filename = save_signal(DeviceSignalConfig("Honda K20", self.device.ckp, self.device.cmp1))
        self.assertEqual(filename, "honda_k20.json")

        loaded = load_signal(filename)
        self.assertEqual(loaded.name, "Honda K20")
        self.assertEqual(loaded.ckp, self.device.ckp)
        self.assertIsNone(loaded.cmp2)
        self.assertEqual(load_signal("Honda K20").name, "Honda K20")

        delete_signal(filename)
        self.assertFalse((signals_dir() / filename).exists())
        with self.assertRaises(SignalNotFound):
            load_signal(filename)

    def test_list_is_sorted_case_insensitively(self):
        for name in ("zeta", "Alpha", "beta"):
            save_signal(DeviceSignalConfig(name, self.device.ckp))
        (signals_dir() / "broken.json").write_text("{")

        signals = list_signals()
        self.assertEqual([s.name for s in signals], ["Alpha", "beta", "zeta"])
        self.assertTrue(signals[0].has_ckp)
        self.assertFalse(signals[0].has_cmp1)

    def test_empty_library(self):
        self.assertEqual(list_signals(), [])

    def test_validation(self):
        with self.assertRaises(FormatError):
            save_signal(DeviceSignalConfig("", self.device.ckp))
        with self.assertRaises(FormatError):
            save_signal(DeviceSignalConfig("bad", "not-a-blob"))
        with self.assertRaises(FormatError):
            save_signal(DeviceSignalConfig("bad", self.device.ckp, cmp1="xyz"))

    def test_paths_stay_inside_library(self):
        with self.assertRaises(SignalNotFound):
            signal_path("../state.json")
        with self.assertRaises(SignalNotFound):
            delete_signal("missing")


if __name__ == "__main__":
    unittest.main()
