"""Single-writer owner of the three wheels being designed.

The workspace is the only thing that replaces wheel geometry. Derived data
(edges, sampled signals, blobs) is recomputed from a snapshot on request.
"""

from gearsig.codec.frame_codec import encode_signal_blob
from gearsig.codec.wheel_codec import decode_config, encode_config
from gearsig.constants import WHEEL_IDS
from gearsig.core import wheel as wheel_ops
from gearsig.core.dsp import generate_ckp_signal, generate_cmp_signal, generate_inductive_signal
from gearsig.core.edges import wheel_edges
from gearsig.core.models import DeviceSignalConfig, WheelSet


class SignalWorkspace:
    def __init__(self, wheels=None):
        self._wheels = wheels or wheel_ops.default_wheels()

    @property
    def ckp_mode(self):
        return self._wheels.ckp_mode

    def wheel(self, wheel_id):
        if wheel_id not in WHEEL_IDS:
            raise KeyError(f"unknown wheel: {wheel_id}")
        return getattr(self._wheels, wheel_id)

    def snapshot(self):
        return WheelSet(
            ckp=self._wheels.ckp,
            cmp1=self._wheels.cmp1,
            cmp2=self._wheels.cmp2,
            ckp_mode=self._wheels.ckp_mode,
        )

    def _replace(self, new_wheel, ckp_mode=None):
        setattr(self._wheels, new_wheel.id, new_wheel)
        if ckp_mode is not None:
            self._wheels.ckp_mode = ckp_mode
        return new_wheel

    # ── presets ───────────────────────────────────────────────────────────

    def set_ckp_preset(self, total_teeth, missing_teeth=(), name=None):
        return self._replace(wheel_ops.ckp_preset(total_teeth, missing_teeth, name), "preset")

    def set_ckp_custom(self, total_teeth, gap_ratio):
        return self._replace(wheel_ops.ckp_custom(total_teeth, gap_ratio), "custom")

    def set_cmp_preset(self, wheel_id, segments):
        if wheel_id == "ckp":
            raise KeyError("cmp presets apply to cmp1/cmp2 only")
        self.wheel(wheel_id)
        return self._replace(wheel_ops.cmp_preset(wheel_id, segments))

    # ── tooth edits ───────────────────────────────────────────────────────

    def _edit(self, wheel_id, new_wheel, geometry=True):
        mode = "custom" if wheel_id == "ckp" and geometry else None
        return self._replace(new_wheel, mode)

    def toggle_tooth(self, wheel_id, tooth_id):
        return self._edit(wheel_id, wheel_ops.toggle_tooth(self.wheel(wheel_id), tooth_id), geometry=False)

    def update_tooth(self, wheel_id, tooth_id, start_angle, end_angle):
        return self._edit(
            wheel_id, wheel_ops.update_tooth(self.wheel(wheel_id), tooth_id, start_angle, end_angle)
        )

    def add_tooth(self, wheel_id):
        return self._edit(wheel_id, wheel_ops.add_tooth(self.wheel(wheel_id)))

    def remove_tooth(self, wheel_id, tooth_id):
        return self._edit(wheel_id, wheel_ops.remove_tooth(self.wheel(wheel_id), tooth_id))

    # ── derived data ──────────────────────────────────────────────────────

    def edges(self):
        return {wid: wheel_edges(self.wheel(wid)) for wid in WHEEL_IDS}

    def signals(self, resolution=1440, inductive=False):
        ckp = generate_ckp_signal(self._wheels.ckp, resolution)
        result = {
            "ckp": ckp,
            "cmp1": generate_cmp_signal(self._wheels.cmp1, resolution),
            "cmp2": generate_cmp_signal(self._wheels.cmp2, resolution),
        }
        if inductive:
            result["ckp_inductive"] = generate_inductive_signal(ckp)
        return result

    def device_config(self, name=None):
        edges = self.edges()
        cmp1 = encode_signal_blob(edges["cmp1"])
        cmp2 = encode_signal_blob(edges["cmp2"])
        return DeviceSignalConfig(
            name=name or f"{self._wheels.ckp.name} Signal",
            ckp=encode_signal_blob(edges["ckp"]),
            cmp1=cmp1 or None,
            cmp2=cmp2 or None,
        )

    # ── protected export ──────────────────────────────────────────────────

    def export_config(self):
        return encode_config(self._wheels.ckp, self._wheels.cmp1, self._wheels.cmp2)

    def import_config(self, config):
        self._wheels = decode_config(config)
        return self.snapshot()
