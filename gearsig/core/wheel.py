"""Wheel construction presets and whole-wheel edits.

Every edit returns a new Wheel; callers replace the wheel they own instead of
mutating a shared one.
"""

from dataclasses import replace

from gearsig.constants import MAX_WHEEL_TEETH
from gearsig.core.models import Tooth, Wheel, WheelSet, normalize_angle


CKP_TOOTH_GAP_RATIO = 0.5
CMP_GAP_RATIO = 0.1
MAX_GAP_RATIO = 0.9
MAX_NEW_TOOTH_WIDTH = 30.0


def _radii(wheel_id):
    return (60.0, 80.0) if wheel_id == "ckp" else (50.0, 80.0)


def generate_teeth(total_teeth, missing_teeth=(), gap_ratio=0.2):
    pitch = 360 / total_teeth
    gap = pitch * min(max(gap_ratio, 0.0), MAX_GAP_RATIO)
    missing = set(missing_teeth)
    teeth = []
    for i in range(1, total_teeth + 1):
        teeth.append(
            Tooth(
                id=i,
                start_angle=(i - 1) * pitch + gap / 2,
                end_angle=i * pitch - gap / 2,
                enabled=i not in missing,
            )
        )
    return teeth


def generate_cmp_teeth(segments):
    """Half-width camshaft segments with a 10% gap."""
    pitch = 360 / segments
    gap = pitch * CMP_GAP_RATIO
    return [
        Tooth(
            id=i + 1,
            start_angle=i * pitch + gap / 2,
            end_angle=(i + 0.5) * pitch - gap / 2,
        )
        for i in range(segments)
    ]


def ckp_preset(total_teeth, missing_teeth=(), name=None):
    missing = sorted(missing_teeth)
    if name is None:
        name = f"{total_teeth}-{len(missing)}" if missing else f"{total_teeth}"
    inner, outer = _radii("ckp")
    return Wheel(
        id="ckp",
        name=name,
        total_teeth=total_teeth,
        missing_teeth=missing,
        teeth=generate_teeth(total_teeth, missing, CKP_TOOTH_GAP_RATIO),
        inner_radius=inner,
        outer_radius=outer,
    )


def ckp_custom(total_teeth, gap_ratio):
    inner, outer = _radii("ckp")
    return Wheel(
        id="ckp",
        name="Custom",
        total_teeth=total_teeth,
        missing_teeth=[],
        teeth=generate_teeth(total_teeth, (), gap_ratio),
        inner_radius=inner,
        outer_radius=outer,
    )


def cmp_preset(wheel_id, segments=4):
    inner, outer = _radii(wheel_id)
    return Wheel(
        id=wheel_id,
        name=f"{segments}",
        total_teeth=segments,
        missing_teeth=[],
        teeth=generate_cmp_teeth(segments),
        inner_radius=inner,
        outer_radius=outer,
    )


def default_wheels():
    return WheelSet(
        ckp=ckp_preset(60, [59, 60], "60-2"),
        cmp1=cmp_preset("cmp1", 4),
        cmp2=cmp_preset("cmp2", 4),
    )


def _edited(wheel, teeth):
    changes = {"teeth": teeth, "total_teeth": len(teeth)}
    if wheel.is_crank:
        changes["name"] = "Custom"
    return replace(wheel, **changes)


def _find(wheel, tooth_id):
    for tooth in wheel.teeth:
        if tooth.id == tooth_id:
            return tooth
    raise KeyError(f"no tooth {tooth_id} on {wheel.id}")


def toggle_tooth(wheel, tooth_id):
    target = _find(wheel, tooth_id)
    teeth = [replace(t, enabled=not t.enabled) if t is target else replace(t) for t in wheel.teeth]
    # Toggling keeps the preset name; only geometry edits make a wheel custom.
    return replace(wheel, teeth=teeth)


def update_tooth(wheel, tooth_id, start_angle, end_angle):
    target = _find(wheel, tooth_id)
    teeth = [
        replace(t, start_angle=normalize_angle(start_angle), end_angle=normalize_angle(end_angle))
        if t is target
        else replace(t)
        for t in wheel.teeth
    ]
    return _edited(wheel, teeth)


def largest_gap(teeth):
    """Return (gap_start, gap_size) of the widest uncovered arc."""
    if not teeth:
        return 0.0, 360.0

    ordered = sorted(teeth, key=lambda t: t.start_angle)
    best_start, best_size = 0.0, 0.0
    for i, current in enumerate(ordered):
        following = ordered[(i + 1) % len(ordered)]
        gap_start = current.end_angle
        gap_end = following.start_angle
        if gap_end <= gap_start:
            gap_end += 360
        size = gap_end - gap_start
        if size > best_size:
            best_size = size
            best_start = gap_start % 360
    return best_start, best_size


def add_tooth(wheel):
    if len(wheel.teeth) >= MAX_WHEEL_TEETH:
        raise ValueError(f"{wheel.id} already has {MAX_WHEEL_TEETH} teeth")
    gap_start, gap_size = largest_gap(wheel.teeth)
    width = min(gap_size * 0.5, MAX_NEW_TOOTH_WIDTH)
    start = (gap_start + (gap_size - width) / 2) % 360
    new_id = max((t.id for t in wheel.teeth), default=0) + 1
    tooth = Tooth(id=new_id, start_angle=start, end_angle=(start + width) % 360)
    return _edited(wheel, [replace(t) for t in wheel.teeth] + [tooth])


def remove_tooth(wheel, tooth_id):
    if len(wheel.teeth) <= 1:
        raise ValueError(f"{wheel.id} must keep at least one tooth")
    _find(wheel, tooth_id)
    teeth = [replace(t) for t in wheel.teeth if t.id != tooth_id]
    return _edited(wheel, teeth)
