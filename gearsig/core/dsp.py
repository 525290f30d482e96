"""Angular waveform sampling helpers."""

from dataclasses import dataclass

import numpy as np

from gearsig.constants import CYCLE_DEGREES
from gearsig.core.models import SignalPoint


MISSING_TOOTH_GAP_FACTOR = 1.5


@dataclass(frozen=True)
class Transition:
    angle: float
    rising: bool
    gap: float
    amplitude: float


def sample_angles(resolution):
    step = CYCLE_DEGREES / resolution
    return np.arange(resolution + 1) * step


def coverage_mask(wheel, angles):
    """Boolean mask of cycle angles that fall on an enabled tooth."""
    if wheel.is_crank:
        normalized = np.mod(angles, 360.0)
    else:
        normalized = np.mod(angles / 2.0, 360.0)

    covered = np.zeros(angles.shape, dtype=bool)
    for tooth in wheel.enabled_teeth:
        start, end = tooth.start_angle, tooth.end_angle
        if tooth.wraps:
            covered |= (normalized >= start) | (normalized <= end)
        else:
            covered |= (normalized >= start) & (normalized <= end)
    return covered


def generate_signal(wheel, resolution=720, amplitude=100.0, offset=0.0):
    """Sample a square wave over one 720 deg cycle.

    Crank wheels repeat every 360 deg of the cycle; cam wheels are stretched
    over the full cycle. The result has ``resolution + 1`` points, the last one
    sitting on 720 deg.
    """
    angles = sample_angles(resolution)
    values = np.where(coverage_mask(wheel, angles), amplitude + offset, offset)
    return [SignalPoint(float(a), float(v)) for a, v in zip(angles, values)]


def generate_ckp_signal(wheel, resolution=1440):
    return generate_signal(wheel, resolution, 15.0, 0.0)


def generate_cmp_signal(wheel, resolution=1440, offset=0.0):
    return generate_signal(wheel, resolution, 15.0, offset)


def detect_transitions(square_signal, base_amplitude=15.0, missing_tooth_amplitude=1.5):
    """Find level changes and tag the ones that open an unusually long gap.

    The gap of a transition is the angular distance to the next transition,
    wrapping through 720 deg. Transitions whose gap exceeds 1.5x the average
    gap border a missing-tooth region and get the amplified amplitude.
    """
    if len(square_signal) < 2:
        return []

    angles = np.array([p.angle for p in square_signal], dtype=float)
    values = np.array([p.value for p in square_signal], dtype=float)
    idx = np.nonzero(values[1:] != values[:-1])[0] + 1
    if idx.size == 0:
        return []

    edge_angles = angles[idx]
    rising = values[idx] > values[idx - 1]
    following = np.roll(edge_angles, -1)
    gaps = np.where(
        following > edge_angles,
        following - edge_angles,
        (CYCLE_DEGREES - edge_angles) + following,
    )

    threshold = gaps.mean() * MISSING_TOOTH_GAP_FACTOR
    boosted = base_amplitude * missing_tooth_amplitude
    return [
        Transition(
            angle=float(a),
            rising=bool(r),
            gap=float(g),
            amplitude=boosted if g > threshold else base_amplitude,
        )
        for a, r, g in zip(edge_angles, rising, gaps)
    ]


def generate_inductive_signal(
    square_signal,
    base_amplitude=15.0,
    missing_tooth_amplitude=1.5,
    transition_width=3.0,
):
    """Pseudo-sine of a variable-reluctance sensor, derived from a square wave.

    Display only. Each transition contributes ``amp * cos(t * pi / 2)`` within
    ``transition_width / 2`` degrees of it, positive for rising and negative
    for falling edges; everything else sits on a zero baseline.
    """
    if len(square_signal) < 2:
        return list(square_signal)

    transitions = detect_transitions(square_signal, base_amplitude, missing_tooth_amplitude)
    angles = np.array([p.angle for p in square_signal], dtype=float)
    if not transitions:
        return [SignalPoint(float(a), 0.0) for a in angles]

    half_width = transition_width / 2
    edge_angles = np.array([t.angle for t in transitions])
    signed_amp = np.array([t.amplitude if t.rising else -t.amplitude for t in transitions])

    distance = angles[:, None] - edge_angles[None, :]
    distance = np.where(distance > 360.0, distance - CYCLE_DEGREES, distance)
    distance = np.where(distance < -360.0, distance + CYCLE_DEGREES, distance)

    within = np.abs(distance) <= half_width
    t = np.divide(distance, half_width, out=np.zeros_like(distance), where=half_width > 0)
    shape = np.cos(t * np.pi / 2)
    values = np.sum(np.where(within, signed_amp[None, :] * shape, 0.0), axis=1)
    return [SignalPoint(float(a), float(v)) for a, v in zip(angles, values)]
