"""Tooth geometry to level-transition edges."""

import math

from gearsig.constants import REVOLUTION_TENTHS
from gearsig.core.models import Edge


def to_tenths(angle):
    # Half-up rounding, matching the firmware-side tooling.
    return int(math.floor(angle * 10 + 0.5))


def teeth_to_edges(teeth):
    """Rising edge at each enabled tooth start, falling edge at its end (0-3599)."""
    edges = []
    for tooth in teeth:
        if not tooth.enabled:
            continue
        edges.append(Edge(to_tenths(tooth.start_angle) % REVOLUTION_TENTHS, 1))
        edges.append(Edge(to_tenths(tooth.end_angle) % REVOLUTION_TENTHS, 0))
    edges.sort(key=lambda e: e.angle_tenths)
    return edges


def crank_cycle_edges(edges_360):
    """Crankshaft turns twice per cycle: repeat the revolution at +360 deg."""
    second = [Edge(e.angle_tenths + REVOLUTION_TENTHS, e.level) for e in edges_360]
    return list(edges_360) + second


def cam_cycle_edges(edges_360):
    """Camshaft turns once per cycle: stretch 0-3599 onto 0-7199."""
    return [Edge(e.angle_tenths * 2, e.level) for e in edges_360]


def wheel_edges(wheel):
    edges_360 = teeth_to_edges(wheel.teeth)
    if wheel.is_crank:
        return crank_cycle_edges(edges_360)
    return cam_cycle_edges(edges_360)
