from __future__ import annotations
import numpy as np

def planar_distance(ax: float, az: float, bx: float, bz: float) -> float:
    """Distance between two points on the XZ plane."""
    return float(np.hypot(ax - bx, az - bz))

def exp_smooth(current: float, target: float, k: float, dt: float) -> float:
    alpha = 1.0 - float(np.exp(-k * dt))
    return current + (target - current) * alpha

def lerp_color(a: tuple[int, int, int], b: tuple[int, int, int], t: float) -> tuple[int, int, int]:
    t = float(np.clip(t, 0.0, 1.0))
    return (
        int(a[0] + (b[0] - a[0]) * t),
        int(a[1] + (b[1] - a[1]) * t),
        int(a[2] + (b[2] - a[2]) * t),
    )
