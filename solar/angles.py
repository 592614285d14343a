"""Degree/radian conversions shared by the solar model."""

from __future__ import annotations

import numpy as np

__all__ = ["deg_to_rad", "rad_to_deg"]


def deg_to_rad(angle_deg):
    """Convert *angle_deg* (scalar or array) from degrees to radians."""

    return np.pi * angle_deg / 180.0


def rad_to_deg(angle_rad):
    """Convert *angle_rad* (scalar or array) from radians to degrees."""

    return 180.0 * angle_rad / np.pi
