# wro/geom.py
"""
Geometry primitives shared by the route calculator and the playback replay.

Frame: canvas pixels, y grows downward. Heading 0 points along +x and
positive angles turn toward +y, so a positive turn reads clockwise on screen.
"""
from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP

from .config import DEG2RAD, RAD2DEG, MAT_MM, DEFAULT_REFERENCE, SNAP_45_BASE_ANGLES

TWO_PI = 2.0 * math.pi


def normalize_angle(angle: float) -> float:
    """Reduce a radian angle into (-pi, pi]. Exactly pi stays pi."""
    a = float(angle)
    if not math.isfinite(a):
        return a
    a = math.fmod(a, TWO_PI)
    if a <= -math.pi:
        a += TWO_PI
    elif a > math.pi:
        a -= TWO_PI
    return a

def shortest_turn_angle(from_theta: float, to_theta: float) -> float:
    """Signed minimal rotation from one heading to another, in (-pi, pi]."""
    return normalize_angle(to_theta - from_theta)

def round_half_up(value: float, digits: int = 2) -> float:
    """Round the exact binary value half away from zero."""
    q = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(q, rounding=ROUND_HALF_UP))

def rad_to_deg(rad: float) -> float:
    return rad * RAD2DEG

def deg_to_rad(deg: float) -> float:
    return deg * DEG2RAD


def _canvas_scale(canvas_size):
    """Per-axis mm-per-pixel for the given canvas, or None if unusable."""
    if not canvas_size:
        return None
    w = canvas_size.get("width") or 0
    h = canvas_size.get("height") or 0
    if w <= 0 or h <= 0:
        return None
    return MAT_MM["w"] / w, MAT_MM["h"] / h

def px_to_mm(point, canvas_size):
    """Convert a canvas pixel point to mat millimetres."""
    scale = _canvas_scale(canvas_size)
    if scale is None:
        return {"x": 0, "y": 0}
    sx, sy = scale
    return {"x": point["x"] * sx, "y": point["y"] * sy}

def mm_to_px(point, canvas_size):
    """Convert a mat millimetre point to canvas pixels."""
    scale = _canvas_scale(canvas_size)
    if scale is None:
        return {"x": 0, "y": 0}
    sx, sy = scale
    return {"x": point["x"] / sx, "y": point["y"] / sy}

def pixels_per_unit(canvas_width: float, unit: str = "cm", zoom: float = 1.0) -> float:
    """Pixels per cm (or mm) for a canvas scaled to the mat width."""
    if not canvas_width or canvas_width <= 0:
        return 0.0
    ppm = canvas_width / MAT_MM["w"]
    ppu = ppm if unit == "mm" else ppm * 10
    return ppu * zoom

def unit_to_px(value: float, canvas_width: float, unit: str = "cm", zoom: float = 1.0) -> float:
    return value * pixels_per_unit(canvas_width, unit, zoom)

def px_to_unit(px: float, canvas_width: float, unit: str = "cm", zoom: float = 1.0) -> float:
    ppu = pixels_per_unit(canvas_width, unit, zoom)
    if not ppu:
        return 0.0
    return px / ppu


def get_reference_point(pose, reference, half_robot_length_px):
    """Point of the robot footprint a waypoint refers to: centre or front tip."""
    if not pose:
        return {"x": 0, "y": 0}
    if reference == "tip":
        return {
            "x": pose["x"] + math.cos(pose["theta"]) * half_robot_length_px,
            "y": pose["y"] + math.sin(pose["theta"]) * half_robot_length_px,
        }
    return {"x": pose["x"], "y": pose["y"]}

def project_point_with_reference(raw_point, anchor_pose, reference=DEFAULT_REFERENCE,
                                 reverse=False, half_robot_length_px=0.0,
                                 snap45=False, base_angles=SNAP_45_BASE_ANGLES):
    """
    Project a cursor point into the robot centre reached from anchor_pose.

    Travel always starts at the anchor centre; the reference only decides
    whether the cursor marks the centre or the tip at the end of the move.
    With snap45 the travel direction is locked to the closest base axis.
    """
    ax, ay = anchor_pose["x"], anchor_pose["y"]
    dx = raw_point["x"] - ax
    dy = raw_point["y"] - ay
    distance_ref = math.hypot(dx, dy)

    if distance_ref < 1e-6:
        theta_idle = normalize_angle(anchor_pose["theta"] + math.pi) if reverse else anchor_pose["theta"]
        return {
            "center": {"x": ax, "y": ay},
            "theta": theta_idle,
            "distance_center": 0.0,
            "reference_distance": 0.0,
        }

    travel_theta = math.atan2(dy, dx)
    if snap45:
        best = None
        for base in base_angles:
            ux, uy = math.cos(base), math.sin(base)
            projection = dx * ux + dy * uy
            err = math.hypot(ax + ux * projection - raw_point["x"],
                             ay + uy * projection - raw_point["y"])
            if best is None or err < best[2]:
                theta_c = base if projection >= 0 else normalize_angle(base + math.pi)
                best = (theta_c, abs(projection), err)
        travel_theta, distance_ref = best[0], best[1]

    facing_theta = normalize_angle(travel_theta + math.pi) if reverse else normalize_angle(travel_theta)

    target_x = ax + math.cos(travel_theta) * distance_ref
    target_y = ay + math.sin(travel_theta) * distance_ref
    if reference == "tip":
        # cursor marks the tip; pull the centre back along the facing heading
        cx = target_x - math.cos(facing_theta) * half_robot_length_px
        cy = target_y - math.sin(facing_theta) * half_robot_length_px
    else:
        cx, cy = target_x, target_y

    return {
        "center": {"x": cx, "y": cy},
        "theta": facing_theta,
        "distance_center": math.hypot(cx - ax, cy - ay),
        "reference_distance": distance_ref,
    }
