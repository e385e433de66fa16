# wro/collision.py
"""
Obstacle checks for planned routes.

Obstacles are rotated rectangles {x, y, w, h, rotation}: centre, size and
rotation in degrees, all in canvas pixels. The robot body along a segment is
approximated by three lines (centre and both edges).
"""
from __future__ import annotations

import math

EPSILON = 1e-6


def _inflate(obs, padding):
    if padding > 0:
        return {**obs, "w": obs["w"] + padding * 2, "h": obs["h"] + padding * 2}
    return obs

def _to_local(point, obs):
    """Point in the obstacle's unrotated frame, origin at its centre."""
    rad = -(obs.get("rotation") or 0) * (math.pi / 180.0)
    dx = point["x"] - obs["x"]
    dy = point["y"] - obs["y"]
    return (dx * math.cos(rad) - dy * math.sin(rad),
            dx * math.sin(rad) + dy * math.cos(rad))

def get_corners(obs):
    """The 4 corners of the rotated rectangle in world space."""
    rad = (obs.get("rotation") or 0) * (math.pi / 180.0)
    c, s = math.cos(rad), math.sin(rad)
    hw, hh = obs["w"] / 2.0, obs["h"] / 2.0
    local = [(-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)]
    return [{"x": obs["x"] + (lx * c - ly * s), "y": obs["y"] + (lx * s + ly * c)} for lx, ly in local]

def is_point_inside(point, obs):
    """Check if a point is inside a rotated rectangle."""
    lx, ly = _to_local(point, obs)
    hw, hh = obs["w"] / 2.0, obs["h"] / 2.0
    return -hw <= lx <= hw and -hh <= ly <= hh

def _lines_intersect(p1, p2, p3, p4):
    """Segment p1-p2 against p3-p4, determinant method."""
    x1, y1, x2, y2 = p1["x"], p1["y"], p2["x"], p2["y"]
    x3, y3, x4, y4 = p3["x"], p3["y"], p4["x"], p4["y"]
    den = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(den) < EPSILON:
        return False
    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / den
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / den
    return -EPSILON <= t <= 1 + EPSILON and -EPSILON <= u <= 1 + EPSILON

def _segment_hits_edges(p1, p2, obs):
    corners = get_corners(obs)
    for i in range(4):
        if _lines_intersect(p1, p2, corners[i], corners[(i + 1) % 4]):
            return True
    return False

def check_intersection(p1, p2, obstacles, padding=0.0):
    """True if segment p1-p2 touches any (padded) obstacle."""
    if not obstacles:
        return False
    for obs in obstacles:
        eff = _inflate(obs, padding)
        if is_point_inside(p1, eff) or is_point_inside(p2, eff):
            return True
        if _segment_hits_edges(p1, p2, eff):
            return True
    return False

def check_path_collision(p1, p2, width, obstacles, padding=0.0):
    """Robot body of the given width driving from p1 to p2 against obstacles."""
    if check_intersection(p1, p2, obstacles, padding):
        return True

    dx = p2["x"] - p1["x"]
    dy = p2["y"] - p1["y"]
    length = math.hypot(dx, dy)
    if length < EPSILON:
        return False

    nx, ny = -dy / length, dx / length
    off_x, off_y = nx * width / 2.0, ny * width / 2.0
    left = ({"x": p1["x"] + off_x, "y": p1["y"] + off_y}, {"x": p2["x"] + off_x, "y": p2["y"] + off_y})
    right = ({"x": p1["x"] - off_x, "y": p1["y"] - off_y}, {"x": p2["x"] - off_x, "y": p2["y"] - off_y})
    return (check_intersection(left[0], left[1], obstacles, padding)
            or check_intersection(right[0], right[1], obstacles, padding))

def dist_point_to_rect(point, obs):
    """Distance from point to a rotated rectangle, 0 when inside."""
    lx, ly = _to_local(point, obs)
    ddx = max(abs(lx) - obs["w"] / 2.0, 0.0)
    ddy = max(abs(ly) - obs["h"] / 2.0, 0.0)
    if ddx == 0.0 and ddy == 0.0:
        return 0.0
    return math.hypot(ddx, ddy)

def check_rotation_collision(point, obstacles, robot, padding=0.0):
    """True if turning in place at point sweeps into an obstacle."""
    if not obstacles:
        return False
    radius = math.hypot((robot.get("width") or 0) / 2.0, (robot.get("length") or 0) / 2.0)
    for obs in obstacles:
        if dist_point_to_rect(point, _inflate(obs, padding)) < radius:
            return True
    return False

def find_segment_collisions(path_segments, width, obstacles, padding=0.0):
    """Path segments whose robot body hits an obstacle."""
    hits = []
    for seg in path_segments:
        p1 = {"x": seg["x1"], "y": seg["y1"]}
        p2 = {"x": seg["x2"], "y": seg["y2"]}
        if check_path_collision(p1, p2, width, obstacles, padding):
            hits.append(seg)
    return hits
