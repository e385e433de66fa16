# wro/pathing.py
"""
Stateless route calculator.

Given an initial pose and an ordered list of waypoints, a virtual robot is
replayed from scratch on every call to produce TURN/MOVE instructions, the
path segments to draw and the pose reached at every waypoint. Nothing is
cached between calls, so deleting or reordering a waypoint simply yields a
new route that connects its neighbours.
"""

from __future__ import annotations

import math
from typing import Dict, List

from .config import (
    DISTANCE_EPS_PX, TURN_THRESHOLD_DEG, ROUND_DIGITS,
    DEFAULT_SECTION_COLOR, DEFAULT_REFERENCE,
)
from .geom import normalize_angle, shortest_turn_angle, rad_to_deg, round_half_up


def _target_heading(dx: float, dy: float, reverse: bool) -> float:
    """Heading the robot must face to travel along (dx, dy)."""
    heading_to_target = math.atan2(dy, dx)
    if reverse:
        # backing in: the robot faces away from the direction of travel
        return normalize_angle(heading_to_target + math.pi)
    return normalize_angle(heading_to_target)


def _seed_pose(initial_pose: Dict) -> Dict:
    return {
        "x": initial_pose["x"],
        "y": initial_pose["y"],
        "theta": normalize_angle(initial_pose.get("theta", 0.0)),
    }


def flatten_sections_to_waypoints(sections: List[Dict]) -> List[Dict]:
    """
    Flatten sections into the single ordered waypoint list the calculator runs.

    Sections are visited in order, points in order within each section. Every
    waypoint is stamped with its section id and colour. Sections without a
    points list are skipped. Input sections are left untouched.

    Example:
        [{"id": "sec_1", "color": "#0000FF", "points": [{"id": "p1", "x": 100, "y": 100}]}]
        -> [{"id": "p1", "x": 100, "y": 100, "reverse": False, "reference": "center",
             "section_id": "sec_1", "section_color": "#0000FF"}]
    """
    waypoints = []
    for section in sections:
        points = section.get("points")
        if not isinstance(points, list):
            continue
        for point in points:
            waypoints.append({
                "id": point.get("id"),
                "x": point["x"],
                "y": point["y"],
                "reverse": bool(point.get("reverse", False)),
                "reference": point.get("reference") or DEFAULT_REFERENCE,
                "section_id": section.get("id"),
                "section_color": section.get("color") or DEFAULT_SECTION_COLOR,
            })
    return waypoints


def calculate_route_instructions(initial_pose: Dict, waypoints: List[Dict],
                                 pixels_per_unit: float = 1) -> Dict[str, List[Dict]]:
    """
    Run the virtual robot through the waypoints.

    For each waypoint: turn (shortest way) to face it, or to face away from it
    when the waypoint is flagged reverse, then drive straight to it.

    Args:
        initial_pose: {"x", "y", "theta"} in canvas pixels / radians
        waypoints: ordered waypoints, see flatten_sections_to_waypoints
        pixels_per_unit: canvas pixels per physical unit (cm by default)

    Returns:
        {"instructions": [...], "path_segments": [...], "poses": [...]}
        with len(poses) == len(waypoints) + 1.

    Turns of 0.1 deg or less are not emitted, but the heading still advances to
    the exact target so later turns do not pick up rounding drift. A waypoint on
    top of the robot (within 1e-6 px) emits nothing and only records a pose.
    """
    if pixels_per_unit is None:
        pixels_per_unit = 1
    instructions = []
    path_segments = []
    robot = _seed_pose(initial_pose)
    poses = [dict(robot)]

    for point in waypoints:
        dx = point["x"] - robot["x"]
        dy = point["y"] - robot["y"]
        distance_px = math.hypot(dx, dy)

        if distance_px < DISTANCE_EPS_PX:
            # already there: snap, keep heading
            robot["x"] = point["x"]
            robot["y"] = point["y"]
            poses.append(dict(robot))
            continue

        is_reverse = bool(point.get("reverse", False))
        section_id = point.get("section_id") or None
        target_heading = _target_heading(dx, dy, is_reverse)

        turn_deg = rad_to_deg(shortest_turn_angle(robot["theta"], target_heading))
        if abs(turn_deg) > TURN_THRESHOLD_DEG:
            value = round_half_up(turn_deg, ROUND_DIGITS)
            if value <= -180.0:
                # rounding can land on -180, which is outside (-180, 180]
                value = 180.0
            instructions.append({
                "type": "TURN",
                "value": value,
                "section_id": section_id,
                "waypoint_id": point.get("id"),
                "direction": "right" if value >= 0 else "left",  # clockwise on canvas
            })
        robot["theta"] = target_heading

        instructions.append({
            "type": "MOVE",
            "value": round_half_up(distance_px / pixels_per_unit, ROUND_DIGITS),
            "section_id": section_id,
            "waypoint_id": point.get("id"),
            "direction": "reverse" if is_reverse else "forward",
        })

        # Segment colour comes from the target waypoint's section
        path_segments.append({
            "x1": robot["x"],
            "y1": robot["y"],
            "x2": point["x"],
            "y2": point["y"],
            "color": point.get("section_color") or DEFAULT_SECTION_COLOR,
            "section_id": section_id,
            "waypoint_id": point.get("id"),
            "is_reverse": is_reverse,
        })

        robot["x"] = point["x"]
        robot["y"] = point["y"]
        poses.append(dict(robot))

    return {
        "instructions": instructions,
        "path_segments": path_segments,
        "poses": poses,
    }


def calculate_final_pose(initial_pose: Dict, waypoints: List[Dict]) -> Dict:
    """Pose after the last waypoint, without building instructions."""
    robot = _seed_pose(initial_pose)
    for point in waypoints:
        dx = point["x"] - robot["x"]
        dy = point["y"] - robot["y"]
        if math.hypot(dx, dy) >= DISTANCE_EPS_PX:
            robot["theta"] = _target_heading(dx, dy, bool(point.get("reverse", False)))
        robot["x"] = point["x"]
        robot["y"] = point["y"]
    return robot


def generate_playback_actions(initial_pose: Dict, waypoints: List[Dict],
                              pixels_per_unit: float = 1) -> List[Dict]:
    """
    Convert the route into rotate/move actions for the animation loop.

    Reverse moves carry a negative distance as well as is_reverse=True.
    """
    route = calculate_route_instructions(initial_pose, waypoints, pixels_per_unit)
    actions = []
    for instr in route["instructions"]:
        if instr["type"] == "TURN":
            actions.append({
                "type": "rotate",
                "angle": instr["value"],
                "section_id": instr["section_id"],
                "waypoint_id": instr["waypoint_id"],
            })
        elif instr["type"] == "MOVE":
            is_reverse = instr["direction"] == "reverse"
            actions.append({
                "type": "move",
                "distance": -instr["value"] if is_reverse else instr["value"],
                "section_id": instr["section_id"],
                "waypoint_id": instr["waypoint_id"],
                "is_reverse": is_reverse,
            })
    return actions


def calculate_route_from_sections(initial_pose: Dict, sections: List[Dict],
                                  pixels_per_unit: float = 1) -> Dict[str, List[Dict]]:
    return calculate_route_instructions(initial_pose, flatten_sections_to_waypoints(sections), pixels_per_unit)


def generate_playback_from_sections(initial_pose: Dict, sections: List[Dict],
                                    pixels_per_unit: float = 1) -> List[Dict]:
    return generate_playback_actions(initial_pose, flatten_sections_to_waypoints(sections), pixels_per_unit)
