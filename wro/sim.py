# wro/sim.py
"""
Replay of playback actions.

Actions are the rotate/move list produced by generate_playback_actions:
rotate angles in degrees (positive = clockwise on canvas), move distances in
physical units with a negative sign for reverse travel. unit_to_px and
px_to_unit are the caller's converters between physical units and pixels.
"""
from __future__ import annotations

import math

from .config import DEG2RAD, RAD2DEG, DEFAULT_REFERENCE, ROUND_DIGITS
from .geom import normalize_angle, round_half_up

ACTION_EPS = 1e-3


def get_pose_after_actions(start_pose, actions, unit_to_px):
    """Pose reached after executing actions from start_pose."""
    pose = {"x": start_pose["x"], "y": start_pose["y"], "theta": start_pose["theta"]}
    for act in actions:
        if act["type"] == "rotate":
            pose["theta"] = normalize_angle(pose["theta"] + act["angle"] * DEG2RAD)
        else:
            delta = unit_to_px(act["distance"])
            pose = {
                "x": pose["x"] + math.cos(pose["theta"]) * delta,
                "y": pose["y"] + math.sin(pose["theta"]) * delta,
                "theta": pose["theta"],
            }
    return pose

def build_reverse_playback(actions):
    """Actions that undo `actions`, driving the robot back to where it started."""
    reversed_acts = []
    for act in reversed(actions):
        if act["type"] == "rotate":
            angle = round_half_up(-act["angle"], ROUND_DIGITS)
            if abs(angle) > ACTION_EPS:
                reversed_acts.append({"type": "rotate", "angle": angle})
        else:
            distance = round_half_up(-act["distance"], ROUND_DIGITS)
            if abs(distance) > ACTION_EPS:
                reversed_acts.append({
                    "type": "move",
                    "distance": distance,
                    "reference": act.get("reference") or DEFAULT_REFERENCE,
                })
    return reversed_acts

def points_from_actions(actions, start_pose, unit_to_px):
    """Waypoints visited by replaying actions, one per move."""
    pts = []
    pose = {"x": start_pose["x"], "y": start_pose["y"], "theta": start_pose["theta"]}
    for act in actions:
        if act["type"] == "rotate":
            pose["theta"] = normalize_angle(pose["theta"] + act["angle"] * DEG2RAD)
            continue
        direction = -1 if act["distance"] < 0 else 1
        travel_px = unit_to_px(abs(act["distance"]))
        pose = {
            "x": pose["x"] + math.cos(pose["theta"]) * travel_px * direction,
            "y": pose["y"] + math.sin(pose["theta"]) * travel_px * direction,
            "theta": pose["theta"],
        }
        pts.append({
            "x": pose["x"],
            "y": pose["y"],
            "reverse": act["distance"] < 0,
            "reference": act.get("reference") or DEFAULT_REFERENCE,
            "heading": pose["theta"],
        })
    return pts

def build_actions_from_polyline(points, start_pose, px_to_unit):
    """
    Actions that drive through points starting at start_pose.

    A point may pin its final heading with "heading" (radians); otherwise the
    robot faces the travel direction, flipped when the point is reverse.
    """
    acts = []
    prev = {"x": start_pose["x"], "y": start_pose["y"], "theta": start_pose["theta"]}
    for pt in points:
        dx = pt["x"] - prev["x"]
        dy = pt["y"] - prev["y"]
        dist_px = math.hypot(dx, dy)
        if dist_px < ACTION_EPS:
            prev = {**prev, "x": pt["x"], "y": pt["y"]}
            continue
        reverse = bool(pt.get("reverse", False))
        reference = pt.get("reference") or DEFAULT_REFERENCE
        if isinstance(pt.get("heading"), (int, float)):
            target = normalize_angle(pt["heading"])
        else:
            target = normalize_angle(math.atan2(dy, dx) + (math.pi if reverse else 0.0))

        deg = normalize_angle(target - prev["theta"]) * RAD2DEG
        if abs(deg) > ACTION_EPS:
            acts.append({"type": "rotate", "angle": round_half_up(deg, ROUND_DIGITS)})
        units = px_to_unit(dist_px)
        if units > ACTION_EPS:
            signed = -units if reverse else units
            acts.append({"type": "move", "distance": round_half_up(signed, ROUND_DIGITS), "reference": reference})
        prev = {"x": pt["x"], "y": pt["y"], "theta": target}
    return acts


def compute_pose_up_to_section(sections, initial_pose, section_id, unit_to_px):
    """
    Pose at the start of section_id, replaying the stored actions of every
    section before it. With no section_id all sections are replayed.
    """
    pose = dict(initial_pose)
    for section in sections:
        if section_id and section.get("id") == section_id:
            break
        pose = get_pose_after_actions(pose, section.get("actions") or [], unit_to_px)
    return pose

def get_last_pose_of_section(section, sections, initial_pose, unit_to_px):
    """Pose after the last point of section, following its points rather than its actions."""
    if not section:
        return dict(initial_pose)
    pose = compute_pose_up_to_section(sections, initial_pose, section.get("id"), unit_to_px)
    for pt in section.get("points") or []:
        dx = pt["x"] - pose["x"]
        dy = pt["y"] - pose["y"]
        pinned = pt.get("heading") if isinstance(pt.get("heading"), (int, float)) else None
        theta = pinned if pinned is not None else pose["theta"]
        if pinned is None and math.hypot(dx, dy) >= ACTION_EPS:
            theta = normalize_angle(math.atan2(dy, dx) + (math.pi if pt.get("reverse") else 0.0))
        pose = {"x": pt["x"], "y": pt["y"], "theta": theta}
    return pose

def _recalc_section(section, start_pose, unit_to_px, px_to_unit):
    points = section.get("points") or []
    # stale headings would pin the old geometry
    free = [{k: v for k, v in p.items() if k != "heading"} for p in points]
    actions = build_actions_from_polyline(free, start_pose, px_to_unit)
    end_pose = get_pose_after_actions(start_pose, actions, unit_to_px)
    replayed = points_from_actions(actions, start_pose, unit_to_px)
    merged = []
    for i, p in enumerate(points):
        heading = replayed[i]["heading"] if i < len(replayed) else p.get("heading")
        merged.append({**p, "heading": heading})
    updated = {
        **section,
        "points": merged,
        "actions": actions,
        "start_angle": start_pose["theta"] * RAD2DEG,
        "end_angle": end_pose["theta"] * RAD2DEG,
    }
    return updated, end_pose

def recalc_sections_from_points(sections, initial_pose, unit_to_px, px_to_unit):
    """
    Rebuild every section's actions from its points.

    Point x/y are kept as they are; headings, actions and the section's
    start_angle/end_angle (degrees) are recomputed. Each section starts at
    the end pose of the one before it. Returns new section dicts.
    """
    pose = dict(initial_pose)
    out = []
    for section in sections:
        updated, pose = _recalc_section(section, pose, unit_to_px, px_to_unit)
        out.append(updated)
    return out

def recalc_section_from_points(section, sections, initial_pose, unit_to_px, px_to_unit):
    """Rebuild one section, starting from the stored actions of the sections before it."""
    start = compute_pose_up_to_section(sections, initial_pose, section.get("id"), unit_to_px)
    updated, _ = _recalc_section(section, start, unit_to_px, px_to_unit)
    return updated
