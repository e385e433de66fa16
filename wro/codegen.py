# wro/codegen.py
"""
Reporting for calculated routes: grouping, formatting, totals and the
compile listing printed by main.py.
"""

import json
from typing import Dict, List

from .config import DEFAULT_SECTION_KEY, DEFAULT_SECTION_COLOR, MAT_CM
from .geom import rad_to_deg, round_half_up
from .pathing import calculate_route_instructions


def group_instructions_by_section(instructions: List[Dict]) -> Dict[str, List[Dict]]:
    """Instructions keyed by section id; ungrouped ones go under "default"."""
    groups: Dict[str, List[Dict]] = {}
    for instr in instructions:
        key = instr.get("section_id") or DEFAULT_SECTION_KEY
        groups.setdefault(key, []).append(instr)
    return groups


def summarize_sections(instructions: List[Dict], waypoints: List[Dict]) -> List[Dict]:
    """
    Section groups in order of first appearance, with display colour and name.

    Colour and name come from the first waypoint seen for each section.
    """
    meta = {}
    for wp in waypoints:
        sid = wp.get("section_id")
        if sid and sid not in meta:
            meta[sid] = {
                "color": wp.get("section_color") or DEFAULT_SECTION_COLOR,
                "name": wp.get("section_name") or sid,
            }

    groups = []
    by_id = {}
    for instr in instructions:
        sid = instr.get("section_id") or DEFAULT_SECTION_KEY
        group = by_id.get(sid)
        if group is None:
            info = meta.get(sid, {})
            group = {
                "id": sid,
                "color": info.get("color", DEFAULT_SECTION_COLOR),
                "name": info.get("name", sid),
                "instructions": [],
            }
            by_id[sid] = group
            groups.append(group)
        group["instructions"].append(instr)
    return groups


def format_instruction(instr: Dict, unit: str = "cm") -> str:
    """One-line text for an instruction, e.g. "TURN RIGHT 12.5°"."""
    kind = instr.get("type") if isinstance(instr, dict) else None
    value = instr.get("value") if isinstance(instr, dict) else None
    if kind == "TURN" and isinstance(value, (int, float)):
        direction = "RIGHT" if value >= 0 else "LEFT"
        return f"TURN {direction} {round_half_up(abs(value), 1):.1f}°"
    if kind == "MOVE" and isinstance(value, (int, float)):
        direction = "REVERSE" if instr.get("direction") == "reverse" else "FORWARD"
        return f"MOVE {direction} {round_half_up(value, 1):.1f} {unit}"
    try:
        return f"UNKNOWN: {json.dumps(instr)}"
    except (TypeError, ValueError):
        return f"UNKNOWN: {instr!r}"


def calculate_total_path_length(instructions: List[Dict]) -> float:
    """Sum of MOVE distances."""
    return sum(i["value"] for i in instructions if i.get("type") == "MOVE")


def calculate_total_rotation(instructions: List[Dict]) -> float:
    """Sum of absolute TURN angles in degrees."""
    return sum(abs(i["value"]) for i in instructions if i.get("type") == "TURN")


def build_compile_header(initial_pose: Dict, pixels_per_unit: float, unit: str = "cm") -> List[str]:
    """Generate compile output header."""
    return [
        "=== WRO ROUTE COMPILE ===",
        f"Initial pose: ({initial_pose['x']:.1f} px, {initial_pose['y']:.1f} px) "
        f"heading {rad_to_deg(initial_pose.get('theta', 0.0)):.2f} deg",
        "Heading: 0=right, 90=down (canvas), positive turns = RIGHT",
        f"Mat: {MAT_CM['w']:g} x {MAT_CM['h']:g} cm",
        f"Scale: {pixels_per_unit:g} px per {unit}",
        "",
    ]


def build_compile_lines(initial_pose: Dict, waypoints: List[Dict],
                        pixels_per_unit: float = 1, unit: str = "cm") -> List[str]:
    """Full listing: header, one block per section, totals."""
    route = calculate_route_instructions(initial_pose, waypoints, pixels_per_unit)
    instructions = route["instructions"]
    lines = build_compile_header(initial_pose, pixels_per_unit, unit)

    for group in summarize_sections(instructions, waypoints):
        lines.append(f" --- Section {group['name']} ({group['color']}) ---")
        for instr in group["instructions"]:
            lines.append(f"  {format_instruction(instr, unit)}")

    final = route["poses"][-1]
    lines.extend([
        "",
        f"Total distance: {calculate_total_path_length(instructions):.2f} {unit}",
        f"Total rotation: {calculate_total_rotation(instructions):.2f} deg",
        f"Final pose: ({final['x']:.1f} px, {final['y']:.1f} px) heading {rad_to_deg(final['theta']):.2f} deg",
    ])
    return lines


def build_playback_lines(actions: List[Dict], unit: str = "cm") -> List[str]:
    """Action list output, one action per line."""
    lines = []
    for act in actions:
        if act["type"] == "rotate":
            lines.append(f"rotate {act['angle']:+.2f} deg")
        else:
            lines.append(f"move {act['distance']:+.2f} {unit}")
    return lines
