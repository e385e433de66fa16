# wro/missions.py
"""
Mission markers: visual targets placed on the field.
Unlike obstacles, missions take no part in collision checks.
"""
from __future__ import annotations

import math, os, random, time, uuid

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame

MISSION_SHAPES = {
    "CIRCLE": "circle",
    "SQUARE": "square",
    "TRIANGLE": "triangle",
    "STAR": "star",
    "FLAG": "flag",
}

MISSION_COLORS = [
    "#22c55e",  # green
    "#3b82f6",  # blue
    "#a855f7",  # purple
    "#ec4899",  # pink
    "#f59e0b",  # amber
    "#14b8a6",  # teal
]

DEFAULT_SIZE    = 40
DEFAULT_OPACITY = 0.7
HIT_TOLERANCE_PX = 5
HANDLE_SIZE_PX   = 12


def uid(prefix: str = "id") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:7]}"

def create_mission(x, y, **options):
    """New mission marker at (x, y) px; unset options take defaults."""
    return {
        "id": uid("mission"),
        "x": x,
        "y": y,
        "size": options.get("size") or DEFAULT_SIZE,
        "color": options.get("color") or random.choice(MISSION_COLORS),
        "shape": options.get("shape") or MISSION_SHAPES["CIRCLE"],
        "label": options.get("label") or "",
        "rotation": options.get("rotation") or 0,
        "opacity": options.get("opacity") or DEFAULT_OPACITY,
    }

def adjust_color(color: str, amount: int) -> str:
    """Lighten (amount > 0) or darken a colour, returned as #rrggbb."""
    c = pygame.Color(color)
    def clamp(v): return max(0, min(255, v))
    return "#{:02x}{:02x}{:02x}".format(clamp(c.r + amount), clamp(c.g + amount), clamp(c.b + amount))

def outline_color(mission, selected=False) -> str:
    """Border colour for a marker: highlight when selected, else a darker fill."""
    if selected:
        return "#06b6d4"
    return adjust_color(mission["color"], -30)

def is_point_inside_mission(point, mission) -> bool:
    d = math.hypot(point["x"] - mission["x"], point["y"] - mission["y"])
    return d <= mission["size"] / 2 + HIT_TOLERANCE_PX

def get_resize_handle_at_point(point, mission):
    """Corner handle ('nw', 'ne', 'sw', 'se') under point, or None."""
    half = mission["size"] / 2
    handles = [
        ("nw", mission["x"] - half, mission["y"] - half),
        ("ne", mission["x"] + half, mission["y"] - half),
        ("sw", mission["x"] - half, mission["y"] + half),
        ("se", mission["x"] + half, mission["y"] + half),
    ]
    for name, hx, hy in handles:
        if abs(point["x"] - hx) <= HANDLE_SIZE_PX / 2 and abs(point["y"] - hy) <= HANDLE_SIZE_PX / 2:
            return name
    return None

def export_missions(missions):
    """Exportable payload for a list of missions."""
    return {
        "version": "1.0",
        "type": "wro-missions",
        "timestamp": int(time.time() * 1000),
        "missions": [{
            "id": m["id"],
            "x": m["x"],
            "y": m["y"],
            "size": m["size"],
            "color": m["color"],
            "shape": m["shape"],
            "label": m.get("label") or "",
            "rotation": m.get("rotation") or 0,
            "opacity": m.get("opacity") or DEFAULT_OPACITY,
        } for m in missions],
    }

def import_missions(data):
    """
    Missions from an imported payload.
    Raises ValueError when the payload has no missions list.
    """
    missions = data.get("missions") if isinstance(data, dict) else None
    if not isinstance(missions, list):
        raise ValueError("Invalid file format: missions list not found.")
    return [{
        "id": m.get("id") or uid("mission"),
        "x": m.get("x"),
        "y": m.get("y"),
        "size": m.get("size") or DEFAULT_SIZE,
        "color": m.get("color") or MISSION_COLORS[0],
        "shape": m.get("shape") or MISSION_SHAPES["CIRCLE"],
        "label": m.get("label") or "",
        "rotation": m.get("rotation") or 0,
        "opacity": m.get("opacity") or DEFAULT_OPACITY,
    } for m in missions]
